"""User DTOs for API layer"""

from datetime import datetime
from typing import Optional

from .base import CamelModel
from ...domain.entities.user import User


class RegisterUserDto(CamelModel):
    """DTO for user registration"""
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginUserDto(CamelModel):
    """DTO for user login"""
    email: Optional[str] = None
    password: Optional[str] = None


class PasswordResetRequestDto(CamelModel):
    """DTO for password reset request"""
    email: Optional[str] = None


class ResetPasswordDto(CamelModel):
    """DTO for setting a new password with a reset token"""
    token: Optional[str] = None
    new_password: Optional[str] = None


class UpdateProfileDto(CamelModel):
    name: Optional[str] = None


class UserDto(CamelModel):
    """DTO for user response"""
    id: str
    email: str
    name: Optional[str] = None
    is_verified: bool

    @classmethod
    def from_entity(cls, user: User) -> 'UserDto':
        return cls(id=str(user.id), email=user.email, name=user.name, is_verified=user.is_verified)


class UserProfileDto(UserDto):
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> 'UserProfileDto':
        return cls(
            id=str(user.id),
            email=user.email,
            name=user.name,
            is_verified=user.is_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class MessageResponse(CamelModel):
    message: str


class RegisterResponse(CamelModel):
    message: str
    user: UserDto


class LoginResponse(CamelModel):
    token: str
    user: UserDto


class ProfileResponse(CamelModel):
    user: UserProfileDto
