"""Authentication routes"""

from typing import Optional

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_app_settings, get_email_service, get_unit_of_work
from ...application.dtos.user_dtos import (
    LoginResponse,
    LoginUserDto,
    MessageResponse,
    PasswordResetRequestDto,
    RegisterResponse,
    RegisterUserDto,
    ResetPasswordDto,
)
from ...application.use_cases.email_verification_use_case import EmailVerificationUseCase
from ...application.use_cases.forgot_password_use_case import ForgotPasswordUseCase
from ...application.use_cases.login_user import LoginUserUseCase
from ...application.use_cases.register_user import RegisterUserUseCase
from ...application.use_cases.reset_password_use_case import ResetPasswordUseCase
from ...core.config import Settings
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...infrastructure.external_services.email_service import EmailService

router = APIRouter()


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: RegisterUserDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    email_service: EmailService = Depends(get_email_service),
    config: Settings = Depends(get_app_settings),
):
    """Register a new user and send the verification email"""
    return await RegisterUserUseCase(unit_of_work, email_service, config).execute(user_data)


@router.post("/login", response_model=LoginResponse)
async def login_user(
    login_data: LoginUserDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Login user"""
    return await LoginUserUseCase(unit_of_work).execute(login_data)


@router.get("/verify", response_model=MessageResponse)
async def verify_email(
    token: Optional[str] = None,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Verify user email with the token from the verification link"""
    return await EmailVerificationUseCase(unit_of_work).execute(token)


@router.post("/reset-password", response_model=MessageResponse)
async def request_password_reset(
    request: PasswordResetRequestDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    email_service: EmailService = Depends(get_email_service),
    config: Settings = Depends(get_app_settings),
):
    """Send a password reset link if the account exists"""
    return await ForgotPasswordUseCase(unit_of_work, email_service, config).execute(request)


@router.put("/reset-password", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordDto,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Reset password with token"""
    return await ResetPasswordUseCase(unit_of_work).execute(request)
