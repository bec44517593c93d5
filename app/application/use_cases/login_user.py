"""Login user use case"""

from ...core.exceptions import AuthError, EmailNotVerifiedError, ValidationError
from ...core.security import create_access_token, is_valid_email, verify_password
from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.user_dtos import LoginResponse, LoginUserDto, UserDto
from .register_user import normalize_email


class LoginUserUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: LoginUserDto) -> LoginResponse:
        if not request.email or not request.password:
            raise ValidationError("Email and password are required")

        email = normalize_email(request.email)
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")

        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(email)

        # Same message for unknown email and wrong password
        if not user or not verify_password(request.password, user.hashed_password):
            raise AuthError("Invalid credentials")

        if not user.is_verified:
            raise EmailNotVerifiedError()

        return LoginResponse(
            token=create_access_token(str(user.id), user.email),
            user=UserDto.from_entity(user),
        )
