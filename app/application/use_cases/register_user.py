"""Register user use case"""

import logging

from ...core.config import Settings
from ...core.exceptions import ConflictError, ValidationError
from ...core.security import generate_opaque_token, get_password_hash, is_valid_email, is_valid_password
from ...domain.entities.tokens import VerificationToken
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...infrastructure.external_services.email_service import EmailService
from ..dtos.user_dtos import RegisterResponse, RegisterUserDto, UserDto

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class RegisterUserUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, email_service: EmailService, config: Settings):
        self.unit_of_work = unit_of_work
        self.email_service = email_service
        self.config = config

    async def execute(self, request: RegisterUserDto) -> RegisterResponse:
        if not request.email or not request.password:
            raise ValidationError("Email and password are required")

        email = normalize_email(request.email)
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")

        password_check = is_valid_password(request.password)
        if not password_check.valid:
            raise ValidationError(password_check.message or "Invalid password")

        async with self.unit_of_work:
            if await self.unit_of_work.users.exists_by_email(email):
                raise ConflictError("User with this email already exists")

            user = User.create(
                email=email,
                hashed_password=get_password_hash(request.password),
                name=(request.name or "").strip() or None,
            )
            await self.unit_of_work.users.add(user)

            token = VerificationToken.issue(
                user_id=user.id,
                token=generate_opaque_token(),
                expires_in_hours=self.config.VERIFICATION_TOKEN_EXPIRE_HOURS,
            )
            await self.unit_of_work.verification_tokens.add(token)

        logger.info(f"Registered user {user.id}")
        self.email_service.send_verification_email(user.email, token.token)

        return RegisterResponse(
            message="Registration successful. Please check your email to verify your account.",
            user=UserDto.from_entity(user),
        )
