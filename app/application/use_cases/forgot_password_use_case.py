"""Password reset request use case"""

import logging

from ...core.config import Settings
from ...core.exceptions import ValidationError
from ...core.security import generate_opaque_token, is_valid_email
from ...domain.entities.tokens import PasswordResetToken
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...infrastructure.external_services.email_service import EmailService
from ..dtos.user_dtos import MessageResponse, PasswordResetRequestDto
from .register_user import normalize_email

logger = logging.getLogger(__name__)

GENERIC_RESET_MESSAGE = "If an account exists with this email, a password reset link has been sent."


class ForgotPasswordUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, email_service: EmailService, config: Settings):
        self.unit_of_work = unit_of_work
        self.email_service = email_service
        self.config = config

    async def execute(self, request: PasswordResetRequestDto) -> MessageResponse:
        """Issue a reset token if the account exists.

        The response is identical whether or not the email is registered.
        """
        if not request.email:
            raise ValidationError("Email is required")

        email = normalize_email(request.email)
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")

        reset_token = None
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_email(email)
            if user:
                reset_token = PasswordResetToken.issue(
                    user_id=user.id,
                    token=generate_opaque_token(),
                    expires_in_hours=self.config.PASSWORD_RESET_TOKEN_EXPIRE_HOURS,
                )
                await self.unit_of_work.reset_tokens.add(reset_token)

        if reset_token:
            logger.info(f"Password reset requested for user {user.id}")
            self.email_service.send_password_reset_email(user.email, reset_token.token)

        return MessageResponse(message=GENERIC_RESET_MESSAGE)
