"""Reset password use case"""

import logging

from ...core.exceptions import StateError, ValidationError
from ...core.security import get_password_hash, is_valid_password
from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.user_dtos import MessageResponse, ResetPasswordDto

logger = logging.getLogger(__name__)


class ResetPasswordUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, request: ResetPasswordDto) -> MessageResponse:
        if not request.token or not request.new_password:
            raise ValidationError("Token and new password are required")

        password_check = is_valid_password(request.new_password)
        if not password_check.valid:
            raise ValidationError(password_check.message or "Invalid password")

        async with self.unit_of_work:
            record = await self.unit_of_work.reset_tokens.get_by_token(request.token)
            if not record:
                raise ValidationError("Invalid reset token")
            if record.is_expired():
                raise ValidationError("Reset token has expired")
            if record.used:
                raise StateError("Reset token has already been used")

            user = await self.unit_of_work.users.get_by_id(record.user_id)
            if not user:
                raise ValidationError("Invalid reset token")

            # Password change and token consumption commit together
            user.change_password(get_password_hash(request.new_password))
            record.mark_used()
            await self.unit_of_work.users.update(user)
            await self.unit_of_work.reset_tokens.update(record)

        logger.info(f"Password reset for user {user.id}")
        return MessageResponse(message="Password reset successfully")
