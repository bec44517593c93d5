"""Email verification use case"""

import logging
from typing import Optional

from ...core.exceptions import ValidationError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ..dtos.user_dtos import MessageResponse

logger = logging.getLogger(__name__)


class EmailVerificationUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, token: Optional[str]) -> MessageResponse:
        """Mark the token's user verified and consume the token in one transaction"""
        if not token:
            raise ValidationError("Verification token is required")

        async with self.unit_of_work:
            record = await self.unit_of_work.verification_tokens.get_by_token(token)
            if not record:
                raise ValidationError("Invalid verification token")
            if record.is_expired():
                raise ValidationError("Verification token has expired")

            user = await self.unit_of_work.users.get_by_id(record.user_id)
            if not user:
                raise ValidationError("Invalid verification token")

            already_verified = user.is_verified
            if not already_verified:
                user.verify_email()
                await self.unit_of_work.users.update(user)
            await self.unit_of_work.verification_tokens.delete(record)

        if already_verified:
            return MessageResponse(message="Email already verified")

        logger.info(f"Email verified for user {user.id}")
        return MessageResponse(message="Email verified successfully")
