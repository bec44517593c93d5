"""Verification and password reset token repository interfaces"""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities.tokens import PasswordResetToken, VerificationToken


class IVerificationTokenRepository(ABC):

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[VerificationToken]:
        pass

    @abstractmethod
    async def add(self, token: VerificationToken) -> VerificationToken:
        pass

    @abstractmethod
    async def delete(self, token: VerificationToken) -> None:
        pass


class IPasswordResetTokenRepository(ABC):

    @abstractmethod
    async def get_by_token(self, token: str) -> Optional[PasswordResetToken]:
        pass

    @abstractmethod
    async def add(self, token: PasswordResetToken) -> PasswordResetToken:
        pass

    @abstractmethod
    async def update(self, token: PasswordResetToken) -> PasswordResetToken:
        pass
