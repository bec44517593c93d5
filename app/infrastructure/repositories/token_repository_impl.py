"""Verification and password reset token repositories"""

from typing import Optional
from sqlalchemy.orm import Session

from ...domain.entities.tokens import PasswordResetToken, VerificationToken
from ...domain.repositories.token_repository import (
    IPasswordResetTokenRepository,
    IVerificationTokenRepository,
)
from ...domain.value_objects.entity_ids import TokenId, UserId
from ..orm.password_reset_token_model import PasswordResetTokenModel
from ..orm.verification_token_model import VerificationTokenModel


class VerificationTokenRepositoryImpl(IVerificationTokenRepository):

    def __init__(self, session: Session):
        self.session = session

    async def get_by_token(self, token: str) -> Optional[VerificationToken]:
        model = self.session.query(VerificationTokenModel).filter(
            VerificationTokenModel.token == token
        ).first()
        if not model:
            return None
        return VerificationToken(
            id=TokenId(model.id),
            user_id=UserId(model.user_id),
            token=model.token,
            expires_at=model.expires_at,
            created_at=model.created_at,
        )

    async def add(self, token: VerificationToken) -> VerificationToken:
        self.session.add(VerificationTokenModel(
            id=token.id.value,
            user_id=token.user_id.value,
            token=token.token,
            expires_at=token.expires_at,
            created_at=token.created_at,
        ))
        self.session.flush()
        return token

    async def delete(self, token: VerificationToken) -> None:
        model = self.session.get(VerificationTokenModel, token.id.value)
        if model:
            self.session.delete(model)
            self.session.flush()


class PasswordResetTokenRepositoryImpl(IPasswordResetTokenRepository):

    def __init__(self, session: Session):
        self.session = session

    async def get_by_token(self, token: str) -> Optional[PasswordResetToken]:
        model = self.session.query(PasswordResetTokenModel).filter(
            PasswordResetTokenModel.token == token
        ).first()
        if not model:
            return None
        return PasswordResetToken(
            id=TokenId(model.id),
            user_id=UserId(model.user_id),
            token=model.token,
            expires_at=model.expires_at,
            used=model.used,
            used_at=model.used_at,
            created_at=model.created_at,
        )

    async def add(self, token: PasswordResetToken) -> PasswordResetToken:
        self.session.add(PasswordResetTokenModel(
            id=token.id.value,
            user_id=token.user_id.value,
            token=token.token,
            expires_at=token.expires_at,
            used=token.used,
            used_at=token.used_at,
            created_at=token.created_at,
        ))
        self.session.flush()
        return token

    async def update(self, token: PasswordResetToken) -> PasswordResetToken:
        model = self.session.get(PasswordResetTokenModel, token.id.value)
        if model:
            model.used = token.used
            model.used_at = token.used_at
            self.session.flush()
        return token
