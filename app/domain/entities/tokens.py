"""Single-use tokens for email verification and password reset"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from ..value_objects.entity_ids import TokenId, UserId


@dataclass
class VerificationToken:
    id: TokenId
    user_id: UserId
    token: str
    expires_at: datetime
    created_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def issue(cls, user_id: UserId, token: str, expires_in_hours: int) -> 'VerificationToken':
        now = datetime.utcnow()
        return cls(
            id=TokenId.generate(),
            user_id=user_id,
            token=token,
            expires_at=now + timedelta(hours=expires_in_hours),
            created_at=now,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at < (now or datetime.utcnow())


@dataclass
class PasswordResetToken:
    id: TokenId
    user_id: UserId
    token: str
    expires_at: datetime
    used: bool = False
    used_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def issue(cls, user_id: UserId, token: str, expires_in_hours: int) -> 'PasswordResetToken':
        now = datetime.utcnow()
        return cls(
            id=TokenId.generate(),
            user_id=user_id,
            token=token,
            expires_at=now + timedelta(hours=expires_in_hours),
            created_at=now,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return self.expires_at < (now or datetime.utcnow())

    def mark_used(self) -> None:
        """Business logic: a reset token grants its effect once"""
        if self.used:
            raise ValueError("Reset token has already been used")
        self.used = True
        self.used_at = datetime.utcnow()
