"""Password reset token ORM model"""

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Uuid
from sqlalchemy.sql import func

from ...db.models import Base


class PasswordResetTokenModel(Base):
    """Password reset token ORM model"""

    __tablename__ = "password_reset_tokens"

    id = Column(Uuid, primary_key=True, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(255), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    used_at = Column(DateTime, nullable=True)

    def __repr__(self):
        return f"<PasswordResetTokenModel(id={self.id}, user_id={self.user_id}, token={self.token[:8]}..., expires_at={self.expires_at})>"
