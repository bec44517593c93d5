"""Email verification token ORM model"""

from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func

from ...db.models import Base


class VerificationTokenModel(Base):
    __tablename__ = "verification_tokens"

    id = Column(Uuid, primary_key=True, index=True)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(255), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<VerificationTokenModel(id={self.id}, user_id={self.user_id}, token={self.token[:8]}...)>"
