"""User ORM Model"""

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Uuid
from sqlalchemy.sql import func

from ...db.models import Base


class UserModel(Base):
    __tablename__ = 'users'

    id = Column(Uuid, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)

    # Payment processor correlation
    stripe_customer_id = Column(String, unique=True, nullable=True, index=True)
    current_subscription_id = Column(
        Uuid,
        ForeignKey('subscriptions.id', use_alter=True, name='fk_users_current_subscription_id'),
        nullable=True,
    )

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
