"""Subscription ORM Model"""

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from ...db.models import Base
from ...domain.enums import SubscriptionStatus


class SubscriptionModel(Base):
    __tablename__ = 'subscriptions'

    id = Column(Uuid, primary_key=True, index=True)
    user_id = Column(Uuid, ForeignKey('users.id'), nullable=False, index=True)
    plan_id = Column(Uuid, ForeignKey('subscription_plans.id'), nullable=False)
    stripe_subscription_id = Column(String, unique=True, nullable=True, index=True)
    status = Column(SQLEnum(SubscriptionStatus, name='subscription_status'), nullable=False, index=True)

    current_period_start = Column(DateTime, nullable=True)
    current_period_end = Column(DateTime, nullable=True)
    cancel_at_period_end = Column(Boolean, default=False, nullable=False)
    canceled_at = Column(DateTime, nullable=True)
    trial_start = Column(DateTime, nullable=True)
    trial_end = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    plan = relationship('SubscriptionPlanModel', lazy='joined')
