"""Subscription plan ORM Model"""

from sqlalchemy import Column, String, DateTime, Boolean, Integer, Numeric, JSON, Uuid, Enum as SQLEnum
from sqlalchemy.sql import func

from ...db.models import Base
from ...domain.enums import BillingInterval, SubscriptionTier


class SubscriptionPlanModel(Base):
    __tablename__ = 'subscription_plans'

    id = Column(Uuid, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    display_name = Column(String, nullable=False)
    stripe_price_id = Column(String, unique=True, nullable=True, index=True)
    price = Column(Numeric(10, 2), nullable=False)  # major currency units
    interval = Column(
        SQLEnum(BillingInterval, name='billing_interval', values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    trial_days = Column(Integer, default=0, nullable=False)
    features = Column(JSON, nullable=False, default=dict)
    tier = Column(SQLEnum(SubscriptionTier, name='subscription_tier'), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
