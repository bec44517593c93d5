"""Subscription plan catalog entry and subscription entity"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..enums import BillingInterval, SubscriptionStatus, SubscriptionTier, ENTITLED_STATUSES
from ..value_objects.entity_ids import PlanId, SubscriptionId, UserId
from ..value_objects.features import FeatureSet


@dataclass
class SubscriptionPlan:
    id: PlanId
    name: str
    display_name: str
    price: Decimal
    interval: BillingInterval
    stripe_price_id: Optional[str] = None
    trial_days: int = 0
    features: FeatureSet = field(default_factory=dict)
    is_active: bool = True
    tier: Optional[SubscriptionTier] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)


@dataclass
class Subscription:
    id: SubscriptionId
    user_id: UserId
    plan_id: PlanId
    status: SubscriptionStatus
    stripe_subscription_id: Optional[str] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False
    canceled_at: Optional[datetime] = None
    trial_start: Optional[datetime] = None
    trial_end: Optional[datetime] = None
    plan: Optional[SubscriptionPlan] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def create(cls, user_id: UserId, plan: SubscriptionPlan, status: SubscriptionStatus,
               stripe_subscription_id: str) -> 'Subscription':
        now = datetime.utcnow()
        return cls(
            id=SubscriptionId.generate(),
            user_id=user_id,
            plan_id=plan.id,
            plan=plan,
            status=status,
            stripe_subscription_id=stripe_subscription_id,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_entitled(self) -> bool:
        return self.status in ENTITLED_STATUSES

    def change_plan(self, plan: SubscriptionPlan,
                    period_start: Optional[datetime] = None,
                    period_end: Optional[datetime] = None) -> None:
        self.plan_id = plan.id
        self.plan = plan
        if period_start:
            self.current_period_start = period_start
        if period_end:
            self.current_period_end = period_end
        self.updated_at = datetime.utcnow()

    def cancel(self, immediate: bool, now: Optional[datetime] = None) -> None:
        """Local mirror of a processor-side cancellation.

        Immediate cancellation ends the subscription now; otherwise it stays in
        its current status until the period ends.
        """
        now = now or datetime.utcnow()
        self.canceled_at = now
        self.cancel_at_period_end = not immediate
        if immediate:
            self.status = SubscriptionStatus.CANCELED
        self.updated_at = now

    def mark_deleted(self, now: Optional[datetime] = None) -> None:
        now = now or datetime.utcnow()
        self.status = SubscriptionStatus.CANCELED
        self.canceled_at = now
        self.updated_at = now

    def mark_past_due(self) -> None:
        self.status = SubscriptionStatus.PAST_DUE
        self.updated_at = datetime.utcnow()

    def apply_processor_state(self, plan: SubscriptionPlan, status: SubscriptionStatus,
                              period_start: Optional[datetime], period_end: Optional[datetime],
                              cancel_at_period_end: bool, canceled_at: Optional[datetime],
                              trial_start: Optional[datetime], trial_end: Optional[datetime]) -> None:
        """Overwrite local state with the processor's view of the subscription"""
        self.plan_id = plan.id
        self.plan = plan
        self.status = status
        self.current_period_start = period_start
        self.current_period_end = period_end
        self.cancel_at_period_end = cancel_at_period_end
        self.canceled_at = canceled_at
        self.trial_start = trial_start
        self.trial_end = trial_end
        self.updated_at = datetime.utcnow()
