"""Subscription and billing DTOs"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field

from .base import CamelModel
from ...domain.entities.invoice import Invoice
from ...domain.entities.subscription import Subscription, SubscriptionPlan
from ...domain.entitlements import tier_for_plan
from ...domain.enums import BillingInterval, SubscriptionTier
from ...domain.value_objects.features import FeatureValue


class CheckoutRequestDto(CamelModel):
    price_id: Optional[str] = None


class UpgradeRequestDto(CamelModel):
    new_price_id: Optional[str] = None


class CancelRequestDto(CamelModel):
    immediate: bool = False


class PlanDto(CamelModel):
    id: str
    name: str
    display_name: str
    price: float
    interval: str
    features: Dict[str, FeatureValue]
    is_popular: bool
    stripe_price_id: Optional[str] = None
    trial_days: int
    tier: str

    @classmethod
    def from_entity(cls, plan: SubscriptionPlan) -> 'PlanDto':
        tier = tier_for_plan(plan)
        return cls(
            id=str(plan.id),
            name=plan.name,
            display_name=plan.display_name,
            price=float(plan.price),
            interval=BillingInterval(plan.interval).value,
            features=dict(plan.features),
            is_popular=tier == SubscriptionTier.PRO and plan.interval == BillingInterval.MONTHLY,
            stripe_price_id=plan.stripe_price_id,
            trial_days=plan.trial_days,
            tier=tier.value,
        )


class SubscriptionDto(CamelModel):
    id: str
    user_id: str
    plan_id: str
    status: str
    stripe_subscription_id: Optional[str] = None
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool
    canceled_at: Optional[datetime] = None
    trial_start: Optional[datetime] = None
    trial_end: Optional[datetime] = None
    plan: Optional[PlanDto] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, subscription: Subscription) -> 'SubscriptionDto':
        return cls(
            id=str(subscription.id),
            user_id=str(subscription.user_id),
            plan_id=str(subscription.plan_id),
            status=subscription.status.value,
            stripe_subscription_id=subscription.stripe_subscription_id,
            current_period_start=subscription.current_period_start,
            current_period_end=subscription.current_period_end,
            cancel_at_period_end=subscription.cancel_at_period_end,
            canceled_at=subscription.canceled_at,
            trial_start=subscription.trial_start,
            trial_end=subscription.trial_end,
            plan=PlanDto.from_entity(subscription.plan) if subscription.plan else None,
            created_at=subscription.created_at,
            updated_at=subscription.updated_at,
        )


class UsageDto(CamelModel):
    remaining_trial_days: Optional[int] = None
    days_until_renewal: Optional[int] = None


class LimitsDto(CamelModel):
    max_projects: int
    max_users: int
    max_storage_gb: int = Field(alias="maxStorageGB")
    api_calls_per_month: int


class CurrentSubscriptionResponse(CamelModel):
    subscription: Optional[SubscriptionDto] = None
    usage: Optional[UsageDto] = None
    tier: str
    limits: LimitsDto


class CheckoutResponse(CamelModel):
    session_id: str
    url: Optional[str] = None


class PortalResponse(CamelModel):
    url: str


class SubscriptionActionResponse(CamelModel):
    message: str
    subscription: SubscriptionDto


class InvoiceDto(CamelModel):
    id: str
    stripe_invoice_id: str
    subscription_id: Optional[str] = None
    amount: float
    currency: str
    status: str
    invoice_url: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, invoice: Invoice) -> 'InvoiceDto':
        return cls(
            id=str(invoice.id),
            stripe_invoice_id=invoice.stripe_invoice_id,
            subscription_id=str(invoice.subscription_id) if invoice.subscription_id else None,
            amount=float(invoice.amount),
            currency=invoice.currency,
            status=invoice.status.value,
            invoice_url=invoice.invoice_url,
            paid_at=invoice.paid_at,
            created_at=invoice.created_at,
        )


class InvoiceListResponse(CamelModel):
    invoices: List[InvoiceDto]
    total: int
    page: int
    limit: int


class EntitlementsResponse(CamelModel):
    tier: str
    limits: LimitsDto
    features: List[str]
    has_active_subscription: bool
    in_grace_period: bool
    days_until_renewal: Optional[int] = None
