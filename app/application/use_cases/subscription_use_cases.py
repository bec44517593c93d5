"""Subscription and billing use cases"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from ...core.exceptions import NotFoundError, StateError, ValidationError
from ...domain.entitlements import (
    TIER_FEATURES,
    TIER_LIMITS,
    days_until_renewal,
    remaining_trial_days,
    tier_for_plan,
)
from ...domain.entities.subscription import Subscription
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId
from ...infrastructure.external_services.email_service import EmailService
from ...infrastructure.external_services.stripe_gateway import StripeGateway
from ..dtos.subscription_dtos import (
    CancelRequestDto,
    CheckoutRequestDto,
    CheckoutResponse,
    CurrentSubscriptionResponse,
    EntitlementsResponse,
    InvoiceDto,
    InvoiceListResponse,
    LimitsDto,
    PlanDto,
    PortalResponse,
    SubscriptionActionResponse,
    SubscriptionDto,
    UpgradeRequestDto,
    UsageDto,
)
from .entitlement_service import EntitlementService

logger = logging.getLogger(__name__)


async def _load_user(unit_of_work: IUnitOfWork, user_id: UserId) -> User:
    user = await unit_of_work.users.get_by_id(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


async def _load_current_subscription(unit_of_work: IUnitOfWork, user_id: UserId) -> Tuple[User, Optional[Subscription]]:
    user = await _load_user(unit_of_work, user_id)
    if not user.current_subscription_id:
        return user, None
    return user, await unit_of_work.subscriptions.get_by_id(user.current_subscription_id)


async def _require_billable_subscription(unit_of_work: IUnitOfWork, user_id: UserId) -> Tuple[User, Subscription]:
    user, subscription = await _load_current_subscription(unit_of_work, user_id)
    if not subscription or not subscription.stripe_subscription_id:
        raise StateError("No active subscription found")
    return user, subscription


def _plan_name(subscription: Subscription) -> str:
    return subscription.plan.display_name if subscription.plan else "subscription"


class ListPlansUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self) -> List[PlanDto]:
        """Active plans, cheapest first"""
        async with self.unit_of_work:
            plans = await self.unit_of_work.plans.list_active()
        return [PlanDto.from_entity(plan) for plan in plans]


class CreateCheckoutUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, gateway: StripeGateway):
        self.unit_of_work = unit_of_work
        self.gateway = gateway

    async def execute(self, user_id: UserId, request: CheckoutRequestDto) -> CheckoutResponse:
        if not request.price_id:
            raise ValidationError("Price ID is required")

        async with self.unit_of_work:
            plan = await self.unit_of_work.plans.get_by_price_id(request.price_id)
            if not plan or not plan.is_active:
                raise ValidationError("Invalid subscription plan")

            user = await _load_user(self.unit_of_work, user_id)
            customer = await self.gateway.get_or_create_customer(user.email, str(user.id), user.name)
            if user.attach_customer(customer.id):
                await self.unit_of_work.users.update(user)

            session = await self.gateway.create_checkout_session(
                user_id=str(user.id),
                user_email=user.email,
                price_id=request.price_id,
                trial_days=plan.trial_days if plan.trial_days > 0 else None,
                customer_id=user.stripe_customer_id,
            )

        return CheckoutResponse(session_id=session.session_id, url=session.url)


class GetCurrentSubscriptionUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user_id: UserId, now: Optional[datetime] = None) -> CurrentSubscriptionResponse:
        async with self.unit_of_work:
            _, subscription = await _load_current_subscription(self.unit_of_work, user_id)

        now = now or datetime.utcnow()
        usage = UsageDto()
        if subscription:
            if subscription.trial_end and subscription.trial_end > now:
                usage.remaining_trial_days = remaining_trial_days(subscription.trial_end, now)
            renewal = days_until_renewal(subscription, now)
            if renewal:
                usage.days_until_renewal = renewal

        tier = tier_for_plan(subscription.plan if subscription else None)
        has_usage = usage.remaining_trial_days is not None or usage.days_until_renewal is not None
        return CurrentSubscriptionResponse(
            subscription=SubscriptionDto.from_entity(subscription) if subscription else None,
            usage=usage if has_usage else None,
            tier=tier.value,
            limits=LimitsDto(**TIER_LIMITS[tier].to_dict()),
        )


class CancelSubscriptionUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, gateway: StripeGateway, email_service: EmailService):
        self.unit_of_work = unit_of_work
        self.gateway = gateway
        self.email_service = email_service

    async def execute(self, user_id: UserId, request: CancelRequestDto) -> SubscriptionActionResponse:
        """Cancel with the processor first, then mirror the result locally"""
        immediate = request.immediate
        async with self.unit_of_work:
            user, subscription = await _require_billable_subscription(self.unit_of_work, user_id)

            await self.gateway.cancel_subscription(subscription.stripe_subscription_id, immediate)

            subscription.cancel(immediate)
            await self.unit_of_work.subscriptions.update(subscription)
            if immediate:
                user.clear_current_subscription()
                await self.unit_of_work.users.update(user)

        logger.info(f"Subscription {subscription.id} canceled for user {user.id} (immediate={immediate})")
        self.email_service.send_subscription_canceled_email(
            user.email, user.display_name, _plan_name(subscription), immediate, subscription.current_period_end
        )

        message = (
            "Subscription canceled immediately"
            if immediate
            else "Subscription will be canceled at the end of the billing period"
        )
        return SubscriptionActionResponse(message=message, subscription=SubscriptionDto.from_entity(subscription))


class UpgradeSubscriptionUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, gateway: StripeGateway, email_service: EmailService):
        self.unit_of_work = unit_of_work
        self.gateway = gateway
        self.email_service = email_service

    async def execute(self, user_id: UserId, request: UpgradeRequestDto) -> SubscriptionActionResponse:
        """Move the subscription to another price; the processor prorates"""
        if not request.new_price_id:
            raise ValidationError("New price ID is required")

        async with self.unit_of_work:
            user, subscription = await _require_billable_subscription(self.unit_of_work, user_id)

            plan = await self.unit_of_work.plans.get_by_price_id(request.new_price_id)
            if not plan or not plan.is_active:
                raise ValidationError("Invalid subscription plan")

            updated = await self.gateway.update_subscription(subscription.stripe_subscription_id, request.new_price_id)

            subscription.change_plan(plan, updated.current_period_start, updated.current_period_end)
            await self.unit_of_work.subscriptions.update(subscription)

        logger.info(f"Subscription {subscription.id} moved to plan {plan.name} for user {user.id}")
        self.email_service.send_plan_changed_email(user.email, user.display_name, plan.display_name)

        return SubscriptionActionResponse(
            message="Subscription updated successfully",
            subscription=SubscriptionDto.from_entity(subscription),
        )


class CreateBillingPortalUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, gateway: StripeGateway):
        self.unit_of_work = unit_of_work
        self.gateway = gateway

    async def execute(self, user_id: UserId) -> PortalResponse:
        async with self.unit_of_work:
            user = await _load_user(self.unit_of_work, user_id)

        if not user.stripe_customer_id:
            raise StateError("No Stripe customer found")

        session = await self.gateway.create_billing_portal_session(user.stripe_customer_id)
        return PortalResponse(url=session.url)


class ListInvoicesUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user_id: UserId, page: int = 1, limit: int = 10) -> InvoiceListResponse:
        offset = (page - 1) * limit
        async with self.unit_of_work:
            invoices = await self.unit_of_work.invoices.list_for_user(user_id, offset, limit)
            total = await self.unit_of_work.invoices.count_for_user(user_id)

        return InvoiceListResponse(
            invoices=[InvoiceDto.from_entity(invoice) for invoice in invoices],
            total=total,
            page=page,
            limit=limit,
        )


class GetEntitlementsUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user_id: UserId) -> EntitlementsResponse:
        entitlements = EntitlementService(self.unit_of_work)
        async with self.unit_of_work:
            await _load_user(self.unit_of_work, user_id)
            tier = await entitlements.resolve_tier(user_id)
            has_active = await entitlements.has_active_subscription(user_id)
            in_grace = await entitlements.is_in_grace_period(user_id)
            renewal = await entitlements.days_until_renewal(user_id)

        return EntitlementsResponse(
            tier=tier.value,
            limits=LimitsDto(**TIER_LIMITS[tier].to_dict()),
            features=sorted(TIER_FEATURES[tier]),
            has_active_subscription=has_active,
            in_grace_period=in_grace,
            days_until_renewal=renewal,
        )
