"""Stripe webhook reconciliation.

Maps verified processor events onto local subscription and invoice state.
Every handler is safe to replay: subscriptions are upserted by their Stripe
id and invoices are recorded once per Stripe invoice id. Handler failures are
logged and the event is still acknowledged so Stripe does not redeliver it
indefinitely.
"""

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional

from ...domain.entities.invoice import Invoice
from ...domain.entities.subscription import Subscription
from ...domain.enums import SubscriptionStatus
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId
from ...domain.value_objects.money import Money
from ...infrastructure.external_services import stripe_objects
from ...infrastructure.external_services.email_service import EmailService
from ...infrastructure.external_services.stripe_gateway import StripeGateway, WebhookEvent

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], Awaitable[None]]


class ProcessStripeWebhookUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, gateway: StripeGateway, email_service: EmailService):
        self.unit_of_work = unit_of_work
        self.gateway = gateway
        self.email_service = email_service
        self._handlers: Dict[str, Handler] = {
            "checkout.session.completed": self._handle_checkout_completed,
            "customer.subscription.created": self._handle_subscription_updated,
            "customer.subscription.updated": self._handle_subscription_updated,
            "customer.subscription.deleted": self._handle_subscription_deleted,
            "invoice.paid": self._handle_invoice_paid,
            "invoice.payment_failed": self._handle_invoice_payment_failed,
        }

    async def execute(self, payload: bytes, signature: Optional[str]) -> Dict[str, bool]:
        """Verify the signature, then dispatch the event.

        Raises InvalidSignatureError before touching any state; after that the
        event is always acknowledged.
        """
        event = self.gateway.verify_webhook_signature(payload, signature)
        await self.handle_event(event)
        return {"received": True}

    async def handle_event(self, event: WebhookEvent) -> None:
        logger.info(f"Received Stripe webhook {event.type} ({event.id})")

        handler = self._handlers.get(event.type)
        if handler is None:
            logger.info(f"Unhandled Stripe event type: {event.type}")
            return

        try:
            await handler(event.data_object)
        except Exception:
            logger.exception(f"Error handling Stripe webhook {event.type} ({event.id})")

    async def _handle_checkout_completed(self, session: Dict[str, Any]) -> None:
        """Attach the Stripe customer to the user who started checkout"""
        raw_user_id = (
            stripe_objects.field(stripe_objects.field(session, "metadata"), "userId")
            or stripe_objects.field(session, "client_reference_id")
        )
        if not raw_user_id:
            logger.warning(f"No userId found in checkout session {session.get('id')}")
            return

        try:
            user_id = UserId.from_str(raw_user_id)
        except ValueError:
            logger.warning(f"Malformed userId {raw_user_id!r} in checkout session {session.get('id')}")
            return

        customer_id = stripe_objects.object_id(session.get("customer"))
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_id(user_id)
            if not user:
                logger.warning(f"User not found for checkout session: {raw_user_id}")
                return
            if customer_id and user.attach_customer(customer_id):
                await self.unit_of_work.users.update(user)

        logger.info(f"Checkout completed for user {user_id}")

    async def _handle_subscription_updated(self, data: Dict[str, Any]) -> None:
        """Upsert the subscription keyed by its Stripe id"""
        customer_id = stripe_objects.object_id(data.get("customer"))
        price_id = stripe_objects.price_id(data)
        status = SubscriptionStatus(stripe_objects.local_status(data.get("status")))
        period_start, period_end = stripe_objects.period_bounds(data)

        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_customer_id(customer_id) if customer_id else None
            if not user:
                logger.warning(f"User not found for customer: {customer_id}")
                return
            if not price_id:
                logger.warning(f"No price ID found in subscription {data.get('id')}")
                return

            plan = await self.unit_of_work.plans.get_by_price_id(price_id)
            if not plan:
                logger.warning(f"Plan not found for price ID: {price_id}")
                return

            existing = await self.unit_of_work.subscriptions.get_by_external_id(data["id"])
            subscription = existing or Subscription.create(user.id, plan, status, data["id"])
            subscription.apply_processor_state(
                plan=plan,
                status=status,
                period_start=period_start,
                period_end=period_end,
                cancel_at_period_end=bool(data.get("cancel_at_period_end")),
                canceled_at=stripe_objects.from_timestamp(data.get("canceled_at")),
                trial_start=stripe_objects.from_timestamp(data.get("trial_start")),
                trial_end=stripe_objects.from_timestamp(data.get("trial_end")),
            )
            if existing:
                await self.unit_of_work.subscriptions.update(subscription)
            else:
                await self.unit_of_work.subscriptions.add(subscription)

            user.set_current_subscription(subscription)
            await self.unit_of_work.users.update(user)

        logger.info(f"Subscription {data['id']} synced for user {user.id} ({status.value})")

        if not existing and status == SubscriptionStatus.ACTIVE:
            self.email_service.send_subscription_activated_email(
                user.email, user.display_name, plan.display_name, subscription.current_period_end
            )

    async def _handle_subscription_deleted(self, data: Dict[str, Any]) -> None:
        async with self.unit_of_work:
            subscription = await self.unit_of_work.subscriptions.get_by_external_id(data.get("id", ""))
            if not subscription:
                logger.warning(f"Subscription not found: {data.get('id')}")
                return

            subscription.mark_deleted()
            await self.unit_of_work.subscriptions.update(subscription)

            # A newer subscription may already be current; leave that one alone
            user = await self.unit_of_work.users.get_by_id(subscription.user_id)
            if user and user.current_subscription_id == subscription.id:
                user.clear_current_subscription()
                await self.unit_of_work.users.update(user)

        logger.info(f"Subscription {data.get('id')} deleted")

    async def _handle_invoice_paid(self, data: Dict[str, Any]) -> None:
        """Record the invoice once and send a receipt"""
        customer_id = stripe_objects.object_id(data.get("customer"))
        if not customer_id:
            logger.warning(f"No customer ID found in invoice {data.get('id')}")
            return

        total = Money.from_cents(data.get("amount_paid"), data.get("currency") or "usd")
        paid_at = (
            stripe_objects.from_timestamp(stripe_objects.field(data.get("status_transitions"), "paid_at"))
            or datetime.utcnow()
        )

        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_customer_id(customer_id)
            if not user:
                logger.warning(f"User not found for customer: {customer_id}")
                return

            if await self.unit_of_work.invoices.get_by_external_id(data["id"]):
                logger.info(f"Invoice {data['id']} already recorded")
                return

            subscription_id = stripe_objects.invoice_subscription_id(data)
            subscription = (
                await self.unit_of_work.subscriptions.get_by_external_id(subscription_id)
                if subscription_id else None
            )

            invoice = Invoice.paid(
                user_id=user.id,
                stripe_invoice_id=data["id"],
                total=total,
                subscription_id=subscription.id if subscription else None,
                invoice_url=data.get("hosted_invoice_url"),
                paid_at=paid_at,
            )
            await self.unit_of_work.invoices.add(invoice)

        logger.info(f"Invoice {data['id']} paid for user {user.id}")
        self.email_service.send_payment_receipt_email(
            user.email, user.display_name, total, paid_at, invoice.invoice_url
        )

    async def _handle_invoice_payment_failed(self, data: Dict[str, Any]) -> None:
        customer_id = stripe_objects.object_id(data.get("customer"))
        if not customer_id:
            logger.warning(f"No customer ID found in invoice {data.get('id')}")
            return

        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_customer_id(customer_id)
            if not user:
                logger.warning(f"User not found for customer: {customer_id}")
                return

            subscription_id = stripe_objects.invoice_subscription_id(data)
            if subscription_id:
                subscription = await self.unit_of_work.subscriptions.get_by_external_id(subscription_id)
                if subscription:
                    subscription.mark_past_due()
                    await self.unit_of_work.subscriptions.update(subscription)

        logger.info(f"Payment failed for invoice {data.get('id')}, user {user.id}")
        amount_due = Money.from_cents(data.get("amount_due"), data.get("currency") or "usd")
        self.email_service.send_payment_failed_email(user.email, user.display_name, amount_due)
