"""Test doubles for the Stripe gateway and the email service."""

from datetime import datetime, timedelta
from typing import List, Optional, Set, Tuple

from app.core.exceptions import UpstreamError
from app.infrastructure.external_services.email_service import EmailService
from app.infrastructure.external_services.stripe_gateway import (
    CheckoutSession,
    ExternalSubscription,
    PortalSession,
    StripeCustomer,
    StripeGateway,
)


class FakeStripeGateway(StripeGateway):
    """Records outbound Stripe calls; webhook signature checks stay real."""

    def __init__(self, config):
        super().__init__(config)
        self.calls: List[Tuple] = []
        self.customer_id = "cus_test_123"
        self.period_start = datetime(2026, 1, 1)
        self.period_end = datetime(2026, 2, 1)
        # Operation names that raise UpstreamError after being recorded
        self.failing: Set[str] = set()

    def _record(self, name: str, *args) -> None:
        self.calls.append((name,) + args)
        if name in self.failing:
            raise UpstreamError(f"Stripe call {name} failed")

    async def get_or_create_customer(self, email: str, user_id: str, name: Optional[str] = None) -> StripeCustomer:
        self._record("get_or_create_customer", email, user_id, name)
        return StripeCustomer(id=self.customer_id, email=email)

    async def create_checkout_session(self, user_id, user_email, price_id, trial_days=None, customer_id=None):
        self._record("create_checkout_session", user_id, price_id, trial_days, customer_id)
        return CheckoutSession(session_id="cs_test_123", url="https://checkout.stripe.test/cs_test_123")

    async def create_billing_portal_session(self, customer_id: str) -> PortalSession:
        self._record("create_billing_portal_session", customer_id)
        return PortalSession(url=f"https://billing.stripe.test/{customer_id}")

    async def update_subscription(self, subscription_id: str, new_price_id: str) -> ExternalSubscription:
        self._record("update_subscription", subscription_id, new_price_id)
        return ExternalSubscription(
            id=subscription_id,
            status="active",
            current_period_start=self.period_start,
            current_period_end=self.period_end,
        )

    async def cancel_subscription(self, subscription_id: str, immediate: bool = False) -> ExternalSubscription:
        self._record("cancel_subscription", subscription_id, immediate)
        return ExternalSubscription(
            id=subscription_id,
            status="canceled" if immediate else "active",
            current_period_end=self.period_end + timedelta(days=30),
            cancel_at_period_end=not immediate,
        )

    def called(self, name: str) -> List[Tuple]:
        return [call for call in self.calls if call[0] == name]


class RecordingEmailService(EmailService):
    """Keeps queued emails in memory instead of handing them to Celery."""

    def __init__(self, config):
        super().__init__(config)
        self.sent: List[Tuple[str, str, str]] = []

    def queue_email(self, to_email, subject, html_content, text_content=None):
        self.sent.append((to_email, subject, html_content))

    def subjects(self) -> List[str]:
        return [subject for _, subject, _ in self.sent]
