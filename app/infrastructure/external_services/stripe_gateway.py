"""Stripe payment gateway adapter"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

import stripe

from ...core.config import Settings
from ...core.exceptions import InvalidSignatureError, UpstreamError
from . import stripe_objects

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StripeCustomer:
    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class CheckoutSession:
    session_id: str
    url: Optional[str]


@dataclass(frozen=True)
class PortalSession:
    url: str


@dataclass(frozen=True)
class ExternalSubscription:
    """The parts of a processor subscription mirrored locally"""
    id: str
    status: str
    current_period_start: Optional[datetime] = None
    current_period_end: Optional[datetime] = None
    cancel_at_period_end: bool = False

    @classmethod
    def from_stripe(cls, obj: Any) -> 'ExternalSubscription':
        start, end = stripe_objects.period_bounds(obj)
        return cls(
            id=stripe_objects.field(obj, "id"),
            status=stripe_objects.field(obj, "status", ""),
            current_period_start=start,
            current_period_end=end,
            cancel_at_period_end=bool(stripe_objects.field(obj, "cancel_at_period_end", False)),
        )


@dataclass(frozen=True)
class WebhookEvent:
    """A signature-verified webhook event"""
    id: str
    type: str
    data_object: Dict[str, Any]

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'WebhookEvent':
        return cls(
            id=payload.get("id", ""),
            type=payload.get("type", ""),
            data_object=(payload.get("data") or {}).get("object") or {},
        )


class StripeGateway:
    """Thin wrapper over the Stripe SDK.

    The API key is passed per call so that several gateways configured with
    different keys can coexist in one process.
    """

    def __init__(self, config: Settings):
        if not config.STRIPE_SECRET_KEY:
            raise ValueError("STRIPE_SECRET_KEY is not configured")
        self.api_key = config.STRIPE_SECRET_KEY
        self.webhook_secret = config.STRIPE_WEBHOOK_SECRET
        self.webhook_tolerance = config.STRIPE_WEBHOOK_TOLERANCE
        self.frontend_url = config.FRONTEND_URL.rstrip("/")

    async def get_or_create_customer(self, email: str, user_id: str, name: Optional[str] = None) -> StripeCustomer:
        """Reuse the first customer with this email, otherwise create one"""
        try:
            existing = stripe.Customer.list(email=email, limit=1, api_key=self.api_key)
            data = stripe_objects.field(existing, "data", [])
            if data:
                customer = data[0]
            else:
                params = {"email": email, "metadata": {"userId": user_id}}
                if name:
                    params["name"] = name
                customer = stripe.Customer.create(api_key=self.api_key, **params)
                logger.info(f"Created Stripe customer {customer['id']} for user {user_id}")
        except stripe.StripeError as e:
            logger.error(f"Stripe customer lookup failed for user {user_id}: {e}")
            raise UpstreamError("Failed to get or create customer")
        return StripeCustomer(id=customer["id"], email=stripe_objects.field(customer, "email"))

    async def create_checkout_session(self, user_id: str, user_email: str, price_id: str,
                                      trial_days: Optional[int] = None,
                                      customer_id: Optional[str] = None) -> CheckoutSession:
        """Create a subscription-mode checkout session.

        The user id travels as ``client_reference_id`` and in both session and
        subscription metadata so webhooks can resolve the user.
        """
        subscription_data: Dict[str, Any] = {"metadata": {"userId": user_id}}
        if trial_days:
            subscription_data["trial_period_days"] = trial_days

        params: Dict[str, Any] = {
            "mode": "subscription",
            "payment_method_types": ["card"],
            "line_items": [{"price": price_id, "quantity": 1}],
            "client_reference_id": user_id,
            "success_url": f"{self.frontend_url}/subscription/success?session_id={{CHECKOUT_SESSION_ID}}",
            "cancel_url": f"{self.frontend_url}/subscription/cancel",
            "metadata": {"userId": user_id},
            "subscription_data": subscription_data,
        }
        # Stripe rejects customer and customer_email together
        if customer_id:
            params["customer"] = customer_id
        else:
            params["customer_email"] = user_email

        try:
            session = stripe.checkout.Session.create(api_key=self.api_key, **params)
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed for user {user_id}: {e}")
            raise UpstreamError("Failed to create checkout session")

        logger.info(f"Created checkout session {session['id']} for user {user_id}")
        return CheckoutSession(session_id=session["id"], url=stripe_objects.field(session, "url"))

    async def create_billing_portal_session(self, customer_id: str) -> PortalSession:
        try:
            session = stripe.billing_portal.Session.create(
                customer=customer_id,
                return_url=f"{self.frontend_url}/subscription",
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe billing portal session failed for customer {customer_id}: {e}")
            raise UpstreamError("Failed to create billing portal session")
        return PortalSession(url=session["url"])

    async def update_subscription(self, subscription_id: str, new_price_id: str) -> ExternalSubscription:
        """Swap the price of the subscription's single item, prorating the change"""
        try:
            current = stripe.Subscription.retrieve(subscription_id, api_key=self.api_key)
            item = stripe_objects.first_item(current)
            if item is None:
                raise UpstreamError("Failed to update subscription")
            updated = stripe.Subscription.modify(
                subscription_id,
                items=[{"id": item["id"], "price": new_price_id}],
                proration_behavior="create_prorations",
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe subscription update failed for {subscription_id}: {e}")
            raise UpstreamError("Failed to update subscription")
        return ExternalSubscription.from_stripe(updated)

    async def cancel_subscription(self, subscription_id: str, immediate: bool = False) -> ExternalSubscription:
        """Cancel now, or flag the subscription to end with its current period"""
        try:
            if immediate:
                result = stripe.Subscription.cancel(subscription_id, api_key=self.api_key)
            else:
                result = stripe.Subscription.modify(
                    subscription_id,
                    cancel_at_period_end=True,
                    api_key=self.api_key,
                )
        except stripe.StripeError as e:
            logger.error(f"Stripe subscription cancellation failed for {subscription_id}: {e}")
            raise UpstreamError("Failed to cancel subscription")
        return ExternalSubscription.from_stripe(result)

    def verify_webhook_signature(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        """Check the ``Stripe-Signature`` header and parse the event body.

        Raises InvalidSignatureError when the header is missing, malformed,
        outside the tolerance window or signed with another secret, and when
        the body is not a UTF-8 JSON object.
        """
        if not signature:
            raise InvalidSignatureError("Missing stripe-signature header")
        if not self.webhook_secret:
            logger.error("STRIPE_WEBHOOK_SECRET is not configured")
            raise InvalidSignatureError()

        try:
            body = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        except UnicodeDecodeError:
            raise InvalidSignatureError("Invalid payload")

        try:
            event = stripe.Webhook.construct_event(
                body,
                signature,
                self.webhook_secret,
                self.webhook_tolerance,
                api_key=self.api_key,
            )
        except stripe.SignatureVerificationError as e:
            logger.warning(f"Stripe webhook signature verification failed: {e}")
            raise InvalidSignatureError()
        except (ValueError, AttributeError):
            # Signed but not a JSON object
            raise InvalidSignatureError("Invalid payload")
        return WebhookEvent.from_payload(event.to_dict())
