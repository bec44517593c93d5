"""Stripe gateway request shaping, error wrapping and payload helpers."""

from datetime import datetime

import pytest
import stripe

from app.core.exceptions import InvalidSignatureError, UpstreamError
from app.infrastructure.external_services import stripe_objects
from app.infrastructure.external_services.stripe_gateway import StripeGateway

from tests.factories import stripe_signature


class Recorder:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def __call__(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def real_gateway(settings):
    return StripeGateway(settings)


def test_gateway_requires_secret_key(settings):
    config = settings.model_copy(update={"STRIPE_SECRET_KEY": ""})
    with pytest.raises(ValueError):
        StripeGateway(config)


@pytest.mark.asyncio
async def test_existing_customer_is_reused(real_gateway, monkeypatch):
    lookup = Recorder({"data": [{"id": "cus_existing", "email": "user@example.com"}]})
    create = Recorder()
    monkeypatch.setattr(stripe.Customer, "list", lookup)
    monkeypatch.setattr(stripe.Customer, "create", create)

    customer = await real_gateway.get_or_create_customer("user@example.com", "user-1")

    assert customer.id == "cus_existing"
    assert create.calls == []
    assert lookup.calls[0][1]["api_key"] == "sk_test_dummy"


@pytest.mark.asyncio
async def test_missing_customer_is_created_with_user_metadata(real_gateway, monkeypatch):
    create = Recorder({"id": "cus_new", "email": "user@example.com"})
    monkeypatch.setattr(stripe.Customer, "list", Recorder({"data": []}))
    monkeypatch.setattr(stripe.Customer, "create", create)

    customer = await real_gateway.get_or_create_customer("user@example.com", "user-1", "Ada")

    assert customer.id == "cus_new"
    kwargs = create.calls[0][1]
    assert kwargs["metadata"] == {"userId": "user-1"}
    assert kwargs["name"] == "Ada"


@pytest.mark.asyncio
async def test_checkout_session_parameters(real_gateway, monkeypatch):
    create = Recorder({"id": "cs_1", "url": "https://checkout.stripe.test/cs_1"})
    monkeypatch.setattr(stripe.checkout.Session, "create", create)

    session = await real_gateway.create_checkout_session(
        "user-1", "user@example.com", "price_pro_monthly", trial_days=14, customer_id="cus_1"
    )

    assert session.session_id == "cs_1"
    kwargs = create.calls[0][1]
    assert kwargs["mode"] == "subscription"
    assert kwargs["client_reference_id"] == "user-1"
    assert kwargs["customer"] == "cus_1"
    assert "customer_email" not in kwargs
    assert kwargs["subscription_data"] == {"metadata": {"userId": "user-1"}, "trial_period_days": 14}
    assert kwargs["success_url"].startswith("http://localhost:3000/subscription/success?session_id=")


@pytest.mark.asyncio
async def test_checkout_session_falls_back_to_email(real_gateway, monkeypatch):
    create = Recorder({"id": "cs_1", "url": None})
    monkeypatch.setattr(stripe.checkout.Session, "create", create)

    await real_gateway.create_checkout_session("user-1", "user@example.com", "price_pro_monthly")

    kwargs = create.calls[0][1]
    assert kwargs["customer_email"] == "user@example.com"
    assert "trial_period_days" not in kwargs["subscription_data"]


@pytest.mark.asyncio
async def test_stripe_errors_become_upstream_errors(real_gateway, monkeypatch):
    monkeypatch.setattr(
        stripe.billing_portal.Session, "create", Recorder(error=stripe.APIConnectionError("network down"))
    )

    with pytest.raises(UpstreamError) as excinfo:
        await real_gateway.create_billing_portal_session("cus_1")
    assert excinfo.value.message == "Failed to create billing portal session"


@pytest.mark.asyncio
async def test_cancel_at_period_end_modifies_subscription(real_gateway, monkeypatch):
    modify = Recorder({"id": "sub_1", "status": "active", "cancel_at_period_end": True})
    monkeypatch.setattr(stripe.Subscription, "modify", modify)

    result = await real_gateway.cancel_subscription("sub_1", immediate=False)

    assert result.cancel_at_period_end is True
    assert modify.calls[0][1]["cancel_at_period_end"] is True


@pytest.mark.asyncio
async def test_update_subscription_swaps_first_item_price(real_gateway, monkeypatch):
    current = {"id": "sub_1", "items": {"data": [{"id": "si_1", "price": {"id": "price_old"}}]}}
    modify = Recorder({"id": "sub_1", "status": "active", "current_period_end": 1769904000})
    monkeypatch.setattr(stripe.Subscription, "retrieve", Recorder(current))
    monkeypatch.setattr(stripe.Subscription, "modify", modify)

    result = await real_gateway.update_subscription("sub_1", "price_new")

    kwargs = modify.calls[0][1]
    assert kwargs["items"] == [{"id": "si_1", "price": "price_new"}]
    assert kwargs["proration_behavior"] == "create_prorations"
    assert result.current_period_end == datetime(2026, 2, 1)


def test_verified_event_is_parsed(real_gateway):
    payload = '{"id": "evt_1", "type": "invoice.paid", "data": {"object": {"id": "in_1"}}}'

    event = real_gateway.verify_webhook_signature(payload.encode("utf-8"), stripe_signature(payload))

    assert event.id == "evt_1"
    assert event.type == "invoice.paid"
    assert event.data_object == {"id": "in_1"}


def test_signed_non_object_payload_is_rejected(real_gateway):
    payload = "[1, 2, 3]"
    with pytest.raises(InvalidSignatureError):
        real_gateway.verify_webhook_signature(payload.encode("utf-8"), stripe_signature(payload))


def test_malformed_signature_header_is_rejected(real_gateway):
    with pytest.raises(InvalidSignatureError):
        real_gateway.verify_webhook_signature(b"{}", "garbage")


def test_non_utf8_body_is_rejected_as_invalid_payload(real_gateway):
    with pytest.raises(InvalidSignatureError) as exc_info:
        real_gateway.verify_webhook_signature(b'{"id": "evt_1", "name": "\xff\xfe"}', "t=1,v1=deadbeef")
    assert exc_info.value.message == "Invalid payload"


@pytest.mark.parametrize("status, expected", [
    ("active", "ACTIVE"),
    ("trialing", "TRIALING"),
    ("past_due", "PAST_DUE"),
    ("paused", "CANCELED"),
    ("something_new", "INCOMPLETE"),
    (None, "INCOMPLETE"),
])
def test_local_status(status, expected):
    assert stripe_objects.local_status(status) == expected


def test_object_id_accepts_ids_and_expanded_objects():
    assert stripe_objects.object_id("cus_1") == "cus_1"
    assert stripe_objects.object_id({"id": "cus_1", "email": "user@example.com"}) == "cus_1"
    assert stripe_objects.object_id("") is None
    assert stripe_objects.object_id(None) is None


def test_invoice_subscription_id_prefers_legacy_field():
    legacy = {"subscription": "sub_legacy", "parent": {"subscription_details": {"subscription": "sub_new"}}}
    current = {"parent": {"subscription_details": {"subscription": "sub_new"}}}
    assert stripe_objects.invoice_subscription_id(legacy) == "sub_legacy"
    assert stripe_objects.invoice_subscription_id(current) == "sub_new"
    assert stripe_objects.invoice_subscription_id({"id": "in_1"}) is None
