"""Plan catalog, checkout and subscription management endpoints."""

from datetime import datetime, timedelta

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from app.api.dependencies import require_tier
from app.core.exceptions import AppError
from app.domain.enums import BillingInterval, SubscriptionStatus, SubscriptionTier
from app.infrastructure.orm import SubscriptionModel, UserModel
from app.main import app_error_handler

from tests.factories import (
    auth_headers,
    find,
    make_invoice,
    make_plan,
    make_subscription,
    make_user,
)

API = "/api/subscriptions"


def subscribed_user(plan_name="PRO_MONTHLY", price_id="price_pro_monthly", **fields):
    user_id = make_user(stripe_customer_id="cus_test_123")
    plan_id = make_plan(plan_name, stripe_price_id=price_id)
    subscription_id = make_subscription(user_id, plan_id, **fields)
    return user_id, subscription_id


def test_plans_are_public_and_sorted_by_price(client):
    make_plan("PREMIUM_MONTHLY", price="99.99", stripe_price_id="price_premium_monthly")
    make_plan("FREE", price="0", stripe_price_id=None)
    make_plan("PRO_MONTHLY", price="29.99")
    make_plan("PRO_YEARLY", price="299.99", interval=BillingInterval.YEARLY, stripe_price_id="price_pro_yearly")
    make_plan("LEGACY", price="5", stripe_price_id="price_legacy", is_active=False)

    response = client.get(f"{API}/plans")

    assert response.status_code == 200
    plans = response.json()
    assert [plan["name"] for plan in plans] == ["FREE", "PRO_MONTHLY", "PREMIUM_MONTHLY", "PRO_YEARLY"]
    assert [plan["isPopular"] for plan in plans] == [False, True, False, False]
    assert plans[1]["price"] == 29.99
    assert plans[1]["interval"] == "monthly"
    assert plans[1]["stripePriceId"] == "price_pro_monthly"
    assert plans[2]["tier"] == "PREMIUM"
    assert plans[3]["interval"] == "yearly"


def test_checkout_requires_auth(client):
    response = client.post(f"{API}/checkout", json={"priceId": "price_pro_monthly"})
    assert response.status_code == 401


def test_checkout_requires_price(client):
    user_id = make_user()
    response = client.post(f"{API}/checkout", json={}, headers=auth_headers(user_id))
    assert response.status_code == 400
    assert response.json()["detail"] == "Price ID is required"


def test_checkout_rejects_unknown_price(client, gateway):
    user_id = make_user()
    response = client.post(f"{API}/checkout", json={"priceId": "price_nope"}, headers=auth_headers(user_id))

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid subscription plan"
    assert gateway.calls == []


def test_checkout_creates_session_and_attaches_customer(client, gateway):
    user_id = make_user()
    make_plan("PRO_MONTHLY", trial_days=14)

    response = client.post(f"{API}/checkout", json={"priceId": "price_pro_monthly"}, headers=auth_headers(user_id))

    assert response.status_code == 200
    assert response.json() == {"sessionId": "cs_test_123", "url": "https://checkout.stripe.test/cs_test_123"}
    assert find(UserModel, id=user_id).stripe_customer_id == "cus_test_123"
    assert gateway.called("create_checkout_session") == [
        ("create_checkout_session", str(user_id), "price_pro_monthly", 14, "cus_test_123")
    ]


def test_checkout_without_trial(client, gateway):
    user_id = make_user()
    make_plan("PRO_MONTHLY", trial_days=0)

    client.post(f"{API}/checkout", json={"priceId": "price_pro_monthly"}, headers=auth_headers(user_id))

    assert gateway.called("create_checkout_session")[0][3] is None


def test_checkout_gateway_failure_leaves_user_untouched(client, gateway):
    user_id = make_user()
    make_plan("PRO_MONTHLY")
    gateway.failing.add("create_checkout_session")

    response = client.post(f"{API}/checkout", json={"priceId": "price_pro_monthly"}, headers=auth_headers(user_id))

    assert response.status_code == 500
    assert response.json()["detail"] == "Stripe call create_checkout_session failed"
    assert find(UserModel, id=user_id).stripe_customer_id is None


def test_current_without_subscription_is_free(client):
    user_id = make_user()

    response = client.get(f"{API}/current", headers=auth_headers(user_id))

    assert response.status_code == 200
    body = response.json()
    assert body["subscription"] is None
    assert body["usage"] is None
    assert body["tier"] == "FREE"
    assert body["limits"] == {"maxProjects": 3, "maxUsers": 1, "maxStorageGB": 1, "apiCallsPerMonth": 100}


def test_current_reports_trial_and_renewal(client):
    now = datetime.utcnow()
    user_id, subscription_id = subscribed_user(
        status=SubscriptionStatus.TRIALING,
        trial_end=now + timedelta(days=6, hours=12),
        current_period_end=now + timedelta(days=20, hours=1),
    )

    response = client.get(f"{API}/current", headers=auth_headers(user_id))

    body = response.json()
    assert body["subscription"]["id"] == str(subscription_id)
    assert body["subscription"]["status"] == "TRIALING"
    assert body["subscription"]["plan"]["name"] == "PRO_MONTHLY"
    assert body["usage"] == {"remainingTrialDays": 7, "daysUntilRenewal": 21}
    assert body["tier"] == "PRO"
    assert body["limits"]["maxProjects"] == 20


def test_cancel_without_subscription(client, gateway):
    user_id = make_user()

    response = client.post(f"{API}/cancel", json={}, headers=auth_headers(user_id))

    assert response.status_code == 400
    assert response.json()["detail"] == "No active subscription found"
    assert gateway.calls == []


def test_cancel_at_period_end_keeps_access(client, gateway, emails):
    user_id, subscription_id = subscribed_user(current_period_end=datetime.utcnow() + timedelta(days=10))

    response = client.post(f"{API}/cancel", headers=auth_headers(user_id))

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Subscription will be canceled at the end of the billing period"
    assert body["subscription"]["cancelAtPeriodEnd"] is True
    assert body["subscription"]["status"] == "ACTIVE"
    assert gateway.called("cancel_subscription") == [("cancel_subscription", "sub_test_123", False)]

    stored = find(SubscriptionModel, id=subscription_id)
    assert stored.cancel_at_period_end is True
    assert stored.canceled_at is not None
    assert find(UserModel, id=user_id).current_subscription_id == subscription_id
    assert emails.subjects() == ["Subscription Canceled"]


def test_cancel_immediately_ends_subscription(client, gateway):
    user_id, subscription_id = subscribed_user()

    response = client.post(f"{API}/cancel", json={"immediate": True}, headers=auth_headers(user_id))

    assert response.status_code == 200
    assert response.json()["message"] == "Subscription canceled immediately"
    assert gateway.called("cancel_subscription") == [("cancel_subscription", "sub_test_123", True)]
    assert find(SubscriptionModel, id=subscription_id).status == SubscriptionStatus.CANCELED
    assert find(UserModel, id=user_id).current_subscription_id is None


def test_cancel_gateway_failure_keeps_subscription(client, gateway, emails):
    user_id, subscription_id = subscribed_user()
    gateway.failing.add("cancel_subscription")

    response = client.post(f"{API}/cancel", json={"immediate": True}, headers=auth_headers(user_id))

    assert response.status_code == 500
    stored = find(SubscriptionModel, id=subscription_id)
    assert stored.status == SubscriptionStatus.ACTIVE
    assert stored.cancel_at_period_end is False
    assert find(UserModel, id=user_id).current_subscription_id == subscription_id
    assert emails.sent == []


def test_upgrade_switches_plan(client, gateway, emails):
    user_id, subscription_id = subscribed_user()
    premium_id = make_plan("PREMIUM_MONTHLY", price="99.99", stripe_price_id="price_premium_monthly")

    response = client.post(
        f"{API}/upgrade", json={"newPriceId": "price_premium_monthly"}, headers=auth_headers(user_id)
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Subscription updated successfully"
    assert body["subscription"]["plan"]["name"] == "PREMIUM_MONTHLY"
    assert gateway.called("update_subscription") == [
        ("update_subscription", "sub_test_123", "price_premium_monthly")
    ]
    stored = find(SubscriptionModel, id=subscription_id)
    assert stored.plan_id == premium_id
    assert stored.current_period_end == gateway.period_end
    assert emails.subjects() == ["Subscription Updated"]


def test_upgrade_gateway_failure_keeps_plan(client, gateway, emails):
    user_id, subscription_id = subscribed_user()
    original_plan_id = find(SubscriptionModel, id=subscription_id).plan_id
    make_plan("PREMIUM_MONTHLY", price="99.99", stripe_price_id="price_premium_monthly")
    gateway.failing.add("update_subscription")

    response = client.post(
        f"{API}/upgrade", json={"newPriceId": "price_premium_monthly"}, headers=auth_headers(user_id)
    )

    assert response.status_code == 500
    stored = find(SubscriptionModel, id=subscription_id)
    assert stored.plan_id == original_plan_id
    assert stored.status == SubscriptionStatus.ACTIVE
    assert find(UserModel, id=user_id).current_subscription_id == subscription_id
    assert emails.sent == []


def test_upgrade_requires_new_price(client):
    user_id, _ = subscribed_user()
    response = client.post(f"{API}/upgrade", json={}, headers=auth_headers(user_id))
    assert response.status_code == 400
    assert response.json()["detail"] == "New price ID is required"


def test_upgrade_rejects_unknown_price(client, gateway):
    user_id, _ = subscribed_user()
    response = client.post(f"{API}/upgrade", json={"newPriceId": "price_nope"}, headers=auth_headers(user_id))

    assert response.status_code == 400
    assert gateway.called("update_subscription") == []


def test_portal_requires_customer(client):
    user_id = make_user()
    response = client.post(f"{API}/portal", headers=auth_headers(user_id))
    assert response.status_code == 400
    assert response.json()["detail"] == "No Stripe customer found"


def test_portal_returns_session_url(client):
    user_id = make_user(stripe_customer_id="cus_test_123")
    response = client.post(f"{API}/portal", headers=auth_headers(user_id))
    assert response.status_code == 200
    assert response.json() == {"url": "https://billing.stripe.test/cus_test_123"}


def test_invoices_paginate_newest_first(client):
    user_id = make_user()
    other_id = make_user(email="other@example.com")
    start = datetime(2026, 1, 1)
    for day in range(3):
        make_invoice(user_id, f"in_{day}", created_at=start + timedelta(days=day))
    make_invoice(other_id, "in_other")

    first_page = client.get(f"{API}/invoices", params={"page": 1, "limit": 2}, headers=auth_headers(user_id)).json()
    second_page = client.get(f"{API}/invoices", params={"page": 2, "limit": 2}, headers=auth_headers(user_id)).json()

    assert [invoice["stripeInvoiceId"] for invoice in first_page["invoices"]] == ["in_2", "in_1"]
    assert [invoice["stripeInvoiceId"] for invoice in second_page["invoices"]] == ["in_0"]
    assert first_page["total"] == 3
    assert first_page["page"] == 1
    assert first_page["limit"] == 2
    assert first_page["invoices"][0]["amount"] == 29.99
    assert first_page["invoices"][0]["currency"] == "USD"


def test_invoices_limit_is_bounded(client):
    user_id = make_user()
    response = client.get(f"{API}/invoices", params={"limit": 101}, headers=auth_headers(user_id))
    assert response.status_code == 400


def test_entitlements_for_pro_subscriber(client):
    user_id, _ = subscribed_user(current_period_end=datetime.utcnow() + timedelta(days=5, hours=1))

    response = client.get(f"{API}/entitlements", headers=auth_headers(user_id))

    assert response.status_code == 200
    body = response.json()
    assert body["tier"] == "PRO"
    assert body["hasActiveSubscription"] is True
    assert body["inGracePeriod"] is False
    assert body["daysUntilRenewal"] == 6
    assert "api_access" in body["features"]
    assert "white_label" not in body["features"]


def build_gated_app():
    gated = FastAPI()
    gated.add_exception_handler(AppError, app_error_handler)

    @gated.get("/reports")
    async def reports(tier: SubscriptionTier = Depends(require_tier(SubscriptionTier.PRO))):
        return {"tier": tier.value}

    return gated


def test_tier_gate_blocks_free_users():
    user_id = make_user()
    with TestClient(build_gated_app()) as gated_client:
        response = gated_client.get("/reports", headers=auth_headers(user_id))
    assert response.status_code == 403
    assert response.json()["detail"] == "This feature requires the PRO tier or higher"


def test_tier_gate_admits_higher_tiers():
    user_id, _ = subscribed_user("PREMIUM_YEARLY", price_id="price_premium_yearly")
    with TestClient(build_gated_app()) as gated_client:
        response = gated_client.get("/reports", headers=auth_headers(user_id))
    assert response.status_code == 200
    assert response.json() == {"tier": "PREMIUM"}
