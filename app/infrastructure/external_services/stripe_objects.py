"""Helpers for reading Stripe payloads.

Webhook bodies arrive as plain dicts while SDK calls return ``StripeObject``
instances; both support item access, which is all these helpers rely on.
Newer API versions moved a few fields, so lookups try the current location
first and fall back to the legacy one.
"""

from datetime import datetime
from typing import Any, Optional, Tuple

# Processor status -> local SubscriptionStatus value
STATUS_MAP = {
    "active": "ACTIVE",
    "canceled": "CANCELED",
    "incomplete": "INCOMPLETE",
    "incomplete_expired": "INCOMPLETE_EXPIRED",
    "past_due": "PAST_DUE",
    "trialing": "TRIALING",
    "unpaid": "UNPAID",
    "paused": "CANCELED",
}
UNKNOWN_STATUS = "INCOMPLETE"


def field(obj: Any, key: str, default: Any = None) -> Any:
    """Item lookup that tolerates missing keys and ``None`` containers"""
    if obj is None:
        return default
    try:
        value = obj[key]
    except (KeyError, TypeError, IndexError):
        return default
    return default if value is None else value


def object_id(value: Any) -> Optional[str]:
    """Id of a field that may hold either an id string or an expanded object"""
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    return field(value, "id")


def from_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    return datetime.utcfromtimestamp(int(value))


def first_item(subscription: Any) -> Any:
    items = field(field(subscription, "items"), "data", [])
    return items[0] if items else None


def price_id(subscription: Any) -> Optional[str]:
    return object_id(field(first_item(subscription), "price"))


def period_bounds(subscription: Any) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Current period start/end, read from the subscription or its first item"""
    item = first_item(subscription)
    start = field(subscription, "current_period_start") or field(item, "current_period_start")
    end = field(subscription, "current_period_end") or field(item, "current_period_end")
    return from_timestamp(start), from_timestamp(end)


def invoice_subscription_id(invoice: Any) -> Optional[str]:
    legacy = object_id(field(invoice, "subscription"))
    if legacy:
        return legacy
    details = field(field(invoice, "parent"), "subscription_details")
    return object_id(field(details, "subscription"))


def local_status(stripe_status: Optional[str]) -> str:
    return STATUS_MAP.get(stripe_status or "", UNKNOWN_STATUS)
