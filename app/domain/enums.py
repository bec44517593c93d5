"""
Domain Enums - Business domain enumerations
"""

from enum import Enum


class SubscriptionStatus(str, Enum):
    ACTIVE = "ACTIVE"
    CANCELED = "CANCELED"
    PAST_DUE = "PAST_DUE"
    TRIALING = "TRIALING"
    INCOMPLETE = "INCOMPLETE"
    INCOMPLETE_EXPIRED = "INCOMPLETE_EXPIRED"
    UNPAID = "UNPAID"


class SubscriptionTier(str, Enum):
    FREE = "FREE"
    PRO = "PRO"
    PREMIUM = "PREMIUM"


class InvoiceStatus(str, Enum):
    PAID = "PAID"
    OPEN = "OPEN"
    VOID = "VOID"
    UNCOLLECTIBLE = "UNCOLLECTIBLE"
    DRAFT = "DRAFT"


class BillingInterval(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"
    LIFETIME = "lifetime"


# Statuses that grant access to paid features
ENTITLED_STATUSES = (SubscriptionStatus.ACTIVE, SubscriptionStatus.TRIALING)
