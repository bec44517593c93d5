"""
Tier entitlements - static feature and limit tables per subscription tier
"""

import math
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional

from .entities.subscription import Subscription, SubscriptionPlan
from .enums import SubscriptionTier

SECONDS_PER_DAY = 24 * 60 * 60
UNLIMITED = -1


@dataclass(frozen=True)
class TierLimits:
    max_projects: int
    max_users: int
    max_storage_gb: int
    api_calls_per_month: int

    def to_dict(self) -> dict:
        return asdict(self)


_FREE_FEATURES = frozenset({"basic_features", "limited_projects"})
_PRO_FEATURES = _FREE_FEATURES | {"advanced_features", "api_access", "priority_support"}
_PREMIUM_FEATURES = _PRO_FEATURES | {"custom_domain", "analytics", "white_label", "dedicated_support"}

TIER_FEATURES = {
    SubscriptionTier.FREE: _FREE_FEATURES,
    SubscriptionTier.PRO: _PRO_FEATURES,
    SubscriptionTier.PREMIUM: _PREMIUM_FEATURES,
}

TIER_LIMITS = {
    SubscriptionTier.FREE: TierLimits(3, 1, 1, 100),
    SubscriptionTier.PRO: TierLimits(20, 5, 50, 10000),
    SubscriptionTier.PREMIUM: TierLimits(UNLIMITED, UNLIMITED, 500, UNLIMITED),
}

TIER_RANK = {
    SubscriptionTier.FREE: 0,
    SubscriptionTier.PRO: 1,
    SubscriptionTier.PREMIUM: 2,
}


def tier_for_plan(plan: Optional[SubscriptionPlan]) -> SubscriptionTier:
    """Resolve the tier granted by a plan.

    An explicit ``tier`` on the plan wins. Plans without one fall back to a
    case-insensitive substring match on the plan name (PRO, then PREMIUM).
    """
    if plan is None:
        return SubscriptionTier.FREE
    if plan.tier is not None:
        return SubscriptionTier(plan.tier)

    name = plan.name.upper()
    if "PRO" in name:
        return SubscriptionTier.PRO
    if "PREMIUM" in name:
        return SubscriptionTier.PREMIUM
    return SubscriptionTier.FREE


def tier_allows(tier: SubscriptionTier, minimum: SubscriptionTier) -> bool:
    return TIER_RANK[tier] >= TIER_RANK[minimum]


def _days_until(moment: datetime, now: datetime) -> int:
    if moment <= now:
        return 0
    return math.ceil((moment - now).total_seconds() / SECONDS_PER_DAY)


def remaining_trial_days(trial_end: Optional[datetime], now: Optional[datetime] = None) -> int:
    if trial_end is None:
        return 0
    return _days_until(trial_end, now or datetime.utcnow())


def days_until_renewal(subscription: Optional[Subscription], now: Optional[datetime] = None) -> Optional[int]:
    """Whole days to the next renewal; None when nothing will renew."""
    if subscription is None or subscription.current_period_end is None:
        return None
    if subscription.cancel_at_period_end:
        return None
    return _days_until(subscription.current_period_end, now or datetime.utcnow())
