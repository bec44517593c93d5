"""
Entitlement resolution - which tier, limits and features a user currently has
"""

from datetime import datetime
from typing import FrozenSet, Optional

from ...core.exceptions import InsufficientTierError
from ...domain.entitlements import (
    TIER_FEATURES,
    TIER_LIMITS,
    TierLimits,
    days_until_renewal,
    tier_allows,
    tier_for_plan,
)
from ...domain.entities.subscription import Subscription
from ...domain.enums import ENTITLED_STATUSES, SubscriptionStatus, SubscriptionTier
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId


class EntitlementService:
    """Read-only queries over a user's subscription state.

    Callers are expected to hold the unit of work open (``async with``) when
    invoking these methods.
    """

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def current_subscription(self, user_id: UserId) -> Optional[Subscription]:
        user = await self.unit_of_work.users.get_by_id(user_id)
        if not user or not user.current_subscription_id:
            return None
        return await self.unit_of_work.subscriptions.get_by_id(user.current_subscription_id)

    async def resolve_tier(self, user_id: UserId) -> SubscriptionTier:
        subscription = await self.current_subscription(user_id)
        return tier_for_plan(subscription.plan if subscription else None)

    async def has_active_subscription(self, user_id: UserId) -> bool:
        found = await self.unit_of_work.subscriptions.find_for_user(user_id, ENTITLED_STATUSES)
        return found is not None

    async def is_in_grace_period(self, user_id: UserId) -> bool:
        found = await self.unit_of_work.subscriptions.find_for_user(user_id, [SubscriptionStatus.PAST_DUE])
        return found is not None

    async def features(self, user_id: UserId) -> FrozenSet[str]:
        return TIER_FEATURES[await self.resolve_tier(user_id)]

    async def can_access_feature(self, user_id: UserId, feature_key: str) -> bool:
        return feature_key in await self.features(user_id)

    async def get_limits(self, user_id: UserId) -> TierLimits:
        return TIER_LIMITS[await self.resolve_tier(user_id)]

    async def require_tier(self, user_id: UserId, min_tier: SubscriptionTier) -> SubscriptionTier:
        """Return the user's tier, or raise InsufficientTierError below ``min_tier``"""
        tier = await self.resolve_tier(user_id)
        if not tier_allows(tier, min_tier):
            raise InsufficientTierError(f"This feature requires the {min_tier.value} tier or higher")
        return tier

    async def days_until_renewal(self, user_id: UserId, now: Optional[datetime] = None) -> Optional[int]:
        return days_until_renewal(await self.current_subscription(user_id), now)
