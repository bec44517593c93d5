"""Subscription plan catalog seeding"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from ..core.config import Settings
from ..domain.entitlements import TIER_FEATURES, TIER_LIMITS
from ..domain.entities.subscription import SubscriptionPlan
from ..domain.enums import BillingInterval, SubscriptionTier
from ..domain.repositories.unit_of_work import IUnitOfWork
from ..domain.value_objects.entity_ids import PlanId
from ..domain.value_objects.features import FeatureSet

logger = logging.getLogger(__name__)

PAID_TRIAL_DAYS = 14


@dataclass(frozen=True)
class PlanSeed:
    name: str
    display_name: str
    price: Decimal
    interval: BillingInterval
    tier: SubscriptionTier
    stripe_price_id: Optional[str]
    trial_days: int


def tier_feature_bag(tier: SubscriptionTier) -> FeatureSet:
    limits = TIER_LIMITS[tier]
    features: FeatureSet = {key: True for key in sorted(TIER_FEATURES[tier])}
    features.update({
        "maxProjects": limits.max_projects,
        "maxUsers": limits.max_users,
        "maxStorageGB": limits.max_storage_gb,
        "apiCallsPerMonth": limits.api_calls_per_month,
    })
    return features


def default_plans(config: Settings) -> List[PlanSeed]:
    return [
        PlanSeed("FREE", "Free", Decimal("0"), BillingInterval.MONTHLY,
                 SubscriptionTier.FREE, None, 0),
        PlanSeed("PRO_MONTHLY", "Pro (Monthly)", Decimal("29.99"), BillingInterval.MONTHLY,
                 SubscriptionTier.PRO, config.STRIPE_PRICE_ID_PRO_MONTHLY, PAID_TRIAL_DAYS),
        PlanSeed("PRO_YEARLY", "Pro (Yearly)", Decimal("299.99"), BillingInterval.YEARLY,
                 SubscriptionTier.PRO, config.STRIPE_PRICE_ID_PRO_YEARLY, PAID_TRIAL_DAYS),
        PlanSeed("PREMIUM_MONTHLY", "Premium (Monthly)", Decimal("99.99"), BillingInterval.MONTHLY,
                 SubscriptionTier.PREMIUM, config.STRIPE_PRICE_ID_PREMIUM_MONTHLY, PAID_TRIAL_DAYS),
        PlanSeed("PREMIUM_YEARLY", "Premium (Yearly)", Decimal("999.99"), BillingInterval.YEARLY,
                 SubscriptionTier.PREMIUM, config.STRIPE_PRICE_ID_PREMIUM_YEARLY, PAID_TRIAL_DAYS),
    ]


async def seed_plans(unit_of_work: IUnitOfWork, config: Settings) -> List[SubscriptionPlan]:
    """Create or update the default catalog, matching plans by name"""
    seeded = []
    async with unit_of_work:
        for seed in default_plans(config):
            plan = await unit_of_work.plans.get_by_name(seed.name)
            if plan is None:
                plan = SubscriptionPlan(id=PlanId.generate(), name=seed.name, display_name=seed.display_name,
                                        price=seed.price, interval=seed.interval)
                creating = True
            else:
                creating = False

            plan.display_name = seed.display_name
            plan.price = seed.price
            plan.interval = seed.interval
            plan.tier = seed.tier
            plan.stripe_price_id = seed.stripe_price_id
            plan.trial_days = seed.trial_days
            plan.features = tier_feature_bag(seed.tier)
            plan.is_active = True
            plan.updated_at = datetime.utcnow()

            if creating:
                await unit_of_work.plans.add(plan)
                logger.info(f"Created plan {seed.name}")
            else:
                await unit_of_work.plans.update(plan)
                logger.info(f"Updated plan {seed.name}")
            seeded.append(plan)
    return seeded
