"""Default plan catalog seeding."""

import pytest

from app.db.seed import seed_plans, tier_feature_bag
from app.domain.enums import SubscriptionTier
from app.infrastructure.orm import SubscriptionPlanModel

from tests.factories import count, find


def test_feature_bag_carries_features_and_limits():
    bag = tier_feature_bag(SubscriptionTier.PRO)
    assert bag["api_access"] is True
    assert bag["maxProjects"] == 20
    assert bag["maxStorageGB"] == 50
    assert "white_label" not in bag


@pytest.mark.asyncio
async def test_seed_creates_default_catalog(unit_of_work, settings):
    plans = await seed_plans(unit_of_work, settings)

    assert [plan.name for plan in plans] == [
        "FREE", "PRO_MONTHLY", "PRO_YEARLY", "PREMIUM_MONTHLY", "PREMIUM_YEARLY",
    ]
    pro = find(SubscriptionPlanModel, name="PRO_MONTHLY")
    assert pro.tier == SubscriptionTier.PRO
    assert pro.stripe_price_id == settings.STRIPE_PRICE_ID_PRO_MONTHLY
    assert pro.trial_days == 14
    assert find(SubscriptionPlanModel, name="FREE").stripe_price_id is None


@pytest.mark.asyncio
async def test_seed_is_repeatable(unit_of_work, settings, db_session):
    await seed_plans(unit_of_work, settings)
    db_session.query(SubscriptionPlanModel).filter_by(name="PRO_MONTHLY").update({"display_name": "Old name"})
    db_session.commit()

    await seed_plans(unit_of_work, settings)

    assert count(SubscriptionPlanModel) == 5
    assert find(SubscriptionPlanModel, name="PRO_MONTHLY").display_name == "Pro (Monthly)"
