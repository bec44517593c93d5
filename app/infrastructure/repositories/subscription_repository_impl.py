"""Subscription plan and subscription repository implementations"""

from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from ...domain.entities.subscription import Subscription, SubscriptionPlan
from ...domain.enums import BillingInterval, SubscriptionStatus, SubscriptionTier
from ...domain.repositories.subscription_repository import IPlanRepository, ISubscriptionRepository
from ...domain.value_objects.entity_ids import PlanId, SubscriptionId, UserId
from ...domain.value_objects.features import parse_features
from ..orm.subscription_model import SubscriptionModel
from ..orm.subscription_plan_model import SubscriptionPlanModel


def map_plan(model: SubscriptionPlanModel) -> SubscriptionPlan:
    """Map plan ORM model to domain entity"""
    return SubscriptionPlan(
        id=PlanId(model.id),
        name=model.name,
        display_name=model.display_name,
        price=model.price,
        interval=BillingInterval(model.interval),
        stripe_price_id=model.stripe_price_id,
        trial_days=model.trial_days or 0,
        features=parse_features(model.features),
        is_active=model.is_active,
        tier=SubscriptionTier(model.tier) if model.tier else None,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class PlanRepositoryImpl(IPlanRepository):

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, plan_id: PlanId) -> Optional[SubscriptionPlan]:
        model = self.session.get(SubscriptionPlanModel, plan_id.value)
        return map_plan(model) if model else None

    async def get_by_price_id(self, price_id: str) -> Optional[SubscriptionPlan]:
        model = self.session.query(SubscriptionPlanModel).filter(
            SubscriptionPlanModel.stripe_price_id == price_id
        ).first()
        return map_plan(model) if model else None

    async def get_by_name(self, name: str) -> Optional[SubscriptionPlan]:
        model = self.session.query(SubscriptionPlanModel).filter(
            SubscriptionPlanModel.name == name
        ).first()
        return map_plan(model) if model else None

    async def list_active(self) -> List[SubscriptionPlan]:
        models = (
            self.session.query(SubscriptionPlanModel)
            .filter(SubscriptionPlanModel.is_active.is_(True))
            .order_by(SubscriptionPlanModel.price.asc())
            .all()
        )
        return [map_plan(model) for model in models]

    async def add(self, plan: SubscriptionPlan) -> SubscriptionPlan:
        model = SubscriptionPlanModel(id=plan.id.value, created_at=plan.created_at)
        self._update_model_from_entity(model, plan)
        self.session.add(model)
        self.session.flush()
        return plan

    async def update(self, plan: SubscriptionPlan) -> SubscriptionPlan:
        model = self.session.get(SubscriptionPlanModel, plan.id.value)
        if model:
            self._update_model_from_entity(model, plan)
            self.session.flush()
        return plan

    def _update_model_from_entity(self, model: SubscriptionPlanModel, plan: SubscriptionPlan) -> None:
        model.name = plan.name
        model.display_name = plan.display_name
        model.stripe_price_id = plan.stripe_price_id
        model.price = plan.price
        model.interval = plan.interval
        model.trial_days = plan.trial_days
        model.features = dict(plan.features)
        model.tier = plan.tier
        model.is_active = plan.is_active
        model.updated_at = plan.updated_at


class SubscriptionRepositoryImpl(ISubscriptionRepository):

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, subscription_id: SubscriptionId) -> Optional[Subscription]:
        model = self.session.get(SubscriptionModel, subscription_id.value)
        return self._map_to_entity(model) if model else None

    async def get_by_external_id(self, stripe_subscription_id: str) -> Optional[Subscription]:
        model = self.session.query(SubscriptionModel).filter(
            SubscriptionModel.stripe_subscription_id == stripe_subscription_id
        ).first()
        return self._map_to_entity(model) if model else None

    async def find_for_user(self, user_id: UserId,
                            statuses: Iterable[SubscriptionStatus]) -> Optional[Subscription]:
        model = self.session.query(SubscriptionModel).filter(
            SubscriptionModel.user_id == user_id.value,
            SubscriptionModel.status.in_(list(statuses)),
        ).first()
        return self._map_to_entity(model) if model else None

    async def add(self, subscription: Subscription) -> Subscription:
        model = SubscriptionModel(id=subscription.id.value, created_at=subscription.created_at)
        self._update_model_from_entity(model, subscription)
        self.session.add(model)
        self.session.flush()
        return subscription

    async def update(self, subscription: Subscription) -> Subscription:
        model = self.session.get(SubscriptionModel, subscription.id.value)
        if model:
            self._update_model_from_entity(model, subscription)
            self.session.flush()
        return subscription

    def _update_model_from_entity(self, model: SubscriptionModel, subscription: Subscription) -> None:
        model.user_id = subscription.user_id.value
        model.plan_id = subscription.plan_id.value
        model.stripe_subscription_id = subscription.stripe_subscription_id
        model.status = subscription.status
        model.current_period_start = subscription.current_period_start
        model.current_period_end = subscription.current_period_end
        model.cancel_at_period_end = subscription.cancel_at_period_end
        model.canceled_at = subscription.canceled_at
        model.trial_start = subscription.trial_start
        model.trial_end = subscription.trial_end
        model.updated_at = subscription.updated_at

    def _map_to_entity(self, model: SubscriptionModel) -> Subscription:
        return Subscription(
            id=SubscriptionId(model.id),
            user_id=UserId(model.user_id),
            plan_id=PlanId(model.plan_id),
            status=SubscriptionStatus(model.status),
            stripe_subscription_id=model.stripe_subscription_id,
            current_period_start=model.current_period_start,
            current_period_end=model.current_period_end,
            cancel_at_period_end=model.cancel_at_period_end,
            canceled_at=model.canceled_at,
            trial_start=model.trial_start,
            trial_end=model.trial_end,
            plan=map_plan(model.plan) if model.plan else None,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
