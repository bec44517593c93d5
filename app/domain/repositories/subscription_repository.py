"""Subscription plan and subscription repository interfaces"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ..entities.subscription import Subscription, SubscriptionPlan
from ..enums import SubscriptionStatus
from ..value_objects.entity_ids import PlanId, SubscriptionId, UserId


class IPlanRepository(ABC):

    @abstractmethod
    async def get_by_id(self, plan_id: PlanId) -> Optional[SubscriptionPlan]:
        pass

    @abstractmethod
    async def get_by_price_id(self, price_id: str) -> Optional[SubscriptionPlan]:
        pass

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[SubscriptionPlan]:
        pass

    @abstractmethod
    async def list_active(self) -> List[SubscriptionPlan]:
        """Active plans, cheapest first"""
        pass

    @abstractmethod
    async def add(self, plan: SubscriptionPlan) -> SubscriptionPlan:
        pass

    @abstractmethod
    async def update(self, plan: SubscriptionPlan) -> SubscriptionPlan:
        pass


class ISubscriptionRepository(ABC):

    @abstractmethod
    async def get_by_id(self, subscription_id: SubscriptionId) -> Optional[Subscription]:
        pass

    @abstractmethod
    async def get_by_external_id(self, stripe_subscription_id: str) -> Optional[Subscription]:
        pass

    @abstractmethod
    async def find_for_user(self, user_id: UserId,
                            statuses: Iterable[SubscriptionStatus]) -> Optional[Subscription]:
        """Any subscription of the user in one of the given statuses"""
        pass

    @abstractmethod
    async def add(self, subscription: Subscription) -> Subscription:
        pass

    @abstractmethod
    async def update(self, subscription: Subscription) -> Subscription:
        pass
