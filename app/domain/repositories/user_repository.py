"""User repository interface"""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities.user import User
from ..value_objects.entity_ids import UserId


class IUserRepository(ABC):

    @abstractmethod
    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_customer_id(self, customer_id: str) -> Optional[User]:
        """Get user by payment-processor customer id"""
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        pass

    @abstractmethod
    async def add(self, user: User) -> User:
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        pass
