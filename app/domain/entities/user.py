"""User entity with business logic"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, TYPE_CHECKING

from ..value_objects.entity_ids import UserId, SubscriptionId

if TYPE_CHECKING:
    from .subscription import Subscription


@dataclass
class User:
    id: UserId
    email: str
    hashed_password: str
    name: Optional[str] = None
    is_verified: bool = False
    stripe_customer_id: Optional[str] = None
    current_subscription_id: Optional[SubscriptionId] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def create(cls, email: str, hashed_password: str, name: Optional[str] = None) -> 'User':
        """Factory method to create a new, unverified user"""
        now = datetime.utcnow()
        return cls(
            id=UserId.generate(),
            email=email,
            hashed_password=hashed_password,
            name=name or None,
            is_verified=False,
            created_at=now,
            updated_at=now,
        )

    def verify_email(self) -> None:
        self.is_verified = True
        self.updated_at = datetime.utcnow()

    def change_password(self, hashed_password: str) -> None:
        self.hashed_password = hashed_password
        self.updated_at = datetime.utcnow()

    def rename(self, name: str) -> None:
        self.name = name
        self.updated_at = datetime.utcnow()

    def attach_customer(self, customer_id: str) -> bool:
        """Record the payment-processor customer; an existing reference is kept"""
        if self.stripe_customer_id:
            return False
        self.stripe_customer_id = customer_id
        self.updated_at = datetime.utcnow()
        return True

    def set_current_subscription(self, subscription: 'Subscription') -> None:
        """Point at a subscription, which must belong to this user"""
        if subscription.user_id != self.id:
            raise ValueError("Subscription belongs to a different user")
        self.current_subscription_id = subscription.id
        self.updated_at = datetime.utcnow()

    def clear_current_subscription(self) -> None:
        self.current_subscription_id = None
        self.updated_at = datetime.utcnow()

    @property
    def display_name(self) -> str:
        return self.name or "there"
