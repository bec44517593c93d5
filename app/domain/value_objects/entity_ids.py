"""Entity ID value objects"""

from dataclasses import dataclass
from uuid import UUID, uuid4


@dataclass(frozen=True)
class EntityId:
    value: UUID

    def __post_init__(self):
        if not isinstance(self.value, UUID):
            raise ValueError(f"{type(self).__name__} must be a valid UUID")

    @classmethod
    def generate(cls):
        """Generate a new random UUID"""
        return cls(uuid4())

    @classmethod
    def from_str(cls, uuid_str: str):
        """Create the id from its string representation"""
        return cls(UUID(uuid_str))

    def __str__(self) -> str:
        return str(self.value)


class UserId(EntityId):
    pass


class PlanId(EntityId):
    pass


class SubscriptionId(EntityId):
    pass


class InvoiceId(EntityId):
    pass


class TokenId(EntityId):
    pass
