"""Money value object with currency"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str = "USD"

    def __post_init__(self):
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency:
            raise ValueError("Currency required")
        object.__setattr__(self, "currency", self.currency.upper())

    def to_cents(self) -> int:
        return int(self.amount * 100)

    @classmethod
    def from_cents(cls, cents: int, currency: str = "USD") -> "Money":
        """Build from the minor-unit integer the payment processor reports"""
        return cls(amount=Decimal(int(cents or 0)) / 100, currency=currency or "USD")

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency}"
