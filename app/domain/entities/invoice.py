"""Invoice entity, recorded once per processor invoice"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..enums import InvoiceStatus
from ..value_objects.entity_ids import InvoiceId, SubscriptionId, UserId
from ..value_objects.money import Money


@dataclass(frozen=True)
class Invoice:
    id: InvoiceId
    user_id: UserId
    stripe_invoice_id: str
    amount: Decimal
    currency: str
    status: InvoiceStatus
    subscription_id: Optional[SubscriptionId] = None
    invoice_url: Optional[str] = None
    paid_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def paid(cls, user_id: UserId, stripe_invoice_id: str, total: Money,
             subscription_id: Optional[SubscriptionId] = None,
             invoice_url: Optional[str] = None,
             paid_at: Optional[datetime] = None) -> 'Invoice':
        return cls(
            id=InvoiceId.generate(),
            user_id=user_id,
            subscription_id=subscription_id,
            stripe_invoice_id=stripe_invoice_id,
            amount=total.amount,
            currency=total.currency,
            status=InvoiceStatus.PAID,
            invoice_url=invoice_url,
            paid_at=paid_at or datetime.utcnow(),
        )
