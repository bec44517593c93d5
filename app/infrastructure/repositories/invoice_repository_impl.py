"""Invoice repository implementation"""

from typing import List, Optional
from sqlalchemy.orm import Session

from ...domain.entities.invoice import Invoice
from ...domain.enums import InvoiceStatus
from ...domain.repositories.invoice_repository import IInvoiceRepository
from ...domain.value_objects.entity_ids import InvoiceId, SubscriptionId, UserId
from ..orm.invoice_model import InvoiceModel


class InvoiceRepositoryImpl(IInvoiceRepository):

    def __init__(self, session: Session):
        self.session = session

    async def get_by_external_id(self, stripe_invoice_id: str) -> Optional[Invoice]:
        model = self.session.query(InvoiceModel).filter(
            InvoiceModel.stripe_invoice_id == stripe_invoice_id
        ).first()
        return self._map_to_entity(model) if model else None

    async def add(self, invoice: Invoice) -> Invoice:
        self.session.add(InvoiceModel(
            id=invoice.id.value,
            user_id=invoice.user_id.value,
            subscription_id=invoice.subscription_id.value if invoice.subscription_id else None,
            stripe_invoice_id=invoice.stripe_invoice_id,
            amount=invoice.amount,
            currency=invoice.currency,
            status=invoice.status,
            invoice_url=invoice.invoice_url,
            paid_at=invoice.paid_at,
            created_at=invoice.created_at,
        ))
        self.session.flush()
        return invoice

    async def list_for_user(self, user_id: UserId, offset: int, limit: int) -> List[Invoice]:
        models = (
            self.session.query(InvoiceModel)
            .filter(InvoiceModel.user_id == user_id.value)
            .order_by(InvoiceModel.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [self._map_to_entity(model) for model in models]

    async def count_for_user(self, user_id: UserId) -> int:
        return self.session.query(InvoiceModel).filter(InvoiceModel.user_id == user_id.value).count()

    def _map_to_entity(self, model: InvoiceModel) -> Invoice:
        return Invoice(
            id=InvoiceId(model.id),
            user_id=UserId(model.user_id),
            subscription_id=SubscriptionId(model.subscription_id) if model.subscription_id else None,
            stripe_invoice_id=model.stripe_invoice_id,
            amount=model.amount,
            currency=model.currency,
            status=InvoiceStatus(model.status),
            invoice_url=model.invoice_url,
            paid_at=model.paid_at,
            created_at=model.created_at,
        )
