"""Invoice ORM Model"""

from sqlalchemy import Column, String, DateTime, ForeignKey, Numeric, Uuid, Enum as SQLEnum
from sqlalchemy.sql import func

from ...db.models import Base
from ...domain.enums import InvoiceStatus


class InvoiceModel(Base):
    __tablename__ = 'invoices'

    id = Column(Uuid, primary_key=True, index=True)
    user_id = Column(Uuid, ForeignKey('users.id'), nullable=False, index=True)
    subscription_id = Column(Uuid, ForeignKey('subscriptions.id'), nullable=True)
    stripe_invoice_id = Column(String, unique=True, nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)  # major currency units
    currency = Column(String, default='USD', nullable=False)
    status = Column(SQLEnum(InvoiceStatus, name='invoice_status'), nullable=False)
    invoice_url = Column(String, nullable=True)
    paid_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now(), index=True)
