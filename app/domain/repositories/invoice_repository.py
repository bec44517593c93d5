"""Invoice repository interface"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities.invoice import Invoice
from ..value_objects.entity_ids import UserId


class IInvoiceRepository(ABC):

    @abstractmethod
    async def get_by_external_id(self, stripe_invoice_id: str) -> Optional[Invoice]:
        pass

    @abstractmethod
    async def add(self, invoice: Invoice) -> Invoice:
        pass

    @abstractmethod
    async def list_for_user(self, user_id: UserId, offset: int, limit: int) -> List[Invoice]:
        """Invoices of a user, newest first"""
        pass

    @abstractmethod
    async def count_for_user(self, user_id: UserId) -> int:
        pass
