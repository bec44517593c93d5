"""Unit of Work interface for transaction management"""

from abc import ABC, abstractmethod

from .user_repository import IUserRepository
from .token_repository import IVerificationTokenRepository, IPasswordResetTokenRepository
from .subscription_repository import IPlanRepository, ISubscriptionRepository
from .invoice_repository import IInvoiceRepository


class IUnitOfWork(ABC):
    """Unit of Work interface for managing transactions across repositories"""

    users: IUserRepository
    verification_tokens: IVerificationTokenRepository
    reset_tokens: IPasswordResetTokenRepository
    plans: IPlanRepository
    subscriptions: ISubscriptionRepository
    invoices: IInvoiceRepository

    @abstractmethod
    async def __aenter__(self):
        """Enter async context"""
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context"""
        pass

    @abstractmethod
    async def commit(self):
        """Commit transaction"""
        pass

    @abstractmethod
    async def rollback(self):
        """Rollback transaction"""
        pass
