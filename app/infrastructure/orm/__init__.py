"""Infrastructure ORM Models"""

from .user_model import UserModel
from .verification_token_model import VerificationTokenModel
from .password_reset_token_model import PasswordResetTokenModel
from .subscription_plan_model import SubscriptionPlanModel
from .subscription_model import SubscriptionModel
from .invoice_model import InvoiceModel

__all__ = [
    'UserModel',
    'VerificationTokenModel',
    'PasswordResetTokenModel',
    'SubscriptionPlanModel',
    'SubscriptionModel',
    'InvoiceModel',
]
