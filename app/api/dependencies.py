"""API dependencies"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..core.config import Settings, get_settings
from ..core.exceptions import AuthError, InvalidTokenError
from ..core.security import verify_token
from ..db.database import get_db
from ..domain.enums import SubscriptionTier
from ..domain.repositories.unit_of_work import IUnitOfWork
from ..domain.value_objects.entity_ids import UserId
from ..application.use_cases.entitlement_service import EntitlementService
from ..infrastructure.repositories.unit_of_work_impl import UnitOfWorkImpl
from ..infrastructure.external_services.email_service import EmailService
from ..infrastructure.external_services.stripe_gateway import StripeGateway


# auto_error=False so a missing header is reported as 401 rather than 403
security = HTTPBearer(auto_error=False)


def get_app_settings() -> Settings:
    """Get application settings"""
    return get_settings()


def get_unit_of_work(db: Session = Depends(get_db)) -> IUnitOfWork:
    """Get unit of work"""
    return UnitOfWorkImpl(db)


@lru_cache()
def get_payment_gateway() -> StripeGateway:
    """Get the process-wide Stripe gateway"""
    return StripeGateway(get_settings())


def get_email_service() -> EmailService:
    """Get email service"""
    return EmailService(get_settings())


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> UserId:
    """Authenticate the bearer token and return the caller's user id"""
    if credentials is None or not credentials.credentials:
        raise AuthError()

    claims = verify_token(credentials.credentials)
    try:
        return UserId.from_str(claims.user_id)
    except ValueError:
        raise InvalidTokenError()


def require_tier(min_tier: SubscriptionTier):
    """Dependency factory gating a route on a minimum subscription tier"""

    async def check_tier(
        user_id: UserId = Depends(get_current_user_id),
        unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    ) -> SubscriptionTier:
        async with unit_of_work:
            return await EntitlementService(unit_of_work).require_tier(user_id, min_tier)

    return check_tier
