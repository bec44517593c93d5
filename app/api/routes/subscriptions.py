"""Subscription and billing routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_current_user_id, get_email_service, get_payment_gateway, get_unit_of_work
from ...application.dtos.subscription_dtos import (
    CancelRequestDto,
    CheckoutRequestDto,
    CheckoutResponse,
    CurrentSubscriptionResponse,
    EntitlementsResponse,
    InvoiceListResponse,
    PlanDto,
    PortalResponse,
    SubscriptionActionResponse,
    UpgradeRequestDto,
)
from ...application.use_cases.subscription_use_cases import (
    CancelSubscriptionUseCase,
    CreateBillingPortalUseCase,
    CreateCheckoutUseCase,
    GetCurrentSubscriptionUseCase,
    GetEntitlementsUseCase,
    ListInvoicesUseCase,
    ListPlansUseCase,
    UpgradeSubscriptionUseCase,
)
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId
from ...infrastructure.external_services.email_service import EmailService
from ...infrastructure.external_services.stripe_gateway import StripeGateway

router = APIRouter()


@router.get("/plans", response_model=List[PlanDto])
async def list_plans(unit_of_work: IUnitOfWork = Depends(get_unit_of_work)):
    """Active subscription plans (public)"""
    return await ListPlansUseCase(unit_of_work).execute()


@router.post("/checkout", response_model=CheckoutResponse)
async def create_checkout(
    request: CheckoutRequestDto,
    user_id: UserId = Depends(get_current_user_id),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    """Start a Stripe Checkout session for a plan"""
    return await CreateCheckoutUseCase(unit_of_work, gateway).execute(user_id, request)


@router.get("/current", response_model=CurrentSubscriptionResponse)
async def get_current_subscription(
    user_id: UserId = Depends(get_current_user_id),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    return await GetCurrentSubscriptionUseCase(unit_of_work).execute(user_id)


@router.post("/cancel", response_model=SubscriptionActionResponse)
async def cancel_subscription(
    request: Optional[CancelRequestDto] = None,
    user_id: UserId = Depends(get_current_user_id),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    gateway: StripeGateway = Depends(get_payment_gateway),
    email_service: EmailService = Depends(get_email_service),
):
    """Cancel now or at the end of the billing period"""
    use_case = CancelSubscriptionUseCase(unit_of_work, gateway, email_service)
    return await use_case.execute(user_id, request or CancelRequestDto())


@router.post("/upgrade", response_model=SubscriptionActionResponse)
async def upgrade_subscription(
    request: UpgradeRequestDto,
    user_id: UserId = Depends(get_current_user_id),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    gateway: StripeGateway = Depends(get_payment_gateway),
    email_service: EmailService = Depends(get_email_service),
):
    """Switch the current subscription to another plan"""
    use_case = UpgradeSubscriptionUseCase(unit_of_work, gateway, email_service)
    return await use_case.execute(user_id, request)


@router.post("/portal", response_model=PortalResponse)
async def create_billing_portal(
    user_id: UserId = Depends(get_current_user_id),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    return await CreateBillingPortalUseCase(unit_of_work, gateway).execute(user_id)


@router.get("/invoices", response_model=InvoiceListResponse)
async def list_invoices(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user_id: UserId = Depends(get_current_user_id),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Paid invoices, newest first"""
    return await ListInvoicesUseCase(unit_of_work).execute(user_id, page, limit)


@router.get("/entitlements", response_model=EntitlementsResponse)
async def get_entitlements(
    user_id: UserId = Depends(get_current_user_id),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Tier, limits and features granted by the current subscription"""
    return await GetEntitlementsUseCase(unit_of_work).execute(user_id)
