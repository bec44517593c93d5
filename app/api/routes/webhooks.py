"""Payment processor webhook routes"""

from fastapi import APIRouter, Depends, Request

from ...api.dependencies import get_email_service, get_payment_gateway, get_unit_of_work
from ...application.use_cases.process_stripe_webhook import ProcessStripeWebhookUseCase
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...infrastructure.external_services.email_service import EmailService
from ...infrastructure.external_services.stripe_gateway import StripeGateway

router = APIRouter()


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    gateway: StripeGateway = Depends(get_payment_gateway),
    email_service: EmailService = Depends(get_email_service),
):
    """Receive Stripe events; authenticated by signature, not by bearer token"""
    payload = await request.body()
    signature = request.headers.get("stripe-signature")
    use_case = ProcessStripeWebhookUseCase(unit_of_work, gateway, email_service)
    return await use_case.execute(payload, signature)
