"""
Payment API routes
"""
import asyncio

from fastapi import APIRouter, Depends

from valet.dependencies import get_payment_intent_service
from valet.models.schemas import (
    CreatePaymentIntentRequest,
    CreatePaymentIntentResponse,
    ErrorResponse,
)
from valet.services.payment_intent_service import PaymentIntentService

router = APIRouter(prefix="/api", tags=["payments"])


@router.post(
    "/create-payment-intent",
    response_model=CreatePaymentIntentResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def create_payment_intent(
    request: CreatePaymentIntentRequest,
    service: PaymentIntentService = Depends(get_payment_intent_service)
):
    """
    Create a payment intent for a ticket's base fee plus tip

    The amount is computed server-side from the job's payment configuration;
    the response carries only the handle the payment form needs.
    """
    client_handle = await asyncio.to_thread(
        service.create_intent, request.ticket_id, request.tip_dollars
    )
    return CreatePaymentIntentResponse(client_handle=client_handle)
