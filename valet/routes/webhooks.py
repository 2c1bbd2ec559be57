"""
Payment provider webhook routes
"""
import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request

from valet.dependencies import get_webhook_reconciler
from valet.models.schemas import ErrorResponse, WebhookAck
from valet.services.webhook_reconciler import WebhookReconciler

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])


@router.post(
    "/stripe",
    response_model=WebhookAck,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None),
    reconciler: WebhookReconciler = Depends(get_webhook_reconciler)
):
    """
    Receive a Stripe event

    Every authenticated event is acknowledged, including types that are not
    handled. Authentication failures are answered with 400 and change nothing.
    """
    payload = await request.body()
    await asyncio.to_thread(reconciler.handle, payload, stripe_signature)
    return WebhookAck(received=True)
