"""
SMS API routes
"""
import asyncio

from fastapi import APIRouter, Depends

from valet.dependencies import get_sms_service
from valet.models.schemas import ErrorResponse, SendSmsRequest, SendSmsResponse
from valet.services.sms import SmsService

router = APIRouter(prefix="/api", tags=["sms"])


@router.post(
    "/send-sms",
    response_model=SendSmsResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def send_sms(
    request: SendSmsRequest,
    sms_service: SmsService = Depends(get_sms_service)
):
    """Send a text message to a guest"""
    result = await asyncio.to_thread(sms_service.send, request.to or "", request.body or "")
    return SendSmsResponse(success=result.success, mode=result.mode, sid=result.sid)
