"""
SMS delivery via Twilio

`mock` and `test` modes only log the message; `live` sends it through the
Twilio REST API.
"""
from typing import Optional

from pydantic import BaseModel

from valet.utils.errors import InvalidInputError, ProviderFailureError
from valet.utils.logger import get_logger
from valet.utils.validators import sanitize_input, validate_phone_number

logger = get_logger(__name__)

SMS_MODES = ("mock", "test", "live")


class SmsResult(BaseModel):
    success: bool
    mode: str
    sid: Optional[str] = None


class SmsService:
    """Send guest notifications by SMS"""

    def __init__(
        self,
        mode: str = "mock",
        account_sid: str = "",
        auth_token: str = "",
        from_number: str = ""
    ):
        if mode not in SMS_MODES:
            raise ValueError(f"Invalid SMS mode: {mode}")
        self.mode = mode
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number

    def send(self, to: str, body: str) -> SmsResult:
        """
        Send one message

        Raises:
            InvalidInputError: Missing recipient/body or malformed number
            ProviderFailureError: Twilio rejected the message
        """
        if not to or not body:
            raise InvalidInputError("to and body are required")
        if not validate_phone_number(to):
            raise InvalidInputError("to must be an E.164 phone number")
        body = sanitize_input(body)

        if self.mode == "mock":
            logger.info("[MOCK SMS] to=%s message=%s", to, body)
            return SmsResult(success=True, mode=self.mode)

        if self.mode == "test":
            logger.info("[TEST MODE SMS] to=%s message=%s", to, body)
            return SmsResult(success=True, mode=self.mode)

        from twilio.base.exceptions import TwilioException
        from twilio.rest import Client

        try:
            client = Client(self.account_sid, self.auth_token)
            message = client.messages.create(
                body=body,
                from_=self.from_number,
                to=to,
            )
        except TwilioException as exc:
            logger.error(f"SMS delivery to {to} failed: {exc}")
            raise ProviderFailureError("SMS delivery failed") from exc

        logger.info("SMS sent to=%s sid=%s", to, message.sid)
        return SmsResult(success=True, mode=self.mode, sid=message.sid)
