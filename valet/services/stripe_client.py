"""
Stripe integration

Thin adapter over the `stripe` SDK: payment intent creation for the guest
payment form and signature verification of inbound webhook events. Provider
errors are translated to ProviderFailureError; the API key is passed per
request so no global SDK state is configured.
"""
import json
from typing import Any, Dict, Optional, Union

import stripe
from pydantic import BaseModel

from valet.utils.errors import ProviderFailureError, UnauthorizedError
from valet.utils.logger import get_logger

logger = get_logger(__name__)


class PaymentIntentHandle(BaseModel):
    """The parts of a provider payment intent this service keeps"""
    id: str
    client_secret: str
    amount: int
    currency: str


class StripePaymentProvider:
    """
    Payment provider backed by Stripe PaymentIntents
    """

    def __init__(self, api_key: str, currency: str = "usd"):
        self.api_key = api_key
        self.currency = currency.lower()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def create_payment_intent(
        self,
        amount: int,
        metadata: Dict[str, str],
        idempotency_key: Optional[str] = None
    ) -> PaymentIntentHandle:
        """
        Create a payment intent for `amount` minor units

        Args:
            amount: Charge in minor units, must be positive
            metadata: String key/value pairs echoed back on webhook events
            idempotency_key: Provider idempotency key, if any

        Returns:
            PaymentIntentHandle

        Raises:
            ProviderFailureError: Stripe not configured or request failed
        """
        if not self.is_configured:
            logger.error("Stripe secret key is not configured")
            raise ProviderFailureError("Payment provider is not configured")

        options: Dict[str, Any] = {"api_key": self.api_key}
        if idempotency_key:
            options["idempotency_key"] = idempotency_key

        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=self.currency,
                metadata=metadata,
                automatic_payment_methods={"enabled": True},
                **options
            )
        except stripe.StripeError as exc:
            logger.error(f"Stripe payment intent creation failed: {exc}")
            raise ProviderFailureError("Payment provider request failed") from exc

        return PaymentIntentHandle(
            id=intent.id,
            client_secret=intent.client_secret,
            amount=intent.amount,
            currency=intent.currency,
        )


def verify_webhook(
    payload: Union[bytes, str],
    sig_header: Optional[str],
    secret: str
) -> Dict[str, Any]:
    """
    Verify a webhook payload against its Stripe-Signature header

    Returns:
        The event as a plain dict

    Raises:
        UnauthorizedError: Missing/invalid signature or malformed payload
    """
    if not sig_header:
        raise UnauthorizedError("Missing Stripe-Signature header")

    try:
        stripe.Webhook.construct_event(payload=payload, sig_header=sig_header, secret=secret)
    except stripe.SignatureVerificationError as exc:
        raise UnauthorizedError("Invalid signature") from exc
    except ValueError as exc:
        raise UnauthorizedError("Invalid payload") from exc

    return parse_event(payload)


def parse_event(payload: Union[bytes, str]) -> Dict[str, Any]:
    """Decode a webhook body without verification (relaxed mode)"""
    try:
        event = json.loads(payload)
    except (ValueError, UnicodeDecodeError) as exc:
        raise UnauthorizedError("Invalid payload") from exc
    if not isinstance(event, dict):
        raise UnauthorizedError("Invalid payload")
    return event
