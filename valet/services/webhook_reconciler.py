"""
Webhook reconciler

Applies payment provider confirmation events to the ticket and transaction
records. Delivery is at-least-once: the transaction write is insert-or-ignore
keyed by the payment intent id and the ticket update is idempotent, so a
redelivered event never records revenue twice and a delivery that failed
halfway completes on the next attempt.
"""
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel

from valet.models.schemas import PaymentTransactionCreate
from valet.services import stripe_client
from valet.utils.errors import StoreFailureError, UnauthorizedError
from valet.utils.logger import get_logger

logger = get_logger(__name__)

PAYMENT_SUCCEEDED = "payment_intent.succeeded"


class ReconcileResult(BaseModel):
    """Outcome of handling one event"""
    event_type: str
    action: str  # recorded | duplicate | ignored
    ticket_id: Optional[str] = None
    payment_intent_id: Optional[str] = None


def _minor_units(value: Any) -> int:
    """Metadata amount to a non-negative int; anything unusable is zero."""
    try:
        amount = int(str(value).strip())
    except (TypeError, ValueError):
        return 0
    return max(amount, 0)


def _text(value: Any) -> Optional[str]:
    """Non-empty string field of an event, else None."""
    return value if isinstance(value, str) and value else None


def split_amount(amount: int, base_value: Any, tip_value: Any) -> Tuple[int, int]:
    """
    Split a charged amount into (base, tip) from metadata strings.

    When the metadata does not add up to the charged amount, base is capped
    at the amount and the remainder is attributed to the tip.
    """
    base = _minor_units(base_value)
    tip = _minor_units(tip_value)
    if base + tip == amount:
        return base, tip

    logger.warning(
        "Metadata breakdown base=%s tip=%s does not match amount %s; reconciling",
        base, tip, amount
    )
    base = min(base, amount)
    return base, amount - base


class WebhookReconciler:
    """
    Verify and apply payment provider events

    Collaborators:
        ticket_repository: TicketRepository (or a compatible fake)
        transaction_repository: PaymentTransactionRepository (or a compatible fake)
        webhook_secret: Shared signing secret; empty means relaxed mode
        allow_unsigned: Whether relaxed mode is permitted at all
    """

    def __init__(
        self,
        ticket_repository,
        transaction_repository,
        webhook_secret: str = "",
        allow_unsigned: bool = True,
        default_currency: str = "usd"
    ):
        self.ticket_repository = ticket_repository
        self.transaction_repository = transaction_repository
        self.webhook_secret = webhook_secret
        self.allow_unsigned = allow_unsigned
        self.default_currency = default_currency

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def authenticate(self, payload: Union[bytes, str], sig_header: Optional[str]) -> Dict[str, Any]:
        """
        Return the verified event, or raise UnauthorizedError.

        Without a configured secret the payload is trusted as-is, which is
        only permitted outside production.
        """
        if self.webhook_secret:
            return stripe_client.verify_webhook(payload, sig_header, self.webhook_secret)

        if not self.allow_unsigned:
            logger.error("Webhook secret is not configured; rejecting unsigned event")
            raise UnauthorizedError("Webhook signing secret is not configured")

        logger.warning("Webhook secret not configured; accepting unsigned event")
        return stripe_client.parse_event(payload)

    # ------------------------------------------------------------------
    # Handling
    # ------------------------------------------------------------------
    def handle(self, payload: Union[bytes, str], sig_header: Optional[str]) -> ReconcileResult:
        """
        Authenticate and apply one inbound event

        Raises:
            UnauthorizedError: Verification failed; nothing was written
            StoreFailureError: A write failed; the event must be redelivered
        """
        try:
            event = self.authenticate(payload, sig_header)
        except UnauthorizedError as exc:
            logger.error(f"Webhook signature verification failed: {exc}")
            raise

        event_type = str(event.get("type") or "")
        logger.info(f"Received webhook event {event.get('id', '')} ({event_type})")

        if event_type != PAYMENT_SUCCEEDED:
            return ReconcileResult(event_type=event_type, action="ignored")

        data = event.get("data")
        intent = data.get("object") if isinstance(data, dict) else None
        return self.apply_payment_succeeded(intent if isinstance(intent, dict) else {})

    def apply_payment_succeeded(self, intent: Dict[str, Any]) -> ReconcileResult:
        """Record the transaction and mark the ticket paid"""
        metadata = intent.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        intent_id = _text(intent.get("id"))
        ticket_id = _text(metadata.get("ticketId"))

        if not ticket_id or not intent_id:
            logger.warning(
                f"Ignoring {PAYMENT_SUCCEEDED} {intent_id or '<no id>'} without ticket metadata"
            )
            return ReconcileResult(
                event_type=PAYMENT_SUCCEEDED,
                action="ignored",
                payment_intent_id=intent_id
            )

        amount = _minor_units(intent.get("amount"))
        base_amount, tip_amount = split_amount(
            amount, metadata.get("baseRate"), metadata.get("tipAmount")
        )

        transaction = PaymentTransactionCreate(
            ticket_id=ticket_id,
            job_id=_text(metadata.get("jobId")),
            amount=amount,
            base_amount=base_amount,
            tip_amount=tip_amount,
            currency=_text(intent.get("currency")) or self.default_currency,
            stripe_payment_intent_id=intent_id,
        )

        _, created = self.transaction_repository.record_transaction(transaction)

        ticket = self.ticket_repository.mark_paid(ticket_id, intent_id)
        if ticket is None:
            # Transaction stays recorded; redelivery retries the ticket update
            raise StoreFailureError(f"Ticket {ticket_id} could not be marked paid")

        ticket_code = metadata.get("ticketCode") or ticket_id
        if created:
            logger.info(f"Payment succeeded for ticket {ticket_code}: ${amount / 100:.2f}")
        else:
            logger.info(f"Duplicate delivery of {intent_id} for ticket {ticket_code}; already recorded")

        return ReconcileResult(
            event_type=PAYMENT_SUCCEEDED,
            action="recorded" if created else "duplicate",
            ticket_id=ticket_id,
            payment_intent_id=intent_id
        )
