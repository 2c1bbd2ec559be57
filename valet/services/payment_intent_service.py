"""
Payment intent service

Creates the provider payment intent behind the guest payment form. The
charge is computed here from the job's payment configuration, never taken
from the client, and the breakdown is embedded in the intent metadata so
webhook reconciliation needs no further lookup.
"""
import time
from typing import Callable, Dict, Optional

from valet.models.schemas import Job, Ticket
from valet.services import payment_policy
from valet.utils.errors import InvalidAmountError, InvalidInputError, NotFoundError
from valet.utils.logger import get_logger

logger = get_logger(__name__)


class PaymentIntentService:
    """
    Resolve a ticket's charge and request a payment intent for it

    Collaborators:
        ticket_repository: TicketRepository (or a compatible fake)
        provider: StripePaymentProvider (or a compatible fake)
    """

    def __init__(
        self,
        ticket_repository,
        provider,
        idempotency_window_seconds: int = 300,
        clock: Callable[[], float] = time.time
    ):
        self.ticket_repository = ticket_repository
        self.provider = provider
        self.idempotency_window_seconds = idempotency_window_seconds
        self.clock = clock

    @staticmethod
    def build_metadata(ticket: Ticket, job: Optional[Job], base_rate: int, tip_amount: int) -> Dict[str, str]:
        """Provider metadata is untyped key/value, so every field is a string"""
        return {
            "ticketId": ticket.id,
            "jobId": job.id if job else (ticket.job_id or ""),
            "ticketCode": ticket.ticket_code or "",
            "baseRate": str(base_rate),
            "tipAmount": str(tip_amount),
        }

    def idempotency_key(self, ticket_id: str, tip_amount: int) -> Optional[str]:
        """Same ticket and tip inside one time bucket map to one intent"""
        if self.idempotency_window_seconds <= 0:
            return None
        bucket = int(self.clock() // self.idempotency_window_seconds)
        return f"ticket_{ticket_id}_tip_{tip_amount}_{bucket}"

    def create_intent(self, ticket_id: str, tip_dollars=0) -> str:
        """
        Create a payment intent for a ticket

        Args:
            ticket_id: Ticket primary key
            tip_dollars: Guest-selected tip in major units

        Returns:
            Client handle (client secret) for the payment form

        Raises:
            InvalidInputError: Missing ticket id or invalid tip
            NotFoundError: Ticket does not exist
            InvalidAmountError: Total is zero or negative
            ProviderFailureError / StoreFailureError: Collaborator failures
        """
        if not ticket_id:
            raise InvalidInputError("ticketId is required")

        tip_amount = payment_policy.tip_to_minor_units(tip_dollars)

        ticket = self.ticket_repository.get_ticket(ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")

        job = self.ticket_repository.get_job(ticket.job_id) if ticket.job_id else None
        config = job.payment_config if job else None
        # Free jobs only collect tips; their base rate is never charged
        base_rate = config.base_rate if payment_policy.is_guest_payable(config) else 0

        total_amount = payment_policy.compute_total(base_rate, tip_dollars)
        if total_amount <= 0:
            logger.warning(f"Rejected zero-amount payment intent for ticket {ticket_id}")
            raise InvalidAmountError()

        intent = self.provider.create_payment_intent(
            amount=total_amount,
            metadata=self.build_metadata(ticket, job, base_rate, tip_amount),
            idempotency_key=self.idempotency_key(ticket.id, tip_amount)
        )

        logger.info(
            f"Created payment intent {intent.id} for ticket {ticket.ticket_code or ticket.id}: "
            f"{total_amount} (base {base_rate}, tip {tip_amount})"
        )
        return intent.client_secret
