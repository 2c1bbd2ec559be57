"""
Guest car request

The only ticket status change a guest can make: PARKED or OVERNIGHT_PARKED
to REQUESTED, stamping requested_at.
"""
from datetime import datetime, timezone
from typing import Callable

from valet.models.schemas import Ticket
from valet.services import status_model
from valet.utils.errors import InvalidInputError, InvalidTransitionError, NotFoundError
from valet.utils.logger import get_logger

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TicketRequestHandler:
    """Handle "Request My Car" from the guest page"""

    def __init__(self, ticket_repository, clock: Callable[[], datetime] = _utcnow):
        self.ticket_repository = ticket_repository
        self.clock = clock

    def request_car(self, ticket_id: str) -> Ticket:
        """
        Request the car for a parked ticket

        Returns:
            The updated ticket

        Raises:
            InvalidInputError: Missing ticket id
            NotFoundError: Ticket does not exist
            InvalidTransitionError: Ticket is not parked, or an operator
                moved it out of the parked phase before the update landed
        """
        if not ticket_id:
            raise InvalidInputError("ticketId is required")

        ticket = self.ticket_repository.get_ticket(ticket_id)
        if ticket is None:
            raise NotFoundError("Ticket not found")

        if not status_model.is_parked(ticket.status):
            logger.info(f"Car request for ticket {ticket.ticket_code} rejected in status {ticket.status}")
            raise InvalidTransitionError(f"Car cannot be requested while ticket is {ticket.status}")

        updated = self.ticket_repository.request_car(ticket.id, self.clock())
        if updated is None:
            logger.info(f"Car request for ticket {ticket.ticket_code} lost to a concurrent status change")
            raise InvalidTransitionError("Ticket status changed; car cannot be requested")

        logger.info(f"Car requested for ticket {ticket.ticket_code}")
        return updated
