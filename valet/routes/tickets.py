"""
Guest ticket routes

Status page data, the live status stream, and the guest car request.
Tickets are looked up by the code in the guest's link; the car request
addresses the ticket by id.
"""
import asyncio
import json
import time
from typing import Any, AsyncGenerator, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from valet.dependencies import (
    get_live_channel,
    get_ticket_repository,
    get_ticket_request_handler,
)
from valet.models.schemas import (
    ErrorResponse,
    GuestTicketResponse,
    JobSummary,
    RequestCarRequest,
    RequestCarResponse,
)
from valet.repositories.ticket_repository import TicketRepository
from valet.services.live_status import LiveStatusChannel, TicketStatusSession, ticket_events
from valet.services.ticket_request_handler import TicketRequestHandler
from valet.utils.errors import InvalidInputError, NotFoundError
from valet.utils.logger import get_logger
from valet.utils.validators import validate_ticket_code

logger = get_logger(__name__)

router = APIRouter(prefix="/api/tickets", tags=["tickets"])

HEARTBEAT_SECONDS = 30.0


async def load_session(repository: TicketRepository, ticket_code: str) -> TicketStatusSession:
    """Load ticket, job and vehicle for a guest link"""
    if not validate_ticket_code(ticket_code):
        raise InvalidInputError("Invalid ticket code")

    ticket = await repository.get_ticket_by_code_async(ticket_code)
    if ticket is None:
        raise NotFoundError(f"No ticket found for code {ticket_code}")

    job = await repository.get_job_async(ticket.job_id) if ticket.job_id else None
    vehicle = await repository.get_vehicle_async(ticket.vehicle_id) if ticket.vehicle_id else None
    return TicketStatusSession(ticket, job, vehicle)


async def sse_generator(
    events: AsyncGenerator[Dict[str, Any], None]
) -> AsyncGenerator[str, None]:
    """
    Convert event stream to SSE format.

    Format:
        data: {"type": "event_name", "data": {...}}\\n\\n
    """
    try:
        async for event in events:
            yield f"data: {json.dumps(event)}\n\n"
    except Exception as e:
        logger.error(f"SSE streaming error: {e}")
        error_event = {
            "type": "error",
            "message": "Live updates interrupted",
            "timestamp": time.time(),
        }
        yield f"data: {json.dumps(error_event)}\n\n"
    finally:
        await events.aclose()


@router.post(
    "/request-car",
    response_model=RequestCarResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def request_car(
    request: RequestCarRequest,
    handler: TicketRequestHandler = Depends(get_ticket_request_handler)
):
    """Guest asks for the car; only legal while the ticket is parked"""
    ticket = await asyncio.to_thread(handler.request_car, request.ticket_id)
    return RequestCarResponse(ticket=ticket)


@router.get(
    "/{ticket_code}",
    response_model=GuestTicketResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_guest_ticket(
    ticket_code: str,
    repository: TicketRepository = Depends(get_ticket_repository)
):
    """Ticket status page data: ticket, venue, vehicle and derived view"""
    session = await load_session(repository, ticket_code)
    job = session.job
    return GuestTicketResponse(
        ticket=session.ticket,
        job=JobSummary(id=job.id, title=job.title, location=job.location) if job else None,
        vehicle=session.vehicle,
        view=session.view,
    )


@router.get(
    "/{ticket_code}/events",
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def stream_ticket_events(
    ticket_code: str,
    repository: TicketRepository = Depends(get_ticket_repository),
    channel: LiveStatusChannel = Depends(get_live_channel)
):
    """
    Live status stream (Server-Sent Events)

    Sends the current snapshot, then the recomputed ticket and view on every
    update of the ticket row.
    """
    session = await load_session(repository, ticket_code)
    events = ticket_events(session, channel, heartbeat_seconds=HEARTBEAT_SECONDS)
    return StreamingResponse(
        sse_generator(events),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
