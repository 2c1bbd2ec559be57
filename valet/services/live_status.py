"""
Live ticket status

A guest page keeps one TicketStatusSession per ticket. Every row pushed by
the live channel replaces the session's ticket snapshot wholesale and the
view is recomputed from scratch; nothing derived is carried across updates.
"""
import asyncio
import time
from typing import Any, AsyncGenerator, Awaitable, Callable, Dict, Optional, Protocol

from valet.models.schemas import Job, StatusView, Ticket, Vehicle
from valet.services.status_view import build_status_view
from valet.utils.logger import get_logger

logger = get_logger(__name__)

Unsubscribe = Callable[[], Awaitable[None]]


class LiveStatusChannel(Protocol):
    """Pushes full ticket rows for one ticket id"""

    async def subscribe(
        self,
        ticket_id: str,
        callback: Callable[[Dict[str, Any]], None]
    ) -> Unsubscribe:
        ...


class TicketStatusSession:
    """Latest known ticket plus the job and vehicle loaded with it"""

    def __init__(self, ticket: Ticket, job: Optional[Job] = None, vehicle: Optional[Vehicle] = None):
        self.ticket = ticket
        self.job = job
        self.vehicle = vehicle

    @property
    def view(self) -> StatusView:
        return build_status_view(self.ticket, self.job, self.vehicle)

    def apply_snapshot(self, row: Dict[str, Any]) -> Optional[StatusView]:
        """
        Replace the ticket with a pushed row

        Returns:
            The recomputed view, or None if the row is for another ticket
        """
        if str(row.get("id")) != self.ticket.id:
            return None
        self.ticket = Ticket.model_validate(row)
        return self.view

    def to_payload(self) -> Dict[str, Any]:
        return {
            "ticket": self.ticket.model_dump(mode="json"),
            "view": self.view.model_dump(mode="json"),
        }


def extract_record(payload: Any) -> Optional[Dict[str, Any]]:
    """New row of a Realtime postgres_changes payload"""
    if not isinstance(payload, dict):
        return None
    data = payload.get("data", payload)
    if not isinstance(data, dict):
        return None
    record = data.get("record") or data.get("new")
    return record if isinstance(record, dict) else None


class SupabaseRealtimeChannel:
    """
    LiveStatusChannel over Supabase Realtime

    Subscribes to UPDATE events on public.tickets filtered to one id.
    """

    def __init__(self, client_factory=None):
        if client_factory is None:
            from valet.services.supabase_client import create_async_supabase_client

            client_factory = create_async_supabase_client
        self.client_factory = client_factory

    async def subscribe(
        self,
        ticket_id: str,
        callback: Callable[[Dict[str, Any]], None]
    ) -> Unsubscribe:
        client = await self.client_factory()
        channel = client.channel(f"ticket-{ticket_id}")

        def on_change(payload):
            record = extract_record(payload)
            if record is not None:
                callback(record)

        channel.on_postgres_changes(
            "UPDATE",
            schema="public",
            table="tickets",
            filter=f"id=eq.{ticket_id}",
            callback=on_change
        )
        await channel.subscribe()
        logger.debug(f"Subscribed to live updates for ticket {ticket_id}")

        async def unsubscribe() -> None:
            await client.remove_channel(channel)
            logger.debug(f"Unsubscribed from live updates for ticket {ticket_id}")

        return unsubscribe


async def ticket_events(
    session: TicketStatusSession,
    channel: LiveStatusChannel,
    heartbeat_seconds: float = 30.0
) -> AsyncGenerator[Dict[str, Any], None]:
    """
    Stream status events for one session

    Yields a `snapshot` event first, then an `update` event for each pushed
    row of this ticket, and a `heartbeat` event whenever the channel has been
    quiet for `heartbeat_seconds`.
    """
    queue: asyncio.Queue = asyncio.Queue()
    unsubscribe = await channel.subscribe(session.ticket.id, queue.put_nowait)

    try:
        yield {"type": "snapshot", "data": session.to_payload()}

        while True:
            try:
                row = await asyncio.wait_for(queue.get(), timeout=heartbeat_seconds)
            except asyncio.TimeoutError:
                yield {"type": "heartbeat", "timestamp": time.time()}
                continue

            if session.apply_snapshot(row) is None:
                continue
            yield {"type": "update", "data": session.to_payload()}
    finally:
        await unsubscribe()
