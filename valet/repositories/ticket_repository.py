"""
Ticket Repository

Reads tickets together with their job and vehicle, and performs the two
ticket writes this service owns: the guest's car request and the payment
fields set by webhook reconciliation. All other status transitions belong to
the valet operations system.
"""
from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from valet.models.schemas import Job, PaymentStatus, Ticket, TicketStatus, Vehicle
from valet.utils.errors import StoreFailureError
from valet.utils.logger import get_logger


logger = get_logger(__name__)

PARKED_STATUSES = (TicketStatus.PARKED.value, TicketStatus.OVERNIGHT_PARKED.value)


class TicketRepository:
    """Repository for tickets, jobs and vehicles tables."""

    def __init__(self, supabase_client=None) -> None:
        if supabase_client is None:
            from valet.services.supabase_client import get_supabase_client  # Lazy import for tests

            self.client = get_supabase_client()
        else:
            self.client = supabase_client

        self.table_name = "tickets"
        logger.info("TicketRepository initialized for table: %s", self.table_name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _first(rows: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
        return rows[0] if rows else None

    def _select_one(self, table: str, columns: str, column: str, value: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.client.table(table) \
                .select(columns) \
                .eq(column, value) \
                .limit(1) \
                .execute()
        except Exception as exc:
            logger.error("Failed to read %s where %s=%s: %s", table, column, value, exc)
            raise StoreFailureError(f"Failed to read {table}") from exc

        return self._first(response.data)

    def _update_ticket(
        self,
        ticket_id: str,
        updates: Dict[str, Any],
        *,
        only_statuses: Optional[Iterable[str]] = None
    ) -> Optional[Ticket]:
        try:
            query = self.client.table(self.table_name) \
                .update(updates) \
                .eq("id", ticket_id)
            if only_statuses is not None:
                query = query.in_("status", list(only_statuses))
            response = query.execute()
        except Exception as exc:
            logger.error("Failed to update ticket %s: %s", ticket_id, exc)
            raise StoreFailureError("Failed to update ticket") from exc

        row = self._first(response.data)
        return Ticket.model_validate(row) if row else None

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------
    def get_ticket(self, ticket_id: str) -> Optional[Ticket]:
        """Fetch a ticket by primary key."""
        row = self._select_one(self.table_name, "*", "id", ticket_id)
        return Ticket.model_validate(row) if row else None

    def get_ticket_by_code(self, ticket_code: str) -> Optional[Ticket]:
        """Fetch a ticket by the human-readable code in the guest's link."""
        row = self._select_one(self.table_name, "*", "ticket_code", ticket_code)
        return Ticket.model_validate(row) if row else None

    def get_job(self, job_id: str) -> Optional[Job]:
        row = self._select_one("jobs", "id, title, location, payment_config", "id", job_id)
        return Job.model_validate(row) if row else None

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        row = self._select_one("vehicles", "make, model, color, license_plate", "id", vehicle_id)
        return Vehicle.model_validate(row) if row else None

    async def get_ticket_by_code_async(self, ticket_code: str) -> Optional[Ticket]:
        return await asyncio.to_thread(self.get_ticket_by_code, ticket_code)

    async def get_job_async(self, job_id: str) -> Optional[Job]:
        return await asyncio.to_thread(self.get_job, job_id)

    async def get_vehicle_async(self, vehicle_id: str) -> Optional[Vehicle]:
        return await asyncio.to_thread(self.get_vehicle, vehicle_id)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------
    def request_car(self, ticket_id: str, requested_at: datetime) -> Optional[Ticket]:
        """
        Move a parked ticket to REQUESTED.

        The status filter makes the update conditional, so a ticket that an
        operator moved out of the parked phase in the meantime is left alone
        and None is returned.
        """
        return self._update_ticket(
            ticket_id,
            {
                "status": TicketStatus.REQUESTED.value,
                "requested_at": requested_at.isoformat(),
            },
            only_statuses=PARKED_STATUSES
        )

    def mark_paid(self, ticket_id: str, payment_intent_id: str) -> Optional[Ticket]:
        """Set payment status to paid and store the provider reference."""
        return self._update_ticket(
            ticket_id,
            {
                "payment_status": PaymentStatus.PAID.value,
                "payment_intent_id": payment_intent_id,
            }
        )
