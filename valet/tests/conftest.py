"""
pytest configuration and shared fixtures for service and route tests
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import MagicMock

import pytest

from valet.models.schemas import (
    Job,
    PaymentTransaction,
    PaymentTransactionCreate,
    Ticket,
    TicketStatus,
    Vehicle,
)
from valet.services.stripe_client import PaymentIntentHandle


class InMemoryStore:
    """
    In-memory stand-in for the ticket and transaction repositories.

    Implements the methods of TicketRepository and
    PaymentTransactionRepository that the services call.
    """

    def __init__(self):
        self.tickets: Dict[str, Dict[str, Any]] = {}
        self.jobs: Dict[str, Dict[str, Any]] = {}
        self.vehicles: Dict[str, Dict[str, Any]] = {}
        self.transactions: List[Dict[str, Any]] = []
        self.fail_mark_paid = False

    # Seeding
    def add_job(self, job_id: str = "J1", payment_config: Optional[dict] = None, **fields) -> Dict[str, Any]:
        row = {"id": job_id, "title": "Harbor Gala", "location": "1 Pier Ave",
               "payment_config": payment_config, **fields}
        self.jobs[job_id] = row
        return row

    def add_ticket(self, ticket_id: str = "T1", status: str = "PARKED", job_id: str = "J1", **fields) -> Dict[str, Any]:
        row = {"id": ticket_id, "ticket_code": f"CODE-{ticket_id}", "status": status,
               "job_id": job_id, "payment_status": "unpaid", **fields}
        self.tickets[ticket_id] = row
        return row

    # TicketRepository
    def get_ticket(self, ticket_id: str) -> Optional[Ticket]:
        row = self.tickets.get(ticket_id)
        return Ticket.model_validate(row) if row else None

    def get_ticket_by_code(self, ticket_code: str) -> Optional[Ticket]:
        for row in self.tickets.values():
            if row["ticket_code"] == ticket_code:
                return Ticket.model_validate(row)
        return None

    def get_job(self, job_id: str) -> Optional[Job]:
        row = self.jobs.get(job_id)
        return Job.model_validate(row) if row else None

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        row = self.vehicles.get(vehicle_id)
        return Vehicle.model_validate(row) if row else None

    async def get_ticket_by_code_async(self, ticket_code: str) -> Optional[Ticket]:
        return self.get_ticket_by_code(ticket_code)

    async def get_job_async(self, job_id: str) -> Optional[Job]:
        return self.get_job(job_id)

    async def get_vehicle_async(self, vehicle_id: str) -> Optional[Vehicle]:
        return self.get_vehicle(vehicle_id)

    def request_car(self, ticket_id: str, requested_at: datetime) -> Optional[Ticket]:
        row = self.tickets.get(ticket_id)
        if row is None or row["status"] not in ("PARKED", "OVERNIGHT_PARKED"):
            return None
        row.update(status=TicketStatus.REQUESTED.value, requested_at=requested_at.isoformat())
        return Ticket.model_validate(row)

    def mark_paid(self, ticket_id: str, payment_intent_id: str) -> Optional[Ticket]:
        if self.fail_mark_paid:
            from valet.utils.errors import StoreFailureError
            raise StoreFailureError("Failed to update ticket")
        row = self.tickets.get(ticket_id)
        if row is None:
            return None
        row.update(payment_status="paid", payment_intent_id=payment_intent_id)
        return Ticket.model_validate(row)

    # PaymentTransactionRepository
    def get_by_intent_id(self, payment_intent_id: str) -> Optional[PaymentTransaction]:
        for row in self.transactions:
            if row["stripe_payment_intent_id"] == payment_intent_id:
                return PaymentTransaction.model_validate(row)
        return None

    def record_transaction(self, transaction: PaymentTransactionCreate) -> Tuple[PaymentTransaction, bool]:
        existing = self.get_by_intent_id(transaction.stripe_payment_intent_id)
        if existing is not None:
            return existing, False
        row = {"id": f"PT{len(self.transactions) + 1}", **transaction.model_dump(mode="json")}
        self.transactions.append(row)
        return PaymentTransaction.model_validate(row), True


class FakePaymentProvider:
    """Records intent requests instead of calling Stripe"""

    def __init__(self):
        self.calls: List[Dict[str, Any]] = []

    def create_payment_intent(self, amount, metadata, idempotency_key=None) -> PaymentIntentHandle:
        self.calls.append({"amount": amount, "metadata": metadata, "idempotency_key": idempotency_key})
        intent_id = f"pi_{len(self.calls)}"
        return PaymentIntentHandle(
            id=intent_id,
            client_secret=f"{intent_id}_secret_abc",
            amount=amount,
            currency="usd",
        )


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def provider() -> FakePaymentProvider:
    return FakePaymentProvider()


@pytest.fixture
def guest_pays_config() -> dict:
    """Job payment config as stored by the operator console"""
    return {"model": "GUEST_PAYS", "baseRate": 500, "allowTips": True, "timing": "AT_DROPOFF"}


@pytest.fixture
def mock_supabase():
    """Mocked Supabase client"""
    client = MagicMock()

    # Table chainable methods
    client.table.return_value = client
    client.insert.return_value = client
    client.upsert.return_value = client
    client.update.return_value = client
    client.select.return_value = client
    client.eq.return_value = client
    client.in_.return_value = client
    client.order.return_value = client
    client.limit.return_value = client

    # Default execute response
    client.execute.return_value = MagicMock(data=[], count=0)

    return client


def _succeeded_event(
    intent_id: str = "pi_123",
    ticket_id: str = "T1",
    amount: int = 1500,
    base_rate: str = "500",
    tip_amount: str = "1000",
    **metadata
) -> Dict[str, Any]:
    """payment_intent.succeeded event as Stripe delivers it"""
    return {
        "id": f"evt_{intent_id}",
        "type": "payment_intent.succeeded",
        "data": {
            "object": {
                "id": intent_id,
                "object": "payment_intent",
                "amount": amount,
                "currency": "usd",
                "metadata": {
                    "ticketId": ticket_id,
                    "jobId": "J1",
                    "ticketCode": f"CODE-{ticket_id}",
                    "baseRate": base_rate,
                    "tipAmount": tip_amount,
                    **metadata,
                },
            }
        },
    }


@pytest.fixture(name="succeeded_event")
def succeeded_event_fixture():
    """Factory for payment_intent.succeeded events"""
    return _succeeded_event
