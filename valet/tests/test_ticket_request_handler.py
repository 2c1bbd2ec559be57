"""
Tests for the guest car request
"""
from datetime import datetime, timezone

import pytest

from valet.models.schemas import TicketStatus
from valet.services.ticket_request_handler import TicketRequestHandler
from valet.utils.errors import InvalidInputError, InvalidTransitionError, NotFoundError

NOW = datetime(2026, 10, 19, 21, 30, tzinfo=timezone.utc)


@pytest.fixture
def handler(store):
    return TicketRequestHandler(store, clock=lambda: NOW)


class TestRequestCar:

    @pytest.mark.parametrize("status", ["PARKED", "OVERNIGHT_PARKED"])
    def test_parked_ticket_is_requested(self, handler, store, status):
        store.add_ticket("T1", status=status)

        ticket = handler.request_car("T1")

        assert ticket.status == "REQUESTED"
        assert ticket.requested_at == NOW
        assert store.tickets["T1"]["status"] == "REQUESTED"

    @pytest.mark.parametrize(
        "status",
        [s.value for s in TicketStatus if s not in (TicketStatus.PARKED, TicketStatus.OVERNIGHT_PARKED)]
    )
    def test_other_statuses_are_rejected(self, handler, store, status):
        store.add_ticket("T1", status=status)

        with pytest.raises(InvalidTransitionError):
            handler.request_car("T1")
        assert store.tickets["T1"]["status"] == status

    def test_ready_ticket_is_left_alone(self, handler, store):
        store.add_ticket("T1", status="READY")

        with pytest.raises(InvalidTransitionError):
            handler.request_car("T1")
        assert store.tickets["T1"]["status"] == "READY"
        assert "requested_at" not in store.tickets["T1"]

    def test_unknown_ticket(self, handler):
        with pytest.raises(NotFoundError):
            handler.request_car("nope")

    def test_missing_ticket_id(self, handler):
        with pytest.raises(InvalidInputError):
            handler.request_car("")

    def test_lost_race_with_operator(self, store):
        """Status changed between the read and the conditional update"""
        class RacingStore:
            def get_ticket(self, ticket_id):
                return store.get_ticket(ticket_id)

            def request_car(self, ticket_id, requested_at):
                store.tickets[ticket_id]["status"] = "RETRIEVAL_IN_PROGRESS"
                return store.request_car(ticket_id, requested_at)

        store.add_ticket("T1", status="PARKED")

        with pytest.raises(InvalidTransitionError):
            TicketRequestHandler(RacingStore(), clock=lambda: NOW).request_car("T1")
        assert store.tickets["T1"]["status"] == "RETRIEVAL_IN_PROGRESS"
