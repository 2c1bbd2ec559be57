"""
Tests for TicketRepository
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from valet.repositories.ticket_repository import TicketRepository
from valet.utils.errors import StoreFailureError


@pytest.fixture
def ticket_repository(mock_supabase):
    return TicketRepository(supabase_client=mock_supabase)


@pytest.fixture
def ticket_row():
    return {
        "id": "00000000-0000-0000-0000-0000000000a1",
        "ticket_code": "DEMO01",
        "status": "PARKED",
        "job_id": "00000000-0000-0000-0000-000000000001",
        "vehicle_id": None,
        "payment_status": "unpaid",
        "parking_zone": "B",
        "parking_spot": "14",
    }


class TestReads:

    def test_get_ticket(self, ticket_repository, mock_supabase, ticket_row):
        mock_supabase.execute.return_value = MagicMock(data=[ticket_row])

        ticket = ticket_repository.get_ticket(ticket_row["id"])

        assert ticket.ticket_code == "DEMO01"
        assert ticket.parking_location == "B / 14"
        mock_supabase.table.assert_called_with("tickets")
        mock_supabase.eq.assert_called_with("id", ticket_row["id"])

    def test_get_ticket_by_code(self, ticket_repository, mock_supabase, ticket_row):
        mock_supabase.execute.return_value = MagicMock(data=[ticket_row])

        ticket = ticket_repository.get_ticket_by_code("DEMO01")

        assert ticket.id == ticket_row["id"]
        mock_supabase.eq.assert_called_with("ticket_code", "DEMO01")

    def test_missing_ticket(self, ticket_repository, mock_supabase):
        mock_supabase.execute.return_value = MagicMock(data=[])

        assert ticket_repository.get_ticket("nope") is None

    def test_get_job_parses_payment_config(self, ticket_repository, mock_supabase):
        mock_supabase.execute.return_value = MagicMock(data=[{
            "id": "J1",
            "title": "Harbor Gala",
            "location": "1 Pier Ave",
            "payment_config": {"model": "GUEST_PAYS", "baseRate": 500, "allowTips": True, "timing": "AT_DROPOFF"},
        }])

        job = ticket_repository.get_job("J1")

        assert job.payment_config.base_rate == 500
        assert job.payment_config.timing.value == "AT_DROPOFF"
        mock_supabase.table.assert_called_with("jobs")

    def test_get_vehicle(self, ticket_repository, mock_supabase):
        mock_supabase.execute.return_value = MagicMock(data=[{
            "make": "Tesla", "model": "Model 3", "color": "Red", "license_plate": "7ABC123",
        }])

        vehicle = ticket_repository.get_vehicle("V1")

        assert vehicle.description == "Red Tesla Model 3 • 7ABC123"

    def test_read_failure(self, ticket_repository, mock_supabase):
        mock_supabase.execute.side_effect = Exception("connection reset")

        with pytest.raises(StoreFailureError):
            ticket_repository.get_ticket("T1")

    @pytest.mark.asyncio
    async def test_async_lookup(self, ticket_repository, mock_supabase, ticket_row):
        mock_supabase.execute.return_value = MagicMock(data=[ticket_row])

        ticket = await ticket_repository.get_ticket_by_code_async("DEMO01")

        assert ticket.ticket_code == "DEMO01"


class TestUpdates:

    def test_request_car_is_conditional_on_parked(self, ticket_repository, mock_supabase, ticket_row):
        mock_supabase.execute.return_value = MagicMock(data=[{**ticket_row, "status": "REQUESTED"}])
        requested_at = datetime(2026, 10, 19, 21, 30, tzinfo=timezone.utc)

        ticket = ticket_repository.request_car(ticket_row["id"], requested_at)

        assert ticket.status == "REQUESTED"
        update = mock_supabase.update.call_args[0][0]
        assert update == {"status": "REQUESTED", "requested_at": requested_at.isoformat()}
        mock_supabase.in_.assert_called_once_with("status", ["PARKED", "OVERNIGHT_PARKED"])

    def test_request_car_no_match(self, ticket_repository, mock_supabase):
        mock_supabase.execute.return_value = MagicMock(data=[])

        assert ticket_repository.request_car("T1", datetime.now(timezone.utc)) is None

    def test_mark_paid(self, ticket_repository, mock_supabase, ticket_row):
        mock_supabase.execute.return_value = MagicMock(data=[{
            **ticket_row, "payment_status": "paid", "payment_intent_id": "pi_123",
        }])

        ticket = ticket_repository.mark_paid(ticket_row["id"], "pi_123")

        assert ticket.is_paid
        update = mock_supabase.update.call_args[0][0]
        assert update == {"payment_status": "paid", "payment_intent_id": "pi_123"}
        mock_supabase.in_.assert_not_called()

    def test_update_failure(self, ticket_repository, mock_supabase):
        mock_supabase.execute.side_effect = Exception("timeout")

        with pytest.raises(StoreFailureError):
            ticket_repository.mark_paid("T1", "pi_123")
