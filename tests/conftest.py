"""
Pytest configuration and fixtures
"""
import pytest
from typing import Dict, Any


@pytest.fixture
def sample_ticket_row() -> Dict[str, Any]:
    """Ticket row as returned by Supabase"""
    return {
        "id": "5b1d2f7e-0c3a-4d2e-9a51-3f1f8f2c9a10",
        "ticket_code": "DEMO01",
        "status": "PARKED",
        "created_at": "2026-10-19T19:02:11+00:00",
        "parked_at": "2026-10-19T19:09:40+00:00",
        "requested_at": None,
        "completed_at": None,
        "parking_zone": "B",
        "parking_level": "2",
        "parking_spot": "14",
        "payment_status": "unpaid",
        "payment_intent_id": None,
        "vehicle_id": "9d3e1c55-8f0b-4f1e-b0d1-77c2a5e4e001",
        "job_id": "00000000-0000-0000-0000-000000000001",
    }


@pytest.fixture
def sample_job_row() -> Dict[str, Any]:
    """Job row with an operator-written payment config"""
    return {
        "id": "00000000-0000-0000-0000-000000000001",
        "title": "Harbor Gala",
        "location": "1 Pier Ave",
        "payment_config": {
            "model": "GUEST_PAYS",
            "baseRate": 500,
            "allowTips": True,
            "timing": "AT_DROPOFF",
        },
    }
