"""
Guest status view

Folds the latest ticket, job and vehicle into the state the guest page
renders. Called again on every ticket update.
"""
from typing import Optional

from valet.models.schemas import Job, StatusView, Ticket, Vehicle
from valet.services import payment_policy, status_model


def build_status_view(
    ticket: Ticket,
    job: Optional[Job] = None,
    vehicle: Optional[Vehicle] = None,
) -> StatusView:
    """Derive the guest page state from the latest ticket, job and vehicle."""
    status = ticket.status
    config = job.payment_config if job else None
    show_payment = payment_policy.should_offer_payment(config, status)
    complete = status_model.is_terminal(status)

    return StatusView(
        phase=status_model.phase_of(status),
        is_complete=complete,
        headline=status_model.headline(status),
        subtext=status_model.subtext(status),
        show_timeline=not complete,
        timeline=status_model.timeline(status),
        show_request_button=status_model.is_parked(status),
        show_payment=show_payment,
        show_tip_only=payment_policy.should_offer_tip_only(config, status),
        payment_base_rate=config.base_rate if show_payment else 0,
        parking_location=ticket.parking_location,
        vehicle_description=vehicle.description if vehicle else "",
    )
