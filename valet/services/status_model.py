"""
Ticket status model

Maps detailed ticket statuses onto the six guest-facing timeline phases and
derives the texts shown for each phase. Everything here is a pure function
of its arguments.
"""
from typing import List, Optional, Union

from valet.models.schemas import Phase, TicketStatus, TimelineStep

StatusLike = Union[str, TicketStatus, None]

STATUS_PHASES = {
    TicketStatus.CREATED: Phase.CHECKED_IN,
    TicketStatus.QUEUED: Phase.CHECKED_IN,
    TicketStatus.CLAIMED: Phase.CHECKED_IN,
    TicketStatus.PARKING_IN_PROGRESS: Phase.CHECKED_IN,
    TicketStatus.PARKED: Phase.PARKED,
    TicketStatus.OVERNIGHT_PARKED: Phase.PARKED,
    TicketStatus.REQUESTED: Phase.REQUESTED,
    TicketStatus.RETRIEVAL_IN_PROGRESS: Phase.ON_THE_WAY,
    TicketStatus.READY: Phase.READY,
    TicketStatus.COMPLETED: Phase.TERMINAL,
    TicketStatus.CLOSED: Phase.TERMINAL,
    TicketStatus.DELIVERED: Phase.TERMINAL,
}

_unclassified = set(TicketStatus) - set(STATUS_PHASES)
if _unclassified:
    raise RuntimeError(
        f"Ticket statuses without a timeline phase: {sorted(s.value for s in _unclassified)}"
    )

# (headline, subtext)
PHASE_TEXT = {
    Phase.CHECKED_IN: (
        "Your vehicle is being checked in",
        "A valet attendant is handling your vehicle",
    ),
    Phase.PARKED: (
        "Your vehicle is parked and secure",
        "Your keys are safe with us. Request your car when you're ready to leave.",
    ),
    Phase.REQUESTED: (
        "We've received your request",
        "A valet attendant will retrieve your car shortly",
    ),
    Phase.ON_THE_WAY: (
        "Your car is on its way!",
        "Your car is being brought to the front",
    ),
    Phase.READY: (
        "Your car is ready!",
        "Your car is waiting at the front",
    ),
    Phase.TERMINAL: (
        "Thank you! Have a great night",
        "We hope you had a great experience",
    ),
}
DEFAULT_TEXT = ("Vehicle Status", "")

TIMELINE_STEPS = [
    ("checked_in", "Checked In"),
    ("parked", "Parked"),
    ("requested", "Requested"),
    ("on_the_way", "On the Way"),
    ("ready", "Ready"),
]


def parse_status(status: StatusLike) -> Optional[TicketStatus]:
    """Return the TicketStatus for a raw value, or None if unrecognized."""
    if isinstance(status, TicketStatus):
        return status
    try:
        return TicketStatus(status)
    except (ValueError, TypeError):
        return None


def phase_of(status: StatusLike) -> Phase:
    """Timeline phase of a status; unrecognized statuses fall into CHECKED_IN."""
    parsed = parse_status(status)
    if parsed is None:
        return Phase.CHECKED_IN
    return STATUS_PHASES[parsed]


def phase_index(status: StatusLike) -> int:
    """Position 0..5 of the status on the timeline. Never raises."""
    return int(phase_of(status))


def is_terminal(status: StatusLike) -> bool:
    return phase_of(status) == Phase.TERMINAL


def is_parked(status: StatusLike) -> bool:
    """True while the guest may request the car."""
    parsed = parse_status(status)
    return parsed is not None and STATUS_PHASES[parsed] == Phase.PARKED


def headline(status: StatusLike) -> str:
    if parse_status(status) is None:
        return DEFAULT_TEXT[0]
    return PHASE_TEXT[phase_of(status)][0]


def subtext(status: StatusLike) -> str:
    if parse_status(status) is None:
        return DEFAULT_TEXT[1]
    return PHASE_TEXT[phase_of(status)][1]


def timeline(status: StatusLike) -> List[TimelineStep]:
    """
    Timeline steps for a status.

    Steps before the current phase are complete, the step of the current
    phase is current, later steps are pending. A terminal status marks every
    step complete and none current.
    """
    current = phase_index(status)
    steps = []
    for index, (key, label) in enumerate(TIMELINE_STEPS):
        if index < current:
            state = "complete"
        elif index == current:
            state = "current"
        else:
            state = "pending"
        steps.append(TimelineStep(key=key, label=label, state=state))
    return steps

