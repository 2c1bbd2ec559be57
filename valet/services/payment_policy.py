"""
Payment policy

Decides from a job's PaymentConfig and the ticket's current status whether
the guest page offers the payment form, the tip-only form, or neither, and
computes charges in minor currency units. Eligibility is recomputed from the
latest (config, status) on every call; nothing is cached.
"""
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from valet.models.schemas import ChargeModel, PaymentConfig, PaymentTiming, TicketStatus
from valet.services.status_model import StatusLike, parse_status
from valet.utils.errors import InvalidInputError

GUEST_PAYABLE_MODELS = frozenset({ChargeModel.GUEST_PAYS, ChargeModel.PAID})

DROPOFF_WINDOW = frozenset({
    TicketStatus.QUEUED,
    TicketStatus.PARKED,
    TicketStatus.PARKING_IN_PROGRESS,
})
PICKUP_WINDOW = frozenset({TicketStatus.READY})

TIMING_WINDOWS = {
    PaymentTiming.AT_DROPOFF: DROPOFF_WINDOW,
    PaymentTiming.AT_PICKUP: PICKUP_WINDOW,
}

Number = Union[int, float, Decimal, str]


def is_guest_payable(config: Optional[PaymentConfig]) -> bool:
    return config is not None and config.charge_model in GUEST_PAYABLE_MODELS


def tips_allowed(config: Optional[PaymentConfig]) -> bool:
    """Tips are allowed unless the job explicitly disables them."""
    return config is None or config.allow_tips is not False


def in_timing_window(config: Optional[PaymentConfig], status: StatusLike) -> bool:
    """
    Whether the status falls in the configured collection window.

    A job without a payment configuration has no timing preference, so
    either window qualifies.
    """
    parsed = parse_status(status)
    if parsed is None:
        return False
    if config is None:
        return parsed in DROPOFF_WINDOW or parsed in PICKUP_WINDOW
    return parsed in TIMING_WINDOWS.get(config.timing, frozenset())


def should_offer_payment(config: Optional[PaymentConfig], status: StatusLike) -> bool:
    return (
        is_guest_payable(config)
        and config.base_rate > 0
        and in_timing_window(config, status)
    )


def should_offer_tip_only(config: Optional[PaymentConfig], status: StatusLike) -> bool:
    return (
        not is_guest_payable(config)
        and tips_allowed(config)
        and in_timing_window(config, status)
    )


def tip_to_minor_units(tip_dollars: Number) -> int:
    """
    Convert a guest-supplied tip in major units to minor units.

    Rounds half away from zero (ROUND_HALF_UP on the non-negative values
    accepted here), so 0.005 dollars becomes 1 cent.

    Raises:
        InvalidInputError: tip is negative, NaN, infinite or not a number
    """
    if isinstance(tip_dollars, bool):
        raise InvalidInputError("tipDollars must be a number")
    if isinstance(tip_dollars, float) and not math.isfinite(tip_dollars):
        raise InvalidInputError("tipDollars must be a finite number")
    try:
        tip = Decimal(str(tip_dollars))
    except ArithmeticError:
        raise InvalidInputError("tipDollars must be a number")
    if not tip.is_finite():
        raise InvalidInputError("tipDollars must be a finite number")
    if tip < 0:
        raise InvalidInputError("tipDollars must not be negative")
    return int((tip * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_total(base_rate_minor_units: int, tip_dollars: Number) -> int:
    """Total charge in minor units: base rate plus the rounded tip."""
    if base_rate_minor_units < 0:
        raise InvalidInputError("Base rate must not be negative")
    return int(base_rate_minor_units) + tip_to_minor_units(tip_dollars)
