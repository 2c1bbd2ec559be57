"""
Pydantic models for Parque Valet

This module contains the Pydantic schemas matching the Supabase tables
(tickets, jobs, vehicles, payment_transactions) and the request/response
bodies of the public API.

Column names follow the database (snake_case). The job payment configuration
is stored as a JSONB document written by the operator console in camelCase,
so PaymentConfig accepts both spellings.
"""
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional, List

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# ============================================================================
# Enums
# ============================================================================

class TicketStatus(str, Enum):
    """Detailed valet ticket statuses, as written by the operations system"""
    CREATED = "CREATED"
    QUEUED = "QUEUED"
    CLAIMED = "CLAIMED"
    PARKING_IN_PROGRESS = "PARKING_IN_PROGRESS"
    PARKED = "PARKED"
    OVERNIGHT_PARKED = "OVERNIGHT_PARKED"
    REQUESTED = "REQUESTED"
    RETRIEVAL_IN_PROGRESS = "RETRIEVAL_IN_PROGRESS"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CLOSED = "CLOSED"
    DELIVERED = "DELIVERED"


class Phase(IntEnum):
    """Ordered timeline phases shown to the guest"""
    CHECKED_IN = 0
    PARKED = 1
    REQUESTED = 2
    ON_THE_WAY = 3
    READY = 4
    TERMINAL = 5


class PaymentStatus(str, Enum):
    """Ticket payment status"""
    UNPAID = "unpaid"
    PAID = "paid"


class ChargeModel(str, Enum):
    """Who pays for the valet service at a job"""
    GUEST_PAYS = "GUEST_PAYS"
    PAID = "PAID"
    FREE = "FREE"


class PaymentTiming(str, Enum):
    """When the guest is asked to pay"""
    AT_DROPOFF = "AT_DROPOFF"
    AT_PICKUP = "AT_PICKUP"


class TransactionStatus(str, Enum):
    """Payment transaction status (only succeeded is written here)"""
    SUCCEEDED = "succeeded"


# ============================================================================
# Database Models (matching Supabase tables)
# ============================================================================

class PaymentConfig(BaseModel):
    """
    Payment configuration of a job (`jobs.payment_config` JSONB).

    Attributes:
        charge_model: GUEST_PAYS / PAID charge the guest, anything else is free
        base_rate: Base fee in minor currency units (cents)
        allow_tips: Whether tips may be collected
        timing: AT_DROPOFF or AT_PICKUP (missing means AT_PICKUP, unknown means None)
    """
    model_config = ConfigDict(populate_by_name=True)

    charge_model: ChargeModel = Field(
        ChargeModel.FREE,
        validation_alias=AliasChoices("model", "charge_model"),
        description="Charge model"
    )
    base_rate: int = Field(
        0,
        ge=0,
        validation_alias=AliasChoices("baseRate", "base_rate"),
        description="Base rate in minor units"
    )
    allow_tips: bool = Field(
        True,
        validation_alias=AliasChoices("allowTips", "allow_tips"),
        description="Tips allowed"
    )
    timing: Optional[PaymentTiming] = Field(
        PaymentTiming.AT_PICKUP,
        description="Payment timing; None when the stored value is not a known window"
    )

    @field_validator("charge_model", mode="before")
    @classmethod
    def unknown_model_is_free(cls, v):
        """Charge models this service does not know never charge the guest"""
        if v is None:
            return ChargeModel.FREE
        value = v.value if isinstance(v, Enum) else str(v)
        if value not in ChargeModel.__members__:
            return ChargeModel.FREE
        return value

    @field_validator("base_rate", mode="before")
    @classmethod
    def null_base_rate(cls, v):
        return 0 if v is None else v

    @field_validator("allow_tips", mode="before")
    @classmethod
    def null_allow_tips(cls, v):
        # Only an explicit false disables tips
        return True if v is None else v

    @field_validator("timing", mode="before")
    @classmethod
    def unknown_timing_has_no_window(cls, v):
        if not v:
            return PaymentTiming.AT_PICKUP
        value = v.value if isinstance(v, Enum) else str(v)
        if value not in PaymentTiming.__members__:
            return None
        return value


class Job(BaseModel):
    """Venue/event a ticket belongs to (`jobs` table)"""
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    title: Optional[str] = None
    location: Optional[str] = None
    payment_config: Optional[PaymentConfig] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v)


class Vehicle(BaseModel):
    """Descriptive vehicle fields (`vehicles` table), read-only here"""
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    make: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    license_plate: Optional[str] = None

    @property
    def description(self) -> str:
        text = " ".join(part for part in (self.color, self.make, self.model) if part)
        if self.license_plate:
            text = f"{text} • {self.license_plate}" if text else self.license_plate
        return text


class Ticket(BaseModel):
    """
    Valet ticket (`tickets` table).

    `status` is kept as the raw string from the store so that a status this
    service does not know yet still loads (it renders as the first phase).
    """
    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: str
    ticket_code: str = ""
    status: str = TicketStatus.CREATED.value
    created_at: Optional[datetime] = None
    parked_at: Optional[datetime] = None
    requested_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    parking_zone: Optional[str] = None
    parking_level: Optional[str] = None
    parking_spot: Optional[str] = None
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    payment_intent_id: Optional[str] = None
    vehicle_id: Optional[str] = None
    job_id: str

    @field_validator("id", "job_id", mode="before")
    @classmethod
    def stringify_ids(cls, v):
        return str(v) if v is not None else v

    @field_validator("vehicle_id", mode="before")
    @classmethod
    def stringify_vehicle_id(cls, v):
        return str(v) if v is not None else None

    @field_validator("status", mode="before")
    @classmethod
    def status_value(cls, v):
        if isinstance(v, Enum):
            return v.value
        return v or TicketStatus.CREATED.value

    @field_validator("payment_status", mode="before")
    @classmethod
    def null_payment_status(cls, v):
        return PaymentStatus.UNPAID if not v else v

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID

    @property
    def parking_location(self) -> str:
        parts = [self.parking_zone, self.parking_level, self.parking_spot]
        return " / ".join(part for part in parts if part)


class PaymentTransactionCreate(BaseModel):
    """
    Payment transaction row written once per confirmed provider payment.

    Invariant: amount == base_amount + tip_amount, all non-negative minor units.
    """
    model_config = ConfigDict(from_attributes=True)

    ticket_id: str = Field(..., min_length=1, description="Ticket ID")
    job_id: Optional[str] = Field(None, description="Job ID")
    amount: int = Field(..., ge=0, description="Total charged, minor units")
    base_amount: int = Field(..., ge=0, description="Base fee component")
    tip_amount: int = Field(..., ge=0, description="Tip component")
    currency: str = Field(..., min_length=3, max_length=3, description="ISO currency code")
    stripe_payment_intent_id: str = Field(..., min_length=1, description="Provider transaction ID")
    status: TransactionStatus = Field(TransactionStatus.SUCCEEDED, description="Transaction status")

    @field_validator("currency", mode="before")
    @classmethod
    def lower_currency(cls, v):
        return str(v).lower() if v is not None else v

    @field_validator("job_id", mode="before")
    @classmethod
    def empty_job_id(cls, v):
        return v or None

    @model_validator(mode="after")
    def components_sum_to_total(self):
        if self.base_amount + self.tip_amount != self.amount:
            raise ValueError(
                f"base_amount ({self.base_amount}) + tip_amount ({self.tip_amount}) "
                f"must equal amount ({self.amount})"
            )
        return self


class PaymentTransaction(PaymentTransactionCreate):
    """Stored payment transaction"""
    id: str
    created_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v)


# ============================================================================
# API Models
# ============================================================================

class CreatePaymentIntentRequest(BaseModel):
    """Body of POST /api/create-payment-intent"""
    model_config = ConfigDict(populate_by_name=True)

    ticket_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("ticketId", "ticket_id"),
        description="Ticket ID"
    )
    tip_dollars: float = Field(
        0,
        validation_alias=AliasChoices("tipDollars", "tipAmount", "tip_dollars"),
        description="Tip in major currency units"
    )

    @field_validator("tip_dollars", mode="before")
    @classmethod
    def null_tip(cls, v):
        return 0 if v is None else v


class CreatePaymentIntentResponse(BaseModel):
    """Client-side handle used by the payment form"""
    model_config = ConfigDict(populate_by_name=True)

    client_handle: str = Field(..., serialization_alias="clientHandle")


class RequestCarRequest(BaseModel):
    """Body of POST /api/tickets/request-car"""
    model_config = ConfigDict(populate_by_name=True)

    ticket_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("ticketId", "ticket_id"),
    )


class RequestCarResponse(BaseModel):
    ticket: Ticket


class WebhookAck(BaseModel):
    received: bool = True


class SendSmsRequest(BaseModel):
    """Body of POST /api/send-sms"""
    to: Optional[str] = None
    body: Optional[str] = None


class SendSmsResponse(BaseModel):
    success: bool
    mode: str
    sid: Optional[str] = None


class TimelineStep(BaseModel):
    key: str
    label: str
    state: str  # complete | current | pending


class StatusView(BaseModel):
    """Everything the guest page derives from the latest ticket + job"""
    phase: Phase
    is_complete: bool
    headline: str
    subtext: str
    show_timeline: bool
    timeline: List[TimelineStep]
    show_request_button: bool
    show_payment: bool
    show_tip_only: bool
    payment_base_rate: int
    parking_location: str
    vehicle_description: str


class JobSummary(BaseModel):
    id: str
    title: Optional[str] = None
    location: Optional[str] = None


class GuestTicketResponse(BaseModel):
    """Body of GET /api/tickets/{code}"""
    ticket: Ticket
    job: Optional[JobSummary] = None
    vehicle: Optional[Vehicle] = None
    view: StatusView


class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str = Field(..., description="Human-readable error message")
