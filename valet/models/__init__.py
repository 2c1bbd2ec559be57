"""
Pydantic models for Parque Valet
"""

from valet.models.schemas import (
    # Enums
    TicketStatus,
    Phase,
    PaymentStatus,
    ChargeModel,
    PaymentTiming,
    TransactionStatus,

    # Database Models
    PaymentConfig,
    Job,
    Vehicle,
    Ticket,
    PaymentTransaction,
    PaymentTransactionCreate,

    # API Models
    CreatePaymentIntentRequest,
    CreatePaymentIntentResponse,
    RequestCarRequest,
    RequestCarResponse,
    WebhookAck,
    SendSmsRequest,
    SendSmsResponse,
    TimelineStep,
    StatusView,
    JobSummary,
    GuestTicketResponse,
    ErrorResponse,
)

__all__ = [
    # Enums
    "TicketStatus",
    "Phase",
    "PaymentStatus",
    "ChargeModel",
    "PaymentTiming",
    "TransactionStatus",

    # Database Models
    "PaymentConfig",
    "Job",
    "Vehicle",
    "Ticket",
    "PaymentTransaction",
    "PaymentTransactionCreate",

    # API Models
    "CreatePaymentIntentRequest",
    "CreatePaymentIntentResponse",
    "RequestCarRequest",
    "RequestCarResponse",
    "WebhookAck",
    "SendSmsRequest",
    "SendSmsResponse",
    "TimelineStep",
    "StatusView",
    "JobSummary",
    "GuestTicketResponse",
    "ErrorResponse",
]
