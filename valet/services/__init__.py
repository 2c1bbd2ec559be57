"""
Business Logic Services
"""
from .payment_intent_service import PaymentIntentService
from .webhook_reconciler import WebhookReconciler
from .ticket_request_handler import TicketRequestHandler
from .stripe_client import StripePaymentProvider
from .sms import SmsService
from .live_status import TicketStatusSession, SupabaseRealtimeChannel

__all__ = [
    "PaymentIntentService",
    "WebhookReconciler",
    "TicketRequestHandler",
    "StripePaymentProvider",
    "SmsService",
    "TicketStatusSession",
    "SupabaseRealtimeChannel",
]
