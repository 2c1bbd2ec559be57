"""
FastAPI dependency providers

Each collaborator is built from settings here and injected into routes with
Depends(); tests replace them through app.dependency_overrides.
"""
from functools import lru_cache

from valet.config import get_settings
from valet.repositories import PaymentTransactionRepository, TicketRepository
from valet.services import (
    PaymentIntentService,
    SmsService,
    StripePaymentProvider,
    SupabaseRealtimeChannel,
    TicketRequestHandler,
    WebhookReconciler,
)


@lru_cache()
def get_ticket_repository() -> TicketRepository:
    return TicketRepository()


@lru_cache()
def get_transaction_repository() -> PaymentTransactionRepository:
    return PaymentTransactionRepository()


@lru_cache()
def get_payment_provider() -> StripePaymentProvider:
    settings = get_settings()
    return StripePaymentProvider(settings.stripe_secret_key, settings.payment_currency)


def get_payment_intent_service() -> PaymentIntentService:
    return PaymentIntentService(
        get_ticket_repository(),
        get_payment_provider(),
        idempotency_window_seconds=get_settings().intent_idempotency_window_seconds
    )


def get_webhook_reconciler() -> WebhookReconciler:
    settings = get_settings()
    return WebhookReconciler(
        get_ticket_repository(),
        get_transaction_repository(),
        webhook_secret=settings.stripe_webhook_secret,
        allow_unsigned=not settings.is_production,
        default_currency=settings.payment_currency
    )


def get_ticket_request_handler() -> TicketRequestHandler:
    return TicketRequestHandler(get_ticket_repository())


@lru_cache()
def get_sms_service() -> SmsService:
    settings = get_settings()
    return SmsService(
        mode=settings.twilio_mode,
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        from_number=settings.twilio_from_number
    )


def get_live_channel() -> SupabaseRealtimeChannel:
    return SupabaseRealtimeChannel()
