"""
Repositories package for database operations

Provides repository classes for:
- tickets, jobs and vehicles tables (TicketRepository)
- payment_transactions table (PaymentTransactionRepository)
"""
from valet.repositories.ticket_repository import TicketRepository
from valet.repositories.transaction_repository import PaymentTransactionRepository

__all__ = [
    "TicketRepository",
    "PaymentTransactionRepository",
]
