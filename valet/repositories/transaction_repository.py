"""
Payment Transaction Repository

Append-only access to the `payment_transactions` table. A transaction is
keyed by the provider's payment intent id (UNIQUE column), which makes
recording a confirmed payment safe under at-least-once webhook delivery.
"""
from __future__ import annotations

from typing import Optional, Tuple

from valet.models.schemas import PaymentTransaction, PaymentTransactionCreate
from valet.utils.errors import StoreFailureError
from valet.utils.logger import get_logger


logger = get_logger(__name__)

CONFLICT_COLUMN = "stripe_payment_intent_id"


class PaymentTransactionRepository:
    """Repository for payment_transactions table operations."""

    def __init__(self, supabase_client=None) -> None:
        if supabase_client is None:
            from valet.services.supabase_client import get_supabase_client  # Lazy import for tests

            self.client = get_supabase_client()
        else:
            self.client = supabase_client

        self.table_name = "payment_transactions"
        logger.info("PaymentTransactionRepository initialized for table: %s", self.table_name)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------
    def get_by_intent_id(self, payment_intent_id: str) -> Optional[PaymentTransaction]:
        """Fetch the transaction recorded for a provider payment intent."""
        try:
            response = self.client.table(self.table_name) \
                .select("*") \
                .eq(CONFLICT_COLUMN, payment_intent_id) \
                .limit(1) \
                .execute()
        except Exception as exc:
            logger.error("Failed to fetch transaction %s: %s", payment_intent_id, exc)
            raise StoreFailureError("Failed to read payment transactions") from exc

        rows = response.data or []
        return PaymentTransaction.model_validate(rows[0]) if rows else None

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------
    def record_transaction(
        self,
        transaction: PaymentTransactionCreate
    ) -> Tuple[Optional[PaymentTransaction], bool]:
        """
        Insert a transaction unless one exists for the same payment intent.

        Returns:
            (transaction, created) where created is False for a duplicate
        """
        existing = self.get_by_intent_id(transaction.stripe_payment_intent_id)
        if existing is not None:
            return existing, False

        payload = transaction.model_dump(mode="json", exclude_none=True)

        try:
            response = self.client.table(self.table_name) \
                .upsert(payload, on_conflict=CONFLICT_COLUMN, ignore_duplicates=True) \
                .execute()
        except Exception as exc:
            logger.error(
                "Failed to record transaction %s: %s",
                transaction.stripe_payment_intent_id, exc
            )
            raise StoreFailureError("Failed to record payment transaction") from exc

        if not response.data:
            # Lost a race with a concurrent delivery of the same event
            return self.get_by_intent_id(transaction.stripe_payment_intent_id), False

        return PaymentTransaction.model_validate(response.data[0]), True
