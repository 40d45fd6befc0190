"""
Record store for the Transactions and Orders collections.

Every write touches both records of a pair inside one database transaction,
so a transaction and its order are never half-written.
"""
from typing import Any, Dict, Optional

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from payment_relay.database.connection import get_session_factory
from payment_relay.database.models import OrderRecord, TransactionRecord
from payment_relay.exceptions import RecordNotFoundError, RecordStoreError
from payment_relay.monitoring.metrics import metrics

logger = structlog.get_logger(__name__)


class RecordStore:
    """
    Atomic dual-write access to transaction/order pairs keyed by reference.
    """

    def __init__(
        self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None
    ) -> None:
        """
        Initialize record store.

        Args:
            session_factory: Optional session factory (defaults to the global one)
        """
        self._session_factory = session_factory

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory or get_session_factory()

    async def create_both(
        self, transaction: Dict[str, Any], order: Dict[str, Any]
    ) -> None:
        """
        Create or replace a transaction and its order in one atomic write.

        Args:
            transaction: Transaction document
            order: Order document sharing the transaction's id

        Raises:
            ValueError: If the two documents are not keyed identically
            RecordStoreError: If the write fails; neither document is stored
        """
        if transaction["id"] != order["id"]:
            raise ValueError(
                f"Transaction {transaction['id']} and order {order['id']} must share a key"
            )

        reference = transaction["id"]

        try:
            async with self.session_factory() as db:
                async with db.begin():
                    await db.merge(TransactionRecord.from_document(transaction))
                    await db.merge(OrderRecord.from_document(order))
        except Exception as e:
            metrics.record_store_failure("create_both")
            logger.error(
                "record_store_create_failed",
                reference=reference,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise RecordStoreError(f"Failed to store records for {reference}: {str(e)}") from e

        logger.info("records_created", reference=reference)

    async def update_both(
        self, reference: str, transaction_status: str, order_status: str
    ) -> None:
        """
        Update the status of both records of a pair in one atomic write.

        Args:
            reference: Gateway reference keying both records
            transaction_status: New transaction status
            order_status: New order status

        Raises:
            RecordNotFoundError: If either record does not exist; nothing is updated
            RecordStoreError: If the write fails
        """
        try:
            async with self.session_factory() as db:
                async with db.begin():
                    result = await db.execute(
                        update(TransactionRecord)
                        .where(TransactionRecord.id == reference)
                        .values(status=transaction_status)
                    )
                    if result.rowcount == 0:
                        raise RecordNotFoundError(reference, "transaction")

                    result = await db.execute(
                        update(OrderRecord)
                        .where(OrderRecord.id == reference)
                        .values(status=order_status)
                    )
                    if result.rowcount == 0:
                        raise RecordNotFoundError(reference, "order")
        except RecordNotFoundError:
            metrics.record_store_failure("update_both")
            raise
        except Exception as e:
            metrics.record_store_failure("update_both")
            logger.error(
                "record_store_update_failed",
                reference=reference,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise RecordStoreError(f"Failed to update records for {reference}: {str(e)}") from e

        logger.info(
            "records_updated",
            reference=reference,
            transaction_status=transaction_status,
            order_status=order_status,
        )

    async def get_transaction(self, reference: str) -> Optional[Dict[str, Any]]:
        """Return the stored transaction document, or None."""
        async with self.session_factory() as db:
            record = await db.get(TransactionRecord, reference)
            return record.to_document() if record is not None else None

    async def get_order(self, reference: str) -> Optional[Dict[str, Any]]:
        """Return the stored order document, or None."""
        async with self.session_factory() as db:
            record = await db.get(OrderRecord, reference)
            return record.to_document() if record is not None else None
