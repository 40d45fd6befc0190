"""
SQLAlchemy models for the Transactions and Orders collections.

Both tables are keyed by the gateway reference. Each model converts to and
from the plain document dictionaries used by the rest of the relay.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import JSON, BigInteger, DateTime, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

DocumentJSON = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class TransactionRecord(Base):
    """
    One attempted payment.

    The primary key is the gateway reference and is shared with the Order
    created in the same checkout.
    """

    __tablename__ = "Transactions"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    amount: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    transaction_date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    reference: Mapped[str] = mapped_column(String(255), nullable=False)
    channel: Mapped[str | None] = mapped_column(String(50), nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    fees: Mapped[Decimal | None] = mapped_column(Numeric(14, 2), nullable=True)
    gateway_response: Mapped[str | None] = mapped_column(Text, nullable=True)
    user_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    order_id: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=func.now(),
        onupdate=func.now(),
    )

    DOCUMENT_FIELDS = (
        "id",
        "amount",
        "transaction_date",
        "status",
        "reference",
        "channel",
        "message",
        "fees",
        "gateway_response",
        "user_id",
        "order_id",
    )

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "TransactionRecord":
        """Build a row from a transaction document, setting every field."""
        return cls(**{field: document.get(field) for field in cls.DOCUMENT_FIELDS})

    def to_document(self) -> Dict[str, Any]:
        """Return the stored transaction document."""
        return {field: getattr(self, field) for field in self.DOCUMENT_FIELDS}

    def __repr__(self) -> str:
        """String representation of TransactionRecord."""
        return (
            f"<TransactionRecord(id={self.id}, amount={self.amount}, "
            f"status={self.status})>"
        )


class OrderRecord(Base):
    """
    The order tied to a transaction.

    Fields derived at checkout are columns; everything else the client sent
    in the order draft is kept in ``details``.
    """

    __tablename__ = "Orders"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    transaction_ref: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    user_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    order_date: Mapped[str | None] = mapped_column(String(64), nullable=True)
    date: Mapped[int] = mapped_column(BigInteger, nullable=False)
    details: Mapped[Dict[str, Any]] = mapped_column(DocumentJSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=func.now(),
        onupdate=func.now(),
    )

    DOCUMENT_FIELDS = ("id", "transaction_ref", "status", "user_id", "order_date", "date")

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "OrderRecord":
        """Split an order document into derived columns and draft details."""
        details = {k: v for k, v in document.items() if k not in cls.DOCUMENT_FIELDS}
        return cls(
            **{field: document.get(field) for field in cls.DOCUMENT_FIELDS},
            details=details,
        )

    def to_document(self) -> Dict[str, Any]:
        """Return the stored order document: draft details merged with derived fields."""
        document = dict(self.details or {})
        document.update({field: getattr(self, field) for field in self.DOCUMENT_FIELDS})
        return document

    def __repr__(self) -> str:
        """String representation of OrderRecord."""
        return f"<OrderRecord(id={self.id}, status={self.status})>"
