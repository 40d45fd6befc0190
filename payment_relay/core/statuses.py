"""
Status vocabulary for transactions and orders.

The gateway reports its own status labels. Reconciliation maps exactly one of
them, ``success``, onto the relay's canonical pair (transaction ``paid``,
order ``success``); every other label is copied onto both records unchanged.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


class GatewayStatus(str, Enum):
    """Charge statuses Paystack is known to report."""

    SUCCESS = "success"
    FAILED = "failed"
    ABANDONED = "abandoned"
    REVERSED = "reversed"
    PENDING = "pending"
    PROCESSING = "processing"
    ONGOING = "ongoing"
    QUEUED = "queued"
    SEND_OTP = "send_otp"
    SEND_PIN = "send_pin"
    SEND_PHONE = "send_phone"
    SEND_BIRTHDAY = "send_birthday"
    SEND_ADDRESS = "send_address"
    OPEN_URL = "open_url"
    PAY_OFFLINE = "pay_offline"

    @classmethod
    def parse(cls, value: str) -> Optional["GatewayStatus"]:
        """Return the known status for ``value``, or None when it is not recognised."""
        try:
            return cls(value)
        except ValueError:
            return None


class TransactionStatus(str, Enum):
    """Canonical transaction statuses written by the relay."""

    PAID = "paid"


class OrderStatus(str, Enum):
    """Canonical order statuses written by the relay."""

    PENDING = "pending"
    SUCCESS = "success"


@dataclass(frozen=True)
class StatusTransition:
    """Statuses to write onto a transaction/order pair."""

    transaction_status: str
    order_status: str


def resolve_status(gateway_status: str) -> StatusTransition:
    """
    Map a notified gateway status onto the transaction/order status pair.

    Args:
        gateway_status: Raw ``data.status`` from the webhook payload

    Returns:
        StatusTransition: Statuses for the transaction and the order
    """
    known = GatewayStatus.parse(gateway_status)

    if known is GatewayStatus.SUCCESS:
        return StatusTransition(
            transaction_status=TransactionStatus.PAID.value,
            order_status=OrderStatus.SUCCESS.value,
        )

    if known is None:
        logger.warning("unrecognised_gateway_status", gateway_status=gateway_status)

    return StatusTransition(transaction_status=gateway_status, order_status=gateway_status)
