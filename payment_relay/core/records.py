"""
Builders for the Transaction and Order documents created at checkout.

Both documents are keyed by the gateway reference of the charge.
"""
import time
from decimal import Decimal
from typing import Any, Dict, Optional

from payment_relay.core.statuses import OrderStatus


def _fees_in_major_units(fees: Any) -> Optional[Decimal]:
    """Gateway fees are in minor units (kobo); stored fees are in major units."""
    if fees is None:
        return None
    return Decimal(str(fees)) / Decimal(100)


def _as_user_id(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def build_transaction(charge: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the Transaction document from the ``data`` object of a charge response.

    Args:
        charge: Charge data returned by the gateway

    Returns:
        Dict[str, Any]: Transaction document
    """
    reference = charge["reference"]
    metadata = charge.get("metadata") or {}

    return {
        "id": reference,
        "amount": charge.get("amount"),
        "transaction_date": charge.get("transaction_date"),
        "status": charge.get("status"),
        "reference": reference,
        "channel": charge.get("channel"),
        "message": charge.get("message"),
        "fees": _fees_in_major_units(charge.get("fees")),
        "gateway_response": charge.get("gateway_response"),
        "user_id": _as_user_id(metadata.get("user_id")),
        "order_id": reference,
    }


def build_order(
    draft: Dict[str, Any],
    transaction: Dict[str, Any],
    created_at_ms: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the Order document from the client's draft and its transaction.

    Derived fields override anything the draft carries under the same name,
    including ``user_id``.

    Args:
        draft: Order draft submitted by the client
        transaction: Transaction document built for the same charge
        created_at_ms: Server creation time in epoch milliseconds (defaults to now)

    Returns:
        Dict[str, Any]: Order document
    """
    if created_at_ms is None:
        created_at_ms = int(time.time() * 1000)

    return {
        **draft,
        "id": transaction["id"],
        "transaction_ref": transaction["id"],
        "status": OrderStatus.PENDING.value,
        "user_id": transaction["user_id"],
        "order_date": transaction["transaction_date"],
        "date": created_at_ms,
    }
