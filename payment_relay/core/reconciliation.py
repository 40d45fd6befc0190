"""
Webhook reconciliation of stored transaction/order pairs.

When the gateway confirms the outcome of a charge, both records keyed by its
reference get their status rewritten in one atomic update.
"""
from typing import Any, Dict

import structlog

from payment_relay.core.record_store import RecordStore
from payment_relay.core.statuses import resolve_status
from payment_relay.exceptions import RecordNotFoundError

logger = structlog.get_logger(__name__)


class ReconciliationOutcome:
    """Acknowledgement statuses reported for a reconciliation attempt."""

    RECONCILED = "reconciled"
    UNMATCHED = "unmatched"
    IGNORED = "ignored"


class WebhookReconciler:
    """
    Applies gateway charge notifications to the stored record pair.
    """

    def __init__(self, record_store: RecordStore) -> None:
        """
        Initialize webhook reconciler.

        Args:
            record_store: Store holding the transaction/order pairs
        """
        self.record_store = record_store

    async def handle_charge_success(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle a ``charge.success`` notification.

        A ``success`` status marks the transaction ``paid`` and the order
        ``success``; any other status is written to both records as-is.

        Args:
            data: The event's ``data`` payload (``status``, ``reference``, ...)

        Returns:
            Dict[str, Any]: Reconciliation result with ``status`` and ``reference``

        Raises:
            RecordStoreError: If the update fails for a reason other than a missing pair
        """
        reference = data.get("reference")
        gateway_status = data.get("status")

        if not isinstance(reference, str) or not reference or not isinstance(
            gateway_status, str
        ):
            logger.warning(
                "webhook_payload_incomplete",
                reference=reference,
                gateway_status=gateway_status,
            )
            return {"status": ReconciliationOutcome.IGNORED, "reference": reference}

        transition = resolve_status(gateway_status)

        logger.info(
            "reconciling_charge",
            reference=reference,
            gateway_status=gateway_status,
            transaction_status=transition.transaction_status,
            order_status=transition.order_status,
        )

        try:
            await self.record_store.update_both(
                reference,
                transaction_status=transition.transaction_status,
                order_status=transition.order_status,
            )
        except RecordNotFoundError as e:
            # Possible when the notification beats the checkout commit.
            logger.error(
                "webhook_reference_not_found",
                reference=reference,
                missing=e.missing,
                gateway_status=gateway_status,
            )
            return {"status": ReconciliationOutcome.UNMATCHED, "reference": reference}

        return {
            "status": ReconciliationOutcome.RECONCILED,
            "reference": reference,
            "transaction_status": transition.transaction_status,
            "order_status": transition.order_status,
        }
