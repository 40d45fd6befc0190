"""
Checkout orchestration.

A checkout charges the customer through the gateway, derives the Transaction
and Order documents from the charge response, and stores both together. The
caller only ever sees the gateway's status, message and reference.
"""
from typing import Any, Dict, Optional

import structlog

from payment_relay.core.record_store import RecordStore
from payment_relay.core.records import build_order, build_transaction
from payment_relay.exceptions import (
    CheckoutPersistenceError,
    GatewayError,
    GatewayUnavailableError,
    RecordStoreError,
)
from payment_relay.integrations.paystack_client import PaystackClient
from payment_relay.monitoring.metrics import metrics

logger = structlog.get_logger(__name__)


class CheckoutOrchestrator:
    """Charge, then record the transaction and its order atomically."""

    def __init__(self, gateway: PaystackClient, record_store: RecordStore) -> None:
        """
        Initialize checkout orchestrator.

        Args:
            gateway: Paystack client used to create the charge
            record_store: Store receiving the transaction/order pair
        """
        self.gateway = gateway
        self.record_store = record_store

    async def checkout(
        self,
        order_draft: Optional[Dict[str, Any]],
        charge_payload: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Run one checkout.

        Args:
            order_draft: Order fields submitted by the client
            charge_payload: Charge instructions forwarded to the gateway

        Returns:
            Dict[str, Any]: ``{status, message, reference}`` from the charge

        Raises:
            GatewayError: If the gateway rejects the charge
            GatewayUnavailableError: If the gateway cannot be reached
            CheckoutPersistenceError: If the charge succeeded but could not be recorded
        """
        try:
            response = await self.gateway.create_charge(charge_payload or {})
        except (GatewayError, GatewayUnavailableError):
            metrics.record_checkout("gateway_failed")
            raise

        try:
            charge = response["data"]
            transaction = build_transaction(charge)
            order = build_order(order_draft or {}, transaction)
        except (KeyError, TypeError, AttributeError, ArithmeticError) as e:
            metrics.record_checkout("malformed_response")
            # A 2xx charge may still have billed the customer
            logger.error(
                "checkout_unreconciled_charge",
                gateway_response=response,
                order=order_draft,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        reference = transaction["id"]

        logger.info(
            "checkout_charge_created",
            reference=reference,
            status=charge.get("status"),
            user_id=transaction["user_id"],
        )

        try:
            await self.record_store.create_both(transaction, order)
        except RecordStoreError as e:
            metrics.record_checkout("persistence_failed")
            # The customer may have been charged; keep everything needed to
            # reconcile by hand.
            logger.error(
                "checkout_unreconciled_charge",
                reference=reference,
                transaction=transaction,
                order=order,
                error=str(e.__cause__ or e),
            )
            raise CheckoutPersistenceError(reference, e.__cause__ or e) from e

        metrics.record_checkout("recorded")

        return {
            "status": charge.get("status"),
            "message": charge.get("message"),
            "reference": reference,
        }
