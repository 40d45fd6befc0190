"""
Tests for webhook routing and reconciliation of stored records.
"""
from typing import Any, Dict
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from payment_relay.core.record_store import RecordStore
from payment_relay.core.records import build_order, build_transaction
from payment_relay.core.reconciliation import WebhookReconciler
from payment_relay.exceptions import RecordStoreError
from payment_relay.integrations.webhook_handler import WebhookHandler


@pytest.fixture
def webhook_handler(record_store: RecordStore) -> WebhookHandler:
    handler = WebhookHandler()
    reconciler = WebhookReconciler(record_store)
    handler.register_handler("charge.success", reconciler.handle_charge_success)
    return handler


@pytest_asyncio.fixture
async def stored_pair(
    record_store: RecordStore, charge_data: Dict[str, Any], order_draft: Dict[str, Any]
) -> None:
    transaction = build_transaction(charge_data)
    await record_store.create_both(transaction, build_order(order_draft, transaction))


def charge_event(status: str, reference: str = "T1", event: str = "charge.success") -> Dict[str, Any]:
    return {
        "event": event,
        "data": {"id": 302961, "status": status, "reference": reference, "amount": 5000},
    }


class TestWebhookReconciliation:
    """Test suite for charge.success reconciliation."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success_marks_transaction_paid_and_order_success(
        self, webhook_handler: WebhookHandler, record_store: RecordStore, stored_pair: None
    ) -> None:
        ack = await webhook_handler.process_event(charge_event("success"))

        assert ack == {
            "received": True,
            "event": "charge.success",
            "status": "reconciled",
            "reference": "T1",
        }
        transaction = await record_store.get_transaction("T1")
        order = await record_store.get_order("T1")
        assert transaction is not None and order is not None
        assert transaction["status"] == "paid"
        assert order["status"] == "success"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_status_is_written_to_both_records(
        self, webhook_handler: WebhookHandler, record_store: RecordStore, stored_pair: None
    ) -> None:
        ack = await webhook_handler.process_event(charge_event("failed"))

        assert ack["status"] == "reconciled"
        transaction = await record_store.get_transaction("T1")
        order = await record_store.get_order("T1")
        assert transaction is not None and order is not None
        assert transaction["status"] == "failed"
        assert order["status"] == "failed"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_other_events_mutate_nothing(
        self, webhook_handler: WebhookHandler, record_store: RecordStore, stored_pair: None
    ) -> None:
        before = (await record_store.get_transaction("T1"), await record_store.get_order("T1"))

        ack = await webhook_handler.process_event(
            charge_event("success", event="transfer.success")
        )

        assert ack["received"] is True
        assert ack["status"] == "ignored"
        assert ack["event"] == "transfer.success"
        after = (await record_store.get_transaction("T1"), await record_store.get_order("T1"))
        assert before == after

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_reference_is_acknowledged_as_unmatched(
        self, webhook_handler: WebhookHandler
    ) -> None:
        ack = await webhook_handler.process_event(charge_event("success", reference="ghost"))

        assert ack["received"] is True
        assert ack["status"] == "unmatched"
        assert ack["reference"] == "ghost"

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "envelope",
        [
            None,
            [],
            {},
            {"event": "charge.success"},
            {"event": "charge.success", "data": {"status": "success"}},
            {"event": "charge.success", "data": {"reference": "T1"}},
        ],
    )
    async def test_malformed_envelopes_are_ignored(
        self, webhook_handler: WebhookHandler, record_store: RecordStore, stored_pair: None, envelope: Any
    ) -> None:
        ack = await webhook_handler.process_event(envelope)

        assert ack["received"] is True
        assert ack["status"] == "ignored"
        transaction = await record_store.get_transaction("T1")
        assert transaction is not None
        assert transaction["status"] == "success"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_store_failure_is_acknowledged_as_failed(self) -> None:
        store = AsyncMock(spec=RecordStore)
        store.update_both.side_effect = RecordStoreError("database is down")
        handler = WebhookHandler()
        handler.register_handler("charge.success", WebhookReconciler(store).handle_charge_success)

        ack = await handler.process_event(charge_event("success"))

        assert ack["status"] == "failed"
        store.update_both.assert_awaited_once_with(
            "T1", transaction_status="paid", order_status="success"
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("reference", [12345, ["T1"], {"id": "T1"}])
    async def test_non_string_reference_never_reaches_the_store(self, reference: Any) -> None:
        store = AsyncMock(spec=RecordStore)

        result = await WebhookReconciler(store).handle_charge_success(
            {"status": "success", "reference": reference}
        )

        assert result["status"] == "ignored"
        store.update_both.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_acknowledgement_fields_are_text(self, webhook_handler: WebhookHandler) -> None:
        ack = await webhook_handler.process_event(
            {"event": 42, "data": {"reference": 7, "status": "success"}}
        )

        assert ack == {"received": True, "event": "42", "status": "ignored", "reference": "7"}
