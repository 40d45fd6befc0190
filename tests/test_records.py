"""
Unit tests for the Transaction and Order document builders.
"""
from decimal import Decimal
from typing import Any, Dict

import pytest

from payment_relay.core.records import build_order, build_transaction


class TestBuildTransaction:
    """Test suite for build_transaction."""

    @pytest.mark.unit
    def test_transaction_from_charge(self, charge_data: Dict[str, Any]) -> None:
        transaction = build_transaction(charge_data)

        assert transaction == {
            "id": "T1",
            "amount": 5000,
            "transaction_date": "2024-01-01",
            "status": "success",
            "reference": "T1",
            "channel": "card",
            "message": "Approved",
            "fees": Decimal("50"),
            "gateway_response": "Approved",
            "user_id": "U1",
            "order_id": "T1",
        }

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "fees, expected",
        [(5000, Decimal("50")), (150, Decimal("1.5")), (0, Decimal("0")), (None, None)],
    )
    def test_fees_converted_to_major_units(
        self, charge_data: Dict[str, Any], fees: Any, expected: Any
    ) -> None:
        charge_data["fees"] = fees

        assert build_transaction(charge_data)["fees"] == expected

    @pytest.mark.unit
    def test_reference_keys_transaction_and_order_link(self, charge_data: Dict[str, Any]) -> None:
        charge_data["reference"] = "ref_8x2k"
        transaction = build_transaction(charge_data)

        assert transaction["id"] == transaction["reference"] == transaction["order_id"] == "ref_8x2k"

    @pytest.mark.unit
    def test_missing_metadata_leaves_user_unset(self, charge_data: Dict[str, Any]) -> None:
        charge_data["metadata"] = None

        assert build_transaction(charge_data)["user_id"] is None


class TestBuildOrder:
    """Test suite for build_order."""

    @pytest.mark.unit
    def test_order_merges_draft_with_derived_fields(
        self, charge_data: Dict[str, Any], order_draft: Dict[str, Any]
    ) -> None:
        transaction = build_transaction(charge_data)
        order = build_order(order_draft, transaction, created_at_ms=1704067200000)

        assert order == {
            "items": order_draft["items"],
            "total": 50,
            "id": "T1",
            "transaction_ref": "T1",
            "status": "pending",
            "user_id": "U1",
            "order_date": "2024-01-01",
            "date": 1704067200000,
        }

    @pytest.mark.unit
    def test_order_is_pending_whatever_the_charge_status(self, charge_data: Dict[str, Any]) -> None:
        charge_data["status"] = "send_otp"
        order = build_order({}, build_transaction(charge_data))

        assert order["status"] == "pending"

    @pytest.mark.unit
    def test_gateway_user_overrides_draft_user(self, charge_data: Dict[str, Any]) -> None:
        order = build_order({"user_id": "someone-else", "status": "paid"}, build_transaction(charge_data))

        assert order["user_id"] == "U1"
        assert order["status"] == "pending"

    @pytest.mark.unit
    def test_creation_date_defaults_to_now(self, charge_data: Dict[str, Any]) -> None:
        order = build_order({}, build_transaction(charge_data))

        assert isinstance(order["date"], int)
        assert order["date"] > 1_700_000_000_000

    @pytest.mark.unit
    def test_draft_is_not_mutated(self, charge_data: Dict[str, Any], order_draft: Dict[str, Any]) -> None:
        snapshot = dict(order_draft)
        build_order(order_draft, build_transaction(charge_data))

        assert order_draft == snapshot
