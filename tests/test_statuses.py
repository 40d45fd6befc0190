"""
Unit tests for the status vocabulary.
"""
import pytest

from payment_relay.core.statuses import (
    GatewayStatus,
    OrderStatus,
    StatusTransition,
    TransactionStatus,
    resolve_status,
)


class TestResolveStatus:
    """Test suite for mapping gateway statuses onto record statuses."""

    @pytest.mark.unit
    def test_success_marks_transaction_paid_and_order_success(self) -> None:
        transition = resolve_status("success")

        assert transition == StatusTransition(transaction_status="paid", order_status="success")
        assert transition.transaction_status == TransactionStatus.PAID.value
        assert transition.order_status == OrderStatus.SUCCESS.value

    @pytest.mark.unit
    def test_failed_is_copied_to_both_records(self) -> None:
        transition = resolve_status("failed")

        assert transition.transaction_status == "failed"
        assert transition.order_status == "failed"

    @pytest.mark.unit
    @pytest.mark.parametrize("status", ["abandoned", "reversed", "send_otp"])
    def test_known_non_success_statuses_pass_through(self, status: str) -> None:
        transition = resolve_status(status)

        assert transition.transaction_status == status
        assert transition.order_status == status

    @pytest.mark.unit
    def test_unrecognised_status_passes_through(self) -> None:
        transition = resolve_status("chargeback_pending")

        assert transition.transaction_status == "chargeback_pending"
        assert transition.order_status == "chargeback_pending"

    @pytest.mark.unit
    def test_status_match_is_exact(self) -> None:
        """Only the literal lowercase 'success' is mapped."""
        transition = resolve_status("SUCCESS")

        assert transition.transaction_status == "SUCCESS"
        assert transition.order_status == "SUCCESS"


class TestGatewayStatus:
    """Test suite for GatewayStatus parsing."""

    @pytest.mark.unit
    def test_parse_known(self) -> None:
        assert GatewayStatus.parse("failed") is GatewayStatus.FAILED

    @pytest.mark.unit
    def test_parse_unknown_returns_none(self) -> None:
        assert GatewayStatus.parse("mystery") is None
