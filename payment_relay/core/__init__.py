"""Core checkout and reconciliation logic."""
from .checkout import CheckoutOrchestrator
from .record_store import RecordStore
from .reconciliation import WebhookReconciler
from .statuses import GatewayStatus, OrderStatus, StatusTransition, TransactionStatus, resolve_status

__all__ = [
    "CheckoutOrchestrator",
    "GatewayStatus",
    "OrderStatus",
    "RecordStore",
    "StatusTransition",
    "TransactionStatus",
    "WebhookReconciler",
    "resolve_status",
]
