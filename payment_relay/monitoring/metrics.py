"""
Prometheus metrics for relay monitoring.

Tracks:
- Gateway calls by operation and outcome
- Checkout outcomes, including charges that could not be recorded
- Webhook events by type and reconciliation status
- Record store failures
- Requests rejected by the default route
"""
from prometheus_client import Counter, Histogram

# Gateway metrics
gateway_requests_total = Counter(
    "gateway_requests_total",
    "Total number of payment gateway calls",
    ["operation", "outcome"],  # ok, rejected, unavailable
)

gateway_request_duration_seconds = Histogram(
    "gateway_request_duration_seconds",
    "Payment gateway call duration in seconds",
    ["operation"],
    buckets=(0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# Checkout metrics
checkout_requests_total = Counter(
    "checkout_requests_total",
    "Total checkout requests",
    ["outcome"],  # recorded, gateway_failed, malformed_response, persistence_failed
)

# Webhook metrics
webhook_events_received_total = Counter(
    "webhook_events_received_total",
    "Total webhook events received",
    ["event_type"],
)

webhook_events_processed_total = Counter(
    "webhook_events_processed_total",
    "Total webhook events processed",
    ["event_type", "status"],  # reconciled, unmatched, failed, ignored
)

webhook_processing_duration_seconds = Histogram(
    "webhook_processing_duration_seconds",
    "Webhook processing duration in seconds",
    ["event_type"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

# Record store metrics
record_store_failures_total = Counter(
    "record_store_failures_total",
    "Total failed record store operations",
    ["operation"],
)

# Access metrics
denied_requests_total = Counter(
    "denied_requests_total",
    "Requests answered by the default access-denied route",
    ["method"],
)


class MetricsCollector:
    """Helper class for collecting metrics."""

    @staticmethod
    def record_gateway_call(operation: str, outcome: str, duration_seconds: float) -> None:
        """Record a payment gateway call."""
        gateway_requests_total.labels(operation=operation, outcome=outcome).inc()
        gateway_request_duration_seconds.labels(operation=operation).observe(duration_seconds)

    @staticmethod
    def record_checkout(outcome: str) -> None:
        """Record a checkout outcome."""
        checkout_requests_total.labels(outcome=outcome).inc()

    @staticmethod
    def record_webhook_event(event_type: str, status: str, duration_seconds: float) -> None:
        """Record webhook event processing."""
        webhook_events_received_total.labels(event_type=event_type).inc()
        webhook_events_processed_total.labels(event_type=event_type, status=status).inc()
        webhook_processing_duration_seconds.labels(event_type=event_type).observe(
            duration_seconds
        )

    @staticmethod
    def record_store_failure(operation: str) -> None:
        """Record a failed record store operation."""
        record_store_failures_total.labels(operation=operation).inc()

    @staticmethod
    def record_denied_request(method: str) -> None:
        """Record a request rejected by the default route."""
        denied_requests_total.labels(method=method).inc()


# Export singleton instance
metrics = MetricsCollector()
