"""
Paystack webhook handler.

Routes incoming event envelopes (``{"event": ..., "data": {...}}``) to the
handler registered for their event type. Events without a handler are
acknowledged and otherwise ignored. Every delivery produces a well-defined
acknowledgement body.
"""
import time
from typing import Any, Awaitable, Callable, Dict, Optional

import structlog

from payment_relay.exceptions import RelayError
from payment_relay.monitoring.metrics import metrics

logger = structlog.get_logger(__name__)

EventHandler = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]

# Metric label for events without a registered handler; caller-supplied names
# would otherwise mint a new series per request
UNHANDLED_EVENT_LABEL = "unhandled"


def _as_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


class WebhookHandler:
    """
    Dispatches gateway webhook events by type.

    Example:
        handler = WebhookHandler()
        handler.register_handler("charge.success", reconciler.handle_charge_success)
        ack = await handler.process_event(envelope)
    """

    def __init__(self) -> None:
        """Initialize webhook handler."""
        self.event_handlers: Dict[str, EventHandler] = {}

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        """
        Register a handler for a specific event type.

        Args:
            event_type: Paystack event type (e.g., 'charge.success')
            handler: Async callable receiving the event's ``data`` payload
        """
        self.event_handlers[event_type] = handler
        logger.info("webhook_handler_registered", event_type=event_type)

    @staticmethod
    def _acknowledge(
        event_type: Optional[str], status: str, reference: Optional[str] = None
    ) -> Dict[str, Any]:
        return {
            "received": True,
            "event": event_type,
            "status": status,
            "reference": reference,
        }

    async def process_event(self, envelope: Any) -> Dict[str, Any]:
        """
        Process one webhook delivery.

        Args:
            envelope: Decoded request body

        Returns:
            Dict[str, Any]: Acknowledgement with the processing status
        """
        start_time = time.time()

        if not isinstance(envelope, dict):
            logger.warning("webhook_envelope_invalid", body_type=type(envelope).__name__)
            metrics.record_webhook_event("invalid", "ignored", time.time() - start_time)
            return self._acknowledge(None, "ignored")

        raw_event = envelope.get("event")
        event_type = _as_text(raw_event)
        data = envelope.get("data")
        if not isinstance(data, dict):
            data = {}
        reference = _as_text(data.get("reference"))

        logger.info("processing_webhook_event", event_type=event_type, reference=reference)

        handler = self.event_handlers.get(raw_event) if isinstance(raw_event, str) else None
        if handler is None:
            logger.info("webhook_no_handler", event_type=event_type, reference=reference)
            metrics.record_webhook_event(
                UNHANDLED_EVENT_LABEL, "ignored", time.time() - start_time
            )
            return self._acknowledge(event_type, "ignored", reference)

        try:
            result = await handler(data)
            status = result.get("status", "processed")
        except RelayError as e:
            logger.error(
                "webhook_event_processing_failed",
                event_type=event_type,
                reference=reference,
                error=str(e),
            )
            status = "failed"

        duration = time.time() - start_time
        metrics.record_webhook_event(event_type, status, duration)
        logger.info(
            "webhook_event_processed",
            event_type=event_type,
            reference=reference,
            status=status,
            duration_seconds=duration,
        )

        return self._acknowledge(event_type, status, reference)
