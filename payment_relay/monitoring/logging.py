"""
Structured logging for the relay.

structlog renders every event as JSON on stdout. Card data and credentials
that may ride along in charge payloads are redacted before rendering.
"""
import logging
import sys
from typing import Any, Callable, Optional

import structlog
from pythonjsonlogger import jsonlogger

from payment_relay.config import Settings, get_settings

REDACTED = "[REDACTED]"

SENSITIVE_KEYS = frozenset(
    {
        "authorization",
        "card",
        "cvv",
        "otp",
        "password",
        "pin",
        "paystack_secret_key",
        "secret",
    }
)


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: REDACTED if str(key).lower() in SENSITIVE_KEYS else _redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact(item) for item in value]
    return value


def redact_sensitive_fields(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """
    Replace card details and credentials anywhere in the event with a marker.

    Args:
        logger: Logger instance
        method_name: Log method name
        event_dict: Event dictionary

    Returns:
        dict[str, Any]: Event dictionary safe to write out
    """
    return _redact(event_dict)


def app_context_processor(settings: Settings) -> Callable[..., dict[str, Any]]:
    """Build a processor stamping the app name and environment on each event."""

    def add_app_context(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict["app_name"] = settings.app_name
        event_dict["app_env"] = settings.app_env
        return event_dict

    return add_app_context


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure structlog over a JSON stdout handler.

    Args:
        settings: Optional settings (defaults to the cached environment settings)
    """
    settings = settings or get_settings()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            app_context_processor(settings),
            redact_sensitive_fields,
            structlog.processors.JSONRenderer(default=str),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # structlog has already rendered JSON; the formatter only wraps it
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(jsonlogger.JsonFormatter("%(message)s"))
    root_logger.addHandler(stdout_handler)

    # Gateway and SQL chatter stays out of the relay's own event stream
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )

    structlog.get_logger(__name__).info(
        "logging_configured",
        log_level=settings.log_level,
        app_env=settings.app_env,
        test_mode=settings.is_test_mode,
    )
