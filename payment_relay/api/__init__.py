"""FastAPI application and routes."""
from .main import app, configure_services, create_app
from .schemas import (
    CheckoutRequest,
    CheckoutResponse,
    WebhookAcknowledgement,
)

__all__ = [
    "app",
    "configure_services",
    "create_app",
    "CheckoutRequest",
    "CheckoutResponse",
    "WebhookAcknowledgement",
]
