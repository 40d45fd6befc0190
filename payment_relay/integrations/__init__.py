"""External integrations for payment processing."""
from .paystack_client import PaystackClient
from .webhook_handler import WebhookHandler

__all__ = ["PaystackClient", "WebhookHandler"]
