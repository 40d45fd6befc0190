"""FastAPI dependencies resolving the services held on application state."""
from fastapi import Request

from payment_relay.core.checkout import CheckoutOrchestrator
from payment_relay.integrations.paystack_client import PaystackClient
from payment_relay.integrations.webhook_handler import WebhookHandler
from payment_relay.monitoring.health import HealthCheck


def get_gateway(request: Request) -> PaystackClient:
    return request.app.state.gateway


def get_checkout(request: Request) -> CheckoutOrchestrator:
    return request.app.state.checkout


def get_webhook_handler(request: Request) -> WebhookHandler:
    return request.app.state.webhook_handler


def get_health_check(request: Request) -> HealthCheck:
    return request.app.state.health_check
