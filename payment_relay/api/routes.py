"""
API routes for the payment relay.
"""
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from payment_relay.core.checkout import CheckoutOrchestrator
from payment_relay.integrations.paystack_client import PaystackClient
from payment_relay.integrations.webhook_handler import WebhookHandler
from payment_relay.monitoring.health import HealthCheck
from payment_relay.monitoring.metrics import metrics

from .dependencies import get_checkout, get_gateway, get_health_check, get_webhook_handler
from .schemas import (
    AccessDeniedResponse,
    CheckoutErrorResponse,
    CheckoutRequest,
    CheckoutResponse,
    HealthCheckResponse,
    WebhookAcknowledgement,
)

logger = structlog.get_logger(__name__)

# Create routers
transaction_router = APIRouter(prefix="/v1/transactions", tags=["transactions"])
checkout_router = APIRouter(prefix="/v1/checkout", tags=["checkout"])
webhook_router = APIRouter(tags=["webhooks"])
monitoring_router = APIRouter(tags=["monitoring"])
fallback_router = APIRouter(include_in_schema=False)


@transaction_router.post(
    "/create",
    summary="Initialize a transaction",
    description="Forward an initialization payload to Paystack and return its response",
)
async def create_transaction(
    payload: Any = Body(default=None),
    gateway: PaystackClient = Depends(get_gateway),
) -> Any:
    """Initialize a gateway transaction."""
    return await gateway.initialize_transaction(payload)


@transaction_router.get(
    "/verify/{reference}",
    summary="Verify a transaction",
    description="Look up a transaction on Paystack by reference",
)
async def verify_transaction(
    reference: str,
    gateway: PaystackClient = Depends(get_gateway),
) -> Any:
    """Verify a gateway transaction."""
    return await gateway.verify_transaction(reference)


@checkout_router.post(
    "",
    response_model=CheckoutResponse,
    responses={500: {"model": CheckoutErrorResponse}},
    summary="Checkout",
    description="Charge the customer and record the transaction with its order",
)
async def checkout(
    request: CheckoutRequest,
    orchestrator: CheckoutOrchestrator = Depends(get_checkout),
) -> Dict[str, Any]:
    """
    Charge through Paystack, then store the transaction and order together.

    Only the charge's status, message and reference are returned.
    """
    logger.info("api_checkout_request", order_fields=sorted(request.order.keys()))
    return await orchestrator.checkout(request.order, request.charge)


@checkout_router.post(
    "/otp",
    summary="Submit OTP",
    description="Forward the one-time passcode for a pending charge to Paystack",
)
async def submit_otp(
    payload: Any = Body(default=None),
    gateway: PaystackClient = Depends(get_gateway),
) -> Any:
    """Submit an OTP for a charge."""
    return await gateway.submit_otp(payload)


@webhook_router.post(
    "/webhook",
    response_model=WebhookAcknowledgement,
    summary="Paystack webhook endpoint",
    description="Reconcile stored records from Paystack event notifications",
)
async def paystack_webhook(
    request: Request,
    webhook_handler: WebhookHandler = Depends(get_webhook_handler),
) -> Dict[str, Any]:
    """
    Handle Paystack webhook events.

    Always acknowledged with 200; the body reports what was done.
    """
    try:
        envelope = await request.json()
    except ValueError:
        envelope = None

    return await webhook_handler.process_event(envelope)


@monitoring_router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Health check",
    description="Check overall system health",
)
async def health(health_check: HealthCheck = Depends(get_health_check)) -> Dict[str, Any]:
    """Health check endpoint for monitoring."""
    return await health_check.check_all()


@monitoring_router.get(
    "/health/live",
    response_model=HealthCheckResponse,
    summary="Liveness probe",
)
async def liveness(health_check: HealthCheck = Depends(get_health_check)) -> Dict[str, Any]:
    """Liveness probe endpoint."""
    return await health_check.liveness()


@monitoring_router.get(
    "/health/ready",
    response_model=HealthCheckResponse,
    summary="Readiness probe",
)
async def readiness(health_check: HealthCheck = Depends(get_health_check)) -> Dict[str, Any]:
    """Readiness probe endpoint."""
    result = await health_check.readiness()
    if result["status"] != "healthy":
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=result)
    return result


@monitoring_router.get("/metrics", include_in_schema=False)
async def prometheus_metrics() -> Response:
    """Expose Prometheus metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@fallback_router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"],
    response_model=AccessDeniedResponse,
)
async def access_denied(request: Request) -> JSONResponse:
    """Reject every request no other route matched."""
    url = request.url.path
    if request.url.query:
        url = f"{url}?{request.url.query}"

    metrics.record_denied_request(request.method)
    logger.error("client_access_denied", method=request.method, url=url)

    return JSONResponse(status_code=status.HTTP_401_UNAUTHORIZED, content={"url": url})
