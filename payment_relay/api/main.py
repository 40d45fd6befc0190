"""
FastAPI application for the payment relay.

Wires the Paystack client, record store and webhook reconciler onto
application state, maps relay exceptions to HTTP responses, and tags every
request with an ID carried through the structured logs.
"""
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payment_relay import __version__
from payment_relay.config import Settings, get_settings
from payment_relay.core.checkout import CheckoutOrchestrator
from payment_relay.core.record_store import RecordStore
from payment_relay.core.reconciliation import WebhookReconciler
from payment_relay.database.connection import close_db, init_db
from payment_relay.exceptions import (
    CheckoutPersistenceError,
    GatewayError,
    GatewayUnavailableError,
)
from payment_relay.integrations.paystack_client import PaystackClient
from payment_relay.integrations.webhook_handler import WebhookHandler
from payment_relay.monitoring.health import HealthCheck
from payment_relay.monitoring.logging import setup_logging

from .routes import (
    checkout_router,
    fallback_router,
    monitoring_router,
    transaction_router,
    webhook_router,
)

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def configure_services(
    app: FastAPI,
    gateway: PaystackClient,
    record_store: RecordStore,
    health_check: Optional[HealthCheck] = None,
) -> None:
    """
    Wire the relay's services onto application state.

    Args:
        app: FastAPI application
        gateway: Paystack client shared by all requests
        record_store: Store for transaction/order pairs
        health_check: Optional health check service
    """
    reconciler = WebhookReconciler(record_store)
    webhook_handler = WebhookHandler()
    webhook_handler.register_handler("charge.success", reconciler.handle_charge_success)

    app.state.gateway = gateway
    app.state.record_store = record_store
    app.state.checkout = CheckoutOrchestrator(gateway, record_store)
    app.state.webhook_handler = webhook_handler
    app.state.health_check = health_check or HealthCheck()


def register_exception_handlers(app: FastAPI) -> None:
    """Map relay exceptions onto HTTP responses."""

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        # Paystack's own status and body reach the client untouched
        return JSONResponse(status_code=exc.status_code, content=exc.body)

    @app.exception_handler(GatewayUnavailableError)
    async def gateway_unavailable_handler(
        request: Request, exc: GatewayUnavailableError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": "Gateway unavailable", "message": str(exc)},
        )

    @app.exception_handler(CheckoutPersistenceError)
    async def checkout_persistence_handler(
        request: Request, exc: CheckoutPersistenceError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=exc.to_payload(),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again later.",
            },
        )


async def request_context_middleware(request: Request, call_next: Any) -> Response:
    """
    Bind a request ID and timing to the log context of each request.

    An ``X-Request-ID`` sent by the caller is reused so logs can be joined
    with the client's; otherwise a new one is generated.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
    start_time = time.time()

    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            "request_failed",
            error=str(e),
            duration_seconds=time.time() - start_time,
        )
        raise
    else:
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_seconds=time.time() - start_time,
        )
        return response
    finally:
        structlog.contextvars.clear_contextvars()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Optional settings (defaults to the cached environment settings)

    Returns:
        FastAPI: Configured application
    """
    settings = settings or get_settings()
    # Docs are never served in production
    show_docs = settings.debug and not settings.is_production

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, Any]:
        logger.info(
            "relay_starting",
            app_name=settings.app_name,
            env=settings.app_env,
            gateway=settings.paystack_base_url,
            test_mode=settings.is_test_mode,
        )

        try:
            await init_db(settings)
        except Exception as e:
            logger.error("database_initialization_failed", error=str(e))
            raise

        gateway = PaystackClient(settings)
        configure_services(app, gateway, RecordStore())
        logger.info("relay_ready")

        yield

        logger.info("relay_stopping")
        await gateway.close()
        try:
            await close_db()
        except Exception as e:
            logger.error("database_shutdown_error", error=str(e))

    app = FastAPI(
        title="Payment Relay",
        description=(
            "Relays checkout requests to Paystack and keeps transaction and order "
            "records in step with gateway webhooks."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if show_docs else None,
        redoc_url=None,
        openapi_url="/openapi.json" if show_docs else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )
    app.middleware("http")(request_context_middleware)
    register_exception_handlers(app)

    # The catch-all must stay last so every real route matches first
    app.include_router(transaction_router)
    app.include_router(checkout_router)
    app.include_router(webhook_router)
    app.include_router(monitoring_router)
    app.include_router(fallback_router)

    return app


setup_logging()
app = create_app()


def run() -> None:
    """Console entry point: serve the relay with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "payment_relay.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and not settings.is_production,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
