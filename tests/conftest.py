"""
Pytest configuration and fixtures.
"""
import os

os.environ.setdefault("PAYSTACK_SECRET_KEY", "sk_test_fake_key_for_testing")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("APP_ENV", "test")

from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from payment_relay.api.main import configure_services, create_app  # noqa: E402
from payment_relay.config import Settings  # noqa: E402
from payment_relay.core.record_store import RecordStore  # noqa: E402
from payment_relay.database.connection import create_session_factory  # noqa: E402
from payment_relay.database.models import Base  # noqa: E402
from payment_relay.integrations.paystack_client import PaystackClient  # noqa: E402
from payment_relay.monitoring.health import HealthCheck  # noqa: E402

TEST_SECRET = "sk_test_fake_key_for_testing"


class PaystackStub:
    """
    In-process stand-in for the Paystack API.

    Responses are registered per (method, path); every request is captured.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []
        self.error: Optional[Exception] = None

    def add(self, method: str, path: str, status_code: int = 200, json: Any = None) -> None:
        self.routes[(method, path)] = (status_code, json)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"status": False, "message": "Route not stubbed"})
        status_code, body = self.routes[key]
        return httpx.Response(status_code, json=body)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(
        paystack_secret_key=TEST_SECRET,
        paystack_base_url="https://api.paystack.co",
        database_url="sqlite+aiosqlite://",
        app_name="payment-relay-test",
        app_env="test",
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def paystack() -> PaystackStub:
    """Fake Paystack API."""
    return PaystackStub()


@pytest_asyncio.fixture
async def gateway(
    test_settings: Settings, paystack: PaystackStub
) -> AsyncGenerator[PaystackClient, Any]:
    """Paystack client talking to the stub."""
    client = PaystackClient(test_settings, transport=httpx.MockTransport(paystack.handler))
    yield client
    await client.close()


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], Any]:
    """Session factory over a fresh in-memory database."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield create_session_factory(engine)

    await engine.dispose()


@pytest.fixture
def record_store(session_factory: async_sessionmaker[AsyncSession]) -> RecordStore:
    """Record store over the in-memory database."""
    return RecordStore(session_factory)


@pytest.fixture
def app(
    test_settings: Settings,
    gateway: PaystackClient,
    record_store: RecordStore,
    session_factory: async_sessionmaker[AsyncSession],
) -> FastAPI:
    """Application wired to the stub gateway and in-memory store."""
    application = create_app(test_settings)
    configure_services(application, gateway, record_store, HealthCheck(session_factory))
    return application


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, Any]:
    """Create test HTTP client."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def charge_data() -> Dict[str, Any]:
    """The ``data`` object of a successful Paystack charge."""
    return {
        "reference": "T1",
        "amount": 5000,
        "transaction_date": "2024-01-01",
        "status": "success",
        "channel": "card",
        "message": "Approved",
        "fees": 5000,
        "gateway_response": "Approved",
        "metadata": {"user_id": "U1"},
    }


@pytest.fixture
def charge_response(charge_data: Dict[str, Any]) -> Dict[str, Any]:
    """Full Paystack response envelope for a charge."""
    return {"status": True, "message": "Charge attempted", "data": charge_data}


@pytest.fixture
def order_draft() -> Dict[str, Any]:
    """Order draft as submitted by the client app."""
    return {
        "items": [{"name": "Jollof rice", "quantity": 2, "price": 25}],
        "total": 50,
    }


@pytest.fixture
def charge_payload() -> Dict[str, Any]:
    """Charge instructions as submitted by the client app."""
    return {
        "email": "customer@example.com",
        "amount": "5000",
        "card": {"number": "4084084084084081", "cvv": "408", "expiry_month": "01", "expiry_year": "99"},
        "metadata": {"user_id": "U1"},
    }
