"""
Paystack API client.

Implements the four gateway calls the relay forwards:
- Transaction initialization
- Transaction verification
- Charge creation
- OTP submission

Every call carries the configured bearer credential. Non-2xx responses are
raised as GatewayError with the gateway's status code and body untouched;
nothing is retried.
"""
import time
from typing import Any, Dict, Optional

import httpx
import structlog

from payment_relay.config import Settings, get_settings
from payment_relay.exceptions import GatewayError, GatewayUnavailableError
from payment_relay.monitoring.metrics import metrics

logger = structlog.get_logger(__name__)


class PaystackClient:
    """
    Async wrapper around the Paystack REST API.

    One ``httpx.AsyncClient`` is held for the lifetime of the client and must
    be released with ``close()``.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize Paystack client.

        Args:
            settings: Optional settings (defaults to the cached environment settings)
            transport: Optional httpx transport, used to fake the gateway in tests
        """
        self.settings = settings or get_settings()
        self.base_url = self.settings.paystack_base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "authorization": f"Bearer {self.settings.paystack_secret_key}",
                "content-type": "application/json",
            },
            timeout=httpx.Timeout(self.settings.gateway_timeout_seconds),
            transport=transport,
        )

        logger.info(
            "paystack_client_initialized",
            base_url=self.base_url,
            test_mode=self.settings.is_test_mode,
        )

    @staticmethod
    def _decode_body(response: httpx.Response) -> Any:
        """Return the JSON body, or the raw text wrapped in a message object."""
        try:
            return response.json()
        except ValueError:
            return {"message": response.text}

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        payload: Optional[Any] = None,
    ) -> Any:
        """
        Send one request to the gateway.

        Args:
            operation: Operation name used in logs and metrics
            method: HTTP method
            path: Path relative to the Paystack base URL
            payload: Optional JSON body, forwarded verbatim

        Returns:
            Any: Decoded gateway response body

        Raises:
            GatewayError: If the gateway answers with a non-2xx status
            GatewayUnavailableError: If the gateway cannot be reached
        """
        start_time = time.time()
        logger.info("gateway_request", operation=operation, method=method, path=path)

        try:
            if payload is None:
                response = await self._client.request(method, path)
            else:
                response = await self._client.request(method, path, json=payload)
        except httpx.RequestError as e:
            duration = time.time() - start_time
            metrics.record_gateway_call(operation, "unavailable", duration)
            logger.error(
                "gateway_unavailable",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise GatewayUnavailableError(
                f"Payment gateway unreachable: {str(e)}", operation=operation
            ) from e

        duration = time.time() - start_time
        body = self._decode_body(response)

        if response.is_success:
            metrics.record_gateway_call(operation, "ok", duration)
            logger.info(
                "gateway_response",
                operation=operation,
                status_code=response.status_code,
                duration_seconds=duration,
            )
            return body

        metrics.record_gateway_call(operation, "rejected", duration)
        logger.warning(
            "gateway_error",
            operation=operation,
            status_code=response.status_code,
            duration_seconds=duration,
        )
        raise GatewayError(response.status_code, body, operation=operation)

    async def initialize_transaction(self, payload: Any) -> Any:
        """
        Initialize a transaction.

        Args:
            payload: Gateway-specific initialization payload, forwarded verbatim

        Returns:
            Any: Gateway response body
        """
        return await self._request(
            "initialize_transaction", "POST", "/transaction/initialize", payload
        )

    async def verify_transaction(self, reference: str) -> Any:
        """
        Verify a transaction by its reference.

        Args:
            reference: Gateway transaction reference

        Returns:
            Any: Gateway response body
        """
        return await self._request(
            "verify_transaction", "GET", f"/transaction/verify/{reference}"
        )

    async def create_charge(self, charge_payload: Any) -> Dict[str, Any]:
        """
        Create a charge.

        Args:
            charge_payload: Charge instructions (amount, email, card/bank, metadata)

        Returns:
            Dict[str, Any]: Gateway response body; the charge itself is under ``data``
        """
        return await self._request("create_charge", "POST", "/charge/", charge_payload)

    async def submit_otp(self, otp_payload: Any) -> Any:
        """
        Submit the one-time passcode for a pending charge.

        Args:
            otp_payload: ``{"otp": ..., "reference": ...}``

        Returns:
            Any: Gateway response body
        """
        return await self._request("submit_otp", "POST", "/charge/submit_otp", otp_payload)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
