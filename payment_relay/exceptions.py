"""Exceptions raised across the payment relay."""
from typing import Any, Dict, Optional


class RelayError(Exception):
    """Base exception for payment relay errors."""

    pass


class GatewayError(RelayError):
    """
    Raised when the payment gateway answers with a non-2xx status.

    Carries the gateway's own status code and body so the HTTP boundary can
    forward them unmodified.
    """

    def __init__(self, status_code: int, body: Any, operation: Optional[str] = None):
        super().__init__(f"Gateway returned {status_code} for {operation or 'request'}")
        self.status_code = status_code
        self.body = body
        self.operation = operation


class GatewayUnavailableError(RelayError):
    """Raised when the gateway cannot be reached at all."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class RecordStoreError(RelayError):
    """Raised when a record store operation fails."""

    pass


class RecordNotFoundError(RecordStoreError):
    """Raised when an update targets a record pair that does not exist."""

    def __init__(self, reference: str, missing: str):
        super().__init__(f"No {missing} record for reference {reference}")
        self.reference = reference
        self.missing = missing


class CheckoutPersistenceError(RelayError):
    """
    Raised when a charge succeeded upstream but its records could not be stored.
    """

    def __init__(self, reference: str, original_error: Exception):
        super().__init__(str(original_error))
        self.reference = reference
        self.original_error = original_error

    def to_payload(self) -> Dict[str, Any]:
        """Error body returned to the caller."""
        return {
            "error": type(self.original_error).__name__,
            "message": str(self.original_error),
            "reference": self.reference,
        }
