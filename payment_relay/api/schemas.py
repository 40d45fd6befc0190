"""
Pydantic schemas for API request/response models.

Gateway pass-through routes forward arbitrary JSON and have no schema here.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CheckoutRequest(BaseModel):
    """Request schema for a checkout."""

    order: Dict[str, Any] = Field(
        default_factory=dict, description="Order draft (items, totals, delivery details, ...)"
    )
    charge: Dict[str, Any] = Field(
        default_factory=dict, description="Charge instructions forwarded to Paystack"
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "order": {"items": [{"name": "Jollof rice", "quantity": 2}], "total": 50},
                    "charge": {
                        "email": "customer@example.com",
                        "amount": "5000",
                        "card": {
                            "number": "4084084084084081",
                            "cvv": "408",
                            "expiry_month": "01",
                            "expiry_year": "99",
                        },
                        "metadata": {"user_id": "U1"},
                    },
                }
            ]
        }
    )


class CheckoutResponse(BaseModel):
    """Response schema for a checkout."""

    status: Optional[str] = Field(default=None, description="Charge status reported by Paystack")
    message: Optional[str] = Field(default=None, description="Charge message reported by Paystack")
    reference: str = Field(..., description="Gateway reference keying the transaction and order")


class CheckoutErrorResponse(BaseModel):
    """Response schema when a charge could not be recorded."""

    error: str = Field(..., description="Underlying error type")
    message: str = Field(..., description="Underlying error message")
    reference: str = Field(..., description="Gateway reference of the unrecorded charge")


class WebhookAcknowledgement(BaseModel):
    """Response schema for webhook deliveries."""

    received: bool = Field(default=True, description="Delivery was accepted")
    event: Optional[str] = Field(default=None, description="Event type")
    status: str = Field(..., description="reconciled, unmatched, failed or ignored")
    reference: Optional[str] = Field(default=None, description="Gateway reference in the event")


class AccessDeniedResponse(BaseModel):
    """Response schema for unmatched routes."""

    url: str = Field(..., description="Requested URL")


class HealthCheckResponse(BaseModel):
    """Response schema for health checks."""

    status: str = Field(..., description="Overall health status (healthy/unhealthy)")
    checks: Optional[Dict[str, Any]] = Field(default=None, description="Individual service checks")
    message: Optional[str] = Field(default=None, description="Status message")
