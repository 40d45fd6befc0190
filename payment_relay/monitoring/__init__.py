"""Monitoring and observability package."""
from .health import HealthCheck
from .logging import redact_sensitive_fields, setup_logging
from .metrics import metrics

__all__ = ["metrics", "setup_logging", "redact_sensitive_fields", "HealthCheck"]
