"""Configuration package for the payment relay."""
from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
