"""Database package for the payment relay."""
from .connection import close_db, get_session_factory, init_db
from .models import Base, OrderRecord, TransactionRecord

__all__ = [
    "Base",
    "OrderRecord",
    "TransactionRecord",
    "close_db",
    "get_session_factory",
    "init_db",
]
