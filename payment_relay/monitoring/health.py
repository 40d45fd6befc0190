"""
Health checks for liveness/readiness probes.

The relay is ready once its database answers and holds both record tables.
"""
import time
from typing import Any, Dict, List, Optional

import structlog
from sqlalchemy import inspect, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from payment_relay.database.connection import get_session_factory
from payment_relay.database.models import OrderRecord, TransactionRecord

logger = structlog.get_logger(__name__)

REQUIRED_TABLES = (TransactionRecord.__tablename__, OrderRecord.__tablename__)


class HealthCheckError(Exception):
    """Raised when health check fails."""

    pass


class HealthCheck:
    """Health check service for the relay's dependencies."""

    def __init__(
        self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None
    ) -> None:
        """
        Initialize health check service.

        Args:
            session_factory: Optional session factory (defaults to the global one)
        """
        self.session_factory = session_factory

    async def check_database(self) -> Dict[str, Any]:
        """
        Check database connectivity and that the record tables exist.

        Returns:
            Dict[str, Any]: Database health status with round-trip latency

        Raises:
            HealthCheckError: If the database is unreachable or tables are missing
        """
        start_time = time.time()
        try:
            session_factory = self.session_factory or get_session_factory()
            async with session_factory() as db:
                await db.execute(text("SELECT 1"))
                tables: List[str] = await db.run_sync(
                    lambda session: inspect(session.connection()).get_table_names()
                )
        except Exception as e:
            logger.error("database_health_check_failed", error=str(e))
            raise HealthCheckError(f"Database health check failed: {str(e)}") from e

        missing = [name for name in REQUIRED_TABLES if name not in tables]
        if missing:
            logger.error("database_tables_missing", missing=missing)
            raise HealthCheckError(f"Missing tables: {', '.join(missing)}")

        return {
            "status": "healthy",
            "service": "database",
            "latency_ms": round((time.time() - start_time) * 1000, 2),
        }

    async def check_all(self) -> Dict[str, Any]:
        """
        Run all health checks.

        Returns:
            Dict[str, Any]: Overall health status
        """
        checks = {}
        all_healthy = True

        try:
            checks["database"] = await self.check_database()
        except HealthCheckError as e:
            checks["database"] = {
                "status": "unhealthy",
                "service": "database",
                "error": str(e),
            }
            all_healthy = False

        return {
            "status": "healthy" if all_healthy else "unhealthy",
            "checks": checks,
        }

    async def liveness(self) -> Dict[str, Any]:
        """Liveness probe: the process is up, dependencies are not checked."""
        return {
            "status": "alive",
            "message": "Application is running",
        }

    async def readiness(self) -> Dict[str, Any]:
        """Readiness probe: all dependencies must be reachable."""
        return await self.check_all()
