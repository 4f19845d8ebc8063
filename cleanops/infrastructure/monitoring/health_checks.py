"""
Health check implementations for the application.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from cleanops.config.logging import get_logger
from cleanops.infrastructure.database.connection import get_database_health

logger = get_logger(__name__)


class HealthChecker:
    """Health checker for application components."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session
        self.checks = {
            "database": self._check_database,
        }

    async def run_health_checks(self) -> Dict[str, Any]:
        """Run all health checks."""
        results = {}

        for check_name, check_func in self.checks.items():
            try:
                results[check_name] = await check_func()
            except Exception as e:
                logger.error("Health check failed", check_name=check_name, error=str(e))
                results[check_name] = {"status": "error", "error": str(e)}

        return results

    async def _check_database(self) -> Dict[str, Any]:
        return await get_database_health(self.db_session)

    async def check_readiness(self) -> bool:
        """Check if the service is ready to receive traffic."""
        results = await self.run_health_checks()
        return all(result.get("status") == "healthy" for result in results.values())

    async def check_all_components(self) -> Dict[str, Any]:
        """Check all system components."""
        results = await self.run_health_checks()
        healthy = all(result.get("status") == "healthy" for result in results.values())

        return {
            "status": "healthy" if healthy else "unhealthy",
            "components": results,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
