"""
Database connection utilities.
"""

import time
from typing import Any, Dict

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from cleanops.config.logging import get_logger

logger = get_logger(__name__)


def configure_sqlite_engine(engine: AsyncEngine) -> None:
    """
    Make SQLite behave like the production database for our purposes.

    The driver's implicit BEGIN is disabled and every transaction starts with
    BEGIN IMMEDIATE, so the read-check-update sequences of concurrent writers
    are serialized on the database lock. Foreign keys are switched on.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


async def get_database_health(session: AsyncSession) -> Dict[str, Any]:
    """Check database health."""
    try:
        start_time = time.time()

        result = await session.execute(text("SELECT 1"))
        result.fetchone()

        response_time = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "response_time_ms": round(response_time, 2),
            "dialect": session.bind.dialect.name if session.bind else "unknown",
        }

    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        return {"status": "unhealthy", "error": str(e)}
