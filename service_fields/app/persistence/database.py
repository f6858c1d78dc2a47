"""
Async database lifecycle for the Field Management store.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from shared.logging import get_logger
from shared.errors import ServiceError
from .models import metadata


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Owns the async engine; hands out one transaction per unit of work."""

    def __init__(self, url: str, echo: bool = False, pool_size: int = 5):
        self.url = url
        self.echo = echo
        self.pool_size = pool_size
        self.logger = get_logger("fields.persistence.database")
        self.engine: Optional[AsyncEngine] = None

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.url).get_backend_name() == "sqlite"

    async def start(self):
        """Create the engine and any missing tables."""
        try:
            options = {"echo": self.echo}
            if not self.is_sqlite:
                options.update(pool_size=self.pool_size, pool_pre_ping=True)

            self.engine = create_async_engine(self.url, **options)
            if self.is_sqlite:
                event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

            async with self.engine.begin() as conn:
                await conn.run_sync(metadata.create_all)

            self.logger.info("Database started", backend=make_url(self.url).get_backend_name())

        except Exception as e:
            self.logger.error("Failed to start database", error=str(e))
            raise ServiceError(f"Database start failed: {e}") from e

    async def stop(self):
        """Dispose of the engine and its pool."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.logger.info("Database stopped")

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[AsyncConnection]:
        """Yield a connection inside a transaction; commit on success."""
        if self.engine is None:
            raise ServiceError("Database is not started")
        async with self.engine.begin() as conn:
            yield conn

    async def health_check(self) -> bool:
        """Check database health."""
        if self.engine is None:
            return False
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            self.logger.warning("Database health check failed", error=str(e))
            return False
