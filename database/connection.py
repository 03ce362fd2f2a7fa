import logging
from pathlib import Path
from typing import Optional

import asyncpg

log = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


class DatabasePool:
    """Manages the asyncpg connection pool lifecycle."""

    def __init__(self):
        self._pool: Optional[asyncpg.Pool] = None

    async def initialize(
        self,
        dsn: Optional[str] = None,
        *,
        min_size: int = 1,
        max_size: int = 10,
    ) -> None:
        """Create the connection pool. Call once at app startup.

        Without a DSN, asyncpg falls back to the libpq PG* environment variables.
        """
        if self._pool is not None:
            return
        self._pool = await asyncpg.create_pool(dsn=dsn, min_size=min_size, max_size=max_size)
        log.info("Database pool ready (min=%d, max=%d)", min_size, max_size)

    async def apply_schema(self, schema_path: Path = SCHEMA_PATH) -> None:
        """Create tables and indexes that don't exist yet."""
        sql = schema_path.read_text(encoding="utf-8")
        async with self.pool.acquire() as conn:
            await conn.execute(sql)

    async def close(self) -> None:
        """Close all connections. Call at app shutdown."""
        if self._pool:
            await self._pool.close()
            self._pool = None

    @property
    def pool(self) -> asyncpg.Pool:
        """Get the pool, raising if not initialized."""
        if self._pool is None:
            raise RuntimeError(
                "Database pool not initialized. Call await db.initialize() first."
            )
        return self._pool

    async def health_check(self) -> bool:
        """Test connectivity with SELECT 1."""
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (OSError, RuntimeError, asyncpg.PostgresError):
            log.warning("Database health check failed", exc_info=True)
            return False


# Module-level instance used by the API lifespan
db = DatabasePool()
