"""asyncpg pool lifecycle for the league database."""

import logging
from pathlib import Path
from typing import Optional

import asyncpg

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")


def read_schema(path: Optional[Path] = None) -> str:
    return (path or SCHEMA_PATH).read_text(encoding="utf-8")


class DatabasePool:
    """Owns the single asyncpg pool of the process (see `db` below)."""

    def __init__(self):
        self._pool: Optional[asyncpg.Pool] = None

    @property
    def initialized(self) -> bool:
        return self._pool is not None

    async def initialize(
        self,
        dsn: Optional[str] = None,
        *,
        min_size: int = 1,
        max_size: int = 5,
        create_schema: bool = True,
    ) -> asyncpg.Pool:
        """Connect once and make sure the league schema exists.

        With dsn=None asyncpg falls back to the PGHOST/PGUSER/... variables.
        """
        if self._pool is None:
            self._pool = await asyncpg.create_pool(dsn=dsn, min_size=min_size, max_size=max_size)
            logger.info("League database pool ready (min=%d, max=%d)", min_size, max_size)
            if create_schema:
                await self.apply_schema(read_schema())
        return self._pool

    async def apply_schema(self, sql: str) -> None:
        """Run the idempotent schema DDL in one transaction."""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(sql)

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info("League database pool closed")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call await db.initialize() first.")
        return self._pool

    async def health_check(self) -> bool:
        """SELECT 1 against the pool; False on any connection-level failure."""
        if self._pool is None:
            return False
        try:
            async with self._pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.warning("Database health check failed: %s", e)
            return False
        return True


db = DatabasePool()
