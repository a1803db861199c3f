"""Forward PostgreSQL change notifications to a callback.

Triggers in schema.sql call pg_notify('league_changes', <table name>) on
every write. The listener holds one dedicated connection and hands the
table name to on_change, which is expected to mark the snapshot dirty.
"""

import logging
from typing import Callable, Optional

import asyncpg

logger = logging.getLogger(__name__)

CHANNEL = "league_changes"


class ChangeListener:

    def __init__(self, pool: asyncpg.Pool, on_change: Callable[[str], None], channel: str = CHANNEL):
        self._pool = pool
        self._on_change = on_change
        self._channel = channel
        self._conn: Optional[asyncpg.Connection] = None

    @property
    def listening(self) -> bool:
        return self._conn is not None

    def _handle(self, connection, pid, channel, payload) -> None:
        logger.debug("Change notification on %s: %s", channel, payload)
        self._on_change(payload or "")

    async def start(self) -> None:
        if self._conn is not None:
            return
        self._conn = await self._pool.acquire()
        await self._conn.add_listener(self._channel, self._handle)
        logger.info("Listening for changes on %s", self._channel)

    async def stop(self) -> None:
        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        try:
            await conn.remove_listener(self._channel, self._handle)
        finally:
            await self._pool.release(conn)
