"""Coalesce change notifications into one debounced full reload.

Change events only mark the snapshot dirty. The first mark opens a short
window; marks that arrive inside it ride along, and a single reload runs
when the window closes. Reloads are full reads, never incremental patches.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Set

from models.rules import REFRESH_WINDOW_SECONDS

from .exceptions import CollaboratorError

logger = logging.getLogger(__name__)


class SnapshotRefresher:
    """Debounced trigger for an idempotent reload coroutine."""

    def __init__(
        self,
        reload: Callable[[], Awaitable[Any]],
        *,
        window: float = REFRESH_WINDOW_SECONDS,
    ):
        self._reload = reload
        self._window = window
        self._pending: Optional[asyncio.Task] = None
        self._dirty_tables: Set[str] = set()
        self._dirty = False
        self.reload_count = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def mark_dirty(self, table: Optional[str] = None) -> None:
        """Record a change. Must be called from inside the running event loop."""
        if table:
            self._dirty_tables.add(table)
        self._dirty = True
        if self.pending:
            return
        self._pending = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        # A mark that lands while a reload is reading opens another window in this task.
        while self._dirty:
            await asyncio.sleep(self._window)
            tables = sorted(self._dirty_tables)
            self._dirty_tables.clear()
            self._dirty = False
            logger.debug("Reloading snapshot after changes to %s", tables or "unknown tables")
            try:
                await self._reload()
                self.reload_count += 1
            except CollaboratorError:
                # The reload target records the error state for the UI; a later change retries.
                logger.warning("Debounced reload failed", exc_info=True)

    async def flush(self) -> None:
        """Wait for the in-flight reload, if any."""
        if self._pending is not None:
            await self._pending

    async def close(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
            try:
                await self._pending
            except asyncio.CancelledError:
                pass
        self._pending = None
