"""Debounced push of local edits to the template API.

Each record id owns at most one pending timer. A new edit cancels the
timer and arms a fresh one, so a burst of saves ends in a single push
carrying whatever is on disk when the quiet period ends.
"""

from __future__ import annotations

import asyncio
import logging

from template_sync.core.async_utils import run_sync
from template_sync.errors import TransportError, WorkspaceError
from template_sync.file_handler import read_text_async
from template_sync.sync.context import SessionContext
from template_sync.sync.resolver import ConflictResolver

logger = logging.getLogger(__name__)


class DebouncedPusher:
    """Coalesce modifications per record and push after a quiet period.

    Args:
        ctx: Session context.
        resolver: Called for a path whose push was rejected.
        delay: Quiet period in seconds.
    """

    def __init__(
        self,
        ctx: SessionContext,
        resolver: ConflictResolver,
        delay: float = 1.0,
    ) -> None:
        self.ctx = ctx
        self.resolver = resolver
        self.delay = delay
        # record id -> (path, timer task)
        self._pending: dict[int | str, tuple[str, asyncio.Task]] = {}
        self._running: set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        """Number of armed timers."""
        return len(self._pending)

    def schedule(self, path: str) -> bool:
        """(Re)arm the push timer for the record stored at *path*.

        Returns:
            True if a timer was armed.
        """
        if self.ctx.shutting_down:
            return False

        record = self.ctx.sync_map.get(path)
        if record is None:
            logger.warning(
                "Skipping update: no matching template found for %s", path
            )
            self.ctx.stats.unknown += 1
            return False

        previous = self._pending.pop(record.id, None)
        if previous is not None:
            previous[1].cancel()

        task = asyncio.create_task(self._fire_after(record.id, path))
        self._pending[record.id] = (path, task)
        logger.debug("Push for %s armed (%.0f ms)", path, self.delay * 1000)
        return True

    async def _fire_after(self, record_id: int | str, path: str) -> None:
        await asyncio.sleep(self.delay)

        if self.ctx.shutting_down:
            # Left pending for flush() or discard().
            return

        task = asyncio.current_task()
        entry = self._pending.get(record_id)
        if entry is not None and entry[1] is task:
            del self._pending[record_id]
        path = self.ctx.sync_map.path_for_id(record_id) or path

        self._running.add(task)
        try:
            await self.push(path)
        finally:
            self._running.discard(task)

    async def push(self, path: str) -> None:
        """Push the on-disk content of *path* if it differs from the last
        known remote copy.

        SyncMap is re-read here, never captured when the timer was armed.
        """
        record = self.ctx.sync_map.get(path)
        if record is None:
            logger.warning("Skipping update: %s is no longer tracked", path)
            self.ctx.stats.unknown += 1
            return

        try:
            code = await read_text_async(self.ctx.local_path(path))
        except WorkspaceError as e:
            logger.error("Error reading %s: %s", path, e)
            self.ctx.stats.errors += 1
            return

        record = self.ctx.sync_map.get(path) or record
        if code == record.code:
            logger.debug("No changes to push for %s", path)
            self.ctx.stats.unchanged += 1
            return

        try:
            updated = await run_sync(
                self.ctx.client.update_template,
                record.id,
                code,
                record.updated_at,
            )
        except TransportError as e:
            logger.error("Error updating template %s: %s", path, e)
            self.ctx.stats.conflicts += 1
            await self.resolver.resolve(path)
            return

        self.ctx.sync_map.put(path, updated)
        self.ctx.stats.pushed += 1
        logger.info(
            "Updated template for: %s | Length In: %d, Out: %d",
            path,
            len(code),
            len(updated.code),
        )

    async def flush(self) -> int:
        """Push every pending edit now and wait for pushes in flight.

        Returns:
            Number of timers that were flushed.
        """
        pending = list(self._pending.items())
        self._pending.clear()
        for _, (_, task) in pending:
            task.cancel()

        for record_id, (path, _) in pending:
            await self.push(self.ctx.sync_map.path_for_id(record_id) or path)

        if self._running:
            await asyncio.gather(*self._running, return_exceptions=True)

        if pending:
            logger.info("Flushed %d pending updates", len(pending))
        return len(pending)

    def discard(self) -> int:
        """Cancel every pending timer without pushing.

        Returns:
            Number of edits dropped.
        """
        dropped = len(self._pending)
        for path, task in self._pending.values():
            task.cancel()
            logger.warning("Dropping pending update for %s", path)
        self._pending.clear()
        return dropped

    async def cancel_running(self) -> int:
        """Cancel pushes already in flight and wait for them to unwind.

        A cancelled push never reaches the conflict resolver, so nothing
        is written into the workspace afterwards.

        Returns:
            Number of pushes cancelled.
        """
        running = list(self._running)
        for task in running:
            task.cancel()
        if running:
            await asyncio.gather(*running, return_exceptions=True)
            logger.warning("Cancelled %d updates in flight", len(running))
        return len(running)
