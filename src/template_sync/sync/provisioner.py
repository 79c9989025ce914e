"""Remote provisioning of templates for newly created local files."""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager, nullcontext
from typing import Protocol

from template_sync.core.async_utils import run_sync
from template_sync.errors import TransportError, WorkspaceError
from template_sync.file_handler import move_file_async, remove_file_async
from template_sync.models import Record
from template_sync.sync.context import SessionContext
from template_sync.sync.pusher import DebouncedPusher

logger = logging.getLogger(__name__)


class PausableSource(Protocol):
    """Anything that can stop reporting changes for a set of paths."""

    def paused(self, *relative_paths: str) -> AbstractContextManager[None]:
        ...  # pragma: no cover


class SchemaProvisioner:
    """Create a remote template for every new local file.

    The server owns naming: when it assigns a different path, the local
    file is moved there. A file the server refuses is deleted.

    Args:
        ctx: Session context.
        pusher: Receives creates for paths that are already tracked.
        watcher: Event source paused while a file is relocated.
    """

    def __init__(
        self,
        ctx: SessionContext,
        pusher: DebouncedPusher,
        watcher: PausableSource | None = None,
    ) -> None:
        self.ctx = ctx
        self.pusher = pusher
        self.watcher = watcher

    async def provision(self, path: str) -> Record | None:
        """Provision *path* and register the resulting record.

        Returns:
            The canonical record, or ``None`` when nothing was provisioned.
        """
        if self.ctx.shutting_down:
            return None

        if path in self.ctx.sync_map:
            # Rename-over saves report a create for an existing file.
            logger.debug("%s already tracked, treating as modification", path)
            self.pusher.schedule(path)
            return None

        try:
            result = await run_sync(self.ctx.client.provision_template, path)
            record = await run_sync(
                self.ctx.client.get_template, result.tmpl_main_id
            )
        except TransportError as e:
            logger.error("Error creating template for %s: %s", path, e)
            self.ctx.stats.rejected += 1
            await self._discard_local(path)
            return None

        canonical = record.relative_path or path
        if canonical != path:
            try:
                await self._relocate(path, canonical)
            except (ValueError, WorkspaceError) as e:
                logger.error(
                    "Error renaming %s to %s: %s", path, canonical, e
                )
                self.ctx.stats.errors += 1
                return None
            self.ctx.stats.renamed += 1
            logger.info("Renamed file from %s to %s", path, canonical)

        self.ctx.sync_map.put(canonical, record)
        self.ctx.stats.provisioned += 1
        logger.info("Created template for: %s", canonical)
        return record

    async def _relocate(self, old: str, new: str) -> None:
        src = self.ctx.local_path(old)
        dst = self.ctx.local_path(new)
        guard = self.watcher.paused(old, new) if self.watcher else nullcontext()
        with guard:
            await move_file_async(src, dst)

    async def _discard_local(self, path: str) -> None:
        try:
            removed = await remove_file_async(self.ctx.local_path(path))
        except (ValueError, WorkspaceError) as e:
            logger.error("Error deleting %s: %s", path, e)
            self.ctx.stats.errors += 1
            return
        if removed:
            logger.info("Deleted unprovisioned file: %s", path)
