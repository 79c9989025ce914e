"""Remote-wins conflict resolution for rejected pushes."""

from __future__ import annotations

import logging

from template_sync.core.async_utils import run_sync
from template_sync.errors import TransportError, WorkspaceError
from template_sync.file_handler import write_text_async
from template_sync.sync.context import SessionContext

logger = logging.getLogger(__name__)


class ConflictResolver:
    """Replace a local file with the server's copy after a failed push.

    The local edit is discarded. Nothing is merged or retried.
    """

    def __init__(self, ctx: SessionContext) -> None:
        self.ctx = ctx

    async def resolve(self, path: str) -> bool:
        """Refresh *path* from the server.

        Returns:
            True if the file and SyncMap now hold the fetched copy.
        """
        if self.ctx.shutting_down:
            logger.debug("Not refreshing %s: workspace is being removed", path)
            return False

        record = self.ctx.sync_map.get(path)
        if record is None:
            logger.warning("Cannot refresh %s: no matching template", path)
            return False

        try:
            fresh = await run_sync(self.ctx.client.get_template, record.id)
        except TransportError as e:
            logger.error("Error refreshing template %s: %s", path, e)
            self.ctx.stats.errors += 1
            return False

        try:
            await write_text_async(self.ctx.local_path(path), fresh.code)
        except WorkspaceError as e:
            logger.error("Error writing refreshed %s: %s", path, e)
            self.ctx.stats.errors += 1
            return False

        self.ctx.sync_map.put(path, fresh)
        logger.info("Refreshed template for: %s", path)
        return True
