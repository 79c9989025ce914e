"""Initial population of the workspace from a full remote listing."""

from __future__ import annotations

import logging

from template_sync.core.async_utils import run_sync
from template_sync.errors import TransportError, WorkspaceError
from template_sync.file_handler import write_text_async
from template_sync.reference_doc import REFERENCE_DOC, REFERENCE_DOC_NAME
from template_sync.sync.context import SessionContext

logger = logging.getLogger(__name__)


class WorkspaceSnapshot:
    """Materialise every remote template under the workspace root.

    Args:
        ctx: The session context to populate.
    """

    def __init__(self, ctx: SessionContext) -> None:
        self.ctx = ctx

    async def populate(self) -> int:
        """Download all templates and fill the SyncMap.

        A failed listing is not fatal: the session continues with an empty
        workspace. A failed write skips that one record.

        Returns:
            Number of records written to disk.
        """
        root = self.ctx.root
        logger.info("Fetching templates into %s", root)
        try:
            await run_sync(root.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise WorkspaceError(f"Cannot create workspace {root}: {e}", root) from e

        await self._write_reference_doc()

        try:
            records = await run_sync(self.ctx.client.list_templates)
        except TransportError as e:
            logger.error("Error fetching templates: %s", e)
            self.ctx.stats.errors += 1
            return 0

        written = 0
        for record in records:
            rel = record.relative_path
            if not rel:
                logger.debug("Skipping template %s without file path", record.id)
                continue
            try:
                target = self.ctx.local_path(rel)
                await write_text_async(target, record.code)
            except (ValueError, WorkspaceError) as e:
                logger.error("Error writing %s: %s", rel, e)
                self.ctx.stats.errors += 1
                continue
            self.ctx.sync_map.put(rel, record)
            written += 1
            logger.info("Created: %s", rel)

        self.ctx.stats.snapshot = written
        logger.info(
            "Downloaded %d templates. They will be deleted on exit.", written
        )
        return written

    async def _write_reference_doc(self) -> None:
        target = self.ctx.root / REFERENCE_DOC_NAME
        try:
            await write_text_async(target, REFERENCE_DOC)
        except WorkspaceError as e:
            logger.warning("Could not write %s: %s", REFERENCE_DOC_NAME, e)
