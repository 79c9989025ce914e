"""Removal of the workspace at the end of a session."""

from __future__ import annotations

import logging
from pathlib import Path

from template_sync.core.async_utils import run_sync
from template_sync.file_handler import remove_tree

logger = logging.getLogger(__name__)


class WorkspaceReaper:
    """Delete the workspace directory exactly once."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self._reaped = False

    @property
    def reaped(self) -> bool:
        return self._reaped

    async def reap(self) -> bool:
        """Recursively remove the workspace.

        Later calls are no-ops.

        Returns:
            True if a directory was removed by this call.
        """
        if self._reaped:
            return False
        self._reaped = True

        logger.info("Cleaning up %s", self.root)
        try:
            removed = await run_sync(remove_tree, self.root)
        except OSError as e:
            logger.error("Error during cleanup of %s: %s", self.root, e)
            return False

        if removed:
            logger.info("Cleanup complete")
        else:
            logger.debug("Workspace %s was already gone", self.root)
        return removed
