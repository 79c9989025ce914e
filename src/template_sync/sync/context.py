"""Session-scoped state shared by every sync component.

One ``SessionContext`` exists per sync session and is passed to each
handler explicitly, so several sessions (or tests) can run side by side.
All fields are touched from the event-loop thread only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from template_sync.core.client import RemoteClient
from template_sync.file_handler import resolve_in_workspace
from template_sync.models import SessionStats
from template_sync.sync.state import SyncMap


@dataclass
class SessionContext:
    """Shared state of one sync session.

    Attributes:
        client: Remote template API client.
        root: Absolute workspace directory.
        sync_map: Path to record index.
        stats: Outcome counters.
        shutting_down: Set once shutdown starts; handlers check it first.
    """

    client: RemoteClient
    root: Path
    sync_map: SyncMap = field(default_factory=SyncMap)
    stats: SessionStats = field(default_factory=SessionStats)
    shutting_down: bool = False

    def local_path(self, relative_path: str) -> Path:
        """Absolute path of a workspace-relative path."""
        return resolve_in_workspace(self.root, relative_path)
