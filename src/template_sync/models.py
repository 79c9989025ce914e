"""Pydantic models shared by the client and the sync engine.

- ``Record``: one remote template projected to a local file.
- ``ProvisionResult``: response of a provisioning request.
- ``EventKind`` / ``WatchEvent``: filesystem events fed to the session.
- ``SessionStats``: per-session outcome counters.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Record(BaseModel):
    """A remote-owned template.

    Identity is ``id``. ``file_path`` is workspace-relative and may be
    reassigned by the server. ``updated_at`` is an opaque marker echoed
    back on updates for optimistic concurrency. Extra server fields are
    kept so nothing is lost when a record is re-serialised.

    Attributes:
        id: Stable record id.
        file_path: Relative path of the local projection, if any.
        code: Template content.
        updated_at: Last-modified marker.
    """

    id: int | str
    file_path: str | None = None
    code: str = ""
    updated_at: str | int | float | None = None

    model_config = ConfigDict(frozen=True, extra="allow")

    @property
    def relative_path(self) -> str | None:
        """``file_path`` in forward-slash form, or ``None``."""
        if not self.file_path:
            return None
        return self.file_path.replace("\\", "/")


class ProvisionResult(BaseModel):
    """Response of ``POST /cli``.

    Attributes:
        tmpl_main_id: Id of the primary template created for the file.
    """

    tmpl_main_id: int | str

    model_config = ConfigDict(frozen=True, extra="allow")


class EventKind(str, Enum):
    """Kinds of workspace change reported by the watcher."""

    MODIFIED = "modified"
    CREATED = "created"


class WatchEvent(BaseModel):
    """A single workspace change, keyed by normalised relative path."""

    kind: EventKind
    path: str

    model_config = {"frozen": True}


class SessionStats(BaseModel):
    """Counters for every outcome of a sync session."""

    pushed: int = 0
    unchanged: int = 0
    unknown: int = 0
    conflicts: int = 0
    provisioned: int = 0
    renamed: int = 0
    rejected: int = 0
    dropped: int = 0
    errors: int = 0

    snapshot: int = Field(default=0, description="Records written at startup")

    def summary(self) -> str:
        """Format a human-readable summary of the session.

        Returns:
            Multi-line summary string with counts by outcome.
        """
        lines = [
            "Sync session summary",
            f"  Downloaded:     {self.snapshot}",
            f"  Pushed:         {self.pushed}",
            f"  Unchanged:      {self.unchanged}",
            f"  Unknown paths:  {self.unknown}",
            f"  Conflicts:      {self.conflicts}",
            f"  Provisioned:    {self.provisioned}",
            f"  Renamed:        {self.renamed}",
            f"  Rejected:       {self.rejected}",
            f"  Dropped:        {self.dropped}",
            f"  Errors:         {self.errors}",
        ]
        return "\n".join(lines)
