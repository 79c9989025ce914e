"""In-memory index from workspace path to the last-known remote record.

``SyncMap`` is the session's single source of truth for which local files
have a remote counterpart. It lives on the event-loop thread only and is
never persisted: each session starts from a fresh snapshot.
"""

from __future__ import annotations

from collections.abc import Iterator

from template_sync.file_handler import normalize_path
from template_sync.models import Record


class SyncMap:
    """Map normalised relative paths to ``Record`` objects.

    A path is a key only when a remote record is known to exist for it.
    Entries are replaced, never removed, during a session.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Record] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and normalize_path(path) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, path: str) -> Record | None:
        """Return the record for *path*, or ``None`` if unprovisioned."""
        return self._entries.get(normalize_path(path))

    def put(self, path: str, record: Record) -> None:
        """Insert or replace the record stored under *path*."""
        self._entries[normalize_path(path)] = record

    def path_for_id(self, record_id: int | str) -> str | None:
        """Return the path currently holding *record_id*, if any."""
        for path, record in self._entries.items():
            if record.id == record_id:
                return path
        return None
