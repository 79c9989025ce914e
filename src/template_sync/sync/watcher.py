"""Workspace change detection.

A watchdog observer thread watches the workspace and turns filesystem
notifications into ``WatchEvent`` items on an ``asyncio.Queue``. The
session consumes that queue from a single loop, so ordering and
suspension points stay on the event-loop thread.
"""

from __future__ import annotations

import asyncio
import fnmatch
import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from template_sync.file_handler import normalize_path, to_relative
from template_sync.models import EventKind, WatchEvent
from template_sync.reference_doc import REFERENCE_DOC_NAME

logger = logging.getLogger(__name__)

# Editor metadata, swap files and the static guide.
DEFAULT_IGNORE_PATTERNS: tuple[str, ...] = (
    ".vscode",
    ".idea",
    ".git",
    ".DS_Store",
    "*.swp",
    "*.swx",
    "*~",
    ".#*",
    "4913",
    REFERENCE_DOC_NAME,
)


class _WorkspaceEventHandler(FileSystemEventHandler):
    """Forward watchdog callbacks to the ``ChangeWatcher``."""

    def __init__(self, watcher: ChangeWatcher) -> None:
        super().__init__()
        self.watcher = watcher

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.watcher.emit(EventKind.MODIFIED, event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self.watcher.emit(EventKind.CREATED, event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Editors that save via rename-over surface here; the session
        # treats a create on a tracked path as a modification.
        if not event.is_directory:
            self.watcher.emit(EventKind.CREATED, event.dest_path)


class ChangeWatcher:
    """Emit MODIFIED / CREATED events for files under ``root``.

    Args:
        root: Workspace directory to watch recursively.
        queue: Destination of ``WatchEvent`` items.
        ignore_patterns: Glob patterns matched against the relative path
            and each of its components.
        settle_seconds: How long paths stay suppressed after a
            ``paused()`` block ends, to absorb late notifications.
    """

    def __init__(
        self,
        root: Path,
        queue: asyncio.Queue,
        ignore_patterns: Iterable[str] = DEFAULT_IGNORE_PATTERNS,
        settle_seconds: float = 0.5,
    ) -> None:
        self.root = Path(root).resolve()
        self.queue = queue
        self.ignore_patterns = tuple(ignore_patterns)
        self.settle_seconds = settle_seconds

        self._observer: Observer | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._paused: dict[str, int] = {}
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._observer is not None

    def start(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Start watching. Files that already exist produce no events."""
        if self._observer is not None:
            logger.warning("Watcher already running for %s", self.root)
            return
        self._loop = loop or asyncio.get_running_loop()
        observer = Observer()
        observer.schedule(
            _WorkspaceEventHandler(self), str(self.root), recursive=True
        )
        observer.start()
        self._observer = observer
        logger.info("Watching for file changes in %s", self.root)

    def stop(self, timeout: float = 3.0) -> None:
        """Stop the observer thread and wait for it to exit."""
        observer, self._observer = self._observer, None
        if observer is None:
            return
        observer.stop()
        observer.join(timeout)
        logger.debug("Watcher stopped for %s", self.root)

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def is_ignored(self, relative_path: str) -> bool:
        """True if *relative_path* matches an ignore pattern."""
        rel = normalize_path(relative_path)
        parts = rel.split("/")
        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(rel, pattern):
                return True
            if any(fnmatch.fnmatch(part, pattern) for part in parts):
                return True
        return False

    def is_paused(self, relative_path: str) -> bool:
        with self._lock:
            return self._paused.get(normalize_path(relative_path), 0) > 0

    @contextmanager
    def paused(self, *relative_paths: str) -> Iterator[None]:
        """Suppress events for *relative_paths* while the block runs.

        Used around a relocation so the move is not reported back as a
        new file. Suppression lingers for ``settle_seconds`` after exit.
        """
        paths = [normalize_path(p) for p in relative_paths]
        with self._lock:
            for p in paths:
                self._paused[p] = self._paused.get(p, 0) + 1
        try:
            yield
        finally:
            loop = self._loop
            if self.settle_seconds > 0 and loop is not None and not loop.is_closed():
                loop.call_later(self.settle_seconds, self._resume, paths)
            else:
                self._resume(paths)

    def _resume(self, paths: list[str]) -> None:
        with self._lock:
            for p in paths:
                count = self._paused.get(p, 0) - 1
                if count > 0:
                    self._paused[p] = count
                else:
                    self._paused.pop(p, None)

    # ------------------------------------------------------------------
    # Emission (observer thread)
    # ------------------------------------------------------------------

    def emit(self, kind: EventKind, path: str | bytes) -> None:
        """Queue an event for an absolute *path*, unless filtered.

        Safe to call from the observer thread.
        """
        if isinstance(path, bytes):
            path = path.decode()
        try:
            rel = to_relative(self.root, path)
        except ValueError:
            logger.debug("Ignoring event outside workspace: %s", path)
            return

        if self.is_ignored(rel) or self.is_paused(rel):
            logger.debug("Ignoring %s event for %s", kind.value, rel)
            return

        event = WatchEvent(kind=kind, path=rel)
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("No event loop, dropping %s", event)
            return
        try:
            loop.call_soon_threadsafe(self.queue.put_nowait, event)
        except RuntimeError:
            # Loop closed between the check and the call.
            logger.debug("Event loop closed, dropping %s", event)
