"""A sync session: snapshot, watch, react, reap.

``SyncSession`` wires the components around one ``SessionContext`` and
runs a single consumer loop over the watcher's event queue:

1. ``start()`` downloads the snapshot, then starts the watcher.
2. ``run()`` dispatches MODIFIED events to the pusher and CREATED events
   to the provisioner until shutdown.
3. ``shutdown()`` stops the watcher, flushes or drops pending pushes
   according to the configured mode, and deletes the workspace.
"""

from __future__ import annotations

import asyncio
import logging

from template_sync.config import Config, ShutdownMode
from template_sync.core.async_utils import run_sync
from template_sync.core.client import RemoteClient
from template_sync.models import EventKind, WatchEvent
from template_sync.sync.context import SessionContext
from template_sync.sync.provisioner import SchemaProvisioner
from template_sync.sync.pusher import DebouncedPusher
from template_sync.sync.reaper import WorkspaceReaper
from template_sync.sync.resolver import ConflictResolver
from template_sync.sync.snapshot import WorkspaceSnapshot
from template_sync.sync.watcher import ChangeWatcher

logger = logging.getLogger(__name__)


class SyncSession:
    """Own every component of one sync session.

    Args:
        config: Validated configuration.
        client: Template API client; built from *config* when omitted.
        watch: Start the filesystem observer. Tests feed ``queue``
            directly with ``watch=False``.
    """

    def __init__(
        self,
        config: Config,
        client: RemoteClient | None = None,
        watch: bool = True,
    ) -> None:
        self.config = config
        self.ctx = SessionContext(
            client=client or RemoteClient(config),
            root=config.workspace_root,
        )
        self.queue: asyncio.Queue[WatchEvent | None] = asyncio.Queue()
        self.watch = watch

        self.watcher = ChangeWatcher(self.ctx.root, self.queue)
        self.resolver = ConflictResolver(self.ctx)
        self.pusher = DebouncedPusher(
            self.ctx, self.resolver, delay=config.debounce_ms / 1000
        )
        self.provisioner = SchemaProvisioner(
            self.ctx, self.pusher, self.watcher
        )
        self.snapshot = WorkspaceSnapshot(self.ctx)
        self.reaper = WorkspaceReaper(self.ctx.root)

        self._tasks: set[asyncio.Task] = set()
        self._closed = asyncio.Event()

    @property
    def sync_map(self):
        return self.ctx.sync_map

    @property
    def stats(self):
        return self.ctx.stats

    async def start(self) -> int:
        """Populate the workspace and begin watching it.

        Returns:
            Number of templates downloaded.
        """
        count = await self.snapshot.populate()
        if self.watch:
            self.watcher.start()
        return count

    async def run(self) -> None:
        """Consume watcher events until shutdown completes."""
        while True:
            event = await self.queue.get()
            if event is None or self.ctx.shutting_down:
                break
            self.handle_event(event)
        await self._closed.wait()

    def handle_event(self, event: WatchEvent) -> None:
        """Dispatch a single event. Provisioning runs as a tracked task."""
        if self.ctx.shutting_down:
            return
        if event.kind is EventKind.MODIFIED:
            self.pusher.schedule(event.path)
        elif event.kind is EventKind.CREATED:
            task = asyncio.create_task(self.provisioner.provision(event.path))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def shutdown(self) -> bool:
        """Stop the session and delete the workspace.

        Only the first call does anything.

        Returns:
            True if this call performed the shutdown.
        """
        if self.ctx.shutting_down:
            return False
        self.ctx.shutting_down = True
        logger.warning("Shutting down...")

        await run_sync(self.watcher.stop)
        self.queue.put_nowait(None)

        try:
            if self.config.shutdown_mode is ShutdownMode.FLUSH:
                await self.pusher.flush()
                if self._tasks:
                    await asyncio.gather(*self._tasks, return_exceptions=True)
            else:
                self.ctx.stats.dropped += self.pusher.discard()
                self.ctx.stats.dropped += await self.pusher.cancel_running()
                tasks = list(self._tasks)
                for task in tasks:
                    task.cancel()
                if tasks:
                    await asyncio.gather(*tasks, return_exceptions=True)

            await self.reaper.reap()
            logger.info(self.ctx.stats.summary())
        finally:
            self._closed.set()
        return True

    async def wait_closed(self) -> None:
        await self._closed.wait()
