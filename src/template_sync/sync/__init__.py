"""Live sync between a local workspace and remote templates.

Modules:

- ``state``       -- ``SyncMap``: path to record index.
- ``context``     -- ``SessionContext``: state shared by all handlers.
- ``snapshot``    -- ``WorkspaceSnapshot``: initial download.
- ``watcher``     -- ``ChangeWatcher``: watchdog events onto a queue.
- ``pusher``      -- ``DebouncedPusher``: per-record debounced updates.
- ``provisioner`` -- ``SchemaProvisioner``: templates for new files.
- ``resolver``    -- ``ConflictResolver``: remote wins on failed pushes.
- ``reaper``      -- ``WorkspaceReaper``: workspace removal.
- ``session``     -- ``SyncSession``: wiring and the consumer loop.

Usage example
-------------
::

    from template_sync.config import load_config
    from template_sync.sync import SyncSession

    session = SyncSession(load_config(token="abc123-xyz"))
    await session.start()
    try:
        await session.run()
    finally:
        await session.shutdown()
"""

from .context import SessionContext
from .pusher import DebouncedPusher
from .provisioner import SchemaProvisioner
from .reaper import WorkspaceReaper
from .resolver import ConflictResolver
from .session import SyncSession
from .snapshot import WorkspaceSnapshot
from .state import SyncMap
from .watcher import ChangeWatcher

__all__ = [
    "ChangeWatcher",
    "ConflictResolver",
    "DebouncedPusher",
    "SchemaProvisioner",
    "SessionContext",
    "SyncMap",
    "SyncSession",
    "WorkspaceReaper",
    "WorkspaceSnapshot",
]
