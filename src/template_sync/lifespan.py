"""Lifespan management for a sync session: startup and teardown."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from dotenv import load_dotenv

from .config import load_config
from .config_loader import discover_config_files, load_hierarchical_config
from .config_schema import build_config, to_fallbacks
from .sync.session import SyncSession

logger = logging.getLogger(__name__)


def _stderr_print(msg: str) -> None:
    """Print a status line for the user."""
    print(msg, file=sys.stderr, flush=True)


@asynccontextmanager
async def session_lifespan(
    config_overrides: dict[str, Any] | None = None,
    watch: bool = True,
) -> AsyncIterator[SyncSession]:
    """
    Manage sync session startup and shutdown.

    On startup:
    - Load .env file (so values are available for env var lookups and YAML interpolation)
    - Load YAML config file if present (as fallback values)
    - Merge all sources via load_config(): CLI > env vars > .env > YAML > defaults
    - Download the snapshot and start watching

    On shutdown:
    - Flush or drop pending pushes, delete the workspace

    Args:
        config_overrides: Optional dict with values from the CLI
            (token, env, path, debounce_ms, shutdown_mode, debug).
        watch: Start the filesystem watcher.

    Yields:
        The running SyncSession.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        load_dotenv()

        yaml_fallbacks: dict[str, Any] | None = None
        config_files = discover_config_files()
        if config_files:
            unified = build_config(load_hierarchical_config())
            yaml_fallbacks = to_fallbacks(unified)
            logger.info("Configuration file: %s", config_files[0])

        overrides = config_overrides or {}
        config = load_config(
            token=overrides.get("token"),
            env=overrides.get("env"),
            path=overrides.get("path"),
            debounce_ms=overrides.get("debounce_ms"),
            shutdown_mode=overrides.get("shutdown_mode"),
            debug=overrides.get("debug", False),
            yaml_fallbacks=yaml_fallbacks,
        )
    except ValueError as e:
        logger.error("Configuration error: %s", e)
        _stderr_print(f"ERROR: {e}")
        raise RuntimeError(f"Configuration error: {e}") from e

    logger.info("Environment: %s (%s)", config.env, config.base_url)
    session = SyncSession(config, watch=watch)
    try:
        await session.start()
        _stderr_print(f"Workspace ready: {config.workspace_root}")
        _stderr_print("Edit files there; press Ctrl+C to stop and clean up.")
        yield session
    finally:
        await session.shutdown()
        await session.wait_closed()
