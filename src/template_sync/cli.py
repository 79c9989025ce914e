"""Command-line entry point: ``template-sync --token <token>``."""

import argparse
import asyncio
import logging
import os
import signal
import sys

from . import __version__
from .config import ENVIRONMENTS, ShutdownMode
from .config_loader import load_hierarchical_config
from .config_schema import LoggingConfig, build_config
from .errors import WorkspaceError
from .lifespan import session_lifespan
from .logger import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="template-sync",
        description="Edit remote site templates in a local folder with live sync",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync against production into ./<site>-views
  template-sync --token abc123-secret

  # Use the development API and put the workspace under ~/work
  template-sync -t abc123-secret -e development -p ~/work

The workspace is deleted when the command exits.
        """,
    )
    parser.add_argument(
        "-t",
        "--token",
        help="API authentication token (or set TEMPLATE_SYNC_TOKEN)",
    )
    parser.add_argument(
        "-e",
        "--env",
        help=f"Environment: {', '.join(ENVIRONMENTS)} (default: production)",
    )
    parser.add_argument(
        "-p",
        "--path",
        help="Parent directory for the workspace (default: current directory)",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"template-sync version {__version__}",
    )
    parser.add_argument(
        "--debounce-ms",
        type=int,
        help="Quiet period before an edit is pushed (default: 1000)",
    )
    parser.add_argument(
        "--shutdown-mode",
        choices=[m.value for m in ShutdownMode],
        help="flush: push pending edits before exit (default); "
        "discard: drop them",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--log-file", help="Also append logs to this file")
    return parser


def _overrides_from_args(args: argparse.Namespace) -> dict:
    overrides = {}
    for key in ("token", "env", "path", "debounce_ms", "shutdown_mode"):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value
    if args.debug:
        overrides["debug"] = True
    return overrides


def _file_logging_config() -> LoggingConfig:
    """Logging section of the YAML config, or defaults when it is invalid."""
    try:
        return build_config(load_hierarchical_config()).logging
    except ValueError as e:
        # The lifespan reports this as a configuration error.
        logger.debug("Ignoring logging config: %s", e)
        return LoggingConfig()


def _install_signal_handlers(session) -> set[asyncio.Task]:
    """Route SIGINT and SIGTERM to ``session.shutdown()``.

    Returns:
        The set holding shutdown tasks until they finish.
    """
    loop = asyncio.get_running_loop()
    shutdown_tasks: set[asyncio.Task] = set()

    def _request_shutdown(signame: str) -> None:
        logger.warning("Caught %s", signame)
        task = loop.create_task(session.shutdown())
        shutdown_tasks.add(task)
        task.add_done_callback(shutdown_tasks.discard)

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _request_shutdown, sig.name)
        except (NotImplementedError, RuntimeError):
            # Windows: Ctrl+C arrives as KeyboardInterrupt instead.
            pass
    return shutdown_tasks


async def main(config_overrides: dict | None = None) -> None:
    async with session_lifespan(config_overrides) as session:
        _install_signal_handlers(session)
        await session.run()


def run(argv: list[str] | None = None) -> None:
    """Entry point that parses CLI arguments and runs one session."""
    args = build_parser().parse_args(argv)
    file_cfg = _file_logging_config()
    setup_logging(
        debug=args.debug,
        log_file=args.log_file or os.getenv("LOG_FILE") or file_cfg.file,
        debug_format=file_cfg.format,
        level=file_cfg.level,
    )

    try:
        asyncio.run(main(_overrides_from_args(args)))
    except RuntimeError:
        # Already reported by the lifespan manager
        sys.exit(1)
    except WorkspaceError as e:
        logger.error("Cannot prepare workspace: %s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    run()
