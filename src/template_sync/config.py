"""Configuration for a template sync session.

Reads settings from CLI args, environment variables, .env files, and
YAML config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    TEMPLATE_SYNC_TOKEN: API token (required)
    TEMPLATE_SYNC_ENV: localhost, development or production (default: production)
    TEMPLATE_SYNC_PATH: Parent directory for the workspace (default: CWD)
    TEMPLATE_SYNC_DEBOUNCE_MS: Quiet period before pushing an edit (default: 1000)
    TEMPLATE_SYNC_TIMEOUT: HTTP request timeout in seconds (default: 30)
    TEMPLATE_SYNC_SHUTDOWN_MODE: flush or discard (default: flush)
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)

ENVIRONMENTS: dict[str, str] = {
    "localhost": "http://localhost:9000/api/template",
    "development": "https://app.sleekcms.net/api/template",
    "production": "https://app.sleekcms.com/api/template",
}

DEFAULT_ENV = "production"
DEFAULT_DEBOUNCE_MS = 1000
DEFAULT_TIMEOUT = 30.0


class ShutdownMode(str, Enum):
    """What happens to debounced pushes still pending at shutdown."""

    FLUSH = "flush"
    DISCARD = "discard"


@dataclass
class Config:
    token: str
    env: str = DEFAULT_ENV
    base_url: str = ENVIRONMENTS[DEFAULT_ENV]
    parent_dir: str = "."
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    request_timeout: float = DEFAULT_TIMEOUT
    shutdown_mode: ShutdownMode = ShutdownMode.FLUSH
    debug: bool = False

    @property
    def workspace_root(self) -> Path:
        """Directory holding the synced files for this session."""
        return workspace_root_for(self.token, self.parent_dir)


def resolve_base_url(env: str | None) -> tuple[str, str]:
    """Map an environment name to ``(env, base_url)``.

    Unknown names fall back to production.
    """
    name = (env or DEFAULT_ENV).strip().lower()
    if name not in ENVIRONMENTS:
        logger.warning(
            "Unknown environment '%s', falling back to %s", env, DEFAULT_ENV
        )
        name = DEFAULT_ENV
    return name, ENVIRONMENTS[name]


def workspace_root_for(token: str, parent_dir: str | os.PathLike = ".") -> Path:
    """Derive the workspace directory from the session token.

    The directory is named after the token prefix (everything before the
    first ``-``) so concurrent sessions for different sites never share a
    workspace.
    """
    prefix = token.split("-")[0]
    return (Path(parent_dir).expanduser() / f"{prefix}-views").resolve()


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Args:
        config: Config instance to validate.

    Raises:
        ValueError: If the token is empty or a numeric setting is out of range.
    """
    config.token = config.token.strip()
    if not config.token:
        raise ValueError(
            "API token cannot be empty. Pass --token or set TEMPLATE_SYNC_TOKEN."
        )
    if not config.token.split("-")[0]:
        raise ValueError(
            f"Invalid token '{config.token}': must not start with '-'"
        )

    if not config.base_url.startswith(("http://", "https://")):
        raise ValueError(
            f"Invalid base URL '{config.base_url}': must start with http:// or https://"
        )
    config.base_url = config.base_url.removesuffix("/")

    if not (0 <= config.debounce_ms <= 60_000):
        raise ValueError(
            f"Invalid debounce '{config.debounce_ms}': must be between 0 and 60000 ms"
        )
    if config.request_timeout <= 0:
        raise ValueError(
            f"Invalid request timeout '{config.request_timeout}': must be positive"
        )

    if config.shutdown_mode is ShutdownMode.DISCARD:
        logger.warning(
            "Shutdown mode 'discard': edits still waiting to be pushed are lost on exit."
        )


def _parse_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Invalid {name} '{raw}': must be a number") from None


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"Invalid {name} '{raw}': must be a number") from None


def _parse_shutdown_mode(raw: str) -> ShutdownMode:
    try:
        return ShutdownMode(raw.strip().lower())
    except ValueError:
        choices = ", ".join(m.value for m in ShutdownMode)
        raise ValueError(
            f"Invalid shutdown mode '{raw}': must be one of {choices}"
        ) from None


def load_config(
    token: str | None = None,
    env: str | None = None,
    path: str | None = None,
    debounce_ms: int | None = None,
    shutdown_mode: str | None = None,
    debug: bool = False,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        token: API token from the CLI.
        env: Environment name from the CLI.
        path: Parent directory for the workspace from the CLI.
        debounce_ms: Quiet period override from the CLI.
        shutdown_mode: ``flush`` or ``discard`` from the CLI.
        debug: Enable debug logging (CLI flag).
        yaml_fallbacks: Flat dict of values from the YAML config file.
            Keys: token, env, path, debounce_ms, request_timeout,
            shutdown_mode, debug.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If the token is missing or any value is invalid.
    """
    fb = yaml_fallbacks or {}

    final_token = token or os.getenv("TEMPLATE_SYNC_TOKEN") or fb.get("token")
    if not final_token:
        raise ValueError(
            "API token not found. Pass --token, set TEMPLATE_SYNC_TOKEN, "
            "or add 'token' to config.yml."
        )

    final_env, base_url = resolve_base_url(
        env or os.getenv("TEMPLATE_SYNC_ENV") or fb.get("env")
    )

    parent_dir = path or os.getenv("TEMPLATE_SYNC_PATH") or fb.get("path") or "."

    if debounce_ms is not None:
        final_debounce = debounce_ms
    elif (raw := os.getenv("TEMPLATE_SYNC_DEBOUNCE_MS")) is not None:
        final_debounce = _parse_int("TEMPLATE_SYNC_DEBOUNCE_MS", raw)
    else:
        final_debounce = int(fb.get("debounce_ms", DEFAULT_DEBOUNCE_MS))

    if (raw := os.getenv("TEMPLATE_SYNC_TIMEOUT")) is not None:
        final_timeout = _parse_float("TEMPLATE_SYNC_TIMEOUT", raw)
    else:
        final_timeout = float(fb.get("request_timeout", DEFAULT_TIMEOUT))

    mode_raw = (
        shutdown_mode
        or os.getenv("TEMPLATE_SYNC_SHUTDOWN_MODE")
        or fb.get("shutdown_mode")
        or ShutdownMode.FLUSH.value
    )
    final_mode = _parse_shutdown_mode(str(mode_raw))

    if debug:
        final_debug = True
    else:
        env_debug = os.getenv("TEMPLATE_SYNC_DEBUG")
        if env_debug is not None:
            final_debug = env_debug.lower() in ("true", "1", "yes", "on")
        else:
            final_debug = bool(fb.get("debug", False))

    config = Config(
        token=final_token,
        env=final_env,
        base_url=base_url,
        parent_dir=str(parent_dir),
        debounce_ms=final_debounce,
        request_timeout=final_timeout,
        shutdown_mode=final_mode,
        debug=final_debug,
    )

    validate_config(config)

    return config
