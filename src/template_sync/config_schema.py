"""Unified configuration schema for template_sync.

Defines Pydantic models for the YAML config structure with dedicated
sections for the remote API, the local workspace and logging.

Usage:
    from template_sync.config_schema import build_config, to_fallbacks

    raw = load_hierarchical_config()
    unified = build_config(raw)
    config = load_config(token=args.token, yaml_fallbacks=to_fallbacks(unified))
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class RemoteConfig(BaseModel):
    """Template API connection settings.

    All fields are optional: env vars and CLI args can supply them at
    runtime instead.
    """

    token: str | None = Field(default=None, description="API token")
    env: str | None = Field(
        default=None,
        description="Environment name (localhost, development, production)",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        le=600,
        description="HTTP request timeout in seconds",
    )

    model_config = {"frozen": True}


class WorkspaceConfig(BaseModel):
    """Local workspace behaviour."""

    path: str | None = Field(
        default=None, description="Parent directory of the workspace"
    )
    debounce_ms: int = Field(
        default=1000,
        ge=0,
        le=60_000,
        description="Quiet period before an edit is pushed",
    )
    shutdown_mode: Literal["flush", "discard"] = Field(
        default="flush",
        description="Push or drop pending edits on exit",
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: "text" or "json".
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: Literal["text", "json"] = Field(
        default="text", description="Log line format"
    )

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Every section has defaults, so ``UnifiedConfig()`` is always valid.
    """

    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the merged YAML dict.

    Missing sections get defaults.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)


def to_fallbacks(unified: UnifiedConfig) -> dict:
    """Flatten a ``UnifiedConfig`` into the ``yaml_fallbacks`` dict
    understood by ``load_config()``.

    ``None`` values are dropped so they never shadow a built-in default.
    """
    flat = {
        "token": unified.remote.token,
        "env": unified.remote.env,
        "request_timeout": unified.remote.request_timeout,
        "path": unified.workspace.path,
        "debounce_ms": unified.workspace.debounce_ms,
        "shutdown_mode": unified.workspace.shutdown_mode,
    }
    return {k: v for k, v in flat.items() if v is not None}
