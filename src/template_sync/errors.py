"""Exception types raised by the template sync core.

Handlers catch these at the component boundary and log them with the
affected path. None of them is fatal to the process.
"""

from __future__ import annotations


class TemplateSyncError(Exception):
    """Base class for all template sync errors."""


class TransportError(TemplateSyncError):
    """Network, authentication or HTTP failure talking to the template API.

    Attributes:
        status_code: HTTP status code, or ``None`` when no response arrived.
        detail: Response body (decoded JSON when possible) or the
            underlying error message.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        detail: object = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is not None:
            base = f"{base} (HTTP {self.status_code})"
        if self.detail:
            base = f"{base}: {self.detail}"
        return base


class WorkspaceError(TemplateSyncError):
    """Local file I/O failure inside the workspace."""

    def __init__(self, message: str, path: object = None) -> None:
        super().__init__(message)
        self.path = path
