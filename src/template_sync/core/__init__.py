"""HTTP client for the template API and async helpers."""

from .async_utils import run_sync
from .client import RemoteClient

__all__ = ["RemoteClient", "run_sync"]
