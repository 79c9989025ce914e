"""File handler module: workspace path mapping and file I/O.

Sync helpers are plain functions raising ``OSError``/``ValueError``.
Async wrappers run them via run_sync() and convert ``OSError`` into
``WorkspaceError`` so handlers only need to catch the package's own types.
"""

import os
import shutil
from pathlib import Path

from charset_normalizer import from_bytes

from template_sync.core.async_utils import run_sync
from template_sync.errors import WorkspaceError

# =============================================================================
# Path mapping
# =============================================================================


def normalize_path(path: str | os.PathLike) -> str:
    """Return *path* in forward-slash form without a leading ``./``.

    This is the only normalisation used when comparing workspace paths.
    """
    text = str(path).replace("\\", "/")
    while text.startswith("./"):
        text = text[2:]
    return text


def to_relative(root: Path, path: str | os.PathLike) -> str:
    """Convert an absolute path under *root* to a normalised relative path.

    Raises:
        ValueError: If *path* is not inside *root*.
    """
    target = Path(path)
    if not target.is_absolute() or not target.is_relative_to(root):
        raise ValueError(
            f"Path is outside workspace: {path} not under {root}"
        )
    return normalize_path(target.relative_to(root).as_posix())


def resolve_in_workspace(root: Path, relative_path: str) -> Path:
    """Map a relative workspace path to an absolute one.

    Raises:
        ValueError: If the path is absolute or escapes *root*.
    """
    rel = normalize_path(relative_path)
    if not rel or os.path.isabs(rel):
        raise ValueError(f"Path must be relative: {relative_path}")
    target = (root / rel).resolve()
    if not target.is_relative_to(root.resolve()):
        raise ValueError(
            f"Path is outside workspace: {target} not under {root}"
        )
    return target


# =============================================================================
# File Read/Write
# =============================================================================


def read_text(path: Path) -> str:
    """Read a workspace file as text.

    UTF-8 is tried first so unchanged content round-trips exactly; other
    encodings are detected with charset-normalizer.
    """
    raw = path.read_bytes()
    if not raw:
        return ""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        result = from_bytes(raw).best()
        if result is None:
            return raw.decode("utf-8", errors="replace")
        return str(result)


def write_text(path: Path, content: str) -> int:
    """Write content as UTF-8, creating parent directories as needed.

    Returns:
        Number of bytes written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    encoded = content.encode("utf-8")
    path.write_bytes(encoded)
    return len(encoded)


def move_file(src: Path, dst: Path) -> None:
    """Move *src* to *dst*, creating the destination's parents."""
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.move(str(src), str(dst))


def remove_file(path: Path) -> bool:
    """Delete a file. Returns False when it did not exist."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True


def remove_tree(path: Path) -> bool:
    """Recursively delete a directory. Returns False when it did not exist."""
    if not path.exists():
        return False
    shutil.rmtree(path)
    return True


# =============================================================================
# Async Wrappers
# =============================================================================


async def read_text_async(path: Path) -> str:
    """Async wrapper for read_text().

    Raises:
        WorkspaceError: If the file cannot be read.
    """
    try:
        return await run_sync(read_text, path)
    except OSError as e:
        raise WorkspaceError(f"Cannot read {path}: {e}", path) from e


async def write_text_async(path: Path, content: str) -> int:
    """Async wrapper for write_text().

    Raises:
        WorkspaceError: If the file cannot be written.
    """
    try:
        return await run_sync(write_text, path, content)
    except OSError as e:
        raise WorkspaceError(f"Cannot write {path}: {e}", path) from e


async def move_file_async(src: Path, dst: Path) -> None:
    """Async wrapper for move_file().

    Raises:
        WorkspaceError: If the move fails.
    """
    try:
        await run_sync(move_file, src, dst)
    except OSError as e:
        raise WorkspaceError(f"Cannot move {src} to {dst}: {e}", src) from e


async def remove_file_async(path: Path) -> bool:
    """Async wrapper for remove_file().

    Raises:
        WorkspaceError: If the file exists but cannot be deleted.
    """
    try:
        return await run_sync(remove_file, path)
    except OSError as e:
        raise WorkspaceError(f"Cannot delete {path}: {e}", path) from e
