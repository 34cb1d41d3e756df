"""Upward directory walks locating workspace and project roots.

- Workspace root: nearest ancestor holding a ``Cargo.toml`` that declares
  a ``[workspace]`` table.
- Project root: nearest ancestor holding an ``asm/`` library directory.

Both walks start at the file's directory, stop at the filesystem root and
give up after ``max_depth`` levels.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import structlog

logger = structlog.get_logger()

WORKSPACE_MARKER = "[workspace]"


def iter_ancestors(start_dir: Path, max_depth: int) -> Iterator[Path]:
    """Yield ``start_dir`` and its parents, at most ``max_depth`` entries."""
    current = start_dir
    for _ in range(max_depth):
        yield current
        parent = current.parent
        if parent == current:
            return
        current = parent


def is_workspace_manifest(manifest: Path) -> bool:
    try:
        text = manifest.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False
    return WORKSPACE_MARKER in text


def find_workspace_root(
    from_file: Path,
    *,
    manifest_name: str = "Cargo.toml",
    max_depth: int = 15,
) -> Path | None:
    """Find the Cargo workspace root enclosing ``from_file``."""
    for directory in iter_ancestors(from_file.parent, max_depth):
        manifest = directory / manifest_name
        if manifest.is_file() and is_workspace_manifest(manifest):
            return directory
    logger.debug("workspace_root_not_found", file=str(from_file))
    return None


def find_project_root(
    from_file: Path,
    *,
    library_dir: str = "asm",
    max_depth: int = 15,
) -> Path | None:
    """Find the nearest ancestor of ``from_file`` that holds a library directory."""
    for directory in iter_ancestors(from_file.parent, max_depth):
        if (directory / library_dir).is_dir():
            return directory
    return None
