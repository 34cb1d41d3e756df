"""Import path <-> module file path mapping utilities.

Shared between the path resolver and the registry locator.
Converts ``::``-joined import paths (e.g. ``miden::protocol::account::faucets``)
into relative module paths (e.g. ``account/faucets.masm``) and probes the
two on-disk forms a module can take:

- a direct file: ``account/faucets.masm``
- a directory with an index file: ``account/faucets/mod.masm``
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

IMPORT_SEPARATOR = "::"


def split_import_path(import_path: str) -> list[str]:
    """Split an import path into its segments.

    >>> split_import_path("miden::protocol::account")
    ['miden', 'protocol', 'account']
    """
    return import_path.split(IMPORT_SEPARATOR)


def segments_to_subpath(segments: Sequence[str], extension: str = ".masm") -> str | None:
    """Relative module path for trailing import segments.

    The last segment names the file; interior segments form directories.

    >>> segments_to_subpath(["crypto", "hashes", "blake3"])
    'crypto/hashes/blake3.masm'
    >>> segments_to_subpath(["mem"])
    'mem.masm'
    >>> segments_to_subpath([])
    """
    if not segments:
        return None
    return "/".join([*segments[:-1], f"{segments[-1]}{extension}"])


def try_module_paths(
    base_dir: Path,
    sub_path: str,
    *,
    extension: str = ".masm",
    index_file: str = "mod.masm",
) -> Path | None:
    """Return the existing file for ``sub_path`` under ``base_dir``, if any.

    Tries the direct file first, then the directory form with its
    index file.
    """
    direct = base_dir / sub_path
    if direct.is_file():
        return direct

    stem = sub_path[: -len(extension)] if sub_path.endswith(extension) else sub_path
    dir_form = base_dir / stem / index_file
    if dir_form.is_file():
        return dir_form
    return None


def list_subdirs(directory: Path) -> list[Path]:
    """Sorted immediate subdirectories, or an empty list if unreadable."""
    try:
        return sorted(p for p in directory.iterdir() if p.is_dir())
    except OSError:
        return []
