"""Lookup of assembly modules inside the Cargo registry source cache.

Layout consumed (never produced)::

    <registry_root>/registry/src/<index_dir>/<package>-<version>/asm/<sub_path>
    <registry_root>/registry/src/<index_dir>/<package>-<version>/asm/<stem>/mod.masm

``registry_root`` is the configured override, else ``$CARGO_HOME``,
else ``~/.cargo``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import structlog

from masmnav.index._internal.indexing.module_mapping import list_subdirs, try_module_paths

logger = structlog.get_logger()

REGISTRY_SRC = Path("registry") / "src"

_DIGITS_RE = re.compile(r"(\d+)")


def natural_sort_key(name: str) -> tuple[tuple[int, int, str], ...]:
    """Sort key comparing digit runs numerically.

    >>> sorted(["pkg-0.9.0", "pkg-0.10.0"], key=natural_sort_key)
    ['pkg-0.9.0', 'pkg-0.10.0']
    """
    key: list[tuple[int, int, str]] = []
    for chunk in _DIGITS_RE.split(name):
        if not chunk:
            continue
        if chunk.isdigit():
            key.append((0, int(chunk), ""))
        else:
            key.append((1, 0, chunk.lower()))
    return tuple(key)


def default_registry_root() -> Path:
    cargo_home = os.environ.get("CARGO_HOME")
    if cargo_home:
        return Path(cargo_home)
    return Path.home() / ".cargo"


class RegistryLocator:
    """Finds modules of external packages in the registry cache.

    Versions of a package are tried newest first; the first version that
    holds the module wins, across all index directories.
    """

    def __init__(
        self,
        root: Path | None = None,
        *,
        library_dir: str = "asm",
        extension: str = ".masm",
        index_file: str = "mod.masm",
    ) -> None:
        self._root = root
        self._library_dir = library_dir
        self._probe: dict[str, Any] = {"extension": extension, "index_file": index_file}

    @property
    def root(self) -> Path:
        # Resolved per call so a changed $CARGO_HOME is honored.
        return self._root if self._root is not None else default_registry_root()

    def find(self, package: str, sub_path: str) -> Path | None:
        registry_src = self.root / REGISTRY_SRC
        if not registry_src.is_dir():
            logger.debug("registry_missing", path=str(registry_src))
            return None

        prefix = f"{package}-"
        for index_dir in list_subdirs(registry_src):
            try:
                versions = [e for e in os.listdir(index_dir) if e.startswith(prefix)]
            except OSError:
                continue
            versions.sort(key=natural_sort_key, reverse=True)

            for version in versions:
                asm_dir = index_dir / version / self._library_dir
                result = try_module_paths(asm_dir, sub_path, **self._probe)
                if result:
                    logger.debug(
                        "registry_hit", package=package, version=version, path=str(result)
                    )
                    return result
        return None
