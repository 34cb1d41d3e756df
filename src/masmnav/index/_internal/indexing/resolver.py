"""Import path resolution: import expression -> module file.

Four addressing schemes are recognized, by the shape of the expression:

**Namespaced** (``miden::<ns>::<rest>``):
  ``core`` (and any other configured external namespace) comes only from
  the registry cache. Every other namespace is looked up in the workspace:
  the namespace directory bound by ``build.rs``, then sibling library
  directories of that crate, then a ``<ns>`` directory or any library
  directory of every crate, then the local project root, and finally the
  registry under ``miden-<ns>-lib`` / ``miden-<ns>``.

**Standard library** (``std::<rest>``):
  Registry only, never local.

**Kernel-relative** (``$<alias>::<rest>``):
  ``lib/`` next to the importing file or one of its ancestors, or the
  ``shared_modules/`` directory that is copied into ``lib/`` at build time.

**Bare** (``name``):
  Same directory, ``lib/``, parent directory, parent's ``lib/``.

Results (including misses) are memoized per ``(file, expression)`` and are
only dropped by ``clear``.
"""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from masmnav.config.models import LayoutConfig, RegistryConfig
from masmnav.index._internal.discovery.namespaces import NamespaceDirectory
from masmnav.index._internal.discovery.roots import (
    find_project_root,
    find_workspace_root,
    iter_ancestors,
)
from masmnav.index._internal.indexing.module_mapping import (
    list_subdirs,
    segments_to_subpath,
    split_import_path,
    try_module_paths,
)
from masmnav.index._internal.registry import RegistryLocator

logger = structlog.get_logger()

MIDEN_ROOT = "miden"
STD_ROOT = "std"
ALIAS_SIGIL = "$"


class PathResolver:
    """Resolves import expressions to absolute module paths.

    Usage::

        resolver = PathResolver(namespaces, registry)
        path = resolver.resolve(current_file, "faucets", "miden::protocol::faucets")
    """

    def __init__(
        self,
        namespaces: NamespaceDirectory,
        registry: RegistryLocator,
        *,
        layout: LayoutConfig | None = None,
        registry_config: RegistryConfig | None = None,
    ) -> None:
        self._namespaces = namespaces
        self._registry = registry
        self._layout = layout or LayoutConfig()
        self._registry_config = registry_config or RegistryConfig()
        self._cache: dict[tuple[Path, str], Path | None] = {}

    def resolve(self, current_file: Path, local_name: str, import_path: str) -> Path | None:
        """Resolve ``import_path`` as written in ``current_file``.

        Args:
            current_file: Absolute path of the importing file.
            local_name: Name the module is used under at call sites.
            import_path: The full ``::``-joined import expression.

        Returns:
            Absolute, normalized module path, or None if unresolvable.
        """
        key = (current_file, import_path)
        if key in self._cache:
            return self._cache[key]

        parts = split_import_path(import_path)
        head = parts[0]
        if head == MIDEN_ROOT and len(parts) >= 3:
            rule = "namespaced"
            result = self._resolve_namespaced(current_file, parts[1], parts[2:])
        elif head == STD_ROOT and len(parts) >= 2:
            rule = "stdlib"
            result = self._resolve_stdlib(parts[1:])
        elif head.startswith(ALIAS_SIGIL):
            rule = "alias"
            result = self._resolve_alias(current_file, parts[1:])
        elif len(parts) == 1:
            rule = "bare"
            result = self._resolve_bare(current_file, head)
        else:
            rule = "unsupported"
            result = None

        if result is not None:
            result = Path(os.path.normpath(result))
        self._cache[key] = result
        logger.debug(
            "import_resolved",
            file=str(current_file),
            local_name=local_name,
            import_path=import_path,
            rule=rule,
            resolved=str(result) if result else None,
        )
        return result

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    # ------------------------------------------------------------------
    # Rules
    # ------------------------------------------------------------------

    def _probe(self, base_dir: Path, sub_path: str) -> Path | None:
        return try_module_paths(
            base_dir,
            sub_path,
            extension=self._layout.module_extension,
            index_file=self._layout.module_index_file,
        )

    def _probe_subdirs(self, library_dir: Path, sub_path: str) -> Path | None:
        for subdir in list_subdirs(library_dir):
            result = self._probe(subdir, sub_path)
            if result:
                return result
        return None

    def _subpath(self, segments: list[str]) -> str | None:
        return segments_to_subpath(segments, self._layout.module_extension)

    def _resolve_namespaced(
        self, current_file: Path, namespace: str, segments: list[str]
    ) -> Path | None:
        sub_path = self._subpath(segments)
        if sub_path is None:
            return None

        external = self._registry_config.external_namespaces.get(namespace)
        if external:
            return self._registry.find(external, sub_path)

        layout = self._layout
        result: Path | None = None
        workspace_root = find_workspace_root(
            current_file,
            manifest_name=layout.workspace_manifest,
            max_depth=layout.max_root_depth,
        )
        if workspace_root:
            result = self._resolve_in_workspace(workspace_root, namespace, sub_path)

        if result is None:
            project_root = find_project_root(
                current_file,
                library_dir=layout.library_dir,
                max_depth=layout.max_root_depth,
            )
            if project_root:
                result = self._probe(project_root / layout.library_dir / namespace, sub_path)

        if result is None:
            result = self._registry.find(f"miden-{namespace}-lib", sub_path) or self._registry.find(
                f"miden-{namespace}", sub_path
            )
        return result

    def _resolve_in_workspace(
        self, workspace_root: Path, namespace: str, sub_path: str
    ) -> Path | None:
        library_dir = self._layout.library_dir

        entry = self._namespaces.lookup(workspace_root, f"{MIDEN_ROOT}::{namespace}")
        if entry:
            result = self._probe(entry.library_dir(library_dir), sub_path)
            if result is None:
                result = self._probe_subdirs(entry.crate_dir / library_dir, sub_path)
            if result:
                return result

        for crate_dir in list_subdirs(workspace_root / self._layout.crates_dir):
            crate_library = crate_dir / library_dir
            result = self._probe(crate_library / namespace, sub_path)
            if result is None:
                result = self._probe_subdirs(crate_library, sub_path)
            if result:
                return result
        return None

    def _resolve_stdlib(self, segments: list[str]) -> Path | None:
        sub_path = self._subpath(segments)
        if sub_path is None:
            return None
        return self._registry.find(self._registry_config.stdlib_package, sub_path)

    def _resolve_alias(self, current_file: Path, segments: list[str]) -> Path | None:
        if not segments:
            return None
        layout = self._layout
        file_name = f"{segments[-1]}{layout.module_extension}"

        for directory in iter_ancestors(current_file.parent, layout.max_alias_depth):
            lib_dir = directory / layout.kernel_lib_dir
            if lib_dir.is_dir():
                result = self._probe(lib_dir, file_name)
                if result:
                    return result

            shared_dir = directory.parent / layout.shared_modules_dir
            if shared_dir.is_dir():
                result = self._probe(shared_dir, file_name)
                if result:
                    return result
        return None

    def _resolve_bare(self, current_file: Path, module_name: str) -> Path | None:
        layout = self._layout
        file_name = f"{module_name}{layout.module_extension}"
        current_dir = current_file.parent
        for base in (
            current_dir,
            current_dir / layout.kernel_lib_dir,
            current_dir.parent,
            current_dir.parent / layout.kernel_lib_dir,
        ):
            result = self._probe(base, file_name)
            if result:
                return result
        return None
