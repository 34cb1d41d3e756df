"""Namespace discovery from crate build scripts.

Miden crates declare which logical namespace their assembly library is
published under inside ``build.rs``::

    const PROTOCOL_LIB_NAMESPACE: &str = "miden::protocol";
    const ASM_PROTOCOL_DIR: &str = "protocol";

    assembler.assemble_library_from_dir(source_dir, "miden::agglayer")?;

This module scans that text with regular expressions. It is deliberately
unsound: nothing is evaluated, so a namespace whose directory is only
chosen through control flow in the build script can be bound to the wrong
``ASM_*_DIR`` constant. The resolver compensates by searching sibling
library directories when the bound one does not hold the module.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import structlog

from masmnav.index.models import NamespaceEntry

logger = structlog.get_logger()

_NAMESPACE_CONST_RE = re.compile(r'const\s+(\w+)_LIB_NAMESPACE:\s*&str\s*=\s*"([^"]+)"')
_DIR_CONST_RE = re.compile(r'const\s+ASM_(\w+)_DIR:\s*&str\s*=\s*"([^"]+)"')
_ASSEMBLE_CALL_RE = re.compile(r'assemble_library_from_dir\s*\([^,]+,\s*"([^"]+)"\)')

DEFAULT_EXCLUDED_DIR_KEYWORDS: tuple[str, ...] = ("NOTE_SCRIPT", "ACCOUNT_COMPONENT")


@dataclass(frozen=True, slots=True)
class BuildScriptBinding:
    """One namespace binding found in a build script.

    ``declared`` is True when the binding comes from a matching
    ``*_LIB_NAMESPACE`` / ``ASM_*_DIR`` constant pair, False when it was
    guessed from an ``assemble_library_from_dir`` call.
    """

    namespace: str
    asm_subdir: str
    declared: bool


def parse_build_script(
    text: str,
    excluded_dir_keywords: Sequence[str] = DEFAULT_EXCLUDED_DIR_KEYWORDS,
) -> list[BuildScriptBinding]:
    """Extract namespace bindings from one build script.

    >>> parse_build_script(
    ...     'const FOO_LIB_NAMESPACE: &str = "miden::foo";\\n'
    ...     'const ASM_FOO_DIR: &str = "foolib";'
    ... )
    [BuildScriptBinding(namespace='miden::foo', asm_subdir='foolib', declared=True)]
    """
    namespaces = {m.group(1): m.group(2) for m in _NAMESPACE_CONST_RE.finditer(text)}
    dirs = {m.group(1): m.group(2) for m in _DIR_CONST_RE.finditer(text)}

    bindings: dict[str, BuildScriptBinding] = {}
    for key, namespace in namespaces.items():
        asm_dir = dirs.get(key)
        if asm_dir:
            bindings[namespace] = BuildScriptBinding(namespace, asm_dir, declared=True)

    for m in _ASSEMBLE_CALL_RE.finditer(text):
        namespace = m.group(1)
        if namespace in bindings:
            continue
        # Note scripts and account components are assembled as executables.
        library_dirs = [
            value
            for key, value in dirs.items()
            if not any(keyword in key for keyword in excluded_dir_keywords)
        ]
        asm_dir = library_dirs[0] if library_dirs else namespace.split("::")[-1]
        bindings[namespace] = BuildScriptBinding(namespace, asm_dir, declared=False)

    return list(bindings.values())


class NamespaceDirectory:
    """Caches namespace bindings per workspace root.

    Entries are never refreshed on their own; ``invalidate`` or ``clear``
    must be called when a build script changes.
    """

    def __init__(
        self,
        *,
        crates_dir: str = "crates",
        build_script: str = "build.rs",
        excluded_dir_keywords: Sequence[str] = DEFAULT_EXCLUDED_DIR_KEYWORDS,
    ) -> None:
        self._crates_dir = crates_dir
        self._build_script = build_script
        self._excluded = tuple(excluded_dir_keywords)
        self._cache: dict[Path, dict[str, NamespaceEntry]] = {}

    def namespaces_for(self, root: Path) -> dict[str, NamespaceEntry]:
        cached = self._cache.get(root)
        if cached is not None:
            return cached
        entries = self._discover(root)
        self._cache[root] = entries
        logger.debug("namespaces_discovered", root=str(root), count=len(entries))
        return entries

    def lookup(self, root: Path, namespace: str) -> NamespaceEntry | None:
        """Find the entry for ``namespace``, also trying it under ``miden::``."""
        entries = self.namespaces_for(root)
        entry = entries.get(namespace)
        if entry is None and not namespace.startswith("miden::"):
            entry = entries.get(f"miden::{namespace}")
        return entry

    def invalidate(self, root: Path) -> bool:
        return self._cache.pop(root, None) is not None

    def clear(self) -> None:
        self._cache.clear()

    def _discover(self, root: Path) -> dict[str, NamespaceEntry]:
        entries: dict[str, NamespaceEntry] = {}
        crates_dir = root / self._crates_dir
        try:
            crates = sorted(p for p in crates_dir.iterdir() if p.is_dir())
        except OSError:
            return entries

        for crate_dir in crates:
            script = crate_dir / self._build_script
            try:
                text = script.read_text(encoding="utf-8", errors="replace")
            except OSError:
                continue
            for binding in parse_build_script(text, self._excluded):
                # Guessed bindings never replace one found in an earlier crate.
                if not binding.declared and binding.namespace in entries:
                    continue
                entries[binding.namespace] = NamespaceEntry(
                    namespace=binding.namespace,
                    crate_dir=crate_dir,
                    asm_subdir=binding.asm_subdir,
                )
        return entries
