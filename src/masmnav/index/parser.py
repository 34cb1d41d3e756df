"""Line-oriented scanning of MASM source files.

MASM is not parsed into a tree here. Each line is matched against four
regular patterns:

- ``use a::b::c`` / ``use a::b::c->alias`` / ``use $kernel::c``: imports
- ``pub use module::original->exported``: re-exports
- ``pub proc name`` / ``proc name`` / ``export.name``: procedure definitions
- ``pub const NAME =`` / ``const NAME =``: constant definitions

All four are checked on every line, so one line can contribute to several
maps (a ``use m::x->y`` line is both an import and a re-export).
Comments and strings are not excluded here; the cursor layer does that at
lookup time.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from pathlib import Path

import structlog

from masmnav.index.models import FileSummary, LookupStatus, Reexport, SourceRead

logger = structlog.get_logger()

IDENT = r"[a-zA-Z_][a-zA-Z0-9_]*"

USE_RE = re.compile(
    rf"^\s*use\s+([a-zA-Z_$][a-zA-Z0-9_]*(?:::{IDENT})*)(?:\s*->\s*({IDENT}))?"
)
REEXPORT_RE = re.compile(rf"^\s*(?:pub\s+)?use\s+({IDENT})::({IDENT})->({IDENT})")
PROC_RE = re.compile(rf"^\s*(?:pub\s+)?proc\s+({IDENT})|^\s*export\.({IDENT})")
CONST_RE = re.compile(r"^\s*(?:pub\s+)?const\s+([A-Z_][A-Z0-9_]*)\s*=")


def procedure_pattern(name: str) -> re.Pattern[str]:
    """Pattern matching the definition line of procedure ``name``."""
    n = re.escape(name)
    return re.compile(rf"^\s*(?:pub\s+)?proc\s+{n}\b|^\s*export\.{n}\b")


def constant_pattern(name: str) -> re.Pattern[str]:
    """Pattern matching the definition line of constant ``name``."""
    return re.compile(rf"^\s*(?:pub\s+)?const\s+{re.escape(name)}\s*=")


def read_source(path: Path) -> SourceRead:
    """Read a source file into lines, never raising.

    Undecodable bytes are replaced; a trailing ``\\r`` is dropped from
    every line so CRLF files index the same as LF files.
    """
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except (OSError, ValueError) as e:
        logger.debug("source_read_failed", path=str(path), error=str(e))
        return SourceRead(status=LookupStatus.READ_ERROR, error=str(e))
    return SourceRead(
        status=LookupStatus.FOUND,
        lines=tuple(line.rstrip("\r") for line in text.split("\n")),
    )


def summarize(lines: Iterable[str]) -> FileSummary:
    """Build a FileSummary from source lines.

    Later declarations of the same name overwrite earlier ones.
    """
    imports: dict[str, str] = {}
    procedures: dict[str, int] = {}
    reexports: dict[str, Reexport] = {}
    constants: dict[str, int] = {}

    for i, line in enumerate(lines):
        use = USE_RE.match(line)
        if use:
            full_path, alias = use.group(1), use.group(2)
            imports[full_path.split("::")[-1]] = full_path
            if alias:
                imports[alias] = full_path

        reexport = REEXPORT_RE.match(line)
        if reexport:
            module, original, exported = reexport.groups()
            reexports[exported] = Reexport(module=module, original_name=original, line=i)
            imports.setdefault(module, module)

        proc = PROC_RE.match(line)
        if proc:
            procedures[proc.group(1) or proc.group(2)] = i

        const = CONST_RE.match(line)
        if const:
            constants[const.group(1)] = i

    return FileSummary(
        imports=imports,
        procedures=procedures,
        reexports=reexports,
        constants=constants,
    )


class FileIndex:
    """Per-path cache of file summaries.

    A summary is built on first access and kept until ``invalidate`` is
    called for that path. Unreadable files produce an empty summary, which
    is cached like any other.
    """

    def __init__(self) -> None:
        self._summaries: dict[Path, FileSummary] = {}

    def index(self, path: Path) -> FileSummary:
        cached = self._summaries.get(path)
        if cached is not None:
            return cached

        source = read_source(path)
        summary = summarize(source.lines) if source.ok else FileSummary()
        self._summaries[path] = summary
        return summary

    def invalidate(self, path: Path) -> bool:
        """Drop the cached summary for ``path``. Returns True if one existed."""
        return self._summaries.pop(path, None) is not None

    def clear(self) -> None:
        self._summaries.clear()

    def __contains__(self, path: object) -> bool:
        return path in self._summaries

    def __len__(self) -> int:
        return len(self._summaries)
