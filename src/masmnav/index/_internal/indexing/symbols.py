"""Definition lookup for procedures and constants.

``find_source`` follows re-export chains (``pub use m::orig->exported``)
across files until it reaches the real definition. Each call carries an
immutable set of the ``(file, name)`` pairs already visited, so cyclic
re-export graphs end with ``None`` instead of recursing forever.
"""

from __future__ import annotations

import re
from pathlib import Path

import structlog

from masmnav.index._internal.indexing.resolver import PathResolver
from masmnav.index.models import Location, LookupStatus, SymbolLookup
from masmnav.index.parser import FileIndex, constant_pattern, procedure_pattern, read_source

logger = structlog.get_logger()

_Visited = frozenset[tuple[Path, str]]


def _column_of(line: str, name: str) -> int:
    return max(line.find(name), 0)


def scan_definition(path: Path, pattern: re.Pattern[str], name: str) -> SymbolLookup:
    """First line of ``path`` matching ``pattern``."""
    source = read_source(path)
    if not source.ok:
        return SymbolLookup.read_error()
    for i, line in enumerate(source.lines):
        if pattern.search(line):
            return SymbolLookup.found(Location(path, i, _column_of(line, name)))
    return SymbolLookup.not_found()


class SymbolLocator:
    """Finds where procedures and constants are defined."""

    def __init__(self, file_index: FileIndex, resolver: PathResolver) -> None:
        self._index = file_index
        self._resolver = resolver

    def locate_procedure(self, file: Path, name: str) -> SymbolLookup:
        """Direct definition of ``name`` in ``file``.

        When the file only re-exports ``name``, the re-export line is
        returned instead.
        """
        lookup = scan_definition(file, procedure_pattern(name), name)
        if lookup.status is not LookupStatus.NOT_FOUND:
            return lookup

        reexport = self._index.index(file).reexports.get(name)
        if reexport is None:
            return lookup
        source = read_source(file)
        line = source.lines[reexport.line] if reexport.line < len(source.lines) else ""
        return SymbolLookup.found(Location(file, reexport.line, _column_of(line, name)))

    def locate_constant(self, file: Path, name: str) -> SymbolLookup:
        return scan_definition(file, constant_pattern(name), name)

    def find_procedure(self, file: Path, name: str) -> Location | None:
        return self.locate_procedure(file, name).location

    def find_constant(self, file: Path, name: str) -> Location | None:
        return self.locate_constant(file, name).location

    def find_source(
        self, file: Path, name: str, visited: _Visited = frozenset()
    ) -> Location | None:
        """Follow re-exports of ``name`` from ``file`` to its definition."""
        key = (file, name)
        if key in visited:
            logger.debug("reexport_cycle", file=str(file), name=name)
            return None
        visited = visited | {key}

        summary = self._index.index(file)
        reexport = summary.reexports.get(name)
        if reexport is not None:
            import_path = summary.imports.get(reexport.module, reexport.module)
            target = self._resolver.resolve(file, reexport.module, import_path)
            if target is not None:
                location = self.find_source(target, reexport.original_name, visited)
                if location is not None:
                    return location
                direct = scan_definition(
                    target, procedure_pattern(reexport.original_name), reexport.original_name
                )
                if direct.location is not None:
                    return direct.location

        return scan_definition(file, procedure_pattern(name), name).location
