"""Data models for MASM symbol resolution.

All models are plain dataclasses / frozen dataclasses. Line and column
numbers are zero-based throughout; only the CLI converts to 1-based.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class LookupStatus(Enum):
    """Outcome of a read or a symbol lookup.

    Callers of the public ``find_*`` API only see ``Location | None``;
    the status keeps "the file could not be read" apart from "the file
    has no such definition".
    """

    FOUND = "found"
    NOT_FOUND = "not_found"
    READ_ERROR = "read_error"


@dataclass(frozen=True, slots=True)
class Reexport:
    """A ``pub use module::original->exported`` declaration."""

    module: str
    original_name: str
    line: int


@dataclass(frozen=True, slots=True)
class FileSummary:
    """Declarations found in one source file.

    ``imports`` maps the name used at call sites (last path segment, or
    alias) to the full ``::``-joined import path.
    """

    imports: dict[str, str] = field(default_factory=dict)
    procedures: dict[str, int] = field(default_factory=dict)
    reexports: dict[str, Reexport] = field(default_factory=dict)
    constants: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SourceRead:
    """Lines of a source file, or the reason it could not be read."""

    status: LookupStatus
    lines: tuple[str, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is LookupStatus.FOUND


@dataclass(frozen=True, slots=True)
class NamespaceEntry:
    """Binding of a logical namespace (``miden::protocol``) to a directory."""

    namespace: str
    crate_dir: Path
    asm_subdir: str

    def library_dir(self, library_dir_name: str = "asm") -> Path:
        """Directory holding the namespace's modules."""
        return self.crate_dir / library_dir_name / self.asm_subdir


@dataclass(frozen=True, slots=True)
class Location:
    """A position in a file: the terminal output of every lookup."""

    file: Path
    line: int
    column: int

    def to_dict(self) -> dict[str, Any]:
        return {"file": str(self.file), "line": self.line, "column": self.column}


@dataclass(frozen=True, slots=True)
class SymbolLookup:
    """Tagged result of a symbol lookup."""

    status: LookupStatus
    location: Location | None = None

    @classmethod
    def found(cls, location: Location) -> SymbolLookup:
        return cls(LookupStatus.FOUND, location)

    @classmethod
    def not_found(cls) -> SymbolLookup:
        return cls(LookupStatus.NOT_FOUND)

    @classmethod
    def read_error(cls) -> SymbolLookup:
        return cls(LookupStatus.READ_ERROR)


@dataclass(frozen=True, slots=True)
class Position:
    """Cursor position in a document."""

    line: int
    character: int


@dataclass
class Document:
    """An open document as seen by the host.

    ``text`` holds the editor buffer; when it is ``None`` the file is read
    from disk on first access.
    """

    path: Path
    text: str | None = None
    _lines: list[str] | None = field(default=None, init=False, repr=False)

    def line_at(self, line: int) -> str:
        if self._lines is None:
            text = self.text
            if text is None:
                try:
                    text = self.path.read_text(encoding="utf-8", errors="replace")
                except (OSError, ValueError):
                    text = ""
            self._lines = [ln.rstrip("\r") for ln in text.split("\n")]
        if 0 <= line < len(self._lines):
            return self._lines[line]
        return ""
