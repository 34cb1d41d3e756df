"""Definition and hover queries over MASM sources.

``NavigationSession`` owns every cache (file summaries, resolved import
paths, namespace bindings) for the lifetime of an editor session and is
the only entry point the host calls:

- ``provide_definition(document, position)`` / ``definition(path, line, column)``
- ``provide_hover(document, position)`` / ``hover(path, line, column)``
- ``on_file_changed(path)`` when a file's content changed
- ``clear()`` when the session ends

Definition lookup tries, in order:

1. an import statement (alias, constant, or module path segment)
2. a qualified ``exec.``/``call.`` reference ``module::proc``
3. an unqualified ``call.proc`` (current file, then imported modules)
4. a procedure defined in the current file
5. a procedure defined in any imported module
"""

from __future__ import annotations

import os
import re
from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

import structlog

from masmnav.config.models import MasmNavConfig
from masmnav.index._internal.discovery.namespaces import NamespaceDirectory
from masmnav.index._internal.indexing.module_mapping import split_import_path
from masmnav.index._internal.indexing.resolver import PathResolver
from masmnav.index._internal.indexing.symbols import SymbolLocator
from masmnav.index._internal.registry import RegistryLocator
from masmnav.index.cursor import WordAt, in_comment_or_string, word_at
from masmnav.index.models import Document, FileSummary, Location, Position
from masmnav.index.parser import IDENT, USE_RE, FileIndex, procedure_pattern, read_source

logger = structlog.get_logger()

QUALIFIED_CALL_RE = re.compile(rf"(?:exec|call)\.({IDENT})::({IDENT})")
LOCAL_CALL_RE = re.compile(rf"call\.({IDENT})$")
UPPER_SNAKE_RE = re.compile(r"^[A-Z_][A-Z0-9_]*$")
DOC_COMMENT_MARKER = "#!"
COMMENT_MARKER = "#"

_Strategy = Callable[[Path, str, WordAt, FileSummary], "Location | None"]


def extract_doc_comment(lines: Sequence[str], definition_line: int) -> list[str]:
    """Doc-comment lines (``#!``) directly above ``definition_line``.

    Walks upward: blank lines and plain ``#`` comments are skipped, the
    first line of any other kind ends the walk.
    """
    doc: list[str] = []
    for j in range(definition_line - 1, -1, -1):
        text = lines[j].strip()
        if text.startswith(DOC_COMMENT_MARKER):
            doc.append(text[len(DOC_COMMENT_MARKER) :].strip())
        elif text == "" or text.startswith(COMMENT_MARKER):
            continue
        else:
            break
    doc.reverse()
    return doc


def _absolute(path: Path | str) -> Path:
    return Path(os.path.abspath(path))


def _module_start(path: Path) -> Location:
    return Location(path, 0, 0)


class NavigationSession:
    """Symbol resolution for one editor session.

    Usage::

        session = NavigationSession(load_config())
        location = session.definition(path, line_text, column)
        session.on_file_changed(path)
    """

    def __init__(self, config: MasmNavConfig | None = None) -> None:
        self._config = config or MasmNavConfig()
        layout = self._config.layout
        registry = self._config.registry

        self.file_index = FileIndex()
        self.namespaces = NamespaceDirectory(
            crates_dir=layout.crates_dir,
            build_script=layout.build_script,
            excluded_dir_keywords=registry.excluded_dir_keywords,
        )
        self.registry = RegistryLocator(
            Path(registry.root).expanduser() if registry.root else None,
            library_dir=layout.library_dir,
            extension=layout.module_extension,
            index_file=layout.module_index_file,
        )
        self.resolver = PathResolver(
            self.namespaces,
            self.registry,
            layout=layout,
            registry_config=registry,
        )
        self.symbols = SymbolLocator(self.file_index, self.resolver)

    @property
    def config(self) -> MasmNavConfig:
        return self._config

    # ------------------------------------------------------------------
    # Host-facing operations
    # ------------------------------------------------------------------

    def provide_definition(self, document: Document, position: Position) -> Location | None:
        return self.definition(
            document.path, document.line_at(position.line), position.character
        )

    def provide_hover(self, document: Document, position: Position) -> str | None:
        return self.hover(document.path, document.line_at(position.line), position.character)

    def on_file_changed(self, path: Path | str) -> None:
        """Invalidate caches after ``path`` changed.

        The file's summary is dropped and every resolved import path is
        cleared, since an edited import can change what other cached
        resolutions should return. Build scripts and workspace manifests
        also drop the namespace bindings.
        """
        path = _absolute(path)
        self.file_index.invalidate(path)
        self.resolver.clear()
        layout = self._config.layout
        if path.name in (layout.build_script, layout.workspace_manifest):
            self.namespaces.clear()
        logger.debug("file_changed", path=str(path))

    def clear(self) -> None:
        self.file_index.clear()
        self.resolver.clear()
        self.namespaces.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def resolve_import(self, path: Path | str, import_path: str) -> Path | None:
        """Resolve an import expression as if written in ``path``."""
        local_name = split_import_path(import_path)[-1]
        return self.resolver.resolve(_absolute(path), local_name, import_path)

    def definition(self, path: Path | str, line: str, column: int) -> Location | None:
        """Definition of the identifier at ``column`` in ``line`` of ``path``."""
        path = _absolute(path)
        word = word_at(line, column)
        if word is None or in_comment_or_string(word.before(line)):
            return None

        summary = self.file_index.index(path)
        strategies: tuple[_Strategy, ...] = (
            self._from_import,
            self._from_qualified_call,
            self._from_local_call,
            self._from_local_definition,
            self._from_imported_modules,
        )
        for strategy in strategies:
            location = strategy(path, line, word, summary)
            if location is not None:
                logger.debug(
                    "definition_found",
                    word=word.text,
                    strategy=strategy.__name__,
                    file=str(location.file),
                    line=location.line,
                )
                return location
        return None

    def hover(self, path: Path | str, line: str, column: int) -> str | None:
        """Hover markdown for a procedure name in a qualified call."""
        path = _absolute(path)
        word = word_at(line, column)
        if word is None or in_comment_or_string(word.before(line)):
            return None

        call = self._qualified_call_at(line, word)
        if call is None or word.start != call.start(2):
            return None

        summary = self.file_index.index(path)
        target = self._resolve_module(path, call.group(1), summary)
        if target is None:
            return None
        return self._documentation(target, call.group(2))

    # ------------------------------------------------------------------
    # Definition strategies
    # ------------------------------------------------------------------

    def _from_import(
        self, path: Path, line: str, word: WordAt, summary: FileSummary
    ) -> Location | None:
        use = USE_RE.match(line)
        if not use:
            return None
        full_path, alias = use.group(1), use.group(2)
        parts = split_import_path(full_path)

        if alias and word.text == alias:
            target = self.resolver.resolve(path, parts[-1], full_path)
            if target:
                return _module_start(target)

        if word.text not in parts:
            return None

        if UPPER_SNAKE_RE.match(word.text) and word.text == parts[-1] and len(parts) >= 2:
            module_path = "::".join(parts[:-1])
            target = self.resolver.resolve(path, parts[-2], module_path)
            if target:
                location = self.symbols.find_constant(target, word.text)
                if location:
                    return location

        target = self.resolver.resolve(path, parts[-1], full_path)
        return _module_start(target) if target else None

    def _from_qualified_call(
        self, path: Path, line: str, word: WordAt, summary: FileSummary
    ) -> Location | None:
        call = self._qualified_call_at(line, word)
        if call is None:
            return None
        module_name, procedure = call.group(1), call.group(2)
        target = self._resolve_module(path, module_name, summary)
        if target is None:
            return None
        if word.start == call.start(1):
            return _module_start(target)
        return self.symbols.find_source(target, procedure) or self.symbols.find_procedure(
            target, procedure
        )

    def _from_local_call(
        self, path: Path, line: str, word: WordAt, summary: FileSummary
    ) -> Location | None:
        prefix = word.prefix(line)
        call = LOCAL_CALL_RE.search(prefix)
        if call is None or "::" in prefix:
            return None
        procedure = call.group(1)
        location = self.symbols.find_procedure(path, procedure)
        if location:
            return location
        for target in self._imported_modules(path, summary):
            location = self.symbols.find_procedure(target, procedure)
            if location:
                return location
        return None

    def _from_local_definition(
        self, path: Path, line: str, word: WordAt, summary: FileSummary
    ) -> Location | None:
        return self.symbols.find_procedure(path, word.text)

    def _from_imported_modules(
        self, path: Path, line: str, word: WordAt, summary: FileSummary
    ) -> Location | None:
        for target in self._imported_modules(path, summary):
            location = self.symbols.find_procedure(target, word.text)
            if location:
                return location
        return None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _qualified_call_at(line: str, word: WordAt) -> re.Match[str] | None:
        for call in QUALIFIED_CALL_RE.finditer(line):
            if word.start in (call.start(1), call.start(2)):
                return call
        return None

    def _resolve_module(self, path: Path, module_name: str, summary: FileSummary) -> Path | None:
        import_path = summary.imports.get(module_name, module_name)
        return self.resolver.resolve(path, module_name, import_path)

    def _imported_modules(self, path: Path, summary: FileSummary) -> Iterator[Path]:
        seen: set[Path] = set()
        for module_name, import_path in summary.imports.items():
            target = self.resolver.resolve(path, module_name, import_path)
            if target is not None and target not in seen:
                seen.add(target)
                yield target

    def _documentation(self, target: Path, procedure: str) -> str | None:
        file = target
        source = read_source(target)
        pattern = procedure_pattern(procedure)
        definition_line = next(
            (i for i, text in enumerate(source.lines) if pattern.search(text)), None
        )

        if definition_line is None:
            location = self.symbols.find_source(target, procedure)
            if location is None:
                return None
            file, definition_line = location.file, location.line
            source = read_source(file)

        doc = extract_doc_comment(source.lines, definition_line)
        if doc:
            return "```\n" + "\n".join(doc) + "\n```"
        return f"**{procedure}** in `{file.name}`"
