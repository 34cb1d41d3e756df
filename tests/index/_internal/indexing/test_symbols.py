"""Tests for indexing/symbols.py module."""

from __future__ import annotations

from pathlib import Path

import pytest

from masmnav.index._internal.discovery.namespaces import NamespaceDirectory
from masmnav.index._internal.indexing.resolver import PathResolver
from masmnav.index._internal.indexing.symbols import SymbolLocator, scan_definition
from masmnav.index._internal.registry import RegistryLocator
from masmnav.index.models import Location, LookupStatus
from masmnav.index.parser import FileIndex, procedure_pattern
from tests.index.conftest import write_tree


@pytest.fixture
def locator(tmp_path: Path) -> SymbolLocator:
    resolver = PathResolver(NamespaceDirectory(), RegistryLocator(tmp_path / "no-registry"))
    return SymbolLocator(FileIndex(), resolver)


class TestScanDefinition:
    """Tests for scan_definition."""

    def test_first_match(self, tmp_path: Path) -> None:
        path = tmp_path / "a.masm"
        path.write_text("proc other\nend\n\npub proc target\nend\n")
        lookup = scan_definition(path, procedure_pattern("target"), "target")
        assert lookup.status is LookupStatus.FOUND
        assert lookup.location == Location(path, 3, 9)

    def test_not_found(self, tmp_path: Path) -> None:
        path = tmp_path / "a.masm"
        path.write_text("proc other\nend\n")
        lookup = scan_definition(path, procedure_pattern("target"), "target")
        assert lookup.status is LookupStatus.NOT_FOUND
        assert lookup.location is None

    def test_read_error(self, tmp_path: Path) -> None:
        lookup = scan_definition(tmp_path / "gone.masm", procedure_pattern("x"), "x")
        assert lookup.status is LookupStatus.READ_ERROR
        assert lookup.location is None


class TestLocate:
    """Tests for locate_procedure / locate_constant and their find_* forms."""

    def test_procedure(self, locator: SymbolLocator, tmp_path: Path) -> None:
        path = tmp_path / "a.masm"
        path.write_text("export.legacy\nend\n")
        assert locator.find_procedure(path, "legacy") == Location(path, 0, 7)

    def test_reexport_line_fallback(self, locator: SymbolLocator, tmp_path: Path) -> None:
        """A name the file only re-exports resolves to the pub use line."""
        path = tmp_path / "a.masm"
        path.write_text("# api\npub use missing::orig->exported\n")
        assert locator.find_procedure(path, "exported") == Location(path, 1, 23)

    def test_procedure_statuses(self, locator: SymbolLocator, tmp_path: Path) -> None:
        """Unreadable and non-defining files are told apart."""
        path = tmp_path / "a.masm"
        path.write_text("proc a\nend\n")
        assert locator.locate_procedure(path, "b").status is LookupStatus.NOT_FOUND
        missing = locator.locate_procedure(tmp_path / "gone.masm", "b")
        assert missing.status is LookupStatus.READ_ERROR

    def test_constant(self, locator: SymbolLocator, tmp_path: Path) -> None:
        path = tmp_path / "a.masm"
        path.write_text("const A = 1\npub const LIMIT = 2\n")
        assert locator.find_constant(path, "LIMIT") == Location(path, 1, 10)
        assert locator.find_constant(path, "OTHER") is None

    def test_reads_current_content(self, locator: SymbolLocator, tmp_path: Path) -> None:
        """Direct scans are not served from the summary cache."""
        path = tmp_path / "a.masm"
        path.write_text("proc a\nend\n")
        locator.find_procedure(path, "a")
        path.write_text("\n\nproc a\nend\n")
        assert locator.find_procedure(path, "a") == Location(path, 2, 5)


class TestFindSource:
    """Tests for find_source re-export chasing."""

    def test_direct_definition(self, locator: SymbolLocator, tmp_path: Path) -> None:
        path = tmp_path / "a.masm"
        path.write_text("pub proc run\nend\n")
        assert locator.find_source(path, "run") == Location(path, 0, 9)

    def test_follows_chain(self, locator: SymbolLocator, tmp_path: Path) -> None:
        """a re-exports from b, which re-exports from c."""
        write_tree(
            tmp_path,
            {
                "a.masm": "pub use b::mid->top\n",
                "b.masm": "pub use c::base->mid\n",
                "c.masm": "#! Base.\npub proc base\nend\n",
            },
        )
        assert locator.find_source(tmp_path / "a.masm", "top") == Location(
            tmp_path / "c.masm", 1, 9
        )

    def test_uses_import_path_of_module(self, locator: SymbolLocator, tmp_path: Path) -> None:
        """The re-exported module is resolved through the file's own import."""
        write_tree(
            tmp_path,
            {
                "kernel/api.masm": "use $kernel::memory\npub use memory::load->read\n",
                "kernel/lib/memory.masm": "pub proc load\nend\n",
            },
        )
        assert locator.find_source(tmp_path / "kernel/api.masm", "read") == Location(
            tmp_path / "kernel/lib/memory.masm", 0, 9
        )

    def test_cycle_terminates(self, locator: SymbolLocator, tmp_path: Path) -> None:
        write_tree(
            tmp_path,
            {
                "a.masm": "pub use b::x->x\n",
                "b.masm": "pub use a::x->x\n",
            },
        )
        assert locator.find_source(tmp_path / "a.masm", "x") is None

    def test_unresolvable_module(self, locator: SymbolLocator, tmp_path: Path) -> None:
        path = tmp_path / "a.masm"
        path.write_text("pub use nowhere::x->y\n")
        assert locator.find_source(path, "y") is None

    def test_missing_file(self, locator: SymbolLocator, tmp_path: Path) -> None:
        assert locator.find_source(tmp_path / "gone.masm", "x") is None
