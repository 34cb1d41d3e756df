"""Index module - MASM symbol resolution.

This module provides:
- File Index: per-file summaries of imports, procedures, re-exports, constants
- Namespace discovery: build.rs scanning for namespace -> directory bindings
- Registry lookup: modules of external packages in the Cargo cache
- Path resolution: import expressions -> module files
- Symbol location: definitions, following re-export chains

Public API is in `masmnav.index.ops`:
- NavigationSession: definition and hover queries, cache invalidation

Internal implementations are in `masmnav.index._internal/`.
"""

from masmnav.index.models import (
    Document,
    FileSummary,
    Location,
    LookupStatus,
    NamespaceEntry,
    Position,
    Reexport,
    SourceRead,
    SymbolLookup,
)
from masmnav.index.ops import NavigationSession, extract_doc_comment
from masmnav.index.parser import FileIndex, read_source, summarize

__all__ = [
    # Models
    "Document",
    "FileSummary",
    "Location",
    "LookupStatus",
    "NamespaceEntry",
    "Position",
    "Reexport",
    "SourceRead",
    "SymbolLookup",
    # File index
    "FileIndex",
    "read_source",
    "summarize",
    # Queries
    "NavigationSession",
    "extract_doc_comment",
]
