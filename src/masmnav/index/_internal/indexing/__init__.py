"""Import path resolution and symbol location."""

from masmnav.index._internal.indexing.resolver import PathResolver
from masmnav.index._internal.indexing.symbols import SymbolLocator

__all__ = ["PathResolver", "SymbolLocator"]
