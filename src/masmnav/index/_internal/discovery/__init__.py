"""Root and namespace discovery."""

from masmnav.index._internal.discovery.namespaces import (
    BuildScriptBinding,
    NamespaceDirectory,
    parse_build_script,
)
from masmnav.index._internal.discovery.roots import (
    find_project_root,
    find_workspace_root,
    iter_ancestors,
)

__all__ = [
    "BuildScriptBinding",
    "NamespaceDirectory",
    "find_project_root",
    "find_workspace_root",
    "iter_ancestors",
    "parse_build_script",
]
