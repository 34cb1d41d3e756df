"""CLI utilities."""

from __future__ import annotations

import click

from masmnav.config.models import MasmNavConfig
from masmnav.index.models import Location
from masmnav.index.ops import NavigationSession


def get_session(ctx: click.Context) -> NavigationSession:
    """Session for this invocation, built from the group's loaded config.

    Falls back to defaults when a command is invoked without the group
    (e.g. directly from tests).
    """
    obj = ctx.ensure_object(dict)
    session = obj.get("session")
    if session is None:
        config = obj.get("config") or MasmNavConfig()
        session = NavigationSession(config)
        obj["session"] = session
    return session  # type: ignore[no-any-return]


def format_location(location: Location) -> str:
    """``path:line:column`` with 1-based line and column, as editors expect.

    >>> from pathlib import Path
    >>> format_location(Location(Path("/w/a.masm"), 0, 4))
    '/w/a.masm:1:5'
    """
    return f"{location.file}:{location.line + 1}:{location.column + 1}"
