"""masmnav serve command - line-delimited JSON queries over stdio.

One request per input line, one response per output line, handled in
arrival order by a single session::

    {"id": 1, "method": "definition", "path": "/w/a.masm", "line": 3, "character": 10}
    {"id": 1, "result": {"file": "/w/lib/mem.masm", "line": 12, "column": 5}}

Methods:
- ``definition`` / ``hover``: ``path``, ``line``, ``character`` (zero-based),
  optional ``text`` (unsaved buffer contents of ``path``)
- ``didChange``: ``path``; invalidates caches
- ``clear``: drops every cache
- ``shutdown``: ends the loop
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import IO, Any

import click
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from masmnav.cli.utils import get_session
from masmnav.core.errors import InternalError, MasmNavError, RequestError
from masmnav.core.logging import clear_request_id, set_request_id
from masmnav.index.models import Document, Position
from masmnav.index.ops import NavigationSession

logger = structlog.get_logger()


class ServeRequest(BaseModel):
    """One request line."""

    model_config = ConfigDict(extra="ignore")

    id: int | str | None = None
    method: str
    path: str | None = None
    line: int | None = Field(default=None, ge=0)
    character: int | None = Field(default=None, ge=0)
    text: str | None = None

    def require_path(self) -> Path:
        if not self.path:
            raise RequestError.malformed("missing 'path'", method=self.method)
        return Path(self.path)

    def require_position(self) -> Position:
        if self.line is None or self.character is None:
            raise RequestError.malformed("missing 'line' or 'character'", method=self.method)
        return Position(self.line, self.character)


class ServeResponse(BaseModel):
    """One response line: exactly one of ``result`` / ``error`` is meaningful."""

    id: int | str | None = None
    result: Any = None
    error: dict[str, Any] | None = None


class _Shutdown(Exception):
    pass


def _definition(session: NavigationSession, request: ServeRequest) -> Any:
    document = Document(request.require_path(), request.text)
    location = session.provide_definition(document, request.require_position())
    return location.to_dict() if location else None


def _hover(session: NavigationSession, request: ServeRequest) -> Any:
    document = Document(request.require_path(), request.text)
    text = session.provide_hover(document, request.require_position())
    return {"contents": text} if text is not None else None


def _did_change(session: NavigationSession, request: ServeRequest) -> Any:
    session.on_file_changed(request.require_path())
    return None


def _clear(session: NavigationSession, request: ServeRequest) -> Any:  # noqa: ARG001
    session.clear()
    return None


_HANDLERS: dict[str, Callable[[NavigationSession, ServeRequest], Any]] = {
    "definition": _definition,
    "hover": _hover,
    "didChange": _did_change,
    "clear": _clear,
}


def handle_line(session: NavigationSession, raw: str) -> ServeResponse:
    """Handle one request line.

    Raises:
        _Shutdown: For the ``shutdown`` method, after which no response
            other than the acknowledgement should be written.
    """
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        return ServeResponse(error=RequestError.malformed(f"invalid JSON: {e.msg}").to_dict())
    if not isinstance(payload, dict):
        return ServeResponse(error=RequestError.malformed("request must be an object").to_dict())

    try:
        request = ServeRequest.model_validate(payload)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(loc) for loc in err["loc"])
        return ServeResponse(
            id=payload.get("id") if isinstance(payload.get("id"), int | str) else None,
            error=RequestError.malformed(f"{field}: {err['msg']}", field=field).to_dict(),
        )

    if request.method == "shutdown":
        raise _Shutdown(request.id)

    handler = _HANDLERS.get(request.method)
    try:
        if handler is None:
            raise RequestError.unknown_method(request.method)
        return ServeResponse(id=request.id, result=handler(session, request))
    except MasmNavError as e:
        return ServeResponse(id=request.id, error=e.to_dict())
    except Exception as e:
        logger.error(
            "serve_internal_error",
            method=request.method,
            error=str(e),
            error_type=type(e).__name__,
        )
        error = InternalError.unexpected(str(e), method=request.method, type=type(e).__name__)
        return ServeResponse(id=request.id, error=error.to_dict())


def serve(session: NavigationSession, stdin: IO[str], stdout: IO[str]) -> int:
    """Run the request loop until EOF or ``shutdown``. Returns requests handled."""
    handled = 0
    for raw in stdin:
        raw = raw.strip()
        if not raw:
            continue
        set_request_id()
        try:
            response = handle_line(session, raw)
        except _Shutdown as stop:
            response = ServeResponse(id=stop.args[0])
            stdout.write(response.model_dump_json() + "\n")
            stdout.flush()
            handled += 1
            logger.info("serve_shutdown", handled=handled)
            break
        finally:
            clear_request_id()
        stdout.write(response.model_dump_json() + "\n")
        stdout.flush()
        handled += 1
    return handled


@click.command()
@click.pass_context
def serve_command(ctx: click.Context) -> None:
    """Answer JSON queries read line by line from stdin.

    Each line of stdin is one request; each response is written as one line
    to stdout. Logs go to stderr.
    """
    session = get_session(ctx)
    logger.info("serve_started")
    serve(session, sys.stdin, sys.stdout)
