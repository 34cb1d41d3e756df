"""masmnav definition command - jump to the definition under a cursor."""

import json
from pathlib import Path

import click

from masmnav.cli.utils import format_location, get_session
from masmnav.index.models import Document, Position


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("line", type=click.IntRange(min=1))
@click.argument("column", type=click.IntRange(min=1))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON (zero-based)")
@click.pass_context
def definition_command(
    ctx: click.Context, file: Path, line: int, column: int, as_json: bool
) -> None:
    """Find the definition of the identifier at LINE:COLUMN in FILE.

    LINE and COLUMN are 1-based.
    """
    session = get_session(ctx)
    location = session.provide_definition(Document(file), Position(line - 1, column - 1))
    if location is None:
        raise click.ClickException(f"No definition found at {file}:{line}:{column}")

    if as_json:
        click.echo(json.dumps(location.to_dict()))
    else:
        click.echo(format_location(location))
