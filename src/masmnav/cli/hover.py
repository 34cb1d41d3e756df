"""masmnav hover command - show procedure documentation."""

from pathlib import Path

import click
from rich.console import Console
from rich.markdown import Markdown

from masmnav.cli.utils import get_session
from masmnav.index.models import Document, Position


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("line", type=click.IntRange(min=1))
@click.argument("column", type=click.IntRange(min=1))
@click.pass_context
def hover_command(ctx: click.Context, file: Path, line: int, column: int) -> None:
    """Show documentation for the procedure call at LINE:COLUMN in FILE.

    LINE and COLUMN are 1-based. Output is markdown; it is rendered when
    stdout is a terminal.
    """
    session = get_session(ctx)
    text = session.provide_hover(Document(file), Position(line - 1, column - 1))
    if text is None:
        raise click.ClickException(f"Nothing to show at {file}:{line}:{column}")

    console = Console()
    if console.is_terminal:
        console.print(Markdown(text))
    else:
        click.echo(text)
