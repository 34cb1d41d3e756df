"""masmnav resolve command - resolve one import expression."""

import json
from pathlib import Path

import click

from masmnav.cli.utils import get_session


@click.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("import_path")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def resolve_command(ctx: click.Context, file: Path, import_path: str, as_json: bool) -> None:
    """Resolve IMPORT_PATH as if it were imported by FILE.

    FILE need not exist; only its directory is used as the starting point.
    """
    session = get_session(ctx)
    resolved = session.resolve_import(file, import_path)

    if as_json:
        click.echo(
            json.dumps(
                {"import_path": import_path, "resolved": str(resolved) if resolved else None}
            )
        )
        if resolved is None:
            ctx.exit(1)
        return

    if resolved is None:
        raise click.ClickException(f"Could not resolve '{import_path}' from {file}")
    click.echo(str(resolved))
