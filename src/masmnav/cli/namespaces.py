"""masmnav namespaces command - list namespace bindings of a workspace."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from masmnav.cli.utils import get_session
from masmnav.index.models import NamespaceEntry


def _make_namespace_table(entries: dict[str, NamespaceEntry], root: Path) -> Table:
    table = Table(show_header=True, box=None, padding=(0, 2), pad_edge=False)
    table.add_column("namespace", style="cyan")
    table.add_column("crate")
    table.add_column("directory", style="dim")
    for namespace in sorted(entries):
        entry = entries[namespace]
        try:
            crate = str(entry.crate_dir.relative_to(root))
        except ValueError:
            crate = str(entry.crate_dir)
        table.add_row(namespace, crate, entry.asm_subdir)
    return table


@click.command()
@click.argument(
    "root", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path)
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def namespaces_command(ctx: click.Context, root: Path, as_json: bool) -> None:
    """List namespaces declared by the crates' build scripts under ROOT.

    ROOT is the workspace root (default: current directory).
    """
    session = get_session(ctx)
    workspace_root = root.resolve()
    entries = session.namespaces.namespaces_for(workspace_root)
    library_dir = session.config.layout.library_dir

    if as_json:
        click.echo(
            json.dumps(
                {
                    namespace: {
                        "crate_dir": str(entry.crate_dir),
                        "asm_subdir": entry.asm_subdir,
                        "library_dir": str(entry.library_dir(library_dir)),
                    }
                    for namespace, entry in sorted(entries.items())
                }
            )
        )
        return

    console = Console()
    if not entries:
        console.print(f"[yellow]No namespaces found[/yellow] under {workspace_root}")
        return
    console.print(_make_namespace_table(entries, workspace_root))
