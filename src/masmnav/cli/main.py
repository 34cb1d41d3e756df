"""masmnav CLI - masmnav command."""

from pathlib import Path

import click

from masmnav import __version__
from masmnav.cli.definition import definition_command
from masmnav.cli.hover import hover_command
from masmnav.cli.namespaces import namespaces_command
from masmnav.cli.resolve import resolve_command
from masmnav.cli.serve import serve_command
from masmnav.config.loader import load_config
from masmnav.core.errors import ConfigError
from masmnav.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="masmnav")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-root",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory holding .masmnav/config.yaml (default: current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_root: Path | None) -> None:
    """masmnav - go-to-definition and hover for Miden assembly."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


cli.add_command(definition_command, name="definition")
cli.add_command(hover_command, name="hover")
cli.add_command(resolve_command, name="resolve")
cli.add_command(namespaces_command, name="namespaces")
cli.add_command(serve_command, name="serve")


if __name__ == "__main__":
    cli()
