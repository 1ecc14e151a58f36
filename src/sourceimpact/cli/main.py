"""Source impact CLI - sci command."""

from pathlib import Path

import click

from sourceimpact import __version__
from sourceimpact.cli.analyze import analyze_command
from sourceimpact.cli.diff import diff_command
from sourceimpact.config import load_config
from sourceimpact.core.errors import ConfigError
from sourceimpact.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="sci")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--project",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding .sourceimpact/config.yaml (default: current directory).",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, project: Path | None) -> None:
    """Source change impact engine - align chunks and classify severity."""
    ctx.ensure_object(dict)
    try:
        config = load_config(project)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    ctx.obj["config"] = config
    configure_logging(config.logging, verbose=verbose)


cli.add_command(analyze_command, name="analyze")
cli.add_command(diff_command, name="diff")


if __name__ == "__main__":
    cli()
