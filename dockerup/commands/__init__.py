"""CLI command definitions for dockerup."""

import click

from dockerup import __version__
from dockerup.commands.check import check
from dockerup.commands.config import config
from dockerup.commands.install import install


@click.group()
@click.version_option(__version__, prog_name="dockerup")
@click.option("--debug", is_flag=True, help="Enable debug output for troubleshooting")
@click.pass_context
def cli(ctx, debug):
    """Install and configure Docker Engine on Ubuntu LTS."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


cli.add_command(install)
cli.add_command(check)
cli.add_command(config)

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
