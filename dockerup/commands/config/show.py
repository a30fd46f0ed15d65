"""Show effective settings."""

import json

import click

from dockerup.commands.utils import resolve_settings
from dockerup.paths import get_config_path


@click.command(name="show")
def config_show():
    """Print the effective settings as JSON."""
    path = get_config_path()
    settings = resolve_settings()
    source = path if path.exists() else "built-in defaults"
    click.echo(f"Settings source: {source}", err=True)
    click.echo(json.dumps(settings.to_dict(), indent=2))
