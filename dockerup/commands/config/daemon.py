"""Print the daemon configuration the installer writes."""

import click

from dockerup.paths import DAEMON_CONFIG_PATH
from dockerup.pipeline import DaemonConfig


@click.command(name="daemon")
@click.option("--path", "show_path", is_flag=True, help="Print only the target path")
def config_daemon(show_path: bool):
    """Print the daemon.json written during installation."""
    if show_path:
        click.echo(DAEMON_CONFIG_PATH)
        return
    click.echo(DaemonConfig().render(), nl=False)
