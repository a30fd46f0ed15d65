"""Configuration commands."""

import click

from dockerup.commands.config.daemon import config_daemon
from dockerup.commands.config.fmt import config_fmt
from dockerup.commands.config.show import config_show


@click.group()
def config():
    """Show and format installer configuration."""
    pass


config.add_command(config_show, name="show")
config.add_command(config_daemon, name="daemon")
config.add_command(config_fmt, name="fmt")
