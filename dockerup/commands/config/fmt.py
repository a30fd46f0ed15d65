"""Format settings file command implementation."""

import json
import sys
import uuid
from pathlib import Path

import click

from dockerup import ConfigError, format_error
from dockerup.config import load_config, validate_settings
from dockerup.paths import get_config_path


@click.command(name="fmt")
@click.argument("file", required=False, type=click.Path())
@click.option(
    "--write",
    "-w",
    is_flag=True,
    help="Overwrite the file instead of printing to stdout",
)
def config_fmt(file: str | None, write: bool):
    """Validate a settings file and print it as strict JSON.

    // comments and trailing commas are accepted on input but not kept.

    FILE: Path to settings file (default: ~/.config/dockerup/settings.json)
    """
    file_path = Path(file) if file is not None else get_config_path()

    if not file_path.exists():
        click.echo(format_error(f"File not found: {file_path}"), err=True)
        sys.exit(1)

    try:
        data = load_config(file_path)
        validate_settings(data)
    except ConfigError as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)

    formatted = json.dumps(data, indent=2, sort_keys=False)

    if not write:
        click.echo(formatted)
        return

    temp_path = file_path.with_suffix(f".tmp.{uuid.uuid4().hex[:8]}")
    try:
        temp_path.write_text(formatted + "\n")
        temp_path.replace(file_path)
    except OSError as e:
        if temp_path.exists():
            temp_path.unlink()
        click.echo(format_error(f"Error writing file: {e}"), err=True)
        sys.exit(1)
    click.echo(f"Formatted {file_path}")
