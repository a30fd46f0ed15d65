"""Shared helpers for commands: settings resolution and console rendering."""

import dataclasses
import sys

import click

from dockerup import ConfigError, format_error
from dockerup.config import Settings, load_settings
from dockerup.paths import get_config_path
from dockerup.pipeline import Step, StepResult, StepStatus


def resolve_settings(**overrides) -> Settings:
    """Load the settings file and apply CLI overrides that were given.

    Exits with status 1 on a broken settings file.
    """
    try:
        settings = load_settings(get_config_path())
    except ConfigError as e:
        click.echo(format_error(str(e)), err=True)
        sys.exit(1)

    given = {k: v for k, v in overrides.items() if v not in (None, False)}
    return dataclasses.replace(settings, **given)


def echo_header(title: str) -> None:
    rule = "═" * 63
    click.secho(f"\n{rule}", fg="magenta")
    click.secho(f"🐳 {title} 🐳", bold=True)
    click.secho(f"{rule}\n", fg="magenta")


def echo_step(step: Step) -> None:
    click.secho(f"→ {step.title}", fg="blue")


def echo_progress(message: str) -> None:
    click.secho(f"  ⚙ {message}", fg="cyan")


def echo_result(step: Step, result: StepResult) -> None:
    for warning in result.warnings:
        click.secho(f"ℹ {warning}", fg="yellow")
    if result.status == StepStatus.FAIL:
        click.secho(f"✗ {result.message}", fg="red", err=True)
    else:
        click.secho(f"✓ {result.message}", fg="green")
