"""Install command implementation."""

import asyncio
import logging
import signal
import sys

import click

from dockerup import (
    CommandRunner,
    RunLog,
    __version__,
    format_suggestion,
    is_debug,
    setup_logging,
)
from dockerup.commands.utils import (
    echo_header,
    echo_progress,
    echo_result,
    echo_step,
    resolve_settings,
)
from dockerup.pipeline import (
    PipelineOutcome,
    PipelineReport,
    RunContext,
    build_steps,
    render_summary,
    run_pipeline,
)
from dockerup.tui import confirm

_logging = logging.getLogger(__name__)

INTERRUPT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


async def run_install(ctx: RunContext) -> PipelineReport:
    """Run the full pipeline; SIGINT/SIGTERM cancel it cleanly."""
    loop = asyncio.get_running_loop()
    task = asyncio.current_task()
    for sig in INTERRUPT_SIGNALS:
        loop.add_signal_handler(sig, task.cancel)
    try:
        return await run_pipeline(
            build_steps(), ctx, on_step=echo_step, on_result=echo_result
        )
    finally:
        for sig in INTERRUPT_SIGNALS:
            loop.remove_signal_handler(sig)


def report_outcome(report: PipelineReport) -> None:
    if report.outcome == PipelineOutcome.SUCCESS:
        if report.summary:
            click.echo("")
            click.secho(render_summary(report.summary), fg="cyan")
        click.secho("\n🎉 Docker installation completed successfully!", fg="green")
        click.secho(f"ℹ Installation log saved to: {report.log_path}", fg="cyan")
    elif report.outcome == PipelineOutcome.CANCELLED:
        click.secho("ℹ Installation cancelled by user", fg="cyan")
    elif report.outcome == PipelineOutcome.INTERRUPTED:
        click.secho(f"\n✗ Installation interrupted during {report.failed_step}", fg="red", err=True)
        click.secho(
            f"ℹ The host may be partially configured. Installation log saved to: {report.log_path}",
            fg="cyan",
            err=True,
        )
    else:
        click.echo(
            format_suggestion(
                f"step '{report.failed_step}' failed: {report.error}",
                f"see the installation log at {report.log_path}",
            ),
            err=True,
        )
        if is_debug() and report.error is not None:
            click.echo(f"[DEBUG] {type(report.error).__name__}", err=True)


@click.command()
@click.option(
    "--yes",
    "-y",
    is_flag=True,
    help="Reinstall without asking if Docker is already installed",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Log the commands that would change the host without running them",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the installation log (default: /tmp)",
)
@click.option(
    "--skip-smoke-test",
    is_flag=True,
    help="Do not run a test container after installing",
)
@click.pass_context
def install(ctx, yes: bool, dry_run: bool, log_dir: str | None, skip_smoke_test: bool):
    """Install and configure Docker Engine on this host."""
    debug = ctx.obj.get("debug", False)
    setup_logging(debug)
    settings = resolve_settings(
        assume_yes=yes, log_dir=log_dir, skip_smoke_test=skip_smoke_test
    )

    echo_header(f"Docker Installer v{__version__}")
    run_log = RunLog.create(settings.log_dir)
    run_ctx = RunContext(
        runner=CommandRunner(run_log, dry_run=dry_run),
        run_log=run_log,
        settings=settings,
        confirm=confirm,
        progress=echo_progress,
    )
    if dry_run:
        click.secho("ℹ Dry run: commands that change the host are only logged", fg="yellow")

    try:
        report = asyncio.run(run_install(run_ctx))
    finally:
        run_log.close()

    _logging.debug(f"Pipeline finished: {report.outcome.value}")
    report_outcome(report)
    sys.exit(report.exit_code)
