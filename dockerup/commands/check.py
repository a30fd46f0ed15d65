"""Check command implementation."""

import asyncio
import sys

import click

from dockerup import CommandRunner, RunLog, format_suggestion, setup_logging
from dockerup.commands.utils import echo_result, echo_step, resolve_settings
from dockerup.pipeline import PipelineOutcome, RunContext, build_check_steps, run_pipeline


@click.command()
@click.pass_context
def check(ctx):
    """Run the pre-installation checks without changing anything."""
    debug = ctx.obj.get("debug", False)
    setup_logging(debug)
    settings = resolve_settings()

    run_log = RunLog.create(settings.log_dir)
    # Dry-run runner: only read-only probes are executed.
    run_ctx = RunContext(
        runner=CommandRunner(run_log, dry_run=True),
        run_log=run_log,
        settings=settings,
    )
    try:
        report = asyncio.run(
            run_pipeline(build_check_steps(), run_ctx, on_step=echo_step, on_result=echo_result)
        )
    finally:
        run_log.close()

    if report.outcome != PipelineOutcome.SUCCESS:
        click.echo(
            format_suggestion(
                f"check '{report.failed_step}' failed: {report.error}",
                f"see the check log at {report.log_path}",
            ),
            err=True,
        )
        sys.exit(report.exit_code)

    if report.warnings:
        click.echo(f"\n{len(report.warnings)} warning(s); installation can still proceed.")
    click.echo("\nHost is ready for Docker installation.")
