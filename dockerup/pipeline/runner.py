"""Fixed-order step runner."""

import asyncio
import logging
from functools import partial
from typing import Awaitable, Callable

from ..errors import InstallationCancelled, PipelineError, PipelineInterrupted
from ..execution import CommandRunner
from .configure import configure_daemon, configure_user
from .engine import install_engine, remove_legacy_packages
from .gate import (
    check_architecture,
    check_existing_installation,
    check_platform,
    check_privileges,
    check_resources,
)
from .models import (
    HostProfile,
    PipelineOutcome,
    PipelineReport,
    RunContext,
    Step,
    StepKind,
    StepResult,
    StepStatus,
)
from .probe import probe_environment, probe_host
from .repository import install_prerequisites, setup_repository
from .verify import verify_installation

_logging = logging.getLogger(__name__)

ProbeFunc = Callable[[CommandRunner], Awaitable[HostProfile]]


def build_check_steps(probe: ProbeFunc = probe_host) -> list[Step]:
    """Probe and precondition steps. None of them changes the host.

    ``probe`` collects the HostProfile for the first step.
    """
    return [
        Step(
            "probe-environment",
            StepKind.CHECK,
            "Detecting host environment",
            partial(probe_environment, probe=probe),
        ),
        Step("check-privileges", StepKind.CHECK, "Checking user privileges", check_privileges),
        Step("check-platform", StepKind.CHECK, "Checking Ubuntu version compatibility", check_platform),
        Step("check-architecture", StepKind.CHECK, "Checking CPU architecture", check_architecture),
        Step("check-resources", StepKind.CHECK, "Checking system requirements", check_resources),
    ]


def build_steps(probe: ProbeFunc = probe_host) -> list[Step]:
    return [
        *build_check_steps(probe),
        Step("check-existing-installation", StepKind.CHECK, "Checking for existing Docker installation", check_existing_installation),
        Step("install-prerequisites", StepKind.ACTION, "Updating system packages", install_prerequisites),
        Step("setup-repository", StepKind.ACTION, "Setting up Docker's official repository", setup_repository),
        Step("remove-legacy-packages", StepKind.ACTION, "Removing old Docker versions (if any)", remove_legacy_packages),
        Step("install-engine", StepKind.ACTION, "Installing Docker Engine", install_engine),
        Step("configure-user", StepKind.ACTION, "Configuring Docker for non-root usage", configure_user),
        Step("configure-daemon", StepKind.ACTION, "Configuring Docker daemon with best practices", configure_daemon),
        Step("verify-installation", StepKind.CHECK, "Verifying Docker installation", verify_installation),
    ]


def _no_op(*args) -> None:
    pass


async def run_pipeline(
    steps: list[Step],
    ctx: RunContext,
    on_step: Callable[[Step], None] = _no_op,
    on_result: Callable[[Step, StepResult], None] = _no_op,
) -> PipelineReport:
    """Run ``steps`` in order, stopping at the first fatal error.

    Nothing already applied is rolled back. Cancellation (SIGINT/SIGTERM
    cancel the task running this coroutine) is recorded in the run log and
    reported as INTERRUPTED.
    """
    results: list[StepResult] = []

    def report(outcome: PipelineOutcome, step: Step | None = None, error: BaseException | None = None) -> PipelineReport:
        return PipelineReport(
            outcome=outcome,
            results=results,
            log_path=ctx.run_log.path,
            failed_step=step.name if step else None,
            error=error,
            summary=ctx.summary,
        )

    for step in steps:
        on_step(step)
        ctx.run_log.write(f"=== {step.name}: {step.title}")
        try:
            result = await step.run(ctx)
        except InstallationCancelled as e:
            ctx.run_log.write(f"Run cancelled at {step.name}: {e}")
            return report(PipelineOutcome.CANCELLED)
        except PipelineError as e:
            e.step = e.step or step.name
            result = StepResult(step.name, StepStatus.FAIL, str(e))
            results.append(result)
            on_result(step, result)
            ctx.run_log.write(f"FAILED at {step.name}: {e}")
            _logging.debug(f"Step {step.name} failed: {type(e).__name__}: {e}")
            return report(PipelineOutcome.FAILED, step, e)
        except (asyncio.CancelledError, KeyboardInterrupt):
            ctx.run_log.write(
                f"INTERRUPTED during {step.name}; the host may be partially "
                "configured, inspect this log before re-running"
            )
            error = PipelineInterrupted(f"Interrupted during {step.name}", step=step.name)
            return report(PipelineOutcome.INTERRUPTED, step, error)

        results.append(result)
        on_result(step, result)
        ctx.run_log.write(f"{result.status.value.upper()} {step.name}: {result.message}")

    ctx.run_log.write("Docker installation completed successfully")
    return report(PipelineOutcome.SUCCESS)
