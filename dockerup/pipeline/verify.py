"""Post-install verification and the final summary."""

import logging

from ..errors import ServiceNotRunningError, SmokeTestWarning, VerificationError
from ..versions import extract_version_number
from .configure import RELOGIN_CAVEAT, SERVICE_NAME
from .models import InstallSummary, RunContext, StepResult, StepStatus

SMOKE_TEST_HINT = "Try logging out and back in, then run: docker run hello-world"

_logging = logging.getLogger(__name__)


async def _version_of(ctx: RunContext, argv: list[str], what: str) -> str:
    result = await ctx.runner.run(argv)
    if not result.ok:
        raise VerificationError(f"{what} does not report a version: {result.describe()}")
    return result.output


async def verify_installation(ctx: RunContext) -> StepResult:
    """Check the CLI, the compose plugin, the service and a test container.

    The service check is fatal. The test container is advisory: it usually
    fails only because the group change has not reached this session yet.
    """
    host = ctx.require_host()

    ctx.progress("Checking Docker version")
    docker_version = await _version_of(ctx, ["docker", "--version"], "Docker CLI")

    ctx.progress("Checking Docker Compose version")
    compose_version = await _version_of(
        ctx, ["docker", "compose", "version", "--short"], "Docker Compose"
    )

    ctx.progress("Checking Docker service status")
    result = await ctx.runner.run(
        ["systemctl", "is-active", "--quiet", SERVICE_NAME], privileged=True
    )
    if not result.ok:
        raise ServiceNotRunningError("Docker service is not running")

    warnings = []
    if ctx.settings.skip_smoke_test:
        ctx.run_log.write("Skipping test container")
    else:
        image = ctx.settings.smoke_test_image
        ctx.progress(f"Running Docker {image} test")
        result = await ctx.runner.run(["docker", "run", "--rm", image])
        if not result.ok:
            warning = SmokeTestWarning(
                f"Docker {image} test failed (this may be due to group permissions). "
                f"{SMOKE_TEST_HINT}",
                step="verify-installation",
            )
            _logging.warning(str(warning))
            ctx.run_log.write(f"WARNING: {warning}")
            warnings.append(str(warning))

    ctx.summary = InstallSummary(
        engine_version=extract_version_number(docker_version) or docker_version,
        compose_version=extract_version_number(compose_version) or compose_version,
        architecture=host.arch_name,
        os_version=f"{host.os_version_id} ({host.codename})",
        log_path=ctx.run_log.path,
    )

    return StepResult(
        "verify-installation",
        StepStatus.WARN if warnings else StepStatus.OK,
        "Docker installation verification completed",
        warnings,
    )


def render_summary(summary: InstallSummary) -> str:
    lines = [
        "Installation Summary:",
        f"   • Docker Engine: {summary.engine_version}",
        f"   • Docker Compose: {summary.compose_version}",
        f"   • Architecture: {summary.architecture}",
        f"   • Ubuntu Version: {summary.os_version}",
        f"   • Installation Log: {summary.log_path}",
        "",
        "Important Notes:",
        f"   • {RELOGIN_CAVEAT}",
        "   • Test your installation: docker run hello-world",
        "   • Check Docker status: sudo systemctl status docker",
        "",
        "Quick Start Commands:",
        "   • Start a container: docker run -it ubuntu:latest bash",
        "   • List containers: docker ps -a",
        "   • List images: docker images",
        "   • Docker Compose: docker compose up -d",
        "",
        "Additional Resources:",
        "   • Docker Documentation: https://docs.docker.com/",
        "   • Docker Compose Guide: https://docs.docker.com/compose/",
        "   • Best Practices: https://docs.docker.com/develop/best-practices/",
    ]
    return "\n".join(lines)
