"""Precondition checks run before anything on the host is changed.

Platform and architecture problems are fatal because the repository URL
and package names depend on them. Low disk space and memory only warn.
"""

import dataclasses

from ..errors import (
    InstallationCancelled,
    PrivilegeError,
    UnsupportedArchitectureError,
    UnsupportedPlatformError,
)
from .models import Architecture, RunContext, StepResult, StepStatus

SUPPORTED_RELEASES = {
    ("ubuntu", "22.04"): "jammy",
    ("ubuntu", "24.04"): "noble",
}
SUPPORTED_ARCHITECTURES = frozenset(
    {Architecture.AMD64, Architecture.ARM64, Architecture.ARMHF}
)

MIN_DISK_FREE_KB = 2 * 1024 * 1024  # 2 GiB
MIN_MEMORY_MB = 1024


def resolve_codename(os_id: str, version_id: str) -> str:
    codename = SUPPORTED_RELEASES.get((os_id.lower(), version_id))
    if codename is None:
        supported = ", ".join(f"{i} {v}" for i, v in SUPPORTED_RELEASES)
        raise UnsupportedPlatformError(
            f"Unsupported platform: {os_id} {version_id} (supported: {supported})"
        )
    return codename


async def check_privileges(ctx: RunContext) -> StepResult:
    if ctx.geteuid() == 0:
        raise PrivilegeError(
            "dockerup must not be run as root; run it as a regular user "
            "and it will use sudo where needed"
        )
    return StepResult("check-privileges", StepStatus.OK, "Running as a regular user")


async def check_platform(ctx: RunContext) -> StepResult:
    host = ctx.require_host()
    codename = resolve_codename(host.os_id, host.os_version_id)
    if codename != host.codename:
        ctx.host = dataclasses.replace(host, codename=codename)
    return StepResult(
        "check-platform",
        StepStatus.OK,
        f"Ubuntu {host.os_version_id} LTS ({codename.capitalize()}) is supported",
    )


async def check_architecture(ctx: RunContext) -> StepResult:
    host = ctx.require_host()
    if host.architecture not in SUPPORTED_ARCHITECTURES:
        raise UnsupportedArchitectureError(
            f"Unsupported architecture: {host.arch_name}"
        )
    return StepResult(
        "check-architecture",
        StepStatus.OK,
        f"Architecture {host.arch_name} is supported",
    )


async def check_resources(ctx: RunContext) -> StepResult:
    host = ctx.require_host()
    warnings = []
    if host.disk_free_kb < MIN_DISK_FREE_KB:
        warnings.append("Low disk space detected. Minimum 2GB recommended.")
    if host.total_mem_mb < MIN_MEMORY_MB:
        warnings.append("Low memory detected. Minimum 1GB recommended for Docker.")

    for warning in warnings:
        ctx.run_log.write(f"WARNING: {warning}")

    if warnings:
        return StepResult(
            "check-resources", StepStatus.WARN, "System resources below recommended minimum", warnings
        )
    return StepResult(
        "check-resources",
        StepStatus.OK,
        f"Sufficient disk space and memory ({host.total_mem_mb} MB)",
    )


async def check_existing_installation(ctx: RunContext) -> StepResult:
    if ctx.which("docker") is None:
        return StepResult(
            "check-existing-installation",
            StepStatus.OK,
            "No existing Docker installation found",
        )

    result = await ctx.runner.run(["docker", "--version"], read_only=True)
    version = result.output if result.ok and result.output else "Unknown"
    ctx.run_log.write(f"Existing Docker installation: {version}")

    if not (ctx.settings.assume_yes or await ctx.confirm(
        f"Docker is already installed ({version}). Reinstall Docker?"
    )):
        ctx.run_log.write("Installation cancelled by user")
        raise InstallationCancelled("Installation cancelled by user")

    ctx.run_log.write("Proceeding with Docker reinstallation")
    return StepResult(
        "check-existing-installation",
        StepStatus.OK,
        f"Reinstalling over existing Docker ({version})",
    )
