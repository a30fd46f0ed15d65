"""Legacy package removal and engine installation."""

import logging

from ..errors import InstallationError, LegacyRemovalError
from .models import RunContext, StepResult, StepStatus

LEGACY_PACKAGES = [
    "docker",
    "docker-engine",
    "docker.io",
    "containerd",
    "runc",
    "docker-compose",
]
ENGINE_PACKAGES = [
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
]

_logging = logging.getLogger(__name__)


async def is_package_installed(ctx: RunContext, package: str) -> bool:
    result = await ctx.runner.run(
        ["dpkg-query", "-W", "-f=${Status}", package], read_only=True
    )
    return result.ok and result.output.endswith("install ok installed")


async def remove_legacy_packages(ctx: RunContext) -> StepResult:
    """Remove conflicting packages that are installed.

    Packages that are absent are skipped. A removal that fails is only
    recorded as a warning; the install transaction will report a real
    conflict if one is left behind.
    """
    removed = []
    warnings = []

    for package in LEGACY_PACKAGES:
        if not await is_package_installed(ctx, package):
            continue

        ctx.progress(f"Removing {package}")
        result = await ctx.runner.run(["apt-get", "remove", "-y", package], privileged=True)
        if result.ok:
            removed.append(package)
            continue

        error = LegacyRemovalError(
            f"Could not remove {package}: {result.describe()}",
            step="remove-legacy-packages",
        )
        _logging.warning(str(error))
        ctx.run_log.write(f"WARNING: {error}")
        warnings.append(str(error))

    if warnings:
        return StepResult(
            "remove-legacy-packages",
            StepStatus.WARN,
            "Some old Docker packages could not be removed",
            warnings,
        )
    if removed:
        return StepResult(
            "remove-legacy-packages",
            StepStatus.OK,
            f"Old Docker packages removed: {', '.join(removed)}",
        )
    return StepResult(
        "remove-legacy-packages", StepStatus.OK, "No old Docker packages found"
    )


async def install_engine(ctx: RunContext) -> StepResult:
    ctx.progress("Installing Docker CE, CLI, containerd and plugins")
    result = await ctx.runner.run(
        ["apt-get", "install", "-y", *ENGINE_PACKAGES], privileged=True
    )
    if not result.ok:
        raise InstallationError(result.describe())
    return StepResult(
        "install-engine", StepStatus.OK, "Docker Engine installed successfully"
    )
