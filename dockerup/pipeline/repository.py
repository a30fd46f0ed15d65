"""Upstream apt repository and signing key setup."""

from ..errors import RepositorySetupError
from ..paths import KEYRING_PATH, KEYRINGS_DIR, SOURCE_LIST_PATH
from .models import HostProfile, RunContext, StepResult, StepStatus

REPOSITORY_URL = "https://download.docker.com/linux/ubuntu"
SIGNING_KEY_URL = f"{REPOSITORY_URL}/gpg"

PREREQUISITE_PACKAGES = [
    "apt-transport-https",
    "ca-certificates",
    "curl",
    "gnupg",
    "lsb-release",
    "software-properties-common",
]


def render_source_list(host: HostProfile) -> str:
    """The single docker.list line for ``host``. Same host, same bytes."""
    return (
        f"deb [arch={host.arch_name} signed-by={KEYRING_PATH}] "
        f"{REPOSITORY_URL} {host.codename} stable\n"
    )


async def _run_or_fail(ctx: RunContext, argv: list[str], **kwargs):
    result = await ctx.runner.run(argv, **kwargs)
    if not result.ok:
        raise RepositorySetupError(result.describe())
    return result


async def install_prerequisites(ctx: RunContext) -> StepResult:
    ctx.progress("Updating package index")
    await _run_or_fail(ctx, ["apt-get", "update"], privileged=True)

    ctx.progress("Installing prerequisite packages")
    await _run_or_fail(
        ctx, ["apt-get", "install", "-y", *PREREQUISITE_PACKAGES], privileged=True
    )
    return StepResult(
        "install-prerequisites", StepStatus.OK, "System packages updated successfully"
    )


async def setup_repository(ctx: RunContext) -> StepResult:
    """Write the keyring and source list, then refresh the index.

    Both files are overwritten unconditionally; re-running with the same
    host produces the same content.
    """
    host = ctx.require_host()

    ctx.progress("Creating keyrings directory")
    await _run_or_fail(
        ctx, ["install", "-m", "0755", "-d", KEYRINGS_DIR], privileged=True
    )

    ctx.progress("Adding Docker's official GPG key")
    key = await _run_or_fail(ctx, ["curl", "-fsSL", SIGNING_KEY_URL], quiet=True)
    await _run_or_fail(
        ctx,
        ["gpg", "--batch", "--yes", "--dearmor", "-o", KEYRING_PATH],
        privileged=True,
        input=key.stdout,
    )
    await _run_or_fail(ctx, ["chmod", "a+r", KEYRING_PATH], privileged=True)

    ctx.progress("Setting up Docker repository")
    source_line = render_source_list(host)
    ctx.run_log.write(f"{SOURCE_LIST_PATH}: {source_line.strip()}")
    await _run_or_fail(
        ctx,
        ["tee", SOURCE_LIST_PATH],
        privileged=True,
        input=source_line.encode(),
        quiet=True,
    )

    ctx.progress("Updating package index with Docker repository")
    await _run_or_fail(ctx, ["apt-get", "update"], privileged=True)

    return StepResult(
        "setup-repository", StepStatus.OK, "Docker repository configured successfully"
    )
