"""Post-install configuration: user access and the daemon config file."""

from ..errors import ServiceControlError, UserAccessError
from ..paths import DAEMON_CONFIG_DIR, DAEMON_CONFIG_PATH, DOCKER_SOCKET_PATH
from .models import RunContext, StepResult, StepStatus

DOCKER_GROUP = "docker"
SERVICE_NAME = "docker"

RELOGIN_CAVEAT = "You may need to log out and back in for group changes to take effect"


async def configure_user(ctx: RunContext) -> StepResult:
    """Add the invoking user to the docker group and open up the socket.

    Group membership only applies to new login sessions; the chmod lets the
    current session talk to the daemon until then.
    """
    user = ctx.user()

    ctx.progress(f"Adding {user} to the {DOCKER_GROUP} group")
    result = await ctx.runner.run(["usermod", "-aG", DOCKER_GROUP, user], privileged=True)
    if not result.ok:
        raise UserAccessError(result.describe())

    ctx.progress("Setting up Docker socket permissions")
    result = await ctx.runner.run(["chmod", "666", DOCKER_SOCKET_PATH], privileged=True)
    if not result.ok:
        raise UserAccessError(result.describe())

    ctx.run_log.write(f"NOTE: {RELOGIN_CAVEAT}")
    return StepResult(
        "configure-user",
        StepStatus.WARN,
        "Docker user configuration completed",
        [RELOGIN_CAVEAT],
    )


async def _systemctl(ctx: RunContext, action: str) -> None:
    result = await ctx.runner.run(["systemctl", action, SERVICE_NAME], privileged=True)
    if not result.ok:
        raise ServiceControlError(result.describe())


async def configure_daemon(ctx: RunContext) -> StepResult:
    ctx.progress(f"Creating Docker daemon configuration at {DAEMON_CONFIG_PATH}")
    try:
        text = ctx.daemon_config.render()
    except ValueError as e:
        raise ServiceControlError(f"Refusing to write invalid daemon config: {e}") from e

    result = await ctx.runner.run(["mkdir", "-p", DAEMON_CONFIG_DIR], privileged=True)
    if not result.ok:
        raise ServiceControlError(result.describe())

    result = await ctx.runner.run(
        ["tee", DAEMON_CONFIG_PATH], privileged=True, input=text.encode()
    )
    if not result.ok:
        raise ServiceControlError(result.describe())

    ctx.progress("Enabling Docker service")
    await _systemctl(ctx, "enable")
    ctx.progress("Starting Docker service")
    await _systemctl(ctx, "start")
    # Restart so the new daemon.json applies even if the package started dockerd.
    ctx.progress("Restarting Docker with new configuration")
    await _systemctl(ctx, "restart")

    return StepResult(
        "configure-daemon", StepStatus.OK, "Docker daemon configured with best practices"
    )
