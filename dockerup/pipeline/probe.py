"""Environment probe: read-only facts about the target host."""

import logging
import os
import shlex
from pathlib import Path
from typing import Awaitable, Callable

from ..errors import EnvironmentProbeError
from ..execution import CommandRunner
from ..paths import MEMINFO_PATH, OS_RELEASE_PATH
from .models import Architecture, HostProfile, RunContext, StepResult, StepStatus

_logging = logging.getLogger(__name__)


def parse_os_release(text: str) -> dict[str, str]:
    """Parse os-release(5) KEY=value lines, unquoting values."""
    values = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, raw = line.split("=", 1)
        try:
            parts = shlex.split(raw)
        except ValueError:
            parts = [raw.strip("\"'")]
        values[key.strip()] = parts[0] if parts else ""
    return values


def parse_meminfo_mb(text: str) -> int:
    """Return MemTotal from /proc/meminfo in MiB."""
    for line in text.splitlines():
        if line.startswith("MemTotal:"):
            fields = line.split()
            return int(fields[1]) // 1024
    raise EnvironmentProbeError("MemTotal not found in meminfo")


def disk_free_kb(root: str = "/") -> int:
    """Free kB on ``root`` available to unprivileged users (df's 'Available')."""
    stats = os.statvfs(root)
    return stats.f_bavail * stats.f_frsize // 1024


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise EnvironmentProbeError(f"Cannot read {path}: {e}") from e


async def probe_host(
    runner: CommandRunner,
    os_release_path: Path = OS_RELEASE_PATH,
    meminfo_path: Path = MEMINFO_PATH,
    root: str = "/",
) -> HostProfile:
    """Collect the HostProfile. Runs no mutating command."""
    release = parse_os_release(_read(os_release_path))
    if "ID" not in release or "VERSION_ID" not in release:
        raise EnvironmentProbeError(
            f"Cannot determine OS version: {os_release_path} has no ID/VERSION_ID"
        )

    result = await runner.run(["dpkg", "--print-architecture"], read_only=True)
    if not result.ok or not result.output:
        raise EnvironmentProbeError(
            f"Cannot determine architecture: {result.describe()}"
        )
    raw_arch = result.output.strip()

    try:
        free_kb = disk_free_kb(root)
    except OSError as e:
        raise EnvironmentProbeError(f"Cannot read free space of {root}: {e}") from e

    profile = HostProfile(
        os_id=release["ID"],
        os_version_id=release["VERSION_ID"],
        codename=release.get("VERSION_CODENAME", ""),
        architecture=Architecture.parse(raw_arch),
        raw_architecture=raw_arch,
        disk_free_kb=free_kb,
        total_mem_mb=parse_meminfo_mb(_read(meminfo_path)),
    )
    _logging.debug(f"Probed host: {profile}")
    return profile


async def probe_environment(
    ctx: RunContext,
    probe: Callable[[CommandRunner], Awaitable[HostProfile]] = probe_host,
) -> StepResult:
    host = ctx.host = await probe(ctx.runner)
    ctx.run_log.write(
        f"Host: {host.os_id} {host.os_version_id} ({host.codename or '?'}), "
        f"arch={host.arch_name}, disk_free_kb={host.disk_free_kb}, "
        f"mem_mb={host.total_mem_mb}"
    )
    return StepResult(
        "probe-environment",
        StepStatus.OK,
        f"Detected {host.os_id} {host.os_version_id} on {host.arch_name}",
    )
