"""Data models for the provisioning pipeline."""

import json
import os
import pwd
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable

from ..config import Settings
from ..execution import CommandRunner
from ..runlog import RunLog


class Architecture(Enum):
    AMD64 = "amd64"
    ARM64 = "arm64"
    ARMHF = "armhf"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str) -> "Architecture":
        try:
            return cls(value.strip())
        except ValueError:
            return cls.OTHER


class StepKind(Enum):
    CHECK = "check"
    ACTION = "action"


class StepStatus(Enum):
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


class PipelineOutcome(Enum):
    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"
    INTERRUPTED = "interrupted"


EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

_EXIT_CODES = {
    PipelineOutcome.SUCCESS: EXIT_SUCCESS,
    PipelineOutcome.CANCELLED: EXIT_SUCCESS,
    PipelineOutcome.FAILED: EXIT_FAILURE,
    PipelineOutcome.INTERRUPTED: EXIT_INTERRUPTED,
}


@dataclass(frozen=True)
class HostProfile:
    os_id: str
    os_version_id: str
    codename: str
    architecture: Architecture
    disk_free_kb: int
    total_mem_mb: int
    raw_architecture: str = ""

    @property
    def arch_name(self) -> str:
        """Architecture string as the package manager reports it."""
        if self.architecture is Architecture.OTHER:
            return self.raw_architecture or Architecture.OTHER.value
        return self.architecture.value


@dataclass
class StepResult:
    step: str
    status: StepStatus
    message: str
    warnings: list[str] = field(default_factory=list)


@dataclass
class DaemonConfig:
    """Contents of /etc/docker/daemon.json."""
    log_driver: str = "json-file"
    log_max_size: str = "10m"
    log_max_file: str = "3"
    storage_driver: str = "overlay2"
    buildkit: bool = True
    address_pool_base: str = "172.20.0.0/16"
    address_pool_size: int = 24
    userland_proxy: bool = False
    experimental: bool = False
    live_restore: bool = True

    def to_dict(self) -> dict:
        return {
            "log-driver": self.log_driver,
            "log-opts": {
                "max-size": self.log_max_size,
                "max-file": self.log_max_file,
            },
            "storage-driver": self.storage_driver,
            "features": {
                "buildkit": self.buildkit,
            },
            "default-address-pools": [
                {
                    "base": self.address_pool_base,
                    "size": self.address_pool_size,
                }
            ],
            "userland-proxy": self.userland_proxy,
            "experimental": self.experimental,
            "live-restore": self.live_restore,
        }

    def render(self) -> str:
        """Serialize to JSON text, checked by parsing it back.

        An unparsable daemon.json keeps dockerd from starting, so nothing
        that fails this check may reach the disk.
        """
        text = json.dumps(self.to_dict(), indent=4) + "\n"
        if json.loads(text) != self.to_dict():
            raise ValueError("daemon config does not survive a JSON round trip")
        return text


@dataclass
class InstallSummary:
    engine_version: str
    compose_version: str
    architecture: str
    os_version: str
    log_path: Path


def _no_progress(message: str) -> None:
    pass


async def _decline(question: str) -> bool:
    return False


def _current_user() -> str:
    user = os.environ.get("USER")
    if user:
        return user
    return pwd.getpwuid(os.getuid()).pw_name


@dataclass
class RunContext:
    """Everything a step needs, passed explicitly to each step.

    ``host`` is filled in by the probe step, ``summary`` by verification.
    """
    runner: CommandRunner
    run_log: RunLog
    settings: Settings = field(default_factory=Settings)
    confirm: Callable[[str], Awaitable[bool]] = _decline
    progress: Callable[[str], None] = _no_progress
    which: Callable[[str], str | None] = shutil.which
    geteuid: Callable[[], int] = os.geteuid
    user: Callable[[], str] = _current_user
    daemon_config: DaemonConfig = field(default_factory=DaemonConfig)
    host: HostProfile | None = None
    summary: InstallSummary | None = None

    def require_host(self) -> HostProfile:
        if self.host is None:
            raise RuntimeError("host profile requested before the environment probe ran")
        return self.host


StepFunc = Callable[[RunContext], Awaitable[StepResult]]


@dataclass
class Step:
    name: str
    kind: StepKind
    title: str
    run: StepFunc


@dataclass
class PipelineReport:
    outcome: PipelineOutcome
    results: list[StepResult]
    log_path: Path
    failed_step: str | None = None
    error: BaseException | None = None
    summary: InstallSummary | None = None

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self.outcome]

    @property
    def warnings(self) -> list[str]:
        return [w for r in self.results for w in r.warnings]


__all__ = [
    "Architecture",
    "StepKind",
    "StepStatus",
    "PipelineOutcome",
    "EXIT_SUCCESS",
    "EXIT_FAILURE",
    "EXIT_INTERRUPTED",
    "HostProfile",
    "StepResult",
    "DaemonConfig",
    "InstallSummary",
    "RunContext",
    "Step",
    "StepFunc",
    "PipelineReport",
]
