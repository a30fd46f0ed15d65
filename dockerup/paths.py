"""Well-known system paths and settings path helpers for dockerup."""

import os
from datetime import datetime
from pathlib import Path

OS_RELEASE_PATH = Path("/etc/os-release")
MEMINFO_PATH = Path("/proc/meminfo")

KEYRINGS_DIR = "/etc/apt/keyrings"
KEYRING_PATH = "/etc/apt/keyrings/docker.gpg"
SOURCE_LIST_PATH = "/etc/apt/sources.list.d/docker.list"

DAEMON_CONFIG_DIR = "/etc/docker"
DAEMON_CONFIG_PATH = "/etc/docker/daemon.json"
DOCKER_SOCKET_PATH = "/var/run/docker.sock"

RUN_LOG_PREFIX = "docker_install_"


def get_config_dir() -> Path:
    """Return XDG-compliant config directory: ~/.config/dockerup"""
    return Path.home() / ".config" / "dockerup"


def get_config_path() -> Path:
    """Return path to the user settings file.

    Priority:
    1. DOCKERUP_CONFIG environment variable (if set)
    2. ~/.config/dockerup/settings.json (default XDG location)
    """
    if "DOCKERUP_CONFIG" in os.environ:
        return Path(os.environ["DOCKERUP_CONFIG"])
    return get_config_dir() / "settings.json"


def run_log_path(log_dir: Path | str, started: datetime | None = None) -> Path:
    """Return the run log path for a run started at ``started``.

    >>> run_log_path("/tmp", datetime(2025, 1, 2, 3, 4, 5))
    PosixPath('/tmp/docker_install_20250102_030405.log')
    """
    started = started or datetime.now()
    return Path(log_dir) / f"{RUN_LOG_PREFIX}{started:%Y%m%d_%H%M%S}.log"
