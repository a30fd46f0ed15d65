"""Pytest fixtures and utilities for dockerup tests."""

import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from dockerup import RunLog
from dockerup.config import Settings
from dockerup.pipeline import Architecture, HostProfile, RunContext

from .fakes import ScriptedRunner, answering


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def run_log(temp_dir: Path) -> Generator[RunLog, None, None]:
    log = RunLog.create(temp_dir)
    yield log
    log.close()


@pytest.fixture
def noble_host() -> HostProfile:
    return HostProfile(
        os_id="ubuntu",
        os_version_id="24.04",
        codename="noble",
        architecture=Architecture.AMD64,
        disk_free_kb=5_000_000,
        total_mem_mb=4096,
        raw_architecture="amd64",
    )


@pytest.fixture
def make_context(run_log: RunLog, noble_host: HostProfile):
    """Factory for a RunContext wired to a ScriptedRunner.

    No docker on PATH, a regular user, and a confirmation source that
    declines unless told otherwise.
    """

    def _create(
        responses: dict | None = None,
        host: HostProfile | None = noble_host,
        confirm=lambda question: False,
        which=lambda name: None,
        euid: int = 1000,
        settings: Settings | None = None,
    ) -> RunContext:
        return RunContext(
            runner=ScriptedRunner(run_log, responses),
            run_log=run_log,
            settings=settings or Settings(),
            confirm=answering(confirm),
            which=which,
            geteuid=lambda: euid,
            user=lambda: "alice",
            host=host,
        )

    return _create


@pytest.fixture
def mock_tty() -> Generator[None, None, None]:
    """Mock sys.stdin.isatty to return True."""
    with patch("sys.stdin.isatty", return_value=True):
        yield

