"""Provisioning pipeline for Docker Engine on Ubuntu LTS."""

from .gate import (
    MIN_DISK_FREE_KB,
    MIN_MEMORY_MB,
    SUPPORTED_ARCHITECTURES,
    SUPPORTED_RELEASES,
    resolve_codename,
)
from .models import (
    EXIT_FAILURE,
    EXIT_INTERRUPTED,
    EXIT_SUCCESS,
    Architecture,
    DaemonConfig,
    HostProfile,
    InstallSummary,
    PipelineOutcome,
    PipelineReport,
    RunContext,
    Step,
    StepKind,
    StepResult,
    StepStatus,
)
from .probe import parse_meminfo_mb, parse_os_release, probe_host
from .repository import render_source_list
from .runner import build_check_steps, build_steps, run_pipeline
from .verify import render_summary

__all__ = [
    "Architecture",
    "DaemonConfig",
    "HostProfile",
    "InstallSummary",
    "PipelineOutcome",
    "PipelineReport",
    "RunContext",
    "Step",
    "StepKind",
    "StepResult",
    "StepStatus",
    "EXIT_SUCCESS",
    "EXIT_FAILURE",
    "EXIT_INTERRUPTED",
    "MIN_DISK_FREE_KB",
    "MIN_MEMORY_MB",
    "SUPPORTED_ARCHITECTURES",
    "SUPPORTED_RELEASES",
    "resolve_codename",
    "parse_os_release",
    "parse_meminfo_mb",
    "probe_host",
    "render_source_list",
    "build_check_steps",
    "build_steps",
    "run_pipeline",
    "render_summary",
]
