"""Error types and formatting utilities for consistent error messages.

Error Style Guide:
- User-facing errors use 'Error: ' prefix
- Field errors use structured format: '<entity> field '<field>' <issue>'
- Use present tense: 'must be', 'is required'
- Include actionable hints where helpful

Pipeline errors carry a ``fatal`` flag. Fatal errors stop the pipeline at the
step that raised them; non-fatal ones are recorded as warnings on that step's
result and the pipeline carries on.
"""


class PipelineError(Exception):
    """Base class for every failure raised by a pipeline step."""

    fatal = True

    def __init__(self, message: str, step: str | None = None):
        super().__init__(message)
        self.step = step


class EnvironmentProbeError(PipelineError):
    """Host facts could not be read (missing file or command)."""


class PrivilegeError(PipelineError):
    """The installer was started as the superuser."""


class UnsupportedPlatformError(PipelineError):
    """The OS id/version pair is not a supported release."""


class UnsupportedArchitectureError(PipelineError):
    """The CPU architecture has no upstream packages."""


class RepositorySetupError(PipelineError):
    """Signing key, source list or index refresh failed."""


class LegacyRemovalError(PipelineError):
    """A conflicting legacy package could not be removed."""

    fatal = False


class InstallationError(PipelineError):
    """The engine package transaction failed."""


class UserAccessError(PipelineError):
    """Group membership or socket permissions could not be changed."""


class ServiceControlError(PipelineError):
    """Writing the daemon config or enabling/starting the service failed."""


class VerificationError(PipelineError):
    """The installed CLI or compose plugin does not report a version."""


class ServiceNotRunningError(PipelineError):
    """The service is not active after configuration."""


class SmokeTestWarning(PipelineError):
    """The test container could not be run."""

    fatal = False


class PipelineInterrupted(PipelineError):
    """A signal arrived while a step was running."""


class InstallationCancelled(Exception):
    """The operator declined to continue. Not an error outcome."""


def format_error(message: str) -> str:
    """Format an error message with consistent prefix.

    Examples:
        >>> format_error("docker.list not writable")
        'Error: docker.list not writable'
    """
    return f"Error: {message}"


def format_field_error(entity: str, field: str, issue: str) -> str:
    """Format a field validation error with structured format.

    Examples:
        >>> format_field_error("Settings", "log_dir", "must be a non-empty string")
        "Settings field 'log_dir' must be a non-empty string"
    """
    return f"{entity} field '{field}' {issue}"


def format_suggestion(message: str, suggestion: str) -> str:
    """Format an error message with a helpful suggestion.

    Examples:
        >>> format_suggestion("step 'install-engine' failed", "see /tmp/docker_install.log")
        "Error: step 'install-engine' failed. Hint: see /tmp/docker_install.log"
    """
    return f"{format_error(message)}. Hint: {suggestion}"


__all__ = [
    "PipelineError",
    "EnvironmentProbeError",
    "PrivilegeError",
    "UnsupportedPlatformError",
    "UnsupportedArchitectureError",
    "RepositorySetupError",
    "LegacyRemovalError",
    "InstallationError",
    "UserAccessError",
    "ServiceControlError",
    "VerificationError",
    "ServiceNotRunningError",
    "SmokeTestWarning",
    "PipelineInterrupted",
    "InstallationCancelled",
    "format_error",
    "format_field_error",
    "format_suggestion",
]
