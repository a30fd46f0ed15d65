"""Docker Engine installer for Ubuntu LTS hosts."""

import logging

from .config import ConfigError, Settings, load_settings
from .errors import format_error, format_field_error, format_suggestion
from .execution import CommandResult, CommandRunner, run_command_async
from .paths import get_config_dir, get_config_path
from .runlog import RunLog

__version__ = "2025.1"

_debug_enabled = False


def set_debug(enabled: bool):
    """Enable or disable debug mode globally."""
    global _debug_enabled
    _debug_enabled = enabled


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return _debug_enabled


def setup_logging(debug: bool = False) -> None:
    """Send dockerup's own log records to stderr.

    DEBUG with --debug, WARNING otherwise. The run log is separate and
    always written.
    """
    set_debug(debug)
    logger = logging.getLogger("dockerup")
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(handler)


__all__ = [
    "__version__",
    "ConfigError",
    "Settings",
    "load_settings",
    "format_error",
    "format_field_error",
    "format_suggestion",
    "CommandResult",
    "CommandRunner",
    "run_command_async",
    "get_config_dir",
    "get_config_path",
    "RunLog",
    "set_debug",
    "is_debug",
    "setup_logging",
]
