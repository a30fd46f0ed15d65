"""Settings loading and JSON-ish preprocessing."""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from .errors import format_field_error


class ConfigError(Exception):
    """Raised when the settings file cannot be read, parsed or validated.

    Syntax errors carry the line number, column and a caret line.
    """
    pass


@dataclass
class Settings:
    """Installer settings. Every field can be overridden from the CLI."""
    log_dir: str = "/tmp"
    smoke_test_image: str = "hello-world"
    skip_smoke_test: bool = False
    assume_yes: bool = False

    def __post_init__(self):
        if not self.log_dir or not isinstance(self.log_dir, str):
            raise ValueError(
                format_field_error("Settings", "log_dir", "must be a non-empty string")
            )
        if not self.smoke_test_image or not isinstance(self.smoke_test_image, str):
            raise ValueError(
                format_field_error(
                    "Settings", "smoke_test_image", "must be a non-empty string"
                )
            )

    def to_dict(self) -> dict:
        return asdict(self)


def validate_settings(data: dict) -> Settings:
    """Validate a raw dict and convert it to Settings.

    Raises:
        ConfigError: On unknown keys, wrong value types or empty strings
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Settings must be a JSON object, got {type(data).__name__}")

    known = {f.name: f.type for f in fields(Settings)}
    for key, value in data.items():
        if key not in known:
            raise ConfigError(f"Unknown settings field: {key}")
        expected = bool if known[key] in (bool, "bool") else str
        if not isinstance(value, expected):
            raise ConfigError(
                format_field_error(
                    "Settings",
                    key,
                    f"must be a {expected.__name__}, got {type(value).__name__}",
                )
            )

    try:
        return Settings(**data)
    except ValueError as e:
        raise ConfigError(str(e)) from e


def _skip_blank(text: str, i: int) -> int:
    """Return the index of the next char that is not whitespace or a // comment."""
    n = len(text)
    while i < n:
        if text[i] in " \t\r\n":
            i += 1
        elif text.startswith("//", i):
            while i < n and text[i] != "\n":
                i += 1
        else:
            break
    return i


def preprocess_jsonish(text: str) -> str:
    """Turn JSON-ish text into strict JSON.

    // line comments and trailing commas before ] or } are replaced with
    spaces, so line/column positions in later parse errors still match the
    original text. String contents (including escaped quotes) are untouched.
    """
    out = []
    i = 0
    n = len(text)
    in_string = False

    while i < n:
        char = text[i]

        if in_string:
            out.append(char)
            if char == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
        elif text.startswith("//", i):
            end = text.find("\n", i)
            end = n if end == -1 else end
            out.append(" " * (end - i))
            i = end
            continue
        elif char == ",":
            j = _skip_blank(text, i + 1)
            out.append(" " if j < n and text[j] in "]}" else char)
        else:
            out.append(char)
        i += 1

    return "".join(out)


def _format_syntax_error(original_text: str, error: json.JSONDecodeError) -> str:
    """Format a JSON syntax error with the offending line and a caret."""
    lines = original_text.split("\n")
    parts = [
        f"Settings syntax error at line {error.lineno}, col {error.colno}: {error.msg}"
    ]
    if 1 <= error.lineno <= len(lines):
        parts.append(lines[error.lineno - 1])
        parts.append(" " * (error.colno - 1) + "^")
    return "\n".join(parts)


def load_config(path_or_text: Path | str) -> dict:
    """Load and parse a JSON-ish settings document.

    Args:
        path_or_text: A Path to read, or the raw text itself

    Raises:
        ConfigError: If the file cannot be read, has syntax errors or
            is not a JSON object.
    """
    if isinstance(path_or_text, Path):
        try:
            original_text = path_or_text.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise ConfigError(f"Settings file not found: {path_or_text}")
        except PermissionError:
            raise ConfigError(f"Permission denied reading settings file: {path_or_text}")
        except UnicodeDecodeError:
            raise ConfigError(f"Settings file is not valid UTF-8: {path_or_text}")
        except OSError as e:
            raise ConfigError(f"Error reading settings file {path_or_text}: {e}")
    elif isinstance(path_or_text, str):
        original_text = path_or_text
    else:
        raise TypeError(
            f"path_or_text must be Path or str, got {type(path_or_text).__name__}"
        )

    try:
        result = json.loads(preprocess_jsonish(original_text))
    except json.JSONDecodeError as e:
        raise ConfigError(_format_syntax_error(original_text, e)) from e

    if not isinstance(result, dict):
        raise ConfigError(f"Settings must be a JSON object, got {type(result).__name__}")

    return result


def load_settings(path: Path) -> Settings:
    """Load settings from ``path``, falling back to defaults if it is absent."""
    if not path.exists():
        return Settings()
    return validate_settings(load_config(path))


__all__ = [
    "ConfigError",
    "Settings",
    "validate_settings",
    "preprocess_jsonish",
    "load_config",
    "load_settings",
]
