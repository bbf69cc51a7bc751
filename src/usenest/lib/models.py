"""Data models for usenest application settings and parse results.

Typed dataclasses that replace raw dict access across the codebase.
``AppConfig`` validates its source mapping before construction and reports
every problem at once rather than failing on the first bad key.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from usenest._paths import app_config_path
from usenest.exceptions import ConfigLoadError
from usenest.lib import config


# ---------------------------------------------------------------------------
# Application configuration
# ---------------------------------------------------------------------------

# key -> (expected type, minimum value for ints)
_FIELDS: dict[str, tuple[type, Optional[int]]] = {
    "trailing_comma": (bool, None),
    "single_line_threshold": (int, 0),
    "indent_width": (int, 1),
    "log_dir": (str, None),
}

_DEFAULT_ACCESSORS = {
    bool: config.get_bool,
    int: config.get_int,
    str: config.get_str,
}


@dataclass(frozen=True)
class AppConfig:
    """Settings for rendering nested use declarations.

    Attributes:
        trailing_comma: Emit a comma after the last item of a multi-line
            brace group.
        single_line_threshold: Maximum number of leaf children rendered on
            one line as ``name::{a, b}``.
        indent_width: Spaces added per nesting level in multi-line groups.
        log_dir: Directory for JSONL run telemetry. Empty disables logging.
    """

    trailing_comma: bool = True
    single_line_threshold: int = 1
    indent_width: int = 4
    log_dir: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        """Build from a raw mapping, filling gaps from package defaults.

        Args:
            data: Parsed YAML mapping. Must already pass
                :func:`validate_app_config`.

        Returns:
            AppConfig instance.
        """
        merged = {
            key: data[key] if key in data
            else _DEFAULT_ACCESSORS[expected](f"app_defaults.{key}")
            for key, (expected, _) in _FIELDS.items()
        }
        return cls(**merged)

    @classmethod
    def load(cls) -> AppConfig:
        """Load the application config from its resolved source.

        Resolution order is ``$USENEST_CONFIG``, then ``usenest.yaml`` in the
        working directory, then package defaults.

        Raises:
            ConfigLoadError: On any failure to read, parse or validate.
        """
        path, required = app_config_path()
        if path is None:
            return cls._from_source(None, config.get("app_defaults"))

        if required and not path.is_file():
            env_var = config.get_str("env_vars.config_path")
            msg = config.get_str("messages.config_missing_env_path")
            err = FileNotFoundError(msg.format(env_var=env_var))
            raise ConfigLoadError(path, err) from err

        try:
            with open(path, encoding="utf-8") as fh:
                data = yaml.safe_load(fh)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigLoadError(path, exc) from exc

        return cls._from_source(path, {} if data is None else data)

    @classmethod
    def _from_source(cls, path: Optional[Path], data: Any) -> AppConfig:
        errors = validate_app_config(data)
        if errors:
            msg = config.get_str("messages.config_validation_error")
            err = ValueError(msg.format(errors="; ".join(errors)))
            raise ConfigLoadError(path, err) from err
        return cls.from_dict(data)


def validate_app_config(data: Any) -> list[str]:
    """Validate the structure of an application config mapping.

    Args:
        data: The parsed YAML content.

    Returns:
        List of validation error messages. Empty if valid.
    """
    errors: list[str] = []

    if not isinstance(data, dict):
        msg = config.get_str("messages.config_not_mapping")
        errors.append(msg.format(type=type(data).__name__))
        return errors

    for key in data:
        if key not in _FIELDS:
            errors.append(f"Unknown key: {key!r}")

    for key, (expected, minimum) in _FIELDS.items():
        if key not in data:
            continue
        val = data[key]
        # bool is an int subclass; reject it where an int is expected
        if not isinstance(val, expected) or (expected is int and isinstance(val, bool)):
            errors.append(
                f"'{key}' must be {expected.__name__}, got {type(val).__name__}"
            )
            continue
        if minimum is not None and val < minimum:
            errors.append(f"'{key}' must be >= {minimum}, got {val}")

    return errors


# ---------------------------------------------------------------------------
# Parse results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UseDeclaration:
    """A top-level ``use`` declaration found in Rust source.

    Attributes:
        start_line: 1-based first line of the declaration.
        end_line: 1-based last line (inclusive).
        text: Raw declaration text, ``use`` keyword through ``;``.
        paths: Flattened import paths, one tuple of segments per import.
        comments: Comments sharing the declaration's lines, in source order.
            They move with the declaration when it is rewritten.
    """

    start_line: int
    end_line: int
    text: str
    paths: list[tuple[str, ...]] = field(default_factory=list)
    comments: list[str] = field(default_factory=list)
