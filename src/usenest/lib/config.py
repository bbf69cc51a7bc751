"""config — lazy-loaded, typed accessor for usenest package defaults.

Reads ``config/defaults.yaml`` on first access and caches the parsed mapping
for the lifetime of the process.  The typed helpers (``get_str``,
``get_int``, ``get_bool``, ``get_list``) check the value type where it is
used, so a bad entry in the defaults file fails at the call that reads it.

This module holds *package* defaults only.  The user's application settings
are loaded by :meth:`usenest.lib.models.AppConfig.load`, which falls back to
the ``app_defaults`` section read through here.
"""

from __future__ import annotations

from typing import Any

import yaml

from usenest._paths import defaults_path

_DEFAULTS: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_defaults() -> dict[str, Any]:
    """Load and cache defaults.yaml.

    Returns:
        The full defaults mapping.

    Raises:
        FileNotFoundError: If defaults.yaml is missing.
        yaml.YAMLError: If defaults.yaml contains invalid YAML.
        TypeError: If the root of defaults.yaml is not a mapping.
    """
    global _DEFAULTS  # noqa: PLW0603
    if _DEFAULTS is None:
        with open(defaults_path(), encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
        if not isinstance(data, dict):
            msg = f"defaults.yaml must be a YAML mapping, got {type(data).__name__}"
            raise TypeError(msg)
        _DEFAULTS = data
    return _DEFAULTS


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------


def get(dotted_key: str) -> Any:
    """Access a nested value using dot notation, e.g. ``"exit_codes.error"``.

    Raises:
        KeyError: If any segment of the path is missing.
    """
    node: Any = load_defaults()
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            msg = f"Config key not found: {dotted_key!r} (missing segment: {part!r})"
            raise KeyError(msg)
        node = node[part]
    return node


def _typed(dotted_key: str, expected: type, label: str) -> Any:
    value = get(dotted_key)
    # bool is a subclass of int; keep the two apart
    if isinstance(value, bool) and expected is not bool:
        value_ok = False
    else:
        value_ok = isinstance(value, expected)
    if not value_ok:
        msg = f"Expected {label} for {dotted_key!r}, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def get_str(dotted_key: str) -> str:
    """Return a config value as a string.

    Raises:
        KeyError: If the key is missing.
        TypeError: If the value is not a string.
    """
    return _typed(dotted_key, str, "str")


def get_int(dotted_key: str) -> int:
    """Return a config value as an integer.

    Raises:
        KeyError: If the key is missing.
        TypeError: If the value is not an integer.
    """
    return _typed(dotted_key, int, "int")


def get_bool(dotted_key: str) -> bool:
    """Return a config value as a boolean.

    Raises:
        KeyError: If the key is missing.
        TypeError: If the value is not a boolean.
    """
    return _typed(dotted_key, bool, "bool")


def get_list(dotted_key: str) -> list[Any]:
    """Return a config value as a list.

    Raises:
        KeyError: If the key is missing.
        TypeError: If the value is not a list.
    """
    return _typed(dotted_key, list, "list")


# ---------------------------------------------------------------------------
# Test utilities
# ---------------------------------------------------------------------------


def reset() -> None:
    """Clear the cached defaults (used by tests)."""
    global _DEFAULTS  # noqa: PLW0603
    _DEFAULTS = None
