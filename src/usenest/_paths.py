"""Centralized path resolution for the usenest package.

This is the ONLY module that touches __file__ or computes directory paths.
Every other module imports from here.

Environment variables:
    USENEST_CONFIG — Path to the application config file. When set, the
        file must exist; otherwise ``usenest.yaml`` in the working
        directory is used if present.
"""

import os
from pathlib import Path
from typing import Optional

_PACKAGE_DIR = Path(__file__).resolve().parent


def _cfg(key: str) -> str:
    """Lazy config accessor to avoid circular imports at module level."""
    from usenest.lib.config import get_str

    return get_str(key)


def config_dir() -> Path:
    """Return the package config/ directory path."""
    return _PACKAGE_DIR / "config"


def defaults_path() -> Path:
    """Return the path to config/defaults.yaml."""
    return config_dir() / "defaults.yaml"


def cli_dir() -> Path:
    """Return the cli/ directory path."""
    return _PACKAGE_DIR / _cfg("directories.cli")


def theme_path() -> Path:
    """Return the path to cli/theme.yaml."""
    return cli_dir() / _cfg("filenames.theme")


def app_config_path() -> tuple[Optional[Path], bool]:
    """Resolve the application config file.

    Returns:
        ``(path, required)``. ``path`` is None when no config file applies
        and package defaults should be used. ``required`` is True when the
        path came from the environment and must exist.
    """
    env = os.environ.get(_cfg("env_vars.config_path"))
    if env:
        return Path(env), True
    local = Path.cwd() / _cfg("filenames.app_config")
    if local.is_file():
        return local, False
    return None, False
