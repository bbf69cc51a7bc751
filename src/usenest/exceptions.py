"""Custom exceptions for usenest.

Exceptions:
    ConfigLoadError — Raised by ``AppConfig.load()`` when the application
        config cannot be read, parsed or validated. Wraps the original
        error.
    UseParseError — Raised when a top-level ``use`` declaration cannot be
        parsed. Carries the file path and 1-based line number.
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from usenest.lib import config


class ConfigLoadError(Exception):
    """Raised when the application configuration fails to load.

    Any failure along the load path ends up here: a missing file, an
    unreadable file, a YAML syntax error, a non-mapping root, or values
    that fail validation.
    """

    def __init__(
        self, path: Union[str, Path, None], original_error: Exception
    ) -> None:
        """Initialize with load error details.

        Args:
            path: The config file that failed, or None for package defaults.
            original_error: The underlying exception.
        """
        self.path = str(path) if path is not None else "<defaults>"
        self.original_error = original_error
        msg = config.get_str("messages.config_load_error")
        super().__init__(msg.format(path=self.path, error=original_error))


class UseParseError(Exception):
    """Raised when a Rust ``use`` declaration cannot be parsed.

    A declaration that cannot be parsed aborts the rewrite so that no
    import is silently dropped.
    """

    def __init__(self, filepath: str, line: int, detail: str) -> None:
        """Initialize with parse error details.

        Args:
            filepath: Path to the Rust file, or empty for in-memory source.
            line: 1-based line where the declaration starts.
            detail: What went wrong.
        """
        self.filepath = filepath
        self.line = line
        self.detail = detail
        msg = config.get_str("messages.parse_error")
        super().__init__(
            msg.format(filepath=filepath or "<source>", line=line, detail=detail)
        )
