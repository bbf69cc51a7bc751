"""usenest engine — thin orchestrator for nesting a Rust file's imports.

Composes the library modules to rewrite one source string and return a
structured result.  This is the main entry point for programmatic usage.

Design notes:
    The engine never tokenizes source itself.  It delegates to lib/parser
    for declaration discovery and to lib/nester for tree building and
    rendering, and adds timing, status and telemetry on top.
"""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass
from typing import Any, Optional

from usenest.lib import config
from usenest.lib.logger import log_nest
from usenest.lib.models import AppConfig
from usenest.lib.nester import rewrite_declarations
from usenest.lib.parser import find_use_declarations


@dataclass
class NestResult:
    """Result of nesting the use declarations of one file."""

    status: str
    output: str
    declaration_count: int = 0
    path_count: int = 0
    nest_ms: int = 0

    @property
    def changed(self) -> bool:
        return self.status == config.get_str("statuses.changed")

    def summary(self) -> dict[str, Any]:
        """Return the result metadata without the rewritten source."""
        data = asdict(self)
        del data["output"]
        return data


def nest_file(
    source: str,
    filepath: str = "",
    app_config: Optional[AppConfig] = None,
) -> NestResult:
    """Nest the top-level use declarations of a Rust source string.

    Args:
        source: Rust source code.
        filepath: Path of the file, for error messages and telemetry.
        app_config: Layout and logging settings. Loaded with
            :meth:`AppConfig.load` when omitted.

    Returns:
        NestResult with the rewritten source and counts.

    Raises:
        UseParseError: If a declaration cannot be parsed.
        ConfigLoadError: If ``app_config`` is omitted and loading fails.
    """
    if app_config is None:
        app_config = AppConfig.load()

    status_changed = config.get_str("statuses.changed")
    status_unchanged = config.get_str("statuses.unchanged")

    start = time.time()

    decls = find_use_declarations(source, filepath)
    output = rewrite_declarations(source, decls, app_config) if decls else source
    nest_ms = int((time.time() - start) * 1000)

    status = status_changed if output != source else status_unchanged
    path_count = sum(len(d.paths) for d in decls)

    log_nest(
        app_config.log_dir,
        filepath,
        status,
        len(decls),
        path_count,
        source,
        nest_ms,
    )

    return NestResult(
        status=status,
        output=output,
        declaration_count=len(decls),
        path_count=path_count,
        nest_ms=nest_ms,
    )
