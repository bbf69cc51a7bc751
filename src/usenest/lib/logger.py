"""logger — JSONL run telemetry for nest operations.

Each nest run appends a single JSON line to ``usenest_log.jsonl`` inside the
configured log directory.  An entry records the file, whether it changed,
how many declarations and paths were merged, a truncated SHA-256 of the
input and the run time.  Nothing is written when the log directory is empty.
"""

from __future__ import annotations

import datetime
import hashlib
import json
import os
from typing import Any

from usenest.lib import config


def log_nest(
    log_dir: str,
    filepath: str,
    status: str,
    declaration_count: int,
    path_count: int,
    source: str,
    nest_ms: int,
) -> None:
    """Write a JSONL log entry for a nest run.

    Args:
        log_dir: Directory to write the log file in. Empty disables logging.
        filepath: Path to the processed file.
        status: 'changed' or 'unchanged'.
        declaration_count: Top-level use declarations found.
        path_count: Flattened import paths before deduplication.
        source: The original source text.
        nest_ms: Run duration in milliseconds.
    """
    if not log_dir:
        return
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, config.get_str("filenames.nest_log"))

    utc_src = config.get_str("formatting.utc_offset_source")
    utc_rep = config.get_str("formatting.utc_offset_replacement")
    hash_prefix = config.get_str("formatting.hash_prefix")
    hash_trunc = config.get_int("defaults.hash_truncation_length")
    separators = tuple(config.get_list("formatting.json_separators"))

    entry: dict[str, Any] = {
        "timestamp": (
            datetime.datetime.now(datetime.timezone.utc)
            .isoformat()
            .replace(utc_src, utc_rep)
        ),
        "event": "nest",
        "file": filepath,
        "status": status,
        "declarations": declaration_count,
        "paths": path_count,
        "code_length_lines": len(source.splitlines()),
        "code_hash": hash_prefix + hashlib.sha256(source.encode()).hexdigest()[:hash_trunc],
        "nest_ms": nest_ms,
    }

    with open(log_path, "a", encoding="utf-8") as fh:
        fh.write(json.dumps(entry, separators=separators) + "\n")
