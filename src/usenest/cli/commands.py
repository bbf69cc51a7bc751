"""Subcommand handlers for the usenest CLI.

Each handler takes the parsed ``argparse.Namespace`` and returns a process
exit code.  This is the only layer that catches usenest exceptions: it
renders them on stderr and maps them to ``exit_codes.error``.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from usenest import bootstrap
from usenest.engine import nest_file
from usenest.exceptions import ConfigLoadError, UseParseError
from usenest.lib import config
from usenest.lib.models import AppConfig
from usenest.lib.theme import colorize


def _error(message: str) -> int:
    sys.stderr.write(colorize(message, "error") + "\n")
    return config.get_int("exit_codes.error")


def cmd_nest(args: argparse.Namespace) -> int:
    """Nest one file's imports; print, rewrite or check depending on flags."""
    exit_ok = config.get_int("exit_codes.ok")
    exit_changed = config.get_int("exit_codes.changed")
    fmt_json = config.get_str("formats.json")

    path = Path(args.file)
    if not path.is_file():
        return _error(config.get_str("messages.file_not_found").format(filepath=path))

    try:
        app_config = AppConfig.load()
        source = path.read_text(encoding="utf-8")
        result = nest_file(source, str(path), app_config)
    except (ConfigLoadError, UseParseError) as exc:
        return _error(str(exc))
    except (OSError, UnicodeDecodeError) as exc:
        return _error(config.get_str("messages.io_error").format(filepath=path, error=exc))

    if args.format == fmt_json:
        json_indent = config.get_int("defaults.json_indent")
        sys.stdout.write(json.dumps(result.summary(), indent=json_indent) + "\n")
    elif not (args.write or args.check):
        sys.stdout.write(result.output)

    if args.check:
        if result.changed:
            msg = config.get_str("messages.would_rewrite")
            sys.stderr.write(
                colorize(msg.format(filepath=path, count=result.declaration_count), "changed")
                + "\n"
            )
            return exit_changed
        msg = config.get_str("messages.already_nested")
        sys.stderr.write(colorize(msg.format(filepath=path), "ok") + "\n")
        return exit_ok

    if args.write and result.changed:
        try:
            path.write_text(result.output, encoding="utf-8")
        except OSError as exc:
            return _error(config.get_str("messages.io_error").format(filepath=path, error=exc))
        msg = config.get_str("messages.rewrote")
        sys.stderr.write(colorize(msg.format(filepath=path), "changed") + "\n")

    return exit_ok


def cmd_show_config(args: argparse.Namespace) -> int:
    """Run the bootstrap entry point."""
    try:
        bootstrap.main()
    except ConfigLoadError as exc:
        return _error(str(exc))
    return config.get_int("exit_codes.ok")
