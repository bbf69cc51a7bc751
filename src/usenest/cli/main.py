"""usenest CLI entry point — argument parsing and command dispatch.

Builds the argparse parser tree and dispatches each subcommand to its
handler in :mod:`usenest.cli.commands`.  Program name, description and
format names come from the central config module.

Usage::

    usenest nest src/main.rs [--write | --check] [--format text|json]
    usenest show-config
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from usenest import __version__
from usenest.cli.commands import cmd_nest, cmd_show_config
from usenest.lib import config


def build_parser() -> argparse.ArgumentParser:
    """Build the full argparse tree, one sub-parser per subcommand."""
    prog = config.get_str("cli.prog_name")
    fmt_text = config.get_str("formats.text")
    fmt_json = config.get_str("formats.json")

    parser = argparse.ArgumentParser(
        prog=prog, description=config.get_str("cli.description")
    )
    parser.add_argument(
        "--version", action="version", version=f"{prog} {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    sub_nest = subparsers.add_parser(
        "nest", help="Sort and nest the top-level use declarations of a file"
    )
    sub_nest.add_argument("file", help="Rust source file")
    mode = sub_nest.add_mutually_exclusive_group()
    mode.add_argument(
        "--write", action="store_true", help="Rewrite the file in place"
    )
    mode.add_argument(
        "--check",
        action="store_true",
        help="Exit non-zero if the file would be rewritten",
    )
    sub_nest.add_argument(
        "--format",
        choices=[fmt_text, fmt_json],
        default=fmt_text,
        help=f"Output format (default: {fmt_text})",
    )

    subparsers.add_parser(
        "show-config", help="Load the application config and print it"
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Parse arguments and dispatch to the matching command handler.

    Print help text when no subcommand is given. Handlers return an exit
    code, which becomes the process status.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    dispatch = {
        "nest": cmd_nest,
        "show-config": cmd_show_config,
    }

    handler = dispatch.get(args.command)
    if handler:
        sys.exit(handler(args))
    parser.print_help()


if __name__ == "__main__":
    main()
