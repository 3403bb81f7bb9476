#!/usr/bin/env python3
"""nilflow_report/main.py — CLI entry-point.

Usage examples
--------------
    # Group and print the conflicts of a dump
    python -m nilflow_report conflicts.json --cwd /src/app

    # One JSON object per diagnostic
    python -m nilflow_report conflicts.json --output json

    # Report every conflict separately, only for files under pkg/
    python -m nilflow_report conflicts.json --no-group \\
        --include-errors-in-files pkg/

Exit codes
----------
    0   No diagnostics.
    1   One or more diagnostics were reported.
    2   Infrastructure failure (unreadable dump, bad configuration, ...).
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from nilflow_report import __version__
from nilflow_report.config import Config
from nilflow_report.dump import load_dump
from nilflow_report.engine import Diagnostic, DiagnosticEngine
from nilflow_report.errors import NilflowError

_log = logging.getLogger("nilflow_report")

EXIT_OK: int = 0
EXIT_DIAGNOSTICS: int = 1
EXIT_INFRA: int = 2


def _configure_logging(verbosity: int) -> None:
    """Set up the ``nilflow_report`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("nilflow_report")
    root.setLevel(level)
    # the package itself only installs a NullHandler
    if any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root.addHandler(handler)


def _emit(diagnostics: List[Diagnostic], fmt: str, pretty: bool, stream: TextIO) -> None:
    for diag in diagnostics:
        if fmt == "json":
            stream.write(diag.to_json_str() + "\n")
        elif fmt == "gcc":
            stream.write(diag.to_gcc_format() + "\n")
        elif pretty:
            stream.write(diag.to_pretty() + "\n\n")
        else:
            stream.write(f"{diag.position}: {diag.message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nilflow_report",
        description="Group and render potential nil panic reports.",
    )
    parser.add_argument("dump", help="Path to a conflict dump (JSON)")
    parser.add_argument(
        "--cwd", default=None,
        help="Directory report positions are relative to (default: current)",
    )
    parser.add_argument(
        "--output", choices=["text", "json", "gcc"], default="text",
        help="Output format",
    )
    parser.add_argument(
        "--no-group", dest="group", action="store_false",
        help="Report every conflict separately",
    )
    parser.add_argument(
        "--pretty", action="store_true", help="Colorize text output",
    )
    for flag in (
        "include-pkgs",
        "exclude-pkgs",
        "exclude-file-docstrings",
        "include-errors-in-files",
        "exclude-errors-in-files",
    ):
        parser.add_argument(
            f"--{flag}", default=None,
            help="Comma-separated list",
        )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> Config:
    data = {
        "group_error_messages": args.group,
        "pretty_print": args.pretty,
    }
    for key in (
        "include_pkgs",
        "exclude_pkgs",
        "exclude_file_docstrings",
        "include_errors_in_files",
        "exclude_errors_in_files",
    ):
        value = getattr(args, key)
        if value is not None:
            data[key] = value
    return Config.from_dict(data)


def main(argv: Optional[Sequence[str]] = None, stream: Optional[TextIO] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    out = stream or sys.stdout

    cwd = Path(args.cwd).resolve() if args.cwd else Path.cwd()
    try:
        config = config_from_args(args)
        dump = load_dump(args.dump, cwd=cwd)
    except NilflowError as exc:
        _log.error("%s", exc)
        return EXIT_INFRA

    engine = DiagnosticEngine(dump.program, config, cwd=cwd)
    diagnostics = engine.process(dump.conflicts)
    _emit(diagnostics, args.output, config.pretty_print, out)
    return EXIT_DIAGNOSTICS if diagnostics else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
