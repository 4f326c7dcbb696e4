"""vconfig CLI entry points.

This module exposes inspection commands for stored config files.
It maps argparse commands onto the peek and payload readers.
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import VConfigSettings
from core.constants import SUPPORTED_LOG_LEVELS
from core.errors import VConfigError
from core.logging_config import configure_logging
from store.atomic_io import read_stored_text
from store.record_payload import parse_stored_text
from store.version_peek import peek_version


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="vconfig", description="Versioned config inspector")
    parser.add_argument(
        "--log-level",
        choices=SUPPORTED_LOG_LEVELS,
        help="Override VCONFIG_LOG_LEVEL for this command",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_version_command(subparsers)
    _add_show_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the vconfig CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = _build_settings(args.log_level)
        configure_logging(args.log_level)
        if args.command == "version":
            return _run_version_command(args)
        if args.command == "show":
            return _run_show_command(settings, args)
    except VConfigError as error:
        print(f"vconfig: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_settings(log_level: str | None) -> VConfigSettings:
    """Build settings with an optional log-level override."""
    settings = VConfigSettings.from_env()
    if log_level:
        settings = replace(settings, log_level=log_level)
    return settings


def _add_version_command(subparsers: Any) -> None:
    """Register version subcommand."""
    parser = subparsers.add_parser("version", help="Print the stored Version value")
    parser.add_argument("path", help="Config file path")


def _add_show_command(subparsers: Any) -> None:
    """Register show subcommand."""
    parser = subparsers.add_parser("show", help="Print the stored record as normalized JSON")
    parser.add_argument("path", help="Config file path")


def _run_version_command(args: argparse.Namespace) -> int:
    print(peek_version(Path(args.path)))
    return 0


def _run_show_command(settings: VConfigSettings, args: argparse.Namespace) -> int:
    source = Path(args.path)
    payload = parse_stored_text(read_stored_text(source), str(source))
    indent = settings.json_indent if settings.json_indent > 0 else None
    print(json.dumps(payload, indent=indent, ensure_ascii=False))
    return 0
