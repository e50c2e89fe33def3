"""
dashlint command line.

Usage:
    dashlint lint dashboards/ [--strict] [--verbose] [--config FILE]
    dashlint list-rules
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from dashlint.config.settings import get_settings
from dashlint.logging import LOG_FORMATS, LOG_LEVELS, configure_logging


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(prog="dashlint", description="Grafana dashboard linter")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=settings.log_level,
        help="Log level for diagnostic output (default: %(default)s)",
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=settings.log_format,
        help="Diagnostic log format (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command")

    lint_parser = subparsers.add_parser("lint", help="Lint dashboard JSON files")
    lint_parser.add_argument("paths", nargs="+", help="Dashboard files or directories")
    lint_parser.add_argument(
        "--strict",
        action="store_true",
        default=settings.strict,
        help="Fail on warnings as well as errors",
    )
    lint_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=settings.verbose,
        help="Show passing results",
    )
    lint_parser.add_argument(
        "--config",
        help=f"Lint configuration file (default: {settings.config_filename} next to each dashboard)",
    )

    subparsers.add_parser("list-rules", help="List available lint rules")

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(args.log_level, args.log_format)
    except ValueError as e:
        # Defaults from the environment bypass argparse choices
        parser.error(str(e))

    if args.command == "lint":
        from dashlint.cli.lint import lint_command

        sys.exit(
            lint_command(
                args.paths,
                strict=args.strict,
                verbose=args.verbose,
                config=args.config,
            )
        )

    if args.command == "list-rules":
        from dashlint.cli.rules import list_rules_command

        sys.exit(list_rules_command())

    parser.print_help()
    sys.exit(0)


if __name__ == "__main__":
    main()
