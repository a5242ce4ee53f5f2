#!/usr/bin/env python3
"""Command-line front end: ``sasscmd compile ...`` and ``sasscmd version``."""

from __future__ import annotations

import argparse
import json
import sys

from sasscmd.config import settings
from sasscmd.constants import (
    KEY_ERROR_LINE,
    KEY_ERROR_MESSAGE,
    KEY_ERROR_STATUS,
    KEY_OUTPUT_STRING,
    VERB_VERSION,
)
from sasscmd.host import CommandHost
from sasscmd.lifecycle import UnloadFlags, sass_package
from sasscmd.observability.logging import configure_logging

EXIT_OK = 0
EXIT_COMPILE_FAILED = 1
EXIT_USAGE = 2


class Colors:
    RED = "\033[0;31m"
    NC = "\033[0m"  # No Color


def print_error(message: str) -> None:
    color = Colors.RED if sys.stderr.isatty() else ""
    reset = Colors.NC if color else ""
    print(f"{color}✗ {message}{reset}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sasscmd",
        description=(
            "Compile SASS/SCSS with libsass. Examples: "
            "sasscmd compile -type file -options 'output_style compressed' "
            "style.scss; sasscmd version"
        ),
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the whole command result (including any source map) as JSON",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help=f"Logging level (default: {settings.log_level})",
    )
    parser.add_argument("verb", help="compile or version")
    parser.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="?-type data|file? ?-options {key value ...}? ?--? source",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging((args.log_level or settings.log_level).upper(), json_output=False)

    host = CommandHost(safe=settings.safe_host)
    sass_package.init(host)
    try:
        outcome = host.eval(settings.command_name, args.verb, *args.args)
    finally:
        sass_package.unload(host, UnloadFlags.DETACH_FROM_INTERPRETER)

    if not outcome.ok:
        print_error(outcome.error or "command failed")
        return EXIT_USAGE

    if args.json:
        print(json.dumps(outcome.result, indent=2))
    elif args.verb == VERB_VERSION:
        print(" ".join(outcome.result))

    if args.verb == VERB_VERSION:
        return EXIT_OK

    result = outcome.result
    if result[KEY_ERROR_STATUS] != 0:
        if not args.json:
            location = ""
            if KEY_ERROR_LINE in result:
                location = f" (line {result[KEY_ERROR_LINE]})"
            print_error(f"{result[KEY_ERROR_MESSAGE].strip()}{location}")
        return EXIT_COMPILE_FAILED

    if not args.json:
        sys.stdout.write(result[KEY_OUTPUT_STRING])
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
