#!/usr/bin/env python3
"""
Unified CLI for digit normalization.

Usage:
    dprep normalize <path>               # Print the debug trace per image
    dprep normalize <path> --json        # JSON report per image
    dprep normalize <path> --blur        # Apply the optional Gaussian blur
    dprep normalize <path> --no-center   # Skip center-of-mass alignment
    dprep normalize <path> --artifact-dir out/  # Save every intermediate step
"""

import argparse
import logging
import sys

from logging_utils import configure_logging, add_logging_args
from cli.normalize import add_normalize_subparser

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dprep",
        description="Digit preprocessor - normalize drawings into 28x28 classifier input",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    add_normalize_subparser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)

    if args.command is None:
        parser.print_help()
        return 1

    cmd = getattr(args, "_cmd", None)
    if cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())
