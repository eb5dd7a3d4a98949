"""Command line entry point for tl-bindgen."""

from __future__ import annotations

import argparse
import sys

from . import __version__
from .codegen.cli_integration import add_codegen_args, handle_codegen_command
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the tl-bindgen command."""
    parser = argparse.ArgumentParser(
        prog="tl-bindgen",
        description="Generate Rust serde bindings from a JSON schema description.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Console log level (default: WARNING)",
    )
    parser.add_argument("--log-file", metavar="FILE", help="Also log DEBUG output to FILE")
    add_codegen_args(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the tl-bindgen command.

    Returns:
        Exit code (0 for success, 1 for error, 2 for drift in check mode).
    """
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level, log_file=args.log_file)
    logger.debug("Arguments: %s", vars(args))

    try:
        return handle_codegen_command(args)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
