"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m proofview_cli check proof.json [more.json ...] [--pem-file PATH] [--ca-bundle PATH] [--json]
    python -m proofview_cli key [--pem-file PATH] [--json]

Environment Variables:
    PROOFVIEW_NOTARY_PEM        Trusted notary public key (PEM text)
    PROOFVIEW_NOTARY_PEM_FILE   Trusted notary public key file
    PROOFVIEW_CA_BUNDLE         PEM bundle of trusted root certificates
    PROOFVIEW_REDACTED_CHAR     Placeholder character for withheld bytes
    PROOFVIEW_LOG_LEVEL         Log level (default: INFO)
    PROOFVIEW_LOG_FILE          Also log to this file
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from core.config import load_config
from proofview_cli import __version__
from proofview_cli.commands import check, key
from proofview_cli.commands.check import EXIT_RUNTIME_ERROR


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="proofview",
        description="Verify notarized TLS proofs and show what the server said.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to a JSON configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- check command ---
    check_parser = subparsers.add_parser(
        "check",
        help="Verify one or more proof files",
        description="Verify each proof independently and render its disclosed transcript.",
    )
    check_parser.add_argument(
        "files",
        nargs="+",
        type=str,
        help="Proof files to verify",
    )
    check_parser.add_argument(
        "--pem-file",
        type=str,
        default=None,
        help="Trusted notary public key (PEM); overrides config",
    )
    check_parser.add_argument(
        "--ca-bundle",
        type=str,
        default=None,
        help="PEM bundle of trusted root certificates (default: certifi)",
    )
    check_parser.add_argument(
        "--redacted-char",
        type=str,
        default=None,
        help="Character shown for each withheld byte (default: X)",
    )
    check_parser.add_argument(
        "--jobs", "-j",
        type=int,
        default=1,
        help="Verify up to N files in parallel (default: 1)",
    )
    check_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON",
    )
    check_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks for runtime errors",
    )
    check_parser.set_defaults(func=check.check_cmd)

    # --- key command ---
    key_parser = subparsers.add_parser(
        "key",
        help="Validate a notary public key",
        description="Check that a PEM key is a usable P-256 notary key and print its fingerprint.",
    )
    key_parser.add_argument(
        "--pem-file",
        type=str,
        default=None,
        help="PEM file to check (default: the configured key)",
    )
    key_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="JSON output",
    )
    key_parser.set_defaults(func=key.key_cmd)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed, 70=internal fault)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except (OSError, ValueError, TypeError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.runtime_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
