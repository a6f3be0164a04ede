"""
CLI Check Command

Verify proof files and render what each one discloses.

Usage:
    proofview check proof.json [more.json ...] [--pem-file PATH] [--ca-bundle PATH] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from pathlib import Path

from core.config.keys import TrustedKeyStore
from core.schemas.errors import KeyInvalidException
from core.schemas.render import OpaqueContent
from orchestrator.files import LoadedFile
from orchestrator.pipeline import DirectionView, PipelineOutcome, VerificationPipeline


logger = logging.getLogger(__name__)


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2
EXIT_INTERNAL_FAULT = 70


def print_direction(title: str, view: DirectionView, redacted_char: str) -> None:
    print(f"--- {title} ({view.length} bytes, {view.redacted_len} redacted) ---")
    print(view.text(redacted_char))


def print_outcome_human(outcome: PipelineOutcome, redacted_char: str) -> None:
    """Print one outcome in human-readable format."""
    print(f"== {outcome.name} ==")
    if not outcome.ok:
        code = outcome.error.code if outcome.error else outcome.stage.value
        print(f"✗ [{code}] {outcome.message}")
        return

    view = outcome.view
    print(f"✓ {outcome.message}")
    print(f"server: {view.server_name}")
    print(f"time: {view.notarized_at_display}")
    print(f"notary key: {view.key_fingerprint}")
    print_direction("sent", view.sent, redacted_char)
    print_direction("received", view.received, redacted_char)

    content = view.content
    if isinstance(content, OpaqueContent):
        print(f"--- content: {content.kind.value} ({len(content.data)} bytes) ---")
    else:
        print(f"--- content: {content.kind.value} ---")
        print(content.text)


def check_cmd(args: Namespace) -> int:
    """
    Execute the check command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code
    """
    config = args.runtime_config

    if args.pem_file:
        try:
            config.trust.notary_pem = Path(args.pem_file).read_text(encoding="utf-8")
        except OSError as e:
            print(f"Error reading key file: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
    if args.ca_bundle:
        config.trust.ca_bundle = args.ca_bundle

    redacted_char = args.redacted_char or config.render.redacted_char
    if len(redacted_char) != 1:
        print(f"Error: --redacted-char must be a single character, got {redacted_char!r}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    files = []
    for path in args.files:
        if not Path(path).is_file():
            print(f"Error: File not found: {path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        files.append(LoadedFile.from_path(path))

    try:
        pipeline = VerificationPipeline.from_config(config, key_store=TrustedKeyStore(config.trust.notary_pem))
    except KeyInvalidException as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    outcomes = pipeline.run_many(files, max_workers=args.jobs)

    if args.json:
        print(json.dumps(
            [o.to_dict(redacted_char) for o in outcomes],
            indent=2,
            ensure_ascii=False,
        ))
    else:
        for i, outcome in enumerate(outcomes):
            if i:
                print()
            print_outcome_human(outcome, redacted_char)

    faulted = [o for o in outcomes if o.faulted]
    for outcome in faulted:
        print(f"Internal error in {outcome.name}: {outcome.message}", file=sys.stderr)
    if faulted:
        return EXIT_INTERNAL_FAULT

    failed = [o for o in outcomes if not o.ok]
    if failed:
        logger.warning(f"{len(failed)} of {len(outcomes)} proof(s) failed verification")
        return EXIT_VERIFICATION_FAILED
    return EXIT_SUCCESS
