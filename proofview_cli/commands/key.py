"""
CLI Key Command

Validate a notary public key and show its fingerprint.

Usage:
    proofview key [--pem-file PATH] [--json]
"""

from __future__ import annotations

import json
import sys
from argparse import Namespace
from pathlib import Path

from core.config.keys import TrustedKey
from core.schemas.errors import KeyInvalidException
from proofview_cli.commands.check import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)


def key_cmd(args: Namespace) -> int:
    """Execute the key command."""
    if args.pem_file:
        try:
            pem = Path(args.pem_file).read_text(encoding="utf-8")
        except OSError as e:
            print(f"Error reading key file: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
        source = args.pem_file
    else:
        pem = args.runtime_config.trust.notary_pem
        source = "configured"

    try:
        key = TrustedKey.from_pem(pem)
    except KeyInvalidException as e:
        if args.json:
            print(json.dumps({"ok": False, "source": source, "error": e.to_error_model().model_dump()}, indent=2))
        else:
            print(f"✗ {e.message}", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED

    if args.json:
        print(json.dumps({"ok": True, "source": source, "curve": "P-256", "fingerprint": key.fingerprint}, indent=2))
    else:
        print(f"source: {source}")
        print("curve: P-256")
        print(f"fingerprint: {key.fingerprint}")
    return EXIT_SUCCESS
