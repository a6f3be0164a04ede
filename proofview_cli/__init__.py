"""
Proofview CLI

Command-line interface for verifying notarized TLS proofs.

Usage:
    python -m proofview_cli check proof.json
    python -m proofview_cli key --pem-file notary.pub
"""

__version__ = "0.1.0"
