"""
Proof Verifiers

Artifact parsing, session verification and substring verification.
"""

from .artifact_parser import parse_artifact
from .session_verifier import SessionVerifier, VerifiedSession
from .substring_verifier import SubstringVerifier, TranscriptPair

__all__ = [
    "parse_artifact",
    "SessionVerifier",
    "VerifiedSession",
    "SubstringVerifier",
    "TranscriptPair",
]
