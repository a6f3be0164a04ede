"""
Test fixtures package for proofview tests.

This package provides factory functions for creating test objects.
Organized into layers:
- pki_fixtures.py: Notary keys and a throwaway certificate hierarchy
- proof_fixtures.py: Signed proof artifacts built from transcripts

Usage:
    from fixtures import make_pki, make_notary_key, make_proof

    def test_something():
        pki = make_pki("example.com")
        built = make_proof(pki, make_notary_key(), withhold_received=[(10, 20)])
"""

from .pki_fixtures import (
    CERT_NOT_AFTER,
    CERT_NOT_BEFORE,
    SESSION_TIME,
    Pki,
    make_leaf_cert,
    make_notary_key,
    make_pki,
    make_root_ca,
    public_pem,
)

from .proof_fixtures import (
    HANDSHAKE_NONCE,
    RECEIVED_HTML,
    RECEIVED_JSON,
    SENT_REQUEST,
    BuiltProof,
    make_proof,
    make_salt,
    range_of,
)

__all__ = [
    # PKI
    "CERT_NOT_AFTER",
    "CERT_NOT_BEFORE",
    "SESSION_TIME",
    "Pki",
    "make_leaf_cert",
    "make_notary_key",
    "make_pki",
    "make_root_ca",
    "public_pem",
    # Proofs
    "HANDSHAKE_NONCE",
    "RECEIVED_HTML",
    "RECEIVED_JSON",
    "SENT_REQUEST",
    "BuiltProof",
    "make_proof",
    "make_salt",
    "range_of",
]
