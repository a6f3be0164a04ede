"""
Notary Signatures

ECDSA over NIST P-256 with SHA-256, the scheme notaries sign session
headers with. Keys travel as SPKI PEM ("-----BEGIN PUBLIC KEY-----").
"""
from __future__ import annotations

from dataclasses import dataclass

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from core.crypto.hashing import sha256, to_hex
from core.schemas.errors import KeyInvalidException


SCHEME_P256 = "P256"


@dataclass(frozen=True)
class Signature:
    signature_hex: str
    scheme: str = SCHEME_P256


def load_public_key_pem(pem: str) -> ec.EllipticCurvePublicKey:
    """
    Parse a notary public key from SPKI PEM text.

    Raises:
        KeyInvalidException: If the text is not a PEM public key or the key
            is not on the P-256 curve.
    """
    try:
        key = serialization.load_pem_public_key(pem.strip().encode("utf-8"))
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        raise KeyInvalidException(f"Invalid notary public key: {e}") from e

    if not isinstance(key, ec.EllipticCurvePublicKey) or not isinstance(key.curve, ec.SECP256R1):
        raise KeyInvalidException(
            "Notary public key must be an EC key on curve P-256",
            details={"key_type": type(key).__name__},
        )
    return key


def key_fingerprint(public_key: ec.EllipticCurvePublicKey) -> str:
    """SHA-256 over the DER SubjectPublicKeyInfo, 0x hex."""
    der = public_key.public_bytes(
        serialization.Encoding.DER,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return to_hex(sha256(der))


def sign(payload: bytes, private_key: ec.EllipticCurvePrivateKey) -> Signature:
    """Sign payload with ECDSA-SHA256, DER-encoded."""
    der = private_key.sign(payload, ec.ECDSA(hashes.SHA256()))
    return Signature(signature_hex=to_hex(der))


def verify(payload: bytes, signature: bytes, public_key: ec.EllipticCurvePublicKey) -> bool:
    """
    Verify a DER ECDSA-SHA256 signature over payload.

    Returns False for a wrong signature as well as for bytes that are not a
    DER signature at all.
    """
    try:
        public_key.verify(signature, payload, ec.ECDSA(hashes.SHA256()))
    except (InvalidSignature, ValueError):
        return False
    return True


__all__ = [
    "SCHEME_P256",
    "Signature",
    "load_public_key_pem",
    "key_fingerprint",
    "sign",
    "verify",
]
