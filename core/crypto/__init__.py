"""
Core cryptographic utilities.

Hashing, notary signatures and server certificate verification.
"""
from .hashing import (
    sha256,
    hash_canonical,
    to_hex,
    from_hex,
    hash_concat,
)
from .signatures import (
    SCHEME_P256,
    Signature,
    key_fingerprint,
    load_public_key_pem,
    sign,
    verify,
)
from .commitments import (
    chunk_leaf,
    handshake_commitment,
)
from .certificates import (
    CertificateVerifier,
    WebPkiVerifier,
    load_pem_bundle,
)

__all__ = [
    "sha256",
    "hash_canonical",
    "to_hex",
    "from_hex",
    "hash_concat",
    "SCHEME_P256",
    "Signature",
    "key_fingerprint",
    "load_public_key_pem",
    "sign",
    "verify",
    "chunk_leaf",
    "handshake_commitment",
    "CertificateVerifier",
    "WebPkiVerifier",
    "load_pem_bundle",
]
