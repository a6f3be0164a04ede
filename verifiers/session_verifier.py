"""
Session Verifier

Checks a session proof against the trusted notary key and a certificate
trust store:

1. the notary signature over the canonical header verifies under the key
2. the session info is the one the header's handshake commitment binds
3. the certificate chain proves the server name at the notarization time

Only a successful run produces a VerifiedSession, and nothing else can.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from core.config.keys import TrustedKey
from core.crypto.certificates import CertificateVerifier, WebPkiVerifier
from core.crypto.commitments import handshake_commitment
from core.crypto.hashing import from_hex, to_hex
from core.crypto.signatures import verify as verify_signature
from core.schemas.canonical import dumps_canonical
from core.schemas.errors import IdentityInvalidException, SignatureInvalidException
from core.schemas.proof import SessionHeader, SessionProof


logger = logging.getLogger(__name__)

_SEAL = object()


@dataclass(frozen=True)
class VerifiedSession:
    """
    A session whose header signature and server identity checked out.

    Construct only through SessionVerifier.verify().
    """
    header: SessionHeader
    server_name: str
    key_fingerprint: str
    _seal: object = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self._seal is not _SEAL:
            raise TypeError("VerifiedSession can only be produced by SessionVerifier.verify()")

    @property
    def time(self) -> int:
        return self.header.time

    @property
    def notarized_at(self) -> datetime:
        return self.header.notarized_at


class SessionVerifier:
    """Verifies session proofs; deterministic and side-effect free."""

    def __init__(self, cert_verifier: Optional[CertificateVerifier] = None):
        """
        Args:
            cert_verifier: Trust store used for server certificates
                (defaults to WebPKI rules over the certifi roots)
        """
        self.cert_verifier = cert_verifier or WebPkiVerifier()

    def verify(self, session: SessionProof, key: TrustedKey) -> VerifiedSession:
        """
        Verify a session proof.

        Args:
            session: Parsed, unverified session proof
            key: Snapshot of the trusted notary key

        Returns:
            VerifiedSession exposing the validated time and server name

        Raises:
            SignatureInvalidException: If the header is unsigned or the
                signature does not verify under key
            IdentityInvalidException: If the session info or certificate
                chain does not prove the server identity
        """
        self._check_signature(session, key)
        self._check_handshake(session)

        info = session.session_info
        logger.debug(f"Validating {len(info.certificate_chain)} certificate(s) for {info.server_name}")
        self.cert_verifier.verify(
            info.server_name,
            info.chain_der(),
            session.header.notarized_at,
        )

        logger.debug(f"Session verified for {info.server_name} at {session.header.time}")
        return VerifiedSession(
            header=session.header,
            server_name=info.server_name,
            key_fingerprint=key.fingerprint,
            _seal=_SEAL,
        )

    @staticmethod
    def _check_signature(session: SessionProof, key: TrustedKey) -> None:
        if session.signature is None:
            raise SignatureInvalidException("session proof is missing notary signature")

        payload = dumps_canonical(session.header).encode("utf-8")
        if not verify_signature(payload, session.signature.signature_bytes, key.public_key):
            raise SignatureInvalidException(
                "Notary signature does not verify under the trusted key",
                details={"key_fingerprint": key.fingerprint},
            )

    @staticmethod
    def _check_handshake(session: SessionProof) -> None:
        info = session.session_info
        expected = to_hex(handshake_commitment(
            info.server_name,
            info.chain_der(),
            from_hex(info.handshake_nonce),
        ))
        if expected != session.header.handshake_commitment:
            raise IdentityInvalidException(
                "Session info does not match the handshake commitment in the signed header",
                server_name=info.server_name,
            )


__all__ = [
    "VerifiedSession",
    "SessionVerifier",
]
