"""
Server Certificate Verification

Validates the certificate chain a server presented during the notarized
TLS handshake against a root store, using WebPKI server-certificate rules
for the claimed server name.

Validation happens at the session's notarization time rather than the
current time: a proof stays valid after the server's certificate expires.
"""
from __future__ import annotations

import ipaddress
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol, Sequence

import certifi
from cryptography import x509
from cryptography.x509.verification import PolicyBuilder, Store, VerificationError

from core.schemas.errors import IdentityInvalidException


logger = logging.getLogger(__name__)


class CertificateVerifier(Protocol):
    """Checks that a chain proves a server name at a point in time."""

    def verify(self, server_name: str, chain: Sequence[bytes], at: datetime) -> None:
        """
        Args:
            server_name: DNS name or IP address the client connected to
            chain: DER certificates, leaf first
            at: Time at which the chain must be valid

        Raises:
            IdentityInvalidException: If the chain does not prove server_name
        """
        ...


def load_pem_bundle(path: str | Path) -> list[x509.Certificate]:
    """Load every certificate from a PEM bundle file."""
    data = Path(path).read_bytes()
    return x509.load_pem_x509_certificates(data)


def _subject_for(server_name: str) -> x509.GeneralName:
    try:
        return x509.IPAddress(ipaddress.ip_address(server_name))
    except ValueError:
        return x509.DNSName(server_name)


class WebPkiVerifier:
    """
    Certificate verifier backed by a fixed set of trust anchors.

    By default the anchors are the Mozilla roots shipped with certifi,
    loaded once on first use.
    """

    def __init__(
        self,
        roots: Optional[Sequence[x509.Certificate]] = None,
        ca_bundle: Optional[str | Path] = None,
    ):
        """
        Args:
            roots: Trust anchors to use as-is
            ca_bundle: PEM bundle to load anchors from when roots is not given
        """
        self._roots: Optional[list[x509.Certificate]] = list(roots) if roots is not None else None
        self._ca_bundle = ca_bundle

    @property
    def roots(self) -> list[x509.Certificate]:
        if self._roots is None:
            bundle = self._ca_bundle or certifi.where()
            self._roots = load_pem_bundle(bundle)
            logger.debug(f"Loaded {len(self._roots)} trust anchors from {bundle}")
        return self._roots

    def verify(self, server_name: str, chain: Sequence[bytes], at: datetime) -> None:
        if not chain:
            raise IdentityInvalidException(
                "Server presented no certificates",
                server_name=server_name,
            )

        try:
            certs = [x509.load_der_x509_certificate(der) for der in chain]
        except ValueError as e:
            raise IdentityInvalidException(
                f"Malformed certificate in chain: {e}",
                server_name=server_name,
            ) from e

        try:
            subject = _subject_for(server_name)
            verifier = (
                PolicyBuilder()
                .store(Store(self.roots))
                .time(at)
                .build_server_verifier(subject)
            )
            verifier.verify(certs[0], certs[1:])
        except VerificationError as e:
            raise IdentityInvalidException(
                f"Certificate chain is not trusted for {server_name}: {e}",
                server_name=server_name,
            ) from e
        except ValueError as e:
            raise IdentityInvalidException(
                f"Cannot validate certificate chain for {server_name!r}: {e}",
                server_name=server_name,
            ) from e


__all__ = [
    "CertificateVerifier",
    "WebPkiVerifier",
    "load_pem_bundle",
]
