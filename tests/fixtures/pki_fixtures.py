"""
PKI fixtures: notary keys and a throwaway certificate hierarchy.

Everything is generated with cryptography at test time; nothing here is
trusted outside the tests.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID


# 2023-11-14T22:13:20Z, inside the default certificate validity window
SESSION_TIME = 1_700_000_000

CERT_NOT_BEFORE = datetime(2023, 1, 1, tzinfo=timezone.utc)
CERT_NOT_AFTER = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_notary_key() -> ec.EllipticCurvePrivateKey:
    """Generate a P-256 notary signing key."""
    return ec.generate_private_key(ec.SECP256R1())


def public_pem(private_key) -> str:
    """SPKI PEM text of a private key's public half."""
    return private_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


@dataclass
class Pki:
    """A root CA and one server certificate it issued."""
    root_key: ec.EllipticCurvePrivateKey
    root_cert: x509.Certificate
    leaf_key: ec.EllipticCurvePrivateKey
    leaf_cert: x509.Certificate
    server_name: str

    @property
    def chain_der(self) -> list[bytes]:
        """Chain as a server presents it: leaf only, the root is the anchor."""
        return [self.leaf_cert.public_bytes(serialization.Encoding.DER)]

    @property
    def root_pem(self) -> bytes:
        return self.root_cert.public_bytes(serialization.Encoding.PEM)


def _key_usage(*, cert_sign: bool) -> x509.KeyUsage:
    return x509.KeyUsage(
        digital_signature=True,
        content_commitment=False,
        key_encipherment=False,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=cert_sign,
        crl_sign=cert_sign,
        encipher_only=False,
        decipher_only=False,
    )


def make_root_ca(
    common_name: str = "Proofview Test Root",
    not_before: datetime = CERT_NOT_BEFORE,
    not_after: datetime = CERT_NOT_AFTER,
) -> tuple[ec.EllipticCurvePrivateKey, x509.Certificate]:
    """Self-signed root certificate."""
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .add_extension(_key_usage(cert_sign=True), critical=True)
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_public_key(key.public_key()),
            critical=False,
        )
        .sign(key, hashes.SHA256())
    )
    return key, cert


def make_leaf_cert(
    issuer_key: ec.EllipticCurvePrivateKey,
    issuer_cert: x509.Certificate,
    server_name: str,
    not_before: datetime = CERT_NOT_BEFORE,
    not_after: datetime = CERT_NOT_AFTER,
) -> tuple[ec.EllipticCurvePrivateKey, x509.Certificate]:
    """Server certificate for server_name issued by issuer_cert."""
    key = ec.generate_private_key(ec.SECP256R1())
    issuer_ski = issuer_cert.extensions.get_extension_for_class(x509.SubjectKeyIdentifier).value
    cert = (
        x509.CertificateBuilder()
        .subject_name(x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, server_name)]))
        .issuer_name(issuer_cert.subject)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(_key_usage(cert_sign=False), critical=True)
        .add_extension(x509.ExtendedKeyUsage([ExtendedKeyUsageOID.SERVER_AUTH]), critical=False)
        .add_extension(x509.SubjectAlternativeName([x509.DNSName(server_name)]), critical=False)
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(key.public_key()), critical=False)
        .add_extension(
            x509.AuthorityKeyIdentifier.from_issuer_subject_key_identifier(issuer_ski),
            critical=False,
        )
        .sign(issuer_key, hashes.SHA256())
    )
    return key, cert


def make_pki(server_name: str = "example.com", root_name: Optional[str] = None) -> Pki:
    """Root CA plus a leaf certificate for server_name."""
    root_key, root_cert = make_root_ca(root_name or "Proofview Test Root")
    leaf_key, leaf_cert = make_leaf_cert(root_key, root_cert, server_name)
    return Pki(
        root_key=root_key,
        root_cert=root_cert,
        leaf_key=leaf_key,
        leaf_cert=leaf_cert,
        server_name=server_name,
    )
