"""
Schemas & Canonicalization
File: proof.py

Purpose: Pydantic models for the notarized TLS proof document.

A proof has two parts:
- session: the notary-signed header committing to the transcript, plus the
  server identity material the header commits to
- substrings: openings of selected transcript ranges against the header's
  Merkle root

These models only enforce structure. Whether anything verifies is decided
by the verifiers package.
"""

from __future__ import annotations

import binascii
import base64
import re
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .transcript import Direction
from .versioning import SCHEMA_VERSION, assert_supported_schema_version


# Regex pattern for 0x-prefixed hex with whole bytes
HEX_BYTES_PATTERN = re.compile(r"^0x(?:[0-9a-fA-F]{2})*$")

# Regex pattern for a 32-byte hash (0x followed by 64 hex chars)
HEX_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")

# Upper bound on a declared transcript length. The verifier allocates a
# buffer of this size per direction.
MAX_TRANSCRIPT_LEN = 16 * 1024 * 1024

# Last second of year 9999, the largest time datetime can represent
MAX_SESSION_TIME = 253402300799

# A Merkle path longer than this cannot come from a tree that fits in memory
MAX_MERKLE_DEPTH = 64


def validate_hex_bytes(value: str, field_name: str) -> str:
    """Validate 0x-prefixed hex made of whole bytes; normalize to lowercase."""
    if not HEX_BYTES_PATTERN.match(value):
        shown = value[:20] + "..." if len(value) > 20 else value
        raise ValueError(
            f"{field_name} must be a 0x-prefixed hex string of whole bytes, got: {shown}"
        )
    return value.lower()


def validate_hex_hash(value: str, field_name: str) -> str:
    """Validate that a value is a 32-byte hex hash with 0x prefix."""
    if not HEX_HASH_PATTERN.match(value):
        shown = value[:20] + "..." if len(value) > 20 else value
        raise ValueError(
            f"{field_name} must be a 32-byte hex string with 0x prefix "
            f"(64 hex chars), got: {shown}"
        )
    return value.lower()


# =============================================================================
# Session
# =============================================================================


class SessionHeader(BaseModel):
    """
    The header signed by the notary.

    It is a succinct commitment to the whole session: when it happened,
    how long each direction was, which handshake (server identity) it
    belongs to and the Merkle root of the committed transcript chunks.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    time: int = Field(
        ...,
        ge=0,
        le=MAX_SESSION_TIME,
        description="Notarization time in seconds since the Unix epoch",
    )
    sent_len: int = Field(..., ge=0, le=MAX_TRANSCRIPT_LEN)
    recv_len: int = Field(..., ge=0, le=MAX_TRANSCRIPT_LEN)
    merkle_root: str = Field(
        ...,
        description="Root of the transcript commitment tree",
    )
    handshake_commitment: str = Field(
        ...,
        description="Hash binding the server name and certificate chain",
    )

    @field_validator("merkle_root", "handshake_commitment")
    @classmethod
    def validate_hashes(cls, v: str, info) -> str:
        return validate_hex_hash(v, info.field_name)

    def length_of(self, direction: Direction) -> int:
        """Declared transcript length for one direction."""
        if direction == Direction.SENT:
            return self.sent_len
        return self.recv_len

    @property
    def notarized_at(self) -> datetime:
        """Notarization time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.time, tz=timezone.utc)


class NotarySignature(BaseModel):
    """Notary signature over the canonical encoding of a SessionHeader."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    scheme: Literal["P256"] = Field(default="P256")
    signature_hex: str = Field(..., description="DER-encoded ECDSA signature")

    @field_validator("signature_hex")
    @classmethod
    def validate_signature_hex(cls, v: str) -> str:
        return validate_hex_bytes(v, "signature_hex")

    @property
    def signature_bytes(self) -> bytes:
        return bytes.fromhex(self.signature_hex[2:])


class SessionInfo(BaseModel):
    """
    Server identity material committed to by the header.

    The certificate chain is the one the server presented during the TLS
    handshake, leaf first.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    server_name: str = Field(..., min_length=1, max_length=253)
    certificate_chain: list[str] = Field(
        ...,
        min_length=1,
        description="Base64 DER certificates, leaf first",
    )
    handshake_nonce: str = Field(..., description="Notary-chosen handshake nonce")

    @field_validator("certificate_chain")
    @classmethod
    def validate_chain(cls, v: list[str]) -> list[str]:
        for i, cert in enumerate(v):
            try:
                base64.b64decode(cert, validate=True)
            except (binascii.Error, ValueError) as e:
                raise ValueError(f"certificate_chain[{i}] is not valid base64: {e}") from e
        return v

    @field_validator("handshake_nonce")
    @classmethod
    def validate_nonce(cls, v: str) -> str:
        return validate_hex_bytes(v, "handshake_nonce")

    def chain_der(self) -> list[bytes]:
        """Decoded DER certificates, leaf first."""
        return [base64.b64decode(cert, validate=True) for cert in self.certificate_chain]


class SessionProof(BaseModel):
    """Proof of the session: signed header plus the identity it binds."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    header: SessionHeader
    signature: Optional[NotarySignature] = Field(
        default=None,
        description="Notary signature; a proof without one never verifies",
    )
    session_info: SessionInfo


# =============================================================================
# Substrings
# =============================================================================


class InclusionProof(BaseModel):
    """Merkle inclusion path of one transcript leaf, siblings bottom-up."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    index: int = Field(..., ge=0)
    siblings: list[str] = Field(default_factory=list, max_length=MAX_MERKLE_DEPTH)

    @field_validator("siblings")
    @classmethod
    def validate_siblings(cls, v: list[str]) -> list[str]:
        return [validate_hex_hash(s, f"siblings[{i}]") for i, s in enumerate(v)]

    def sibling_bytes(self) -> list[bytes]:
        return [bytes.fromhex(s[2:]) for s in self.siblings]


class SubstringOpening(BaseModel):
    """
    Opening of one committed transcript chunk.

    The chunk's leaf is recomputed from these fields and must be included
    under the header's Merkle root.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    direction: Direction
    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)
    data: str = Field(..., description="Disclosed bytes as 0x hex")
    salt: str = Field(..., description="Blinding salt as 0x hex")
    proof: InclusionProof

    @field_validator("data", "salt")
    @classmethod
    def validate_hex_fields(cls, v: str, info) -> str:
        return validate_hex_bytes(v, info.field_name)

    @property
    def data_bytes(self) -> bytes:
        return bytes.fromhex(self.data[2:])

    @property
    def salt_bytes(self) -> bytes:
        return bytes.fromhex(self.salt[2:])


class SubstringsProof(BaseModel):
    """Selective disclosure of transcript ranges."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    openings: list[SubstringOpening] = Field(default_factory=list)


# =============================================================================
# Document
# =============================================================================


class TlsProof(BaseModel):
    """A complete proof document as loaded from an artifact."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    version: str = Field(default=SCHEMA_VERSION)
    session: SessionProof
    substrings: SubstringsProof

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        assert_supported_schema_version(v)
        return v
