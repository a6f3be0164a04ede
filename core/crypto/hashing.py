"""
Hashing Utilities

SHA-256 primitives behind every commitment in a proof:
- sha256 over raw bytes
- hash_canonical over the canonical JSON of a record
- 0x-prefixed hex, the encoding of every hash in a proof document

Inputs are hashed exactly as given; nothing here normalizes bytes.
"""
from __future__ import annotations

import hashlib
from typing import Any

from core.schemas.canonical import dumps_canonical


def sha256(data: bytes) -> bytes:
    """
    SHA-256 digest of data.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_canonical(obj: Any) -> bytes:
    """
    sha256 over the UTF-8 canonical JSON of obj.

    Two records with the same content hash alike whatever their key order.

    Raises:
        CanonicalizationException: If obj has no canonical form
    """
    return sha256(dumps_canonical(obj).encode("utf-8"))


def to_hex(data: bytes) -> str:
    """
    Example:
        >>> to_hex(b"\\xde\\xad")
        '0xdead'
    """
    return "0x" + data.hex()


def from_hex(value: str) -> bytes:
    """
    Decode 0x-prefixed hex.

    Raises:
        ValueError: Without the 0x prefix, on an odd digit count or on a
            non-hex digit
    """
    if not value.startswith("0x"):
        raise ValueError(f"Hex value must start with '0x', got: {value[:10]}...")

    digits = value[2:]
    if len(digits) % 2:
        raise ValueError(f"Hex value must have an even length after 0x, got {len(digits)} digits")

    try:
        return bytes.fromhex(digits)
    except ValueError as e:
        raise ValueError(f"Invalid hex digits: {e}") from e


def hash_concat(left: bytes, right: bytes) -> bytes:
    """sha256(left + right): Merkle parents and salted chunk digests."""
    return sha256(left + right)


__all__ = [
    "sha256",
    "hash_canonical",
    "to_hex",
    "from_hex",
    "hash_concat",
]
