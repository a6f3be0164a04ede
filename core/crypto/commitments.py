"""
Session Commitments

Hash constructions a notary commits to in the session header:
- handshake commitment: binds the server name and certificate chain
- chunk leaves: one per committed transcript range, salted so that a
  withheld chunk cannot be recovered by guessing its content
"""
from __future__ import annotations

from typing import Sequence

from core.crypto.hashing import hash_canonical, hash_concat, sha256, to_hex
from core.schemas.transcript import Direction


def handshake_commitment(server_name: str, chain: Sequence[bytes], nonce: bytes) -> bytes:
    """
    Commit to the server identity seen during the handshake.

    Rule: sha256(canonical({"server_name", "certificate_chain": [sha256(der)...], "nonce"}))
    """
    return hash_canonical({
        "server_name": server_name,
        "certificate_chain": [to_hex(sha256(der)) for der in chain],
        "nonce": to_hex(nonce),
    })


def chunk_leaf(direction: Direction, start: int, end: int, data: bytes, salt: bytes) -> bytes:
    """
    Leaf hash for the transcript chunk [start, end) of one direction.

    Rule: sha256(canonical({"direction", "start", "end", "digest": sha256(salt + data)}))
    """
    return hash_canonical({
        "direction": direction,
        "start": start,
        "end": end,
        "digest": to_hex(hash_concat(salt, data)),
    })


__all__ = [
    "handshake_commitment",
    "chunk_leaf",
]
