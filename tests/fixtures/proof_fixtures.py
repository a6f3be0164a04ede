"""
Proof artifact fixtures.

Builds notarized proof documents the way a notary and a discloser would:
every chunk of both transcripts is committed as a Merkle leaf, the header
is signed, and openings are produced for the disclosed ranges only.
"""

import base64
import json
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from core.crypto.commitments import chunk_leaf, handshake_commitment
from core.crypto.hashing import sha256, to_hex
from core.crypto.signatures import sign
from core.merkle.merkle_tree import build_merkle_proof, build_merkle_root
from core.schemas.canonical import dumps_canonical
from core.schemas.transcript import ByteRange, Direction, complement_ranges

from .pki_fixtures import SESSION_TIME, Pki


SENT_REQUEST = (
    b"GET /api/account HTTP/1.1\r\n"
    b"Host: example.com\r\n"
    b"Authorization: Bearer s3cr3t-t0k3n\r\n"
    b"\r\n"
)

RECEIVED_JSON = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Type: application/json\r\n"
    b"\r\n"
    b'{"user":"alice","balance":12345}'
)

RECEIVED_HTML = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Type: text/html; charset=utf-8\r\n"
    b"\r\n"
    b"<html><body>hello</body></html>"
)

HANDSHAKE_NONCE = bytes(range(16))


def range_of(data: bytes, needle: bytes) -> tuple[int, int]:
    """[start, end) of the first occurrence of needle in data."""
    start = data.index(needle)
    return start, start + len(needle)


def make_salt(direction: Direction, start: int) -> bytes:
    return sha256(f"salt:{direction.value}:{start}".encode())[:16]


@dataclass
class BuiltProof:
    """A proof document plus what went into it."""
    document: dict[str, Any]
    sent: bytes
    received: bytes
    withheld_sent: tuple[ByteRange, ...] = ()
    withheld_received: tuple[ByteRange, ...] = ()
    leaves: list[bytes] = field(default_factory=list)

    def to_bytes(self) -> bytes:
        return json.dumps(self.document).encode("utf-8")


def _chunks(length: int, withheld: Sequence[tuple[int, int]]) -> tuple[list[ByteRange], list[ByteRange]]:
    redacted = [ByteRange(s, e) for s, e in withheld]
    disclosed = list(complement_ranges(redacted, length))
    return disclosed, redacted


def make_proof(
    pki: Pki,
    notary_key,
    *,
    sent: bytes = SENT_REQUEST,
    received: bytes = RECEIVED_JSON,
    withhold_sent: Sequence[tuple[int, int]] = (),
    withhold_received: Sequence[tuple[int, int]] = (),
    time: int = SESSION_TIME,
    server_name: Optional[str] = None,
    signed: bool = True,
    nonce: bytes = HANDSHAKE_NONCE,
) -> BuiltProof:
    """
    Build a signed proof for the given transcripts.

    Args:
        pki: Certificate hierarchy whose leaf the server presented
        notary_key: Private key the notary signs the header with
        withhold_sent / withhold_received: Ranges the discloser keeps private
        server_name: Claimed server name (defaults to the certificate's)
        signed: Omit the signature when False
    """
    server_name = server_name or pki.server_name
    chain = pki.chain_der

    committed: list[tuple[Direction, ByteRange, bool]] = []
    for direction, data, withheld in (
        (Direction.SENT, sent, withhold_sent),
        (Direction.RECEIVED, received, withhold_received),
    ):
        disclosed, redacted = _chunks(len(data), withheld)
        committed += [(direction, r, True) for r in disclosed]
        committed += [(direction, r, False) for r in redacted]

    def data_of(direction: Direction) -> bytes:
        return sent if direction == Direction.SENT else received

    leaves = [
        chunk_leaf(d, r.start, r.end, data_of(d)[r.as_slice()], make_salt(d, r.start))
        for d, r, _ in committed
    ]
    root = build_merkle_root(leaves)

    openings = []
    for index, (d, r, is_disclosed) in enumerate(committed):
        if not is_disclosed:
            continue
        proof = build_merkle_proof(leaves, index)
        openings.append({
            "direction": d.value,
            "start": r.start,
            "end": r.end,
            "data": to_hex(data_of(d)[r.as_slice()]),
            "salt": to_hex(make_salt(d, r.start)),
            "proof": {"index": index, "siblings": [to_hex(s) for s in proof.siblings]},
        })

    header = {
        "time": time,
        "sent_len": len(sent),
        "recv_len": len(received),
        "merkle_root": to_hex(root),
        "handshake_commitment": to_hex(handshake_commitment(server_name, chain, nonce)),
    }
    signature = None
    if signed:
        signature = {
            "scheme": "P256",
            "signature_hex": sign(dumps_canonical(header).encode("utf-8"), notary_key).signature_hex,
        }

    document = {
        "version": "v1",
        "session": {
            "header": header,
            "signature": signature,
            "session_info": {
                "server_name": server_name,
                "certificate_chain": [base64.b64encode(der).decode("ascii") for der in chain],
                "handshake_nonce": to_hex(nonce),
            },
        },
        "substrings": {"openings": openings},
    }
    return BuiltProof(
        document=document,
        sent=sent,
        received=received,
        withheld_sent=tuple(ByteRange(s, e) for s, e in withhold_sent),
        withheld_received=tuple(ByteRange(s, e) for s, e in withhold_received),
        leaves=leaves,
    )
