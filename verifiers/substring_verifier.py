"""
Substring Verifier

Opens a substrings proof against the Merkle root of a verified session
header and rebuilds both directional transcripts.

Every disclosed chunk must lie inside its direction's declared length,
carry exactly end - start bytes and be included under the signed root.
Whatever no opening covers is withheld. The withheld ranges are built here
as the complement of the disclosed ranges, which makes them sorted,
disjoint and maximal.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from core.crypto.commitments import chunk_leaf
from core.crypto.hashing import from_hex
from core.merkle.merkle_tree import MerkleProof, verify_merkle_proof
from core.schemas.errors import SubstringMismatchException
from core.schemas.proof import SubstringOpening, SubstringsProof
from core.schemas.transcript import (
    ByteRange,
    Direction,
    DirectionalTranscript,
    complement_ranges,
)

from verifiers.session_verifier import VerifiedSession


logger = logging.getLogger(__name__)


class TranscriptPair(NamedTuple):
    """Both directions of a verified session."""
    sent: DirectionalTranscript
    received: DirectionalTranscript


class SubstringVerifier:
    """Checks substring openings against a verified session header."""

    def verify(self, substrings: SubstringsProof, session: VerifiedSession) -> TranscriptPair:
        """
        Verify substring openings and build the transcripts.

        Args:
            substrings: Parsed, unverified substrings proof
            session: Output of SessionVerifier.verify()

        Returns:
            (sent, received) transcripts with withheld ranges

        Raises:
            SubstringMismatchException: If any opening is inconsistent with
                the session header
        """
        if not isinstance(session, VerifiedSession):
            raise TypeError(f"Expected VerifiedSession, got {type(session).__name__}")

        header = session.header
        root = from_hex(header.merkle_root)

        buffers = {d: bytearray(header.length_of(d)) for d in Direction}
        disclosed: dict[Direction, list[tuple[ByteRange, int]]] = {d: [] for d in Direction}

        for i, opening in enumerate(substrings.openings):
            rng = self._check_opening(i, opening, header.length_of(opening.direction), root)
            buffers[opening.direction][rng.as_slice()] = opening.data_bytes
            disclosed[opening.direction].append((rng, i))

        for direction, entries in disclosed.items():
            self._check_disjoint(direction, entries)

        transcripts = {
            d: DirectionalTranscript(
                direction=d,
                data=bytes(buffers[d]),
                withheld=complement_ranges((rng for rng, _ in disclosed[d]), len(buffers[d])),
            )
            for d in Direction
        }

        logger.debug(
            f"Substrings verified: {len(substrings.openings)} opening(s), "
            f"sent {transcripts[Direction.SENT].disclosed_len}/{header.sent_len} bytes, "
            f"received {transcripts[Direction.RECEIVED].disclosed_len}/{header.recv_len} bytes disclosed"
        )
        return TranscriptPair(sent=transcripts[Direction.SENT], received=transcripts[Direction.RECEIVED])

    @staticmethod
    def _check_opening(index: int, opening: SubstringOpening, length: int, root: bytes) -> ByteRange:
        name = f"Opening {index} ({opening.direction.value} [{opening.start}, {opening.end}))"

        if not (opening.start < opening.end <= length):
            raise SubstringMismatchException(
                f"{name} is outside the {length}-byte {opening.direction.value} transcript",
                opening_index=index,
            )

        data = opening.data_bytes
        if len(data) != opening.end - opening.start:
            raise SubstringMismatchException(
                f"{name} carries {len(data)} bytes for a {opening.end - opening.start}-byte range",
                opening_index=index,
            )

        leaf = chunk_leaf(opening.direction, opening.start, opening.end, data, opening.salt_bytes)
        proof = MerkleProof(
            leaf=leaf,
            index=opening.proof.index,
            siblings=opening.proof.sibling_bytes(),
            root=root,
        )
        if not verify_merkle_proof(proof):
            raise SubstringMismatchException(
                f"{name} does not open against the session's commitment root",
                opening_index=index,
            )

        return ByteRange(opening.start, opening.end)

    @staticmethod
    def _check_disjoint(direction: Direction, entries: list[tuple[ByteRange, int]]) -> None:
        ordered = sorted(entries)
        for (prev, _), (rng, index) in zip(ordered, ordered[1:]):
            if rng.start < prev.end:
                raise SubstringMismatchException(
                    f"Opening {index} ({direction.value} [{rng.start}, {rng.end})) "
                    f"overlaps another opening [{prev.start}, {prev.end})",
                    opening_index=index,
                )


__all__ = [
    "TranscriptPair",
    "SubstringVerifier",
]
