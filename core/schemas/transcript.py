"""
Schemas & Canonicalization
File: transcript.py

Purpose: Directional transcripts and their withheld byte ranges.

A transcript buffer is only partially known: positions inside a withheld
range hold filler, never real content. The range invariant (sorted,
disjoint, each 0 <= start < end <= len) is checked here once and shared
by every producer and consumer of ranges.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from .errors import InvalidRangesException


class Direction(str, Enum):
    """Direction of a transcript relative to the client."""

    SENT = "sent"
    RECEIVED = "received"


@dataclass(frozen=True, order=True)
class ByteRange:
    """Half-open byte range [start, end)."""

    start: int
    end: int

    def __len__(self) -> int:
        return max(self.end - self.start, 0)

    def as_slice(self) -> slice:
        return slice(self.start, self.end)


def check_ranges(ranges: Sequence[ByteRange], length: int) -> None:
    """
    Validate a withheld range set against a buffer length.

    Ranges must be sorted ascending, mutually disjoint and each satisfy
    0 <= start < end <= length. Touching ranges (a.end == b.start) are
    allowed and kept distinct.

    Raises:
        InvalidRangesException: On the first violation found.
    """
    previous_end = 0
    for i, rng in enumerate(ranges):
        if rng.start < 0 or rng.start >= rng.end:
            raise InvalidRangesException(
                f"Range {i} [{rng.start}, {rng.end}) is empty or negative",
                range_index=i,
            )
        if rng.end > length:
            raise InvalidRangesException(
                f"Range {i} [{rng.start}, {rng.end}) exceeds buffer length {length}",
                range_index=i,
                details={"length": length},
            )
        if rng.start < previous_end:
            raise InvalidRangesException(
                f"Range {i} [{rng.start}, {rng.end}) overlaps or precedes the previous range",
                range_index=i,
            )
        previous_end = rng.end


def complement_ranges(covered: Iterable[ByteRange], length: int) -> tuple[ByteRange, ...]:
    """
    Return the maximal runs of [0, length) not covered by any input range.

    Input ranges may be unsorted and may touch; they must lie within
    [0, length). The result is sorted and no two ranges touch.
    """
    gaps: list[ByteRange] = []
    cursor = 0
    for rng in sorted(covered):
        if rng.start > cursor:
            gaps.append(ByteRange(cursor, rng.start))
        cursor = max(cursor, rng.end)
    if cursor < length:
        gaps.append(ByteRange(cursor, length))
    return tuple(gaps)


@dataclass(frozen=True)
class DirectionalTranscript:
    """
    One direction of a verified session transcript.

    Attributes:
        direction: Which side sent these bytes
        data: Full-length buffer; withheld positions are filler
        withheld: Sorted, disjoint ranges the discloser did not reveal
    """

    direction: Direction
    data: bytes
    withheld: tuple[ByteRange, ...] = ()

    def __post_init__(self) -> None:
        check_ranges(self.withheld, len(self.data))

    def __len__(self) -> int:
        return len(self.data)

    @property
    def withheld_len(self) -> int:
        return sum(len(r) for r in self.withheld)

    @property
    def disclosed_len(self) -> int:
        return len(self.data) - self.withheld_len
