"""
Redaction Segmenter

Turns a partially disclosed buffer into an ordered tiling of disclosed
and redacted segments covering [0, len(buffer)).

Redacted segments carry only the length of their range, never bytes.
Ranges are taken as given: malformed ranges raise InvalidRangesException
instead of being clamped, and touching ranges stay separate segments.
"""

from __future__ import annotations

from typing import Iterable, Sequence, Union

from core.schemas.render import DisclosedSegment, RedactedSegment, RenderSegment
from core.schemas.transcript import ByteRange, DirectionalTranscript, check_ranges


RangeLike = Union[ByteRange, tuple[int, int]]


def _as_ranges(ranges: Iterable[RangeLike]) -> list[ByteRange]:
    return [r if isinstance(r, ByteRange) else ByteRange(*r) for r in ranges]


def segment(buffer: bytes, ranges: Sequence[RangeLike]) -> tuple[RenderSegment, ...]:
    """
    Split buffer into disclosed and redacted segments.

    Args:
        buffer: Full-length transcript buffer
        ranges: Withheld ranges, sorted and disjoint

    Returns:
        Segments in buffer order; empty for an empty buffer

    Raises:
        InvalidRangesException: If ranges are unsorted, overlapping, empty
            or out of bounds

    Example:
        >>> segment(b"abcdef", [(2, 4)])
        (DisclosedSegment(data=b'ab'), RedactedSegment(length=2), DisclosedSegment(data=b'ef'))
    """
    withheld = _as_ranges(ranges)
    check_ranges(withheld, len(buffer))

    segments: list[RenderSegment] = []
    cursor = 0
    for rng in withheld:
        if rng.start > cursor:
            segments.append(DisclosedSegment(bytes(buffer[cursor:rng.start])))
        segments.append(RedactedSegment(len(rng)))
        cursor = rng.end

    if cursor < len(buffer):
        segments.append(DisclosedSegment(bytes(buffer[cursor:])))

    return tuple(segments)


def segment_transcript(transcript: DirectionalTranscript) -> tuple[RenderSegment, ...]:
    """Segment one direction of a verified transcript."""
    return segment(transcript.data, transcript.withheld)


def disclosed_bytes(segments: Iterable[RenderSegment]) -> bytes:
    """Concatenation of the disclosed segments, in order."""
    return b"".join(s.data for s in segments if isinstance(s, DisclosedSegment))


__all__ = [
    "segment",
    "segment_transcript",
    "disclosed_bytes",
]
