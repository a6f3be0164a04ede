"""
Transcript Range Unit Tests
Tests for core/schemas/transcript.py

Tests:
- check_ranges accepts sorted, disjoint, in-bounds ranges (touching allowed)
- check_ranges rejects the first violation with its index
- complement_ranges yields maximal gaps
- DirectionalTranscript enforces the range invariant on construction
"""
import pytest

from core.schemas.errors import ErrorCodes, InvalidRangesException, VerificationException
from core.schemas.transcript import (
    ByteRange,
    Direction,
    DirectionalTranscript,
    check_ranges,
    complement_ranges,
)


def _ranges(*pairs):
    return [ByteRange(s, e) for s, e in pairs]


def _ranges_tuple(*pairs):
    return tuple(_ranges(*pairs))


class TestCheckRanges:
    """Tests for check_ranges()."""

    @pytest.mark.parametrize("pairs,length", [
        ((), 0),
        ((), 10),
        (((0, 10),), 10),
        (((2, 4), (6, 8)), 10),
        (((2, 4), (4, 6)), 10),
    ])
    def test_valid(self, pairs, length):
        """Valid range sets pass."""
        check_ranges(_ranges(*pairs), length)

    @pytest.mark.parametrize("pairs,length,index", [
        (((3, 3),), 10, 0),
        (((4, 2),), 10, 0),
        (((-1, 2),), 10, 0),
        (((0, 11),), 10, 0),
        (((0, 4), (3, 6)), 10, 1),
        (((6, 8), (2, 4)), 10, 1),
        (((0, 2), (4, 6), (5, 7)), 10, 2),
    ])
    def test_invalid(self, pairs, length, index):
        """The first violation is reported with its index."""
        with pytest.raises(InvalidRangesException) as exc_info:
            check_ranges(_ranges(*pairs), length)

        assert exc_info.value.code == ErrorCodes.INVALID_RANGES
        assert exc_info.value.details["range_index"] == index

    def test_not_a_verification_failure(self):
        """Invalid ranges are an internal fault, not a bad proof."""
        assert not issubclass(InvalidRangesException, VerificationException)


class TestComplementRanges:
    """Tests for complement_ranges()."""

    def test_nothing_covered(self):
        """With nothing covered the whole buffer is one gap."""
        assert complement_ranges([], 5) == (ByteRange(0, 5),)

    def test_everything_covered(self):
        """A fully covered buffer has no gaps."""
        assert complement_ranges(_ranges((0, 5)), 5) == ()

    def test_empty_buffer(self):
        """A zero-length buffer has no gaps."""
        assert complement_ranges([], 0) == ()

    def test_gaps_between(self):
        """Gaps fall before, between and after covered ranges."""
        result = complement_ranges(_ranges((2, 4), (6, 8)), 10)

        assert result == _ranges_tuple((0, 2), (4, 6), (8, 10))

    def test_unsorted_touching_input(self):
        """Input order and touching ranges do not split gaps."""
        result = complement_ranges(_ranges((5, 7), (0, 2), (2, 3)), 10)

        assert result == _ranges_tuple((3, 5), (7, 10))

    def test_gaps_never_touch(self):
        """Output ranges are maximal."""
        result = complement_ranges(_ranges((1, 2), (3, 4), (5, 6)), 7)

        for a, b in zip(result, result[1:]):
            assert a.end < b.start


class TestDirectionalTranscript:
    """Tests for DirectionalTranscript."""

    def test_lengths(self):
        """Withheld and disclosed lengths add up to the buffer length."""
        t = DirectionalTranscript(Direction.SENT, b"0123456789", _ranges_tuple((2, 4), (7, 8)))

        assert len(t) == 10
        assert t.withheld_len == 3
        assert t.disclosed_len == 7

    def test_invalid_ranges_rejected(self):
        """Construction checks the range invariant."""
        with pytest.raises(InvalidRangesException):
            DirectionalTranscript(Direction.RECEIVED, b"abc", _ranges_tuple((1, 5)))

    def test_byte_range_helpers(self):
        """ByteRange length and slice."""
        rng = ByteRange(2, 5)

        assert len(rng) == 3
        assert b"abcdef"[rng.as_slice()] == b"cde"
