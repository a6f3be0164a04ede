"""
Schemas & Canonicalization
File: tests/unit/test_canonical_json.py

Purpose: Unit tests for canonical JSON serialization.
Signed headers and Merkle leaves are hashed over this encoding, so it must
be byte-for-byte deterministic across runs.
"""

import json
from datetime import datetime, timedelta, timezone
from enum import Enum

import pytest
from pydantic import BaseModel, ConfigDict

from core.schemas import (
    CanonicalizationException,
    SessionHeader,
    canonicalize_value,
    dumps_canonical,
    ensure_utc,
    format_datetime_canonical,
)


# =============================================================================
# Test Fixtures
# =============================================================================


class SampleEnum(str, Enum):
    """Sample enum for testing."""
    OPTION_A = "option_a"
    OPTION_B = "option_b"


class SampleModel(BaseModel):
    """Sample Pydantic model for testing."""
    model_config = ConfigDict(extra="forbid")

    name: str
    value: int
    optional_field: str | None = None


@pytest.fixture
def header_dict() -> dict:
    return {
        "time": 1_700_000_000,
        "sent_len": 84,
        "recv_len": 83,
        "merkle_root": "0x" + "ab" * 32,
        "handshake_commitment": "0x" + "cd" * 32,
    }


# =============================================================================
# Datetime Handling
# =============================================================================


class TestDatetime:
    """Tests for UTC normalization and formatting."""

    def test_naive_treated_as_utc(self):
        """A naive datetime is taken to be UTC."""
        dt = ensure_utc(datetime(2026, 1, 27, 21, 35, 0))

        assert dt.tzinfo == timezone.utc
        assert dt.hour == 21

    def test_aware_converted_to_utc(self):
        """An aware datetime is converted to UTC."""
        dt = datetime(2026, 1, 27, 23, 35, 0, tzinfo=timezone(timedelta(hours=2)))

        assert ensure_utc(dt).hour == 21

    def test_format_z_suffix(self):
        """Formatted datetimes end in Z."""
        dt = datetime(2026, 1, 27, 21, 35, 0, tzinfo=timezone.utc)

        assert format_datetime_canonical(dt) == "2026-01-27T21:35:00Z"

    def test_format_microseconds(self):
        """Microseconds are kept when present."""
        dt = datetime(2026, 1, 27, 21, 35, 0, 123456, tzinfo=timezone.utc)

        assert format_datetime_canonical(dt) == "2026-01-27T21:35:00.123456Z"


# =============================================================================
# Value Canonicalization
# =============================================================================


class TestCanonicalizeValue:
    """Tests for canonicalize_value()."""

    def test_enum_to_value(self):
        """Enums serialize as their value."""
        assert canonicalize_value(SampleEnum.OPTION_A) == "option_a"

    def test_bool_kept(self):
        """Booleans are not turned into ints."""
        assert canonicalize_value(True) is True

    def test_bytes_to_hex(self):
        """Bytes become 0x-prefixed lowercase hex."""
        assert canonicalize_value(b"\xab\xcd") == "0xabcd"

    def test_none_fields_dropped(self):
        """None values inside dicts are omitted."""
        assert canonicalize_value({"a": 1, "b": None}) == {"a": 1}

    def test_tuple_to_list(self):
        """Tuples serialize as lists."""
        assert canonicalize_value((1, 2)) == [1, 2]

    def test_model_dumped(self):
        """Pydantic models are dumped without None fields."""
        model = SampleModel(name="x", value=1)

        assert canonicalize_value(model) == {"name": "x", "value": 1}

    def test_float_rejected(self):
        """Floats have no canonical form."""
        with pytest.raises(CanonicalizationException) as exc_info:
            canonicalize_value({"a": [1.5]})

        assert exc_info.value.details["path"] == "a[0]"

    def test_unknown_type_rejected(self):
        """Arbitrary objects cannot be canonicalized."""
        with pytest.raises(CanonicalizationException, match="object"):
            canonicalize_value(object())


# =============================================================================
# Serialization
# =============================================================================


class TestDumpsCanonical:
    """Tests for dumps_canonical()."""

    def test_sorted_compact(self):
        """Keys are sorted and there is no whitespace."""
        assert dumps_canonical({"end": 4, "direction": "sent", "start": 0}) == (
            '{"direction":"sent","end":4,"start":0}'
        )

    def test_nested_keys_sorted(self):
        """Sorting applies at every depth."""
        assert dumps_canonical({"b": {"y": 1, "x": 2}, "a": []}) == '{"a":[],"b":{"x":2,"y":1}}'

    def test_unicode_not_escaped(self):
        """Non-ASCII text is emitted as UTF-8, not escaped."""
        assert dumps_canonical({"name": "Zoë"}) == '{"name":"Zoë"}'

    def test_insertion_order_irrelevant(self, header_dict):
        """Reordered dicts serialize identically."""
        reordered = dict(reversed(list(header_dict.items())))

        assert dumps_canonical(header_dict) == dumps_canonical(reordered)

    def test_header_model_matches_dict(self, header_dict):
        """A parsed SessionHeader serializes like the dict it came from."""
        header = SessionHeader.model_validate(header_dict)

        assert dumps_canonical(header) == dumps_canonical(header_dict)

    def test_round_trips_through_json(self, header_dict):
        """The output is valid JSON with the same content."""
        assert json.loads(dumps_canonical(header_dict)) == header_dict

    def test_deterministic(self, header_dict):
        """Repeated calls give identical strings."""
        outputs = {dumps_canonical(header_dict) for _ in range(10)}

        assert len(outputs) == 1
