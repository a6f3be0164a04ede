"""
Schemas & Canonicalization
File: canonical.py

Purpose: The one byte encoding that signatures and commitments are computed
over. A notary signs dumps_canonical(header); leaves and the handshake
commitment hash dumps_canonical(record). A verifier reproduces those bytes
exactly or nothing verifies.

Encoding: JSON, keys sorted at every depth, "," and ":" separators, UTF-8
text left unescaped, None-valued fields omitted, bytes as 0x hex.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to a naive datetime, convert an aware one."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime_canonical(dt: datetime) -> str:
    """
    Render a datetime as ISO-8601 UTC ending in "Z".

    Whole seconds print without a fraction, e.g. "2023-11-14T22:13:20Z".
    """
    when = ensure_utc(dt)
    if when.microsecond:
        return when.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
    return when.strftime("%Y-%m-%dT%H:%M:%SZ")


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Reduce value to plain JSON types ready for canonical serialization.

    Args:
        value: Header, commitment record or any nesting of supported types
        path: Location inside the top-level value, used in error details

    Raises:
        CanonicalizationException: On floats (a committed value is never
            fractional) and on types with no encoding.
    """
    # bool before int, Enum before str: both are subclasses
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (int, str)):
        return value
    if isinstance(value, bytes):
        return "0x" + value.hex()

    if isinstance(value, float):
        raise CanonicalizationException(
            message=f"Float values have no canonical form: {value}",
            details={"path": path, "value": repr(value)},
        )

    if isinstance(value, BaseModel):
        return canonicalize_value(value.model_dump(mode="json", exclude_none=True), path)

    if isinstance(value, dict):
        return {
            key: canonicalize_value(item, f"{path}.{key}" if path else key)
            for key, item in value.items()
            if item is not None
        }

    if isinstance(value, (list, tuple)):
        return [canonicalize_value(item, f"{path}[{i}]") for i, item in enumerate(value)]

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize obj to its canonical JSON text.

    Raises:
        CanonicalizationException: If obj has no canonical form

    Example:
        >>> dumps_canonical({"end": 4, "direction": "sent", "start": 0})
        '{"direction":"sent","end":4,"start":0}'
    """
    plain = canonicalize_value(obj)
    try:
        return json.dumps(
            plain,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as e:
        raise CanonicalizationException(
            message=f"Canonical JSON encoding failed: {e}",
            details={"type": type(obj).__name__},
        ) from e
