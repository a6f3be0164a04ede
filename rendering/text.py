"""
Plain-text rendering of render segments.

Each disclosed segment is decoded on its own so that a multi-byte UTF-8
sequence cut by a redaction cannot merge with bytes on the other side.
"""

from __future__ import annotations

from typing import Iterable

from core.config.runtime import DEFAULT_REDACTED_CHAR
from core.schemas.render import DisclosedSegment, RenderSegment


def render_text(segments: Iterable[RenderSegment], redacted_char: str = DEFAULT_REDACTED_CHAR) -> str:
    """
    Render segments as text, each redacted byte shown as redacted_char.

    Raises:
        ValueError: If redacted_char is not a single character
    """
    if len(redacted_char) != 1:
        raise ValueError(f"redacted_char must be a single character, got {redacted_char!r}")

    parts = []
    for seg in segments:
        if isinstance(seg, DisclosedSegment):
            parts.append(seg.data.decode("utf-8", errors="replace"))
        else:
            parts.append(redacted_char * seg.length)
    return "".join(parts)
