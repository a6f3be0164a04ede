"""
Schemas & Canonicalization
File: render.py

Purpose: Renderable views of a partially disclosed transcript.

RenderSegment: one tile of a transcript buffer, either disclosed bytes or
the length of a withheld run. A redacted segment never carries bytes.

ClassifiedContent: what the disclosed part of a received transcript
turned out to be (HTML, structured data or opaque bytes).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union

from .errors import DecodeError


# =============================================================================
# Render Segments
# =============================================================================


class SegmentKind(str, Enum):
    DISCLOSED = "disclosed"
    REDACTED = "redacted"


@dataclass(frozen=True)
class DisclosedSegment:
    """Bytes revealed by the discloser, exactly as committed."""

    kind: ClassVar[SegmentKind] = SegmentKind.DISCLOSED

    data: bytes

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class RedactedSegment:
    """A withheld run; only its length is known."""

    kind: ClassVar[SegmentKind] = SegmentKind.REDACTED

    length: int

    def __len__(self) -> int:
        return self.length


RenderSegment = Union[DisclosedSegment, RedactedSegment]


# =============================================================================
# Classified Content
# =============================================================================


class ContentKind(str, Enum):
    HTML = "html"
    STRUCTURED = "structured"
    OPAQUE = "opaque"


@dataclass(frozen=True)
class HtmlContent:
    """An HTML response body, decoded best-effort as UTF-8."""

    kind: ClassVar[ContentKind] = ContentKind.HTML

    text: str
    decode_error: Optional[DecodeError] = None


@dataclass(frozen=True)
class StructuredContent:
    """
    A JSON response body.

    `text` is pretty-printed when the body parsed, otherwise the body text
    unchanged (`pretty` tells which).
    """

    kind: ClassVar[ContentKind] = ContentKind.STRUCTURED

    text: str
    pretty: bool = True
    decode_error: Optional[DecodeError] = None


@dataclass(frozen=True)
class OpaqueContent:
    """Anything else, kept as raw bytes."""

    kind: ClassVar[ContentKind] = ContentKind.OPAQUE

    data: bytes


ClassifiedContent = Union[HtmlContent, StructuredContent, OpaqueContent]
