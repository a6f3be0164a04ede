"""
Rendering of partially disclosed transcripts.

Segmenting by withheld ranges, classifying received content and
plain-text output.
"""

from .segmenter import disclosed_bytes, segment, segment_transcript
from .classifier import classify, decode_lossy, parse_http_response
from .text import render_text

__all__ = [
    "segment",
    "segment_transcript",
    "disclosed_bytes",
    "classify",
    "decode_lossy",
    "parse_http_response",
    "render_text",
]
