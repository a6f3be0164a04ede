"""
Content Classifier

Decides what the disclosed part of a received transcript is: an HTTP
response with an HTML body, one with a JSON body, or opaque bytes.

Never raises. Anything that does not parse as an HTTP response is opaque,
and byte-to-text conversion replaces invalid UTF-8 instead of failing.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import h11

from core.schemas.errors import DecodeError
from core.schemas.render import (
    ClassifiedContent,
    HtmlContent,
    OpaqueContent,
    StructuredContent,
)


logger = logging.getLogger(__name__)

HTML_TYPE = "text/html"
JSON_TYPE = "application/json"

# Request the parser pretends to have sent; h11 only accepts a response
# after a request.
_PROBE_REQUEST = h11.Request(method="GET", target="/", headers=[("Host", "proofview")])


def decode_lossy(data: bytes) -> tuple[str, Optional[DecodeError]]:
    """
    Decode UTF-8, substituting U+FFFD for invalid sequences.

    Returns:
        (text, None) for valid UTF-8, otherwise the replaced text and a
        DecodeError locating the first invalid byte
    """
    try:
        return data.decode("utf-8"), None
    except UnicodeDecodeError as e:
        error = DecodeError(
            message=f"Invalid UTF-8 at byte {e.start}: {e.reason}",
            offset=e.start,
        )
        return data.decode("utf-8", errors="replace"), error


def parse_http_response(buffer: bytes) -> Optional[tuple[h11.Response, bytes]]:
    """
    Parse buffer as a single HTTP/1.x response.

    The buffer is treated as everything the server sent before closing.
    A body cut short (e.g. by a redaction at the end) is returned as far
    as it goes.

    Returns:
        (response head, body) or None if there is no parseable status
        line and header block
    """
    conn = h11.Connection(our_role=h11.CLIENT)
    conn.send(_PROBE_REQUEST)
    conn.send(h11.EndOfMessage())
    conn.receive_data(buffer)
    conn.receive_data(b"")

    response: Optional[h11.Response] = None
    body: list[bytes] = []
    try:
        while True:
            event = conn.next_event()
            if isinstance(event, h11.Response):
                response = event
            elif isinstance(event, h11.Data):
                body.append(bytes(event.data))
            elif isinstance(event, (h11.EndOfMessage, h11.ConnectionClosed)):
                break
            elif event is h11.NEED_DATA or event is h11.PAUSED:
                break
    except h11.ProtocolError as e:
        if response is None:
            logger.debug(f"Not an HTTP response: {e}")
            return None
        logger.debug(f"HTTP body incomplete, using {sum(map(len, body))} bytes: {e}")

    if response is None:
        return None
    return response, b"".join(body)


def _content_type(response: h11.Response) -> str:
    for name, value in response.headers:
        if name.lower() == b"content-type":
            return value.decode("latin-1").lower()
    return ""


def classify(buffer: bytes) -> ClassifiedContent:
    """
    Classify disclosed received bytes.

    Example:
        >>> classify(b'HTTP/1.1 200 OK\\r\\nContent-Type: application/json\\r\\n\\r\\n{"a":1}').text
        '{\\n  "a": 1\\n}'
    """
    parsed = parse_http_response(buffer)
    if parsed is None:
        return OpaqueContent(data=bytes(buffer))

    response, body = parsed
    content_type = _content_type(response)

    if HTML_TYPE in content_type:
        text, error = decode_lossy(body)
        return HtmlContent(text=text, decode_error=error)

    if JSON_TYPE in content_type:
        text, error = decode_lossy(body)
        try:
            pretty = json.dumps(json.loads(text), indent=2, ensure_ascii=False)
            # \ud800-style escapes decode to lone surrogates with no UTF-8 form
            pretty.encode("utf-8")
        except (ValueError, RecursionError) as e:
            logger.debug(f"JSON body does not parse, keeping original text: {e}")
            return StructuredContent(text=text, pretty=False, decode_error=error)
        return StructuredContent(text=pretty, pretty=True, decode_error=error)

    logger.debug(f"Unrecognized content type {content_type!r}, keeping body opaque")
    return OpaqueContent(data=body)


__all__ = [
    "HTML_TYPE",
    "JSON_TYPE",
    "decode_lossy",
    "parse_http_response",
    "classify",
]
