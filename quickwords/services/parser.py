"""Turn raw model output into candidate words.

Both functions here are total: malformed input degrades to a shorter (possibly
empty) result and never raises.
"""

from __future__ import annotations

import re
from typing import Any

_CONTENT_MARKER = 'content: "'
_WHITESPACE = re.compile(r"\s+")


def extract_payload(raw_text: Any) -> str:
    """Return the human-readable part of a model response.

    Some bindings hand back a description of the whole response object, e.g.
    ``Response(content: "a, b, c", ...)``. When that marker is present the
    quoted text is used, otherwise the entire string.
    """

    if raw_text is None:
        return ""
    text = raw_text if isinstance(raw_text, str) else str(raw_text)

    start = text.find(_CONTENT_MARKER)
    if start == -1:
        return text

    start += len(_CONTENT_MARKER)
    end = text.find('"', start)
    if end == -1:
        return text[start:]
    return text[start:end]


def parse_words(raw_text: Any) -> list[str]:
    """Split a response into trimmed, non-empty candidates, in order.

    Comma-separated output is split on commas; anything else on whitespace.
    """

    payload = extract_payload(raw_text)
    if "," in payload:
        pieces = payload.split(",")
    else:
        pieces = _WHITESPACE.split(payload)
    return [piece.strip() for piece in pieces if piece.strip()]
