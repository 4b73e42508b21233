"""Character entity decoding.

Supports a small table of named entities (``&amp;``, ``&nbsp;`` ...) and
numeric references (``&#65;``, ``&#x41;``). Anything else, including numeric
references that do not name a Unicode scalar value, is left as written.
"""

from __future__ import annotations

import re
from types import MappingProxyType

# Keys include the delimiters; lookup is case-sensitive.
NAMED_ENTITIES = MappingProxyType(
    {
        "&nbsp;": " ",
        "&lt;": "<",
        "&gt;": ">",
        "&amp;": "&",
        "&quot;": '"',
        "&apos;": "'",
        "&copy;": "©",
        "&reg;": "®",
        "&trade;": "™",
        "&mdash;": "—",
        "&ndash;": "–",
        "&hellip;": "…",
        "&bull;": "•",
    }
)

_HEX_REFERENCE = re.compile(r"&#x([0-9A-Fa-f]+);", re.ASCII)
_DECIMAL_REFERENCE = re.compile(r"&#([0-9]+);", re.ASCII)


def decode_numeric_entity(text: str, is_hex: bool = False) -> str | None:
    """Decode the digits of a numeric character reference like &#60; or &#x3C;.

    Args:
        text: The numeric part (without &# or ;)
        is_hex: Whether this is hexadecimal (&#x) or decimal (&#)

    Returns:
        The decoded character, or None if the digits do not name a scalar value
    """
    try:
        codepoint = int(text, 16 if is_hex else 10)
    except ValueError:
        # Also raised for decimal strings past the int conversion digit limit
        return None

    if codepoint > 0x10FFFF or 0xD800 <= codepoint <= 0xDFFF:
        return None
    return chr(codepoint)


def find_entity(text: str, start: int) -> str | None:
    """Return the candidate entity starting at the ``&`` at ``start``.

    The candidate runs through the next ``;`` however far away it is. Returns
    None when no ``;`` follows, in which case the ``&`` is plain text.
    """
    end = text.find(";", start + 1)
    if end == -1:
        return None
    return text[start : end + 1]


def decode_entity(candidate: str) -> str:
    """Decode a candidate from ``find_entity``; unknown candidates come back unchanged."""
    named = NAMED_ENTITIES.get(candidate)
    if named is not None:
        return named

    match = _HEX_REFERENCE.fullmatch(candidate)
    if match:
        decoded = decode_numeric_entity(match.group(1), is_hex=True)
    else:
        match = _DECIMAL_REFERENCE.fullmatch(candidate)
        decoded = decode_numeric_entity(match.group(1)) if match else None

    return candidate if decoded is None else decoded
