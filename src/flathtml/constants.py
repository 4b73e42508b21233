"""Tag tables consulted when a tag closes.

Keys are the complete lower-cased text between ``<`` and ``>``; attributes are
not parsed, so ``<p class="x">`` matches nothing.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType


class Break(Enum):
    FORCE = "force"  # always emit a newline
    BLOCK = "block"  # emit a newline unless the output already ends with one


_BLOCK_ELEMENTS = ("p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li", "tr")

_breaks: dict[str, Break] = {"br": Break.FORCE, "br/": Break.FORCE, "br /": Break.FORCE}
for _name in _BLOCK_ELEMENTS:
    _breaks[_name] = Break.BLOCK
    _breaks["/" + _name] = Break.BLOCK

TAG_BREAKS = MappingProxyType(_breaks)

BLOCK_TAGS = frozenset(name for name, kind in _breaks.items() if kind is Break.BLOCK)

# tag text -> (body name, opens)
RAW_BODY_TOGGLES = MappingProxyType(
    {
        "script": ("script", True),
        "/script": ("script", False),
        "style": ("style", True),
        "/style": ("style", False),
    }
)

del _name

# Unicode White_Space. str.isspace() also accepts U+001C..U+001F, which are not.
WHITESPACE_CHARS = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000"
)
WHITESPACE = frozenset(WHITESPACE_CHARS)
