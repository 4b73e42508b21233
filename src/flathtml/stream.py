"""Markup to plain text conversion driver."""

from __future__ import annotations

import re

from .constants import WHITESPACE_CHARS
from .entities import decode_entity, find_entity
from .scanner import ScanStep, emit_entity, initial_state, step

_NEWLINE_RUN = re.compile(r"\n{2,}")


def collapse_newlines(text: str) -> str:
    """Trim the text and merge each run of consecutive newlines into one."""
    return _NEWLINE_RUN.sub("\n", text.strip(WHITESPACE_CHARS))


class TextStream:
    """Incremental converter: ``feed()`` markup in chunks, then ``close()``.

    Chunk boundaries do not affect the result. An ``&`` whose ``;`` has not
    arrived yet is held back, together with everything after it, until a
    later chunk settles whether it starts an entity. Held text is scanned
    once, when a chunk containing ``;`` arrives or on ``close()``.
    """

    __slots__ = ("_closed", "_held", "_out", "_state", "_text", "debug")

    def __init__(self, debug=False):
        self.debug = bool(debug)
        self._state = initial_state()
        self._out = []
        self._held = []
        self._closed = False
        self._text = ""

    @property
    def state(self) -> ScanStep:
        return self._state

    def feed(self, chunk: str) -> None:
        if self._closed:
            raise RuntimeError("TextStream.feed() called after close()")
        if not chunk:
            return
        if self._held:
            if ";" not in chunk:
                self._held.append(chunk)
                return
            chunk = "".join(self._held) + chunk
            self._held.clear()
        self._scan(chunk, final=False)

    def close(self) -> str:
        if not self._closed:
            held = "".join(self._held)
            self._held.clear()
            self._scan(held, final=True)
            self._closed = True
            self._text = collapse_newlines("".join(self._out))
            self._out.clear()
            if self.debug and self._state.in_tag:
                self._debug(f"Dropped unterminated tag <{self._state.tag_name}")
        return self._text

    def _scan(self, text: str, final: bool) -> None:
        state = self._state
        out = self._out
        debug = self.debug
        length = len(text)
        # Once one '&' finds no ';', none after it can either.
        no_entity_from = length
        i = 0
        while i < length:
            char = text[i]
            if char == "&" and state.accepts_entity and i < no_entity_from:
                candidate = find_entity(text, i)
                if candidate is not None:
                    decoded = decode_entity(candidate)
                    if debug:
                        self._debug(f"Entity: {candidate!r} -> {decoded!r}")
                    state, emitted = emit_entity(state, decoded)
                    out.append(emitted)
                    i += len(candidate)
                    continue
                if not final:
                    self._held.append(text[i:])
                    break
                no_entity_from = i
            if debug and char == ">" and state.in_tag:
                self._debug(f"Tag: <{state.tag_name}>")
            state, emitted = step(state, char)
            if emitted:
                out.append(emitted)
            i += 1
        self._state = state

    def _debug(self, message, indent=4):
        print(f"{' ' * indent}{message}")


def html_to_text(markup: str, *, debug: bool = False) -> str:
    """Convert markup to plain text for terminal display.

    Tags are stripped, script and style bodies dropped, entities decoded and
    whitespace collapsed; block tags and ``<br>`` become line breaks. Never
    raises for any input.
    """
    stream = TextStream(debug=debug)
    stream.feed(markup or "")
    return stream.close()
