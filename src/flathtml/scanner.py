"""Scanner state machine.

The scanner is written as a reducer: ``step(state, char)`` returns the next
state together with the text to append for that character. States are
immutable, so every transition can be exercised on its own and nothing
survives between conversions unless the caller keeps the state around.

Entity lookahead (finding the closing ``;``) needs the input rather than a
single character, so the driver in ``stream.py`` performs it and reports the
result through ``emit_entity``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from .constants import RAW_BODY_TOGGLES, TAG_BREAKS, WHITESPACE, Break


class ScanState(Enum):
    TEXT = "text"
    INSIDE_TAG = "inside-tag"
    INSIDE_SCRIPT_BODY = "inside-script-body"
    INSIDE_STYLE_BODY = "inside-style-body"


@dataclass(frozen=True, slots=True)
class ScanStep:
    """Everything the scanner knows between two characters.

    ``output_empty`` and ``ends_with_newline`` summarize the output produced
    so far; they are the only facts about it that the rules consult.
    """

    in_tag: bool = False
    tag_name: str = ""
    # Open raw bodies ("script", "style"); text is dropped while any is open.
    raw_bodies: frozenset[str] = frozenset()
    last_was_space: bool = False
    output_empty: bool = True
    ends_with_newline: bool = False

    @property
    def scan_state(self) -> ScanState:
        if self.in_tag:
            return ScanState.INSIDE_TAG
        if "script" in self.raw_bodies:
            return ScanState.INSIDE_SCRIPT_BODY
        if "style" in self.raw_bodies:
            return ScanState.INSIDE_STYLE_BODY
        return ScanState.TEXT

    @property
    def accepts_entity(self) -> bool:
        return not self.in_tag and not self.raw_bodies


def initial_state() -> ScanStep:
    return ScanStep()


def is_space(char: str) -> bool:
    """True for a single Unicode White_Space character."""
    return char in WHITESPACE


def _append(state: ScanStep, text: str, *, last_was_space: bool, **changes: object) -> tuple[ScanStep, str]:
    if text:
        changes["output_empty"] = False
        changes["ends_with_newline"] = text.endswith("\n")
    return replace(state, last_was_space=last_was_space, **changes), text


def step(state: ScanStep, char: str) -> tuple[ScanStep, str]:
    """Consume one character; return the new state and the text it produces."""
    if char == "<":
        return replace(state, in_tag=True, tag_name=""), ""

    if state.in_tag:
        if char == ">":
            return close_tag(state)
        return replace(state, tag_name=state.tag_name + char), ""

    if state.raw_bodies:
        return state, ""

    return normalize_char(state, char)


def close_tag(state: ScanStep) -> tuple[ScanStep, str]:
    """Apply the effects of the buffered tag name and leave the tag."""
    tag = state.tag_name.lower()

    text = ""
    last_was_space = state.last_was_space
    kind = TAG_BREAKS.get(tag)
    if kind is not None:
        if kind is Break.FORCE or not state.ends_with_newline:
            text = "\n"
        last_was_space = True

    # Independent of the break above; malformed input may trigger both.
    raw_bodies = state.raw_bodies
    toggle = RAW_BODY_TOGGLES.get(tag)
    if toggle is not None:
        body, opens = toggle
        raw_bodies = raw_bodies | {body} if opens else raw_bodies - {body}

    return _append(
        state,
        text,
        last_was_space=last_was_space,
        in_tag=False,
        tag_name="",
        raw_bodies=raw_bodies,
    )


def normalize_char(state: ScanStep, char: str) -> tuple[ScanStep, str]:
    """Whitespace normalization for a text character outside any tag or raw body."""
    if is_space(char):
        if state.last_was_space or state.output_empty:
            return state, ""
        return _append(state, " ", last_was_space=True)
    return _append(state, char, last_was_space=False)


def emit_entity(state: ScanStep, decoded: str) -> tuple[ScanStep, str]:
    """Append decoded entity text; the flag follows its last character."""
    return _append(state, decoded, last_was_space=is_space(decoded[-1:]))
