"""Terminal presentation of converted pages.

Every ``render_*`` function returns the lines to print, so callers decide
where they go.
"""

from __future__ import annotations

from . import __version__

DEFAULT_MAX_CHARS = 2000

_WIDTH = 64
RULE = "━" * _WIDTH
CONTENT_RULE = " Page Content ".center(_WIDTH - 12, "━")


def truncate(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> tuple[str, int]:
    """Cut ``text`` to ``max_chars`` characters.

    Returns the part to show and the number of characters left out.
    ``max_chars <= 0`` disables truncation.
    """
    if max_chars <= 0 or len(text) <= max_chars:
        return text, 0
    return text[:max_chars], len(text) - max_chars


def banner() -> list[str]:
    title = f"🌐 flathtml browser v{__version__}".center(_WIDTH - 2)
    return [
        "╔" + "═" * (_WIDTH - 2) + "╗",
        "║" + title + "║",
        "╚" + "═" * (_WIDTH - 2) + "╝",
        "",
    ]


def render_location(url: str) -> list[str]:
    return [f"📍 URL: {url}", RULE, ""]


def render_text(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> list[str]:
    shown, hidden = truncate(text, max_chars)
    lines = [shown]
    if hidden:
        lines.extend(["", f"... (truncated, {hidden} more characters)"])
    return lines


def render_page(response, text, *, max_chars=DEFAULT_MAX_CHARS):
    """Lines for a successful response whose body converted to ``text``."""
    lines = [
        f"✅ Status: {response.status}",
        f"📦 Content Length: {len(response.body.encode('utf-8'))} bytes",
        "",
        CONTENT_RULE,
        "",
    ]
    lines.extend(render_text(text, max_chars))
    return lines


def render_error(message: str) -> list[str]:
    return [f"❌ Error: {message}"]


def render_failure(message: str) -> list[str]:
    return [
        f"❌ Request failed: {message}",
        "",
        "💡 Make sure Network permission is granted:",
        "   grant browser Network",
    ]


def render_pending(url: str) -> list[str]:
    return [f"[NET] Fetching: {url}", "[NET] Waiting for response from host..."]


def footer() -> list[str]:
    return ["", RULE, "🏁 Browser session ended."]
