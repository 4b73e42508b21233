"""Tests for truncation and page framing."""

import unittest

from flathtml import __version__
from flathtml.display import (
    DEFAULT_MAX_CHARS,
    RULE,
    banner,
    footer,
    render_error,
    render_failure,
    render_location,
    render_page,
    render_pending,
    render_text,
    truncate,
)
from flathtml.exchange import HttpResponse


class TestTruncate(unittest.TestCase):
    def test_short_text_untouched(self):
        """Text within the limit is returned whole."""
        assert truncate("hello", 10) == ("hello", 0)
        assert truncate("hello", 5) == ("hello", 0)

    def test_long_text_cut(self):
        """Longer text is cut and the rest counted."""
        assert truncate("abcdefgh", 3) == ("abc", 5)

    def test_counts_characters_not_bytes(self):
        """The limit counts characters, not encoded bytes."""
        assert truncate("ééééé", 2) == ("éé", 3)

    def test_non_positive_limit_disables(self):
        """A limit of zero or less shows everything."""
        assert truncate("abc", 0) == ("abc", 0)
        assert truncate("abc", -1) == ("abc", 0)

    def test_default_limit(self):
        """The default limit applies when none is given."""
        shown, hidden = truncate("x" * (DEFAULT_MAX_CHARS + 7))
        assert len(shown) == DEFAULT_MAX_CHARS
        assert hidden == 7


class TestRender(unittest.TestCase):
    def test_render_text_adds_truncation_note(self):
        """A note follows cut text and only cut text."""
        assert render_text("abcdef", 4) == ["abcd", "", "... (truncated, 2 more characters)"]
        assert render_text("abc", 4) == ["abc"]

    def test_render_page_reports_body_bytes(self):
        """The page header reports status and body size in UTF-8 bytes."""
        response = HttpResponse(status=200, body="<p>é</p>")
        lines = render_page(response, "é", max_chars=100)
        assert lines[0] == "✅ Status: 200"
        assert lines[1] == "📦 Content Length: 9 bytes"
        assert "Page Content" in lines[3]
        assert lines[-1] == "é"

    def test_banner_is_aligned(self):
        """The banner shows the version inside a closed box."""
        lines = banner()
        assert __version__ in lines[1]
        assert len(lines[0]) == len(lines[2])

    def test_render_location_precedes_request(self):
        """The location block is the URL line and a rule."""
        assert render_location("http://example.com") == ["📍 URL: http://example.com", RULE, ""]

    def test_outcome_lines(self):
        """Host errors, failed exchanges and pending requests each get their own lines."""
        assert render_error("not found") == ["❌ Error: not found"]
        failure = render_failure("disk full")
        assert failure[0] == "❌ Request failed: disk full"
        assert "grant browser Network" in failure[-1]
        assert render_pending("http://a")[0] == "[NET] Fetching: http://a"

    def test_footer_closes_session(self):
        """The footer is a rule and the closing line."""
        lines = footer()
        assert lines[1] == RULE
        assert "session ended" in lines[-1]


if __name__ == "__main__":
    unittest.main()
