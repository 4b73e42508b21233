"""Tests for the host request/response exchange."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from flathtml.exchange import (
    ExchangeError,
    HttpRequest,
    HttpResponse,
    NetDirectory,
    ResponsePending,
    generate_request_id,
    http_get,
    parse_response,
)


class TestParseResponse(unittest.TestCase):
    def test_all_fields(self) -> None:
        """A complete response decodes into its three fields."""
        response = parse_response('{"status":200,"body":"<p>hi</p>\\n","error":null}')
        assert response == HttpResponse(status=200, body="<p>hi</p>\n", error=None)
        assert response.ok is True

    def test_error_field(self) -> None:
        """A host error makes the response not ok."""
        response = parse_response('{"status":0,"body":"","error":"connection refused"}')
        assert response.error == "connection refused"
        assert response.ok is False

    def test_missing_fields_use_defaults(self) -> None:
        """Absent fields take their defaults."""
        assert parse_response("{}") == HttpResponse(status=0, body="", error=None)

    def test_null_body_is_empty(self) -> None:
        """A null body reads as empty text."""
        assert parse_response('{"status":204,"body":null}').body == ""

    def test_invalid_status_falls_back_to_zero(self) -> None:
        """Non-integer or out-of-range statuses become 0."""
        assert parse_response('{"status":"200"}').status == 0
        assert parse_response('{"status":70000}').status == 0
        assert parse_response('{"status":true}').status == 0

    def test_escapes_decoded(self) -> None:
        """JSON string escapes in the body are decoded."""
        content = json.dumps({"status": 200, "body": 'say "hi"\t\\ \r\n'})
        assert parse_response(content).body == 'say "hi"\t\\ \r\n'

    def test_malformed_content_raises(self) -> None:
        """Content that is not a JSON object raises ExchangeError."""
        with self.assertRaises(ExchangeError):
            parse_response("not json")
        with self.assertRaises(ExchangeError):
            parse_response("[1, 2]")


class TestHttpRequest(unittest.TestCase):
    def test_request_id_format(self) -> None:
        """Request ids are req_ followed by milliseconds."""
        request_id = generate_request_id()
        assert request_id.startswith("req_")
        assert request_id[4:].isdigit()

    def test_to_json(self) -> None:
        """A GET request serializes with empty headers and a null body."""
        request = HttpRequest("https://example.com/", id="req_1")
        assert json.loads(request.to_json()) == {
            "id": "req_1",
            "method": "GET",
            "url": "https://example.com/",
            "headers": {},
            "body": None,
        }


class TestNetDirectory(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.net_dir = NetDirectory(Path(self._tmp.name) / ".net")

    def test_take_response_without_file(self) -> None:
        """No response file means no response."""
        assert self.net_dir.take_response() is None

    def test_submit_creates_directory(self) -> None:
        """Submitting creates the directory and writes the request file."""
        path = self.net_dir.submit(HttpRequest("https://example.com/", id="req_7"))
        assert path == self.net_dir.request_file
        assert json.loads(path.read_text(encoding="utf-8"))["id"] == "req_7"

    def test_http_get_submits_and_raises_pending(self) -> None:
        """Without a response, http_get writes the request and raises ResponsePending."""
        with self.assertRaises(ResponsePending) as ctx:
            http_get("https://example.com/page", self.net_dir)
        request = ctx.exception.request
        assert request.url == "https://example.com/page"
        written = json.loads(self.net_dir.request_file.read_text(encoding="utf-8"))
        assert written["url"] == "https://example.com/page"
        assert written["id"] == request.id

    def test_http_get_consumes_waiting_response(self) -> None:
        """A waiting response is returned and both files are removed."""
        self.net_dir.path.mkdir(parents=True)
        self.net_dir.response_file.write_text('{"status":200,"body":"<b>ok</b>","error":null}', encoding="utf-8")

        response = http_get("https://example.com/", self.net_dir)

        assert response.status == 200
        assert response.body == "<b>ok</b>"
        assert not self.net_dir.response_file.exists()
        assert not self.net_dir.request_file.exists()

    def test_malformed_response_raises_after_consuming(self) -> None:
        """A bad response file is removed before the error propagates."""
        self.net_dir.path.mkdir(parents=True)
        self.net_dir.response_file.write_text("garbage", encoding="utf-8")
        with self.assertRaises(ExchangeError):
            self.net_dir.take_response()
        assert not self.net_dir.response_file.exists()

    def test_submit_into_unwritable_location_raises(self) -> None:
        """An unwritable directory raises ExchangeError instead of OSError."""
        blocker = Path(self._tmp.name) / "file"
        blocker.write_text("", encoding="utf-8")
        with self.assertRaises(ExchangeError):
            NetDirectory(blocker / ".net").submit(HttpRequest("https://example.com/"))


if __name__ == "__main__":
    unittest.main()
