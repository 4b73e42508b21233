"""Host-mediated page fetching.

The browser never opens a socket. It writes ``request.json`` into the net
directory and exits; the host performs the request, writes
``response.json`` and runs the browser again, which then consumes the
response::

    {"id": "req_1700000000000", "method": "GET", "url": "...", "headers": {}, "body": null}
    {"status": 200, "body": "<html>...", "error": null}
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_NET_DIR = "/.net"
REQUEST_FILENAME = "request.json"
RESPONSE_FILENAME = "response.json"


class ExchangeError(Exception):
    """The request could not be submitted or the response could not be read."""


class ResponsePending(ExchangeError):
    """A request was submitted; the host has not answered yet."""

    def __init__(self, request):
        super().__init__(f"waiting for host response to {request.id} ({request.url})")
        self.request = request


def generate_request_id() -> str:
    return f"req_{time.time_ns() // 1_000_000}"


@dataclass(frozen=True, slots=True)
class HttpRequest:
    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    id: str = field(default_factory=generate_request_id)

    def to_json(self) -> str:
        return json.dumps(
            {
                "id": self.id,
                "method": self.method,
                "url": self.url,
                "headers": self.headers,
                "body": self.body,
            },
            separators=(",", ":"),
        )


@dataclass(frozen=True, slots=True)
class HttpResponse:
    status: int = 0
    body: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _status_field(value: object) -> int:
    # bool is an int subclass; "true" is not a status
    if isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 0xFFFF:
        return value
    return 0


def _text_field(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return str(value)


def parse_response(content: str) -> HttpResponse:
    """Decode the fields of a host response.

    Missing fields fall back to defaults: status 0, empty body, no error.

    Raises:
        ExchangeError: if the content is not a JSON object
    """
    try:
        data = json.loads(content)
    except ValueError as exc:
        raise ExchangeError(f"malformed response: {exc}") from exc
    if not isinstance(data, dict):
        raise ExchangeError(f"malformed response: expected an object, got {type(data).__name__}")

    return HttpResponse(
        status=_status_field(data.get("status")),
        body=_text_field(data.get("body")) or "",
        error=_text_field(data.get("error")),
    )


class NetDirectory:
    """The directory shared with the host."""

    __slots__ = ("path",)

    def __init__(self, path=DEFAULT_NET_DIR):
        self.path = Path(path)

    def __repr__(self):
        return f"NetDirectory({str(self.path)!r})"

    @property
    def request_file(self) -> Path:
        return self.path / REQUEST_FILENAME

    @property
    def response_file(self) -> Path:
        return self.path / RESPONSE_FILENAME

    def submit(self, request: HttpRequest) -> Path:
        try:
            self.path.mkdir(parents=True, exist_ok=True)
            self.request_file.write_text(request.to_json(), encoding="utf-8")
        except OSError as exc:
            raise ExchangeError(f"cannot write request to {self.request_file}: {exc}") from exc
        return self.request_file

    def take_response(self) -> HttpResponse | None:
        """Read and remove a waiting response; None if the host has not written one."""
        path = self.response_file
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise ExchangeError(f"cannot read response from {path}: {exc}") from exc

        # A stale response must not be shown twice.
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise ExchangeError(f"cannot remove consumed response {path}: {exc}") from exc
        return parse_response(content)


def http_get(url: str, net_dir: NetDirectory | None = None) -> HttpResponse:
    """Return the host's response for ``url``, or submit a request for it.

    Raises:
        ResponsePending: a request was written; exit and wait to be re-run
        ExchangeError: the net directory could not be used
    """
    net_dir = net_dir or NetDirectory()
    response = net_dir.take_response()
    if response is not None:
        return response

    request = HttpRequest(url)
    net_dir.submit(request)
    raise ResponsePending(request)
