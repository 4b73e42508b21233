"""Command line entry point: a terminal browser and a local converter."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .display import (
    DEFAULT_MAX_CHARS,
    banner,
    footer,
    render_error,
    render_failure,
    render_location,
    render_page,
    render_pending,
    render_text,
)
from .exchange import DEFAULT_NET_DIR, ExchangeError, NetDirectory, ResponsePending, http_get
from .stream import TextStream, html_to_text

DEFAULT_URL = "https://httpbin.org/html"
NET_DIR_ENV = "FLATHTML_NET_DIR"


class BrowserOpts:
    __slots__ = ("debug", "max_chars", "net_dir", "url")

    def __init__(self, url=DEFAULT_URL, net_dir=DEFAULT_NET_DIR, max_chars=DEFAULT_MAX_CHARS, debug=False):
        self.url = url
        self.net_dir = net_dir
        self.max_chars = int(max_chars)
        self.debug = bool(debug)

    def __repr__(self):
        return f"BrowserOpts(url={self.url!r}, net_dir={self.net_dir!r}, max_chars={self.max_chars})"


def _emit(lines):
    for line in lines:
        print(line)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flathtml",
        description="Render markup as plain text in the terminal.",
    )
    parser.add_argument(
        "url",
        nargs="?",
        default=DEFAULT_URL,
        help=f"Page to fetch through the host exchange (default: {DEFAULT_URL})",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("-f", "--file", type=Path, help="Convert a local markup file instead of fetching")
    source.add_argument("--stdin", action="store_true", help="Convert markup read from stdin instead of fetching")
    parser.add_argument(
        "--net-dir",
        default=os.environ.get(NET_DIR_ENV, DEFAULT_NET_DIR),
        help=f"Directory shared with the host (default: ${NET_DIR_ENV} or {DEFAULT_NET_DIR})",
    )
    parser.add_argument(
        "-n",
        "--max-chars",
        type=int,
        default=None,
        help=f"Truncate output after N characters; 0 disables (default: {DEFAULT_MAX_CHARS} when browsing, "
        "no limit for local input)",
    )
    parser.add_argument("--debug", action="store_true", help="Trace tag and entity handling")
    return parser


def browse(opts: BrowserOpts) -> int:
    _emit(banner())
    _emit(render_location(opts.url))

    try:
        response = http_get(opts.url, NetDirectory(opts.net_dir))
    except ResponsePending:
        _emit(render_pending(opts.url))
        return 0
    except ExchangeError as exc:
        _emit(render_failure(str(exc)))
        _emit(footer())
        return 1

    if not response.ok:
        _emit(render_error(response.error))
        return 0

    text = html_to_text(response.body, debug=opts.debug)
    _emit(render_page(response, text, max_chars=opts.max_chars))
    _emit(footer())
    return 0


def convert_local(args) -> int:
    stream = TextStream(debug=args.debug)
    if args.stdin:
        for line in sys.stdin:
            stream.feed(line)
    else:
        try:
            stream.feed(args.file.read_text(encoding="utf-8", errors="replace"))
        except OSError as exc:
            print(f"flathtml: cannot read {args.file}: {exc}", file=sys.stderr)
            return 1

    _emit(render_text(stream.close(), args.max_chars or 0))
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.file is not None or args.stdin:
        return convert_local(args)

    max_chars = DEFAULT_MAX_CHARS if args.max_chars is None else args.max_chars
    opts = BrowserOpts(url=args.url, net_dir=args.net_dir, max_chars=max_chars, debug=args.debug)
    return browse(opts)
