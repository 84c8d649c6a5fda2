#!/usr/bin/env python3
"""
serve_cards.py — HTTP server for the national dish cards.

Loads countries.csv, pre-renders every card layout, then serves:

    /           home page (also the fallback for unknown paths)
    /content    pre-rendered card grid for the client's screen width
    /sources    data sources page
    /static/*   stylesheets, scripts and images

Usage:
    python3 serve_cards.py                     # http://localhost:8083
    python3 serve_cards.py --port 9000
    python3 serve_cards.py --ordering diagonal
"""
from __future__ import annotations

import argparse
import logging
import mimetypes
import sys
from dataclasses import dataclass, replace
from functools import partial
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import parse_qs, unquote, urlparse

import card_database as db
from card_layout import ORDERINGS
from page_cache import PageCache, cache_key, prebuild
from render_pages import render_home, render_sources
from settings import PROJECT_ROOT, Settings, get_settings

STATIC_DIR = PROJECT_ROOT / "static"

HTML_TYPE = "text/html; charset=utf-8"
TEXT_TYPE = "text/plain; charset=utf-8"

log = logging.getLogger("serve_cards")


def columns_for_width(header_value: Optional[str]) -> int:
    """Map an X-Screen-Width header to a column count (1-4)."""
    try:
        width = db.parse_int(header_value)
    except (TypeError, ValueError):
        width = 1

    if width > 1400:
        return 4
    if width > 1000:
        return 3
    if width > 600:
        return 2
    return 1


def is_reversed(query: str) -> bool:
    values = parse_qs(query).get("sort", [])
    return bool(values) and values[0] == "rev"


@dataclass(frozen=True)
class App:
    """Everything the handler needs, built once before the server starts."""
    records: Tuple[db.Record, ...]
    cache: PageCache
    home_html: bytes
    sources_html: bytes
    static_dir: Path = STATIC_DIR

    @classmethod
    def build(cls, settings: Settings, data_path: Path = db.DATA_PATH,
              static_dir: Path = STATIC_DIR) -> "App":
        """Load the dataset and render everything. Errors here are fatal."""
        records = db.load_dataset(data_path)
        home_html = render_home().encode("utf-8")
        sources_html = render_sources().encode("utf-8")
        cache = prebuild(records, settings.img_source, settings.ordering)
        return cls(records=records, cache=cache, home_html=home_html,
                   sources_html=sources_html, static_dir=static_dir)


class CardsHandler(BaseHTTPRequestHandler):
    def __init__(self, app: App, *args, **kwargs):
        self.app = app
        super().__init__(*args, **kwargs)

    def do_GET(self):
        self._dispatch(head_only=False)

    def do_HEAD(self):
        self._dispatch(head_only=True)

    def _dispatch(self, head_only: bool):
        url = urlparse(self.path)

        if url.path == "/content":
            self._serve_content(url.query, head_only)
        elif url.path == "/sources":
            self._send(200, HTML_TYPE, self.app.sources_html, head_only)
        elif url.path.startswith("/static/"):
            self._serve_static(unquote(url.path[len("/static/"):]), head_only)
        else:
            self._send(200, HTML_TYPE, self.app.home_html, head_only)

    def _serve_content(self, query: str, head_only: bool):
        num_cols = columns_for_width(self.headers.get("X-Screen-Width"))
        key = cache_key(num_cols, is_reversed(query))

        content = self.app.cache.get(key)
        if content is None:
            log.error(f"cache miss for {key}")
            self._send(500, TEXT_TYPE, b"content not found\n", head_only)
            return
        self._send(200, HTML_TYPE, content, head_only)

    def _serve_static(self, rel: str, head_only: bool):
        root = self.app.static_dir.resolve()
        try:
            file_path = (root / rel).resolve()
            found = file_path.is_relative_to(root) and file_path.is_file()
        except (OSError, ValueError):
            found = False
        if not found:
            self._send(404, TEXT_TYPE, b"not found\n", head_only)
            return

        mime, _ = mimetypes.guess_type(str(file_path))
        if not mime:
            mime = "application/octet-stream"
        try:
            data = file_path.read_bytes()
        except OSError:
            log.exception(f"failed to read {file_path}")
            self._send(500, TEXT_TYPE, b"read error\n", head_only)
            return
        self._send(200, mime, data, head_only,
                   extra={"Cache-Control": "public, max-age=3600"})

    def _send(self, status: int, content_type: str, body: bytes,
              head_only: bool, extra: Optional[dict] = None):
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        for name, value in (extra or {}).items():
            self.send_header(name, value)
        self.end_headers()
        if not head_only:
            self.wfile.write(body)

    def log_message(self, format, *args):
        log.debug("%s - %s", self.address_string(), format % args)


def make_server(app: App, host: str, port: int) -> ThreadingHTTPServer:
    return ThreadingHTTPServer((host, port), partial(CardsHandler, app))


def main(argv=None):
    try:
        settings = get_settings()
    except ValueError as e:
        logging.basicConfig(format="%(asctime)s  %(levelname)-7s  %(message)s")
        log.error(f"startup failed: {e}")
        return 1

    parser = argparse.ArgumentParser(description="National dish cards server")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--ordering", choices=ORDERINGS, default=settings.ordering,
                        help="card ordering strategy")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s  %(levelname)-7s  %(message)s",
    )

    settings = replace(settings, ordering=args.ordering, host=args.host, port=args.port)

    try:
        app = App.build(settings)
    except (OSError, db.ParseError) as e:
        log.error(f"startup failed: {e}")
        return 1

    server = make_server(app, settings.host, settings.port)
    log.info(f"Serving {len(app.records)} records on http://localhost:{settings.port}")
    log.info(f"  Images:   {settings.img_source}")
    log.info(f"  Ordering: {settings.ordering}")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        log.info("Shutting down.")
    finally:
        server.server_close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
