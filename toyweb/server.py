"""An HTTP server that runs every request through a filter chain into a tree router."""

from __future__ import annotations

import threading
import time
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable
from urllib.parse import urlsplit

from toyweb.context import Request, ResponseWriter, new_context
from toyweb.filters import Filter, FilterBuilder, get_filter_builder
from toyweb.tree import HandlerBasedOnTree, HandlerFunc


def _parse_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address: {address!r}")
    return host, int(port)


def _make_request_handler(server: SdkHttpServer) -> type[BaseHTTPRequestHandler]:
    class _RequestHandler(BaseHTTPRequestHandler):
        def _handle(self) -> None:
            length = int(self.headers.get("Content-Length") or 0)
            body = self.rfile.read(length) if length > 0 else b""
            request = Request(
                method=self.command,
                path=urlsplit(self.path).path or "/",
                body=body,
                headers=dict(self.headers.items()),
            )
            writer = ResponseWriter()
            server.dispatch(writer, request)
            payload = writer.body
            self.send_response(writer.status or HTTPStatus.OK)
            for key, value in writer.headers.items():
                self.send_header(key, value)
            if not any(key.lower() == "content-length" for key in writer.headers):
                self.send_header("Content-Length", str(len(payload)))
            self.end_headers()
            if self.command != "HEAD":
                self.wfile.write(payload)

        do_GET = do_POST = do_PUT = do_DELETE = _handle
        do_HEAD = do_PATCH = do_OPTIONS = _handle

        def log_message(self, format: str, *args: object) -> None:
            pass

    return _RequestHandler


class SdkHttpServer:
    """A named server: a filter chain whose last link is a tree router."""

    def __init__(self, name: str, handler: HandlerBasedOnTree, root: Filter) -> None:
        self.name = name
        self._handler = handler
        self._root = root
        self._httpd: ThreadingHTTPServer | None = None
        self._lock = threading.Lock()

    def route(self, method: str, pattern: str, handler: HandlerFunc) -> None:
        """Register handler; raises what the tree router raises."""
        self._handler.route(method, pattern, handler)

    def dispatch(self, w: ResponseWriter, r: Request) -> None:
        """Run one request through the filter chain."""
        self._root(new_context(w, r))

    def start(self, address: str) -> None:
        """Listen on ``host:port`` (host may be empty) and serve until shut down."""
        host, port = _parse_address(address)
        httpd = ThreadingHTTPServer((host, port), _make_request_handler(self))
        with self._lock:
            self._httpd = httpd
        try:
            httpd.serve_forever()
        finally:
            with self._lock:
                self._httpd = None
            httpd.server_close()

    def shutdown(self, timeout: float | None = None) -> None:
        """Stop serving; takes about a second. ``timeout`` is accepted for hooks."""
        print(f"{self.name} shutdown...")
        with self._lock:
            httpd = self._httpd
        if httpd is not None:
            threading.Thread(target=httpd.shutdown, daemon=True).start()
        time.sleep(1)
        print(f"{self.name} shutdown!!!")


def new_sdk_http_server(name: str, *builders: FilterBuilder) -> SdkHttpServer:
    """Create a server; the first builder becomes the outermost filter."""
    handler = HandlerBasedOnTree()
    root: Callable = handler.serve_http
    for builder in reversed(builders):
        root = builder(root)
    return SdkHttpServer(name, handler, root)


def new_sdk_http_server_with_filter_names(
    name: str, *filter_names: str
) -> SdkHttpServer:
    """Create a server from registered filter names; raises KeyError on an unknown one."""
    builders = []
    for filter_name in filter_names:
        builder = get_filter_builder(filter_name)
        if builder is None:
            raise KeyError(f"no filter registered under {filter_name!r}")
        builders.append(builder)
    return new_sdk_http_server(name, *builders)