"""A router that matches method and exact path through a dictionary."""

from __future__ import annotations

import threading
from http import HTTPStatus
from typing import Callable

from toyweb.context import Context

HandlerFunc = Callable[[Context], None]


def _serve(c: Context, handler: HandlerFunc | None, not_found_body: bytes) -> None:
    """Run ``handler`` on ``c``, or answer 404 with ``not_found_body``."""
    if handler is None:
        c.w.write_header(HTTPStatus.NOT_FOUND)
        c.w.write(not_found_body)
        return
    handler(c)


class HandlerBasedOnMap:
    """Routes by the exact pair of HTTP method and path."""

    def __init__(self) -> None:
        self._handlers: dict[str, HandlerFunc] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(method: str, path: str) -> str:
        return f"{method}#{path}"

    def route(self, method: str, pattern: str, handler: HandlerFunc) -> None:
        """Register handler for method and pattern, replacing any earlier one."""
        with self._lock:
            self._handlers[self._key(method, pattern)] = handler

    def serve_http(self, c: Context) -> None:
        """Run the matching handler, or answer 404."""
        with self._lock:
            handler = self._handlers.get(self._key(c.r.method, c.r.path))
        _serve(c, handler, b"not any router match")