"""Request, response writer and the per-request context handed to handlers."""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any


@dataclass
class Request:
    """An incoming HTTP request as seen by the framework."""

    method: str = "GET"
    path: str = "/"
    body: bytes = b""
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class ResponseWriter:
    """Collects the status line, headers and body of a response."""

    status: int | None = None
    headers: dict[str, str] = field(default_factory=dict)
    _chunks: list[bytes] = field(default_factory=list, repr=False)

    def write_header(self, status: int) -> None:
        """Set the status code; only the first call has any effect."""
        if self.status is None:
            self.status = int(status)

    def write(self, data: bytes) -> int:
        """Append data to the body, implying status 200 if none was set."""
        if self.status is None:
            self.write_header(HTTPStatus.OK)
        chunk = bytes(data)
        self._chunks.append(chunk)
        return len(chunk)

    @property
    def body(self) -> bytes:
        """Everything written so far."""
        return b"".join(self._chunks)


def _encode_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def _marshal(data: Any) -> bytes:
    return json.dumps(
        data, default=_encode_default, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


@dataclass
class Context:
    """Wraps the writer and request of one call, plus matched path parameters."""

    w: ResponseWriter | None
    r: Request | None
    path_params: dict[str, str] = field(default_factory=dict)

    def read_json(self) -> Any:
        """Decode the request body as JSON; raises ValueError when it is not."""
        return json.loads(self.r.body)

    def write_json(self, status: int, data: Any) -> None:
        """Write the status, then the JSON encoding of data as the body."""
        self.w.write_header(status)
        self.w.write(_marshal(data))

    def ok_json(self, data: Any) -> None:
        """Respond 200 with data as JSON."""
        self.write_json(HTTPStatus.OK, data)

    def system_err_json(self, data: Any) -> None:
        """Respond 500 with data as JSON."""
        self.write_json(HTTPStatus.INTERNAL_SERVER_ERROR, data)

    def bad_request_json(self, data: Any) -> None:
        """Respond 400 with data as JSON."""
        self.write_json(HTTPStatus.BAD_REQUEST, data)

    def reset(self, w: ResponseWriter | None, r: Request | None) -> None:
        """Reuse this context for another request."""
        self.w = w
        self.r = r
        self.path_params = {}


def new_context(w: ResponseWriter | None, r: Request | None) -> Context:
    """Create a context with no path parameters."""
    return Context(w=w, r=r)