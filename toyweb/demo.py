"""Sample handlers and a command that runs two servers with graceful shutdown."""

from __future__ import annotations

import os
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from toyweb.context import Context
from toyweb.filters import metric_filter_builder
from toyweb.server import SdkHttpServer, new_sdk_http_server
from toyweb.shutdown import GracefulShutdown, build_close_server_hook, wait_for_shutdown
from toyweb.static import StaticResourceHandler, with_file_cache, with_more_extension

_SLOW_SERVICE_DELAY = 10.0


@dataclass
class SignUpRequest:
    email: str = ""
    password: str = ""
    confirmed_password: str = ""


@dataclass
class CommonResponse:
    biz_code: int = 0
    msg: str = ""
    data: Any = None


def _parse_sign_up(payload: Any) -> SignUpRequest:
    if not isinstance(payload, dict):
        raise ValueError(f"cannot decode {type(payload).__name__} into a sign-up request")
    values = {}
    for name in ("email", "password", "confirmed_password"):
        value = payload.get(name, "")
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise ValueError(f"field {name!r} must be a string")
        values[name] = value
    return SignUpRequest(**values)


def sign_up(c: Context) -> None:
    """Accept a sign-up request and answer with a fixed new user id."""
    try:
        _parse_sign_up(c.read_json())
    except ValueError as err:
        c.bad_request_json(CommonResponse(biz_code=4, msg=f"invalid request: {err}"))
        return
    c.ok_json(CommonResponse(data=123))


def slow_service(c: Context) -> None:
    """Answer after a ten-second pause."""
    time.sleep(_SLOW_SERVICE_DELAY)
    c.ok_json(CommonResponse(msg="Hi, this is msg from slow service"))


def _notify_gateway(timeout: float) -> None:
    print("mock notify gateway")
    time.sleep(2)


def _release_resources(timeout: float) -> None:
    print("mock release resources")
    time.sleep(2)


def _serve_in_background(server: SdkHttpServer, address: str) -> None:
    def run() -> None:
        try:
            server.start(address)
        except Exception as err:
            print(f"{server.name} failed to start: {err}")
            os._exit(1)

    threading.Thread(target=run, daemon=True).start()


def main(argv: list[str] | None = None) -> None:
    """Run the demo server on :8080 and an admin server on :8081 until signalled."""
    shutdown = GracefulShutdown()
    server = new_sdk_http_server(
        "my-test-server", metric_filter_builder, shutdown.shutdown_filter_builder
    )
    admin_server = new_sdk_http_server(
        "admin-test-server", metric_filter_builder, shutdown.shutdown_filter_builder
    )

    server.route("POST", "/user/create/*", sign_up)
    server.route("POST", "/slowService", slow_service)

    static_handler = StaticResourceHandler(
        "demo/static",
        "/static",
        with_more_extension({"mp3": "audio/mp3"}),
        with_file_cache(1 << 20, 100),
    )
    server.route("GET", "/static/*", static_handler.serve_static_resource)

    _serve_in_background(admin_server, ":8081")
    _serve_in_background(server, ":8080")

    hooks: list[Callable[[float], None]] = [
        _notify_gateway,
        shutdown.reject_new_request_and_waiting,
        build_close_server_hook(server, admin_server),
        _release_resources,
    ]
    wait_for_shutdown(*hooks)


if __name__ == "__main__":
    main()