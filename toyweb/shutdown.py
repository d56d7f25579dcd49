"""Graceful shutdown: reject new requests, wait for running ones, run hooks on a signal."""

from __future__ import annotations

import os
import signal
import sys
import threading
import time
from http import HTTPStatus
from typing import Callable, Protocol

from toyweb.context import Context
from toyweb.filters import Filter

Hook = Callable[[float], None]

_HOOK_TIMEOUT = 30.0
_FORCE_EXIT_AFTER = 600.0

_SIGNAL_NAMES = (
    "SIGINT",
    "SIGKILL",
    "SIGSTOP",
    "SIGHUP",
    "SIGQUIT",
    "SIGILL",
    "SIGTRAP",
    "SIGABRT",
    "SIGSYS",
    "SIGTERM",
)
_UNCATCHABLE = frozenset({"SIGKILL", "SIGSTOP"})


class HookTimeoutError(TimeoutError):
    """Raised when a shutdown hook does not finish within its time."""

    def __init__(self, message: str = "the hook timeout") -> None:
        super().__init__(message)


class _Shutdownable(Protocol):
    def shutdown(self, timeout: float) -> None: ...


class GracefulShutdown:
    """Counts requests in flight and refuses new ones once closing has begun."""

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._req_cnt = 0
        self._closing = False

    def shutdown_filter_builder(self, next_filter: Filter) -> Filter:
        """Wrap next_filter: answer 503 once closing, otherwise count the request."""

        def _filter(c: Context) -> None:
            with self._cond:
                rejected = self._closing
                if not rejected:
                    self._req_cnt += 1
            if rejected:
                c.w.write_header(HTTPStatus.SERVICE_UNAVAILABLE)
                return
            try:
                next_filter(c)
            finally:
                with self._cond:
                    self._req_cnt -= 1
                    if self._req_cnt == 0:
                        self._cond.notify_all()

        return _filter

    def reject_new_request_and_waiting(self, timeout: float) -> None:
        """Start rejecting requests and wait for those in flight.

        Raises HookTimeoutError when they do not finish within ``timeout`` seconds.
        """
        with self._cond:
            self._closing = True
            if self._req_cnt == 0:
                return
            if not self._cond.wait_for(lambda: self._req_cnt == 0, timeout):
                print("超时了，还没等到所有请求执行完毕")
                raise HookTimeoutError()
        print("全部请求处理完了")


def build_close_server_hook(*servers: _Shutdownable) -> Hook:
    """Build a hook that shuts every server down concurrently."""

    def hook(timeout: float) -> None:
        deadline = time.monotonic() + timeout

        def close(server: _Shutdownable) -> None:
            try:
                server.shutdown(timeout)
            except Exception as err:
                print(f"server shutdown error: {err} ")
            time.sleep(1)

        threads = [
            threading.Thread(target=close, args=(server,), daemon=True)
            for server in servers
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(max(0.0, deadline - time.monotonic()))
            if thread.is_alive():
                print("closing servers timeout ")
                raise HookTimeoutError()
        print("close all servers ")

    return hook


def shutdown_signals() -> tuple[signal.Signals, ...]:
    """The signals that trigger a shutdown, as far as this platform has them."""
    return tuple(
        getattr(signal, name) for name in _SIGNAL_NAMES if hasattr(signal, name)
    )


def _force_exit() -> None:
    print("Shutdown gracefully timeout, application will shutdown immediately. ")
    os._exit(1)


def wait_for_shutdown(*hooks: Hook) -> None:
    """Block until a shutdown signal arrives, run the hooks in order, then exit 0.

    Each hook gets thirty seconds; failures are printed and do not stop the rest.
    If everything together takes over ten minutes the process exits with 1.
    """
    received: list[int] = []

    def _on_signal(signum: int, frame: object) -> None:
        received.append(signum)

    previous = {}
    for sig in shutdown_signals():
        if sig.name in _UNCATCHABLE:
            continue
        try:
            previous[sig] = signal.signal(sig, _on_signal)
        except (OSError, ValueError):
            continue

    force_exit: threading.Timer | None = None
    try:
        while not received:
            time.sleep(0.05)
        sig = signal.Signals(received[0])
        print(f"get signal {sig.name}, application will shutdown ")
        force_exit = threading.Timer(_FORCE_EXIT_AFTER, _force_exit)
        force_exit.daemon = True
        force_exit.start()
        for hook in hooks:
            try:
                hook(_HOOK_TIMEOUT)
            except Exception as err:
                print(f"failed to run hook, err: {err} ")
        sys.exit(0)
    finally:
        if force_exit is not None:
            force_exit.cancel()
        for sig, handler in previous.items():
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)