"""Filter chain building blocks and a registry of named filter builders."""

from __future__ import annotations

import time
from typing import Callable

from toyweb.context import Context

Filter = Callable[[Context], None]
FilterBuilder = Callable[[Filter], Filter]

_builders: dict[str, FilterBuilder] = {}


def metric_filter_builder(next_filter: Filter) -> Filter:
    """Wrap next_filter so its run time in nanoseconds is printed."""

    def _filter(c: Context) -> None:
        start = time.time_ns()
        next_filter(c)
        end = time.time_ns()
        print(f"run time: {end - start} ")

    return _filter


def register_filter(name: str, builder: FilterBuilder) -> None:
    """Register builder under name, replacing any earlier one."""
    _builders[name] = builder


def get_filter_builder(name: str) -> FilterBuilder | None:
    """Return the builder registered under name, or None."""
    return _builders.get(name)


def custom_filter_builder(next_filter: Filter) -> Filter:
    """A sample custom filter that announces itself, then continues."""

    def _filter(c: Context) -> None:
        print("假装这是我自定义的 filter")
        next_filter(c)

    return _filter


register_filter("my-custom", custom_filter_builder)