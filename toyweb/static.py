"""Serving files from a directory, with an optional in-memory LRU cache."""

from __future__ import annotations

import os
import threading
from collections import OrderedDict
from dataclasses import dataclass
from http import HTTPStatus
from typing import Callable

from toyweb.context import Context, ResponseWriter

StaticResourceHandlerOption = Callable[["StaticResourceHandler"], None]

_DEFAULT_CONTENT_TYPES = {
    "jpeg": "image/jpeg",
    "jpe": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
    "pdf": "image/pdf",
}


@dataclass(frozen=True)
class _FileCacheItem:
    file_name: str
    file_size: int
    content_type: str
    data: bytes


class _LRUCache:
    """A small thread-safe least-recently-used cache."""

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("cache capacity must be positive")
        self._capacity = capacity
        self._items: OrderedDict[str, _FileCacheItem] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> _FileCacheItem | None:
        with self._lock:
            item = self._items.get(key)
            if item is not None:
                self._items.move_to_end(key)
            return item

    def add(self, key: str, item: _FileCacheItem) -> None:
        with self._lock:
            self._items[key] = item
            self._items.move_to_end(key)
            while len(self._items) > self._capacity:
                self._items.popitem(last=False)


def get_file_ext(name: str) -> str:
    """Return the text after the last dot; empty if the name ends with a dot.

    A name without any dot is returned whole.
    """
    index = name.rfind(".")
    if index == len(name) - 1:
        return ""
    return name[index + 1 :]


def with_file_cache(
    max_file_size_threshold: int, max_cache_file_cnt: int
) -> StaticResourceHandlerOption:
    """Cache up to max_cache_file_cnt files smaller than max_file_size_threshold bytes."""

    def option(h: StaticResourceHandler) -> None:
        try:
            cache: _LRUCache | None = _LRUCache(max_cache_file_cnt)
        except ValueError:
            print("could not create LRU, we won't cache static file")
            cache = None
        h.max_file_size = max_file_size_threshold
        h.cache = cache

    return option


def with_more_extension(ext_map: dict[str, str]) -> StaticResourceHandlerOption:
    """Add or override extension to content-type mappings."""

    def option(h: StaticResourceHandler) -> None:
        h.extension_content_types.update(ext_map)

    return option


class StaticResourceHandler:
    """Serves files under ``directory`` for request paths starting with ``path_prefix``."""

    def __init__(
        self,
        directory: str,
        path_prefix: str,
        *options: StaticResourceHandlerOption,
    ) -> None:
        self.directory = directory
        self.path_prefix = path_prefix
        self.extension_content_types: dict[str, str] = dict(_DEFAULT_CONTENT_TYPES)
        self.cache: _LRUCache | None = None
        self.max_file_size = 0
        for option in options:
            option(self)

    def serve_static_resource(self, c: Context) -> None:
        """Answer with the requested file: 500 if unreadable, 400 if its type is unknown."""
        path = c.r.path
        req = path[len(self.path_prefix) :] if path.startswith(self.path_prefix) else path
        item = self.cache.get(req) if self.cache is not None else None
        if item is not None:
            print("read data from cache...")
            self._write_item(item, c.w)
            return

        file_path = os.path.normpath(os.path.join(self.directory, req.lstrip("/")))
        content_type = self.extension_content_types.get(get_file_ext(file_path))
        try:
            with open(file_path, "rb") as f:
                if content_type is None:
                    c.w.write_header(HTTPStatus.BAD_REQUEST)
                    return
                data = f.read()
        except OSError:
            c.w.write_header(HTTPStatus.INTERNAL_SERVER_ERROR)
            return

        item = _FileCacheItem(
            file_name=req, file_size=len(data), content_type=content_type, data=data
        )
        if self.cache is not None and item.file_size < self.max_file_size:
            self.cache.add(item.file_name, item)
        self._write_item(item, c.w)

    @staticmethod
    def _write_item(item: _FileCacheItem, writer: ResponseWriter) -> None:
        writer.headers["Content-Type"] = item.content_type
        writer.headers["Content-Length"] = str(item.file_size)
        writer.write_header(HTTPStatus.OK)
        writer.write(item.data)