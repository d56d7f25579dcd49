"""A router built from a single prefix tree of exact path segments.

Every segment must match literally; the HTTP method takes no part in the
lookup.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from toyweb.context import Context
from toyweb.map_router import HandlerFunc, _serve
from toyweb.tree import _NOT_FOUND_BODY, _insert, _lookup


@dataclass(eq=False)
class SimpleNode:
    """One literal segment of a route."""

    path: str = ""
    children: list[SimpleNode] = field(default_factory=list)
    handler: HandlerFunc | None = None


class HandlerBasedOnSimpleTree:
    """Routes requests by matching path segments exactly."""

    _node_factory = SimpleNode

    def __init__(self) -> None:
        self.root = self._node_factory()

    @staticmethod
    def _match_child(root: SimpleNode, segment: str) -> SimpleNode | None:
        return next((child for child in root.children if child.path == segment), None)

    def route(self, method: str, pattern: str, handler: HandlerFunc) -> None:
        """Insert ``pattern`` into the tree; ``method`` is accepted but unused."""
        _insert(self.root, pattern, handler, self._match_child, self._node_factory)

    def find_router(self, path: str) -> HandlerFunc | None:
        """Return the handler registered for ``path``, or None."""
        return _lookup(self.root, path, self._match_child)

    def serve_http(self, c: Context) -> None:
        """Run the matching handler, or answer 404."""
        _serve(c, self.find_router(c.r.path), _NOT_FOUND_BODY)