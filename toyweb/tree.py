"""A router built from one prefix tree per HTTP method.

Segments may be static text, a path parameter (``:name``) or a trailing
wildcard (``*``). When several children match a segment, static beats
parameter, and parameter beats wildcard.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol, TypeVar

from toyweb.context import Context
from toyweb.map_router import HandlerFunc, _serve

ANY = "*"

SUPPORT_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE")

_NOT_FOUND_BODY = b"Not Found"


class NodeType(enum.IntEnum):
    """Kinds of tree node; a higher value wins when several children match."""

    ROOT = 0
    ANY = 1
    PARAM = 2
    REG = 3
    STATIC = 4


class InvalidRouterPatternError(ValueError):
    """Raised for a pattern whose wildcard is not a whole final segment."""

    def __init__(self, pattern: str = "") -> None:
        super().__init__(f"invalid router pattern: {pattern!r}")
        self.pattern = pattern


class InvalidMethodError(ValueError):
    """Raised when routing a method the tree does not support."""

    def __init__(self, method: str = "") -> None:
        super().__init__(f"invalid method: {method!r}")
        self.method = method


class _TreeNode(Protocol):
    children: list[Any]
    handler: HandlerFunc | None


N = TypeVar("N", bound=_TreeNode)


def _split(path: str) -> list[str]:
    return path.strip("/").split("/")


def _validate_pattern(pattern: str) -> None:
    """Accept ``*`` only as a whole final segment."""
    pos = pattern.find(ANY)
    if pos > 0 and (pos != len(pattern) - 1 or pattern[pos - 1] != "/"):
        raise InvalidRouterPatternError(pattern)


def _insert(
    root: N,
    pattern: str,
    handler: HandlerFunc,
    reusable_child: Callable[[N, str], N | None],
    make_node: Callable[[str], N],
) -> None:
    """Walk ``pattern`` from ``root``, adding missing segments, and set the handler."""
    paths = _split(pattern)
    cur = root
    for index, segment in enumerate(paths):
        child = reusable_child(cur, segment)
        if child is None:
            for rest in paths[index:]:
                new = make_node(rest)
                cur.children.append(new)
                cur = new
            break
        cur = child
    cur.handler = handler


def _lookup(
    root: N, path: str, match_child: Callable[[N, str], N | None]
) -> HandlerFunc | None:
    """Follow ``path`` from ``root`` and return the handler found, or None."""
    cur: N | None = root
    for segment in _split(path):
        cur = match_child(cur, segment)  # type: ignore[arg-type]
        if cur is None:
            return None
    return cur.handler  # type: ignore[union-attr]


@dataclass(eq=False)
class Node:
    """One segment of a route; ``pattern`` is the segment, not the whole route."""

    node_type: NodeType
    pattern: str
    children: list[Node] = field(default_factory=list)
    handler: HandlerFunc | None = None

    def match(self, path: str, c: Context | None) -> bool:
        """Tell whether this node matches one path segment.

        A parameter node also stores the segment in ``c.path_params``.
        """
        if self.node_type is NodeType.ROOT:
            raise RuntimeError("a root node is never matched against a segment")
        if self.node_type is NodeType.ANY:
            return True
        if self.node_type is NodeType.PARAM:
            if c is not None:
                c.path_params[self.pattern[1:]] = path
            # A parameter node does not accept a literal wildcard segment.
            return path != ANY
        return path == self.pattern and path != ANY


def new_node(path: str) -> Node:
    """Create the node kind that fits the segment ``path``."""
    if path == ANY:
        return Node(NodeType.ANY, ANY)
    if path.startswith(":"):
        return Node(NodeType.PARAM, path)
    return Node(NodeType.STATIC, path)


def _best_match(root: Node, segment: str, c: Context | None) -> Node | None:
    candidates = [child for child in root.children if child.match(segment, c)]
    if not candidates:
        return None
    return sorted(candidates, key=lambda n: n.node_type)[-1]


def _reusable_child(root: Node, segment: str) -> Node | None:
    child = _best_match(root, segment, None)
    # A wildcard match is not reused, so /x/* and /x/:id can coexist.
    if child is None or child.node_type is NodeType.ANY:
        return None
    return child


class HandlerBasedOnTree:
    """Routes requests through a tree of segments for each supported method."""

    def __init__(self) -> None:
        self.forest: dict[str, Node] = {
            method: Node(NodeType.ROOT, method) for method in SUPPORT_METHODS
        }

    def route(self, method: str, pattern: str, handler: HandlerFunc) -> None:
        """Insert ``pattern`` for ``method`` into the tree.

        Raises InvalidRouterPatternError or InvalidMethodError.
        """
        _validate_pattern(pattern)
        root = self.forest.get(method)
        if root is None:
            raise InvalidMethodError(method)
        _insert(root, pattern, handler, _reusable_child, new_node)

    def find_router(
        self, method: str, path: str, c: Context | None
    ) -> HandlerFunc | None:
        """Return the handler for ``method`` and ``path``, or None."""
        root = self.forest.get(method)
        if root is None:
            return None
        return _lookup(root, path, lambda node, segment: _best_match(node, segment, c))

    def serve_http(self, c: Context) -> None:
        """Run the matching handler, or answer 404."""
        _serve(c, self.find_router(c.r.method, c.r.path, c), _NOT_FOUND_BODY)