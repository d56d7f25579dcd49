import pytest

from toyweb.context import Request, ResponseWriter, new_context
from toyweb.simple_tree import HandlerBasedOnSimpleTree, SimpleNode


def _noop(c):
    pass


def _shape(node):
    """Render a subtree as e.g. ``user!(profile!)``; ``!`` marks a handler."""
    return ",".join(
        child.path
        + ("!" if child.handler else "")
        + (f"({_shape(child)})" if child.children else "")
        for child in node.children
    )


def test_root_starts_empty():
    handler = HandlerBasedOnSimpleTree()
    assert isinstance(handler.root, SimpleNode)
    assert handler.root.children == []


@pytest.mark.parametrize(
    "patterns, expected",
    [
        (["/user"], "user!"),
        (["/user", "/user/profile"], "user!(profile!)"),
        (["/user", "/user/profile", "/user"], "user!(profile!)"),
        (["/user", "/user/profile", "/user/home"], "user!(profile!,home!)"),
        (["/user", "/order/detail"], "user!,order(detail!)"),
        (["/user", "/order/detail", "/order"], "user!,order!(detail!)"),
    ],
)
def test_route_builds_tree(patterns, expected):
    handler = HandlerBasedOnSimpleTree()
    for pattern in patterns:
        handler.route("POST", pattern, lambda c: None)
    assert _shape(handler.root) == expected


def test_route_again_replaces_handler():
    handler = HandlerBasedOnSimpleTree()
    handler.route("POST", "/user", lambda c: None)
    handler.route("POST", "/user", _noop)
    assert [n.handler for n in handler.root.children] == [_noop]


def test_find_router():
    handler = HandlerBasedOnSimpleTree()
    steps = [
        ("/user", {"/user": "/user", "/user/profile": None}),
        ("/user/profile", {"/user/profile": "/user/profile", "/user": "/user"}),
        ("/order/detail", {"/order": None, "/order/detail": "/order/detail"}),
        ("/order", {"/order": "/order"}),
    ]
    handlers = {}
    for pattern, lookups in steps:
        handlers[pattern] = lambda c: None
        handler.route("POST", pattern, handlers[pattern])
        found = {path: handler.find_router(path) for path in lookups}
        assert found == {path: handlers.get(n) for path, n in lookups.items()}


@pytest.mark.parametrize(
    "path, expected", [("/user", _noop), ("/order/detail", None), ("/order/*", _noop)]
)
def test_method_ignored_and_star_literal(path, expected):
    handler = HandlerBasedOnSimpleTree()
    handler.route("GET", "/user", _noop)
    handler.route("DELETE", "/order/*", _noop)
    assert handler.find_router(path) is expected


@pytest.mark.parametrize(
    "path, status, body",
    [("/hello", 200, b'{"msg":"hi"}'), ("/missing", 404, b"Not Found")],
)
def test_serve_http(path, status, body):
    handler = HandlerBasedOnSimpleTree()
    handler.route("POST", "/hello", lambda c: c.ok_json({"msg": "hi"}))
    w = ResponseWriter()
    handler.serve_http(new_context(w, Request(method="POST", path=path)))
    assert (w.status, w.body) == (status, body)