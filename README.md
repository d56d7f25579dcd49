# toyweb

A small HTTP server framework built on the standard library alone. It offers:

- `toyweb.context`: a `Request`, a `ResponseWriter` that collects status,
  headers and body, and a per-request `Context` with JSON helpers
  (`read_json`, `write_json`, `ok_json`, `bad_request_json`,
  `system_err_json`) and the matched `path_params`;
- routers:
  - `toyweb.map_router.HandlerBasedOnMap` matches the exact method and path;
  - `toyweb.tree.HandlerBasedOnTree` keeps one tree per method and
    understands static segments, `:name` path parameters and a trailing
    `/*` wildcard;
  - `toyweb.simple_tree.HandlerBasedOnSimpleTree` is a single tree of
    literal segments that ignores the method;
- `toyweb.filters`: filter builders that wrap the next filter, a timing
  filter (`metric_filter_builder`) and a registry of named builders;
- `toyweb.server`: `SdkHttpServer`, which runs each request through the filter
  chain into a tree router, serving over `http.server.ThreadingHTTPServer`;
- `toyweb.static`: a static file handler that picks the content type by file
  extension, with an optional LRU cache for small files;
- `toyweb.shutdown`: graceful shutdown — reject new requests, wait for the
  ones in flight, then run shutdown hooks in order.

## Routing

```python
from toyweb.server import new_sdk_http_server
from toyweb.filters import metric_filter_builder


def hello(c):
    c.ok_json({"msg": "hello"})


server = new_sdk_http_server("my-server", metric_filter_builder)
server.route("GET", "/hello", hello)
server.route("POST", "/order/:id", hello)
server.route("GET", "/files/*", hello)
server.start(":8080")  # blocks until server.shutdown() is called
```

The tree router supports GET, POST, PUT and DELETE; routing any other method
raises `toyweb.tree.InvalidMethodError`. A `*` anywhere but at the very end of
a pattern, right after a `/`, raises `toyweb.tree.InvalidRouterPatternError`.
When several children match a segment, a static segment wins over a path
parameter, which wins over the wildcard. Requests that match nothing get a 404
with the body `Not Found`.

Handlers receive a `Context`. `c.read_json()` returns the decoded body and
raises `ValueError` when it is not JSON; the write helpers encode dicts,
lists, plain values and dataclass instances.

## Filters

A filter is a callable taking a `Context`; a filter builder takes the next
filter and returns a new one. `new_sdk_http_server(name, *builders)` applies
them so the first builder runs outermost.

Builders can be registered under a name and looked up later. The builder
`custom_filter_builder` is registered as `"my-custom"` when `toyweb.filters`
is imported:

```python
from toyweb.filters import register_filter, get_filter_builder
from toyweb.server import new_sdk_http_server_with_filter_names

server = new_sdk_http_server_with_filter_names("my-server", "my-custom")
```

An unknown name raises `KeyError`.

## Static resources

```python
from toyweb.static import StaticResourceHandler, with_file_cache, with_more_extension

static = StaticResourceHandler(
    "demo/static", "/static",
    with_more_extension({"mp3": "audio/mp3"}),
    with_file_cache(1 << 20, 100),
)
server.route("GET", "/static/*", static.serve_static_resource)
```

jpeg, jpe, jpg, png and pdf are known out of the box. A file with an unknown
extension gets 400; a file that cannot be opened gets 500. With
`with_file_cache(size, count)`, up to `count` files smaller than `size` bytes
are kept in memory.

## Graceful shutdown

`GracefulShutdown.shutdown_filter_builder` counts requests in flight and, once
shutdown has begun, answers new requests with 503.
`GracefulShutdown.reject_new_request_and_waiting(timeout)` starts that phase
and waits up to `timeout` seconds for in-flight requests, raising
`HookTimeoutError` if they do not finish. `build_close_server_hook(*servers)`
makes a hook that shuts several servers down in parallel, also raising
`HookTimeoutError` when they take too long.

`wait_for_shutdown(*hooks)` blocks until one of the `shutdown_signals()`
arrives, runs each hook in order with a thirty-second timeout (printing, not
raising, any failure) and exits the process with status 0; if everything
takes over ten minutes it exits with status 1.

## Demo

The package ships a demo application:

```
toyweb-demo
```

It serves `POST /user/create/*` (sign-up taking `email`, `password` and
`confirmed_password` as JSON, answering with user id 123),
`POST /slowService` (answers after ten seconds) and `GET /static/*` (files
from `demo/static` in the working directory) on port 8080, runs a second,
empty server on port 8081, and shuts both down gracefully on a termination
signal.

## What it does not do

- No TLS, HTTP/2 or keep-alive tuning: the server is the standard library's
  `ThreadingHTTPServer`.
- Query strings are dropped; a `Request` carries only method, path, body and
  headers.
- There are no regular-expression route segments; `NodeType.REG` exists but
  no node of that kind is ever created.