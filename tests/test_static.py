import pytest

from toyweb.context import Request, ResponseWriter, new_context
from toyweb.static import (
    StaticResourceHandler,
    get_file_ext,
    with_file_cache,
    with_more_extension,
)


def _serve(handler, path):
    w = ResponseWriter()
    handler.serve_static_resource(new_context(w, Request(method="GET", path=path)))
    return w


@pytest.fixture
def static_dir(tmp_path):
    (tmp_path / "forest.png").write_bytes(b"PNGDATA")
    (tmp_path / "note.txt").write_bytes(b"text")
    (tmp_path / "song.mp3").write_bytes(b"MP3DATA")
    return tmp_path


def test_serves_known_file(static_dir):
    handler = StaticResourceHandler(str(static_dir), "/static")
    w = _serve(handler, "/static/forest.png")
    assert w.status == 200
    assert w.body == b"PNGDATA"
    assert w.headers["Content-Type"] == "image/png"
    assert w.headers["Content-Length"] == str(len(b"PNGDATA"))


def test_missing_file_is_server_error(static_dir):
    handler = StaticResourceHandler(str(static_dir), "/static")
    w = _serve(handler, "/static/none.png")
    assert w.status == 500
    assert w.body == b""


def test_unknown_extension_is_bad_request(static_dir):
    handler = StaticResourceHandler(str(static_dir), "/static")
    w = _serve(handler, "/static/note.txt")
    assert w.status == 400


def test_more_extension_adds_type(static_dir):
    handler = StaticResourceHandler(
        str(static_dir), "/static", with_more_extension({"mp3": "audio/mp3"})
    )
    w = _serve(handler, "/static/song.mp3")
    assert w.status == 200
    assert w.headers["Content-Type"] == "audio/mp3"
    assert w.body == b"MP3DATA"


def test_cached_file_survives_deletion(static_dir):
    handler = StaticResourceHandler(
        str(static_dir), "/static", with_file_cache(1 << 20, 100)
    )
    first = _serve(handler, "/static/forest.png")
    (static_dir / "forest.png").unlink()
    second = _serve(handler, "/static/forest.png")
    assert second.status == 200
    assert second.body == first.body


def test_without_cache_deletion_is_visible(static_dir):
    handler = StaticResourceHandler(str(static_dir), "/static")
    _serve(handler, "/static/forest.png")
    (static_dir / "forest.png").unlink()
    assert _serve(handler, "/static/forest.png").status == 500


def test_large_file_is_not_cached(static_dir):
    handler = StaticResourceHandler(
        str(static_dir), "/static", with_file_cache(len(b"PNGDATA"), 10)
    )
    assert _serve(handler, "/static/forest.png").status == 200
    (static_dir / "forest.png").unlink()
    assert _serve(handler, "/static/forest.png").status == 500


def test_cache_evicts_least_recently_used(static_dir):
    (static_dir / "other.jpg").write_bytes(b"JPG")
    handler = StaticResourceHandler(
        str(static_dir), "/static", with_file_cache(1 << 20, 1)
    )
    _serve(handler, "/static/forest.png")
    _serve(handler, "/static/other.jpg")
    (static_dir / "forest.png").unlink()
    (static_dir / "other.jpg").unlink()
    assert _serve(handler, "/static/forest.png").status == 500
    cached = _serve(handler, "/static/other.jpg")
    assert cached.status == 200
    assert cached.body == b"JPG"


def test_non_positive_cache_size_disables_cache(static_dir):
    handler = StaticResourceHandler(str(static_dir), "/static", with_file_cache(1 << 20, 0))
    assert handler.cache is None
    _serve(handler, "/static/forest.png")
    (static_dir / "forest.png").unlink()
    assert _serve(handler, "/static/forest.png").status == 500


@pytest.mark.parametrize(
    "name, expected",
    [("forest.png", "png"), ("a.b.jpeg", "jpeg"), ("trailing.", ""), ("plain", "plain")],
)
def test_get_file_ext(name, expected):
    assert get_file_ext(name) == expected