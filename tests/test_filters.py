from toyweb.context import Request, ResponseWriter, new_context
from toyweb.filters import (
    custom_filter_builder,
    get_filter_builder,
    metric_filter_builder,
    register_filter,
)


def _ctx():
    return new_context(ResponseWriter(), Request())


def test_metric_filter_calls_next_and_prints(capsys):
    seen = []
    f = metric_filter_builder(lambda c: seen.append(c))
    c = _ctx()
    f(c)
    assert seen == [c]
    out = capsys.readouterr().out
    assert out.startswith("run time: ")
    assert int(out.split()[2]) >= 0


def test_custom_filter_prints_and_continues(capsys):
    seen = []
    f = custom_filter_builder(lambda c: seen.append("next"))
    f(_ctx())
    assert seen == ["next"]
    assert "假装这是我自定义的 filter" in capsys.readouterr().out


def test_custom_filter_registered_by_name():
    assert get_filter_builder("my-custom") is custom_filter_builder


def test_register_and_get():
    def builder(nxt):
        return nxt

    register_filter("identity-for-test", builder)
    assert get_filter_builder("identity-for-test") is builder


def test_register_replaces():
    def first(nxt):
        return nxt

    def second(nxt):
        return nxt

    register_filter("replace-me", first)
    register_filter("replace-me", second)
    assert get_filter_builder("replace-me") is second


def test_unknown_name_gives_none():
    assert get_filter_builder("no-such-filter") is None


def test_chain_order(capsys):
    order = []

    def end(c):
        print("end of chain")
        order.append("end")

    root = end
    for b in reversed([metric_filter_builder, get_filter_builder("my-custom")]):
        root = b(root)
    root(_ctx())

    assert order == ["end"]
    out = capsys.readouterr().out
    custom_at = out.index("假装这是我自定义的 filter")
    end_at = out.index("end of chain")
    metric_at = out.index("run time: ")
    assert custom_at < end_at < metric_at