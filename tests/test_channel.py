import pytest

from emitkey.channel import (
    Channel,
    ChannelOption,
    ChannelType,
    make_channel,
    parse_channel,
)
from emitkey.murmur import of

STATIC = ChannelType.STATIC
WILDCARD = ChannelType.WILDCARD
INVALID = ChannelType.INVALID

PARSE_CASES = [
    ("emitter", "a/", [], STATIC),
    ("emitter", "a/b/c/", [], STATIC),
    ("emitter", "test-channel/", [], STATIC),
    ("emitter", "test-channel/+/and-more/", [], WILDCARD),
    ("emitter", "a/-/x/", [], STATIC),
    ("emitter", "a/b/c/d/", [], STATIC),
    ("emitter", "a/b/c/+/", [], WILDCARD),
    ("emitter", "a/+/c/+/", [], WILDCARD),
    ("emitter", "b/+/", [], WILDCARD),
    ("placeholder", "emitter/", ["test=true", "something=7"], STATIC),
    ("emitter", "a/b/c/d/", ["test=true", "something=7"], STATIC),
    ("emitter", "a/b/c/d/", ["req=13", "something=7"], STATIC),
    ("", "", [], INVALID),
    ("emitter", "a/@/x/", [], INVALID),
    ("emitter", "a", [], INVALID),
    ("emitter", "a/b/c", [], INVALID),
    ("emitter", "a//b/", [], INVALID),
    ("emitter", "a//////b/c", [], INVALID),
    ("emitter", "*", [], INVALID),
    ("emitter", "+", [], INVALID),
    ("emitter", "a/+", [], INVALID),
    ("emitter", "b/+", [], INVALID),
    ("emitter", "b/*+/", [], INVALID),
    ("emitter", "b/+a/", [], INVALID),
    ("emitter", "", [], INVALID),
    ("emitter", "/", [], INVALID),
    ("emitter", "//", [], INVALID),
    ("emitter", "a//", [], INVALID),
    ("emitter", "a/b/c/d/", ["test=true", "something=7", "more=_"], INVALID),
    ("emitter", "a/b/c/d/", ["test==true"], INVALID),
    ("emitter", "a/b/c/d/", ["te_st==true"], INVALID),
    ("emitter", "a/", ["=true"], INVALID),
    ("emitter", "a/", ["test="], INVALID),
]


@pytest.mark.parametrize("key,ch,opts,expected", PARSE_CASES)
def test_parse_channel(key, ch, opts, expected):
    text = key + "/" + ch
    if opts:
        text += "?" + "&".join(opts)

    out = parse_channel(text.encode())
    assert out.channel_type == expected, text
    if expected == INVALID:
        return

    if not ch.endswith("/"):
        ch += "/"
    assert out.key == key.encode()
    assert out.channel == ch.encode()

    found = {o.key: o.value for o in out.options}
    for opt in opts:
        name, value = opt.split("=")
        assert found[name] == value


def test_parse_channel_accepts_str():
    out = parse_channel("emitter/a/b/")
    assert out.channel_type == STATIC
    assert out.query == [of(b"a"), of(b"b")]


def test_trailing_question_mark_without_options():
    out = parse_channel(b"emitter/a/?")
    assert out.channel_type == STATIC
    assert out.channel == b"a/"
    assert out.options == []


def test_options_are_ordered():
    out = parse_channel(b"emitter/a/?x=1&y=2")
    assert out.options == [ChannelOption("x", "1"), ChannelOption("y", "2")]


@pytest.mark.parametrize(
    "text,expected",
    [
        ("emitter/a/?me=0", True),
        ("emitter/a/?me=12000000", False),
        ("emitter/a/?me=1200a", False),
        ("emitter/a/?me=-1", False),
        ("emitter/a/", False),
    ],
)
def test_exclude(text, expected):
    assert parse_channel(text.encode()).exclude() is expected


@pytest.mark.parametrize(
    "text,value,ok",
    [
        ("emitter/a/?ttl=42&abc=9", 42, True),
        ("emitter/a/?ttl=1200", 1200, True),
        ("emitter/a/?ttl=1200a", 0, False),
        ("emitter/a/", 0, False),
    ],
)
def test_ttl(text, value, ok):
    assert parse_channel(text.encode()).ttl() == (value, ok)


@pytest.mark.parametrize(
    "text,value,ok",
    [
        ("emitter/a/?last=42&abc=9", 42, True),
        ("emitter/a/?last=1200", 1200, True),
        ("emitter/a/?last=1200a", 0, False),
        ("emitter/a/", 0, False),
    ],
)
def test_last(text, value, ok):
    assert parse_channel(text.encode()).last() == (value, ok)


def test_option_out_of_int64_range():
    out = parse_channel(b"emitter/a/?ttl=99999999999999999999")
    assert out.ttl() == (0, False)


@pytest.mark.parametrize(
    "text,t0,t1",
    [
        ("emitter/a/?from=42&abc=9", 0, 0),
        ("emitter/a/?from=1200", 0, 0),
        ("emitter/a/?from=1200&until=2550", 0, 0),
        ("emitter/a/?from=1200a", 0, 0),
        ("emitter/a/", 0, 0),
        ("emitter/a/?from=1514764800&until=1514764900", 1514764800, 1514764900),
        ("emitter/a/?from=1514764800", 1514764800, 0),
        ("emitter/a/?until=1514764900", 0, 1514764900),
        ("emitter/a/?from=1514764800&until=3029529610", 1514764800, 0),
        ("emitter/a/?from=1514764900&until=1514764800", 1514764900, 1514764800),
    ],
)
def test_window(text, t0, t1):
    start, end = parse_channel(text.encode()).window()
    assert int(start.timestamp()) == t0
    assert int(end.timestamp()) == t1


@pytest.mark.parametrize(
    "text,target",
    [
        ("emitter/a/?ttl=42&abc=9", 0xC103EAB3),
        ("emitter/$share/a/b/c/", 1480642916),
    ],
)
def test_target(text, target):
    assert parse_channel(text.encode()).target() == target


def test_target_of_empty_query_raises():
    with pytest.raises(IndexError):
        Channel().target()


def test_make_channel():
    channel = make_channel("key1", "emitter/a/")
    assert channel.key == b"key1"
    assert channel.channel == b"emitter/a/"
    assert channel.channel_type == STATIC


@pytest.mark.parametrize(
    "text",
    [
        "emitter/a/?last=42&abc=9",
        "emitter/a/?last=1200",
        "emitter/a/?last=1200a",
        "emitter/a/",
    ],
)
def test_channel_string(text):
    assert str(parse_channel(text.encode())) == text


def test_safe_string_omits_key():
    channel = parse_channel(b"emitter/a/b/?x=1")
    assert channel.safe_string() == "a/b/?x=1"