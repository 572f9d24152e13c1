import pytest

from emitkey.murmur import of, of_string


def test_keyban_hash():
    assert of_string("keyban") == 861724010


def test_me_hash():
    assert of_string("me") == 2539734036


def test_share_hash():
    assert of(b"$share") == 1480642916


def test_link_hash():
    assert of(b"link") == 2667034312


def test_plus_hash():
    assert of(b"+") == 1815237614


def test_hello_world_hash():
    assert of(b"hello world") == 4008393376


def test_empty_hash_matches_open_target():
    assert of(b"") == 1325880984


@pytest.mark.parametrize(
    "text", ["", "a", "ab", "abc", "abcd", "a/b/c/d/e/f/g/h/this/is/emitter"]
)
def test_string_and_bytes_agree(text):
    result = of_string(text)
    assert result == of(text.encode("utf-8"))
    assert 0 <= result <= 0xFFFFFFFF


def test_accepts_bytearray():
    assert of(bytearray(b"link")) == 2667034312