import pytest

from emitkey.ident import ID, IDGenerator, new_id


def test_new_ids_from_zero():
    gen = IDGenerator(0)
    assert gen.next_id() == ID(1)
    assert gen.next_id() == ID(2)


def test_id_to_string():
    gen = IDGenerator(0)
    assert str(gen.next_id()) == "01"
    assert str(gen.next_id()) == "02"


def test_id_to_unique():
    gen = IDGenerator(0)
    first = gen.next_id()
    second = gen.next_id()
    assert first.unique(123, "hello") == "F45JPXDSXVRWBUKTDNCCM4PGQI"
    assert second.unique(123, "hello") == "XCFU2OA7OO2COPZOJ5VA6GS6BM"


@pytest.mark.parametrize(
    "value,text",
    [(0, "00"), (127, "7F"), (128, "8001"), (300, "AC02")],
)
def test_id_string_is_uvarint_hex(value, text):
    assert str(ID(value)) == text


def test_generator_wraps_at_uint64():
    gen = IDGenerator(2**64 - 1)
    assert gen.next_id() == 0


def test_new_id_is_increasing():
    first = new_id()
    second = new_id()
    assert second == first + 1


def test_unique_depends_on_salt():
    ident = ID(1)
    assert ident.unique(123, "hello") == "F45JPXDSXVRWBUKTDNCCM4PGQI"
    assert ident.unique(123, "other") != ident.unique(123, "hello")
    assert len(ident.unique(123, "other")) == 26