from datetime import datetime, timezone

import pytest

from emitkey.ciphers.base64url import CorruptInputError
from emitkey.ciphers.xtea import Xtea
from emitkey.key import Key, Permission

CIPHER_KEY = "zT83oDV0DWY5_JysbSTPTA"


def _make_key(salt: int) -> Key:
    key = Key(24)
    key.salt = salt
    key.master = 2
    key.contract = 123
    key.signature = 777
    key.permissions = Permission.READ_WRITE
    key.set_target("a/b/c/")
    key.expires = datetime.fromtimestamp(1497683272, tz=timezone.utc)
    return key


def test_xtea_round_trip():
    cipher = Xtea(CIPHER_KEY)
    key = _make_key(999)
    encoded = cipher.encrypt_key(key)
    assert len(encoded) == 32
    decoded = cipher.decrypt_key(encoded)
    assert decoded == key
    assert decoded.contract == 123
    assert decoded.permissions == Permission.READ_WRITE


def test_xtea_round_trip_bytes_input():
    cipher = Xtea(CIPHER_KEY)
    key = _make_key(7)
    assert cipher.decrypt_key(cipher.encrypt_key(key).encode("ascii")) == key


def test_xtea_is_deterministic_and_key_dependent():
    key = _make_key(999)
    first = Xtea(CIPHER_KEY).encrypt_key(key)
    again = Xtea(CIPHER_KEY).encrypt_key(key)
    other = Xtea("AAAAAAAAAAAAAAAAAAAAAA").encrypt_key(key)
    assert first == again
    assert first != other


def test_xtea_salt_changes_ciphertext():
    cipher = Xtea(CIPHER_KEY)
    assert cipher.encrypt_key(_make_key(111)) != cipher.encrypt_key(_make_key(333))


def test_xtea_invalid_key_length():
    with pytest.raises(ValueError):
        Xtea("AAAA")


def test_xtea_invalid_key_character():
    with pytest.raises(CorruptInputError):
        Xtea("zT83oDV0DWY5_JysbSTPT%")


def test_xtea_decrypt_wrong_length():
    with pytest.raises(ValueError):
        Xtea(CIPHER_KEY).decrypt_key(b"")


def test_xtea_decrypt_bad_character():
    with pytest.raises(CorruptInputError):
        Xtea(CIPHER_KEY).decrypt_key(b"aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa*")


def test_xtea_encrypt_short_key():
    with pytest.raises(ValueError):
        Xtea(CIPHER_KEY).encrypt_key(bytes(10))