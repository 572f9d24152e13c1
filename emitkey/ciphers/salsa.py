"""XSalsa20 cipher for security keys, with a pure Python Salsa20 core."""

from __future__ import annotations

import base64
import struct

from ..key import KEY_SIZE, Key
from .base64url import decode_key

_MASK = 0xFFFFFFFF
_SIGMA = struct.unpack("<4I", b"expand 32-byte k")
_ENCODED_KEY_LENGTH = 32

# Column round followed by row round, as (a, b, c, d) quarter-round indices.
_DOUBLE_ROUND = (
    (0, 4, 8, 12),
    (5, 9, 13, 1),
    (10, 14, 2, 6),
    (15, 3, 7, 11),
    (0, 1, 2, 3),
    (5, 6, 7, 4),
    (10, 11, 8, 9),
    (15, 12, 13, 14),
)


def _rotl(value: int, count: int) -> int:
    return ((value << count) | (value >> (32 - count))) & _MASK


def _initial_state(key: bytes, block: bytes) -> list[int]:
    k = struct.unpack("<8I", key)
    n = struct.unpack("<4I", block)
    return [
        _SIGMA[0], k[0], k[1], k[2],
        k[3], _SIGMA[1], n[0], n[1],
        n[2], n[3], _SIGMA[2], k[4],
        k[5], k[6], k[7], _SIGMA[3],
    ]


def _rounds(state: list[int]) -> list[int]:
    x = list(state)
    for _ in range(10):
        for a, b, c, d in _DOUBLE_ROUND:
            x[b] ^= _rotl((x[a] + x[d]) & _MASK, 7)
            x[c] ^= _rotl((x[b] + x[a]) & _MASK, 9)
            x[d] ^= _rotl((x[c] + x[b]) & _MASK, 13)
            x[a] ^= _rotl((x[d] + x[c]) & _MASK, 18)
    return x


def _check_lengths(key: bytes, block: bytes) -> None:
    if len(key) != 32:
        raise ValueError("salsa: the key must be 32 bytes long")
    if len(block) != 16:
        raise ValueError("salsa: the nonce must be 16 bytes long")


def hsalsa20(key: bytes, nonce: bytes) -> bytes:
    """Derive a 32-byte sub-key from a 32-byte key and a 16-byte nonce."""
    key, nonce = bytes(key), bytes(nonce)
    _check_lengths(key, nonce)
    x = _rounds(_initial_state(key, nonce))
    return struct.pack("<8I", x[0], x[5], x[10], x[15], x[6], x[7], x[8], x[9])


def _keystream_block(key: bytes, counter: bytes) -> bytes:
    state = _initial_state(key, counter)
    mixed = _rounds(state)
    return struct.pack("<16I", *((a + b) & _MASK for a, b in zip(mixed, state)))


def _increment(counter: bytes) -> bytes:
    low = int.from_bytes(counter[8:], "little") + 1
    return counter[:8] + (low & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "little")


def xor_key_stream(data: bytes, counter: bytes, key: bytes) -> bytes:
    """XOR ``data`` with the Salsa20 key stream.

    ``counter`` holds the 8-byte nonce followed by the 8-byte little-endian
    block counter, which advances for every 64-byte block.
    """
    data, counter, key = bytes(data), bytes(counter), bytes(key)
    _check_lengths(key, counter)
    out = bytearray()
    for start in range(0, len(data), 64):
        chunk = data[start:start + 64]
        stream = _keystream_block(key, counter)
        out += bytes(a ^ b for a, b in zip(chunk, stream))
        counter = _increment(counter)
    return bytes(out)


def encode(data: bytes) -> str:
    """Encode bytes as unpadded URL-safe base64."""
    return base64.urlsafe_b64encode(bytes(data)).decode("ascii").rstrip("=")


def fit_key(key: bytes) -> bytes:
    """Return the key truncated or zero-padded to the size of a security key."""
    return bytes(key[:KEY_SIZE]).ljust(KEY_SIZE, b"\x00")


def decode_encrypted(text: bytes | str) -> bytes:
    """Validate the length of an encrypted key and decode its base64."""
    if isinstance(text, str):
        text = text.encode("utf-8")
    if len(text) != _ENCODED_KEY_LENGTH:
        raise ValueError("cipher: the key provided is not valid")
    return decode_key(text)


class Salsa:
    """Encrypts and decrypts security keys with XSalsa20."""

    def __init__(self, key: bytes, nonce: bytes) -> None:
        if len(key) != 32 or len(nonce) != 24:
            raise ValueError("salsa: invalid cryptographic key")
        self._key = bytes(key)
        self._nonce = bytes(nonce)

    def _box(self, data: bytes) -> bytes:
        sub_key = hsalsa20(self._key, self._nonce[:16])
        counter = self._nonce[16:] + bytes(8)
        return xor_key_stream(data, counter, sub_key)

    def encrypt_key(self, key: bytes) -> str:
        """Encrypt a key and return it as unpadded URL-safe base64."""
        return encode(self._box(fit_key(key)))

    def decrypt_key(self, text: bytes | str) -> Key:
        """Decrypt a key from its 32-character base64 form."""
        return Key(self._box(decode_encrypted(text)))