"""XTEA cipher for security keys, as used by legacy licenses."""

from __future__ import annotations

import struct

from ..key import KEY_SIZE, Key
from .base64url import decode_key
from .salsa import decode_encrypted, encode

_ROUNDS = 32
_DELTA = 0x9E3779B9
_SUM = 0xC6EF3720  # delta * rounds
_MASK = 0xFFFFFFFF


def _xor_salt(data: bytes) -> bytes:
    salt = data[:2]
    return salt + bytes(b ^ salt[i % 2] for i, b in enumerate(data[2:KEY_SIZE]))


class Xtea:
    """Encrypts and decrypts security keys with XTEA."""

    def __init__(self, value: str) -> None:
        data = decode_key(value)
        if len(value) != 22 or len(data) != 16:
            raise ValueError("xtea: invalid cryptographic key")
        self._key = struct.unpack(">4I", data)

    def _encrypt(self, data: bytes) -> bytes:
        if len(data) != KEY_SIZE:
            raise ValueError("the security key should be 24-bytes long")
        key = self._key
        out = bytearray()
        for y, z in struct.iter_unpack(">2I", data):
            total = 0
            for _ in range(_ROUNDS):
                y = (y + ((((z << 4) ^ (z >> 5)) + z) ^ (total + key[total & 3]))) & _MASK
                total = (total + _DELTA) & _MASK
                z = (z + ((((y << 4) ^ (y >> 5)) + y) ^ (total + key[(total >> 11) & 3]))) & _MASK
            out += struct.pack(">2I", y, z)
        return bytes(out)

    def _decrypt(self, data: bytes) -> bytes:
        key = self._key
        out = bytearray()
        for y, z in struct.iter_unpack(">2I", data[:KEY_SIZE]):
            total = _SUM
            for _ in range(_ROUNDS):
                z = (z - ((((y << 4) ^ (y >> 5)) + y) ^ (total + key[(total >> 11) & 3]))) & _MASK
                total = (total - _DELTA) & _MASK
                y = (y - ((((z << 4) ^ (z >> 5)) + z) ^ (total + key[total & 3]))) & _MASK
            out += struct.pack(">2I", y, z)
        return bytes(out)

    def encrypt_key(self, key: bytes) -> str:
        """Encrypt a 24-byte key and return it as unpadded URL-safe base64."""
        if len(key) < KEY_SIZE:
            raise ValueError("the security key should be 24-bytes long")
        return encode(self._encrypt(_xor_salt(bytes(key))))

    def decrypt_key(self, text: bytes | str) -> Key:
        """Decrypt a key from its 32-character base64 form."""
        data = decode_encrypted(text)
        return Key(_xor_salt(self._decrypt(data)))