"""Version 2 licenses: snappy-compressed records encrypted with XSalsa20."""

from __future__ import annotations

import os
from dataclasses import dataclass

from ..ciphers.salsa import Salsa
from ..key import Key
from .codec import (
    CodecError,
    b64_decode,
    b64_encode,
    put_uvarint,
    read_uvarint,
    snappy_decode,
    snappy_encode,
)
from .v1 import new_master_key

_UINT32 = 0xFFFFFFFF


def random_uint32() -> int:
    """Return a cryptographically random unsigned 32-bit integer."""
    return int.from_bytes(os.urandom(4), "big")


def marshal(key: bytes, salt: bytes, user: int, sign: int, index: int) -> bytes:
    """Serialise the license fields: two length-prefixed byte strings, three varints."""
    out = bytearray()
    for blob in (bytes(key), bytes(salt)):
        out += put_uvarint(len(blob)) + blob
    for number in (user, sign, index):
        out += put_uvarint(number & _UINT32)
    return bytes(out)


def unmarshal(raw: bytes) -> tuple[bytes, bytes, int, int, int]:
    """Parse the fields written by :func:`marshal`, raising CodecError when truncated."""
    raw = bytes(raw)
    position = 0
    blobs = []
    for _ in range(2):
        length, position = read_uvarint(raw, position)
        if position + length > len(raw):
            raise CodecError("license data is truncated")
        blobs.append(raw[position:position + length])
        position += length

    numbers = []
    for _ in range(3):
        value, position = read_uvarint(raw, position)
        numbers.append(value & _UINT32)

    return blobs[0], blobs[1], numbers[0], numbers[1], numbers[2]


def encode_license(fields: bytes, suffix: str) -> str:
    """Compress and base64-encode serialised license fields, adding the version suffix."""
    return b64_encode(snappy_encode(fields)) + suffix


def decode_license(data: str) -> tuple[bytes, bytes, int, int, int]:
    """Decode a license string without its suffix into its fields."""
    return unmarshal(snappy_decode(b64_decode(data)))


@dataclass
class V2:
    """A license holding an XSalsa20 key and nonce, contract and master index."""

    encryption_key: bytes = b""
    encryption_salt: bytes = b""
    user: int = 0
    sign: int = 0
    index: int = 0

    @classmethod
    def generate(cls) -> V2:
        """Create a new license with random secrets."""
        return cls(
            encryption_key=os.urandom(32),
            encryption_salt=os.urandom(24),
            user=random_uint32(),
            sign=random_uint32(),
            index=1,
        )

    @classmethod
    def parse(cls, data: str) -> V2:
        """Decode a license string without its version suffix."""
        return cls(*decode_license(data))

    def new_master_key(self, master_id: int) -> Key:
        """Create a master key for this license's contract."""
        return new_master_key(master_id, self.user, self.sign)

    def cipher(self) -> Salsa:
        """Return the cipher that encrypts keys under this license."""
        return Salsa(self.encryption_key, self.encryption_salt)

    def __str__(self) -> str:
        fields = marshal(
            self.encryption_key, self.encryption_salt, self.user, self.sign, self.index
        )
        return encode_license(fields, ":2")

    def contract(self) -> int:
        """Return the contract id of the license."""
        return self.user

    def signature(self) -> int:
        """Return the signature of the license."""
        return self.sign

    def master(self) -> int:
        """Return the index of the secret master key."""
        return self.index