"""Version 3 licenses: snappy-compressed records using the shuffled Salsa cipher."""

from __future__ import annotations

import os
from dataclasses import dataclass

from ..ciphers.shuffle import Shuffle
from ..key import Key
from .v1 import new_master_key
from .v2 import decode_license, encode_license, marshal, random_uint32


@dataclass
class V3:
    """A license holding a Salsa key and 16-byte nonce, contract and master index."""

    encryption_key: bytes = b""
    encryption_salt: bytes = b""
    user: int = 0
    sign: int = 0
    index: int = 0

    @classmethod
    def generate(cls) -> V3:
        """Create a new license with random secrets."""
        return cls(
            encryption_key=os.urandom(32),
            encryption_salt=os.urandom(16),
            user=random_uint32(),
            sign=random_uint32(),
            index=1,
        )

    @classmethod
    def parse(cls, data: str) -> V3:
        """Decode a license string without its version suffix."""
        return cls(*decode_license(data))

    def new_master_key(self, master_id: int) -> Key:
        """Create a master key for this license's contract."""
        return new_master_key(master_id, self.user, self.sign)

    def cipher(self) -> Shuffle:
        """Return the cipher that encrypts keys under this license."""
        return Shuffle(self.encryption_key, self.encryption_salt)

    def __str__(self) -> str:
        fields = marshal(
            self.encryption_key, self.encryption_salt, self.user, self.sign, self.index
        )
        return encode_license(fields, ":3")

    def contract(self) -> int:
        """Return the contract id of the license."""
        return self.user

    def signature(self) -> int:
        """Return the signature of the license."""
        return self.sign

    def master(self) -> int:
        """Return the index of the secret master key."""
        return self.index