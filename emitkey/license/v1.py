"""Legacy version 1 licenses, encrypted with XTEA."""

from __future__ import annotations

import math
import os
import secrets
import struct
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum

from ..ciphers.xtea import Xtea
from ..key import Key, Permission
from .codec import CodecError, b64_decode, b64_encode

# The beginning of time for license expiry stamps: 2010-01-01 00:00:00 UTC.
TIME_OFFSET = 1262304000

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)
_LICENSE_SIZE = 32
_UINT32 = 0xFFFFFFFF
_MAX_SALT = 32767


class LicenseType(IntEnum):
    """The kind of deployment a license was issued for."""

    UNKNOWN = 0
    CLOUD = 1
    ON_PREMISE = 2


def _random_uint32() -> int:
    return int.from_bytes(os.urandom(4), "big")


def new_master_key(master_id: int, contract: int, signature: int) -> Key:
    """Create a master key with a random salt for the given contract."""
    key = Key()
    key.salt = secrets.randbelow(_MAX_SALT)
    key.master = master_id
    key.contract = contract
    key.signature = signature
    key.permissions = Permission.MASTER
    return key


@dataclass
class V1:
    """A legacy license holding an XTEA key, contract, expiry and type."""

    encryption_key: str = ""
    user: int = 0
    sign: int = 0
    expires: datetime = field(default_factory=lambda: _EPOCH)
    license_type: int = LicenseType.UNKNOWN

    @classmethod
    def generate(cls) -> V1:
        """Create a new on-premise license with random secrets."""
        return cls(
            encryption_key=b64_encode(os.urandom(16)),
            user=_random_uint32(),
            sign=_random_uint32(),
            expires=_EPOCH,
            license_type=LicenseType.ON_PREMISE,
        )

    @classmethod
    def parse(cls, data: str) -> V1:
        """Decode a license string without its version suffix."""
        raw = b64_decode(data)
        if len(raw) < _LICENSE_SIZE:
            raise CodecError("license data is too short")

        user, sign, expiry, license_type = struct.unpack(">4I", raw[16:32])
        if expiry > 0:
            expiry += TIME_OFFSET

        return cls(
            encryption_key=b64_encode(raw[:16]),
            user=user,
            sign=sign,
            expires=datetime.fromtimestamp(expiry, tz=timezone.utc),
            license_type=license_type,
        )

    def new_master_key(self, master_id: int) -> Key:
        """Create a master key for this license's contract."""
        return new_master_key(master_id, self.user, self.sign)

    def cipher(self) -> Xtea:
        """Return the cipher that encrypts keys under this license."""
        return Xtea(self.encryption_key)

    def __str__(self) -> str:
        try:
            key = b64_decode(self.encryption_key)
        except CodecError:
            return ""

        expires = self.expires
        if expires.tzinfo is None:
            expires = expires.replace(tzinfo=timezone.utc)
        expiry = math.floor(expires.timestamp())
        if expiry > 0:
            expiry -= TIME_OFFSET

        output = key[:16].ljust(16, b"\x00") + struct.pack(
            ">4I",
            self.user & _UINT32,
            self.sign & _UINT32,
            expiry & _UINT32,
            int(self.license_type) & _UINT32,
        )
        return b64_encode(output) + ":1"

    def contract(self) -> int:
        """Return the contract id of the license."""
        return self.user

    def signature(self) -> int:
        """Return the signature of the license."""
        return self.sign

    def master(self) -> int:
        """Return the index of the secret master key."""
        return 1