"""Security keys: a 24-byte record of salt, contract, target and permissions."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import IntFlag

from . import murmur
from .channel import Channel

KEY_SIZE = 24

# The beginning of time for key expiry stamps: 2010-01-01 00:00:00 UTC.
TIME_OFFSET = 1262304000

# Hash of the empty string: the target of a key issued for "#/".
_OPEN_TARGET = 1325880984

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)
_EXACT_BIT = 1 << 23
_MAX_PARTS = 23


class Permission(IntFlag):
    """Access flags carried by a key."""

    NONE = 0
    MASTER = 1 << 0
    READ = 1 << 1
    WRITE = 1 << 2
    STORE = 1 << 3
    LOAD = 1 << 4
    PRESENCE = 1 << 5
    EXTEND = 1 << 6
    EXECUTE = 1 << 7
    READ_WRITE = READ | WRITE
    STORE_LOAD = STORE | LOAD
    ALL = 0xFF & ~MASTER


class TargetInvalidError(ValueError):
    """Raised when a key target does not end with a separator."""

    def __init__(self) -> None:
        super().__init__(
            "channel should end with `/` for strict types or `/#/` for multi level wildcard"
        )


class TargetTooLongError(ValueError):
    """Raised when a key target has more parts than a key can encode."""

    def __init__(self) -> None:
        super().__init__("channel can not have more than 23 parts")


def _bit(value: int, position: int) -> bool:
    if position < 0 or position >= 32:
        return False
    return (value >> position) & 1 == 1


class Key(bytearray):
    """A mutable security key backed by its raw bytes."""

    def __init__(self, data: bytes | bytearray | int = KEY_SIZE) -> None:
        """Wrap ``data``; an integer gives a zero-filled key of that length."""
        super().__init__(data)

    def _read(self, start: int, size: int) -> int:
        if start + size > len(self):
            raise IndexError("key is too short")
        return int.from_bytes(self[start:start + size], "big")

    def _write(self, start: int, size: int, value: int) -> None:
        if start + size > len(self):
            raise IndexError("key is too short")
        self[start:start + size] = (value & ((1 << (8 * size)) - 1)).to_bytes(size, "big")

    def is_empty(self) -> bool:
        """Return True when the key holds no bytes."""
        return len(self) == 0

    @property
    def salt(self) -> int:
        """The random salt of the key."""
        return self._read(0, 2)

    @salt.setter
    def salt(self, value: int) -> None:
        self._write(0, 2, value)

    @property
    def master(self) -> int:
        """The id of the master key this key was issued from."""
        return self._read(2, 2)

    @master.setter
    def master(self, value: int) -> None:
        self._write(2, 2, value)

    @property
    def contract(self) -> int:
        """The contract id."""
        return self._read(4, 4)

    @contract.setter
    def contract(self, value: int) -> None:
        self._write(4, 4, value)

    @property
    def signature(self) -> int:
        """The signature of the contract."""
        return self._read(8, 4)

    @signature.setter
    def signature(self, value: int) -> None:
        self._write(8, 4, value)

    @property
    def permissions(self) -> Permission:
        """The permission flags."""
        return Permission(self[15])

    @permissions.setter
    def permissions(self, value: int) -> None:
        self[15] = int(value) & 0xFF

    @property
    def expires(self) -> datetime:
        """The expiry time in UTC; the Unix epoch means the key never expires."""
        stamp = self._read(20, 4)
        if stamp > 0:
            stamp += TIME_OFFSET
        return datetime.fromtimestamp(stamp, tz=timezone.utc)

    @expires.setter
    def expires(self, value: datetime) -> None:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        stamp = math.floor(value.timestamp())
        if stamp > 0:
            stamp -= TIME_OFFSET
        self._write(20, 4, stamp)

    def validate_channel(self, channel: Channel) -> bool:
        """Return True when the channel falls within the key's target."""
        topic = channel.channel
        if not topic:
            return False

        target = self._read(16, 4)
        target_path = self._read(12, 3)

        # Keys without depth information only compare the first segment.
        if target_path == 0:
            if target == _OPEN_TARGET:
                return True
            return target == channel.target()

        if topic.endswith(b"/"):
            topic = topic[:-1]

        parts = topic.split(b"/")
        if parts[-1] == b"#":
            parts.pop()

        max_depth = next(
            (_MAX_PARTS - i for i in range(_MAX_PARTS) if _bit(target_path, i)), 0
        )
        # All parts of the key target were wildcards: compare the whole channel.
        if max_depth == 0:
            max_depth = len(parts)

        exact = _bit(target_path, 23)
        if len(parts) < max_depth or (exact and len(parts) != max_depth):
            return False

        masked = []
        for idx, part in enumerate(parts):
            if _bit(target_path, 22 - idx):
                if part == b"+":
                    return False
                masked.append(part)
            else:
                masked.append(b"+")

        return murmur.of(b"/".join(masked[:max_depth])) == target

    def set_target(self, channel: str) -> None:
        """Set the target channel of the key.

        Raises TargetInvalidError when the channel does not end with ``/`` and
        TargetTooLongError when it has more than 23 parts.
        """
        if not channel.endswith("/"):
            raise TargetInvalidError()

        parts = channel.rstrip("/").split("/")
        bit_path = _EXACT_BIT
        if parts[-1] == "#":
            parts.pop()
            bit_path = 0

        if len(parts) > _MAX_PARTS:
            raise TargetTooLongError()

        for idx, part in enumerate(parts):
            if part not in ("+", "#"):
                bit_path |= 1 << (22 - idx)

        self._write(12, 3, bit_path)
        self._write(16, 4, murmur.of_string("/".join(parts)))

    def is_expired(self) -> bool:
        """Return True when the key has an expiry time that has passed."""
        expiry = self.expires
        if expiry == _EPOCH:
            return False
        return expiry < datetime.now(timezone.utc)

    def is_master(self) -> bool:
        """Return True when the key is a master key."""
        return self.permissions == Permission.MASTER

    def has_permission(self, flag: int) -> bool:
        """Return True when all bits of ``flag`` are granted."""
        return (int(self.permissions) & int(flag)) == int(flag)

    def set_permission(self, flag: int, value: bool) -> None:
        """Grant or revoke the bits of ``flag``."""
        current = int(self.permissions)
        if value:
            self.permissions = current | int(flag)
        else:
            self.permissions = current & ~int(flag)