"""Process-wide unique identifiers."""

from __future__ import annotations

import base64
import hashlib
import threading
from datetime import datetime, timezone

_UINT64_MASK = (1 << 64) - 1


def _uvarint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


class ID(int):
    """An unsigned 64-bit identifier."""

    def unique(self, prefix: int, salt: str) -> str:
        """Derive a stable, unpadded base32 identifier from a prefix and salt."""
        material = (prefix & _UINT64_MASK).to_bytes(8, "big") + (
            int(self) & _UINT64_MASK
        ).to_bytes(8, "big")
        derived = hashlib.pbkdf2_hmac("sha1", material, salt.encode("utf-8"), 4096, 16)
        return base64.b32encode(derived).decode("ascii").strip("=")

    def __str__(self) -> str:
        return _uvarint(int(self) & _UINT64_MASK).hex().upper()

    def __repr__(self) -> str:
        return f"ID({int(self)})"


class IDGenerator:
    """Thread-safe generator of increasing identifiers."""

    def __init__(self, start: int = 0) -> None:
        self._current = start & _UINT64_MASK
        self._lock = threading.Lock()

    def next_id(self) -> ID:
        """Return the next identifier."""
        with self._lock:
            self._current = (self._current + 1) & _UINT64_MASK
            return ID(self._current)


def _seed() -> int:
    origin = datetime(2015, 1, 1, tzinfo=timezone.utc)
    return int((datetime.now(timezone.utc) - origin).total_seconds())


_default = IDGenerator(_seed())


def new_id() -> ID:
    """Return a new process-wide unique identifier."""
    return _default.next_id()