"""MurmurHash3 (32-bit) with the fixed seed used for channel hashing."""

from __future__ import annotations

_C1 = 0xCC9E2D51
_C2 = 0x1B873593
_MASK = 0xFFFFFFFF
_SEED = 37


def _rotl32(value: int, count: int) -> int:
    return ((value << count) | (value >> (32 - count))) & _MASK


def _mix(k1: int) -> int:
    k1 = (k1 * _C1) & _MASK
    k1 = _rotl32(k1, 15)
    return (k1 * _C2) & _MASK


def of(data: bytes) -> int:
    """Return the 32-bit murmur hash of ``data``, byte-swapped to big endian."""
    data = bytes(data)
    h1 = _SEED
    block_end = len(data) - len(data) % 4

    for offset in range(0, block_end, 4):
        k1 = int.from_bytes(data[offset:offset + 4], "little")
        h1 ^= _mix(k1)
        h1 = _rotl32(h1, 13)
        h1 = (h1 * 5 + 0xE6546B64) & _MASK

    tail = data[block_end:]
    if tail:
        h1 ^= _mix(int.from_bytes(tail, "little"))

    h1 ^= len(data) & _MASK
    h1 ^= h1 >> 16
    h1 = (h1 * 0x85EBCA6B) & _MASK
    h1 ^= h1 >> 13
    h1 = (h1 * 0xC2B2AE35) & _MASK
    h1 ^= h1 >> 16

    return int.from_bytes(h1.to_bytes(4, "little"), "big")


def of_string(value: str) -> int:
    """Return the murmur hash of a string's UTF-8 bytes."""
    return of(value.encode("utf-8"))