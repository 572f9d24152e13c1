"""Binary helpers for license strings: varints, snappy blocks and base64."""

from __future__ import annotations

import base64

from ..ciphers.base64url import CorruptInputError, decode_key

_MAX_DECODED_LENGTH = 0xFFFFFFFF
_MAX_VARINT_BYTES = 10


class CodecError(ValueError):
    """Raised when encoded license data is malformed."""


def put_uvarint(value: int) -> bytes:
    """Encode a non-negative integer as an unsigned LEB128 varint."""
    if value < 0:
        raise ValueError("uvarint values must not be negative")
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def read_uvarint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """Read a varint at ``offset``; return the value and the offset after it."""
    value = 0
    shift = 0
    for index, position in enumerate(range(offset, len(data))):
        byte = data[position]
        if index == _MAX_VARINT_BYTES - 1 and byte > 1:
            raise CodecError("uvarint overflows a 64-bit integer")
        value |= (byte & 0x7F) << shift
        if byte < 0x80:
            return value, position + 1
        shift += 7
    raise CodecError("uvarint is truncated")


def _literal(chunk: bytes) -> bytes:
    n = len(chunk) - 1
    if n < 60:
        header = bytes([n << 2])
    elif n < 1 << 8:
        header = bytes([60 << 2]) + n.to_bytes(1, "little")
    elif n < 1 << 16:
        header = bytes([61 << 2]) + n.to_bytes(2, "little")
    elif n < 1 << 24:
        header = bytes([62 << 2]) + n.to_bytes(3, "little")
    else:
        header = bytes([63 << 2]) + n.to_bytes(4, "little")
    return header + chunk


def snappy_encode(data: bytes) -> bytes:
    """Encode ``data`` as a snappy block made of literal runs."""
    data = bytes(data)
    if len(data) > _MAX_DECODED_LENGTH:
        raise CodecError("snappy: input is too large")
    out = bytearray(put_uvarint(len(data)))
    block = 1 << 16
    for start in range(0, len(data), block):
        out += _literal(data[start:start + block])
    return bytes(out)


def _take(data: bytes, position: int, size: int) -> int:
    if position + size > len(data):
        raise CodecError("snappy: corrupt input")
    return int.from_bytes(data[position:position + size], "little")


def snappy_decode(data: bytes) -> bytes:
    """Decode a snappy block, raising CodecError when it is corrupt."""
    data = bytes(data)
    declared, position = read_uvarint(data, 0)
    if declared > _MAX_DECODED_LENGTH:
        raise CodecError("snappy: decoded block is too large")

    out = bytearray()
    while position < len(data):
        tag = data[position]
        position += 1
        kind = tag & 3

        if kind == 0:
            length = tag >> 2
            if length >= 60:
                extra = length - 59
                length = _take(data, position, extra)
                position += extra
            length += 1
            if position + length > len(data):
                raise CodecError("snappy: corrupt input")
            out += data[position:position + length]
            position += length
        else:
            if kind == 1:
                length = 4 + ((tag >> 2) & 7)
                offset = ((tag & 0xE0) << 3) | _take(data, position, 1)
                position += 1
            elif kind == 2:
                length = 1 + (tag >> 2)
                offset = _take(data, position, 2)
                position += 2
            else:
                length = 1 + (tag >> 2)
                offset = _take(data, position, 4)
                position += 4

            if offset == 0 or offset > len(out) or len(out) + length > declared:
                raise CodecError("snappy: corrupt input")
            start = len(out) - offset
            for index in range(length):
                out.append(out[start + index])

        if len(out) > declared:
            raise CodecError("snappy: corrupt input")

    if len(out) != declared:
        raise CodecError("snappy: corrupt input")
    return bytes(out)


def b64_encode(data: bytes) -> str:
    """Encode bytes as unpadded URL-safe base64."""
    return base64.urlsafe_b64encode(bytes(data)).decode("ascii").rstrip("=")


def b64_decode(text: str | bytes) -> bytes:
    """Decode unpadded URL-safe base64, raising CodecError on bad input."""
    try:
        return decode_key(text)
    except CorruptInputError as error:
        raise CodecError(str(error)) from error