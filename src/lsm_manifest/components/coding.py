"""Primitive decoding helpers for version edit payloads.

Varints are little-endian base-128 with the continuation flag in the high bit.
"""

from __future__ import annotations

import struct

from ..core.errors import UnexpectedEndError, VarintOverflowError

MAX_VARINT32_BYTES = 5
MAX_VARINT64_BYTES = 10


class ByteCursor:
    """Read position over an immutable byte buffer.

    Args:
        data: Buffer to read from
    """

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    @property
    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def read(self, n: int) -> bytes:
        """Return exactly n bytes and advance, or raise UnexpectedEndError."""
        if n > self.remaining:
            raise UnexpectedEndError(
                f"Need {n} bytes at position {self._pos}, only {self.remaining} left"
            )
        chunk = self._data[self._pos:self._pos + n]
        self._pos += n
        return chunk

    def read_byte(self) -> int:
        if self._pos >= len(self._data):
            raise UnexpectedEndError(f"Unexpected end of buffer at position {self._pos}")
        byte = self._data[self._pos]
        self._pos += 1
        return byte


def _read_varint(cursor: ByteCursor, max_bytes: int, bits: int) -> int:
    result = 0
    shift = 0
    for _ in range(max_bytes):
        byte = cursor.read_byte()
        result |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return result & ((1 << bits) - 1)
        shift += 7
    raise VarintOverflowError(
        f"Varint{bits} longer than {max_bytes} bytes at position {cursor.position}"
    )


def read_varint32(cursor: ByteCursor) -> int:
    return _read_varint(cursor, MAX_VARINT32_BYTES, 32)


def read_varint64(cursor: ByteCursor) -> int:
    return _read_varint(cursor, MAX_VARINT64_BYTES, 64)


def read_length_prefixed(cursor: ByteCursor) -> bytes:
    """Read a varint32 length followed by that many bytes."""
    length = read_varint32(cursor)
    return cursor.read(length)


def read_fixed64(cursor: ByteCursor) -> int:
    return struct.unpack("<Q", cursor.read(8))[0]
