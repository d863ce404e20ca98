"""Masked CRC32C checksums for log records.

The stored checksum covers the record type byte followed by the payload.
It is masked so that a CRC of data that itself contains CRCs, or of
zero-filled regions, is unlikely to look valid.
"""

from __future__ import annotations

import crc32c

MASK_DELTA = 0xA282EAD8
_U32 = 0xFFFFFFFF


def compute(record_type: int, payload: bytes) -> int:
    """Return the unmasked CRC32C of type byte + payload."""
    return crc32c.crc32c(bytes([record_type]) + payload)


def mask(crc: int) -> int:
    return ((((crc >> 15) | (crc << 17)) & _U32) + MASK_DELTA) & _U32


def unmask(masked: int) -> int:
    rot = (masked - MASK_DELTA) & _U32
    return ((rot >> 17) | (rot << 15)) & _U32


def verify(record_type: int, payload: bytes, stored: int) -> bool:
    return compute(record_type, payload) == unmask(stored)
