"""Block/record framing for MANIFEST log files.

Reassembles logical payloads from checksummed fragments laid out in
fixed-size blocks.
"""

from __future__ import annotations

import logging
import struct
from typing import BinaryIO, Iterator, NamedTuple

from ..core.config import ReaderConfig
from ..core.errors import (
    ChecksumMismatchError,
    InvalidRecordTypeError,
    TruncatedRecordError,
    UnexpectedMiddleError,
)
from ..core.types import HEADER_FMT, HEADER_SIZE, RecordType
from . import checksum

logger = logging.getLogger(__name__)

# Log record format:
# [masked crc32c (4B)] [length (2B)] [type (1B)] [payload (length B)]
# A record never starts in the last 6 bytes of a block; those are zero padding.


class Fragment(NamedTuple):
    """One physical record as it appears in the file."""
    offset: int
    checksum: int
    length: int
    record_type: int
    payload: bytes


class ChecksumDiagnostic(NamedTuple):
    """A fragment whose stored checksum did not match its contents."""
    offset: int
    length: int
    expected: int
    actual: int


class LogReader:
    """Pull-based reader of logical payloads from a log file.

    Args:
        stream: Binary file object positioned at the start of the log
        config: Reader configuration

    Invariants:
        - Fragments are consumed strictly in file order
        - Exactly one payload is produced per Full or First..Last run
        - Checksum mismatches are recorded but only fatal in strict mode
    """

    def __init__(self, stream: BinaryIO, config: ReaderConfig | None = None):
        self.config = config or ReaderConfig()
        self.diagnostics: list[ChecksumDiagnostic] = []
        self._stream = stream
        self._offset = stream.tell()
        self._payload_start = self._offset

    @property
    def position(self) -> int:
        """File offset just past the last consumed byte."""
        return self._offset

    @property
    def payload_start(self) -> int:
        """File offset of the first header of the last returned payload."""
        return self._payload_start

    def _read(self, n: int) -> bytes:
        data = self._stream.read(n)
        self._offset += len(data)
        return data

    def _skip_to_block_end(self) -> bool:
        """Consume the rest of the current block. Returns False on EOF."""
        left = -self._offset % self.config.block_size
        return len(self._read(left)) == left

    def _read_fragment(self) -> Fragment | None:
        """Read the next non-padding fragment, or None at end of file."""
        block_size = self.config.block_size
        while True:
            left_in_block = block_size - self._offset % block_size
            if left_in_block < HEADER_SIZE:
                # Block trailer too small for a header
                if not self._skip_to_block_end():
                    return None
                continue

            header_offset = self._offset
            header = self._read(HEADER_SIZE)
            if not header:
                return None
            if len(header) < HEADER_SIZE:
                raise TruncatedRecordError(header_offset, HEADER_SIZE, len(header))

            crc, length, record_type = struct.unpack(HEADER_FMT, header)
            if crc == 0 and length == 0 and record_type == 0:
                logger.debug(f"Zero header at offset {header_offset}, skipping to next block")
                if not self._skip_to_block_end():
                    return None
                continue

            payload = self._read(length)
            if len(payload) < length:
                raise TruncatedRecordError(header_offset, HEADER_SIZE + length, HEADER_SIZE + len(payload))

            fragment = Fragment(header_offset, crc, length, record_type, payload)
            if self.config.verify_checksums:
                self._check(fragment)
            return fragment

    def _check(self, fragment: Fragment) -> None:
        expected = checksum.unmask(fragment.checksum)
        actual = checksum.compute(fragment.record_type, fragment.payload)
        if actual == expected:
            return
        if self.config.strict_checksums:
            raise ChecksumMismatchError(fragment.offset, expected, actual)
        logger.warning(
            f"CRC mismatch: expected {expected:x}, got {actual:x}, "
            f"current offset in file: {self._offset}, size of last payload: {fragment.length}"
        )
        self.diagnostics.append(
            ChecksumDiagnostic(fragment.offset, fragment.length, expected, actual)
        )

    def fragments(self) -> Iterator[Fragment]:
        """Iterate raw fragments without reassembly."""
        while True:
            fragment = self._read_fragment()
            if fragment is None:
                return
            yield fragment

    def read_payload(self) -> bytes | None:
        """Return the next complete logical payload, or None at end of file."""
        parts: list[bytes] | None = None
        start = self._offset

        while True:
            fragment = self._read_fragment()
            if fragment is None:
                if parts is not None:
                    logger.warning(
                        f"Log ended inside a fragmented record starting at {start}, dropping it"
                    )
                return None

            try:
                record_type = RecordType(fragment.record_type)
            except ValueError:
                raise InvalidRecordTypeError(fragment.offset, fragment.record_type) from None

            if record_type is RecordType.FULL:
                if parts is not None:
                    logger.warning(f"Full record at {fragment.offset} interrupts record at {start}")
                self._payload_start = fragment.offset
                return fragment.payload
            elif record_type is RecordType.FIRST:
                if parts is not None:
                    logger.warning(f"First record at {fragment.offset} interrupts record at {start}")
                parts = [fragment.payload]
                start = fragment.offset
            elif record_type is RecordType.MIDDLE:
                if parts is None:
                    raise UnexpectedMiddleError(fragment.offset, fragment.record_type)
                parts.append(fragment.payload)
            elif record_type is RecordType.LAST:
                if parts is None:
                    raise UnexpectedMiddleError(fragment.offset, fragment.record_type)
                parts.append(fragment.payload)
                self._payload_start = start
                return b"".join(parts)
            else:
                raise InvalidRecordTypeError(fragment.offset, fragment.record_type)

    def __iter__(self) -> Iterator[bytes]:
        while True:
            payload = self.read_payload()
            if payload is None:
                return
            yield payload
