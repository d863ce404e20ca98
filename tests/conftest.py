"""Shared fixtures: a minimal MANIFEST encoder used to build test files."""

import struct
from pathlib import Path

import pytest

from lsm_manifest.components import checksum
from lsm_manifest.core.types import BLOCK_SIZE, HEADER_SIZE, NewFileTag, RecordType, Tag


def varint(n):
    out = bytearray()
    while n >= 0x80:
        out.append((n & 0x7F) | 0x80)
        n >>= 7
    out.append(n)
    return bytes(out)


def length_prefixed(data):
    return varint(len(data)) + data


class EditEncoder:
    """Encodes individual version edit entries."""

    varint = staticmethod(varint)
    length_prefixed = staticmethod(length_prefixed)

    @staticmethod
    def comparator(name):
        return varint(Tag.COMPARATOR) + length_prefixed(name.encode("utf-8"))

    @staticmethod
    def log_number(n):
        return varint(Tag.LOG_NUMBER) + varint(n)

    @staticmethod
    def next_file_number(n):
        return varint(Tag.NEXT_FILE_NUMBER) + varint(n)

    @staticmethod
    def last_sequence(n):
        return varint(Tag.LAST_SEQUENCE) + varint(n)

    @staticmethod
    def prev_log_number(n):
        return varint(Tag.PREV_LOG_NUMBER) + varint(n)

    @staticmethod
    def min_log_number_to_keep(n):
        return varint(Tag.MIN_LOG_NUMBER_TO_KEEP) + varint(n)

    @staticmethod
    def compact_cursor(level, key):
        return varint(Tag.COMPACT_CURSOR) + varint(level) + length_prefixed(key)

    @staticmethod
    def deleted_file(level, file_number):
        return varint(Tag.DELETED_FILE) + varint(level) + varint(file_number)

    @staticmethod
    def column_family(cf):
        return varint(Tag.COLUMN_FAMILY) + varint(cf)

    @staticmethod
    def column_family_add(name):
        return varint(Tag.COLUMN_FAMILY_ADD) + length_prefixed(name.encode("utf-8"))

    @staticmethod
    def column_family_drop():
        return varint(Tag.COLUMN_FAMILY_DROP)

    @staticmethod
    def max_column_family(cf):
        return varint(Tag.MAX_COLUMN_FAMILY) + varint(cf)

    @staticmethod
    def new_file4(level, file_number, file_size, smallest, largest, smallest_seqno,
                  largest_seqno, fields=()):
        """NewFile4 entry; fields is a sequence of (sub_tag, raw value bytes)."""
        out = varint(Tag.NEW_FILE4) + varint(level) + varint(file_number) + varint(file_size)
        out += length_prefixed(smallest) + length_prefixed(largest)
        out += varint(smallest_seqno) + varint(largest_seqno)
        for tag, value in fields:
            out += varint(tag) + length_prefixed(value)
        return out + varint(NewFileTag.TERMINATE)


def fragment(record_type, payload, crc=None):
    """Encode one physical record with a correct (or given) masked CRC."""
    if crc is None:
        crc = checksum.mask(checksum.compute(record_type, payload))
    return struct.pack("<IHB", crc, len(payload), record_type) + payload


class LogWriter:
    """Lays out payloads in blocks the way the engine's log writer does."""

    def __init__(self, block_size=BLOCK_SIZE, max_fragment=None):
        self.block_size = block_size
        self.max_fragment = max_fragment
        self.buf = bytearray()

    @property
    def block_offset(self):
        return len(self.buf) % self.block_size

    def add_record(self, payload):
        begin = True
        while True:
            leftover = self.block_size - self.block_offset
            if leftover < HEADER_SIZE:
                self.buf += b"\x00" * leftover
            available = self.block_size - self.block_offset - HEADER_SIZE
            n = min(len(payload), available)
            if self.max_fragment is not None:
                n = min(n, self.max_fragment)
            end = n == len(payload)
            if begin and end:
                record_type = RecordType.FULL
            elif begin:
                record_type = RecordType.FIRST
            elif end:
                record_type = RecordType.LAST
            else:
                record_type = RecordType.MIDDLE
            self.buf += fragment(record_type, payload[:n])
            payload = payload[n:]
            begin = False
            if end:
                return

    def pad_block(self):
        self.buf += b"\x00" * (-len(self.buf) % self.block_size)

    def data(self):
        return bytes(self.buf)


@pytest.fixture
def edit():
    """Version edit entry encoder."""
    return EditEncoder


@pytest.fixture
def manifest_path(tmp_path):
    """Path for a MANIFEST file in a temp directory."""
    return tmp_path / "MANIFEST-000001"


@pytest.fixture
def write_manifest(manifest_path):
    """Write payloads (or raw bytes) to the manifest file and return its path."""

    def _write(payloads=(), raw=None, **writer_args) -> Path:
        if raw is None:
            writer = LogWriter(**writer_args)
            for payload in payloads:
                writer.add_record(payload)
            raw = writer.data()
        manifest_path.write_bytes(raw)
        return manifest_path

    return _write


@pytest.fixture
def log_writer():
    """Factory for LogWriter instances."""
    return LogWriter


@pytest.fixture
def make_fragment():
    """Encoder for a single physical record."""
    return fragment
