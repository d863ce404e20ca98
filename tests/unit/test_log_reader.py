"""Unit tests for block/record framing."""

import io
import logging

import pytest

from lsm_manifest.components.log_reader import LogReader
from lsm_manifest.core.config import ReaderConfig
from lsm_manifest.core.errors import (
    ChecksumMismatchError,
    InvalidRecordTypeError,
    TruncatedRecordError,
    UnexpectedMiddleError,
)
from lsm_manifest.core.types import RecordType


def reader_for(data, **config):
    return LogReader(io.BytesIO(data), ReaderConfig(**config))


def test_empty_log(log_writer):
    """Test that an empty log yields None immediately."""
    reader = reader_for(b"")
    assert reader.read_payload() is None
    assert reader.read_payload() is None


def test_single_full_record(log_writer):
    """Test reading one Full record."""
    writer = log_writer()
    writer.add_record(b"hello")
    reader = reader_for(writer.data())

    assert reader.read_payload() == b"hello"
    assert reader.payload_start == 0
    assert reader.position == 7 + 5
    assert reader.read_payload() is None
    assert reader.diagnostics == []


def test_records_returned_in_order(log_writer):
    """Test that payloads come back in write order."""
    writer = log_writer()
    payloads = [b"a" * n for n in (1, 10, 100, 1000)]
    for p in payloads:
        writer.add_record(p)

    assert list(reader_for(writer.data())) == payloads


def test_fragmented_record_within_block(log_writer):
    """Test First/Middle/Last reassembly inside one block."""
    writer = log_writer(max_fragment=10)
    payload = bytes(range(45))
    writer.add_record(payload)
    reader = reader_for(writer.data())

    types = [f.record_type for f in reader_for(writer.data()).fragments()]
    assert types == [RecordType.FIRST] + [RecordType.MIDDLE] * 3 + [RecordType.LAST]
    assert reader.read_payload() == payload
    assert reader.read_payload() is None


def test_record_spanning_many_blocks(log_writer):
    """Test a payload larger than several 32 KiB blocks."""
    payload = bytes(i % 251 for i in range(100_000))
    writer = log_writer()
    writer.add_record(payload)
    writer.add_record(b"after")

    reader = reader_for(writer.data())
    assert reader.read_payload() == payload
    assert reader.read_payload() == b"after"
    assert reader.read_payload() is None


@pytest.mark.parametrize("block_size", [16, 32, 64, 100])
def test_small_blocks_match_full_record(log_writer, block_size):
    """Test that splitting across blocks gives the same payload as a Full record."""
    payload = b"the quick brown fox jumps over the lazy dog" * 3
    writer = log_writer(block_size=block_size)
    writer.add_record(payload)
    writer.add_record(b"x")

    reader = reader_for(writer.data(), block_size=block_size)
    assert reader.read_payload() == payload
    assert reader.read_payload() == b"x"
    assert reader.read_payload() is None


def test_block_trailer_is_skipped(log_writer):
    """Test that fewer than 7 bytes at a block end are treated as padding."""
    writer = log_writer(block_size=64)
    writer.add_record(b"p" * 54)  # 7 + 54 = 61, leaves a 3 byte trailer
    writer.add_record(b"second")
    data = writer.data()
    assert data[61:64] == b"\x00\x00\x00"

    reader = reader_for(data, block_size=64)
    assert reader.read_payload() == b"p" * 54
    assert reader.read_payload() == b"second"
    assert reader.payload_start == 64
    assert reader.read_payload() is None


def test_zero_header_skips_rest_of_block(log_writer):
    """Test that an all-zero header skips to the next block."""
    writer = log_writer()
    writer.add_record(b"first")
    writer.pad_block()
    writer.add_record(b"second")

    reader = reader_for(writer.data())
    assert reader.read_payload() == b"first"
    assert reader.read_payload() == b"second"
    assert reader.payload_start == 32768
    assert reader.read_payload() is None


def test_zero_filled_tail(log_writer):
    """Test that a preallocated zero tail ends the log cleanly."""
    writer = log_writer()
    writer.add_record(b"only")
    data = writer.data() + b"\x00" * 500

    reader = reader_for(data)
    assert reader.read_payload() == b"only"
    assert reader.read_payload() is None


def test_padding_only_log():
    """Test that a log of zeros produces no payloads."""
    assert list(reader_for(b"\x00" * 100)) == []
    assert list(reader_for(b"\x00" * 70000)) == []


def test_truncated_payload(log_writer):
    """Test a header whose payload is cut short by EOF."""
    writer = log_writer()
    writer.add_record(b"complete")
    writer.add_record(b"0123456789")
    data = writer.data()[:-4]

    reader = reader_for(data)
    assert reader.read_payload() == b"complete"
    with pytest.raises(TruncatedRecordError):
        reader.read_payload()


def test_truncated_header(make_fragment):
    """Test a partial header at EOF."""
    data = make_fragment(RecordType.FULL, b"abc") + b"\x01\x02\x03"
    reader = reader_for(data)
    assert reader.read_payload() == b"abc"
    with pytest.raises(TruncatedRecordError):
        reader.read_payload()


def test_middle_without_first(make_fragment):
    """Test that an orphan Middle fragment is rejected."""
    reader = reader_for(make_fragment(RecordType.MIDDLE, b"abc"))
    with pytest.raises(UnexpectedMiddleError):
        reader.read_payload()


def test_last_without_first(make_fragment):
    """Test that an orphan Last fragment is rejected."""
    reader = reader_for(make_fragment(RecordType.LAST, b"abc"))
    with pytest.raises(UnexpectedMiddleError):
        reader.read_payload()


@pytest.mark.parametrize("record_type", [5, 9, 255])
def test_unknown_record_type(make_fragment, record_type):
    """Test that unknown record types are rejected."""
    reader = reader_for(make_fragment(record_type, b"abc"))
    with pytest.raises(InvalidRecordTypeError):
        reader.read_payload()


def test_zero_type_with_payload(make_fragment):
    """Test that a non-empty Zero-type record is rejected."""
    reader = reader_for(make_fragment(RecordType.ZERO, b"abc"))
    with pytest.raises(InvalidRecordTypeError):
        reader.read_payload()


def test_checksum_mismatch_is_advisory(make_fragment, caplog):
    """Test that a bad checksum is logged and recorded but decoding continues."""
    data = make_fragment(RecordType.FULL, b"abc", crc=0x12345678)
    data += make_fragment(RecordType.FULL, b"def")
    reader = reader_for(data)

    with caplog.at_level(logging.WARNING):
        assert reader.read_payload() == b"abc"
        assert reader.read_payload() == b"def"

    assert "CRC mismatch" in caplog.text
    assert len(reader.diagnostics) == 1
    diag = reader.diagnostics[0]
    assert diag.offset == 0
    assert diag.length == 3


def test_strict_checksums(make_fragment):
    """Test that strict mode raises on a bad checksum."""
    reader = reader_for(make_fragment(RecordType.FULL, b"abc", crc=1), strict_checksums=True)
    with pytest.raises(ChecksumMismatchError):
        reader.read_payload()


def test_checksums_can_be_disabled(make_fragment):
    """Test that verification can be turned off."""
    reader = reader_for(make_fragment(RecordType.FULL, b"abc", crc=1), verify_checksums=False)
    assert reader.read_payload() == b"abc"
    assert reader.diagnostics == []


def test_interrupted_fragmented_record(make_fragment, caplog):
    """Test that a Full record after an unfinished First wins."""
    data = make_fragment(RecordType.FIRST, b"lost")
    data += make_fragment(RecordType.FULL, b"kept")
    reader = reader_for(data)

    with caplog.at_level(logging.WARNING):
        assert reader.read_payload() == b"kept"
    assert "interrupts" in caplog.text


def test_eof_inside_fragmented_record(make_fragment, caplog):
    """Test that EOF after First but before Last ends the log."""
    data = make_fragment(RecordType.FULL, b"done")
    data += make_fragment(RecordType.FIRST, b"partial")
    reader = reader_for(data)

    assert reader.read_payload() == b"done"
    with caplog.at_level(logging.WARNING):
        assert reader.read_payload() is None
    assert "dropping" in caplog.text


def test_empty_full_record(make_fragment):
    """Test that a Full record with no payload is returned as empty bytes."""
    reader = reader_for(make_fragment(RecordType.FULL, b""))
    assert reader.read_payload() == b""
    assert reader.read_payload() is None
