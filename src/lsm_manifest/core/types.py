"""Common type definitions and wire constants for the MANIFEST format.

Defines fundamental types used across all components.
"""

from __future__ import annotations

from enum import IntEnum

# Core primitive types
Key = bytes
FileNumber = int
SequenceNumber = int
Level = int

# Physical log layout
BLOCK_SIZE = 0x8000
HEADER_SIZE = 7  # crc (4B) + length (2B) + type (1B)
HEADER_FMT = "<IHB"


class RecordType(IntEnum):
    """Fragment types in a log record header."""

    ZERO = 0  # preallocated / padding
    FULL = 1
    FIRST = 2
    MIDDLE = 3
    LAST = 4


class Tag(IntEnum):
    """Top-level version edit tags."""

    COMPARATOR = 1
    LOG_NUMBER = 2
    NEXT_FILE_NUMBER = 3
    LAST_SEQUENCE = 4
    COMPACT_CURSOR = 5
    DELETED_FILE = 6
    NEW_FILE = 7
    # 8 was used for large value refs
    PREV_LOG_NUMBER = 9
    MIN_LOG_NUMBER_TO_KEEP = 10
    NEW_FILE2 = 100
    NEW_FILE3 = 102
    NEW_FILE4 = 103
    COLUMN_FAMILY = 200
    COLUMN_FAMILY_ADD = 201
    COLUMN_FAMILY_DROP = 202
    MAX_COLUMN_FAMILY = 203


OBSOLETE_TAGS = frozenset({Tag.NEW_FILE, Tag.NEW_FILE2, Tag.NEW_FILE3})


class NewFileTag(IntEnum):
    """Sub-tags of a NewFile4 custom field list."""

    TERMINATE = 1
    NEED_COMPACTION = 2
    MIN_LOG_NUMBER_TO_KEEP_HACK = 3
    OLDEST_BLOB_FILE_NUMBER = 4
    OLDEST_ANCESTER_TIME = 5
    FILE_CREATION_TIME = 6
    FILE_CHECKSUM = 7
    FILE_CHECKSUM_FUNC_NAME = 8
    TEMPERATURE = 9
    MIN_TIMESTAMP = 10
    MAX_TIMESTAMP = 11
    UNIQUE_ID = 12
    EPOCH_NUMBER = 13
    COMPENSATED_RANGE_DELETION_SIZE = 14
    TAIL_SIZE = 15
    USER_DEFINED_TIMESTAMPS_PERSISTED = 16


# Unknown sub-tags with this bit set must not be ignored
CUSTOM_TAG_NON_SAFE_IGNORE_MASK = 1 << 6
