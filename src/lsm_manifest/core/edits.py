"""Decoded version edit operations and file descriptors.

Every operation is an immutable value owned by the caller once returned.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Union

from .types import FileNumber, Key, Level, SequenceNumber


@dataclass(frozen=True)
class FileDescriptor:
    """Metadata of one SST file as recorded by a NewFile4 edit.

    Optional attributes take their documented defaults when the
    corresponding custom field is absent from the encoding.
    """

    level: Level
    file_number: FileNumber
    file_size: int
    smallest_key: Key
    largest_key: Key
    smallest_seqno: SequenceNumber
    largest_seqno: SequenceNumber
    needs_compaction: bool = False
    min_log_number_to_keep: int | None = None
    oldest_blob_file_number: FileNumber | None = None
    oldest_ancestor_time: int = 0
    file_creation_time: int = 0
    checksum: str = ""
    checksum_function_name: str = ""
    temperature: int | None = None
    unique_id: bytes = b""
    epoch_number: int = 0
    compensated_range_deletion_size: int = 0
    tail_size: int = 0
    user_defined_timestamps_persisted: bool = True
    min_timestamp: bytes | None = None
    max_timestamp: bytes | None = None


@dataclass
class FileDescriptorBuilder:
    """Accumulates NewFile4 fields until the Terminate sub-tag is read."""

    level: Level
    file_number: FileNumber
    file_size: int
    smallest_key: Key
    largest_key: Key
    smallest_seqno: SequenceNumber
    largest_seqno: SequenceNumber
    attributes: dict[str, object] = field(default_factory=dict)

    def set(self, name: str, value: object) -> None:
        self.attributes[name] = value

    def build(self) -> FileDescriptor:
        """Freeze the accumulated fields into a FileDescriptor."""
        required = {
            f.name: getattr(self, f.name) for f in fields(self) if f.name != "attributes"
        }
        return FileDescriptor(**required, **self.attributes)


@dataclass(frozen=True)
class SetComparatorName:
    name: str


@dataclass(frozen=True)
class SetLogNumber:
    log_number: int


@dataclass(frozen=True)
class SetNextFileNumber:
    file_number: FileNumber


@dataclass(frozen=True)
class SetLastSequence:
    sequence: SequenceNumber


@dataclass(frozen=True)
class SetPrevLogNumber:
    log_number: int


@dataclass(frozen=True)
class SetMinLogNumberToKeep:
    log_number: int


@dataclass(frozen=True)
class AddFile:
    file: FileDescriptor


@dataclass(frozen=True)
class DeleteFile:
    level: Level
    file_number: FileNumber


@dataclass(frozen=True)
class SetCompactionCursor:
    level: Level
    key: Key


@dataclass(frozen=True)
class SetColumnFamilyId:
    column_family: int


@dataclass(frozen=True)
class AddColumnFamily:
    name: str


@dataclass(frozen=True)
class DropColumnFamily:
    pass


@dataclass(frozen=True)
class SetMaxColumnFamilyId:
    column_family: int


Operation = Union[
    SetComparatorName,
    SetLogNumber,
    SetNextFileNumber,
    SetLastSequence,
    SetPrevLogNumber,
    SetMinLogNumberToKeep,
    AddFile,
    DeleteFile,
    SetCompactionCursor,
    SetColumnFamilyId,
    AddColumnFamily,
    DropColumnFamily,
    SetMaxColumnFamilyId,
]
