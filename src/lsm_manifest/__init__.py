"""LSM Manifest - read-only decoder for RocksDB-style MANIFEST files."""

from .components.compaction import CompactionEpisode, find_compactions
from .components.file_set import LiveFileSet, TrackedFile
from .core.config import ReaderConfig
from .core.edits import (
    AddColumnFamily,
    AddFile,
    DeleteFile,
    DropColumnFamily,
    FileDescriptor,
    Operation,
    SetColumnFamilyId,
    SetCompactionCursor,
    SetComparatorName,
    SetLastSequence,
    SetLogNumber,
    SetMaxColumnFamilyId,
    SetMinLogNumberToKeep,
    SetNextFileNumber,
    SetPrevLogNumber,
)
from .core.errors import (
    ChecksumMismatchError,
    EditDecodeError,
    InvalidRecordTypeError,
    InvalidUtf8Error,
    LogFormatError,
    MalformedFieldError,
    ManifestError,
    ObsoleteTagError,
    TrailingOrMissingBytesError,
    TruncatedRecordError,
    UnexpectedEndError,
    UnexpectedMiddleError,
    UnknownTagError,
    UnsupportedCustomFieldError,
    VarintOverflowError,
)
from .core.reader import ManifestReader, read_manifest

__all__ = [
    "ReaderConfig",
    "ManifestReader",
    "read_manifest",
    "LiveFileSet",
    "TrackedFile",
    "CompactionEpisode",
    "find_compactions",
    "FileDescriptor",
    "Operation",
    "SetComparatorName",
    "SetLogNumber",
    "SetNextFileNumber",
    "SetLastSequence",
    "SetPrevLogNumber",
    "SetMinLogNumberToKeep",
    "AddFile",
    "DeleteFile",
    "SetCompactionCursor",
    "SetColumnFamilyId",
    "AddColumnFamily",
    "DropColumnFamily",
    "SetMaxColumnFamilyId",
    "ManifestError",
    "LogFormatError",
    "TruncatedRecordError",
    "UnexpectedMiddleError",
    "InvalidRecordTypeError",
    "ChecksumMismatchError",
    "EditDecodeError",
    "UnexpectedEndError",
    "VarintOverflowError",
    "TrailingOrMissingBytesError",
    "UnknownTagError",
    "ObsoleteTagError",
    "MalformedFieldError",
    "InvalidUtf8Error",
    "UnsupportedCustomFieldError",
]
