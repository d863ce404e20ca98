"""Plain-text rendering of decoded manifest contents."""

from __future__ import annotations

from datetime import datetime, timezone

from ..components.compaction import CompactionEpisode
from ..core.edits import (
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


def format_key(key: bytes) -> str:
    """Hex dump followed by the printable (alphanumeric) characters."""
    text = "".join(chr(b) if chr(b).isascii() and chr(b).isalnum() else "." for b in key)
    return f"{key.hex()} {text}"


def format_timestamp(seconds: int) -> str:
    try:
        dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return f"{seconds} (out of range)"
    return dt.strftime("%Y-%m-%d %H:%M:%S UTC")


def format_file(meta: FileDescriptor, deleted: bool = False) -> str:
    """Render a file descriptor, omitting optional fields left at default."""
    lines = [
        "FileMetaData {",
        f"  level: {meta.level}",
        f"  file: {meta.file_number}",
        f"  size: {meta.file_size}",
        f"  smallest_key: {format_key(meta.smallest_key)}",
        f"  largest_key : {format_key(meta.largest_key)}",
        f"  seqno: {meta.smallest_seqno}..{meta.largest_seqno}",
    ]
    if meta.needs_compaction:
        lines.append("  needs_compaction: true")
    if meta.min_log_number_to_keep is not None:
        lines.append(f"  min_log_number_to_keep: {meta.min_log_number_to_keep}")
    if meta.oldest_blob_file_number is not None:
        lines.append(f"  oldest_blob_file: {meta.oldest_blob_file_number}")
    if meta.oldest_ancestor_time:
        lines.append(f"  oldest_ancester_time: {format_timestamp(meta.oldest_ancestor_time)}")
    if meta.file_creation_time:
        lines.append(f"  file_creation_time: {format_timestamp(meta.file_creation_time)}")
    if meta.epoch_number:
        lines.append(f"  epoch_number: {meta.epoch_number}")
    if meta.checksum:
        lines.append(f"  checksum: {meta.checksum}")
        lines.append(f"  checksum_func: {meta.checksum_function_name}")
    if meta.temperature is not None:
        lines.append(f"  temperature: {meta.temperature}")
    if meta.unique_id:
        lines.append(f"  unique_id: {meta.unique_id.hex()}")
    if meta.compensated_range_deletion_size:
        lines.append(f"  compensated_range_deletion_size: {meta.compensated_range_deletion_size}")
    if meta.tail_size:
        lines.append(f"  tail_size: {meta.tail_size}")
    if not meta.user_defined_timestamps_persisted:
        lines.append("  user_defined_timestamps_persisted: false")
    if meta.min_timestamp is not None:
        lines.append(f"  min_timestamp: {meta.min_timestamp.hex()}")
    if meta.max_timestamp is not None:
        lines.append(f"  max_timestamp: {meta.max_timestamp.hex()}")
    if deleted:
        lines.append("  deleted: true")
    lines.append("}")
    return "\n".join(lines)


def format_operation(op: Operation) -> str:
    if isinstance(op, SetComparatorName):
        return f"Comparator: {op.name}"
    if isinstance(op, SetLogNumber):
        return f"LogNumber: {op.log_number}"
    if isinstance(op, SetNextFileNumber):
        return f"NextFileNumber: {op.file_number}"
    if isinstance(op, SetLastSequence):
        return f"LastSequence: {op.sequence}"
    if isinstance(op, AddFile):
        return f"NewFile4 {{\n{format_file(op.file)}\n}}"
    if isinstance(op, SetColumnFamilyId):
        return f"ColumnFamily: {op.column_family}"
    if isinstance(op, AddColumnFamily):
        return f"ColumnFamilyAdd: {op.name}"
    if isinstance(op, SetPrevLogNumber):
        return f"PrevLogNumber: {op.log_number}"
    if isinstance(op, SetMaxColumnFamilyId):
        return f"MaxColumnFamily: {op.column_family}"
    if isinstance(op, DeleteFile):
        return f"DeletedFile: level {op.level} file {op.file_number}"
    if isinstance(op, SetCompactionCursor):
        return f"CompactCursor: level {op.level} key {format_key(op.key)}"
    if isinstance(op, SetMinLogNumberToKeep):
        return f"MinLogNumberToKeep: {op.log_number}"
    if isinstance(op, DropColumnFamily):
        return "ColumnFamilyDrop"
    raise TypeError(f"Not an operation: {op!r}")


def format_compaction(episode: CompactionEpisode) -> str:
    lines = [
        f"Compaction at position {episode.start_position} {{",
        f"  PrevLogNumber: {episode.prev_log_number}",
        f"  NextFileNumber: {episode.next_file_number}",
        f"  LastSequence: {episode.last_sequence}",
        "  Deleted files:",
    ]
    for level, number in episode.deleted_files:
        lines.append(f"    Level {level}: File {number}")
    lines.append("  New files:")
    for meta in episode.new_files:
        lines.append("    " + format_file(meta).replace("\n", "\n    "))
    lines.append(f"  ColumnFamily: {episode.column_family}")
    lines.append("}")
    return "\n".join(lines)
