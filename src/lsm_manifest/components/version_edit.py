"""Version edit decoding.

Turns one logical payload into an ordered list of operations. NewFile4
edits carry a nested list of custom fields decoded by decode_new_file().
"""

from __future__ import annotations

import logging
from typing import Callable

from ..core.edits import (
    AddColumnFamily,
    AddFile,
    DeleteFile,
    DropColumnFamily,
    FileDescriptor,
    FileDescriptorBuilder,
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
from ..core.errors import (
    InvalidUtf8Error,
    MalformedFieldError,
    ObsoleteTagError,
    TrailingOrMissingBytesError,
    UnexpectedEndError,
    UnknownTagError,
    UnsupportedCustomFieldError,
)
from ..core.types import CUSTOM_TAG_NON_SAFE_IGNORE_MASK, OBSOLETE_TAGS, NewFileTag, Tag
from .coding import (
    ByteCursor,
    read_fixed64,
    read_length_prefixed,
    read_varint32,
    read_varint64,
)

logger = logging.getLogger(__name__)


def _decode_utf8(data: bytes, what: str) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidUtf8Error(f"{what} is not valid UTF-8: {e}") from e


# NewFile4 custom field decoders: (tag, raw field bytes) -> value

def _flag(tag: NewFileTag, data: bytes) -> bool:
    if len(data) != 1:
        raise MalformedFieldError(f"{tag.name.lower()} field wrong size: {len(data)}")
    return data[0] == 1


def _single_byte(tag: NewFileTag, data: bytes) -> int:
    if len(data) != 1:
        raise MalformedFieldError(f"{tag.name.lower()} field wrong size: {len(data)}")
    return data[0]


def _varint(tag: NewFileTag, data: bytes) -> int:
    return read_varint64(ByteCursor(data))


def _fixed64(tag: NewFileTag, data: bytes) -> int:
    return read_fixed64(ByteCursor(data))


def _text(tag: NewFileTag, data: bytes) -> str:
    return _decode_utf8(data, tag.name.lower())


def _raw(tag: NewFileTag, data: bytes) -> bytes:
    return data


_FIELD_DECODERS: dict[NewFileTag, tuple[str, Callable[[NewFileTag, bytes], object]]] = {
    NewFileTag.NEED_COMPACTION: ("needs_compaction", _flag),
    NewFileTag.MIN_LOG_NUMBER_TO_KEEP_HACK: ("min_log_number_to_keep", _fixed64),
    NewFileTag.OLDEST_BLOB_FILE_NUMBER: ("oldest_blob_file_number", _varint),
    NewFileTag.OLDEST_ANCESTER_TIME: ("oldest_ancestor_time", _varint),
    NewFileTag.FILE_CREATION_TIME: ("file_creation_time", _varint),
    NewFileTag.FILE_CHECKSUM: ("checksum", _text),
    NewFileTag.FILE_CHECKSUM_FUNC_NAME: ("checksum_function_name", _text),
    NewFileTag.TEMPERATURE: ("temperature", _single_byte),
    NewFileTag.MIN_TIMESTAMP: ("min_timestamp", _raw),
    NewFileTag.MAX_TIMESTAMP: ("max_timestamp", _raw),
    NewFileTag.UNIQUE_ID: ("unique_id", _raw),
    NewFileTag.EPOCH_NUMBER: ("epoch_number", _varint),
    NewFileTag.COMPENSATED_RANGE_DELETION_SIZE: ("compensated_range_deletion_size", _varint),
    NewFileTag.TAIL_SIZE: ("tail_size", _varint),
    NewFileTag.USER_DEFINED_TIMESTAMPS_PERSISTED: ("user_defined_timestamps_persisted", _flag),
}


def decode_new_file(cursor: ByteCursor) -> FileDescriptor:
    """Decode the body of a NewFile4 edit.

    Reads the fixed fields followed by (tag, length-prefixed value) custom
    fields up to the Terminate tag. Unknown tags are skipped unless they
    have the non-safe-ignore bit set.

    Raises:
        MalformedFieldError: A known field has an invalid encoding
        InvalidUtf8Error: A string field is not UTF-8
        UnsupportedCustomFieldError: An unknown field must not be ignored
    """
    builder = FileDescriptorBuilder(
        level=read_varint32(cursor),
        file_number=read_varint64(cursor),
        file_size=read_varint64(cursor),
        smallest_key=read_length_prefixed(cursor),
        largest_key=read_length_prefixed(cursor),
        smallest_seqno=read_varint64(cursor),
        largest_seqno=read_varint64(cursor),
    )

    while True:
        tag_value = read_varint32(cursor)
        if tag_value == NewFileTag.TERMINATE:
            return builder.build()

        field_data = read_length_prefixed(cursor)
        try:
            tag = NewFileTag(tag_value)
        except ValueError:
            if tag_value & CUSTOM_TAG_NON_SAFE_IGNORE_MASK:
                raise UnsupportedCustomFieldError(tag_value) from None
            logger.debug(f"Ignoring unknown custom field {tag_value} ({len(field_data)} bytes)")
            continue

        name, decode = _FIELD_DECODERS[tag]
        try:
            builder.set(name, decode(tag, field_data))
        except UnexpectedEndError as e:
            raise MalformedFieldError(f"{name} field too short: {len(field_data)} bytes") from e


# Top-level edit decoders: cursor -> operation

def _comparator(cursor: ByteCursor) -> Operation:
    return SetComparatorName(_decode_utf8(read_length_prefixed(cursor), "comparator name"))


def _compact_cursor(cursor: ByteCursor) -> Operation:
    level = read_varint32(cursor)
    return SetCompactionCursor(level, read_length_prefixed(cursor))


def _deleted_file(cursor: ByteCursor) -> Operation:
    level = read_varint32(cursor)
    return DeleteFile(level, read_varint64(cursor))


def _column_family_add(cursor: ByteCursor) -> Operation:
    return AddColumnFamily(_decode_utf8(read_length_prefixed(cursor), "column family name"))


_EDIT_DECODERS: dict[Tag, Callable[[ByteCursor], Operation]] = {
    Tag.COMPARATOR: _comparator,
    Tag.LOG_NUMBER: lambda c: SetLogNumber(read_varint64(c)),
    Tag.NEXT_FILE_NUMBER: lambda c: SetNextFileNumber(read_varint64(c)),
    Tag.LAST_SEQUENCE: lambda c: SetLastSequence(read_varint64(c)),
    Tag.COMPACT_CURSOR: _compact_cursor,
    Tag.DELETED_FILE: _deleted_file,
    Tag.PREV_LOG_NUMBER: lambda c: SetPrevLogNumber(read_varint64(c)),
    Tag.MIN_LOG_NUMBER_TO_KEEP: lambda c: SetMinLogNumberToKeep(read_varint64(c)),
    Tag.NEW_FILE4: lambda c: AddFile(decode_new_file(c)),
    Tag.COLUMN_FAMILY: lambda c: SetColumnFamilyId(read_varint32(c)),
    Tag.COLUMN_FAMILY_ADD: _column_family_add,
    Tag.COLUMN_FAMILY_DROP: lambda c: DropColumnFamily(),
    Tag.MAX_COLUMN_FAMILY: lambda c: SetMaxColumnFamilyId(read_varint32(c)),
}


def decode_version_edit(payload: bytes) -> list[Operation]:
    """Decode a logical payload into operations, in encoded order.

    Args:
        payload: One complete logical record

    Returns:
        Operations in the order they were encoded (possibly empty)

    Raises:
        UnknownTagError: Unrecognized top-level tag
        ObsoleteTagError: NewFile, NewFile2 or NewFile3 encoding
        TrailingOrMissingBytesError: Payload ends inside an edit
    """
    cursor = ByteCursor(payload)
    edits: list[Operation] = []

    while not cursor.at_end:
        tag_value = None
        try:
            tag_value = read_varint32(cursor)
            try:
                tag = Tag(tag_value)
            except ValueError:
                raise UnknownTagError(tag_value) from None
            if tag in OBSOLETE_TAGS:
                raise ObsoleteTagError(tag_value)
            decode = _EDIT_DECODERS.get(tag)
            if decode is None:
                raise UnknownTagError(tag_value)
            edits.append(decode(cursor))
        except UnexpectedEndError as e:
            raise TrailingOrMissingBytesError(
                tag_value if tag_value is not None else -1, cursor.position, cursor.size
            ) from e

    logger.debug(f"Decoded {len(edits)} edits from {len(payload)} byte payload")
    return edits
