"""Exception hierarchy for the manifest reader.

Defines all custom exceptions raised while framing and decoding a MANIFEST.
"""

from __future__ import annotations


class ManifestError(Exception):
    """Base exception for all manifest reader errors."""
    pass


class LogFormatError(ManifestError):
    """Raised when the physical block/record framing is invalid."""
    pass


class TruncatedRecordError(LogFormatError):
    """Raised when the file ends inside a record header or payload."""

    def __init__(self, offset: int, expected: int, available: int):
        self.offset = offset
        self.expected = expected
        self.available = available
        super().__init__(
            f"Truncated record at offset {offset}: "
            f"expected {expected} bytes, got {available}"
        )


class UnexpectedMiddleError(LogFormatError):
    """Raised when a Middle or Last fragment arrives with no open First."""

    def __init__(self, offset: int, record_type: int):
        self.offset = offset
        self.record_type = record_type
        super().__init__(
            f"Fragment of type {record_type} at offset {offset} has no preceding First"
        )


class InvalidRecordTypeError(LogFormatError):
    """Raised when a record header carries an unusable type byte."""

    def __init__(self, offset: int, record_type: int):
        self.offset = offset
        self.record_type = record_type
        super().__init__(f"Unexpected record type: {record_type} at offset {offset}")


class ChecksumMismatchError(LogFormatError):
    """Raised on a checksum mismatch when strict checksums are enabled."""

    def __init__(self, offset: int, expected: int, actual: int):
        self.offset = offset
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"CRC mismatch at offset {offset}: expected {expected:x}, got {actual:x}"
        )


class EditDecodeError(ManifestError):
    """Raised when a logical payload cannot be decoded into edits."""
    pass


class UnexpectedEndError(EditDecodeError):
    """Raised when a primitive read runs past the end of its buffer."""
    pass


class VarintOverflowError(EditDecodeError):
    """Raised when a varint is longer than its maximal encoding."""
    pass


class TrailingOrMissingBytesError(EditDecodeError):
    """Raised when the edit loop does not end exactly on the payload boundary."""

    def __init__(self, tag: int, position: int, size: int):
        self.tag = tag
        self.position = position
        self.size = size
        super().__init__(
            f"Payload of {size} bytes ended inside tag {tag} at position {position}"
        )


class UnknownTagError(EditDecodeError):
    """Raised for a top-level tag this reader does not recognize."""

    def __init__(self, tag: int):
        self.tag = tag
        super().__init__(f"Unknown tag: {tag}")


class ObsoleteTagError(EditDecodeError):
    """Raised for retired file-add encodings (NewFile, NewFile2, NewFile3)."""

    def __init__(self, tag: int):
        self.tag = tag
        super().__init__(f"Obsolete tag: {tag}")


class MalformedFieldError(EditDecodeError):
    """Raised when a fixed-size file attribute has the wrong length."""
    pass


class InvalidUtf8Error(EditDecodeError):
    """Raised when a string field is not valid UTF-8."""
    pass


class UnsupportedCustomFieldError(EditDecodeError):
    """Raised for an unknown AddFile sub-tag that is not safe to ignore."""

    def __init__(self, tag: int):
        self.tag = tag
        super().__init__(f"new-file4 custom field not supported: {tag}")
