"""Live file set projection.

Folds decoded operations into the set of data files a manifest describes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from sortedcontainers import SortedDict

from ..core.edits import AddFile, DeleteFile, FileDescriptor, Operation
from ..interfaces.reader import EditSource

logger = logging.getLogger(__name__)


@dataclass
class TrackedFile:
    """A file seen in the manifest and whether it was later deleted."""
    meta: FileDescriptor
    deleted: bool = False


class LiveFileSet:
    """Registry of data files keyed by file number.

    Invariants:
        - An added file replaces any earlier entry with the same number
        - Deletions only mark entries, they never remove them
    """

    def __init__(self):
        self._files: SortedDict = SortedDict()
        self.missing_deletions: list[int] = []

    def apply(self, operations: Iterable[Operation]) -> None:
        """Apply one record's operations in order."""
        for op in operations:
            if isinstance(op, AddFile):
                self._files[op.file.file_number] = TrackedFile(op.file)
            elif isinstance(op, DeleteFile):
                tracked = self._files.get(op.file_number)
                if tracked is None:
                    logger.warning(f"File {op.file_number} not found for deletion")
                    self.missing_deletions.append(op.file_number)
                else:
                    tracked.deleted = True

    def replay(self, source: EditSource) -> int:
        """Apply every record from source. Returns the number of records."""
        count = 0
        for record in source:
            self.apply(record)
            count += 1
        return count

    def files(self) -> list[TrackedFile]:
        """Return all tracked files sorted by file number."""
        return list(self._files.values())

    def live_files(self) -> list[FileDescriptor]:
        return [t.meta for t in self.files() if not t.deleted]

    def levels(self) -> dict[int, list[FileDescriptor]]:
        """Group live files by level."""
        result: dict[int, list[FileDescriptor]] = {}
        for meta in self.live_files():
            result.setdefault(meta.level, []).append(meta)
        return result

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, file_number: int) -> bool:
        return file_number in self._files
