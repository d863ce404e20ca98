"""Best-effort detection of compactions in a decoded manifest.

A compaction is logged as one record of the shape
PrevLogNumber, NextFileNumber, LastSequence, DeleteFile*, AddFile*,
ColumnFamily. This is a heuristic report, not part of the format.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..core.edits import (
    AddFile,
    DeleteFile,
    FileDescriptor,
    Operation,
    SetColumnFamilyId,
    SetLastSequence,
    SetNextFileNumber,
    SetPrevLogNumber,
)

logger = logging.getLogger(__name__)

# Shortest record that can hold the pattern
MIN_COMPACTION_EDITS = 4


@dataclass
class CompactionEpisode:
    start_position: int  # index of the record in the manifest
    prev_log_number: int
    next_file_number: int
    last_sequence: int
    deleted_files: list[tuple[int, int]] = field(default_factory=list)
    new_files: list[FileDescriptor] = field(default_factory=list)
    column_family: int = 0


def find_compactions(records: Sequence[Sequence[Operation]]) -> list[CompactionEpisode]:
    """Scan decoded records for compaction-shaped edit runs.

    Args:
        records: Records as returned by ManifestReader, in file order

    Returns:
        Episodes that deleted and added at least one file each
    """
    compactions = []

    for position, edits in enumerate(records):
        if len(edits) < MIN_COMPACTION_EDITS:
            continue

        current: CompactionEpisode | None = None
        i = 0
        while i < len(edits):
            edit = edits[i]
            if isinstance(edit, SetPrevLogNumber):
                current = None
                if i + 2 < len(edits):
                    next_file, last_seq = edits[i + 1], edits[i + 2]
                    if isinstance(next_file, SetNextFileNumber) and isinstance(last_seq, SetLastSequence):
                        current = CompactionEpisode(
                            start_position=position,
                            prev_log_number=edit.log_number,
                            next_file_number=next_file.file_number,
                            last_sequence=last_seq.sequence,
                        )
                        i += 2
            elif isinstance(edit, DeleteFile):
                if current is not None:
                    current.deleted_files.append((edit.level, edit.file_number))
            elif isinstance(edit, AddFile):
                if current is not None:
                    current.new_files.append(edit.file)
            elif isinstance(edit, SetColumnFamilyId):
                if current is not None:
                    current.column_family = edit.column_family
                    if current.deleted_files and current.new_files:
                        compactions.append(current)
                    current = None
            i += 1

    logger.debug(f"Found {len(compactions)} compactions in {len(records)} records")
    return compactions
