"""Protocol definitions for manifest readers."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Protocol

from ..core.edits import Operation


class PayloadSource(Protocol):
    """Protocol for a source of reassembled logical payloads."""

    diagnostics: list

    @property
    def position(self) -> int:
        """File offset just past the last consumed byte."""
        ...

    @property
    def payload_start(self) -> int:
        """File offset of the first header of the last payload."""
        ...

    def read_payload(self) -> bytes | None:
        """Return the next logical payload, or None at end of log.

        Invariants:
            - Payloads are returned in file order
            - Padding never produces an empty payload
        """
        ...


class EditSource(Protocol):
    """Protocol for a source of decoded version edit records."""

    def read_next_record(self) -> Sequence[Operation] | None:
        """Return the operations of the next record, or None at end."""
        ...

    def __iter__(self) -> Iterator[Sequence[Operation]]:
        """Iterate records in file order."""
        ...
