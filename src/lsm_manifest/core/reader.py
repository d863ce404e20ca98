"""MANIFEST reader.

Opens a manifest file and yields its version edit records in order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from ..components.log_reader import ChecksumDiagnostic, LogReader
from ..components.version_edit import decode_version_edit
from ..interfaces.reader import PayloadSource
from .config import ReaderConfig
from .edits import Operation

logger = logging.getLogger(__name__)


class ManifestReader:
    """Read-only decoder of a MANIFEST file.

    Args:
        path: Path to the MANIFEST file
        config: Reader configuration (defaults to ReaderConfig())

    Invariants:
        - Records are returned in file order, each decoded independently
        - Structural errors propagate and end the read
        - None is returned once the log is exhausted
    """

    def __init__(self, path: str | Path, config: ReaderConfig | None = None):
        self.path = Path(path)
        self.config = config or ReaderConfig()
        self._fd = open(self.path, "rb")
        self._log: PayloadSource = LogReader(self._fd, self.config)
        self._records = 0
        logger.info(f"Opened manifest {self.path}")

    @property
    def position(self) -> int:
        return self._log.position

    @property
    def record_start(self) -> int:
        """File offset where the last returned record began."""
        return self._log.payload_start

    @property
    def diagnostics(self) -> list[ChecksumDiagnostic]:
        return self._log.diagnostics

    def read_next_record(self) -> list[Operation] | None:
        """Decode the next logical record.

        Returns:
            Operations in encoded order, or None at end of file
        """
        if self._fd is None:
            raise RuntimeError("Manifest reader is closed")

        payload = self._log.read_payload()
        if payload is None:
            logger.debug(f"End of manifest after {self._records} records")
            return None

        edits = decode_version_edit(payload)
        self._records += 1
        return edits

    def close(self) -> None:
        if self._fd:
            self._fd.close()
            self._fd = None
            logger.info(f"Closed manifest {self.path}")

    def __iter__(self) -> Iterator[list[Operation]]:
        while True:
            record = self.read_next_record()
            if record is None:
                return
            yield record

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def read_manifest(path: str | Path, config: ReaderConfig | None = None) -> list[list[Operation]]:
    """Decode every record of a manifest file."""
    with ManifestReader(path, config) as reader:
        return list(reader)
