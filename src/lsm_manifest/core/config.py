"""Configuration for the manifest reader.

Defines the tunable parameters of the block reader and checksum handling.
"""

from __future__ import annotations

from dataclasses import dataclass

from .types import BLOCK_SIZE, HEADER_SIZE


@dataclass
class ReaderConfig:
    """Configuration parameters for reading a MANIFEST log.

    Attributes:
        block_size: Size of a physical log block in bytes
        verify_checksums: Whether to compute CRC32C for every fragment
        strict_checksums: Raise on mismatch instead of logging and continuing
    """

    block_size: int = BLOCK_SIZE  # 32 KiB
    verify_checksums: bool = True
    strict_checksums: bool = False

    def __post_init__(self) -> None:
        if self.block_size <= HEADER_SIZE:
            raise ValueError(f"block_size must exceed the {HEADER_SIZE} byte header: {self.block_size}")
