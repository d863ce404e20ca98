# Command line dump of a MANIFEST file: edits, data files and compactions.
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from lsm_manifest.components.compaction import find_compactions
from lsm_manifest.components.file_set import LiveFileSet
from lsm_manifest.core.config import ReaderConfig
from lsm_manifest.core.errors import ManifestError
from lsm_manifest.core.reader import ManifestReader
from lsm_manifest.render.text_renderer import (
    format_compaction,
    format_file,
    format_operation,
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="manifest-dump", description="Decode and print a RocksDB MANIFEST file"
    )
    p.add_argument("manifest", type=Path, help="Path to MANIFEST file")
    p.add_argument(
        "--strict-checksums",
        action="store_true",
        help="Fail on the first checksum mismatch instead of warning",
    )
    p.add_argument("--no-files", action="store_true", help="Skip the list of data files")
    p.add_argument(
        "--no-compactions", action="store_true", help="Skip the compaction report"
    )
    p.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    return p


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)s | %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    config = ReaderConfig(strict_checksums=args.strict_checksums)
    try:
        reader = ManifestReader(args.manifest, config)
    except OSError as e:
        print(f"Error opening manifest: {e}", file=sys.stderr)
        return 2

    files = LiveFileSet()
    all_edits = []
    with reader:
        try:
            pos = 0
            for edits in reader:
                newpos = reader.position
                print(f"New edits: {pos:x} {newpos - pos:x}")
                pos = newpos
                for op in edits:
                    print("  " + format_operation(op).replace("\n", "\n  "))
                files.apply(edits)
                all_edits.append(edits)
        except ManifestError as e:
            print(f"Error decoding manifest at offset {reader.position}: {e}", file=sys.stderr)
            return 1

    if not args.no_files:
        print("List of data files:")
        for i, tracked in enumerate(files.files()):
            print(f"File #{i}: {format_file(tracked.meta, deleted=tracked.deleted)}")

    if not args.no_compactions:
        compactions = find_compactions(all_edits)
        print(f"\nFound {len(compactions)} potential compactions:")
        for i, episode in enumerate(compactions):
            print(f"\nCompaction #{i + 1}")
            print(format_compaction(episode))

    if reader.diagnostics:
        print(f"{len(reader.diagnostics)} checksum mismatches", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
