"""Manifest reader core."""

from .reader import ManifestReader, read_manifest

__all__ = ["ManifestReader", "read_manifest"]
