"""Artifact integrity --- SHA-256 digests and ``sha256sum`` checksum files."""

from pinfetch.core.integrity.checksum_file import (
    CHECKSUM_FILENAME,
    check_checksum_file,
    parse_checksum_file,
    write_checksum_file,
)
from pinfetch.core.integrity.digest import compute_sha256, verify_digest

__all__ = [
    "CHECKSUM_FILENAME",
    "check_checksum_file",
    "compute_sha256",
    "parse_checksum_file",
    "verify_digest",
    "write_checksum_file",
]
