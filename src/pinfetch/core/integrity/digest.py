"""SHA-256 digests of artifacts on disk."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from pinfetch.core.release.models import normalize_digest
from pinfetch.exceptions import IntegrityError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024


def compute_sha256(path: Path) -> str:
    """Return the lowercase hex SHA-256 of the file at ``path``.

    Reads in 1 MiB chunks so large tarballs are never held in memory.
    """
    digest = hashlib.sha256()
    with path.open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def verify_digest(path: Path, expected: str) -> str:
    """Check that ``path`` hashes to ``expected``.

    Args:
        path: Downloaded artifact.
        expected: Pinned SHA-256, any case.

    Returns:
        The computed digest.

    Raises:
        IntegrityError: On mismatch, or if ``path`` is not a file.
        DescriptorError: If ``expected`` is not a valid SHA-256 digest.
    """
    wanted = normalize_digest(expected)
    if not path.is_file():
        raise IntegrityError(f"Artifact not found for verification: {path}")

    actual = compute_sha256(path)
    if actual != wanted:
        logger.error("Digest mismatch for %s", path.name)
        raise IntegrityError(
            f"{path.name}: FAILED (expected sha256 {wanted}, got {actual})"
        )
    logger.debug("Digest verified for %s: %s", path.name, actual)
    return actual
