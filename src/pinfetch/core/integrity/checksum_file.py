"""``sha256sum``-compatible checksum files.

Format, one entry per line::

    <sha256hex>  <filename>

Two spaces separate the digest from the name, matching GNU coreutils, so the
file written here can also be checked with ``sha256sum --check``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pinfetch.core.integrity.digest import compute_sha256
from pinfetch.core.release.models import ReleaseDescriptor, _SHA256_RE
from pinfetch.exceptions import ChecksumFileError, IntegrityError

logger = logging.getLogger(__name__)

CHECKSUM_FILENAME = "tarpaulin.sha256sum"


def write_checksum_file(
    directory: Path,
    descriptor: ReleaseDescriptor,
    filename: str = CHECKSUM_FILENAME,
) -> Path:
    """Write the descriptor's checksum line into ``directory``.

    Overwrites any existing file.

    Returns:
        Path to the written checksum file.
    """
    directory.mkdir(parents=True, exist_ok=True)
    checksum_path = directory / filename
    checksum_path.write_text(descriptor.checksum_line + "\n", encoding="utf-8")
    logger.debug("Wrote %s for %s", checksum_path, descriptor.tarball)
    return checksum_path


def parse_checksum_file(checksum_path: Path) -> dict[str, str]:
    """Parse a checksum file into ``{filename: sha256_hex}``.

    Accepts the binary-mode marker (``<hash> *<name>``) as well as the
    default two-space text form. Blank lines are ignored.

    Raises:
        ChecksumFileError: If the file is missing or unreadable, a line is malformed,
            or the file lists no entries.
    """
    if not checksum_path.is_file():
        raise ChecksumFileError(f"Checksum file not found: {checksum_path}")

    try:
        content = checksum_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ChecksumFileError(f"Cannot read checksum file {checksum_path}: {exc}") from exc

    checksums: dict[str, str] = {}
    for line_num, line in enumerate(content.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        if "  " in line:
            sha256_hex, filename = line.split("  ", maxsplit=1)
        elif " *" in line:
            sha256_hex, filename = line.split(" *", maxsplit=1)
        else:
            raise ChecksumFileError(
                f"Invalid checksum format at line {line_num}: expected "
                f"'<sha256>  <filename>', got: {line!r}"
            )
        sha256_hex = sha256_hex.lower()
        if not _SHA256_RE.match(sha256_hex):
            raise ChecksumFileError(
                f"Invalid SHA-256 digest at line {line_num}: {sha256_hex!r}"
            )
        checksums[filename] = sha256_hex

    if not checksums:
        raise ChecksumFileError(f"No checksum entries in {checksum_path}")
    return checksums


def check_checksum_file(checksum_path: Path) -> dict[str, str]:
    """Verify every file listed in a checksum file, like ``sha256sum --check``.

    Listed names are resolved relative to the checksum file's directory.
    All entries are checked before failing so the error names every bad file.

    Returns:
        ``{filename: sha256_hex}`` of the verified files.

    Raises:
        ChecksumFileError: If the checksum file is malformed.
        IntegrityError: If any listed file is missing or does not match.
    """
    expected = parse_checksum_file(checksum_path)
    base_dir = checksum_path.parent
    failures: list[str] = []

    for filename, expected_hash in sorted(expected.items()):
        target = base_dir / filename
        if not target.is_file():
            failures.append(f"{filename}: FAILED open or read")
            continue
        actual = compute_sha256(target)
        if actual != expected_hash:
            logger.error(
                "Checksum mismatch for %s: expected %s..., got %s...",
                filename,
                expected_hash[:16],
                actual[:16],
            )
            failures.append(f"{filename}: FAILED")
        else:
            logger.info("%s: OK", filename)

    if failures:
        raise IntegrityError(
            f"{len(failures)} of {len(expected)} computed checksum(s) did NOT match: "
            + "; ".join(failures)
        )
    return expected
