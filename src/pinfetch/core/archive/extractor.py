"""Safe tarball extraction.

Members are checked before anything is written: absolute paths, ``..``
components, links resolving outside the destination, and device or FIFO
entries all abort the extraction with ``ArchiveError``. Existing files are
overwritten, so extracting the same verified tarball twice yields the same
tree.
"""

from __future__ import annotations

import logging
import os
import tarfile
import zlib
from pathlib import Path, PurePosixPath

from pinfetch.exceptions import ArchiveError

logger = logging.getLogger(__name__)


def _is_within(base: Path, target: Path) -> bool:
    try:
        target.relative_to(base)
    except ValueError:
        return False
    return True


def _check_member(member: tarfile.TarInfo, destination: Path) -> None:
    """Raise ArchiveError if ``member`` would escape ``destination``."""
    name = PurePosixPath(member.name)
    if name.is_absolute() or ".." in name.parts:
        raise ArchiveError(f"Unsafe path in archive: {member.name!r}")

    if member.isdev() or member.isfifo():
        raise ArchiveError(f"Special file in archive: {member.name!r}")

    target = Path(os.path.normpath(destination / member.name))
    if not _is_within(destination, target):
        raise ArchiveError(f"Unsafe path in archive: {member.name!r}")

    if member.issym():
        link = PurePosixPath(member.linkname)
        resolved = Path(os.path.normpath(target.parent / link))
        if link.is_absolute() or not _is_within(destination, resolved):
            raise ArchiveError(
                f"Symlink {member.name!r} points outside destination: {member.linkname!r}"
            )
    elif member.islnk():
        resolved = Path(os.path.normpath(destination / member.linkname))
        if not _is_within(destination, resolved):
            raise ArchiveError(
                f"Hard link {member.name!r} points outside destination: {member.linkname!r}"
            )


def extract_tarball(tarball: Path, destination: Path) -> list[str]:
    """Extract ``tarball`` into ``destination``.

    Compression is detected from the file contents, not the extension.

    Args:
        tarball: Verified tarball on disk.
        destination: Directory to unpack into; created if absent.

    Returns:
        Sorted member names that were extracted.

    Raises:
        ArchiveError: If the archive is missing, malformed, truncated, or
            contains unsafe members.
    """
    if not tarball.is_file():
        raise ArchiveError(f"Tarball not found: {tarball}")

    # Python releases with extraction filters get the "data" policy on top
    # of the member checks below.
    extract_kwargs = {"filter": "data"} if hasattr(tarfile, "data_filter") else {}

    try:
        destination.mkdir(parents=True, exist_ok=True)
        root = destination.resolve()
        with tarfile.open(tarball, "r:*") as archive:
            members = archive.getmembers()
            for member in members:
                _check_member(member, root)
            archive.extractall(root, members=members, **extract_kwargs)
    except (tarfile.TarError, EOFError, zlib.error, OSError) as exc:
        raise ArchiveError(f"Cannot extract {tarball.name}: {exc}") from exc

    names = sorted(member.name for member in members)
    logger.info("Extracted %d member(s) from %s into %s", len(names), tarball.name, root)
    return names
