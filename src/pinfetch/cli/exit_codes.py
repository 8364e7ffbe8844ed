"""CLI exit codes.

Each failure class gets its own code so a CI log shows at a glance which
gate stopped the run.
"""

from __future__ import annotations

from pinfetch.exceptions import (
    ArchiveError,
    DescriptorError,
    FetchError,
    IntegrityError,
    PinFileError,
)

SUCCESS: int = 0
INTEGRITY_ERROR: int = 1
CONFIG_ERROR: int = 2
TRANSPORT_ERROR: int = 3
ARCHIVE_ERROR: int = 4

_EXIT_CODES: tuple[tuple[type[Exception], int], ...] = (
    (IntegrityError, INTEGRITY_ERROR),
    (DescriptorError, CONFIG_ERROR),
    (PinFileError, CONFIG_ERROR),
    (FetchError, TRANSPORT_ERROR),
    (ArchiveError, ARCHIVE_ERROR),
)


def exit_code_for(exc: Exception) -> int:
    """Map a pinfetch exception to its exit code.

    Unknown exception types map to ``CONFIG_ERROR`` so the run still stops.
    """
    for exc_type, code in _EXIT_CODES:
        if isinstance(exc, exc_type):
            return code
    return CONFIG_ERROR
