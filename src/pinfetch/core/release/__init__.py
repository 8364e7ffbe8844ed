"""Release pins --- descriptors, built-in pins, and pin files.

- ``models``: ``ReleaseDescriptor``, digest normalisation, and the
  ``KNOWN_RELEASES`` registry of built-in pins.
- ``pinfile``: the JSON ``PinFile`` that records one descriptor in a
  repository.
"""

from pinfetch.core.release.models import (
    DEFAULT_VERSION,
    KNOWN_RELEASES,
    ReleaseDescriptor,
    get_known_release,
    normalize_digest,
)
from pinfetch.core.release.pinfile import DEFAULT_PIN_FILE, PinFile

__all__ = [
    "DEFAULT_PIN_FILE",
    "DEFAULT_VERSION",
    "KNOWN_RELEASES",
    "PinFile",
    "ReleaseDescriptor",
    "get_known_release",
    "normalize_digest",
]
