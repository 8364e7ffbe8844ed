"""pinfetch exception hierarchy.

All public exceptions inherit from PinfetchError, giving callers a single
base class to catch when they want to handle any pinfetch failure without
swallowing unrelated errors. The CLI maps each subclass to its own exit code.
"""


class PinfetchError(Exception):
    """Base exception for all pinfetch errors."""


class DescriptorError(PinfetchError):
    """Raised when a release descriptor is invalid or unknown.

    Covers malformed digests, empty or path-like versions, non-HTTPS
    base URLs, and lookups of versions with no built-in pin.
    """


class PinFileError(PinfetchError):
    """Raised when a pin file cannot be read or fails validation."""


class FetchError(PinfetchError):
    """Raised when the release tarball cannot be downloaded.

    Covers DNS and TLS failures, connection errors, timeouts, and
    non-success HTTP status codes. Never retried.
    """


class IntegrityError(PinfetchError):
    """Raised when a downloaded artifact does not match its pinned digest."""


class ChecksumFileError(IntegrityError):
    """Raised when a ``sha256sum``-style checksum file is malformed."""


class ArchiveError(PinfetchError):
    """Raised when a verified tarball cannot be extracted safely.

    Covers truncated or corrupt archives and members that would escape
    the destination directory.
    """
