"""Release descriptor --- the pinned identity of a tool release tarball.

A ``ReleaseDescriptor`` is fixed when the pin is authored and never computed
from runtime input. Everything the fetch pipeline needs (file names, URL,
checksum line, cache fingerprint) is derived from its fields.

Tarball naming convention::

    <tool>-<version>-<flavor>.tar.gz

Download URL::

    <base_url>/<repository>/releases/download/<version>/<tarball>
"""

from __future__ import annotations

import hashlib
import json
import re
from dataclasses import asdict, dataclass
from typing import Any

from pinfetch.exceptions import DescriptorError

# ---------------------------------------------------------------------------
# Defaults for the canonical tool
# ---------------------------------------------------------------------------

DEFAULT_TOOL = "cargo-tarpaulin"
DEFAULT_FLAVOR = "travis"
DEFAULT_REPOSITORY = "xd009642/tarpaulin"
DEFAULT_BASE_URL = "https://github.com"

_SHA256_RE = re.compile(r"^[0-9a-f]{64}$")
_VERSION_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._+-]*$")
_REPOSITORY_RE = re.compile(r"^[A-Za-z0-9._-]+/[A-Za-z0-9._-]+$")
_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def normalize_digest(digest: str) -> str:
    """Return ``digest`` stripped and lowercased.

    Raises:
        DescriptorError: If the result is not 64 hex characters.
    """
    value = digest.strip().lower()
    if not _SHA256_RE.match(value):
        raise DescriptorError(
            f"Invalid SHA-256 digest {digest!r}: expected 64 hex characters"
        )
    return value


# ---------------------------------------------------------------------------
# ReleaseDescriptor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReleaseDescriptor:
    """Pinned version and expected content digest of one release tarball.

    Attributes:
        version: Release identifier used in the tag and file name.
        sha256: Expected SHA-256 of the tarball, lowercase hex.
        tool: Tarball stem prefix (e.g. "cargo-tarpaulin").
        flavor: Tarball stem suffix (e.g. "travis").
        repository: GitHub "<org>/<project>" hosting the release.
        base_url: HTTPS origin serving release downloads.
    """

    version: str
    sha256: str
    tool: str = DEFAULT_TOOL
    flavor: str = DEFAULT_FLAVOR
    repository: str = DEFAULT_REPOSITORY
    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self) -> None:
        if not self.version or not _VERSION_RE.match(self.version):
            raise DescriptorError(f"Invalid release version: {self.version!r}")
        object.__setattr__(self, "sha256", normalize_digest(self.sha256))
        if not _NAME_RE.match(self.tool):
            raise DescriptorError(f"Invalid tool name: {self.tool!r}")
        if not _NAME_RE.match(self.flavor):
            raise DescriptorError(f"Invalid tarball flavor: {self.flavor!r}")
        if not _REPOSITORY_RE.match(self.repository):
            raise DescriptorError(
                f"Invalid repository {self.repository!r}: expected '<org>/<project>'"
            )
        if not self.base_url.startswith("https://"):
            raise DescriptorError(
                f"Release base URL must use https: {self.base_url!r}"
            )
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    # -- Derived names ------------------------------------------------------

    @property
    def filename(self) -> str:
        """Tarball stem, e.g. ``cargo-tarpaulin-0.12.4-travis``."""
        return f"{self.tool}-{self.version}-{self.flavor}"

    @property
    def tarball(self) -> str:
        """Tarball file name, e.g. ``cargo-tarpaulin-0.12.4-travis.tar.gz``."""
        return f"{self.filename}.tar.gz"

    @property
    def url(self) -> str:
        """Fully qualified HTTPS download URL for the tarball."""
        return (
            f"{self.base_url}/{self.repository}/releases/download/"
            f"{self.version}/{self.tarball}"
        )

    @property
    def checksum_line(self) -> str:
        """Line in GNU coreutils ``sha256sum`` format (two spaces)."""
        return f"{self.sha256}  {self.tarball}"

    # -- Serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, str]:
        """Return the descriptor fields as a plain dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReleaseDescriptor:
        """Build a descriptor from a dict, applying defaults for absent fields.

        Raises:
            DescriptorError: If required fields are missing or invalid.
        """
        missing = [key for key in ("version", "sha256") if not data.get(key)]
        if missing:
            raise DescriptorError(
                f"Release descriptor is missing field(s): {', '.join(missing)}"
            )
        defaults = {
            "tool": DEFAULT_TOOL,
            "flavor": DEFAULT_FLAVOR,
            "repository": DEFAULT_REPOSITORY,
            "base_url": DEFAULT_BASE_URL,
        }
        fields: dict[str, str] = {}
        for key in ("version", "sha256", *defaults):
            value = data.get(key, defaults.get(key))
            if not isinstance(value, str):
                raise DescriptorError(
                    f"Release field {key!r} must be a string, got {type(value).__name__}"
                )
            fields[key] = value
        return cls(**fields)

    def fingerprint(self) -> str:
        """SHA-256 of the canonical descriptor JSON.

        Changes whenever any pinned field changes, so it can key a CI cache
        holding the extracted tool.
        """
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


# ---------------------------------------------------------------------------
# Built-in pins
# ---------------------------------------------------------------------------

DEFAULT_VERSION = "0.12.4"

KNOWN_RELEASES: dict[str, ReleaseDescriptor] = {
    "0.12.4": ReleaseDescriptor(
        version="0.12.4",
        sha256="a9537853c7bbc2fa6ffb4b71899b44f3b49dd0a1f2d80819d89c581b961dcdde",
    ),
}


def get_known_release(version: str) -> ReleaseDescriptor:
    """Look up a built-in pin by version.

    Raises:
        DescriptorError: If no pin exists for ``version``.
    """
    try:
        return KNOWN_RELEASES[version]
    except KeyError:
        known = ", ".join(sorted(KNOWN_RELEASES)) or "none"
        raise DescriptorError(
            f"No pinned digest for version {version!r} (known: {known}); "
            "pass --sha256 explicitly"
        ) from None
