"""Pin file --- a release descriptor checked into the repository.

The pin file (``tarpaulin-pin.json`` by default) records exactly one
``ReleaseDescriptor`` together with its fingerprint, so that bumping a tool
version is a one-file change next to the CI configuration.

Determinism guarantee: ``to_json()`` sorts all keys and carries no timestamp.
Two pin files for the same descriptor are byte-identical.

Example::

    {
      "fingerprint": "5f0c...",
      "generated_by": "pinfetch",
      "integrity_algorithm": "sha256",
      "pin_version": "1.0",
      "release": {"version": "0.12.4", "sha256": "a953...", ...}
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pinfetch.core.release.models import (
    DEFAULT_BASE_URL,
    ReleaseDescriptor,
    _SHA256_RE,
)
from pinfetch.exceptions import DescriptorError, PinFileError

logger = logging.getLogger(__name__)

DEFAULT_PIN_FILE = "tarpaulin-pin.json"


class PinFile:
    """A serialized ``ReleaseDescriptor`` plus integrity metadata.

    Instances built from disk keep the raw ``release`` block so that
    ``validate()`` can report every problem instead of failing on the first
    invalid field.
    """

    PIN_VERSION: str = "1.0"
    INTEGRITY_ALGORITHM: str = "sha256"

    def __init__(self, descriptor: ReleaseDescriptor) -> None:
        self._descriptor = descriptor
        self._raw_release: dict[str, Any] = descriptor.to_dict()
        self._algorithm = self.INTEGRITY_ALGORITHM
        self._fingerprint = descriptor.fingerprint()

    @property
    def descriptor(self) -> ReleaseDescriptor:
        """The pinned release."""
        return self._descriptor

    @property
    def fingerprint(self) -> str:
        """Fingerprint recorded in the file (or computed, for new pins)."""
        return self._fingerprint

    # -- Serialization ------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a dict matching the pin file schema."""
        return {
            "pin_version": self.PIN_VERSION,
            "generated_by": "pinfetch",
            "integrity_algorithm": self._algorithm,
            "release": self._descriptor.to_dict(),
            "fingerprint": self._fingerprint,
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to a deterministic JSON string."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True) + "\n"

    def write(self, path: Path) -> None:
        """Write the pin file, creating parent directories as needed."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        logger.info("Wrote pin file %s for version %s", path, self._descriptor.version)

    # -- Deserialization ----------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PinFile:
        """Build a pin file from parsed JSON.

        Raises:
            PinFileError: If the ``release`` block is missing or does not
                describe a valid release.
        """
        release = data.get("release")
        if not isinstance(release, dict):
            raise PinFileError("Pin file has no 'release' object")
        try:
            descriptor = ReleaseDescriptor.from_dict(release)
        except DescriptorError as exc:
            raise PinFileError(f"Invalid release in pin file: {exc}") from exc

        pin = cls(descriptor)
        pin._raw_release = dict(release)
        pin._algorithm = str(data.get("integrity_algorithm", cls.INTEGRITY_ALGORITHM))
        pin._fingerprint = str(data.get("fingerprint", descriptor.fingerprint()))
        return pin

    @classmethod
    def from_json(cls, json_str: str) -> PinFile:
        """Deserialize from a JSON string.

        Raises:
            PinFileError: If the string is not valid JSON or not an object.
        """
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as exc:
            raise PinFileError(f"Pin file is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise PinFileError("Pin file must contain a JSON object")
        return cls.from_dict(data)

    @classmethod
    def read(cls, path: Path) -> PinFile:
        """Read and validate a pin file from disk.

        Raises:
            PinFileError: If the file is missing, unparsable, or invalid.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise PinFileError(f"Cannot read pin file {path}: {exc}") from exc
        pin = cls.from_json(text)
        errors = pin.validate()
        if errors:
            raise PinFileError(
                f"Pin file {path} failed validation: " + "; ".join(errors)
            )
        logger.debug("Loaded pin file %s (fingerprint %s)", path, pin.fingerprint)
        return pin

    # -- Validation ---------------------------------------------------------

    def validate(self) -> list[str]:
        """Check the pin file for internal consistency.

        Checks:

        1. The integrity algorithm is ``sha256``.
        2. The raw digest is already lowercase 64-hex (no silent normalising).
        3. The base URL is HTTPS.
        4. The recorded fingerprint matches the release block.

        Returns:
            List of validation error messages. Empty means valid.
        """
        errors: list[str] = []

        if self._algorithm != self.INTEGRITY_ALGORITHM:
            errors.append(
                f"Unsupported integrity algorithm {self._algorithm!r}; "
                f"expected {self.INTEGRITY_ALGORITHM!r}"
            )

        raw_digest = str(self._raw_release.get("sha256", ""))
        if not _SHA256_RE.match(raw_digest):
            errors.append(
                f"Digest {raw_digest!r} is not lowercase 64-character hex"
            )

        base_url = str(self._raw_release.get("base_url", DEFAULT_BASE_URL))
        if not base_url.startswith("https://"):
            errors.append(f"Base URL {base_url!r} does not use https")

        expected = self._descriptor.fingerprint()
        if self._fingerprint != expected:
            errors.append(
                f"Fingerprint mismatch: file records {self._fingerprint[:16]}..., "
                f"release block hashes to {expected[:16]}..."
            )

        return errors
