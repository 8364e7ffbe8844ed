"""Artifact fetch pipeline --- download, then verify, then extract.

The pipeline is a strict sequential gate::

    START -> FETCHED -> VERIFIED -> EXTRACTED -> DONE
         \\         \\          \\
          `---------`----------`---> FAILED

Any failure moves the run to ``FAILED`` and re-raises the original error, so
the tarball is never extracted unless its digest matched the pin. Every run
re-downloads and re-verifies; nothing left over from a previous run is
trusted.

Example::

    fetcher = ArtifactFetcher(get_known_release("0.12.4"), Path(".ci"))
    result = fetcher.run()
    print(fetcher.path_entry)   # append to PATH
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path

import httpx

from pinfetch.core.archive import extract_tarball
from pinfetch.core.integrity import (
    CHECKSUM_FILENAME,
    check_checksum_file,
    write_checksum_file,
)
from pinfetch.core.release import ReleaseDescriptor
from pinfetch.exceptions import FetchError
from pinfetch.transport import DEFAULT_TIMEOUT, build_client, download_file

logger = logging.getLogger(__name__)

DEFAULT_DESTINATION = Path(".ci")


class FetchState(enum.Enum):
    """Lifecycle states of one fetch run."""

    START = "start"
    FETCHED = "fetched"
    VERIFIED = "verified"
    EXTRACTED = "extracted"
    DONE = "done"
    FAILED = "failed"


_TRANSITIONS: dict[FetchState, frozenset[FetchState]] = {
    FetchState.START: frozenset({FetchState.FETCHED, FetchState.FAILED}),
    FetchState.FETCHED: frozenset({FetchState.VERIFIED, FetchState.FAILED}),
    FetchState.VERIFIED: frozenset({FetchState.EXTRACTED, FetchState.FAILED}),
    FetchState.EXTRACTED: frozenset({FetchState.DONE, FetchState.FAILED}),
    FetchState.DONE: frozenset(),
    FetchState.FAILED: frozenset(),
}


@dataclass(frozen=True)
class FetchResult:
    """Outcome of a successful fetch run.

    Attributes:
        descriptor: The release that was installed.
        state: Final state (always ``DONE`` for a returned result).
        tarball_path: Downloaded tarball.
        checksum_path: Checksum file the tarball was verified against.
        destination: Directory the tarball was extracted into.
        digest: SHA-256 of the downloaded tarball.
        members: Sorted names of the extracted archive members.
    """

    descriptor: ReleaseDescriptor
    state: FetchState
    tarball_path: Path
    checksum_path: Path
    destination: Path
    digest: str
    members: tuple[str, ...] = field(default_factory=tuple)

    @property
    def executable(self) -> Path | None:
        """Path to the tool binary, if the tarball shipped one at its root."""
        candidate = self.destination / self.descriptor.tool
        return candidate if candidate.is_file() else None


class ArtifactFetcher:
    """Download, verify, and unpack one pinned release tarball.

    Args:
        descriptor: The pinned release.
        destination: Cache directory for the checksum file, tarball, and
            extracted contents.
        client: Optional ``httpx.Client``. When omitted, one is built per
            run and closed afterwards.
        timeout: Request timeout used when building a client.
        allow_insecure: Permit non-HTTPS download URLs (tests only).
    """

    def __init__(
        self,
        descriptor: ReleaseDescriptor,
        destination: Path = DEFAULT_DESTINATION,
        *,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        allow_insecure: bool = False,
    ) -> None:
        self.descriptor = descriptor
        self.destination = Path(destination)
        self._client = client
        self._timeout = timeout
        self._allow_insecure = allow_insecure
        self._state = FetchState.START

    @property
    def state(self) -> FetchState:
        """Current pipeline state."""
        return self._state

    @property
    def path_entry(self) -> Path:
        """Absolute directory a caller should append to ``PATH``."""
        return self.destination.resolve()

    @property
    def tarball_path(self) -> Path:
        return self.destination / self.descriptor.tarball

    @property
    def checksum_path(self) -> Path:
        return self.destination / CHECKSUM_FILENAME

    def _advance(self, new_state: FetchState) -> None:
        if new_state not in _TRANSITIONS[self._state]:
            raise RuntimeError(
                f"Illegal fetch state transition {self._state.name} -> {new_state.name}"
            )
        logger.info("%s: %s -> %s", self.descriptor.filename, self._state.name, new_state.name)
        self._state = new_state

    # -- Steps --------------------------------------------------------------

    def fetch(self, client: httpx.Client) -> Path:
        """Write the checksum file and download the tarball.

        Raises:
            FetchError: If the destination cannot be written or the
                download fails.
        """
        try:
            write_checksum_file(self.destination, self.descriptor)
        except OSError as exc:
            raise FetchError(
                f"Cannot write checksum file into {self.destination}: {exc}"
            ) from exc
        download_file(
            self.descriptor.url,
            self.tarball_path,
            client=client,
            allow_insecure=self._allow_insecure,
        )
        self._advance(FetchState.FETCHED)
        return self.tarball_path

    def verify(self) -> str:
        """Check the tarball against the checksum file.

        Returns:
            The verified digest.
        """
        if self._state is not FetchState.FETCHED:
            raise RuntimeError("verify() requires a fetched artifact")
        verified = check_checksum_file(self.checksum_path)
        self._advance(FetchState.VERIFIED)
        return verified[self.descriptor.tarball]

    def extract(self) -> list[str]:
        """Unpack the verified tarball into the destination."""
        if self._state is not FetchState.VERIFIED:
            raise RuntimeError("extract() requires a verified artifact")
        members = extract_tarball(self.tarball_path, self.destination)
        self._advance(FetchState.EXTRACTED)
        return members

    # -- Driver -------------------------------------------------------------

    def run(self) -> FetchResult:
        """Run the full pipeline.

        Returns:
            A ``FetchResult`` in state ``DONE``.

        Raises:
            FetchError: If the download fails.
            IntegrityError: If the digest does not match the pin.
            ArchiveError: If extraction fails.
        """
        self._state = FetchState.START
        logger.info(
            "Fetching %s %s into %s",
            self.descriptor.tool,
            self.descriptor.version,
            self.destination,
        )
        owns_client = self._client is None
        client = self._client if self._client is not None else build_client(timeout=self._timeout)
        try:
            self.fetch(client)
            digest = self.verify()
            members = self.extract()
            self._advance(FetchState.DONE)
        except Exception:
            self._state = FetchState.FAILED
            logger.error("Fetch of %s failed", self.descriptor.tarball)
            raise
        finally:
            if owns_client:
                client.close()

        return FetchResult(
            descriptor=self.descriptor,
            state=self._state,
            tarball_path=self.tarball_path,
            checksum_path=self.checksum_path,
            destination=self.destination,
            digest=digest,
            members=tuple(members),
        )
