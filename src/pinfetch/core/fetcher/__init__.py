"""The artifact fetch pipeline and its state machine."""

from pinfetch.core.fetcher.pipeline import (
    DEFAULT_DESTINATION,
    ArtifactFetcher,
    FetchResult,
    FetchState,
)

__all__ = ["DEFAULT_DESTINATION", "ArtifactFetcher", "FetchResult", "FetchState"]
