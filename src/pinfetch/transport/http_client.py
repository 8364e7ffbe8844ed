"""HTTP download client for release tarballs.

Provides a thin wrapper around ``httpx.Client`` with a standard timeout,
user-agent header, and redirect following (release downloads redirect to
object storage). Every transport problem raises ``FetchError``; nothing is
retried, because a partial or unverifiable artifact must never be trusted.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from pinfetch import __version__
from pinfetch.exceptions import FetchError

logger = logging.getLogger(__name__)

# Timeout for the download request (seconds).
DEFAULT_TIMEOUT: float = 30.0

# User-Agent sent with every request.
USER_AGENT: str = f"pinfetch/{__version__}"

_CHUNK_SIZE = 64 * 1024


def _discard(path: Path) -> None:
    # is_file() is False when a parent is not a directory, unlike unlink().
    if path.is_file():
        path.unlink()


def build_client(
    *,
    timeout: float = DEFAULT_TIMEOUT,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create the HTTP client used for downloads.

    Args:
        timeout: Request timeout in seconds.
        transport: Optional transport override (e.g. ``httpx.MockTransport``).

    Returns:
        A configured ``httpx.Client``. The caller owns and closes it.
    """
    return httpx.Client(
        timeout=timeout,
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
        transport=transport,
    )


def download_file(
    url: str,
    dest: Path,
    *,
    client: httpx.Client,
    allow_insecure: bool = False,
) -> Path:
    """Stream ``url`` into ``dest``, replacing any existing file.

    Args:
        url: Fully qualified download URL.
        dest: Local file to write.
        client: Client from ``build_client``.
        allow_insecure: Permit plain ``http://`` URLs.

    Returns:
        ``dest``.

    Raises:
        FetchError: On a non-HTTPS URL, any transport error, or a non-2xx
            status. Partially written files are removed first.
    """
    if not allow_insecure and not url.startswith("https://"):
        raise FetchError(f"Refusing to download over a non-HTTPS URL: {url}")

    logger.info("Downloading %s", url)
    received = 0
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with client.stream("GET", url) as resp:
            resp.raise_for_status()
            with dest.open("wb") as fh:
                for chunk in resp.iter_bytes(_CHUNK_SIZE):
                    fh.write(chunk)
                    received += len(chunk)
    except httpx.TimeoutException as exc:
        _discard(dest)
        raise FetchError(f"Timed out downloading {url}: {exc}") from exc
    except httpx.HTTPStatusError as exc:
        _discard(dest)
        raise FetchError(
            f"HTTP {exc.response.status_code} downloading {url}"
        ) from exc
    except httpx.HTTPError as exc:
        _discard(dest)
        raise FetchError(f"Request error downloading {url}: {exc}") from exc
    except OSError as exc:
        _discard(dest)
        raise FetchError(f"Cannot write {dest}: {exc}") from exc

    logger.info("Downloaded %d bytes to %s", received, dest)
    return dest
