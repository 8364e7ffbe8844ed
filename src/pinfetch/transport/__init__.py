"""Network transport for release downloads."""

from pinfetch.transport.http_client import (
    DEFAULT_TIMEOUT,
    USER_AGENT,
    build_client,
    download_file,
)

__all__ = ["DEFAULT_TIMEOUT", "USER_AGENT", "build_client", "download_file"]
