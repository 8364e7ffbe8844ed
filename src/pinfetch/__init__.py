"""pinfetch: fetch, verify, and unpack pinned release tarballs for CI."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"
