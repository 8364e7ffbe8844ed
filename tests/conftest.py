"""Shared fixtures for pinfetch tests.

Tarballs are built in memory so every test controls the exact bytes being
served, and the network is always simulated with ``httpx.MockTransport``.
"""

from __future__ import annotations

import hashlib
import io
import tarfile
from collections.abc import Callable

import httpx
import pytest

from pinfetch.core.release import ReleaseDescriptor

TOOL_BINARY = b"#!/bin/sh\necho cargo-tarpaulin 0.12.4\n"


def build_tarball_bytes(files: dict[str, bytes]) -> bytes:
    """Return a gzip tarball containing ``files`` (name -> content)."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def make_tarball_bytes() -> Callable[[dict[str, bytes]], bytes]:
    """Factory building gzip tarballs in memory."""
    return build_tarball_bytes


@pytest.fixture
def tarball_bytes() -> bytes:
    """A release tarball shaped like the upstream one: one binary at the root."""
    return build_tarball_bytes({"cargo-tarpaulin": TOOL_BINARY})


@pytest.fixture
def tarball_digest(tarball_bytes: bytes) -> str:
    """SHA-256 of ``tarball_bytes``."""
    return hashlib.sha256(tarball_bytes).hexdigest()


@pytest.fixture
def descriptor(tarball_digest: str) -> ReleaseDescriptor:
    """A 0.12.4 descriptor pinned to the fixture tarball's digest."""
    return ReleaseDescriptor(version="0.12.4", sha256=tarball_digest)


@pytest.fixture
def serve() -> Callable[..., httpx.MockTransport]:
    """Factory for a mock transport returning fixed content.

    The returned transport records every requested URL on ``.requests``.
    """

    def _serve(content: bytes = b"", status_code: int = 200) -> httpx.MockTransport:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(status_code, content=content)

        transport = httpx.MockTransport(handler)
        transport.requests = requests  # type: ignore[attr-defined]
        return transport

    return _serve


@pytest.fixture
def unreachable() -> httpx.MockTransport:
    """A transport that fails every request with a connection error."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Name or service not known", request=request)

    return httpx.MockTransport(handler)
