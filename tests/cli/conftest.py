"""Shared fixtures for CLI tests."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def use_transport(monkeypatch: pytest.MonkeyPatch) -> Callable[[httpx.BaseTransport], None]:
    """Route ``pinfetch fetch`` downloads through the given transport."""

    def _use(transport: httpx.BaseTransport) -> None:
        def fake_build_client(**kwargs: object) -> httpx.Client:
            return httpx.Client(transport=transport, follow_redirects=True)

        monkeypatch.setattr("pinfetch.cli.fetch_cmd.build_client", fake_build_client)

    return _use
