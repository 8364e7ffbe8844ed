"""Smoke tests: package imports and the CLI entry point responds."""

from __future__ import annotations

from click.testing import CliRunner

import pinfetch
from pinfetch.cli.main import cli


def test_version() -> None:
    assert pinfetch.__version__ == "0.1.0"


def test_cli_help() -> None:
    result = CliRunner().invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "pinfetch" in result.output
    for command in ("fetch", "verify", "extract", "pin", "fingerprint", "env", "known"):
        assert command in result.output


def test_cli_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output
