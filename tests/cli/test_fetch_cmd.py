"""Tests for ``pinfetch fetch``.

Verifies:
    - A matching digest exits 0 and leaves the binary in --dest.
    - A flipped digest character exits 1 and extracts nothing.
    - An unreachable host exits 3.
    - Unknown versions and bad pin files exit 2.
    - JSON output and pin-file driven runs.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path

from click.testing import CliRunner

from pinfetch.cli.main import cli
from pinfetch.core.release import PinFile, ReleaseDescriptor


def _flip(digest: str) -> str:
    return digest[:-1] + ("1" if digest[-1] == "0" else "0")


class TestFetchSuccess:
    """Digest matches the pin."""

    def test_exit_zero_and_binary_present(
        self, runner: CliRunner, use_transport, serve, tmp_path: Path,
        tarball_bytes: bytes, tarball_digest: str,
    ) -> None:
        use_transport(serve(tarball_bytes))
        dest = tmp_path / ".ci"
        result = runner.invoke(
            cli, ["fetch", "--sha256", tarball_digest, "--dest", str(dest)]
        )
        assert result.exit_code == 0, result.output
        assert (dest / "cargo-tarpaulin").is_file()
        assert "VERIFIED" in result.output

    def test_json_output(
        self, runner: CliRunner, use_transport, serve, tmp_path: Path,
        tarball_bytes: bytes, tarball_digest: str,
    ) -> None:
        use_transport(serve(tarball_bytes))
        result = runner.invoke(
            cli,
            ["fetch", "--sha256", tarball_digest, "--dest", str(tmp_path), "--format", "json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["state"] == "DONE"
        assert data["digest"] == tarball_digest
        assert data["members"] == ["cargo-tarpaulin"]
        assert data["release"]["tarball"] == "cargo-tarpaulin-0.12.4-travis.tar.gz"

    def test_dest_from_environment(
        self, runner: CliRunner, use_transport, serve, tmp_path: Path,
        tarball_bytes: bytes, tarball_digest: str,
    ) -> None:
        use_transport(serve(tarball_bytes))
        dest = tmp_path / "from-env"
        result = runner.invoke(
            cli, ["fetch", "--sha256", tarball_digest], env={"PINFETCH_DEST": str(dest)}
        )
        assert result.exit_code == 0
        assert (dest / "cargo-tarpaulin").is_file()

    def test_from_pin_file(
        self, runner: CliRunner, use_transport, serve, tmp_path: Path,
        tarball_bytes: bytes, descriptor: ReleaseDescriptor,
    ) -> None:
        use_transport(serve(tarball_bytes))
        pin_path = tmp_path / "tarpaulin-pin.json"
        PinFile(descriptor).write(pin_path)
        result = runner.invoke(
            cli, ["fetch", "--pin-file", str(pin_path), "--dest", str(tmp_path / ".ci")]
        )
        assert result.exit_code == 0

    def test_verbose_logging(
        self, runner: CliRunner, use_transport, serve, tmp_path: Path,
        tarball_bytes: bytes, tarball_digest: str,
    ) -> None:
        use_transport(serve(tarball_bytes))
        result = runner.invoke(
            cli, ["-v", "fetch", "--sha256", tarball_digest, "--dest", str(tmp_path)]
        )
        assert result.exit_code == 0
        assert "VERIFIED" in result.output


class TestFetchFailures:
    """Each failure class has its own exit code."""

    def test_digest_mismatch_exits_1(
        self, runner: CliRunner, use_transport, serve, tmp_path: Path,
        tarball_bytes: bytes, tarball_digest: str,
    ) -> None:
        use_transport(serve(tarball_bytes))
        dest = tmp_path / ".ci"
        result = runner.invoke(
            cli, ["fetch", "--sha256", _flip(tarball_digest), "--dest", str(dest)]
        )
        assert result.exit_code == 1
        assert "FAILED" in result.output
        assert not (dest / "cargo-tarpaulin").exists()

    def test_builtin_pin_rejects_other_bytes(
        self, runner: CliRunner, use_transport, serve, tmp_path: Path, tarball_bytes: bytes,
    ) -> None:
        use_transport(serve(tarball_bytes))
        result = runner.invoke(cli, ["fetch", "--dest", str(tmp_path)])
        assert result.exit_code == 1

    def test_unreachable_exits_3(
        self, runner: CliRunner, use_transport, unreachable, tmp_path: Path,
        tarball_digest: str,
    ) -> None:
        use_transport(unreachable)
        result = runner.invoke(
            cli, ["fetch", "--sha256", tarball_digest, "--dest", str(tmp_path)]
        )
        assert result.exit_code == 3
        assert "Error" in result.output

    def test_http_404_exits_3(
        self, runner: CliRunner, use_transport, serve, tmp_path: Path, tarball_digest: str,
    ) -> None:
        use_transport(serve(b"", status_code=404))
        result = runner.invoke(
            cli, ["fetch", "--sha256", tarball_digest, "--dest", str(tmp_path)]
        )
        assert result.exit_code == 3
        assert "HTTP 404" in result.output

    def test_corrupt_archive_exits_4(
        self, runner: CliRunner, use_transport, serve, tmp_path: Path,
    ) -> None:
        payload = b"not a tarball at all"
        use_transport(serve(payload))
        result = runner.invoke(
            cli,
            ["fetch", "--sha256", hashlib.sha256(payload).hexdigest(), "--dest", str(tmp_path)],
        )
        assert result.exit_code == 4

    def test_unknown_version_exits_2(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["fetch", "--version", "9.9.9", "--dest", str(tmp_path)])
        assert result.exit_code == 2
        assert "9.9.9" in result.output

    def test_bad_digest_exits_2(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["fetch", "--sha256", "xyz", "--dest", str(tmp_path)])
        assert result.exit_code == 2

    def test_bad_pin_file_exits_2(self, runner: CliRunner, tmp_path: Path) -> None:
        pin_path = tmp_path / "pin.json"
        pin_path.write_text("{}")
        result = runner.invoke(cli, ["fetch", "--pin-file", str(pin_path)])
        assert result.exit_code == 2

    def test_json_error(
        self, runner: CliRunner, use_transport, unreachable, tmp_path: Path, tarball_digest: str,
    ) -> None:
        use_transport(unreachable)
        result = runner.invoke(
            cli,
            ["fetch", "--sha256", tarball_digest, "--dest", str(tmp_path), "--format", "json"],
        )
        assert result.exit_code == 3
        assert "error" in json.loads(result.output.strip().splitlines()[-1])


class TestFetchFilesystemErrors:
    """An unusable destination is reported, not raised as a traceback."""

    def test_dest_under_regular_file_exits_3(
        self, runner: CliRunner, use_transport, serve, tmp_path: Path,
        tarball_bytes: bytes, tarball_digest: str,
    ) -> None:
        use_transport(serve(tarball_bytes))
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        result = runner.invoke(
            cli, ["fetch", "--sha256", tarball_digest, "--dest", str(blocker / ".ci")]
        )
        assert result.exit_code == 3
        assert isinstance(result.exception, SystemExit)
        assert "Cannot write checksum file" in result.output

    def test_undecodable_pin_file_exits_2(self, runner: CliRunner, tmp_path: Path) -> None:
        pin_path = tmp_path / "pin.json"
        pin_path.write_bytes(b"\xff\xfe{}")
        result = runner.invoke(
            cli, ["fetch", "--pin-file", str(pin_path), "--dest", str(tmp_path)]
        )
        assert result.exit_code == 2
        assert "Cannot read pin file" in result.output
