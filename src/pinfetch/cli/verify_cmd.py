"""``pinfetch verify`` and ``pinfetch extract`` --- work on a local tarball.

``verify`` checks a tarball against ``--sha256`` or every entry of a
``--checksum-file``. ``extract`` verifies against ``--sha256`` first and only
then unpacks into ``--dest``.

Exit Codes:
    0 --- Verified (and extracted, for ``extract``).
    1 --- Digest mismatch or malformed checksum file.
    2 --- Bad arguments.
    4 --- Extraction failed.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from pinfetch.cli.exit_codes import SUCCESS, exit_code_for
from pinfetch.cli.options import output_format_option
from pinfetch.cli.output import print_error, print_json
from pinfetch.core.archive import extract_tarball
from pinfetch.core.fetcher import DEFAULT_DESTINATION
from pinfetch.core.integrity import check_checksum_file, verify_digest
from pinfetch.exceptions import PinfetchError


@click.command("verify")
@click.argument(
    "tarball",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=False,
)
@click.option("--sha256", default=None, help="Expected SHA-256 of TARBALL.")
@click.option(
    "--checksum-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="sha256sum-format file; every listed file is checked.",
)
@output_format_option
def verify_command(
    tarball: Path | None,
    sha256: str | None,
    checksum_file: Path | None,
    output_format: str,
) -> None:
    """Verify a local tarball's SHA-256 digest.

    Give TARBALL with --sha256, or --checksum-file alone (like
    ``sha256sum --check``).
    """
    if checksum_file is None and (tarball is None or sha256 is None):
        raise click.UsageError("Provide TARBALL with --sha256, or --checksum-file.")
    if checksum_file is not None and (tarball is not None or sha256 is not None):
        raise click.UsageError("--checksum-file cannot be combined with TARBALL or --sha256.")

    try:
        if checksum_file is not None:
            verified = check_checksum_file(checksum_file)
        else:
            verified = {tarball.name: verify_digest(tarball, sha256)}
    except PinfetchError as exc:
        print_error(str(exc), output_format)
        sys.exit(exit_code_for(exc))

    if output_format == "json":
        print_json({"verified": verified})
    else:
        for name in sorted(verified):
            click.echo(f"{name}: OK")
    sys.exit(SUCCESS)


@click.command("extract")
@click.argument(
    "tarball",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--sha256", required=True, help="Expected SHA-256 of TARBALL.")
@click.option(
    "--dest",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_DESTINATION,
    envvar="PINFETCH_DEST",
    show_default=True,
    help="Directory to extract into.",
)
@output_format_option
def extract_command(
    tarball: Path,
    sha256: str,
    dest: Path,
    output_format: str,
) -> None:
    """Verify TARBALL against --sha256, then extract it into --dest."""
    try:
        digest = verify_digest(tarball, sha256)
        members = extract_tarball(tarball, dest)
    except PinfetchError as exc:
        print_error(str(exc), output_format)
        sys.exit(exit_code_for(exc))

    if output_format == "json":
        print_json({
            "digest": digest,
            "destination": str(dest.resolve()),
            "members": members,
        })
    else:
        click.echo(f"{tarball.name}: OK")
        click.echo(f"Extracted {len(members)} member(s) into {dest}")
    sys.exit(SUCCESS)
