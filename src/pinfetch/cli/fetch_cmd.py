"""``pinfetch fetch`` --- Download, verify, and unpack a pinned release.

Writes ``tarpaulin.sha256sum`` and the tarball into the destination, checks
the digest, and extracts the tarball there. Append the printed PATH entry to
``PATH`` afterwards (or use ``pinfetch env``).

Exit Codes:
    0 --- Tarball fetched, verified, and extracted.
    1 --- Digest mismatch; nothing was extracted.
    2 --- Invalid or unknown release pin.
    3 --- Download failed.
    4 --- Extraction failed.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from pinfetch.cli.exit_codes import SUCCESS, exit_code_for
from pinfetch.cli.options import (
    descriptor_options,
    output_format_option,
    resolve_descriptor,
)
from pinfetch.cli.output import (
    fetch_result_to_json,
    print_error,
    print_fetch_result,
    print_json,
)
from pinfetch.core.fetcher import DEFAULT_DESTINATION, ArtifactFetcher
from pinfetch.exceptions import PinfetchError
from pinfetch.transport import DEFAULT_TIMEOUT, build_client


@click.command("fetch")
@descriptor_options
@click.option(
    "--dest",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_DESTINATION,
    envvar="PINFETCH_DEST",
    show_default=True,
    help="Cache directory for the tarball and its contents.",
)
@click.option(
    "--timeout",
    type=float,
    default=DEFAULT_TIMEOUT,
    envvar="PINFETCH_TIMEOUT",
    show_default=True,
    help="Download timeout in seconds.",
)
@output_format_option
def fetch_command(
    release_version: str | None,
    sha256: str | None,
    pin_file: Path | None,
    repository: str | None,
    tool: str | None,
    flavor: str | None,
    base_url: str | None,
    dest: Path,
    timeout: float,
    output_format: str,
) -> None:
    """Fetch a pinned release tarball, verify it, and extract it.

    Every run re-downloads and re-verifies; a previous download is never
    trusted. Extraction only happens after the SHA-256 digest matches.
    """
    try:
        descriptor = resolve_descriptor(
            release_version, sha256, pin_file, repository, tool, flavor, base_url
        )
        with build_client(timeout=timeout) as client:
            fetcher = ArtifactFetcher(descriptor, dest, client=client)
            result = fetcher.run()
    except PinfetchError as exc:
        print_error(str(exc), output_format)
        sys.exit(exit_code_for(exc))

    if output_format == "json":
        print_json(fetch_result_to_json(result))
    else:
        print_fetch_result(result)
    sys.exit(SUCCESS)
