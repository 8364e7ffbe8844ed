"""``pinfetch pin`` and ``pinfetch fingerprint`` --- manage release pins.

``pin`` writes a pin file (``tarpaulin-pin.json`` by default) for the selected
release. ``fingerprint`` prints the descriptor fingerprint, suitable as a CI
cache key for the extracted tool directory.

Exit Codes:
    0 --- Pin written / fingerprint printed.
    2 --- Invalid or unknown release pin.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from pinfetch.cli.exit_codes import CONFIG_ERROR, SUCCESS, exit_code_for
from pinfetch.cli.options import (
    descriptor_options,
    output_format_option,
    resolve_descriptor,
)
from pinfetch.cli.output import descriptor_to_json, print_error, print_json
from pinfetch.core.release import DEFAULT_PIN_FILE, PinFile
from pinfetch.exceptions import PinfetchError


@click.command("pin")
@descriptor_options
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_PIN_FILE,
    show_default=True,
    help="Where to write the pin file.",
)
def pin_command(
    release_version: str | None,
    sha256: str | None,
    pin_file: Path | None,
    repository: str | None,
    tool: str | None,
    flavor: str | None,
    base_url: str | None,
    output: Path,
) -> None:
    """Write a pin file recording a release version and its SHA-256."""
    try:
        descriptor = resolve_descriptor(
            release_version, sha256, pin_file, repository, tool, flavor, base_url
        )
        pin = PinFile(descriptor)
        pin.write(output)
    except PinfetchError as exc:
        print_error(str(exc))
        sys.exit(exit_code_for(exc))
    except OSError as exc:
        print_error(f"Cannot write pin file {output}: {exc}")
        sys.exit(CONFIG_ERROR)

    click.echo(f"Pinned {descriptor.tarball}")
    click.echo(f"Pin file written to: {output}")
    sys.exit(SUCCESS)


@click.command("fingerprint")
@descriptor_options
@output_format_option
def fingerprint_command(
    release_version: str | None,
    sha256: str | None,
    pin_file: Path | None,
    repository: str | None,
    tool: str | None,
    flavor: str | None,
    base_url: str | None,
    output_format: str,
) -> None:
    """Print the cache-key fingerprint of the selected release."""
    try:
        descriptor = resolve_descriptor(
            release_version, sha256, pin_file, repository, tool, flavor, base_url
        )
    except PinfetchError as exc:
        print_error(str(exc), output_format)
        sys.exit(exit_code_for(exc))

    if output_format == "json":
        print_json(descriptor_to_json(descriptor))
    else:
        click.echo(descriptor.fingerprint())
    sys.exit(SUCCESS)
