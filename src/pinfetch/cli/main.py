"""pinfetch CLI --- fetch pinned, checksum-verified tool releases for CI.

Entry point for the ``pinfetch`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    fetch       --- Download, verify, and extract a pinned release.
    verify      --- Verify a local tarball against a digest or checksum file.
    extract     --- Verify, then extract, a local tarball.
    pin         --- Write a pin file for a release.
    fingerprint --- Print the cache-key fingerprint of a release pin.
    env         --- Print the PATH export line for the tool directory.
    known       --- List built-in release pins.

Usage::

    pinfetch fetch                              # built-in 0.12.4 pin into .ci/
    pinfetch fetch --version 0.12.4 --sha256 a953...
    pinfetch fetch --pin-file tarpaulin-pin.json --dest .ci
    pinfetch verify .ci/cargo-tarpaulin-0.12.4-travis.tar.gz --sha256 a953...
    pinfetch verify --checksum-file .ci/tarpaulin.sha256sum
    pinfetch pin --version 0.12.4 -o tarpaulin-pin.json
    eval "$(pinfetch env --dest .ci)"
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from pinfetch import __version__
from pinfetch.cli.env_cmd import env_command, known_command
from pinfetch.cli.fetch_cmd import fetch_command
from pinfetch.cli.pin_cmd import fingerprint_command, pin_command
from pinfetch.cli.verify_cmd import extract_command, verify_command


def configure_logging(verbosity: int) -> None:
    """Route ``pinfetch`` log records to stderr through rich.

    0 shows warnings and errors, 1 adds progress, 2 or more adds digests.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger("pinfetch")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.setLevel(level)


@click.group()
@click.version_option(version=__version__, prog_name="pinfetch")
@click.option(
    "--verbose", "-v",
    count=True,
    help="Increase log verbosity (-v progress, -vv debug).",
)
def cli(verbose: int) -> None:
    """pinfetch: fetch pinned, checksum-verified tool releases for CI.

    Downloads a release tarball, verifies its SHA-256 against a pinned
    digest, and unpacks it only when the digest matches.
    """
    configure_logging(verbose)


# Register all subcommands
cli.add_command(fetch_command)
cli.add_command(verify_command)
cli.add_command(extract_command)
cli.add_command(pin_command)
cli.add_command(fingerprint_command)
cli.add_command(env_command)
cli.add_command(known_command)
