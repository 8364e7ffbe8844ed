"""Shared click options and descriptor resolution for CLI commands.

Descriptor source precedence:

1. ``--pin-file`` (or ``PINFETCH_PIN_FILE``): the pin file wins outright.
2. ``--sha256``: an explicit pin for ``--version`` (default version if omitted).
3. The built-in ``KNOWN_RELEASES`` entry for ``--version``.

``--repository``, ``--tool``, ``--flavor`` and ``--base-url`` override the
descriptor defaults in cases 2 and 3.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click

from pinfetch.core.release import (
    DEFAULT_VERSION,
    PinFile,
    ReleaseDescriptor,
    get_known_release,
)


def descriptor_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the release-selection options to a command."""
    options = [
        click.option(
            "--version", "-V", "release_version",
            default=None,
            help=f"Release version to fetch (default: {DEFAULT_VERSION}).",
        ),
        click.option(
            "--sha256", "sha256",
            default=None,
            help="Expected SHA-256 of the tarball (required for unknown versions).",
        ),
        click.option(
            "--pin-file",
            type=click.Path(dir_okay=False, path_type=Path),
            default=None,
            envvar="PINFETCH_PIN_FILE",
            help="Read the release pin from this JSON file.",
        ),
        click.option("--repository", default=None, help="GitHub '<org>/<project>'."),
        click.option("--tool", default=None, help="Tarball name prefix."),
        click.option("--flavor", default=None, help="Tarball name suffix."),
        click.option("--base-url", default=None, help="HTTPS origin for downloads."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def output_format_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach ``--format text|json``."""
    return click.option(
        "--format", "output_format",
        type=click.Choice(["text", "json"]),
        default="text",
        help="Output format (default: text).",
    )(func)


def resolve_descriptor(
    release_version: str | None,
    sha256: str | None,
    pin_file: Path | None,
    repository: str | None = None,
    tool: str | None = None,
    flavor: str | None = None,
    base_url: str | None = None,
) -> ReleaseDescriptor:
    """Build the descriptor selected by the command-line options.

    Raises:
        PinFileError: If the pin file is unreadable or invalid.
        DescriptorError: If the version is unknown or a field is invalid.
    """
    if pin_file is not None:
        return PinFile.read(pin_file).descriptor

    version = release_version or DEFAULT_VERSION
    overrides = {
        key: value
        for key, value in (
            ("repository", repository),
            ("tool", tool),
            ("flavor", flavor),
            ("base_url", base_url),
        )
        if value is not None
    }

    if sha256 is not None:
        return ReleaseDescriptor(version=version, sha256=sha256, **overrides)

    descriptor = get_known_release(version)
    if overrides:
        descriptor = dataclasses.replace(descriptor, **overrides)
    return descriptor
