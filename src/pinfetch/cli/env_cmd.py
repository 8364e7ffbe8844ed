"""``pinfetch env`` and ``pinfetch known`` --- information for pipelines.

``env`` prints a shell line that appends the tool directory to ``PATH``::

    eval "$(pinfetch env --dest .ci)"

``known`` lists the built-in release pins.
"""

from __future__ import annotations

import shlex
from pathlib import Path

import click

from pinfetch.cli.options import output_format_option
from pinfetch.cli.output import print_json, print_known_releases
from pinfetch.core.fetcher import DEFAULT_DESTINATION
from pinfetch.core.release import KNOWN_RELEASES


@click.command("env")
@click.option(
    "--dest",
    type=click.Path(file_okay=False, path_type=Path),
    default=DEFAULT_DESTINATION,
    envvar="PINFETCH_DEST",
    show_default=True,
    help="Directory the tool was extracted into.",
)
def env_command(dest: Path) -> None:
    """Print an ``export PATH=...`` line for the extracted tool directory."""
    entry = shlex.quote(str(dest.resolve()))
    click.echo(f'export PATH="$PATH":{entry}')


@click.command("known")
@output_format_option
def known_command(output_format: str) -> None:
    """List built-in pinned releases."""
    if output_format == "json":
        print_json({
            version: descriptor.to_dict()
            for version, descriptor in KNOWN_RELEASES.items()
        })
    else:
        print_known_releases(KNOWN_RELEASES)
