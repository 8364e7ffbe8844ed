"""Rich output formatting helpers for the pinfetch CLI.

Text output goes through a shared ``rich`` console; JSON output is a single
object printed with ``click.echo`` so it stays machine-parseable.
"""

from __future__ import annotations

import json
from typing import Any

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pinfetch.core.fetcher import FetchResult
from pinfetch.core.release import ReleaseDescriptor

console = Console()


def descriptor_to_json(descriptor: ReleaseDescriptor) -> dict[str, Any]:
    """Descriptor fields plus its derived names."""
    data: dict[str, Any] = descriptor.to_dict()
    data["tarball"] = descriptor.tarball
    data["url"] = descriptor.url
    data["fingerprint"] = descriptor.fingerprint()
    return data


def fetch_result_to_json(result: FetchResult) -> dict[str, Any]:
    """Convert a fetch result to a JSON-serializable dict."""
    executable = result.executable
    return {
        "state": result.state.name,
        "release": descriptor_to_json(result.descriptor),
        "digest": result.digest,
        "tarball_path": str(result.tarball_path),
        "destination": str(result.destination.resolve()),
        "executable": str(executable) if executable else None,
        "members": list(result.members),
    }


def print_fetch_result(result: FetchResult) -> None:
    """Print a summary panel for a completed fetch."""
    descriptor = result.descriptor
    header = Text.assemble(
        ("Tool: ", "bold"), (descriptor.tool, ""),
        ("  Version: ", "bold"), (descriptor.version, ""),
        ("  Status: ", "bold"), ("VERIFIED", "bold green"),
    )
    console.print(Panel(header, title="Fetch Result"))
    console.print(f"  Tarball:     {descriptor.tarball}")
    console.print(f"  SHA-256:     [dim]{result.digest}[/dim]")
    console.print(f"  Extracted:   {len(result.members)} member(s)")
    console.print(f"  PATH entry:  {result.destination.resolve()}")
    if result.executable is None:
        console.print(
            f"[yellow]Warning: no '{descriptor.tool}' binary at the archive root[/yellow]"
        )


def print_known_releases(releases: dict[str, ReleaseDescriptor]) -> None:
    """Print the built-in pins as a table."""
    table = Table(title="Pinned Releases", show_header=True, header_style="bold")
    table.add_column("Version", style="bold")
    table.add_column("Tarball")
    table.add_column("SHA-256", style="dim")
    for version in sorted(releases):
        descriptor = releases[version]
        table.add_row(version, descriptor.tarball, descriptor.sha256)
    console.print(table)


def print_error(message: str, output_format: str = "text") -> None:
    """Report a failure on stderr (text) or stdout (json)."""
    if output_format == "json":
        click.echo(json.dumps({"error": message}))
    else:
        click.echo(f"Error: {message}", err=True)


def print_json(data: Any) -> None:
    """Print data as indented JSON to stdout."""
    click.echo(json.dumps(data, indent=2, sort_keys=True, default=str))
