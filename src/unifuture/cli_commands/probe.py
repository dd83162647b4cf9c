"""``unifuture probe``: report the shape of a promise library."""

from __future__ import annotations

import sys

import click

from unifuture.cli_commands._output import console, load_target, print_profile
from unifuture.core.polyfills.capabilities import describe, probe


@click.command("probe")
@click.argument("target")
@click.option("--call", is_flag=True, help="Call the target with no arguments first.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
def probe_cmd(target: str, call: bool, as_json: bool) -> None:
    """Probe a promise library.

    TARGET is ``module`` or ``module:attribute``.
    """
    try:
        library = load_target(target, call=call)
    except Exception as exc:
        console.print(f"[red]Error loading target:[/red] {exc}")
        sys.exit(1)

    descriptor = describe(library)
    # Profile the constructor synthesis would use, when there is one.
    profile = probe(descriptor.constructor if descriptor.constructor is not None else library)
    print_profile(target, descriptor, profile, as_json=as_json)
