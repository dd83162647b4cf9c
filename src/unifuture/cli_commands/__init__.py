"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from unifuture.cli_commands.check import check
    from unifuture.cli_commands.probe import probe_cmd

    cli.add_command(probe_cmd)
    cli.add_command(check)
