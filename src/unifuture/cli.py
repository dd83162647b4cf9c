"""unifuture CLI entrypoint."""

from __future__ import annotations

import click

from unifuture import __version__


@click.group()
@click.version_option(version=__version__, prog_name="unifuture")
def main() -> None:
    """unifuture: probe and normalize promise libraries."""


# Register subcommands
from unifuture.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
