"""Shared CLI helpers: target loading and output formatters."""

from __future__ import annotations

import importlib
from typing import Any

from rich.console import Console
from rich.table import Table

from unifuture.core.polyfills.models import CapabilityProfile, LibraryDescriptor  # noqa: TC001

console = Console()


def load_target(target: str, *, call: bool = False) -> Any:
    """Import ``module`` or ``module:attr.path`` and return the object.

    With *call*, the resolved object is called without arguments
    (useful for library classes that must be instantiated first).
    """
    module_name, _, attr_path = target.partition(":")
    obj: Any = importlib.import_module(module_name)
    for part in filter(None, attr_path.split(".")):
        obj = getattr(obj, part)
    return obj() if call else obj


def print_profile(
    target: str,
    descriptor: LibraryDescriptor,
    profile: CapabilityProfile,
    *,
    as_json: bool = False,
) -> None:
    """Pretty-print the shape and capability profile of a library."""
    if as_json:
        payload = {"target": target, "shape": descriptor.shape.value, **profile.model_dump()}
        console.print_json(data=payload)
        return

    table = Table(title=f"Capabilities of {target}")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("shape", descriptor.shape.value)
    table.add_row("constructor", _yes_no(profile.is_constructor))
    table.add_row("fully conformant", _yes_no(profile.is_fully_conformant))
    table.add_row("statics", ", ".join(profile.statics) or "-")

    console.print(table)


def print_checks(target: str, results: list[tuple[str, bool, str]]) -> None:
    """Pretty-print smoke-check outcomes as a table."""
    table = Table(title=f"Conformance checks for {target}")
    table.add_column("Check", style="cyan")
    table.add_column("Result")
    table.add_column("Detail")

    for name, passed, detail in results:
        table.add_row(name, "[green]pass[/green]" if passed else "[red]FAIL[/red]", _truncate(detail))

    console.print(table)


def _yes_no(flag: bool) -> str:
    return "[green]yes[/green]" if flag else "[red]no[/red]"


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
