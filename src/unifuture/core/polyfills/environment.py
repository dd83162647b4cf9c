"""Ambient constructor slot.

The "native" promise constructor lives behind an :class:`Environment`
so a normalization context can be pointed at any namespace, and tests
can use a private slot instead of process-wide state.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Environment(Protocol):
    """Lookup/install pair for the ambient promise constructor."""

    def lookup(self) -> Any:
        """Return the current ambient constructor, or ``None``."""
        ...

    def install(self, constructor: Any) -> None:
        """Make *constructor* the ambient constructor."""
        ...


class AmbientSlot:
    """In-memory ambient slot, empty unless seeded."""

    def __init__(self, constructor: Any = None) -> None:
        self._constructor = constructor

    def lookup(self) -> Any:
        return self._constructor

    def install(self, constructor: Any) -> None:
        self._constructor = constructor


class NamespaceEnvironment:
    """Ambient slot backed by an attribute on a module or namespace object.

    ``NamespaceEnvironment(builtins)`` makes the ambient constructor a
    builtin named ``Promise``.
    """

    def __init__(self, namespace: Any, attr: str = "Promise") -> None:
        self._namespace = namespace
        self._attr = attr

    def lookup(self) -> Any:
        return getattr(self._namespace, self._attr, None)

    def install(self, constructor: Any) -> None:
        setattr(self._namespace, self._attr, constructor)
