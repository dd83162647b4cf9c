"""Capability detection for promise libraries.

Shapes are detected structurally: a candidate counts as a constructor
only if calling it with a resolver actually hands that resolver two
callables.  Many libraries differ only in internal wiring, so names and
types are never trusted.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from unifuture.core.polyfills.models import CapabilityProfile, LibraryDescriptor, LibraryShape
from unifuture.core.polyfills.registry_data import (
    CONSTRUCTOR_ATTRS,
    FACTORY_ATTRS,
    STATIC_MEMBERS,
)

logger = logging.getLogger(__name__)


def member(obj: Any, name: str) -> Any:
    """Return *obj*'s member *name* by attribute or, for mappings, by key."""
    if obj is None:
        return None
    if isinstance(obj, Mapping):
        return obj.get(name)
    try:
        return getattr(obj, name, None)
    except Exception:  # noqa: BLE001 - exotic __getattr__ implementations
        logger.debug("Attribute lookup %r failed on %r", name, obj, exc_info=True)
        return None


def first_member(obj: Any, names: tuple[str, ...]) -> Any:
    """Return the first callable member of *obj* among *names*, or ``None``."""
    for name in names:
        value = member(obj, name)
        if callable(value):
            return value
    return None


def is_constructor(candidate: Any) -> bool:
    """Return whether *candidate* hands a resolver two callables when invoked.

    The resolver runs synchronously, so probing may touch whatever state
    the candidate closes over.  Exceptions raised by the candidate are
    treated as "not a constructor".
    """
    if candidate is None or not callable(candidate):
        return False

    captured: list[Any] = []

    def resolver(resolve: Any = None, reject: Any = None, *_: Any) -> None:
        captured[:] = [resolve, reject]

    try:
        candidate(resolver)
    except Exception:  # noqa: BLE001
        logger.debug("Probe of %r raised", candidate, exc_info=True)
        return False

    return len(captured) == 2 and all(callable(fn) for fn in captured)


def probe(candidate: Any) -> CapabilityProfile:
    """Build the capability profile of *candidate*."""
    statics = [name for name in STATIC_MEMBERS if callable(member(candidate, name))]
    constructor = is_constructor(candidate)
    return CapabilityProfile(
        is_constructor=constructor,
        is_fully_conformant=constructor and len(statics) == len(STATIC_MEMBERS),
        statics=statics,
    )


def describe(library: Any) -> LibraryDescriptor:
    """Classify *library* into one of the :class:`LibraryShape` values.

    Lookup order matches synthesis:
    1. A constructor nested under ``Promise`` or ``promise``
    2. The library itself, when it behaves as a constructor
    3. A deferred factory (``defer()`` or the library being callable)
    4. Nothing usable
    """
    nested = first_member(library, CONSTRUCTOR_ATTRS)
    if nested is not None:
        return LibraryDescriptor(library=library, shape=LibraryShape.NESTED, constructor=nested)

    if is_constructor(library):
        return LibraryDescriptor(library=library, shape=LibraryShape.CONSTRUCTOR, constructor=library)

    if first_member(library, FACTORY_ATTRS) is not None or callable(library):
        return LibraryDescriptor(library=library, shape=LibraryShape.DEFERRED_FACTORY)

    return LibraryDescriptor(library=library, shape=LibraryShape.NONE)
