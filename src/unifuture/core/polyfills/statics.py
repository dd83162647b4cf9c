"""Static-member completion: ``resolve``, ``reject``, ``all``, ``race``.

Library primitives are preferred.  When a library has none, each static
is rebuilt from the constructor and ``then`` alone.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from unifuture.core.polyfills.capabilities import first_member, member
from unifuture.core.polyfills.registry_data import NORMALIZED_MARKER, STATIC_ALIASES, STATIC_MEMBERS

logger = logging.getLogger(__name__)


def make_resolve(constructor: Any) -> Callable[[Any], Any]:
    def resolve(value: Any = None) -> Any:
        return constructor(lambda res, _rej: res(value))

    return resolve


def make_reject(constructor: Any) -> Callable[[Any], Any]:
    def reject(reason: Any = None) -> Any:
        return constructor(lambda _res, rej: rej(reason))

    return reject


def make_all(constructor: Any) -> Callable[[Iterable[Any]], Any]:
    """Build ``all`` from ``constructor.resolve`` and ``then``.

    Results keep input order.  The first rejection settles the composite;
    the ``settled`` latch is checked and set before every settlement so
    late fulfilments and further rejections are ignored.
    """

    def all_(iterable: Iterable[Any]) -> Any:
        items = list(iterable)

        def resolver(resolve: Callable[[Any], None], reject: Callable[[Any], None]) -> None:
            if not items:
                resolve([])
                return

            results: list[Any] = [None] * len(items)
            remaining = len(items)
            settled = False

            def fulfil_at(index: int) -> Callable[[Any], None]:
                def on_fulfilled(value: Any) -> None:
                    nonlocal remaining, settled
                    if settled:
                        return
                    results[index] = value
                    remaining -= 1
                    if remaining == 0:
                        settled = True
                        resolve(results)

                return on_fulfilled

            def on_rejected(reason: Any) -> None:
                nonlocal settled
                if settled:
                    return
                settled = True
                reject(reason)

            for index, item in enumerate(items):
                constructor.resolve(item).then(fulfil_at(index), on_rejected)

        return constructor(resolver)

    return all_


def make_race(constructor: Any) -> Callable[[Iterable[Any]], Any]:
    """Build ``race`` from ``constructor.resolve`` and ``then``.

    Whichever element settles first decides the outcome.
    """

    def race(iterable: Iterable[Any]) -> Any:
        items = list(iterable)

        def resolver(resolve: Callable[[Any], None], reject: Callable[[Any], None]) -> None:
            settled = False

            def on_fulfilled(value: Any) -> None:
                nonlocal settled
                if settled:
                    return
                settled = True
                resolve(value)

            def on_rejected(reason: Any) -> None:
                nonlocal settled
                if settled:
                    return
                settled = True
                reject(reason)

            for item in items:
                constructor.resolve(item).then(on_fulfilled, on_rejected)

        return constructor(resolver)

    return race


_FALLBACKS: dict[str, Callable[[Any], Callable[..., Any]]] = {
    "resolve": make_resolve,
    "reject": make_reject,
    "all": make_all,
    "race": make_race,
}


def set_static(constructor: Any, name: str, fn: Callable[..., Any], *, debug: bool = False) -> bool:
    """Attach *fn* to *constructor* as a static member; ``False`` if immutable."""
    value = staticmethod(fn) if isinstance(constructor, type) else fn
    try:
        setattr(constructor, name, value)
    except (AttributeError, TypeError):
        logger.log(
            logging.WARNING if debug else logging.DEBUG,
            "Cannot attach %s to %r; leaving it absent",
            name,
            constructor,
        )
        return False
    return True


def complete_statics(constructor: Any, library: Any, *, debug: bool = False) -> None:
    """Fill every static member *constructor* lacks.

    Only absent members are filled; existing ones are never replaced.
    """
    for name in STATIC_MEMBERS:
        if callable(member(constructor, name)):
            continue
        fn = first_member(library, STATIC_ALIASES[name])
        if fn is None:
            logger.debug("Synthesizing %s for %r", name, constructor)
            fn = _FALLBACKS[name](constructor)
        set_static(constructor, name, fn, debug=debug)


def mark_normalized(constructor: Any) -> None:
    try:
        setattr(constructor, NORMALIZED_MARKER, True)
    except (AttributeError, TypeError):
        logger.debug("Cannot mark %r as normalized", constructor)


def is_normalized(constructor: Any) -> bool:
    """Return whether *constructor* was produced by normalization."""
    return bool(getattr(constructor, NORMALIZED_MARKER, False))
