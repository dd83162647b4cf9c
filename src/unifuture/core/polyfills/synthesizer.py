"""Constructor synthesis.

Turns any supported library shape into a constructor with the standard
surface: ``Promise(resolver)``, ``then``, ``catch`` and the four statics.
Libraries that already ship a constructor have it returned as-is (with
missing statics filled in); deferred-factory libraries get a generated
wrapper class.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from unifuture.core.polyfills.capabilities import describe, first_member, member
from unifuture.core.polyfills.models import LibraryDescriptor, LibraryShape
from unifuture.core.polyfills.registry_data import FACTORY_ATTRS
from unifuture.core.polyfills.statics import complete_statics, mark_normalized
from unifuture.errors import ConstructionError

logger = logging.getLogger(__name__)


def synthesize(library: Any, *, debug: bool = False) -> Any:
    """Return a conforming constructor for *library*."""
    return synthesize_from(describe(library), debug=debug)


def synthesize_from(descriptor: LibraryDescriptor, *, debug: bool = False) -> Any:
    """Return a conforming constructor for an already-classified library."""
    if descriptor.shape in (LibraryShape.NESTED, LibraryShape.CONSTRUCTOR):
        constructor = descriptor.constructor
    else:
        if descriptor.shape is LibraryShape.NONE:
            logger.log(
                logging.WARNING if debug else logging.DEBUG,
                "%r exposes no constructor or deferred factory; promises will not settle",
                descriptor.library,
            )
        constructor = build_deferred_constructor(descriptor.library, debug=debug)

    complete_statics(constructor, descriptor.library, debug=debug)
    mark_normalized(constructor)
    return constructor


def _deferred_factory(library: Any) -> Callable[[], Any] | None:
    factory = first_member(library, FACTORY_ATTRS)
    if factory is not None:
        return factory
    if callable(library):
        return library
    return None


def _promise_of(deferred: Any) -> Any:
    """Extract the promise from a deferred: called when callable, else used as-is."""
    promise = member(deferred, "promise")
    if callable(promise):
        return promise()
    return promise


def build_deferred_constructor(library: Any, *, debug: bool = False) -> type:
    """Generate a resolver-style constructor over a deferred-factory library.

    Each construction draws a fresh deferred from ``library.defer()`` (or
    ``library()``), hands the resolver closures bound to it, and keeps only
    the deferred's promise for ``then``/``catch``.  Operations the
    underlying objects lack become no-ops that log a diagnostic.
    """
    factory = _deferred_factory(library)
    level = logging.WARNING if debug else logging.DEBUG

    class Promise:
        __slots__ = ("_promise",)

        def __init__(self, resolver: Callable[[Callable[..., None], Callable[..., None]], Any]) -> None:
            if not callable(resolver):
                raise ConstructionError(resolver)

            deferred = _new_deferred()
            self._promise = _promise_of(deferred)

            def resolve(value: Any = None) -> None:
                fn = member(deferred, "resolve")
                if callable(fn):
                    fn(value)
                else:
                    logger.log(level, "Deferred %r has no resolve(); ignoring", deferred)

            def reject(reason: Any = None) -> None:
                fn = member(deferred, "reject")
                if callable(fn):
                    fn(reason)
                else:
                    logger.log(level, "Deferred %r has no reject(); ignoring", deferred)

            try:
                resolver(resolve, reject)
            except Exception as exc:  # noqa: BLE001
                reject(exc)

        def then(
            self,
            on_fulfilled: Callable[[Any], Any] | None = None,
            on_rejected: Callable[[Any], Any] | None = None,
        ) -> Any:
            then = member(self._promise, "then")
            if callable(then):
                return then(on_fulfilled, on_rejected)
            logger.log(level, "Underlying value %r has no then(); ignoring", self._promise)
            return None

        def catch(self, on_rejected: Callable[[Any], Any]) -> Any:
            catch = member(self._promise, "catch")
            if callable(catch):
                return catch(on_rejected)
            then = member(self._promise, "then")
            if callable(then):
                return then(None, on_rejected)
            logger.log(level, "Underlying value %r has no catch() or then(); ignoring", self._promise)
            return None

        def __await__(self) -> Any:
            await_ = member(self._promise, "__await__")
            if not callable(await_):
                msg = f"object {type(self._promise).__name__} can't be used in 'await' expression"
                raise TypeError(msg)
            return await_()

        def __repr__(self) -> str:
            return f"<Promise wrapping {self._promise!r}>"

    def _new_deferred() -> Any:
        if factory is None:
            logger.log(level, "%r has no deferred factory", library)
            return None
        try:
            return factory()
        except Exception:  # noqa: BLE001
            logger.log(level, "Deferred factory of %r raised", library, exc_info=True)
            return None

    Promise.__qualname__ = Promise.__name__
    return Promise
