"""Extension registry and the optional ``done``/``settle`` members.

Extensions are callables ``(constructor, library, options) -> None`` run
after every synthesis.  Each one must only add members that are absent,
so applying the same extension twice changes nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from typing import Any

from unifuture.core.polyfills.capabilities import member
from unifuture.core.polyfills.models import NormalizationOptions, SettledResult
from unifuture.core.polyfills.statics import set_static

logger = logging.getLogger(__name__)

Extension = Callable[[Any, Any, NormalizationOptions], None]


class ExtensionRegistry:
    """Ordered, append-only list of extension callables."""

    def __init__(self, extensions: Iterable[Extension] = ()) -> None:
        self._extensions: list[Extension] = list(extensions)

    def register(self, extension: Extension) -> Extension:
        """Append *extension*; returns it so this can be used as a decorator."""
        if not callable(extension):
            msg = f"Extension must be callable, got {type(extension).__name__}"
            raise TypeError(msg)
        self._extensions.append(extension)
        return extension

    def apply(self, constructor: Any, library: Any, options: NormalizationOptions) -> None:
        """Run every extension on *constructor* in registration order."""
        for extension in self._extensions:
            extension(constructor, library, options)

    def __iter__(self) -> Iterator[Extension]:
        return iter(self._extensions)

    def __len__(self) -> int:
        return len(self._extensions)


# ---------------------------------------------------------------------------
# done()
# ---------------------------------------------------------------------------


def _report_unhandled(reason: Any) -> None:
    logger.error("Unhandled rejection reached done(): %r", reason)


def _done(
    self: Any,
    on_fulfilled: Callable[[Any], Any] | None = None,
    on_rejected: Callable[[Any], Any] | None = None,
) -> Any:
    """Like ``then``, but a rejection nobody handles is reported outside the chain."""
    inner_done = member(getattr(self, "_promise", None), "done")
    if callable(inner_done):
        return inner_done(on_fulfilled, on_rejected)

    result = self.then(on_fulfilled, on_rejected)
    then = member(result, "then")
    if callable(then):
        then(None, _report_unhandled)
    return result


def done_extension(constructor: Any, library: Any, options: NormalizationOptions) -> None:
    """Attach an instance ``done`` method when enabled and absent."""
    if not options.extensions.get("done") or callable(member(constructor, "done")):
        return
    if not isinstance(constructor, type):
        logger.debug("Cannot attach done to non-class constructor %r", constructor)
        return
    try:
        constructor.done = _done
    except (AttributeError, TypeError):
        logger.debug("Cannot attach done to %r", constructor)


# ---------------------------------------------------------------------------
# settle()
# ---------------------------------------------------------------------------


def make_settle(constructor: Any) -> Callable[[Iterable[Any]], Any]:
    """Build ``settle``: waits for every element and never rejects."""

    def settle(iterable: Iterable[Any]) -> Any:
        items = list(iterable)

        def resolver(resolve: Callable[[Any], None], _reject: Callable[[Any], None]) -> None:
            if not items:
                resolve([])
                return

            results: list[SettledResult | None] = [None] * len(items)
            remaining = len(items)

            def record_at(index: int, factory: Callable[[Any], SettledResult]) -> Callable[[Any], None]:
                def record(outcome: Any) -> None:
                    nonlocal remaining
                    if results[index] is not None:
                        return
                    results[index] = factory(outcome)
                    remaining -= 1
                    if remaining == 0:
                        resolve(results)

                return record

            for index, item in enumerate(items):
                constructor.resolve(item).then(
                    record_at(index, SettledResult.from_value),
                    record_at(index, SettledResult.from_reason),
                )

        return constructor(resolver)

    return settle


def settle_extension(constructor: Any, library: Any, options: NormalizationOptions) -> None:
    """Attach a static ``settle`` when enabled and absent."""
    if not options.extensions.get("settle") or callable(member(constructor, "settle")):
        return
    set_static(constructor, "settle", make_settle(constructor), debug=options.debug)


BUILTIN_EXTENSIONS: tuple[Extension, ...] = (done_extension, settle_extension)
