"""Deferred-factory promise library over :mod:`asyncio` futures.

Python ships no promise type of its own, so this module provides one
in the shape normalization already understands: ``AsyncioLibrary().defer()``
returns a ``{promise, resolve, reject}`` triple whose ``promise`` is a
thenable view over an :class:`asyncio.Future`.  Scheduling is the event
loop's: ``add_done_callback`` always dispatches through ``call_soon``,
so continuations never run synchronously on registration.

Usage::

    from unifuture import normalize
    from unifuture.adapters.aio import AsyncioLibrary

    Promise = normalize(AsyncioLibrary())
    value = await Promise.all([Promise.resolve(1), 2])
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Generator
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


class Rejection(Exception):
    """Carries a rejection reason that is not itself an exception."""

    def __init__(self, reason: Any) -> None:
        self.reason = reason
        super().__init__(f"Promise rejected with {reason!r}")


def _is_thenable(value: Any) -> bool:
    return callable(getattr(value, "then", None))


def _fulfil(future: asyncio.Future[Any], value: Any) -> None:
    """Settle *future* with *value*, adopting the state of thenables.

    Adoption callbacks are latched: only the first of them counts, and a
    ``then`` that raises before calling either one rejects *future*.
    """
    if future.done():
        return
    if getattr(value, "future", None) is future:
        _fail(future, TypeError("Chaining cycle: a promise cannot be resolved with itself"))
        return
    if not _is_thenable(value):
        future.set_result(value)
        return

    called = False

    def on_fulfilled(result: Any) -> None:
        nonlocal called
        if called:
            return
        called = True
        _fulfil(future, result)

    def on_rejected(reason: Any) -> None:
        nonlocal called
        if called:
            return
        called = True
        _fail(future, reason)

    try:
        value.then(on_fulfilled, on_rejected)
    except Exception as exc:  # noqa: BLE001
        on_rejected(exc)


def _fail(future: asyncio.Future[Any], reason: Any) -> None:
    if future.done():
        return
    future.set_exception(reason if isinstance(reason, BaseException) else Rejection(reason))


def _reason_of(exc: BaseException) -> Any:
    return exc.reason if isinstance(exc, Rejection) else exc


class FutureThenable:
    """Thenable, awaitable view over an :class:`asyncio.Future`."""

    __slots__ = ("_future",)

    def __init__(self, future: asyncio.Future[Any]) -> None:
        self._future = future

    @property
    def future(self) -> asyncio.Future[Any]:
        return self._future

    def then(
        self,
        on_fulfilled: Callable[[Any], Any] | None = None,
        on_rejected: Callable[[Any], Any] | None = None,
    ) -> FutureThenable:
        target: asyncio.Future[Any] = self._future.get_loop().create_future()

        def _propagate(source: asyncio.Future[Any]) -> None:
            if source.cancelled():
                if not target.done():
                    target.cancel()
                return
            exc = source.exception()
            handler = on_fulfilled if exc is None else on_rejected
            if not callable(handler):
                if exc is None:
                    _fulfil(target, source.result())
                else:
                    _fail(target, exc)
                return
            try:
                result = handler(source.result() if exc is None else _reason_of(exc))
            except Exception as err:  # noqa: BLE001
                _fail(target, err)
                return
            _fulfil(target, result)

        self._future.add_done_callback(_propagate)
        return FutureThenable(target)

    def catch(self, on_rejected: Callable[[Any], Any]) -> FutureThenable:
        return self.then(None, on_rejected)

    def __await__(self) -> Generator[Any, None, Any]:
        return self._future.__await__()

    def __repr__(self) -> str:
        return f"<FutureThenable {self._future!r}>"


@dataclass(frozen=True)
class Deferred:
    """A promise and the two operations that settle it."""

    promise: FutureThenable
    resolve: Callable[[Any], None]
    reject: Callable[[Any], None]


class AsyncioLibrary:
    """Deferred factory bound to an event loop.

    Without an explicit *loop*, each ``defer()`` uses the running loop,
    so deferreds must be created from inside a coroutine or callback.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def defer(self) -> Deferred:
        loop = self._loop or asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()
        # Set by the first resolve/reject, even while a thenable is being adopted.
        resolved = False

        def resolve(value: Any = None) -> None:
            nonlocal resolved
            if resolved:
                return
            resolved = True
            _fulfil(future, value)

        def reject(reason: Any = None) -> None:
            nonlocal resolved
            if resolved:
                return
            resolved = True
            _fail(future, reason)

        return Deferred(promise=FutureThenable(future), resolve=resolve, reject=reject)


def to_future(thenable: Any, loop: asyncio.AbstractEventLoop | None = None) -> asyncio.Future[Any]:
    """Bridge any thenable (or plain value) into an awaitable future.

    Rejections that are not exceptions surface as :class:`Rejection`.
    """
    future: asyncio.Future[Any] = (loop or asyncio.get_running_loop()).create_future()
    _fulfil(future, thenable)
    return future
