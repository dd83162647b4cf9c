"""Shared fixtures: stand-in promise libraries of each supported shape."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from unifuture.adapters.aio import AsyncioLibrary


class ManualThenable:
    """Thenable settled by hand; callbacks fire synchronously on settlement."""

    def __init__(self) -> None:
        self.callbacks: list[tuple[Any, Any]] = []

    def then(self, on_fulfilled: Any = None, on_rejected: Any = None) -> ManualThenable:
        self.callbacks.append((on_fulfilled, on_rejected))
        return self

    def fulfil(self, value: Any) -> None:
        for on_fulfilled, _ in self.callbacks:
            if on_fulfilled is not None:
                on_fulfilled(value)

    def fail(self, reason: Any) -> None:
        for _, on_rejected in self.callbacks:
            if on_rejected is not None:
                on_rejected(reason)


def make_stub_promise() -> type:
    """Return a fresh, fully conformant, synchronous constructor class."""

    class StubPromise:
        def __init__(self, resolver: Callable[..., Any]) -> None:
            self.calls: list[tuple[str, Any]] = []
            resolver(self._resolve, self._reject)

        def _resolve(self, value: Any = None) -> None:
            self.calls.append(("resolve", value))

        def _reject(self, reason: Any = None) -> None:
            self.calls.append(("reject", reason))

        def then(self, on_fulfilled: Any = None, on_rejected: Any = None) -> Any:
            return self

        @staticmethod
        def resolve(value: Any = None) -> Any:
            return value

        @staticmethod
        def reject(reason: Any = None) -> Any:
            return reason

        @staticmethod
        def all(items: Any) -> Any:
            return list(items)

        @staticmethod
        def race(items: Any) -> Any:
            return next(iter(items))

    return StubPromise


@pytest.fixture
def stub_promise() -> type:
    return make_stub_promise()


@pytest.fixture
def manual_thenable() -> Callable[[], ManualThenable]:
    return ManualThenable


@pytest.fixture
def aio_library() -> AsyncioLibrary:
    return AsyncioLibrary()
