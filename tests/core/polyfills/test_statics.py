"""Tests for static-member completion and the then-only fallbacks."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

from unifuture.adapters.aio import AsyncioLibrary, Rejection, to_future
from unifuture.core.polyfills.statics import make_all, make_race, set_static
from unifuture.core.polyfills.synthesizer import synthesize


def _recording_constructor() -> type:
    """Constructor whose instances record every resolve/reject they receive."""

    class Recording:
        def __init__(self, resolver: Callable[..., Any]) -> None:
            self.calls: list[tuple[str, Any]] = []
            resolver(
                lambda value=None: self.calls.append(("resolve", value)),
                lambda reason=None: self.calls.append(("reject", reason)),
            )

        @staticmethod
        def resolve(value: Any) -> Any:
            return value

    return Recording


def _delayed(promise_cls: Any, delay: float, value: Any, *, reject: bool = False) -> Any:
    loop = asyncio.get_running_loop()

    def resolver(res: Any, rej: Any) -> None:
        loop.call_later(delay, rej if reject else res, value)

    return promise_cls(resolver)


async def _outcome(promise: Any) -> tuple[str, Any]:
    return await to_future(promise.then(lambda v: ("fulfilled", v), lambda r: ("rejected", r)))


class TestLibraryPreference:
    def test_library_statics_are_used(self) -> None:
        resolve, reject, all_, race = (lambda x: x), (lambda x: x), (lambda x: x), (lambda x: x)
        lib = SimpleNamespace(defer=lambda: None, resolve=resolve, reject=reject, all=all_, race=race)
        promise_cls = synthesize(lib)
        assert promise_cls.resolve is resolve
        assert promise_cls.reject is reject
        assert promise_cls.all is all_
        assert promise_cls.race is race

    def test_alternate_names(self) -> None:
        when, any_ = (lambda x: x), (lambda x: x)
        promise_cls = synthesize(SimpleNamespace(defer=lambda: None, when=when, any=any_))
        assert promise_cls.resolve is when
        assert promise_cls.race is any_

    def test_primary_name_wins_over_alias(self) -> None:
        race, any_ = (lambda x: x), (lambda x: x)
        promise_cls = synthesize(SimpleNamespace(defer=lambda: None, race=race, any=any_))
        assert promise_cls.race is race

    def test_existing_members_are_kept(self, stub_promise: type) -> None:
        original = stub_promise.__dict__["resolve"]
        synthesize(SimpleNamespace(Promise=stub_promise, resolve=print))
        assert stub_promise.__dict__["resolve"] is original

    def test_missing_members_are_filled_on_existing_constructor(self) -> None:
        class Partial:
            def __init__(self, resolver: Any) -> None:
                resolver(print, print)

            @staticmethod
            def resolve(value: Any) -> Any:
                return value

        lib = SimpleNamespace(Promise=Partial, all=len)
        promise_cls = synthesize(lib)
        assert promise_cls is Partial
        assert promise_cls.all is len
        assert callable(promise_cls.race)
        assert callable(promise_cls.reject)

    def test_immutable_constructor_is_skipped(self) -> None:
        assert set_static(int, "resolve", print) is False
        assert not hasattr(int, "resolve")

    def test_plain_function_constructor(self) -> None:
        def ctor(resolver: Any) -> None:
            resolver(print, print)

        set_static(ctor, "resolve", len)
        assert ctor.resolve is len  # type: ignore[attr-defined]


class TestFallbackResolveReject:
    async def test_resolve(self, aio_library: AsyncioLibrary) -> None:
        promise_cls = synthesize(aio_library)
        assert await to_future(promise_cls.resolve(1)) == 1

    async def test_resolve_default(self, aio_library: AsyncioLibrary) -> None:
        promise_cls = synthesize(aio_library)
        assert await to_future(promise_cls.resolve()) is None

    async def test_reject(self, aio_library: AsyncioLibrary) -> None:
        promise_cls = synthesize(aio_library)
        assert await _outcome(promise_cls.reject(1)) == ("rejected", 1)

    async def test_resolve_adopts_pending_value(self, aio_library: AsyncioLibrary) -> None:
        promise_cls = synthesize(aio_library)
        inner = _delayed(promise_cls, 0.01, "inner")
        assert await to_future(promise_cls.resolve(inner)) == "inner"


class TestFallbackAll:
    def test_order_preserved_regardless_of_completion(self, manual_thenable: Any) -> None:
        t1, t2, t3 = manual_thenable(), manual_thenable(), manual_thenable()
        composite = make_all(_recording_constructor())([t1, t2, t3])

        t2.fulfil(2)
        t1.fulfil(1)
        assert composite.calls == []
        t3.fulfil(3)

        assert composite.calls == [("resolve", [1, 2, 3])]

    def test_settles_once_on_multiple_rejections(self, manual_thenable: Any) -> None:
        t1, t2, t3 = manual_thenable(), manual_thenable(), manual_thenable()
        composite = make_all(_recording_constructor())([t1, t2, t3])

        t3.fail("p3")
        t2.fail("p2")
        t1.fulfil(1)

        assert composite.calls == [("reject", "p3")]

    def test_empty_input(self) -> None:
        composite = make_all(_recording_constructor())([])
        assert composite.calls == [("resolve", [])]

    def test_accepts_generators(self, manual_thenable: Any) -> None:
        thenables = [manual_thenable(), manual_thenable()]
        composite = make_all(_recording_constructor())(t for t in thenables)
        for index, t in enumerate(thenables):
            t.fulfil(index)
        assert composite.calls == [("resolve", [0, 1])]

    async def test_all_fulfilled(self, aio_library: AsyncioLibrary) -> None:
        p = synthesize(aio_library)
        composite = p.all([_delayed(p, 0.03, 1), _delayed(p, 0.01, 2), _delayed(p, 0.02, 3)])
        assert await to_future(composite) == [1, 2, 3]

    async def test_mixed_plain_values(self, aio_library: AsyncioLibrary) -> None:
        p = synthesize(aio_library)
        assert await to_future(p.all([1, p.resolve(2), "three"])) == [1, 2, "three"]

    async def test_all_empty_resolves_immediately(self, aio_library: AsyncioLibrary) -> None:
        p = synthesize(aio_library)
        assert await to_future(p.all([])) == []

    async def test_first_failure_wins(self, aio_library: AsyncioLibrary) -> None:
        p = synthesize(aio_library)
        composite = p.all(
            [
                _delayed(p, 0.01, 1),
                _delayed(p, 0.02, 2, reject=True),
                _delayed(p, 0.03, 3, reject=True),
            ]
        )
        assert await _outcome(composite) == ("rejected", 2)

    async def test_failure_before_pending_values(self, aio_library: AsyncioLibrary) -> None:
        p = synthesize(aio_library)
        never = p(lambda res, rej: None)
        composite = p.all([never, _delayed(p, 0.01, "p3", reject=True)])
        assert await _outcome(composite) == ("rejected", "p3")


class TestFallbackRace:
    def test_first_settlement_wins(self, manual_thenable: Any) -> None:
        t1, t2, t3 = manual_thenable(), manual_thenable(), manual_thenable()
        composite = make_race(_recording_constructor())([t1, t2, t3])

        t2.fulfil(2)
        t1.fail("late")
        t3.fail("later")

        assert composite.calls == [("resolve", 2)]

    def test_first_rejection_wins(self, manual_thenable: Any) -> None:
        t1, t2 = manual_thenable(), manual_thenable()
        composite = make_race(_recording_constructor())([t1, t2])

        t2.fail("first")
        t1.fulfil("second")

        assert composite.calls == [("reject", "first")]

    def test_empty_race_stays_pending(self) -> None:
        composite = make_race(_recording_constructor())([])
        assert composite.calls == []

    async def test_race_fulfilled(self, aio_library: AsyncioLibrary) -> None:
        p = synthesize(aio_library)
        composite = p.race(
            [
                _delayed(p, 0.03, 1, reject=True),
                _delayed(p, 0.01, 2),
                _delayed(p, 0.02, 3, reject=True),
            ]
        )
        assert await to_future(composite) == 2

    async def test_race_rejected(self, aio_library: AsyncioLibrary) -> None:
        p = synthesize(aio_library)
        composite = p.race(
            [
                _delayed(p, 0.03, 1),
                _delayed(p, 0.01, 2, reject=True),
                _delayed(p, 0.02, 3, reject=True),
            ]
        )
        assert await _outcome(composite) == ("rejected", 2)


class TestChaining:
    async def test_then_maps_value(self, aio_library: AsyncioLibrary) -> None:
        p = synthesize(aio_library)
        assert await to_future(p.resolve(1).then(lambda x: x + 1)) == 2

    async def test_then_adopts_rejection(self, aio_library: AsyncioLibrary) -> None:
        p = synthesize(aio_library)
        assert await _outcome(p.resolve(1).then(lambda x: p.reject(x))) == ("rejected", 1)

    async def test_rejection_recovered(self, aio_library: AsyncioLibrary) -> None:
        p = synthesize(aio_library)
        recovered = p.reject(1).then(lambda v: v).then(None, lambda r: r + 10)
        assert await to_future(recovered) == 11

    async def test_handler_exception_rejects(self, aio_library: AsyncioLibrary) -> None:
        p = synthesize(aio_library)
        error = KeyError("missing")

        def fail(_: Any) -> None:
            raise error

        with pytest.raises(KeyError):
            await to_future(p.resolve(1).then(fail))

    async def test_non_exception_reason_surfaces_as_rejection(self, aio_library: AsyncioLibrary) -> None:
        p = synthesize(aio_library)
        with pytest.raises(Rejection):
            await to_future(p.reject("plain"))
