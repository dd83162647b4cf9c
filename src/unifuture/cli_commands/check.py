"""``unifuture check``: smoke-test a normalized promise library."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import Any

import click

from unifuture.adapters.aio import to_future
from unifuture.cli_commands._output import console, load_target, print_checks
from unifuture.core.polyfills.environment import AmbientSlot
from unifuture.core.polyfills.policy import NormalizationContext

_DEFAULT_TARGET = "unifuture.adapters.aio:AsyncioLibrary"

_RESOLVER_FAILURE = "resolver failure"


def _raise_value_error(_res: Any, _rej: Any) -> None:
    raise ValueError(_RESOLVER_FAILURE)


async def _expect_value(promise: Any, expected: Any) -> str:
    value = await to_future(promise)
    if value != expected:
        msg = f"expected {expected!r}, got {value!r}"
        raise AssertionError(msg)
    return f"resolved to {value!r}"


async def _expect_reason(promise: Any, expected: Any) -> str:
    outcome = await to_future(promise.then(lambda v: ("fulfilled", v), lambda r: ("rejected", r)))
    if outcome != ("rejected", expected):
        msg = f"expected rejection with {expected!r}, got {outcome!r}"
        raise AssertionError(msg)
    return f"rejected with {expected!r}"


async def _expect_error(promise: Any, error_type: type[BaseException], message: str) -> str:
    outcome = await to_future(promise.then(lambda v: ("fulfilled", v), lambda r: ("rejected", r)))
    state, reason = outcome
    if state != "rejected" or not isinstance(reason, error_type) or str(reason) != message:
        msg = f"expected rejection with {error_type.__name__}({message!r}), got {outcome!r}"
        raise AssertionError(msg)
    return f"rejected with {reason!r}"


def _checks(promise_cls: Any) -> list[tuple[str, Callable[[], Awaitable[str]]]]:
    p = promise_cls
    return [
        ("resolve", lambda: _expect_value(p.resolve(1), 1)),
        ("reject", lambda: _expect_reason(p.reject(2), 2)),
        ("constructor", lambda: _expect_value(p(lambda res, _rej: res("v")), "v")),
        ("resolver throw", lambda: _expect_error(p(_raise_value_error), ValueError, _RESOLVER_FAILURE)),
        ("then chaining", lambda: _expect_value(p.resolve(1).then(lambda x: x + 1), 2)),
        ("then adoption", lambda: _expect_reason(p.resolve(1).then(p.reject), 1)),
        ("catch", lambda: _expect_value(p.reject(3).catch(lambda r: r * 2), 6)),
        ("all", lambda: _expect_value(p.all([p.resolve(1), 2, p.resolve(3)]), [1, 2, 3])),
        ("all empty", lambda: _expect_value(p.all([]), [])),
        ("all rejection", lambda: _expect_reason(p.all([p.resolve(1), p.reject(4)]), 4)),
        ("race", lambda: _expect_value(p.race([p.resolve(5), p.reject(6)]), 5)),
    ]


async def _run_checks(library: Any, timeout: float) -> list[tuple[str, bool, str]]:
    context = NormalizationContext(AmbientSlot())
    promise_cls = context.normalize(library, fallback=False, global_=False)

    results: list[tuple[str, bool, str]] = []
    for name, check_fn in _checks(promise_cls):
        try:
            detail = await asyncio.wait_for(check_fn(), timeout)
        except Exception as exc:
            results.append((name, False, f"{type(exc).__name__}: {exc}"))
        else:
            results.append((name, True, detail))
    return results


@click.command("check")
@click.argument("target", required=False)
@click.option("--call", is_flag=True, help="Call the target with no arguments first.")
@click.option("--timeout", type=float, default=1.0, show_default=True, help="Seconds per check.")
def check(target: str | None, call: bool, timeout: float) -> None:
    """Normalize a promise library and run smoke conformance checks.

    TARGET is ``module`` or ``module:attribute``; defaults to the bundled
    asyncio library.
    """
    if target is None:
        target, call = _DEFAULT_TARGET, True

    try:
        library = load_target(target, call=call)
    except Exception as exc:
        console.print(f"[red]Error loading target:[/red] {exc}")
        sys.exit(1)

    results = asyncio.run(_run_checks(library, timeout))
    print_checks(target, results)

    if not all(passed for _, passed, _ in results):
        sys.exit(1)
