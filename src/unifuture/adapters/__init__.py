"""Promise libraries for Python hosts."""

from unifuture.adapters.aio import AsyncioLibrary, Deferred, FutureThenable, Rejection, to_future

__all__ = [
    "AsyncioLibrary",
    "Deferred",
    "FutureThenable",
    "Rejection",
    "to_future",
]
