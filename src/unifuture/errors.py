"""Shared error types for the normalization layer."""


class NormalizationError(Exception):
    """Base error for all normalization failures."""


class ConstructionError(NormalizationError, TypeError):
    """A promise constructor was called without a callable resolver."""

    def __init__(self, resolver: object = None) -> None:
        self.resolver = resolver
        super().__init__(
            "You must pass a resolver function as the first argument to the promise constructor"
            + (f" (got {type(resolver).__name__})" if resolver is not None else "")
        )
