"""unifuture: one promise interface over any future/deferred library."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from unifuture.core.polyfills.models import NormalizationOptions as NormalizationOptions
    from unifuture.core.polyfills.policy import NormalizationContext as NormalizationContext
    from unifuture.core.polyfills.policy import current_promise as current_promise
    from unifuture.core.polyfills.policy import normalize as normalize
    from unifuture.core.polyfills.policy import register_extension as register_extension

_EXPORTS = {
    "normalize": "unifuture.core.polyfills.policy",
    "register_extension": "unifuture.core.polyfills.policy",
    "current_promise": "unifuture.core.polyfills.policy",
    "NormalizationContext": "unifuture.core.polyfills.policy",
    "NormalizationOptions": "unifuture.core.polyfills.models",
}


def __getattr__(name: str) -> object:
    module_path = _EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'unifuture' has no attribute {name!r}")
