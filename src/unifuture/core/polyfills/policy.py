"""Normalization policy: native, synthesized or globally installed.

A :class:`NormalizationContext` owns the ambient constructor slot, the
option defaults and the extension registry.  The module-level
:func:`normalize` and :func:`register_extension` operate on a
process-wide default context.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from unifuture.core.polyfills.capabilities import describe, first_member, probe
from unifuture.core.polyfills.environment import AmbientSlot, Environment
from unifuture.core.polyfills.extensions import BUILTIN_EXTENSIONS, Extension, ExtensionRegistry
from unifuture.core.polyfills.models import NormalizationOptions
from unifuture.core.polyfills.registry_data import RELEASE_ATTRS
from unifuture.core.polyfills.statics import is_normalized
from unifuture.core.polyfills.synthesizer import synthesize_from
from unifuture.utils.telemetry import (
    ATTR_EXTENSIONS,
    ATTR_FALLBACK,
    ATTR_GLOBAL,
    ATTR_INSTALLED,
    ATTR_NATIVE,
    ATTR_OUTCOME,
    ATTR_OVERRIDE,
    ATTR_SHAPE,
    get_tracer,
)

logger = logging.getLogger(__name__)

_tracer = get_tracer(__name__)


def _coerce_options(
    options: NormalizationOptions | Mapping[str, Any] | None,
    overrides: dict[str, Any],
) -> NormalizationOptions:
    if options is None:
        data: dict[str, Any] = {}
    elif isinstance(options, NormalizationOptions):
        data = options.model_dump(exclude_unset=True)
    else:
        data = dict(options)
    data.update(overrides)
    return NormalizationOptions.model_validate(data)


class NormalizationContext:
    """Ambient slot, defaults and extensions shared by normalization calls.

    The ambient constructor is probed once, on construction; the cached
    ``has_native_support`` drives the fallback and installation rules
    for the lifetime of the context.
    """

    def __init__(
        self,
        environment: Environment | None = None,
        *,
        defaults: NormalizationOptions | None = None,
        extensions: ExtensionRegistry | None = None,
    ) -> None:
        self._environment = environment if environment is not None else AmbientSlot()
        self._defaults = defaults or NormalizationOptions()
        self._extensions = extensions if extensions is not None else ExtensionRegistry(BUILTIN_EXTENSIONS)
        self._has_native_support = probe(self._environment.lookup()).is_fully_conformant

    @property
    def environment(self) -> Environment:
        return self._environment

    @property
    def defaults(self) -> NormalizationOptions:
        return self._defaults

    @property
    def extensions(self) -> ExtensionRegistry:
        return self._extensions

    @property
    def has_native_support(self) -> bool:
        return self._has_native_support

    def register_extension(self, extension: Extension) -> Extension:
        """Register *extension* for every later :meth:`normalize` call."""
        return self._extensions.register(extension)

    def normalize(
        self,
        library: Any = None,
        options: NormalizationOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> Any:
        """Return a conforming promise constructor for *library*.

        Lookup order:
        1. A release hatch on the ambient constructor, whose result replaces *library*
        2. No library: the ambient constructor, unconditionally
        3. ``fallback`` without ``override`` and a native constructor: the native one
        4. Otherwise a synthesized constructor, installed globally when allowed
        """
        opts = _coerce_options(options, overrides).merged_over(self._defaults)
        native = self._environment.lookup()

        with _tracer.start_as_current_span("unifuture.normalize") as span:
            span.set_attribute(ATTR_OVERRIDE, opts.override)
            span.set_attribute(ATTR_FALLBACK, opts.fallback)
            span.set_attribute(ATTR_GLOBAL, opts.global_)
            span.set_attribute(ATTR_NATIVE, self._has_native_support)

            release = first_member(native, RELEASE_ATTRS)
            if release is not None:
                released = release()
                if released is not None:
                    logger.debug("Ambient constructor released %r", released)
                    library = released

            if not library:
                span.set_attribute(ATTR_OUTCOME, "ambient")
                return native

            if opts.fallback and not opts.override and self._has_native_support:
                span.set_attribute(ATTR_OUTCOME, "native")
                return native

            descriptor = describe(library)
            span.set_attribute(ATTR_SHAPE, descriptor.shape.value)
            constructor = synthesize_from(descriptor, debug=opts.debug)

            installed = opts.override or (
                opts.global_ and (not self._has_native_support or is_normalized(native))
            )
            if installed:
                self._environment.install(constructor)
                logger.debug("Installed %r as the ambient promise constructor", constructor)
            span.set_attribute(ATTR_INSTALLED, installed)

            self._extensions.apply(constructor, library, opts)
            span.set_attribute(ATTR_EXTENSIONS, sorted(k for k, v in opts.extensions.items() if v))
            span.set_attribute(ATTR_OUTCOME, "synthesized")
            return constructor


# ---------------------------------------------------------------------------
# Process-wide default context
# ---------------------------------------------------------------------------

_default_context = NormalizationContext()


def default_context() -> NormalizationContext:
    return _default_context


def normalize(
    library: Any = None,
    options: NormalizationOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> Any:
    """Normalize *library* against the process-wide default context."""
    return _default_context.normalize(library, options, **overrides)


def register_extension(extension: Extension) -> Extension:
    """Register *extension* on the process-wide default context."""
    return _default_context.register_extension(extension)


def current_promise() -> Any:
    """Return the process-wide ambient promise constructor, if any."""
    return _default_context.environment.lookup()
