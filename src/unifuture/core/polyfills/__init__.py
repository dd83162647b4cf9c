"""Capability detection and promise-constructor polyfilling."""

from unifuture.core.polyfills.capabilities import describe, is_constructor, probe
from unifuture.core.polyfills.environment import AmbientSlot, Environment, NamespaceEnvironment
from unifuture.core.polyfills.extensions import ExtensionRegistry
from unifuture.core.polyfills.models import (
    CapabilityProfile,
    LibraryDescriptor,
    LibraryShape,
    NormalizationOptions,
    SettledResult,
)
from unifuture.core.polyfills.policy import (
    NormalizationContext,
    current_promise,
    default_context,
    normalize,
    register_extension,
)
from unifuture.core.polyfills.statics import is_normalized
from unifuture.core.polyfills.synthesizer import synthesize

__all__ = [
    "AmbientSlot",
    "CapabilityProfile",
    "Environment",
    "ExtensionRegistry",
    "LibraryDescriptor",
    "LibraryShape",
    "NamespaceEnvironment",
    "NormalizationContext",
    "NormalizationOptions",
    "SettledResult",
    "current_promise",
    "default_context",
    "describe",
    "is_constructor",
    "is_normalized",
    "normalize",
    "probe",
    "register_extension",
    "synthesize",
]
