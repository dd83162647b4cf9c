"""OpenTelemetry tracing helpers for unifuture.

Thin wrapper around the OpenTelemetry API so normalization can open spans
without caring whether the SDK is installed.  When the SDK is *not*
configured the API returns no-op implementations.

Usage::

    from unifuture.utils.telemetry import get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("unifuture.normalize") as span:
        span.set_attribute(ATTR_SHAPE, "deferred_factory")

To see the ``unifuture.normalize`` spans, call :func:`configure_telemetry`
once at startup (requires the ``otel`` extra: ``pip install unifuture[otel]``)::

    from unifuture import normalize
    from unifuture.adapters.aio import AsyncioLibrary
    from unifuture.utils.telemetry import configure_telemetry

    configure_telemetry(service_name="my-app")
    Promise = normalize(AsyncioLibrary())
    # -> one "unifuture.normalize" span carrying unifuture.shape,
    #    unifuture.installed, unifuture.outcome, ...
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Semantic attribute keys used by normalization spans
# ---------------------------------------------------------------------------

ATTR_SHAPE = "unifuture.shape"
ATTR_OVERRIDE = "unifuture.override"
ATTR_FALLBACK = "unifuture.fallback"
ATTR_GLOBAL = "unifuture.global"
ATTR_NATIVE = "unifuture.native_support"
ATTR_INSTALLED = "unifuture.installed"
ATTR_OUTCOME = "unifuture.outcome"
ATTR_EXTENSIONS = "unifuture.extensions"

_INSTRUMENTATION_NAME = "unifuture"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*.

    If the OpenTelemetry SDK has not been configured the returned tracer
    is a no-op.
    """
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "unifuture",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Configure OpenTelemetry tracing (requires ``unifuture[otel]``).

    Parameters
    ----------
    service_name:
        The ``service.name`` resource attribute.
    export_to_console:
        If ``True``, export spans as JSON to stdout.
    otlp_endpoint:
        If set, export spans via OTLP/gRPC to this endpoint.

    Raises
    ------
    ImportError
        If the ``opentelemetry-sdk`` package is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install unifuture[otel]"
        )
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))

    if export_to_console:
        _add_console_exporter(provider, SimpleSpanProcessor)

    if otlp_endpoint:
        _add_otlp_exporter(provider, BatchSpanProcessor, otlp_endpoint)

    trace.set_tracer_provider(provider)


def _add_console_exporter(provider: Any, processor_cls: Any) -> None:
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # pyright: ignore[reportMissingImports]

    provider.add_span_processor(processor_cls(ConsoleSpanExporter()))


def _add_otlp_exporter(provider: Any, processor_cls: Any, endpoint: str) -> None:
    """Attach the OTLP gRPC exporter."""
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports]
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install unifuture[otel]"
        )
        raise ImportError(msg) from exc

    provider.add_span_processor(processor_cls(OTLPSpanExporter(endpoint=endpoint)))
