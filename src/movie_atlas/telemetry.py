"""OpenTelemetry integration for Movie Atlas.

Only the OTel API is a hard dependency.  Until ``init_telemetry`` installs SDK
providers, tracers and meters are the API's proxy objects, which do nothing,
so the rest of the codebase can instrument unconditionally.  The SDK and
exporters come from the ``[otel]`` extra and are imported lazily.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from loguru import logger
from opentelemetry import metrics as otel_metrics
from opentelemetry import trace as otel_trace

if TYPE_CHECKING:
    from movie_atlas.settings import ObservabilitySettings

# ---------------------------------------------------------------------------
# Singleton state
# ---------------------------------------------------------------------------

_initialized: bool = False
_enabled: bool = False

# ---------------------------------------------------------------------------
# Factory functions (safe to call at module level)
# ---------------------------------------------------------------------------


def get_tracer(name: str) -> otel_trace.Tracer:
    """Return an OTel ``Tracer`` (a proxy until a provider is installed)."""
    return otel_trace.get_tracer(name)


def get_meter(name: str) -> otel_metrics.Meter:
    """Return an OTel ``Meter`` (a proxy until a provider is installed)."""
    return otel_metrics.get_meter(name)


# ---------------------------------------------------------------------------
# Metric instruments (centralized)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Metrics:
    """Central registry of metric instruments."""

    query_count: Any
    query_latency: Any
    query_rows: Any
    store_errors: Any


def _create_metrics(meter: otel_metrics.Meter) -> _Metrics:
    return _Metrics(
        query_count=meter.create_counter("catalog_query_count", description="Total catalog queries"),
        query_latency=meter.create_histogram(
            "catalog_query_latency_seconds", description="Catalog query latency", unit="s"
        ),
        query_rows=meter.create_histogram("catalog_query_rows", description="Rows returned per catalog query"),
        store_errors=meter.create_counter("catalog_store_errors", description="Graph store failures"),
    )


_metrics = _create_metrics(get_meter("movie_atlas"))


def get_metrics() -> _Metrics:
    """Return the centralized metrics namespace."""
    return _metrics


# ---------------------------------------------------------------------------
# Initialization / shutdown
# ---------------------------------------------------------------------------


def init_telemetry(settings: ObservabilitySettings) -> None:
    """Configure OTel SDK providers based on *settings*.

    Safe to call multiple times — only the first call has effect.
    """
    global _initialized, _enabled  # noqa: PLW0603

    if _initialized:
        return
    _initialized = True

    if not settings.enabled:
        logger.debug("Telemetry disabled")
        return

    from opentelemetry.sdk.metrics import MeterProvider  # noqa: PLC0415
    from opentelemetry.sdk.resources import Resource  # noqa: PLC0415
    from opentelemetry.sdk.trace import TracerProvider  # noqa: PLC0415
    from opentelemetry.sdk.trace.sampling import TraceIdRatioBased  # noqa: PLC0415

    _enabled = True

    resource = Resource.create(
        {
            "service.name": settings.service_name,
            "service.version": _get_version(),
        }
    )

    tracer_provider = TracerProvider(resource=resource, sampler=TraceIdRatioBased(settings.sample_rate))
    span_exporter = _build_span_exporter(settings)
    if span_exporter is not None:
        from opentelemetry.sdk.trace.export import BatchSpanProcessor  # noqa: PLC0415

        tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))
    otel_trace.set_tracer_provider(tracer_provider)

    metric_reader = _build_metric_reader(settings)
    readers = [metric_reader] if metric_reader is not None else []
    otel_metrics.set_meter_provider(MeterProvider(resource=resource, metric_readers=readers))

    logger.info("Telemetry initialized (exporter={}, sample_rate={})", settings.exporter, settings.sample_rate)


def shutdown_telemetry() -> None:
    """Flush and shut down OTel providers. Safe to call even when not initialized."""
    global _initialized, _enabled  # noqa: PLW0603

    if not _initialized or not _enabled:
        _initialized = False
        return

    tp = otel_trace.get_tracer_provider()
    if hasattr(tp, "shutdown"):
        tp.shutdown()

    mp = otel_metrics.get_meter_provider()
    if hasattr(mp, "shutdown"):
        mp.shutdown()

    _initialized = False
    _enabled = False
    logger.debug("Telemetry shut down")


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------


def _get_version() -> str:
    """Best-effort version string."""
    from importlib.metadata import PackageNotFoundError, version  # noqa: PLC0415

    try:
        return version("movie-atlas")
    except PackageNotFoundError:
        return "0.0.0-dev"


def _build_span_exporter(settings: ObservabilitySettings) -> Any:
    """Build a span exporter based on settings, or ``None``."""
    if settings.exporter == "none":
        return None
    if settings.exporter == "console":
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # noqa: PLC0415

        return ConsoleSpanExporter()
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # noqa: PLC0415

    return OTLPSpanExporter(endpoint=settings.endpoint)


def _build_metric_reader(settings: ObservabilitySettings) -> Any:
    """Build a metric reader based on settings, or ``None``."""
    if settings.exporter == "none":
        return None
    if settings.exporter == "console":
        from opentelemetry.sdk.metrics.export import (  # noqa: PLC0415
            ConsoleMetricExporter,
            PeriodicExportingMetricReader,
        )

        return PeriodicExportingMetricReader(ConsoleMetricExporter())
    from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter  # noqa: PLC0415
    from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader  # noqa: PLC0415

    return PeriodicExportingMetricReader(OTLPMetricExporter(endpoint=settings.endpoint))
