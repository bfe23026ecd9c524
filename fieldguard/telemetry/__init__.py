"""Telemetry package - OpenTelemetry metrics and tracing handles."""

from .metrics import (
    errors_truncated_total,
    presence_depth_exceeded_total,
    record_presence_depth_exceeded,
    record_schema_compile,
    record_schema_evictions,
    record_validation_metrics,
    schema_cache_eviction_total,
    schema_compile_total,
    validation_latency_ms,
    validation_total,
    violation_total,
)
from .runtime import get_tracer, meter

__all__ = [
    "errors_truncated_total",
    "get_tracer",
    "meter",
    "presence_depth_exceeded_total",
    "record_presence_depth_exceeded",
    "record_schema_compile",
    "record_schema_evictions",
    "record_validation_metrics",
    "schema_cache_eviction_total",
    "schema_compile_total",
    "validation_latency_ms",
    "validation_total",
    "violation_total",
]
