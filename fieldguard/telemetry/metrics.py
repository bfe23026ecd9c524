# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Metric instrument definitions for fieldguard."""

from __future__ import annotations

import time
from typing import Sequence

from .runtime import meter

validation_total = meter.create_counter(
    name="fieldguard.validation.total",
    description="Counts validation calls partitioned by outcome.",
    unit="1",
)

violation_total = meter.create_counter(
    name="fieldguard.violation.total",
    description="Counts field violations reported to callers.",
    unit="1",
)

validation_latency_ms = meter.create_histogram(
    name="fieldguard.validation.latency.ms",
    description="End-to-end time for a single validation call.",
    unit="ms",
)

schema_compile_total = meter.create_counter(
    name="fieldguard.schema.compile.total",
    description="Counts schema compilations (cache misses).",
    unit="1",
)

schema_cache_eviction_total = meter.create_counter(
    name="fieldguard.schema.cache.eviction.total",
    description="Counts compiled schemas evicted from the LRU cache.",
    unit="1",
)

presence_depth_exceeded_total = meter.create_counter(
    name="fieldguard.presence.depth_exceeded.total",
    description="Counts presence computations truncated at the depth limit.",
    unit="1",
)

errors_truncated_total = meter.create_counter(
    name="fieldguard.errors.truncated.total",
    description="Counts validation results truncated at max_errors.",
    unit="1",
)

def record_validation_metrics(
    strategies: Sequence[str],
    outcome: str,
    started_at: float,
    *,
    violations: int = 0,
    truncated: bool = False,
) -> None:
    """Record latency and outcome for one validation call.

    Args:
        strategies: Strategy names that ran, in execution order
        outcome: "valid", "invalid" or "error"
        started_at: Timestamp from time.perf_counter() when validation started
        violations: Number of violations reported
        truncated: Whether the reported violations were capped
    """
    try:
        attributes = {"strategies": ",".join(strategies) or "none", "outcome": outcome}
        duration_ms = (time.perf_counter() - started_at) * 1000.0
        validation_latency_ms.record(duration_ms, attributes)
        validation_total.add(1, attributes)
        if violations:
            violation_total.add(violations, attributes)
        if truncated:
            errors_truncated_total.add(1, attributes)
    except Exception:
        # Telemetry must never interfere with validation
        pass


def _add_safely(counter, amount: int = 1) -> None:
    try:
        counter.add(amount)
    except Exception:
        pass

def record_schema_compile() -> None:
    _add_safely(schema_compile_total)

def record_schema_evictions(count: int) -> None:
    if count:
        _add_safely(schema_cache_eviction_total, count)

def record_presence_depth_exceeded() -> None:
    _add_safely(presence_depth_exceeded_total)

__all__ = [
    "errors_truncated_total",
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
