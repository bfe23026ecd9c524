# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""OpenTelemetry handles used across fieldguard.

Without a configured SDK the OpenTelemetry API hands out no-op instruments, so
importing this module never requires exporters to be installed.
"""

from __future__ import annotations

from opentelemetry import metrics, trace

from .. import __version__

meter = metrics.get_meter("fieldguard", __version__)


def get_tracer(name: str = "fieldguard"):
    """Return a tracer for *name* from the global tracer provider."""

    return trace.get_tracer(name, __version__)


__all__ = ["get_tracer", "meter"]
