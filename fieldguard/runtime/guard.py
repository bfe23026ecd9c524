# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Resource bounds consulted while handling attacker-controlled input."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, Optional

from ..exceptions import ConfigurationError, FieldLimitExceededError

logger = logging.getLogger(__name__)


DEFAULT_MAX_DEPTH: Final[int] = 100
DEFAULT_MAX_FIELDS: Final[int] = 10_000
DEFAULT_MAX_CACHED_SCHEMAS: Final[int] = 1024
DEFAULT_MAX_ERRORS: Final[int] = 0  # unlimited


@dataclass(frozen=True)
class Limits:
    """Numeric bounds for one validation call.

    ``max_errors`` of ``0`` disables truncation. The other limits must be
    positive.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    max_fields: int = DEFAULT_MAX_FIELDS
    max_cached_schemas: int = DEFAULT_MAX_CACHED_SCHEMAS
    max_errors: int = DEFAULT_MAX_ERRORS

    def __post_init__(self):
        check_limits(
            max_depth=self.max_depth,
            max_fields=self.max_fields,
            max_cached_schemas=self.max_cached_schemas,
            max_errors=self.max_errors,
        )


def check_limits(
    *,
    max_depth: int,
    max_fields: int,
    max_cached_schemas: int,
    max_errors: int,
) -> None:
    """Raise :class:`ConfigurationError` for out-of-range limit values."""

    problems = []
    for name, value, minimum in (
        ("max_depth", max_depth, 1),
        ("max_fields", max_fields, 1),
        ("max_cached_schemas", max_cached_schemas, 1),
        ("max_errors", max_errors, 0),
    ):
        if isinstance(value, bool) or not isinstance(value, int):
            problems.append(f"{name} must be an integer, got {type(value).__name__}")
        elif value < minimum:
            problems.append(f"{name} must be >= {minimum}, got {value}")

    if problems:
        logger.error("Invalid validator limits: %s", "; ".join(problems))
        raise ConfigurationError("Invalid limits: " + "; ".join(problems))


class FieldBudget:
    """Counts recorded fields and fails once ``limit`` is exceeded."""

    __slots__ = ("limit", "count")

    def __init__(self, limit: int):
        self.limit = limit
        self.count = 0

    def spend(self, path: Optional[str] = None) -> None:
        self.count += 1
        if self.count > self.limit:
            logger.warning("Field limit of %d exceeded at '%s'", self.limit, path)
            raise FieldLimitExceededError(self.limit, path)


def depth_allowed(depth: int, limit: int) -> bool:
    """Return True when a node at ``depth`` may still be visited."""

    return depth <= limit


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_MAX_FIELDS",
    "DEFAULT_MAX_CACHED_SCHEMAS",
    "DEFAULT_MAX_ERRORS",
    "FieldBudget",
    "Limits",
    "check_limits",
    "depth_allowed",
]
