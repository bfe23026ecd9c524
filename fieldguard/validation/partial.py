# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Presence-based narrowing of constraints for partial validation.

Presence, not value, gates evaluation: a constraint on an absent path never
runs (``required`` included), while every constraint on a present path runs
even when the submitted value is empty or zero.
"""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, List, Protocol, TypeVar

from .base import FieldError
from .presence import PresenceMap

logger = logging.getLogger(__name__)


class HasPath(Protocol):
    path: str


T = TypeVar("T", bound=HasPath)


def is_active(path: str, presence: PresenceMap) -> bool:
    """Root-level (empty) paths always apply; others only when present."""

    return not path or presence.has(path)


def filter_constraints(constraints: Iterable[T], presence: PresenceMap) -> List[T]:
    """Keep only constraints whose path was supplied by the caller."""

    kept: List[T] = []
    dropped = 0
    for constraint in constraints:
        if is_active(constraint.path, presence):
            kept.append(constraint)
        else:
            dropped += 1
    if dropped:
        logger.debug("Partial validation skipped %d constraint(s) on absent fields", dropped)
    return kept


def filter_violations(errors: Iterable[FieldError], presence: PresenceMap) -> Iterator[FieldError]:
    """Drop violations reported by opaque strategies for absent fields."""

    for error in errors:
        if is_active(error.path, presence):
            yield error


def leaf_paths(presence: PresenceMap) -> List[str]:
    """Present paths that are terminal data fields rather than containers."""

    return presence.leaf_paths()


__all__ = ["filter_constraints", "filter_violations", "is_active", "leaf_paths"]
