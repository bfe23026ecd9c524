# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Collect violations from every active strategy into one error."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..sanitization.redaction import Redactor, redact_field_error
from .base import FieldError, ValidationError

logger = logging.getLogger(__name__)


class ErrorAggregator:
    """Append-only violation sink with redaction and a reporting cap.

    Once ``max_errors`` violations have been kept (when ``max_errors > 0``),
    further violations are counted but dropped and the result is flagged as
    truncated.
    """

    def __init__(self, max_errors: int = 0, redactor: Optional[Redactor] = None):
        self.max_errors = max_errors
        self.redactor = redactor
        self.total = 0
        self._fields: List[FieldError] = []

    @property
    def truncated(self) -> bool:
        return self.max_errors > 0 and self.total > self.max_errors

    @property
    def full(self) -> bool:
        return self.max_errors > 0 and len(self._fields) >= self.max_errors

    def add(self, error: FieldError) -> bool:
        """Record ``error``; returns False when it was dropped by the cap."""

        self.total += 1
        if self.full:
            return False
        self._fields.append(redact_field_error(error, self.redactor))
        return True

    def extend(self, errors: Iterable[FieldError]) -> None:
        for error in errors:
            self.add(error)

    def __len__(self) -> int:
        return len(self._fields)

    def result(self, *, sort: bool = True) -> Optional[ValidationError]:
        """Build the final :class:`ValidationError`, or ``None`` when clean."""

        if not self._fields:
            return None

        if self.truncated:
            logger.warning(
                "Reported %d of %d violations (max_errors=%d)",
                len(self._fields),
                self.total,
                self.max_errors,
            )

        error = ValidationError(self._fields, truncated=self.truncated)
        if sort:
            error.sort()
        return error


def aggregate(
    *streams: Iterable[FieldError],
    max_errors: int = 0,
    redactor: Optional[Redactor] = None,
    sort: bool = True,
) -> Optional[ValidationError]:
    """Merge violation streams in order into a single error (or ``None``)."""

    aggregator = ErrorAggregator(max_errors=max_errors, redactor=redactor)
    for stream in streams:
        aggregator.extend(stream)
    return aggregator.result(sort=sort)


__all__ = ["ErrorAggregator", "aggregate"]
