# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Exception hierarchy for fieldguard.

Field violations are never raised one by one: they are collected into a single
:class:`~fieldguard.validation.base.ValidationError`. Everything in this module
describes a problem with the *call* itself (bad input, bad configuration, a
resource limit) and aborts validation immediately.
"""

from __future__ import annotations

from typing import Optional


class FieldGuardError(Exception):
    """Base exception for all fieldguard errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(FieldGuardError):
    """Invalid validator options or configuration file contents."""


class InputError(FieldGuardError):
    """The input handed to the validator cannot be validated at all."""


class InvalidRecordError(InputError):
    """A non-object value was passed where a record was expected."""

    def __init__(self, value_type: str):
        self.value_type = value_type
        super().__init__(f"Expected a record object, got value of type '{value_type}'")


class PresenceParseError(InputError):
    """The raw serialized record could not be decoded."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Cannot compute field presence: {reason}")


class UnsupportedStrategyError(InputError):
    """The requested strategy is not supported by the record's type."""

    def __init__(self, strategy: str, record_type: str):
        self.strategy = strategy
        self.record_type = record_type
        super().__init__(
            f"Strategy '{strategy}' is not supported by records of type '{record_type}'"
        )


class ResourceLimitError(FieldGuardError):
    """A hard resource bound was exceeded while processing input."""


class FieldLimitExceededError(ResourceLimitError):
    """The raw record contains more fields than the configured maximum."""

    def __init__(self, limit: int, path: Optional[str] = None):
        self.limit = limit
        self.path = path
        detail = f" (at '{path}')" if path else ""
        super().__init__(f"Field limit of {limit} exceeded{detail}")


class SchemaCompileError(FieldGuardError):
    """A schema provider returned a schema that cannot be compiled."""

    def __init__(self, schema_id: str, reason: str):
        self.schema_id = schema_id
        self.reason = reason
        super().__init__(f"Cannot compile schema '{schema_id}': {reason}")


__all__ = [
    "FieldGuardError",
    "ConfigurationError",
    "InputError",
    "InvalidRecordError",
    "PresenceParseError",
    "UnsupportedStrategyError",
    "ResourceLimitError",
    "FieldLimitExceededError",
    "SchemaCompileError",
]
