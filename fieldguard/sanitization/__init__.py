"""Sanitization package - scrubbing sensitive values from reported violations."""

from .redaction import (
    REDACTED_TOKEN,
    Redactor,
    redact_any,
    redact_field_error,
    redact_paths_containing,
    redact_paths_matching,
)

__all__ = [
    "REDACTED_TOKEN",
    "Redactor",
    "redact_any",
    "redact_field_error",
    "redact_paths_containing",
    "redact_paths_matching",
]
