"""Runtime package - resource limits and the process-wide default validator.

``fieldguard.runtime.default`` is not imported here because it depends on the
validator, which itself depends on the limits defined in ``guard``.
"""

from .guard import (
    DEFAULT_MAX_CACHED_SCHEMAS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_ERRORS,
    DEFAULT_MAX_FIELDS,
    FieldBudget,
    Limits,
    check_limits,
)

__all__ = [
    "DEFAULT_MAX_CACHED_SCHEMAS",
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_MAX_ERRORS",
    "DEFAULT_MAX_FIELDS",
    "FieldBudget",
    "Limits",
    "check_limits",
]
