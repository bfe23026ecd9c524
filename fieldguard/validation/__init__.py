"""Validation package - presence tracking, strategy selection and error aggregation.

This package holds the strategy-independent core: the structured error model,
the field inspector, presence computation and partial filtering, and the
selector deciding which strategies run for a record.
"""

from .base import FieldError, ValidationError
from .presence import PresenceMap, compute_presence
from .aggregator import ErrorAggregator, aggregate
from .inspector import FieldInfo, iter_fields
from .partial import filter_constraints, filter_violations, leaf_paths
from .selector import Capabilities, Strategy, detect_capabilities, select_strategies

__all__ = [
    "Capabilities",
    "ErrorAggregator",
    "FieldError",
    "FieldInfo",
    "PresenceMap",
    "Strategy",
    "ValidationError",
    "aggregate",
    "compute_presence",
    "detect_capabilities",
    "filter_constraints",
    "filter_violations",
    "iter_fields",
    "leaf_paths",
    "select_strategies",
]
