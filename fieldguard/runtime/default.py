# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Process-wide default validator.

The default instance is constructed lazily on first use and exactly once.
Code that needs specific options should build and pass its own
:class:`~fieldguard.validator.Validator`; the helpers below are sugar for
call sites that are happy with the defaults.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Optional

from ..validation.base import ValidationError
from ..validator import Validator

logger = logging.getLogger(__name__)

_LOCK = threading.Lock()
_VALIDATOR: Optional[Validator] = None


def get_default_validator() -> Validator:
    """Return the process-wide validator instance, creating it if needed."""

    global _VALIDATOR
    validator = _VALIDATOR
    if validator is not None:
        return validator
    with _LOCK:
        if _VALIDATOR is None:
            _VALIDATOR = Validator()
            logger.debug("Created default validator")
        return _VALIDATOR


def set_default_validator(validator: Validator) -> None:
    """Install ``validator`` as the process-wide instance."""

    global _VALIDATOR
    if not isinstance(validator, Validator):
        raise TypeError(f"Expected a Validator, got {type(validator).__name__}")
    with _LOCK:
        _VALIDATOR = validator


def reset_default_validator() -> None:
    """Drop the process-wide instance; the next use builds a fresh one."""

    global _VALIDATOR
    with _LOCK:
        _VALIDATOR = None


def validate(record: Any, **kwargs: Any) -> None:
    get_default_validator().validate(record, **kwargs)


def check(record: Any, **kwargs: Any) -> Optional[ValidationError]:
    return get_default_validator().check(record, **kwargs)


def validate_partial(record: Any, raw: Any, **kwargs: Any) -> None:
    get_default_validator().validate_partial(record, raw, **kwargs)


__all__ = [
    "check",
    "get_default_validator",
    "reset_default_validator",
    "set_default_validator",
    "validate",
    "validate_partial",
]
