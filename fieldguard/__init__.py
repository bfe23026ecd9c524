# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""fieldguard - multi-strategy structural validation for request records."""

__version__ = "0.1.0"

from .exceptions import (
    ConfigurationError,
    FieldGuardError,
    FieldLimitExceededError,
    InputError,
    InvalidRecordError,
    PresenceParseError,
    ResourceLimitError,
    SchemaCompileError,
    UnsupportedStrategyError,
)
from .validation import (
    FieldError,
    PresenceMap,
    Strategy,
    ValidationError,
    compute_presence,
    leaf_paths,
)
from .sanitization import (
    REDACTED_TOKEN,
    redact_any,
    redact_paths_containing,
    redact_paths_matching,
)
from .tags import FieldLevel, tag
from .config import ValidatorConfig, config_from_env, load_config
from .validator import Validator
from .runtime.default import (
    check,
    get_default_validator,
    reset_default_validator,
    set_default_validator,
    validate,
    validate_partial,
)

__all__ = [
    "ConfigurationError",
    "FieldError",
    "FieldGuardError",
    "FieldLevel",
    "FieldLimitExceededError",
    "InputError",
    "InvalidRecordError",
    "PresenceMap",
    "PresenceParseError",
    "REDACTED_TOKEN",
    "ResourceLimitError",
    "SchemaCompileError",
    "Strategy",
    "UnsupportedStrategyError",
    "ValidationError",
    "Validator",
    "ValidatorConfig",
    "check",
    "compute_presence",
    "config_from_env",
    "get_default_validator",
    "leaf_paths",
    "load_config",
    "redact_any",
    "redact_paths_containing",
    "redact_paths_matching",
    "reset_default_validator",
    "set_default_validator",
    "tag",
    "validate",
    "validate_partial",
]
