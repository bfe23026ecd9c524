# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Validator configuration.

:class:`ValidatorConfig` is frozen: a :class:`~fieldguard.validator.Validator`
owns one for its lifetime and every call works on an immutable snapshot built
with :meth:`ValidatorConfig.merge`. Invalid values are rejected when the
configuration is built, never at validation time.

Configuration can also be read from a YAML/JSON file (:func:`load_config`) or
from ``FIELDGUARD_*`` environment variables (:func:`config_from_env`).
"""

from __future__ import annotations

import difflib
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

import yaml

from .exceptions import ConfigurationError
from .runtime.guard import (
    DEFAULT_MAX_CACHED_SCHEMAS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_ERRORS,
    DEFAULT_MAX_FIELDS,
    check_limits,
)
from .sanitization.redaction import Redactor, redact_paths_containing
from .strategies.tags import MessageOverride
from .tags.parser import DIVE, OMITEMPTY
from .tags.rules import RuleFunc
from .validation.presence import PresenceMap
from .validation.selector import Strategy

logger = logging.getLogger(__name__)

# Options fixed for the lifetime of a Validator.
INSTANCE_ONLY_OPTIONS = frozenset({"custom_tags", "max_cached_schemas"})

ENV_PREFIX = "FIELDGUARD_"


@dataclass(frozen=True)
class ValidatorConfig:
    strategy: Strategy = Strategy.AUTO
    run_all: bool = False
    require_any: bool = False
    max_errors: int = DEFAULT_MAX_ERRORS
    max_fields: int = DEFAULT_MAX_FIELDS
    max_depth: int = DEFAULT_MAX_DEPTH
    max_cached_schemas: int = DEFAULT_MAX_CACHED_SCHEMAS
    redactor: Optional[Redactor] = None
    custom_tags: Mapping[str, RuleFunc] = field(default_factory=dict)
    messages: Mapping[str, MessageOverride] = field(default_factory=dict)
    field_name_func: Optional[Callable[[str], str]] = None
    sort_errors: bool = True
    partial: bool = False
    presence: Optional[PresenceMap] = None
    disallow_unknown_fields: bool = False
    schema: Optional[Tuple[str, Any]] = None
    validator_func: Optional[Callable[..., Any]] = None

    def __post_init__(self):
        object.__setattr__(self, "strategy", _coerce_strategy(self.strategy))
        check_limits(
            max_depth=self.max_depth,
            max_fields=self.max_fields,
            max_cached_schemas=self.max_cached_schemas,
            max_errors=self.max_errors,
        )

        for name in ("run_all", "require_any", "sort_errors", "partial", "disallow_unknown_fields"):
            if not isinstance(getattr(self, name), bool):
                raise ConfigurationError(f"Option '{name}' must be a bool, got {getattr(self, name)!r}")

        if self.require_any and not self.run_all:
            raise ConfigurationError("Option 'require_any' only applies together with run_all=True")

        for name in ("redactor", "field_name_func", "validator_func"):
            value = getattr(self, name)
            if value is not None and not callable(value):
                raise ConfigurationError(f"Option '{name}' must be callable, got {type(value).__name__}")

        if self.presence is not None and not isinstance(self.presence, PresenceMap):
            raise ConfigurationError("Option 'presence' must be a PresenceMap")

        if self.schema is not None:
            if not isinstance(self.schema, tuple) or len(self.schema) != 2 or not self.schema[0]:
                raise ConfigurationError("Option 'schema' must be a (schema_id, schema) tuple")
            object.__setattr__(self, "schema", (str(self.schema[0]), self.schema[1]))

        object.__setattr__(self, "custom_tags", MappingProxyType(_check_custom_tags(self.custom_tags)))
        object.__setattr__(self, "messages", MappingProxyType(_check_messages(self.messages)))

    @property
    def partial_enabled(self) -> bool:
        return self.partial or self.presence is not None

    def merge(self, *, _construction: bool = False, **overrides: Any) -> "ValidatorConfig":
        """Return a new config with ``overrides`` applied."""

        if not overrides:
            return self
        check_option_names(overrides)
        if not _construction:
            fixed = sorted(INSTANCE_ONLY_OPTIONS.intersection(overrides))
            if fixed:
                raise ConfigurationError(
                    f"Option(s) {fixed} can only be set when the Validator is constructed"
                )
        return replace(self, **overrides)


def _coerce_strategy(value: Any) -> Strategy:
    if isinstance(value, Strategy):
        return value
    try:
        return Strategy(str(value).lower())
    except ValueError:
        choices = ", ".join(s.value for s in Strategy)
        raise ConfigurationError(f"Unknown strategy {value!r}; expected one of: {choices}") from None


def _check_custom_tags(tags: Optional[Mapping[str, Any]]) -> Dict[str, RuleFunc]:
    checked: Dict[str, RuleFunc] = {}
    for name, func in dict(tags or {}).items():
        if not isinstance(name, str) or not name or any(ch in name for ch in ",= "):
            raise ConfigurationError(f"Invalid custom tag name {name!r}")
        if name in (OMITEMPTY, DIVE):
            raise ConfigurationError(f"Custom tag name '{name}' is reserved")
        if not callable(func):
            raise ConfigurationError(f"Custom tag '{name}' must be callable")
        checked[name] = func
    return checked


def _check_messages(messages: Optional[Mapping[str, Any]]) -> Dict[str, MessageOverride]:
    checked: Dict[str, MessageOverride] = {}
    for name, message in dict(messages or {}).items():
        if not isinstance(message, str) and not callable(message):
            raise ConfigurationError(
                f"Message override for '{name}' must be a string or callable(param, kind)"
            )
        checked[str(name)] = message
    return checked


def option_names() -> Tuple[str, ...]:
    return tuple(f.name for f in fields(ValidatorConfig))


def check_option_names(options: Mapping[str, Any]) -> None:
    """Reject unknown option names, suggesting close matches."""

    known = option_names()
    unknown = [name for name in options if name not in known]
    if not unknown:
        return

    details = []
    for name in sorted(unknown):
        suggestion = difflib.get_close_matches(name, known, n=1)
        if suggestion:
            details.append(f"'{name}' (did you mean '{suggestion[0]}'?)")
        else:
            details.append(f"'{name}'")
    logger.error("Unknown validator option(s): %s", ", ".join(details))
    raise ConfigurationError(f"Unknown validator option(s): {', '.join(details)}")


# ----------------------------------------------------------------------
# File and environment loading
# ----------------------------------------------------------------------

FILE_OPTIONS = frozenset({
    "strategy",
    "run_all",
    "require_any",
    "max_errors",
    "max_fields",
    "max_depth",
    "max_cached_schemas",
    "sort_errors",
    "disallow_unknown_fields",
    "messages",
})


def config_from_mapping(data: Mapping[str, Any], *, source: str = "<mapping>") -> ValidatorConfig:
    """Build a config from plain data (a parsed file or a dict).

    A top-level ``fieldguard`` section is unwrapped when present. ``redact`` is
    a list of path substrings turned into a redactor.
    """

    if "fieldguard" in data and isinstance(data["fieldguard"], Mapping):
        data = data["fieldguard"]

    options: Dict[str, Any] = {}
    unknown = []
    for key, value in data.items():
        if key == "redact":
            needles = [value] if isinstance(value, str) else list(value or [])
            if not all(isinstance(n, str) and n for n in needles):
                raise ConfigurationError(f"{source}: 'redact' must be a list of non-empty strings")
            if needles:
                options["redactor"] = redact_paths_containing(*needles)
        elif key in FILE_OPTIONS:
            options[key] = value
        else:
            unknown.append(str(key))

    if unknown:
        allowed = sorted(FILE_OPTIONS | {"redact"})
        details = []
        for name in sorted(unknown):
            suggestion = difflib.get_close_matches(name, allowed, n=1)
            details.append(f"'{name}' (did you mean '{suggestion[0]}'?)" if suggestion else f"'{name}'")
        logger.error("%s: unknown configuration key(s): %s", source, ", ".join(details))
        raise ConfigurationError(f"{source}: unknown configuration key(s): {', '.join(details)}")

    try:
        return ValidatorConfig(**options)
    except ConfigurationError as exc:
        raise ConfigurationError(f"{source}: {exc.message}") from exc


def load_config(path: Union[str, Path]) -> ValidatorConfig:
    """Load a YAML (or JSON) configuration file."""

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read configuration file {path}: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid configuration file {path}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    logger.debug("Loaded validator configuration from %s", path)
    return config_from_mapping(data, source=str(path))


def _env_bool(value: str) -> bool:
    return value.strip().lower() not in ("", "0", "false", "no")


def _env_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> ValidatorConfig:
    """Build a config from ``FIELDGUARD_*`` environment variables.

    ``FIELDGUARD_REDACT`` is a comma-separated list of path substrings.
    """

    env = os.environ if environ is None else environ
    options: Dict[str, Any] = {}

    for option in ("max_errors", "max_fields", "max_depth", "max_cached_schemas"):
        name = ENV_PREFIX + option.upper()
        if env.get(name):
            options[option] = _env_int(name, env[name])

    if env.get(ENV_PREFIX + "STRATEGY"):
        options["strategy"] = env[ENV_PREFIX + "STRATEGY"]
    if ENV_PREFIX + "RUN_ALL" in env:
        options["run_all"] = _env_bool(env[ENV_PREFIX + "RUN_ALL"])

    needles = [n.strip() for n in env.get(ENV_PREFIX + "REDACT", "").split(",") if n.strip()]
    if needles:
        options["redactor"] = redact_paths_containing(*needles)

    return ValidatorConfig(**options)


__all__ = [
    "INSTANCE_ONLY_OPTIONS",
    "ValidatorConfig",
    "check_option_names",
    "config_from_env",
    "config_from_mapping",
    "load_config",
    "option_names",
]
