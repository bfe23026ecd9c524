# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Built-in tag rules.

Each rule is a predicate over a :class:`FieldLevel` and returns True when the
value satisfies the rule. Length-style rules (``min``, ``max``, ``len``,
``gt`` ...) measure length for strings and collections and magnitude for
numbers. Apart from ``required``, built-in rules accept ``None`` since an
unset optional field has nothing to check.
"""

from __future__ import annotations

import dataclasses
import functools
import re
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Union
from urllib.parse import urlparse

from ..exceptions import ConfigurationError

Number = Union[int, float]

KIND_NIL = "nil"
KIND_BOOL = "bool"
KIND_INT = "int"
KIND_FLOAT = "float"
KIND_STRING = "string"
KIND_BYTES = "bytes"
KIND_LIST = "list"
KIND_MAP = "map"
KIND_STRUCT = "struct"
KIND_OBJECT = "object"

_MISSING = object()


def kind_of(value: Any) -> str:
    if value is None:
        return KIND_NIL
    if isinstance(value, bool):
        return KIND_BOOL
    if isinstance(value, int):
        return KIND_INT
    if isinstance(value, float):
        return KIND_FLOAT
    if isinstance(value, str):
        return KIND_STRING
    if isinstance(value, (bytes, bytearray)):
        return KIND_BYTES
    if isinstance(value, Mapping):
        return KIND_MAP
    if isinstance(value, (list, tuple, set, frozenset)):
        return KIND_LIST
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return KIND_STRUCT
    return KIND_OBJECT


def is_empty(value: Any) -> bool:
    """None, empty strings and empty collections count as empty.

    Numbers and booleans are never empty: ``0`` and ``False`` are real values.
    """

    if value is None:
        return True
    if isinstance(value, (str, bytes, bytearray, Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


@dataclass(frozen=True)
class FieldLevel:
    """Everything a rule may look at for one field value."""

    value: Any
    kind: str
    param: Optional[str]
    parent: Any
    field: str
    path: str

    def sibling(self, name: str, default: Any = None) -> Any:
        """Value of another field on the parent record."""

        if isinstance(self.parent, Mapping):
            return self.parent.get(name, default)
        return getattr(self.parent, name, default)


RuleFunc = Callable[[FieldLevel], bool]


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _number(param: Optional[str], rule: str) -> Number:
    if param is None:
        raise ConfigurationError(f"Rule '{rule}' requires a parameter")
    try:
        return int(param)
    except ValueError:
        pass
    try:
        return float(param)
    except ValueError:
        raise ConfigurationError(
            f"Rule '{rule}' expects a numeric parameter, got {param!r}"
        ) from None


def _measure(value: Any) -> Optional[Number]:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, (str, bytes, bytearray, Mapping, list, tuple, set, frozenset)):
        return len(value)
    return None


def _nullable(func: RuleFunc) -> RuleFunc:
    @functools.wraps(func)
    def wrapper(level: FieldLevel) -> bool:
        if level.value is None:
            return True
        return func(level)

    return wrapper


def _compare(op: Callable[[Number, Number], bool], rule: str) -> RuleFunc:
    @_nullable
    def check(level: FieldLevel) -> bool:
        measured = _measure(level.value)
        if measured is None:
            return False
        return op(measured, _number(level.param, rule))

    check.__name__ = f"rule_{rule}"
    return check


def _pattern(regex: str) -> RuleFunc:
    compiled = re.compile(regex)

    @_nullable
    def check(level: FieldLevel) -> bool:
        return isinstance(level.value, str) and compiled.fullmatch(level.value) is not None

    return check


def _cross_field(op: Callable[[Any, Any], bool], rule: str) -> RuleFunc:
    def check(level: FieldLevel) -> bool:
        if not level.param:
            raise ConfigurationError(f"Rule '{rule}' requires the name of another field")
        other = level.sibling(level.param, _MISSING)
        if other is _MISSING:
            raise ConfigurationError(
                f"Rule '{rule}' on field '{level.field}' references unknown field '{level.param}'"
            )
        if level.value is None or other is None:
            return True
        try:
            return bool(op(level.value, other))
        except TypeError:
            return False

    check.__name__ = f"rule_{rule}"
    return check


# ----------------------------------------------------------------------
# Rules
# ----------------------------------------------------------------------


def rule_required(level: FieldLevel) -> bool:
    return not is_empty(level.value)


_EMAIL_RE = (
    r"[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+"
)

rule_email = _pattern(_EMAIL_RE)
rule_alpha = _pattern(r"[A-Za-z]+")
rule_alphanum = _pattern(r"[A-Za-z0-9]+")


@_nullable
def rule_numeric(level: FieldLevel) -> bool:
    if isinstance(level.value, bool):
        return False
    if isinstance(level.value, (int, float)):
        return True
    return isinstance(level.value, str) and re.fullmatch(r"[-+]?[0-9]+(?:\.[0-9]+)?", level.value) is not None


@_nullable
def rule_url(level: FieldLevel) -> bool:
    if not isinstance(level.value, str):
        return False
    parsed = urlparse(level.value)
    return bool(parsed.scheme and parsed.netloc)


@_nullable
def rule_uuid(level: FieldLevel) -> bool:
    if isinstance(level.value, uuid.UUID):
        return True
    if not isinstance(level.value, str):
        return False
    try:
        uuid.UUID(level.value)
    except ValueError:
        return False
    return True


def _equals(level: FieldLevel) -> bool:
    value = level.value
    if isinstance(value, str):
        return value == (level.param or "")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == _number(level.param, "eq")
    measured = _measure(value)
    return measured is not None and measured == _number(level.param, "eq")


@_nullable
def rule_eq(level: FieldLevel) -> bool:
    return _equals(level)


@_nullable
def rule_ne(level: FieldLevel) -> bool:
    return not _equals(level)


@_nullable
def rule_oneof(level: FieldLevel) -> bool:
    choices = (level.param or "").split()
    value = level.value
    if isinstance(value, str):
        return value in choices
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return any(value == _number(choice, "oneof") for choice in choices)
    return False


@_nullable
def rule_contains(level: FieldLevel) -> bool:
    needle = level.param or ""
    if isinstance(level.value, str):
        return needle in level.value
    if isinstance(level.value, (list, tuple, set, frozenset)):
        return any(str(item) == needle for item in level.value)
    return False


@_nullable
def rule_startswith(level: FieldLevel) -> bool:
    return isinstance(level.value, str) and level.value.startswith(level.param or "")


@_nullable
def rule_endswith(level: FieldLevel) -> bool:
    return isinstance(level.value, str) and level.value.endswith(level.param or "")


BUILTIN_RULES: Dict[str, RuleFunc] = {
    "required": rule_required,
    "email": rule_email,
    "url": rule_url,
    "uuid": rule_uuid,
    "alpha": rule_alpha,
    "alphanum": rule_alphanum,
    "numeric": rule_numeric,
    "min": _compare(lambda a, b: a >= b, "min"),
    "max": _compare(lambda a, b: a <= b, "max"),
    "len": _compare(lambda a, b: a == b, "len"),
    "gt": _compare(lambda a, b: a > b, "gt"),
    "gte": _compare(lambda a, b: a >= b, "gte"),
    "lt": _compare(lambda a, b: a < b, "lt"),
    "lte": _compare(lambda a, b: a <= b, "lte"),
    "eq": rule_eq,
    "ne": rule_ne,
    "oneof": rule_oneof,
    "contains": rule_contains,
    "startswith": rule_startswith,
    "endswith": rule_endswith,
    "eqfield": _cross_field(lambda a, b: a == b, "eqfield"),
    "nefield": _cross_field(lambda a, b: a != b, "nefield"),
    "gtfield": _cross_field(lambda a, b: a > b, "gtfield"),
    "gtefield": _cross_field(lambda a, b: a >= b, "gtefield"),
    "ltfield": _cross_field(lambda a, b: a < b, "ltfield"),
    "ltefield": _cross_field(lambda a, b: a <= b, "ltefield"),
}


def lookup_rule(name: str, custom: Optional[Mapping[str, RuleFunc]] = None) -> RuleFunc:
    """Resolve ``name`` against custom registrations first, then built-ins."""

    if custom and name in custom:
        return custom[name]
    try:
        return BUILTIN_RULES[name]
    except KeyError:
        raise ConfigurationError(f"Unknown validation rule '{name}'") from None


# ----------------------------------------------------------------------
# Messages
# ----------------------------------------------------------------------


def _size_noun(kind: str) -> str:
    if kind in (KIND_STRING, KIND_BYTES):
        return " characters"
    if kind in (KIND_LIST, KIND_MAP):
        return " items"
    return ""


def default_message(name: str, param: Optional[str], kind: str, field: str) -> str:
    """Human-readable default message for a failed built-in rule."""

    noun = _size_noun(kind)
    templates = {
        "required": f"{field} is required",
        "email": f"{field} must be a valid email address",
        "url": f"{field} must be a valid URL",
        "uuid": f"{field} must be a valid UUID",
        "alpha": f"{field} must contain only letters",
        "alphanum": f"{field} must contain only letters and digits",
        "numeric": f"{field} must be numeric",
        "min": f"{field} must be at least {param}{noun}",
        "max": f"{field} must be at most {param}{noun}",
        "len": f"{field} must be exactly {param}{noun}",
        "gt": f"{field} must be greater than {param}{noun}",
        "gte": f"{field} must be at least {param}{noun}",
        "lt": f"{field} must be less than {param}{noun}",
        "lte": f"{field} must be at most {param}{noun}",
        "eq": f"{field} must be equal to {param}",
        "ne": f"{field} must not be equal to {param}",
        "oneof": f"{field} must be one of [{param}]",
        "contains": f"{field} must contain '{param}'",
        "startswith": f"{field} must start with '{param}'",
        "endswith": f"{field} must end with '{param}'",
        "eqfield": f"{field} must be equal to {param}",
        "nefield": f"{field} must not be equal to {param}",
        "gtfield": f"{field} must be greater than {param}",
        "gtefield": f"{field} must be greater than or equal to {param}",
        "ltfield": f"{field} must be less than {param}",
        "ltefield": f"{field} must be less than or equal to {param}",
    }
    return templates.get(name, f"{field} failed '{name}' validation")


__all__ = [
    "BUILTIN_RULES",
    "FieldLevel",
    "RuleFunc",
    "default_message",
    "is_empty",
    "kind_of",
    "lookup_rule",
]
