# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Tag strategy: evaluate ``validate`` tags declared on dataclass fields."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple, Union

from ..runtime.guard import DEFAULT_MAX_DEPTH
from ..tags.parser import DIVE, OMITEMPTY, Rule, parse_tag
from ..tags.rules import FieldLevel, RuleFunc, default_message, is_empty, kind_of, lookup_rule
from ..validation.base import FieldError
from ..validation.inspector import FieldInfo, iter_fields, join_path, sibling_name
from ..validation.partial import filter_constraints
from ..validation.presence import PresenceMap

logger = logging.getLogger(__name__)

CODE_PREFIX = "tag."
CROSS_FIELD_RULES = frozenset({"eqfield", "nefield", "gtfield", "gtefield", "ltfield", "ltefield"})

MessageOverride = Union[str, Callable[[Optional[str], str], str]]
FieldNameFunc = Callable[[str], str]


@dataclass(frozen=True)
class Constraint:
    """The rules bound to one field path."""

    path: str
    info: FieldInfo
    value: Any
    rules: Tuple[Rule, ...]


class TagStrategy:
    """Turn tag rule failures into ``tag.<rule>`` field errors.

    ``custom_tags`` maps rule names to predicates and takes precedence over
    built-in rules of the same name. ``messages`` maps rule names to a static
    message or to ``callable(param, kind)``.
    """

    def __init__(
        self,
        *,
        custom_tags: Optional[Mapping[str, RuleFunc]] = None,
        messages: Optional[Mapping[str, MessageOverride]] = None,
        field_name_func: Optional[FieldNameFunc] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.custom_tags = custom_tags or {}
        self.messages = messages or {}
        self.field_name_func = field_name_func
        self.max_depth = max_depth

    def constraints(self, record: Any) -> List[Constraint]:
        return [
            Constraint(path=path, info=info, value=value, rules=parse_tag(info.tag))
            for path, info, value in iter_fields(record, max_depth=self.max_depth)
            if info.tag
        ]

    def run(self, record: Any, presence: Optional[PresenceMap] = None) -> Iterator[FieldError]:
        constraints = self.constraints(record)
        if presence is not None:
            constraints = filter_constraints(constraints, presence)
        for constraint in constraints:
            yield from self.evaluate(constraint)

    def evaluate(self, constraint: Constraint) -> Iterator[FieldError]:
        yield from self._evaluate(
            constraint.rules,
            path=constraint.path,
            value=constraint.value,
            info=constraint.info,
            base=constraint.path,
        )

    # ------------------------------------------------------------------

    def _evaluate(
        self,
        rules: Sequence[Rule],
        *,
        path: str,
        value: Any,
        info: FieldInfo,
        base: str,
    ) -> Iterator[FieldError]:
        kind = kind_of(value)
        for index, rule in enumerate(rules):
            if rule.name == OMITEMPTY:
                if is_empty(value):
                    return
                continue

            if rule.name == DIVE:
                remaining = rules[index + 1:]
                for key, item in self._elements(value):
                    yield from self._evaluate(
                        remaining, path=join_path(path, key), value=item, info=info, base=base
                    )
                return

            func = lookup_rule(rule.name, self.custom_tags)
            level = FieldLevel(
                value=value,
                kind=kind,
                param=rule.param,
                parent=info.parent,
                field=info.name,
                path=path,
            )
            if func(level):
                continue

            yield self._violation(rule, level, info, base)
            return

    @staticmethod
    def _elements(value: Any) -> Iterable[Tuple[Any, Any]]:
        if isinstance(value, Mapping):
            return list(value.items())
        if isinstance(value, (list, tuple)):
            return list(enumerate(value))
        return []

    def _display_name(self, info: FieldInfo) -> str:
        if self.field_name_func is None:
            return info.serialized
        return self.field_name_func(info.serialized)

    def _message(self, rule: Rule, kind: str, display: str) -> str:
        override = self.messages.get(rule.name)
        if callable(override):
            return override(rule.param, kind)
        if isinstance(override, str):
            return override
        return default_message(rule.name, rule.param, kind, display)

    def _violation(self, rule: Rule, level: FieldLevel, info: FieldInfo, base: str) -> FieldError:
        display = self._display_name(info)
        meta = {
            "tag": rule.name,
            "param": rule.param,
            "value": level.value,
            "kind": level.kind,
            "field": display,
        }
        if rule.name in CROSS_FIELD_RULES and rule.param:
            meta["other"] = rule.param
            meta["other_value"] = level.sibling(rule.param)
            meta["other_path"] = _sibling_path(base, info, rule.param)
        logger.debug("Rule '%s' failed for '%s'", rule, level.path)
        return FieldError(
            path=level.path,
            code=CODE_PREFIX + rule.name,
            message=self._message(rule, level.kind, display),
            meta=meta,
        )


def _sibling_path(base: str, info: FieldInfo, name: str) -> str:
    """Path of field ``name`` next to the field declared at ``base``."""

    prefix = base[: -len(info.serialized)].rstrip(".") if base.endswith(info.serialized) else ""
    return join_path(prefix, sibling_name(info.parent, name))


__all__ = ["Constraint", "TagStrategy"]
