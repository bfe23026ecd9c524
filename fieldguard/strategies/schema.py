# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Schema strategy: match a record against the JSON schema it provides."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Mapping, Optional, Set, Tuple

from jsonschema.exceptions import ValidationError as SchemaViolation

from ..runtime.guard import DEFAULT_MAX_DEPTH
from ..validation.base import FieldError
from ..validation.inspector import join_path, to_primitive
from ..validation.partial import filter_violations
from ..validation.presence import PresenceMap
from ..validation.selector import SCHEMA_METHOD
from .schema_cache import SchemaCache

logger = logging.getLogger(__name__)

CODE_PREFIX = "schema."

_SCALAR_PARAM_KEYWORDS = frozenset({
    "type", "minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum",
    "minLength", "maxLength", "minItems", "maxItems", "minProperties",
    "maxProperties", "pattern", "format", "multipleOf", "enum", "const",
})


def _path(parts: Iterable[Any]) -> str:
    path = ""
    for part in parts:
        path = join_path(path, part)
    return path


def schema_source(record: Any, override: Optional[Tuple[str, Any]] = None) -> Tuple[str, Any]:
    """``(schema_id, schema)`` from the per-call override or the record."""

    if override is not None:
        return override
    schema_id, source = getattr(record, SCHEMA_METHOD)()
    return str(schema_id), source


class SchemaStrategy:
    def __init__(self, cache: SchemaCache, *, max_depth: int = DEFAULT_MAX_DEPTH):
        self.cache = cache
        self.max_depth = max_depth

    def run(
        self,
        record: Any,
        presence: Optional[PresenceMap] = None,
        *,
        override: Optional[Tuple[str, Any]] = None,
    ) -> Iterator[FieldError]:
        schema_id, source = schema_source(record, override)
        matcher = self.cache.get_or_compile(schema_id, source)
        instance = to_primitive(record, max_depth=self.max_depth)

        violations = self._translate(matcher.iter_errors(instance), schema_id)
        if presence is not None:
            violations = filter_violations(violations, presence)
        yield from violations

    def _translate(self, errors: Iterable[SchemaViolation], schema_id: str) -> Iterator[FieldError]:
        seen_required: Set[str] = set()
        for error in errors:
            path = _path(error.absolute_path)
            keyword = str(error.validator)

            if keyword == "required" and isinstance(error.instance, Mapping):
                for prop in error.validator_value:
                    prop_path = join_path(path, prop)
                    if prop in error.instance or prop_path in seen_required:
                        continue
                    seen_required.add(prop_path)
                    yield FieldError(
                        path=prop_path,
                        code=CODE_PREFIX + keyword,
                        message=f"{prop} is required",
                        meta={"keyword": keyword, "schema_id": schema_id},
                    )
                continue

            meta = {
                "keyword": keyword,
                "schema_id": schema_id,
                "value": error.instance,
                "schema_path": _path(error.absolute_schema_path),
            }
            if keyword in _SCALAR_PARAM_KEYWORDS:
                meta["param"] = error.validator_value
            yield FieldError(path=path, code=CODE_PREFIX + keyword, message=error.message, meta=meta)


__all__ = ["SchemaStrategy", "schema_source"]
