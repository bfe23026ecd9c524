# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Bounded LRU cache of compiled JSON schemas.

The cache is the only mutable state shared between concurrent validation
calls. Lookup, promotion, compilation, insertion and eviction all happen under
one lock so the recency order stays consistent and each schema id is compiled
once while it remains cached.
"""

from __future__ import annotations

import json
import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import SchemaError
from jsonschema.protocols import Validator as Matcher
from jsonschema.validators import validator_for

from ..exceptions import ConfigurationError, SchemaCompileError
from ..runtime.guard import DEFAULT_MAX_CACHED_SCHEMAS
from ..telemetry.metrics import record_schema_compile, record_schema_evictions

logger = logging.getLogger(__name__)

Compiler = Callable[[str, Any], Matcher]


@dataclass(frozen=True)
class SchemaCacheEntry:
    schema_id: str
    matcher: Matcher


def compile_schema(schema_id: str, source: Any) -> Matcher:
    """Compile ``source`` (a mapping, boolean or JSON text) into a matcher."""

    if isinstance(source, (bytes, bytearray)):
        source = source.decode("utf-8", errors="replace")
    if isinstance(source, str):
        try:
            source = json.loads(source)
        except json.JSONDecodeError as exc:
            raise SchemaCompileError(schema_id, f"invalid JSON: {exc.msg}") from exc
    if not isinstance(source, (Mapping, bool)):
        raise SchemaCompileError(schema_id, f"expected an object, got {type(source).__name__}")

    cls = validator_for(source, default=Draft202012Validator)
    try:
        cls.check_schema(source)
    except SchemaError as exc:
        raise SchemaCompileError(schema_id, exc.message) from exc
    return cls(source, format_checker=FormatChecker())


class SchemaCache:
    """Thread-safe LRU of compiled schemas keyed by schema id."""

    def __init__(self, capacity: int = DEFAULT_MAX_CACHED_SCHEMAS, *, compiler: Compiler = compile_schema):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ConfigurationError(f"Schema cache capacity must be a positive integer, got {capacity!r}")
        self.capacity = capacity
        self._compiler = compiler
        self._entries: "OrderedDict[str, SchemaCacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self.compile_count = 0
        self.eviction_count = 0

    def get_or_compile(self, schema_id: str, source: Any) -> Matcher:
        evicted = 0
        with self._lock:
            entry = self._entries.get(schema_id)
            if entry is not None:
                self._entries.move_to_end(schema_id)
                return entry.matcher

            matcher = self._compiler(schema_id, source)
            self._entries[schema_id] = SchemaCacheEntry(schema_id=schema_id, matcher=matcher)
            self.compile_count += 1
            logger.debug("Compiled schema '%s'", schema_id)

            while len(self._entries) > self.capacity:
                evicted_id, _ = self._entries.popitem(last=False)
                evicted += 1
                logger.debug("Evicted schema '%s' from cache", evicted_id)
            self.eviction_count += evicted

        record_schema_compile()
        record_schema_evictions(evicted)
        return matcher

    def __contains__(self, schema_id: object) -> bool:
        with self._lock:
            return schema_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self) -> list:
        """Cached ids from least to most recently used."""

        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


__all__ = ["SchemaCache", "SchemaCacheEntry", "compile_schema"]
