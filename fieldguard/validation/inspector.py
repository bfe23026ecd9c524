# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Field traversal over dataclass records.

:func:`iter_fields` lazily yields ``(path, FieldInfo, value)`` triples for
every dataclass field reachable from a record, descending into nested
dataclasses and into lists/mappings of dataclasses. Paths use the serialized
field name (``metadata["json"]`` when set) so they line up with presence
paths computed from raw input.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..runtime.guard import DEFAULT_MAX_DEPTH, depth_allowed
from ..tags.parser import NAME_KEY, TAG_KEY
from ..tags.rules import kind_of

logger = logging.getLogger(__name__)

HIDDEN = "-"


@dataclass(frozen=True)
class FieldInfo:
    """Static description of one dataclass field at a concrete path."""

    name: str  # attribute name
    serialized: str  # name used in paths
    kind: str
    tag: Optional[str]
    parent: Any


def is_record(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def serialized_name(field: dataclasses.Field) -> str:
    return field.metadata.get(NAME_KEY) or field.name


def join_path(prefix: str, segment: Any) -> str:
    return f"{prefix}.{segment}" if prefix else str(segment)


def sibling_name(parent: Any, name: str) -> str:
    """Serialized name of the field called ``name`` on ``parent``."""

    if is_record(parent):
        for field in dataclasses.fields(parent):
            if field.name == name:
                return serialized_name(field)
    return name


def _element_records(value: Any, path: str) -> List[Tuple[str, Any]]:
    if isinstance(value, Mapping):
        items = [(join_path(path, key), item) for key, item in value.items()]
    elif isinstance(value, (list, tuple)):
        items = [(join_path(path, index), item) for index, item in enumerate(value)]
    else:
        return []
    return [(item_path, item) for item_path, item in items if is_record(item)]


def _entries(record: Any, prefix: str) -> Iterator[Tuple[str, Any, dataclasses.Field, Any]]:
    for field in dataclasses.fields(record):
        name = serialized_name(field)
        if name == HIDDEN:
            continue
        yield join_path(prefix, name), record, field, getattr(record, field.name, None)


def iter_fields(
    record: Any,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[Tuple[str, FieldInfo, Any]]:
    """Yield ``(path, FieldInfo, value)`` for every field, in declaration order."""

    if not is_record(record):
        return

    stack: List[Tuple[Iterator, int]] = [(_entries(record, ""), 1)]
    while stack:
        entries, depth = stack[-1]
        entry = next(entries, None)
        if entry is None:
            stack.pop()
            continue

        path, parent, field, value = entry
        info = FieldInfo(
            name=field.name,
            serialized=serialized_name(field),
            kind=kind_of(value),
            tag=field.metadata.get(TAG_KEY),
            parent=parent,
        )
        yield path, info, value

        nested: List[Tuple[str, Any]] = []
        if is_record(value):
            nested.append((path, value))
        else:
            nested.extend(_element_records(value, path))

        if not nested:
            continue
        if not depth_allowed(depth + 1, max_depth):
            logger.warning("Field traversal stopped at max depth %d (path '%s')", max_depth, path)
            continue
        for nested_path, nested_record in reversed(nested):
            stack.append((_entries(nested_record, nested_path), depth + 1))


def has_tags(record: Any, *, max_depth: int = DEFAULT_MAX_DEPTH) -> bool:
    """True when any reachable field carries a ``validate`` tag."""

    return any(info.tag for _, info, _ in iter_fields(record, max_depth=max_depth))


def to_primitive(value: Any, *, max_depth: int = DEFAULT_MAX_DEPTH, _depth: int = 0) -> Any:
    """Convert a record into JSON-compatible builtins keyed by serialized names."""

    if _depth > max_depth:
        return value
    if is_record(value):
        result: Dict[str, Any] = {}
        for field in dataclasses.fields(value):
            name = serialized_name(field)
            if name == HIDDEN:
                continue
            result[name] = to_primitive(getattr(value, field.name, None), max_depth=max_depth, _depth=_depth + 1)
        return result
    if isinstance(value, Mapping):
        return {
            str(key): to_primitive(item, max_depth=max_depth, _depth=_depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_primitive(item, max_depth=max_depth, _depth=_depth + 1) for item in value]
    if _is_plain_object(value):
        return {
            key: to_primitive(item, max_depth=max_depth, _depth=_depth + 1)
            for key, item in vars(value).items()
            if not key.startswith("_")
        }
    return value


def _is_plain_object(value: Any) -> bool:
    return (
        hasattr(value, "__dict__")
        and not isinstance(value, (type, Enum))
        and not callable(value)
    )


def unknown_fields(
    record: Any,
    tree: Any,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[str]:
    """Yield raw paths whose keys the record's dataclass does not declare."""

    if not is_record(record) or not isinstance(tree, Mapping):
        return

    stack: List[Tuple[Any, Mapping, str, int]] = [(record, tree, "", 1)]
    while stack:
        current, node, prefix, depth = stack.pop()
        declared = {
            serialized_name(field): field
            for field in dataclasses.fields(current)
            if serialized_name(field) != HIDDEN
        }
        for key in sorted(str(k) for k in node):
            path = join_path(prefix, key)
            field = declared.get(key)
            if field is None:
                yield path
                continue
            if not depth_allowed(depth + 1, max_depth):
                continue
            value = getattr(current, field.name, None)
            child = node[key]
            if is_record(value) and isinstance(child, Mapping):
                stack.append((value, child, path, depth + 1))
            elif isinstance(value, (list, tuple)) and isinstance(child, list):
                for index, (item, raw_item) in enumerate(zip(value, child)):
                    if is_record(item) and isinstance(raw_item, Mapping):
                        stack.append((item, raw_item, join_path(path, index), depth + 1))


__all__ = [
    "FieldInfo",
    "has_tags",
    "is_record",
    "iter_fields",
    "join_path",
    "serialized_name",
    "sibling_name",
    "to_primitive",
    "unknown_fields",
]
