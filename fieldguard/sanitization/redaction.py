# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Redaction of sensitive values recorded in field violations.

A redactor is a predicate over field paths. When it returns True for a
violation's path, the offending value stored in ``meta["value"]`` is replaced
by :data:`REDACTED_TOKEN` before the violation reaches any reporting surface.
Nested values and cross-field comparison values are matched by their own
paths.
"""

from __future__ import annotations

import fnmatch
import logging
from dataclasses import replace
from typing import Any, Callable, List, Mapping, Optional, Tuple

from ..validation.base import FieldError
from ..validation.inspector import join_path

logger = logging.getLogger(__name__)

REDACTED_TOKEN = "[REDACTED]"

Redactor = Callable[[str], bool]


def redact_paths_containing(*needles: str, case_sensitive: bool = False) -> Redactor:
    """Redact any path containing one of ``needles`` (e.g. ``"password"``)."""

    if case_sensitive:
        wanted = tuple(needles)
    else:
        wanted = tuple(needle.lower() for needle in needles)

    def _redactor(path: str) -> bool:
        haystack = path if case_sensitive else path.lower()
        return any(needle in haystack for needle in wanted)

    return _redactor


def redact_paths_matching(*patterns: str) -> Redactor:
    """Redact paths matching shell-style globs such as ``"*.token"``."""

    def _redactor(path: str) -> bool:
        return any(fnmatch.fnmatchcase(path, pattern) for pattern in patterns)

    return _redactor


def redact_any(*redactors: Optional[Redactor]) -> Optional[Redactor]:
    """Combine redactors; ``None`` entries are ignored."""

    active = tuple(r for r in redactors if r is not None)
    if not active:
        return None
    if len(active) == 1:
        return active[0]

    def _redactor(path: str) -> bool:
        return any(r(path) for r in active)

    return _redactor


def redact_field_error(error: FieldError, redactor: Optional[Redactor]) -> FieldError:
    """Return ``error`` with sensitive recorded values scrubbed.

    ``meta["value"]`` is replaced when the violation's path matches. When it
    does not, values nested under that path (schema violations report whole
    objects) are scrubbed wherever their own path matches. A cross-field
    comparison value in ``meta["other_value"]`` is scrubbed when either the
    violation's path or the compared field's path matches.
    """

    if redactor is None or "value" not in error.meta:
        return error

    meta = dict(error.meta)
    leaked: List[Any] = []
    if redactor(error.path):
        leaked.append(meta["value"])
        meta["value"] = REDACTED_TOKEN
        if "other_value" in meta:
            leaked.append(meta["other_value"])
            meta["other_value"] = REDACTED_TOKEN
    else:
        scrubbed, nested = _scrub_nested(meta["value"], error.path, redactor)
        if nested:
            meta["value"] = scrubbed
            leaked.extend(nested)
        other_path = meta.get("other_path")
        if "other_value" in meta and other_path and redactor(other_path):
            leaked.append(meta["other_value"])
            meta["other_value"] = REDACTED_TOKEN

    if not leaked:
        return error
    logger.debug("Redacted value for field '%s'", error.path)
    return replace(error, message=_scrub_message(error.message, leaked), meta=meta)


def _is_container(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def _copy(value: Any) -> Any:
    return dict(value) if isinstance(value, Mapping) else list(value)


def _scrub_nested(value: Any, path: str, redactor: Redactor) -> Tuple[Any, List[Any]]:
    if not _is_container(value):
        return value, []

    removed: List[Any] = []
    root = _copy(value)
    stack: List[Tuple[Any, str]] = [(root, path)]
    while stack:
        node, node_path = stack.pop()
        keys = list(node) if isinstance(node, dict) else range(len(node))
        for key in keys:
            child = node[key]
            child_path = join_path(node_path, key)
            if redactor(child_path):
                removed.append(child)
                node[key] = REDACTED_TOKEN
            elif _is_container(child):
                node[key] = _copy(child)
                stack.append((node[key], child_path))
    return root, removed


def _scrub_message(message: str, leaked: List[Any]) -> str:
    # Schema engines quote the offending value in their messages.
    needles = {repr(value) for value in leaked if _is_container(value) or (isinstance(value, str) and value)}
    for needle in sorted(needles, key=len, reverse=True):
        message = message.replace(needle, REDACTED_TOKEN)
    return message


__all__ = [
    "REDACTED_TOKEN",
    "Redactor",
    "redact_any",
    "redact_field_error",
    "redact_paths_containing",
    "redact_paths_matching",
]
