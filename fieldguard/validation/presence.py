# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Field presence tracking for partial (PATCH-style) validation.

A :class:`PresenceMap` records which dotted paths the caller actually sent,
so that "field absent" can be told apart from "field present but empty".
The tree is walked with an explicit stack, never with recursion, so hostile
nesting cannot exhaust the interpreter stack. JSON text is decoded from an
``ijson`` event stream for the same reason.
"""

from __future__ import annotations

import io
import logging
from typing import Any, FrozenSet, Iterable, Iterator, List, Mapping, Sequence, Set, Tuple

import ijson

from ..exceptions import PresenceParseError
from ..runtime.guard import DEFAULT_MAX_DEPTH, DEFAULT_MAX_FIELDS, FieldBudget, depth_allowed

logger = logging.getLogger(__name__)

_START_EVENTS = {"start_map": dict, "start_array": list}
_END_EVENTS = frozenset({"end_map", "end_array"})


class PresenceMap:
    """Immutable set of field paths present in a raw record."""

    __slots__ = ("_paths", "depth_exceeded")

    def __init__(self, paths: Iterable[str] = (), *, depth_exceeded: bool = False):
        self._paths: FrozenSet[str] = frozenset(paths)
        self.depth_exceeded = depth_exceeded

    def has(self, path: str) -> bool:
        return path in self._paths

    def has_prefix(self, prefix: str) -> bool:
        """True when ``prefix`` or any path beneath it is present."""

        if prefix in self._paths:
            return True
        needle = prefix + "."
        return any(path.startswith(needle) for path in self._paths)

    def leaf_paths(self) -> List[str]:
        """Paths that no other present path extends, sorted."""

        parents: Set[str] = set()
        for path in self._paths:
            index = path.find(".")
            while index != -1:
                parents.add(path[:index])
                index = path.find(".", index + 1)
        return sorted(path for path in self._paths if path not in parents)

    @property
    def paths(self) -> FrozenSet[str]:
        return self._paths

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._paths))

    def __len__(self) -> int:
        return len(self._paths)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PresenceMap):
            return self._paths == other._paths
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._paths)

    def __repr__(self) -> str:
        flag = ", depth_exceeded=True" if self.depth_exceeded else ""
        return f"PresenceMap({sorted(self._paths)!r}{flag})"


def decode_raw(
    raw: Any,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_fields: int = DEFAULT_MAX_FIELDS,
) -> Any:
    """Decode ``raw`` when it is serialized JSON; pass decoded trees through.

    Decoding is event driven: containers nested below ``max_depth`` are kept
    as empty placeholders and their contents are skipped, so arbitrarily deep
    input decodes in constant stack space. More than ``max_fields`` values
    within the depth limit raise
    :class:`~fieldguard.exceptions.FieldLimitExceededError`.
    """

    if isinstance(raw, (bytes, bytearray, memoryview)):
        data = bytes(raw)
        try:
            data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PresenceParseError(f"input is not valid UTF-8: {exc}") from exc
    elif isinstance(raw, str):
        try:
            data = raw.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise PresenceParseError(f"input is not valid UTF-8: {exc}") from exc
    else:
        return raw

    events = ijson.basic_parse(io.BytesIO(data), use_float=True)
    try:
        return _build(events, max_depth=max_depth, max_fields=max_fields)
    except ijson.JSONError as exc:
        raise PresenceParseError(f"malformed JSON: {exc}") from exc


def _build(events: Iterable[Tuple[str, Any]], *, max_depth: int, max_fields: int) -> Any:
    root: Any = None
    stack: List[Any] = []
    key: Any = None
    skipping = 0
    budget = FieldBudget(max_fields)

    for event, value in events:
        if skipping:
            if event in _START_EVENTS:
                skipping += 1
            elif event in _END_EVENTS:
                skipping -= 1
            continue

        if event == "map_key":
            key = value
            continue
        if event in _END_EVENTS:
            stack.pop()
            continue

        depth = len(stack)
        if depth > max_depth and stack[-1]:
            # one child is enough to mark the parent as truncated
            if event in _START_EVENTS:
                skipping = 1
            continue

        node = _START_EVENTS[event]() if event in _START_EVENTS else value
        if depth:
            parent = stack[-1]
            if isinstance(parent, list):
                parent.append(node)
            else:
                parent[key] = node
            if depth <= max_depth:
                budget.spend()
        else:
            root = node

        if event in _START_EVENTS:
            if depth > max_depth:
                skipping = 1
            else:
                stack.append(node)
    return root


def _children(node: Any) -> Iterable[Tuple[str, Any]]:
    if isinstance(node, Mapping):
        return ((str(key), value) for key, value in node.items())
    return ((str(index), value) for index, value in enumerate(node))


def _is_container(node: Any) -> bool:
    if isinstance(node, (str, bytes, bytearray)):
        return False
    return isinstance(node, (Mapping, Sequence))


def compute_presence(
    raw: Any,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_fields: int = DEFAULT_MAX_FIELDS,
) -> PresenceMap:
    """Build a :class:`PresenceMap` from a raw serialized record.

    ``raw`` may be JSON text/bytes or an already decoded tree of mappings,
    lists and scalars. Every object key and array index reachable from the
    root is recorded as a dotted path (``items.0.price``).

    Paths nested deeper than ``max_depth`` are skipped and flagged through
    ``PresenceMap.depth_exceeded``; sibling branches are still walked.
    Recording more than ``max_fields`` paths raises
    :class:`~fieldguard.exceptions.FieldLimitExceededError`.
    """

    tree = decode_raw(raw, max_depth=max_depth, max_fields=max_fields)
    paths: Set[str] = set()
    budget = FieldBudget(max_fields)
    depth_exceeded = False

    if not _is_container(tree):
        return PresenceMap()

    stack: List[Tuple[str, Any, int]] = [("", tree, 0)]
    while stack:
        path, node, depth = stack.pop()
        if not node:
            continue
        child_depth = depth + 1
        if not depth_allowed(child_depth, max_depth):
            depth_exceeded = True
            continue
        for segment, child in _children(node):
            child_path = f"{path}.{segment}" if path else segment
            budget.spend(child_path)
            paths.add(child_path)
            if _is_container(child):
                stack.append((child_path, child, child_depth))

    if depth_exceeded:
        logger.warning("Presence traversal truncated at max depth %d", max_depth)

    logger.debug("Computed presence for %d field paths", len(paths))
    return PresenceMap(paths, depth_exceeded=depth_exceeded)


__all__ = [
    "PresenceMap",
    "compute_presence",
    "decode_raw",
]
