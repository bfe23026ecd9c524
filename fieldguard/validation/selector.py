# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Choose which validation strategies run for a record.

Priority (highest first): context-aware custom method, context-free custom
method, tag annotations, schema provider. The choice is a pure function of
the record's capabilities and the configured strategy.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple

from ..exceptions import UnsupportedStrategyError
from ..runtime.guard import DEFAULT_MAX_DEPTH
from .inspector import has_tags

logger = logging.getLogger(__name__)

CONTEXT_METHOD = "validate_context"
PLAIN_METHOD = "validate"
SCHEMA_METHOD = "json_schema"


class Strategy(str, Enum):
    AUTO = "auto"
    TAGS = "tags"
    SCHEMA = "schema"
    INTERFACE = "interface"


PRIORITY: Tuple[Strategy, ...] = (Strategy.INTERFACE, Strategy.TAGS, Strategy.SCHEMA)


def accepts_context(func: Callable[..., Any]) -> bool:
    """True when ``func(record, ctx)`` is a valid call."""

    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False
    positional = 0
    for param in signature.parameters.values():
        if param.kind == inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            positional += 1
    return positional >= 2


@dataclass(frozen=True)
class Capabilities:
    context_method: bool = False
    method: bool = False
    tags: bool = False
    schema: bool = False

    @property
    def interface(self) -> bool:
        return self.context_method or self.method

    def supports(self, strategy: Strategy) -> bool:
        if strategy is Strategy.INTERFACE:
            return self.interface
        if strategy is Strategy.TAGS:
            return self.tags
        if strategy is Strategy.SCHEMA:
            return self.schema
        return False


def detect_capabilities(
    record: Any,
    *,
    validator_func: Optional[Callable[..., Any]] = None,
    schema_override: Optional[Tuple[str, Any]] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Capabilities:
    """Inspect what ``record`` (plus per-call overrides) can be validated with."""

    context_method = callable(getattr(record, CONTEXT_METHOD, None))
    method = callable(getattr(record, PLAIN_METHOD, None))
    if validator_func is not None:
        if accepts_context(validator_func):
            context_method = True
        else:
            method = True

    caps = Capabilities(
        context_method=context_method,
        method=method,
        tags=has_tags(record, max_depth=max_depth),
        schema=schema_override is not None or callable(getattr(record, SCHEMA_METHOD, None)),
    )
    logger.debug("Capabilities for %s: %s", type(record).__name__, caps)
    return caps


def select_strategies(
    caps: Capabilities,
    strategy: Strategy = Strategy.AUTO,
    *,
    run_all: bool = False,
    record_type: str = "object",
) -> Tuple[Strategy, ...]:
    """Ordered strategies to execute; empty when nothing applies."""

    if strategy is not Strategy.AUTO:
        if not caps.supports(strategy):
            raise UnsupportedStrategyError(strategy.value, record_type)
        return (strategy,)

    supported = tuple(kind for kind in PRIORITY if caps.supports(kind))
    if run_all:
        return supported
    return supported[:1]


__all__ = [
    "Capabilities",
    "PRIORITY",
    "Strategy",
    "accepts_context",
    "detect_capabilities",
    "select_strategies",
]
