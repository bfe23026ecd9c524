# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

# fieldguard/validator.py

"""The validation entry point.

.. code-block:: python

    from dataclasses import dataclass
    from fieldguard import Validator, ValidationError, tag

    @dataclass
    class Signup:
        email: str = tag("required,email")
        age: int = tag("min=18", default=0)

    validator = Validator(max_errors=20)

    try:
        validator.validate(Signup(email="not-an-email", age=10))
    except ValidationError as exc:
        body = exc.to_dict()   # -> 422 response

    # PATCH: only fields present in the request body are checked
    validator.validate_partial(patch, raw=request_body)
"""

from __future__ import annotations

import functools
import logging
import time
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Tuple, Union

import anyio

from .config import ValidatorConfig, config_from_env, load_config
from .exceptions import ConfigurationError, InputError, InvalidRecordError
from .strategies.interface import InterfaceStrategy
from .strategies.schema import SchemaStrategy
from .strategies.schema_cache import SchemaCache
from .strategies.tags import TagStrategy
from .telemetry import get_tracer, record_presence_depth_exceeded, record_validation_metrics
from .validation.aggregator import ErrorAggregator
from .validation.base import NIL_POINTER_CODE, UNKNOWN_FIELD_CODE, FieldError, ValidationError
from .validation.inspector import unknown_fields
from .validation.presence import PresenceMap, compute_presence, decode_raw
from .validation.selector import Strategy, detect_capabilities, select_strategies

logger = logging.getLogger(__name__)

_NON_OBJECT_TYPES = (str, bytes, bytearray, int, float, complex, bool, list, tuple, set, frozenset)


def is_object(value: Any) -> bool:
    return not isinstance(value, _NON_OBJECT_TYPES) and not isinstance(value, type)


class Validator:
    """Long-lived, thread-safe validator.

    Construction validates every option and raises
    :class:`~fieldguard.exceptions.ConfigurationError` on bad values. Per-call
    keyword options are merged into an immutable snapshot of the instance
    configuration; ``custom_tags`` and ``max_cached_schemas`` can only be set
    at construction.
    """

    def __init__(self, config: Optional[ValidatorConfig] = None, **options: Any):
        if config is not None and not isinstance(config, ValidatorConfig):
            raise ConfigurationError(
                f"config must be a ValidatorConfig, got {type(config).__name__}"
            )
        base = config if config is not None else ValidatorConfig()
        self._config = base.merge(_construction=True, **options)
        self._schema_cache = SchemaCache(self._config.max_cached_schemas)
        self._interface = InterfaceStrategy()

    @classmethod
    def from_file(cls, path: Union[str, Path], **options: Any) -> "Validator":
        return cls(load_config(path), **options)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **options: Any) -> "Validator":
        return cls(config_from_env(environ), **options)

    @property
    def config(self) -> ValidatorConfig:
        return self._config

    @property
    def schema_cache(self) -> SchemaCache:
        return self._schema_cache

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def check(
        self,
        record: Any,
        *,
        context: Any = None,
        raw: Any = None,
        **options: Any,
    ) -> Optional[ValidationError]:
        """Validate ``record`` and return the violations, or ``None``.

        ``context`` is handed to ``validate_context`` methods. ``raw`` is the
        serialized request body (JSON text/bytes or decoded data) used for
        partial validation and unknown-field detection.
        """

        cfg = self._config.merge(**options)
        started_at = time.perf_counter()
        kinds: Tuple[Strategy, ...] = ()

        with get_tracer("fieldguard").start_as_current_span(
            "fieldguard.validate",
            attributes={"fieldguard.record_type": type(record).__name__},
        ) as span:
            try:
                result, kinds = self._check(record, cfg, context, raw)
            except Exception:
                record_validation_metrics([k.value for k in kinds], "error", started_at)
                raise
            span.set_attribute("fieldguard.valid", result is None)

        record_validation_metrics(
            [k.value for k in kinds],
            "valid" if result is None else "invalid",
            started_at,
            violations=len(result) if result is not None else 0,
            truncated=bool(result is not None and result.truncated),
        )
        return result

    def validate(self, record: Any, *, context: Any = None, raw: Any = None, **options: Any) -> None:
        """Like :meth:`check`, but raise the :class:`ValidationError`."""

        error = self.check(record, context=context, raw=raw, **options)
        if error is not None:
            raise error

    def check_partial(self, record: Any, raw: Any, *, context: Any = None, **options: Any) -> Optional[ValidationError]:
        """Validate only the fields present in ``raw`` (PATCH semantics)."""

        return self.check(record, context=context, raw=raw, partial=True, **options)

    def validate_partial(self, record: Any, raw: Any, *, context: Any = None, **options: Any) -> None:
        self.validate(record, context=context, raw=raw, partial=True, **options)

    async def avalidate(self, record: Any, *, context: Any = None, raw: Any = None, **options: Any) -> None:
        """Run :meth:`validate` on a worker thread."""

        await anyio.to_thread.run_sync(
            functools.partial(self.validate, record, context=context, raw=raw, **options)
        )

    def compute_presence(self, raw: Any, **options: Any) -> PresenceMap:
        """Presence map for ``raw`` using this validator's limits."""

        cfg = self._config.merge(**options)
        return compute_presence(raw, max_depth=cfg.max_depth, max_fields=cfg.max_fields)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check(
        self,
        record: Any,
        cfg: ValidatorConfig,
        context: Any,
        raw: Any,
    ) -> Tuple[Optional[ValidationError], Tuple[Strategy, ...]]:
        aggregator = ErrorAggregator(max_errors=cfg.max_errors, redactor=cfg.redactor)

        if record is None:
            aggregator.add(
                FieldError(path="", code=NIL_POINTER_CODE, message="cannot validate None", meta={})
            )
            return aggregator.result(sort=cfg.sort_errors), ()

        if not is_object(record):
            raise InvalidRecordError(type(record).__name__)

        record_type = type(record).__name__
        caps = detect_capabilities(
            record,
            validator_func=cfg.validator_func,
            schema_override=cfg.schema,
            max_depth=cfg.max_depth,
        )
        kinds = select_strategies(caps, cfg.strategy, run_all=cfg.run_all, record_type=record_type)
        logger.debug("Validating %s with strategies %s", record_type, [k.value for k in kinds])

        needs_tree = (cfg.partial_enabled and cfg.presence is None) or cfg.disallow_unknown_fields
        tree = None
        if needs_tree and raw is not None:
            tree = decode_raw(raw, max_depth=cfg.max_depth, max_fields=cfg.max_fields)
        presence = self._presence(cfg, tree, raw is not None)

        if cfg.disallow_unknown_fields:
            if raw is None:
                raise InputError("disallow_unknown_fields requires the raw input")
            aggregator.extend(self._unknown_field_errors(record, tree, cfg))

        outcomes = [(kind, list(self._run_strategy(kind, record, cfg, context, presence))) for kind in kinds]
        if cfg.require_any and len(outcomes) > 1 and any(not errors for _, errors in outcomes):
            logger.debug("require_any: at least one strategy passed for %s", record_type)
            outcomes = []

        for _, errors in outcomes:
            aggregator.extend(errors)
        return aggregator.result(sort=cfg.sort_errors), kinds

    def _presence(self, cfg: ValidatorConfig, tree: Any, have_raw: bool) -> Optional[PresenceMap]:
        if not cfg.partial_enabled:
            return None
        if cfg.presence is not None:
            return cfg.presence
        if not have_raw:
            raise InputError("Partial validation requires the raw input or a presence map")
        if not isinstance(tree, Mapping):
            raise InvalidRecordError(type(tree).__name__)

        presence = compute_presence(tree, max_depth=cfg.max_depth, max_fields=cfg.max_fields)
        if presence.depth_exceeded:
            record_presence_depth_exceeded()
        return presence

    @staticmethod
    def _unknown_field_errors(record: Any, tree: Any, cfg: ValidatorConfig) -> Iterable[FieldError]:
        for path in unknown_fields(record, tree, max_depth=cfg.max_depth):
            yield FieldError(
                path=path,
                code=UNKNOWN_FIELD_CODE,
                message=f"unknown field '{path}'",
                meta={},
            )

    def _run_strategy(
        self,
        kind: Strategy,
        record: Any,
        cfg: ValidatorConfig,
        context: Any,
        presence: Optional[PresenceMap],
    ) -> Iterable[FieldError]:
        if kind is Strategy.INTERFACE:
            return self._interface.run(
                record,
                presence,
                context=context,
                validator_func=cfg.validator_func,
            )
        if kind is Strategy.TAGS:
            tags = TagStrategy(
                custom_tags=cfg.custom_tags,
                messages=cfg.messages,
                field_name_func=cfg.field_name_func,
                max_depth=cfg.max_depth,
            )
            return tags.run(record, presence)
        if kind is Strategy.SCHEMA:
            schema = SchemaStrategy(self._schema_cache, max_depth=cfg.max_depth)
            return schema.run(record, presence, override=cfg.schema)
        raise ValueError(f"Unhandled strategy {kind!r}")


__all__ = ["Validator", "is_object"]
