# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Interface strategy: call the record's own validation method.

A record may define ``validate_context(ctx)`` (preferred) or ``validate()``.
Either may return ``None``, return or raise a
:class:`~fieldguard.validation.base.ValidationError` (merged field by field),
return an exception or raise ``ValueError`` (reported as one
``interface.error``), or return a boolean. Coroutine methods are supported.
"""

from __future__ import annotations

import asyncio
import concurrent.futures as _cf
import contextvars as _ctxvars
import inspect
import logging
from typing import Any, Callable, Iterator, List, Optional

import anyio

from ..validation.base import INTERFACE_ERROR_CODE, FieldError, ValidationError
from ..validation.partial import filter_violations
from ..validation.presence import PresenceMap
from ..validation.selector import CONTEXT_METHOD, PLAIN_METHOD, accepts_context

logger = logging.getLogger(__name__)


def resolve_awaitable(awaitable: Any) -> Any:
    """Run ``awaitable`` to completion from synchronous code."""

    async def _await():
        return await awaitable

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No loop in this thread → run inline
        return anyio.run(_await)

    # A loop is running here: finish on a private loop in a worker thread,
    # carrying contextvars across.
    ctx = _ctxvars.copy_context()
    with _cf.ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(ctx.run, anyio.run, _await)
        return future.result()


def _invoke(func: Callable[..., Any], *args: Any) -> Any:
    try:
        result = func(*args)
        if inspect.isawaitable(result):
            result = resolve_awaitable(result)
    except (ValidationError, ValueError) as exc:
        return exc
    return result


def _translate(result: Any, source: str) -> List[FieldError]:
    if result is None or result is True:
        return []
    if isinstance(result, ValidationError):
        return list(result.fields)
    if isinstance(result, FieldError):
        return [result]
    if result is False:
        return [
            FieldError(
                path="",
                code=INTERFACE_ERROR_CODE,
                message=f"{source} reported the record as invalid",
                meta={"source": source},
            )
        ]
    if isinstance(result, BaseException):
        return [
            FieldError(
                path="",
                code=INTERFACE_ERROR_CODE,
                message=str(result) or type(result).__name__,
                meta={"source": source, "error_type": type(result).__name__},
            )
        ]
    raise TypeError(
        f"{source} must return None, a bool, an exception or a ValidationError, "
        f"got {type(result).__name__}"
    )


class InterfaceStrategy:
    def run(
        self,
        record: Any,
        presence: Optional[PresenceMap] = None,
        *,
        context: Any = None,
        validator_func: Optional[Callable[..., Any]] = None,
    ) -> Iterator[FieldError]:
        errors = self.collect(record, context=context, validator_func=validator_func)
        if presence is not None:
            errors = list(filter_violations(errors, presence))
        return iter(errors)

    def collect(
        self,
        record: Any,
        *,
        context: Any = None,
        validator_func: Optional[Callable[..., Any]] = None,
    ) -> List[FieldError]:
        errors: List[FieldError] = []

        method = getattr(record, CONTEXT_METHOD, None)
        if callable(method):
            errors.extend(_translate(_invoke(method, context), CONTEXT_METHOD))
        else:
            method = getattr(record, PLAIN_METHOD, None)
            if callable(method):
                errors.extend(_translate(_invoke(method), PLAIN_METHOD))

        if validator_func is not None:
            name = getattr(validator_func, "__name__", "validator_func")
            if accepts_context(validator_func):
                result = _invoke(validator_func, record, context)
            else:
                result = _invoke(validator_func, record)
            errors.extend(_translate(result, name))

        logger.debug("Interface validation of %s produced %d error(s)", type(record).__name__, len(errors))
        return errors


__all__ = ["InterfaceStrategy", "resolve_awaitable"]
