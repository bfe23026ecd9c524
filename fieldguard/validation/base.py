# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Structured violation types shared by every validation strategy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

from ..exceptions import FieldGuardError


NIL_POINTER_CODE = "nil_pointer"
UNKNOWN_FIELD_CODE = "unknown_field"
INTERFACE_ERROR_CODE = "interface.error"


@dataclass(frozen=True)
class FieldError:
    """A single constraint violation at ``path``.

    ``code`` is namespaced by the strategy that produced it (``tag.min``,
    ``schema.type``, ``interface.error``). ``meta`` is an open bag that may hold
    the failing tag, its parameter, the offending ``value`` (or the redaction
    token) and comparison operands.
    """

    path: str
    code: str
    message: str
    meta: Mapping[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "path": self.path,
            "code": self.code,
            "message": self.message,
        }
        if self.meta:
            payload["meta"] = dict(self.meta)
        return payload


class ValidationError(FieldGuardError):
    """All field violations found by one validation call.

    Callers may compose several independent validations with :meth:`add` and
    :meth:`extend`; otherwise the instance is not modified after it is
    returned.
    """

    def __init__(self, fields: Optional[Iterable[FieldError]] = None, *, truncated: bool = False):
        self.fields: List[FieldError] = list(fields or [])
        self.truncated = truncated
        super().__init__(self._summary())

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    def add(self, path: str, code: str, message: str, **meta: Any) -> "ValidationError":
        self.fields.append(FieldError(path=path, code=code, message=message, meta=meta))
        self._refresh()
        return self

    def add_field(self, error: FieldError) -> "ValidationError":
        self.fields.append(error)
        self._refresh()
        return self

    def extend(self, other: "ValidationError | Iterable[FieldError] | None") -> "ValidationError":
        """Merge another error (or bare field errors) into this one."""

        if other is None:
            return self
        if isinstance(other, ValidationError):
            self.fields.extend(other.fields)
            self.truncated = self.truncated or other.truncated
        else:
            self.fields.extend(other)
        self._refresh()
        return self

    def sort(self) -> "ValidationError":
        """Order fields by path, then code, for deterministic output."""

        self.fields.sort(key=lambda item: (item.path, item.code))
        self._refresh()
        return self

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_errors(self) -> bool:
        return bool(self.fields)

    def has_code(self, code: str) -> bool:
        return any(item.code == code for item in self.fields)

    def has(self, path: str) -> bool:
        return any(item.path == path for item in self.fields)

    def get_field(self, path: str) -> Optional[FieldError]:
        for item in self.fields:
            if item.path == path:
                return item
        return None

    def codes(self) -> List[str]:
        return [item.code for item in self.fields]

    def to_dict(self) -> Dict[str, Any]:
        """Payload suitable for a 422 response body."""

        return {
            "errors": [item.to_dict() for item in self.fields],
            "truncated": self.truncated,
        }

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[FieldError]:
        return iter(self.fields)

    def __bool__(self) -> bool:
        return bool(self.fields)

    def __repr__(self) -> str:
        return f"ValidationError(fields={self.fields!r}, truncated={self.truncated!r})"

    def __str__(self) -> str:
        return self.message

    # ------------------------------------------------------------------

    def _summary(self) -> str:
        if not self.fields:
            return "validation failed"
        parts = "; ".join(str(item) for item in self.fields)
        suffix = " (more errors truncated)" if self.truncated else ""
        return f"validation failed: {parts}{suffix}"

    def _refresh(self) -> None:
        self.message = self._summary()
        self.args = (self.message,)


__all__ = [
    "FieldError",
    "ValidationError",
    "NIL_POINTER_CODE",
    "UNKNOWN_FIELD_CODE",
    "INTERFACE_ERROR_CODE",
]
