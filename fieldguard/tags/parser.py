# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Parsing of ``validate`` tag strings such as ``"required,min=3,max=64"``."""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from ..exceptions import ConfigurationError

TAG_KEY = "validate"
NAME_KEY = "json"

OMITEMPTY = "omitempty"
DIVE = "dive"


@dataclass(frozen=True)
class Rule:
    name: str
    param: Optional[str] = None

    def __str__(self) -> str:
        if self.param is None:
            return self.name
        return f"{self.name}={self.param}"


@functools.lru_cache(maxsize=1024)
def parse_tag(tag: str) -> Tuple[Rule, ...]:
    """Split a tag string into rules; empty segments are ignored."""

    rules = []
    for segment in tag.split(","):
        segment = segment.strip()
        if not segment:
            continue
        name, sep, param = segment.partition("=")
        name = name.strip()
        if not name:
            raise ConfigurationError(f"Malformed validation tag {tag!r}: rule without a name")
        rules.append(Rule(name=name, param=param.strip() if sep else None))
    return tuple(rules)


def tag(rules: str, *, name: Optional[str] = None, **field_kwargs: Any) -> Any:
    """``dataclasses.field`` carrying a ``validate`` tag.

    ``name`` sets the serialized field name used in paths (``"-"`` hides the
    field from validation).

    .. code-block:: python

        @dataclass
        class Signup:
            email: str = tag("required,email")
            age: int = tag("min=18", default=0)
    """

    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[TAG_KEY] = rules
    if name is not None:
        metadata[NAME_KEY] = name
    return field(metadata=metadata, **field_kwargs)


__all__ = ["DIVE", "NAME_KEY", "OMITEMPTY", "Rule", "TAG_KEY", "parse_tag", "tag"]
