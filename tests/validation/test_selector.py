# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Strategy selection: priority order, explicit overrides and run-all mode."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from fieldguard import Strategy, ValidationError, Validator, tag
from fieldguard.exceptions import InvalidRecordError, UnsupportedStrategyError
from fieldguard.validation.selector import (
    Capabilities,
    accepts_context,
    detect_capabilities,
    select_strategies,
)

SCHEMA = {
    "type": "object",
    "properties": {"name": {"type": "string", "minLength": 3}},
    "required": ["name"],
}


@dataclass
class TagsOnly:
    name: str = tag("required", default="")


@dataclass
class Everything:
    name: str = tag("min=3", default="")

    def validate(self):
        if self.name == "":
            return ValueError("name must not be blank")
        return None

    def validate_context(self, ctx):
        if ctx and ctx.get("tenant") == "blocked":
            raise ValueError("tenant is blocked")
        return None

    def json_schema(self):
        return "everything.v1", SCHEMA


@dataclass
class PlainMethod:
    name: str = tag("required", default="")

    def validate(self):
        return ValueError("plain method ran")


class SchemaOnly:
    def __init__(self, name):
        self.name = name

    def json_schema(self):
        return "schema-only.v1", SCHEMA


# ------------------------------------------------------------------
# Capabilities & pure selection
# ------------------------------------------------------------------


def test_detects_every_capability():
    caps = detect_capabilities(Everything())

    assert caps == Capabilities(context_method=True, method=True, tags=True, schema=True)


def test_plain_object_has_no_capabilities():
    assert detect_capabilities(object()) == Capabilities()


@pytest.mark.parametrize(
    "caps,expected",
    [
        (Capabilities(context_method=True, tags=True, schema=True), (Strategy.INTERFACE,)),
        (Capabilities(method=True, tags=True), (Strategy.INTERFACE,)),
        (Capabilities(tags=True, schema=True), (Strategy.TAGS,)),
        (Capabilities(schema=True), (Strategy.SCHEMA,)),
        (Capabilities(), ()),
    ],
)
def test_priority_order(caps, expected):
    assert select_strategies(caps) == expected


def test_run_all_returns_every_supported_strategy_in_priority_order():
    caps = Capabilities(method=True, tags=True, schema=True)

    assert select_strategies(caps, run_all=True) == (
        Strategy.INTERFACE,
        Strategy.TAGS,
        Strategy.SCHEMA,
    )


def test_explicit_strategy_bypasses_priority():
    caps = Capabilities(method=True, tags=True, schema=True)

    assert select_strategies(caps, Strategy.SCHEMA) == (Strategy.SCHEMA,)


def test_explicit_unsupported_strategy_fails():
    with pytest.raises(UnsupportedStrategyError) as exc_info:
        select_strategies(Capabilities(tags=True), Strategy.SCHEMA, record_type="TagsOnly")

    assert exc_info.value.strategy == "schema"
    assert exc_info.value.record_type == "TagsOnly"


def test_accepts_context_inspects_arity():
    assert accepts_context(lambda record, ctx: None)
    assert accepts_context(lambda *args: None)
    assert not accepts_context(lambda record: None)


# ------------------------------------------------------------------
# End-to-end dispatch
# ------------------------------------------------------------------


def test_context_method_wins_over_plain_method():
    result = Validator().check(Everything(), context={"tenant": "blocked"})

    assert result is not None
    [violation] = result.fields
    assert violation.code == "interface.error"
    assert violation.message == "tenant is blocked"


def test_context_free_method_used_when_no_context_method():
    result = Validator().check(PlainMethod(name="ok"))

    assert result is not None
    assert result.codes() == ["interface.error"]
    assert result.fields[0].message == "plain method ran"


def test_forced_tags_strategy_skips_custom_method():
    result = Validator().check(PlainMethod(name=""), strategy="tags")

    assert result.codes() == ["tag.required"]


def test_forced_schema_on_record_without_schema_fails():
    with pytest.raises(UnsupportedStrategyError):
        Validator().check(TagsOnly(), strategy=Strategy.SCHEMA)


def test_run_all_merges_violations_from_every_strategy():
    result = Validator().check(Everything(name=""), run_all=True)

    assert result is not None
    assert set(result.codes()) == {"tag.min", "schema.minLength"}


def test_run_all_with_context_includes_interface_violations():
    result = Validator().check(Everything(name="ab"), run_all=True, context={"tenant": "blocked"})

    assert set(result.codes()) == {"interface.error", "tag.min", "schema.minLength"}


def test_require_any_passes_when_one_strategy_passes():
    # interface passes (no blocked tenant), tags and schema fail
    result = Validator(run_all=True, require_any=True).check(Everything(name="ab"))

    assert result is None


def test_require_any_reports_everything_when_all_fail():
    result = Validator(run_all=True, require_any=True).check(
        Everything(name="ab"), context={"tenant": "blocked"}
    )

    assert set(result.codes()) == {"interface.error", "tag.min", "schema.minLength"}


def test_schema_only_object_uses_schema():
    result = Validator().check(SchemaOnly("ab"))

    assert result.codes() == ["schema.minLength"]
    assert result.fields[0].path == "name"


def test_record_without_strategies_is_valid():
    assert Validator().check(object()) is None


# ------------------------------------------------------------------
# Nil and non-object records
# ------------------------------------------------------------------


@pytest.mark.parametrize("strategy", list(Strategy))
def test_none_record_reports_nil_pointer_for_every_strategy(strategy):
    result = Validator().check(None, strategy=strategy)

    assert result is not None
    [violation] = result.fields
    assert violation.code == "nil_pointer"


@pytest.mark.parametrize("value", [42, "text", b"bytes", [1, 2], (1,), 3.5, True])
def test_non_object_record_is_rejected(value):
    with pytest.raises(InvalidRecordError):
        Validator().check(value)


def test_validate_raises_for_none():
    with pytest.raises(ValidationError) as exc_info:
        Validator().validate(None)

    assert exc_info.value.has_code("nil_pointer")
