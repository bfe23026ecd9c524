# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Partial (PATCH-style) validation: presence, not value, gates constraints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

import pytest

from fieldguard import ValidationError, Validator, compute_presence, tag
from fieldguard.exceptions import FieldLimitExceededError, InputError, InvalidRecordError, PresenceParseError
from fieldguard.validation.base import FieldError
from fieldguard.validation.partial import filter_constraints, filter_violations


@dataclass
class Profile:
    name: str = tag("required", default="")
    email: str = tag("required,email", default="")


@dataclass
class Address:
    city: str = tag("required", default="")
    zip_code: str = tag("len=5", name="zip", default="")


@dataclass
class LineItem:
    sku: str = tag("required", default="")
    price: float = tag("gt=0", default=0.0)


@dataclass
class Order:
    customer: str = tag("required", default="")
    address: Optional[Address] = None
    items: List[LineItem] = field(default_factory=list)


@dataclass
class _Bound:
    path: str


def _partial(record, raw, **options):
    return Validator().check_partial(record, raw, **options)


# ------------------------------------------------------------------
# Required constraints on absent fields
# ------------------------------------------------------------------


def test_absent_required_field_is_not_reported():
    result = _partial(Profile(email="a@b.com"), '{"email":"a@b.com"}')

    assert result is None


def test_same_record_fails_full_validation():
    with pytest.raises(ValidationError) as exc_info:
        Validator().validate(Profile(email="a@b.com"))

    assert exc_info.value.has_code("tag.required")
    assert exc_info.value.has("name")


def test_present_empty_value_runs_all_constraints():
    result = _partial(Profile(name="", email="a@b.com"), {"name": "", "email": "a@b.com"})

    assert result is not None
    [violation] = result.fields
    assert violation.path == "name"
    assert violation.code == "tag.required"


def test_present_invalid_value_is_reported():
    result = _partial(Profile(email="nope"), {"email": "nope"})

    assert result is not None
    assert result.codes() == ["tag.email"]


# ------------------------------------------------------------------
# Nested records
# ------------------------------------------------------------------


def test_nested_fields_use_serialized_names():
    order = Order(address=Address(city="", zip_code="123"))

    result = _partial(order, {"address": {"zip": "123"}})

    assert result is not None
    assert [(f.path, f.code) for f in result.fields] == [("address.zip", "tag.len")]


def test_list_elements_are_validated_when_present():
    order = Order(items=[LineItem(sku="A", price=1.0), LineItem(sku="", price=0.0)])

    result = _partial(order, {"items": [{"sku": "A", "price": 1.0}, {"price": 0}]})

    assert result is not None
    assert [(f.path, f.code) for f in result.fields] == [("items.1.price", "tag.gt")]


def test_explicit_presence_map_overrides_raw_input():
    presence = compute_presence({"email": "x"})

    result = Validator().check(Profile(email="bad"), presence=presence)

    assert result is not None
    assert result.codes() == ["tag.email"]


# ------------------------------------------------------------------
# Input errors
# ------------------------------------------------------------------


def test_partial_without_raw_input_is_an_input_error():
    with pytest.raises(InputError):
        Validator().check(Profile(), partial=True)


def test_partial_requires_object_body():
    with pytest.raises(InvalidRecordError):
        _partial(Profile(), "[1, 2]")


def test_partial_respects_field_limit():
    raw = {f"extra{i}": i for i in range(20)}

    with pytest.raises(FieldLimitExceededError):
        _partial(Profile(), raw, max_fields=5)


def test_raw_body_is_only_decoded_when_needed():
    valid = Profile(name="Ada", email="ada@example.com")
    presence = compute_presence({"email": "x"})

    assert Validator().check(valid, raw="{not json") is None
    assert Validator().check(valid, raw="{not json", presence=presence) is None
    with pytest.raises(PresenceParseError):
        _partial(valid, "{not json")
    with pytest.raises(PresenceParseError):
        Validator().check(valid, raw="{not json", disallow_unknown_fields=True)


# ------------------------------------------------------------------
# Filter primitives
# ------------------------------------------------------------------


def test_filter_constraints_keeps_only_present_paths():
    presence = compute_presence({"a": 1, "b": {"c": 2}})
    constraints = [_Bound("a"), _Bound("b.c"), _Bound("b.d"), _Bound("z")]

    kept = filter_constraints(constraints, presence)

    assert [c.path for c in kept] == ["a", "b.c"]


def test_filter_violations_keeps_root_level_errors():
    presence = compute_presence({"a": 1})
    errors = [
        FieldError(path="", code="interface.error", message="bad record"),
        FieldError(path="a", code="schema.type", message="wrong type"),
        FieldError(path="b", code="schema.required", message="b is required"),
    ]

    kept = list(filter_violations(errors, presence))

    assert [e.path for e in kept] == ["", "a"]
