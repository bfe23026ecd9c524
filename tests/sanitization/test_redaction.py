# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Sensitive values never reach violation output once redacted."""

from __future__ import annotations

from dataclasses import dataclass, field

from fieldguard import Validator, tag
from fieldguard.sanitization import (
    REDACTED_TOKEN,
    redact_any,
    redact_field_error,
    redact_paths_containing,
    redact_paths_matching,
)
from fieldguard.validation.base import FieldError


@dataclass
class Credentials:
    username: str = tag("required,min=3", default="")
    password: str = tag("required,min=8", default="")


@dataclass
class Account:
    credentials: Credentials = field(default_factory=Credentials)
    api_token: str = tag("len=32", name="apiToken", default="")


@dataclass
class SchemaSecret:
    secret: str = ""

    def json_schema(self):
        return "secret.v1", {
            "type": "object",
            "properties": {"secret": {"enum": ["expected"]}},
        }


@dataclass
class Signup:
    password: str = tag("required,min=8", default="")
    password_confirm: str = tag("eqfield=password", default="")


@dataclass
class Rotation:
    secret: str = ""
    confirm: str = tag("eqfield=secret", default="")


@dataclass
class Login:
    username: str = ""
    password: str = ""
    remember: bool = False

    def json_schema(self):
        return "login.v1", {
            "type": "object",
            "properties": {"username": {"type": "string"}, "password": {"type": "string"}},
            "additionalProperties": False,
        }


@dataclass
class LoginBatch:
    password: str = ""

    def json_schema(self):
        return "login-batch.v1", {"type": "array"}


def test_password_value_is_redacted():
    validator = Validator(redactor=redact_paths_containing("password"))

    result = validator.check(Credentials(username="alice", password="hunter2"))

    [violation] = result.fields
    assert violation.path == "password"
    assert violation.meta["value"] == REDACTED_TOKEN
    assert "hunter2" not in str(result)
    assert "hunter2" not in repr(result.to_dict())


def test_non_matching_paths_keep_values():
    validator = Validator(redactor=redact_paths_containing("password"))

    result = validator.check(Credentials(username="al", password="longenough"))

    assert result.fields[0].meta["value"] == "al"


def test_path_match_is_case_insensitive_by_default():
    redactor = redact_paths_containing("TOKEN")

    assert redactor("apiToken")
    assert not redact_paths_containing("TOKEN", case_sensitive=True)("apiToken")


def test_glob_redactor_on_nested_paths():
    validator = Validator(redactor=redact_paths_matching("credentials.*"))

    result = validator.check(Account(credentials=Credentials(username="al", password="short"), api_token="x"))

    values = {f.path: f.meta["value"] for f in result}
    assert values == {
        "apiToken": "x",
        "credentials.password": REDACTED_TOKEN,
        "credentials.username": REDACTED_TOKEN,
    }


def test_redact_any_combines_redactors():
    redactor = redact_any(None, redact_paths_containing("password"), redact_paths_matching("api*"))

    assert redactor("credentials.password")
    assert redactor("apiToken")
    assert not redactor("credentials.username")
    assert redact_any(None, None) is None


def test_schema_messages_are_scrubbed_too():
    validator = Validator(redactor=redact_paths_containing("secret"))

    result = validator.check(SchemaSecret(secret="s3cr3t-value"))

    [violation] = result.fields
    assert violation.code == "schema.enum"
    assert violation.meta["value"] == REDACTED_TOKEN
    assert "s3cr3t-value" not in violation.message


def test_redactor_may_be_set_per_call():
    result = Validator().check(
        Credentials(username="alice", password="hunter2"),
        redactor=redact_paths_containing("password"),
    )

    assert result.fields[0].meta["value"] == REDACTED_TOKEN


def test_errors_without_value_are_untouched():
    error = FieldError(path="password", code="interface.error", message="bad", meta={})

    assert redact_field_error(error, redact_paths_containing("password")) is error


def test_cross_field_values_are_redacted_with_the_field():
    validator = Validator(redactor=redact_paths_containing("password"))

    result = validator.check(Signup(password="hunter2-secret", password_confirm="hunter2-typo"))

    [violation] = result.fields
    assert violation.path == "password_confirm"
    assert violation.meta["value"] == REDACTED_TOKEN
    assert violation.meta["other_value"] == REDACTED_TOKEN
    assert "hunter2-secret" not in repr(violation.meta)
    assert "hunter2-typo" not in repr(violation.meta)


def test_compared_field_path_redacts_its_value():
    validator = Validator(redactor=redact_paths_containing("secret"))

    result = validator.check(Rotation(secret="k3y-material", confirm="other"))

    [violation] = result.fields
    assert violation.path == "confirm"
    assert violation.meta["value"] == "other"
    assert violation.meta["other_path"] == "secret"
    assert violation.meta["other_value"] == REDACTED_TOKEN
    assert "k3y-material" not in repr(result.to_dict())


def test_nested_values_of_object_violations_are_scrubbed():
    validator = Validator(redactor=redact_paths_containing("password"))

    result = validator.check(Login(username="alice", password="topsecret"))

    [violation] = result.fields
    assert violation.code == "schema.additionalProperties"
    assert violation.meta["value"]["username"] == "alice"
    assert violation.meta["value"]["password"] == REDACTED_TOKEN
    assert "topsecret" not in repr(violation.meta)
    assert "topsecret" not in violation.message


def test_root_type_mismatch_message_is_scrubbed():
    validator = Validator(redactor=redact_paths_containing("password"))

    result = validator.check(LoginBatch(password="topsecret"))

    [violation] = result.fields
    assert violation.code == "schema.type"
    assert "topsecret" not in repr(violation.meta)
    assert "topsecret" not in violation.message
