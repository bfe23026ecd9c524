# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Validator configuration: option checks, YAML files and environment."""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from fieldguard import Strategy, Validator, ValidatorConfig, config_from_env, load_config, tag
from fieldguard.config import config_from_mapping
from fieldguard.exceptions import ConfigurationError
from fieldguard.sanitization import REDACTED_TOKEN


@dataclass
class Login:
    email: str = tag("required,email", default="")
    password: str = tag("min=8", default="")


# ------------------------------------------------------------------
# Construction-time checks
# ------------------------------------------------------------------


@pytest.mark.parametrize(
    "options",
    [
        {"max_depth": 0},
        {"max_fields": -1},
        {"max_cached_schemas": 0},
        {"max_errors": -1},
        {"max_depth": 1.5},
        {"max_fields": True},
        {"strategy": "magic"},
        {"run_all": "yes"},
        {"require_any": True},
        {"redactor": "password"},
        {"messages": {"min": 3}},
        {"schema": ("", {})},
    ],
)
def test_invalid_options_fail_construction(options):
    with pytest.raises(ConfigurationError):
        Validator(**options)


def test_defaults():
    config = Validator().config

    assert config.strategy is Strategy.AUTO
    assert config.max_errors == 0
    assert config.max_fields == 10_000
    assert config.max_depth == 100
    assert config.max_cached_schemas == 1024
    assert config.sort_errors is True
    assert not config.partial_enabled


def test_strategy_accepts_strings():
    assert Validator(strategy="TAGS").config.strategy is Strategy.TAGS


def test_unknown_option_suggests_close_match():
    with pytest.raises(ConfigurationError) as exc_info:
        Validator(max_error=3)

    assert "did you mean 'max_errors'" in str(exc_info.value)


def test_unknown_per_call_option_is_rejected():
    with pytest.raises(ConfigurationError):
        Validator().check(Login(), sortt_errors=False)


def test_per_call_options_do_not_leak_into_instance():
    validator = Validator(max_errors=5)

    result = validator.check(Login(password="short"), max_errors=1)

    assert len(result) == 1
    assert validator.config.max_errors == 5
    assert len(validator.check(Login(password="short"))) == 2


def test_config_object_and_keyword_overrides():
    base = ValidatorConfig(max_errors=2)

    validator = Validator(base, run_all=True)

    assert validator.config.max_errors == 2
    assert validator.config.run_all is True
    assert base.run_all is False


def test_config_must_be_a_config_object():
    with pytest.raises(ConfigurationError):
        Validator({"max_errors": 2})


def test_config_is_immutable():
    config = ValidatorConfig()

    with pytest.raises(AttributeError):
        config.max_errors = 3
    with pytest.raises(TypeError):
        config.custom_tags["x"] = lambda level: True


# ------------------------------------------------------------------
# Files
# ------------------------------------------------------------------


def test_load_yaml_config(tmp_path):
    path = tmp_path / "fieldguard.yaml"
    path.write_text(
        "fieldguard:\n"
        "  max_errors: 1\n"
        "  strategy: tags\n"
        "  redact:\n"
        "    - password\n"
        "  messages:\n"
        "    email: use your work address\n",
        encoding="utf-8",
    )

    config = load_config(path)

    assert config.max_errors == 1
    assert config.strategy is Strategy.TAGS
    assert config.messages["email"] == "use your work address"
    assert config.redactor("password")


def test_validator_from_file(tmp_path):
    path = tmp_path / "validator.yml"
    path.write_text("redact: [password]\nsort_errors: true\n", encoding="utf-8")

    validator = Validator.from_file(path)
    result = validator.check(Login(email="a@b.com", password="short"))

    assert result.fields[0].meta["value"] == REDACTED_TOKEN


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == ValidatorConfig()


def test_unknown_file_key_suggests_close_match(tmp_path):
    path = tmp_path / "typo.yaml"
    path.write_text("max_depht: 10\n", encoding="utf-8")

    with pytest.raises(ConfigurationError) as exc_info:
        load_config(path)

    assert "max_depth" in str(exc_info.value)
    assert str(path) in str(exc_info.value)


@pytest.mark.parametrize("text", ["- a\n- b\n", "max_errors: [unclosed\n"])
def test_malformed_files_are_rejected(tmp_path, text):
    path = tmp_path / "bad.yaml"
    path.write_text(text, encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_config(path)


def test_missing_file_is_a_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "absent.yaml")


def test_invalid_value_in_file_names_the_source():
    with pytest.raises(ConfigurationError) as exc_info:
        config_from_mapping({"max_depth": -3}, source="settings.yaml")

    assert exc_info.value.message.startswith("settings.yaml:")


def test_callables_cannot_come_from_files():
    with pytest.raises(ConfigurationError):
        config_from_mapping({"custom_tags": {}})


# ------------------------------------------------------------------
# Environment
# ------------------------------------------------------------------


def test_config_from_env():
    config = config_from_env(
        {
            "FIELDGUARD_MAX_ERRORS": "3",
            "FIELDGUARD_MAX_DEPTH": "20",
            "FIELDGUARD_STRATEGY": "schema",
            "FIELDGUARD_RUN_ALL": "true",
            "FIELDGUARD_REDACT": "password, token",
            "UNRELATED": "x",
        }
    )

    assert config.max_errors == 3
    assert config.max_depth == 20
    assert config.strategy is Strategy.SCHEMA
    assert config.run_all is True
    assert config.redactor("user.apiToken")


def test_empty_environment_gives_defaults():
    assert config_from_env({}) == ValidatorConfig()


def test_non_integer_env_value_is_rejected():
    with pytest.raises(ConfigurationError) as exc_info:
        config_from_env({"FIELDGUARD_MAX_FIELDS": "lots"})

    assert "FIELDGUARD_MAX_FIELDS" in str(exc_info.value)


def test_validator_from_env_reads_os_environ(monkeypatch):
    monkeypatch.setenv("FIELDGUARD_MAX_ERRORS", "1")

    validator = Validator.from_env()

    assert validator.config.max_errors == 1
