"""Pytest fixtures for the fieldguard test-suite."""
from __future__ import annotations

import pytest

from fieldguard import Validator, reset_default_validator


@pytest.fixture
def validator() -> Validator:
    return Validator()


@pytest.fixture(autouse=True)
def _fresh_default_validator():
    """Each test starts without a process-wide validator."""
    reset_default_validator()
    yield
    reset_default_validator()
