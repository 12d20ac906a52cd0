"""
Integration tests for UserModel against a real PostgreSQL instance.

Run with: RUN_INTEGRATION_TESTS=1 pytest tests/integration/
"""

from __future__ import annotations

import os

import pytest

from spotlight.data import (
    DuplicateEmailError,
    EditConflictError,
    Models,
    RecordNotFoundError,
    User,
)

pytestmark = pytest.mark.skipif(
    os.getenv("RUN_INTEGRATION_TESTS", "0") != "1",
    reason="Integration tests require RUN_INTEGRATION_TESTS=1 and reachable Postgres",
)


def _register(models: Models, email: str = "alice@example.com") -> User:
    user = User(name="Alice", email=email)
    user.password.set("pa55word-secret")
    models.users.insert(user)
    return user


def test_register_and_lookup_by_email(models: Models):
    user = _register(models)

    found = models.users.get_by_email("alice@example.com")

    assert found.id == user.id
    assert found.version == user.version
    assert found.activated is False
    assert found.password.matches("pa55word-secret")


def test_email_lookup_and_uniqueness_ignore_case(models: Models):
    _register(models)
    assert models.users.get_by_email("ALICE@example.com").name == "Alice"
    with pytest.raises(DuplicateEmailError):
        _register(models, "Alice@Example.com")


def test_unknown_email(models: Models):
    with pytest.raises(RecordNotFoundError):
        models.users.get_by_email("nobody@example.com")


def test_activate_with_optimistic_update(models: Models):
    user = _register(models)
    stale = models.users.get_by_email(user.email)

    user.activated = True
    models.users.update(user)
    assert models.users.get_by_email(user.email).activated is True

    stale.name = "Mallory"
    with pytest.raises(EditConflictError):
        models.users.update(stale)
