from __future__ import annotations

from spotlight.validator import EMAIL_RX, Validator, matches, permitted_value, unique


def test_new_validator_is_valid() -> None:
    v = Validator()
    assert v.valid()
    assert v.errors == {}


def test_check_records_failures_only() -> None:
    v = Validator()
    v.check(True, "title", "must be provided")
    v.check(False, "year", "must be provided")

    assert not v.valid()
    assert v.errors == {"year": "must be provided"}


def test_first_failure_per_field_wins() -> None:
    v = Validator()
    v.check(False, "genres", "must contain at least 1 genre")
    v.check(False, "genres", "must not contain duplicate values")
    v.add_error("genres", "something else")

    assert v.errors == {"genres": "must contain at least 1 genre"}


def test_unique() -> None:
    assert unique([])
    assert unique(["rpg", "action"])
    assert not unique(["rpg", "action", "rpg"])


def test_permitted_value() -> None:
    assert permitted_value("title", "id", "title")
    assert not permitted_value("name", "id", "title")


def test_email_pattern() -> None:
    assert matches("alice@example.com", EMAIL_RX)
    assert matches("a.b+tag@sub.example.org", EMAIL_RX)
    assert not matches("not-an-email", EMAIL_RX)
    assert not matches("alice@", EMAIL_RX)
