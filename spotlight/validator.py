"""
Field validation helpers.

A Validator collects per-field error messages across a validation pass.
Validation functions (``validate_game``, ``validate_user``, ``validate_filters``)
run every check against a fresh Validator, and callers inspect ``errors``
afterwards to report them.
"""

from __future__ import annotations

import re
from typing import Dict, Hashable, Iterable, Pattern

EMAIL_RX: Pattern[str] = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


class Validator:
    """Accumulates ``field -> message`` pairs; the first failure per field wins."""

    def __init__(self) -> None:
        self.errors: Dict[str, str] = {}

    def valid(self) -> bool:
        return not self.errors

    def add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, message)

    def check(self, ok: bool, field: str, message: str) -> None:
        if not ok:
            self.add_error(field, message)


def unique(values: Iterable[Hashable]) -> bool:
    """Return True if no value appears more than once."""
    seen = set()
    for value in values:
        if value in seen:
            return False
        seen.add(value)
    return True


def matches(value: str, pattern: Pattern[str]) -> bool:
    return pattern.match(value) is not None


def permitted_value(value: Hashable, *permitted: Hashable) -> bool:
    return value in permitted


__all__ = ["EMAIL_RX", "Validator", "matches", "permitted_value", "unique"]
