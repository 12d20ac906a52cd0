"""
Error kinds raised by the data models.

Only expected, row-level outcomes are represented here. Connectivity,
timeout, and constraint failures from psycopg propagate unchanged.
"""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    RECORD_NOT_FOUND = "record not found"
    EDIT_CONFLICT = "edit conflict"
    DUPLICATE_EMAIL = "duplicate email"


class ModelError(Exception):
    """Base class for domain-level data access failures."""

    kind: ErrorKind

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.kind.value)


class RecordNotFoundError(ModelError):
    """No row matched the requested id (or email)."""

    kind = ErrorKind.RECORD_NOT_FOUND


class EditConflictError(ModelError):
    """An update matched no row for the given id and version."""

    kind = ErrorKind.EDIT_CONFLICT


class DuplicateEmailError(ModelError):
    kind = ErrorKind.DUPLICATE_EMAIL


__all__ = [
    "DuplicateEmailError",
    "EditConflictError",
    "ErrorKind",
    "ModelError",
    "RecordNotFoundError",
]
