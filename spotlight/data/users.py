"""
User entity, password handling, validation rules, and the UserModel.

Passwords are hashed with werkzeug's salted PBKDF2/scrypt helpers; the
plaintext only lives on the in-memory ``Password`` for validation.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

import psycopg
from pydantic import BaseModel, Field, PrivateAttr
from werkzeug.security import check_password_hash, generate_password_hash

from spotlight.data.errors import DuplicateEmailError, EditConflictError, RecordNotFoundError
from spotlight.data.store import PooledModel
from spotlight.utils.logging import get_logger
from spotlight.validator import EMAIL_RX, Validator, matches

log = get_logger(__name__)

MAX_NAME_BYTES = 500
MIN_PASSWORD_BYTES = 8
MAX_PASSWORD_BYTES = 72
EMAIL_UNIQUE_CONSTRAINT = "users_email_key"


class Password(BaseModel):
    """A password hash plus, transiently, the plaintext it was set from."""

    hash: Optional[str] = None
    _plaintext: Optional[str] = PrivateAttr(None)

    @property
    def plaintext(self) -> Optional[str]:
        return self._plaintext

    def set(self, plaintext: str) -> None:
        self.hash = generate_password_hash(plaintext)
        self._plaintext = plaintext

    def matches(self, plaintext: str) -> bool:
        if self.hash is None:
            return False
        return check_password_hash(self.hash, plaintext)


class User(BaseModel):
    """Representation of a single row in the `users` table."""

    id: int = 0
    created_at: Optional[datetime] = None
    name: str = ""
    email: str = ""
    password: Password = Field(default_factory=Password, exclude=True)
    activated: bool = False
    version: Optional[UUID] = None


def validate_email(v: Validator, email: str) -> None:
    v.check(email != "", "email", "must be provided")
    v.check(matches(email, EMAIL_RX), "email", "must be a valid email address")


def validate_password_plaintext(v: Validator, password: str) -> None:
    size = len(password.encode("utf-8"))
    v.check(password != "", "password", "must be provided")
    v.check(size >= MIN_PASSWORD_BYTES, "password", "must be at least 8 bytes long")
    v.check(size <= MAX_PASSWORD_BYTES, "password", "must not be more than 72 bytes long")


def validate_user(v: Validator, user: User) -> None:
    v.check(user.name != "", "name", "must be provided")
    v.check(
        len(user.name.encode("utf-8")) <= MAX_NAME_BYTES,
        "name",
        "must not be more than 500 bytes long",
    )

    validate_email(v, user.email)

    if user.password.plaintext is not None:
        validate_password_plaintext(v, user.password.plaintext)

    # A user record must always carry a hash; reaching here without one is a bug.
    if user.password.hash is None:
        raise RuntimeError("missing password hash for user")


_INSERT = """
INSERT INTO users (name, email, password_hash, activated)
VALUES (%s, %s, %s, %s)
RETURNING id, created_at, version"""

_SELECT_BY_EMAIL = """
SELECT id, created_at, name, email, password_hash, activated, version
FROM users
WHERE email = %s"""

_UPDATE = """
UPDATE users
SET name = %s, email = %s, password_hash = %s, activated = %s, version = gen_random_uuid()
WHERE id = %s AND version = %s
RETURNING version"""


def _is_duplicate_email(exc: psycopg.errors.UniqueViolation) -> bool:
    return exc.diag.constraint_name == EMAIL_UNIQUE_CONSTRAINT


def _user_from_row(row: Sequence) -> User:
    return User(
        id=row[0],
        created_at=row[1],
        name=row[2],
        email=row[3],
        password=Password(hash=row[4]),
        activated=row[5],
        version=row[6],
    )


class UserModel(PooledModel):
    """Registration, lookup and optimistic updates for users."""

    def insert(self, user: User) -> None:
        args = (user.name, user.email, user.password.hash, user.activated)
        try:
            with self._connection() as conn:
                row = conn.execute(_INSERT, args).fetchone()
        except psycopg.errors.UniqueViolation as exc:
            if _is_duplicate_email(exc):
                raise DuplicateEmailError() from exc
            raise
        user.id, user.created_at, user.version = row
        log.debug("User inserted", extra={"user_id": user.id})

    def get_by_email(self, email: str) -> User:
        with self._connection() as conn:
            row = conn.execute(_SELECT_BY_EMAIL, (email,)).fetchone()
        if row is None:
            raise RecordNotFoundError()
        return _user_from_row(row)

    def update(self, user: User) -> None:
        args = (
            user.name,
            user.email,
            user.password.hash,
            user.activated,
            user.id,
            user.version,
        )
        try:
            with self._connection() as conn:
                row = conn.execute(_UPDATE, args).fetchone()
        except psycopg.errors.UniqueViolation as exc:
            if _is_duplicate_email(exc):
                raise DuplicateEmailError() from exc
            raise
        if row is None:
            raise EditConflictError()
        user.version = row[0]


__all__ = [
    "Password",
    "User",
    "UserModel",
    "validate_email",
    "validate_password_plaintext",
    "validate_user",
]
