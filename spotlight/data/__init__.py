"""
Data package for Spotlight.

Exports the entities, validation rules, and pool-backed models for games and
users, plus the pagination helpers and error kinds they share.
"""

from spotlight.data.errors import (
    DuplicateEmailError,
    EditConflictError,
    ErrorKind,
    ModelError,
    RecordNotFoundError,
)
from spotlight.data.filters import Filters, Metadata, calculate_metadata, validate_filters
from spotlight.data.games import Game, GameModel, validate_game
from spotlight.data.models import Models, new_models
from spotlight.data.users import Password, User, UserModel, validate_user

__all__ = [
    # Errors
    "DuplicateEmailError",
    "EditConflictError",
    "ErrorKind",
    "ModelError",
    "RecordNotFoundError",
    # Pagination
    "Filters",
    "Metadata",
    "calculate_metadata",
    "validate_filters",
    # Games
    "Game",
    "GameModel",
    "validate_game",
    # Users
    "Password",
    "User",
    "UserModel",
    "validate_user",
    # Aggregate
    "Models",
    "new_models",
]
