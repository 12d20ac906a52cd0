"""
Spotlight - a PostgreSQL-backed catalog of games and users.

This package provides the data layer behind the catalog API:

- Field validation with per-field error messages
- Game and user models issuing parameterized SQL through a shared pool
- Optimistic concurrency on updates via a server-regenerated version token
- Full-text/genre filtered listing with pagination metadata

The HTTP layer is kept out of this package; it consumes ``spotlight.data``.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from spotlight.config import Settings, get_settings
from spotlight.data import (
    EditConflictError,
    ErrorKind,
    Filters,
    Game,
    Metadata,
    ModelError,
    Models,
    RecordNotFoundError,
    User,
    new_models,
)
from spotlight.infrastructure import create_pool
from spotlight.utils.logging import configure_logging, get_logger
from spotlight.validator import Validator

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Data access
    "create_pool",
    "new_models",
    "Models",
    "Game",
    "User",
    "Filters",
    "Metadata",
    "Validator",
    # Errors
    "ErrorKind",
    "ModelError",
    "RecordNotFoundError",
    "EditConflictError",
    # Logging
    "configure_logging",
    "get_logger",
]
