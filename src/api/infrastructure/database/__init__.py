"""Database infrastructure - shared engine, base model and error translation."""

from infrastructure.database.errors import is_unavailable_error, unique_violation_column

__all__ = [
    "is_unavailable_error",
    "unique_violation_column",
]
