"""Helpers for classifying SQLAlchemy errors raised by repositories.

Repositories in every bounded context translate driver failures into their own
port exceptions; these helpers keep the classification rules in one place.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError

_UNAVAILABLE_TYPES: tuple[type[BaseException], ...] = (
    OperationalError,
    InterfaceError,
    OSError,
    TimeoutError,
)


def is_unavailable_error(error: BaseException) -> bool:
    """Check whether an error means the database could not be reached.

    Covers refused/dropped connections, pool timeouts and connections the
    driver has invalidated mid-statement.
    """
    if isinstance(error, _UNAVAILABLE_TYPES):
        return True
    return isinstance(error, DBAPIError) and error.connection_invalidated


def unique_violation_column(
    error: IntegrityError, constraints: Iterable[tuple[str, str]]
) -> str | None:
    """Find which unique constraint an IntegrityError violated.

    Args:
        error: The integrity error raised on flush/commit
        constraints: (marker, column) pairs. The marker is the constraint or
            index name PostgreSQL reports, or the ``table.column`` text SQLite
            reports.

    Returns:
        The violated column, or None when the error is not a known unique
        violation (e.g. a NOT NULL or foreign key failure)
    """
    message = str(error.orig) if error.orig is not None else str(error)
    for marker, column in constraints:
        if marker in message:
            return column
    return None
