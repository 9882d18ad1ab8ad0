"""Domain probe for uniqueness checks."""

from __future__ import annotations

from typing import Protocol

import structlog

from shared_kernel.validation import mask_email


class UniquenessProbe(Protocol):
    """Domain probe for uniqueness checker operations."""

    def value_taken(self, field: str, value: str, owner_id: str) -> None:
        """Record that a value is already used by another member."""
        ...

    def lookup_failed(self, field: str, error: str) -> None:
        """Record that the store could not answer (the check fails closed)."""
        ...


class DefaultUniquenessProbe:
    """Default implementation of UniquenessProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def value_taken(self, field: str, value: str, owner_id: str) -> None:
        shown = mask_email(value) if field == "email" else value
        self._logger.info(
            "uniqueness_conflict", field=field, value=shown, owner_id=owner_id
        )

    def lookup_failed(self, field: str, error: str) -> None:
        self._logger.error("uniqueness_lookup_failed", field=field, error=error)
