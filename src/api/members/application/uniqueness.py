"""Uniqueness checks for member identity fields.

Values are normalized (trimmed, lowercased) before the lookup, matching how
they are stored. When the store cannot answer, the check fails closed: the
DependencyUnavailableError propagates and nothing is treated as unique.
"""

from __future__ import annotations

from members.application.observability import (
    DefaultUniquenessProbe,
    UniquenessProbe,
)
from members.domain import UNIQUE_FIELDS, MemberField, MemberId
from members.ports import DependencyUnavailableError, IMemberRepository
from shared_kernel.validation import normalize_identity

__all__ = ["UniquenessChecker", "normalize_identity"]


class UniquenessChecker:
    """Checks whether a normalized value is free for a unique field."""

    def __init__(
        self,
        repository: IMemberRepository,
        probe: UniquenessProbe | None = None,
    ) -> None:
        self._repository = repository
        self._probe = probe or DefaultUniquenessProbe()

    async def is_unique(
        self,
        field: MemberField,
        normalized_value: str,
        exclude_id: MemberId | None = None,
    ) -> bool:
        """Check that no other member holds the value.

        Args:
            field: A unique field (currently only EMAIL)
            normalized_value: Value already passed through normalize_identity
            exclude_id: Member allowed to hold the value (the one being updated)

        Returns:
            True if the value is free (or held only by exclude_id)

        Raises:
            ValueError: If the field is not declared unique
            DependencyUnavailableError: If the store cannot be reached
        """
        if field not in UNIQUE_FIELDS:
            raise ValueError(f"Field '{field}' is not a unique field")

        try:
            existing = await self._repository.find_by_field(field, normalized_value)
        except DependencyUnavailableError as e:
            self._probe.lookup_failed(field.value, str(e))
            raise

        if existing is None:
            return True
        if exclude_id is not None and existing.id == exclude_id:
            return True

        self._probe.value_taken(field.value, normalized_value, existing.id.value)
        return False
