"""Protocols consumed by the permission evaluator.

The evaluator only needs to read the raw permission tokens of a role, so it
depends on this protocol rather than on the IAM Role aggregate.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class PermissionHolder(Protocol):
    """Anything that carries a set of raw permission tokens (e.g. a Role)."""

    @property
    def permissions(self) -> frozenset[str]:
        """Raw permission tokens, possibly including unknown ones."""
        ...
