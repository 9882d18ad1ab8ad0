"""IAM presentation layer."""

from __future__ import annotations

from iam.presentation.routes import router

__all__ = ["router"]
