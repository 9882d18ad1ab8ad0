"""Presentation layer for the Jobs bounded context."""

from jobs.presentation.routes import router

__all__ = ["router"]
