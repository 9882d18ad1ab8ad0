"""Presentation layer for the Members bounded context."""

from members.presentation.routes import router

__all__ = ["router"]
