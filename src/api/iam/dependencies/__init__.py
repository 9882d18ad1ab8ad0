"""Dependency injection for IAM bounded context.

Composes infrastructure resources (session factory, settings, audit sink)
with IAM-specific components (repositories, services, the current principal).
"""
