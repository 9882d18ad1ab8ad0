"""Jobs bounded context.

Tracks long-running bulk operations on members (bulk delete, member import)
so callers can poll progress, cancel and review per-item results.
"""
