"""Audit bounded context.

Append-only record of who did what to which entity, written off the request
path by a bounded background emitter.
"""
