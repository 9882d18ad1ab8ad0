"""Members bounded context.

The member directory: registration, update, removal and lookup of members,
each mutating operation passing through the request pipeline.
"""
