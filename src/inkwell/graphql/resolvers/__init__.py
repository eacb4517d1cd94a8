"""
Resolver functions, one module per domain context.

Every resolver takes ``(parent, args, ctx)``: the parent entity (``None`` at
the root), a dict of arguments or a ``ConnectionArgs`` for connection fields,
and the request ``Context``. They return ORM entities, ``Page`` windows or
plain values; the schema types in ``inkwell.graphql.types`` wrap them.
"""
