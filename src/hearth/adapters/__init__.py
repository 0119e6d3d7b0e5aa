"""Adapters (infrastructure) for Hearth.

Concrete implementations behind the facade: database engine and entity
discovery, the tag-aware filesystem cache, mail transports and the routing
helpers bound to a request context.

Dependency rule: may import `hearth.interfaces`, `hearth.errors` and
`hearth.config`; must not import `hearth.bootstrap` or `hearth.entrypoints`.
"""
