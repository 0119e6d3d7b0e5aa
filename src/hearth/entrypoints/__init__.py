"""Entrypoints (inbound adapters) for Hearth.

Expose the bootstrapped application to the outside world. Today this is the
``hearth`` command-line interface used to inspect and maintain a project.

Dependency rule: may import `hearth.bootstrap`, `hearth.config` and
`hearth.logging`; avoid
importing `hearth.adapters` directly.
"""
