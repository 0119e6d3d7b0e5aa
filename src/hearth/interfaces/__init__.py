"""Interfaces (application boundary) for Hearth.

Defines framework-free contracts shared by the adapters and the bootstrap
package: the pruneable cache protocol and the mail transport protocol.

Dependency rule: this package is independent; do not import from any
`hearth.*` modules. It may be imported by `hearth.adapters` and
`hearth.bootstrap`.
"""
