"""Bootstrap (composition root) for Hearth.

Loads the layered env files, assembles the settings and builds every shared
dependency (template engine, mailer, ORM session, logger, request) into a
single `Application` facade.

Import rules:
- Entry points import *this* package (not adapters/interfaces).
- This package may import: `hearth.adapters`, `hearth.interfaces`,
  `hearth.config` and `hearth.logging`.
- Inner layers must not import `hearth.bootstrap`.
"""

from .application import (
    ALL_CAPABILITIES,
    APP_CACHE,
    Application,
    Capability,
    DependencyKey,
    build_cache_registry,
)
from .bootstrap import (
    Bootstrapper,
    build_entity_manager,
    build_logger,
    build_mailer,
    build_request,
    build_request_context,
    build_template_engine,
    create_application,
)

__all__ = [
    "ALL_CAPABILITIES",
    "APP_CACHE",
    "Application",
    "Bootstrapper",
    "Capability",
    "DependencyKey",
    "build_cache_registry",
    "build_entity_manager",
    "build_logger",
    "build_mailer",
    "build_request",
    "build_request_context",
    "build_template_engine",
    "create_application",
]
