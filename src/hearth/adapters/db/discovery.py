"""Entity discovery.

Mapped classes register themselves on the shared metadata when their module is
imported. Discovery imports every module below a fixed entity package so that
all entities are known before the first session is used.
"""

from __future__ import annotations

import importlib
import logging
import pkgutil

logger = logging.getLogger(__name__)

ENTITY_PACKAGE = "hearth.entities"


def discover_entities(package: str = ENTITY_PACKAGE) -> list[str]:
    """Import ``package`` and every module below it.

    Args:
        package: Dotted name of the root entity package.

    Returns:
        list[str]: The imported module names, root package first.

    Raises:
        ModuleNotFoundError: If ``package`` cannot be imported.
    """
    root = importlib.import_module(package)
    names = [package]
    for info in pkgutil.walk_packages(getattr(root, "__path__", []), prefix=f"{package}."):
        importlib.import_module(info.name)
        names.append(info.name)
    logger.debug("Discovered %d entity module(s) under %s", len(names), package)
    return names
