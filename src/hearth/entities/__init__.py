"""Entity package.

Application entities are declared in modules below this package by subclassing
`Entity`. Every module here is imported at bootstrap (see
`hearth.adapters.db.discovery`), so declaring a mapped class is enough to make
it available to the entity manager.
"""

from sqlalchemy.orm import DeclarativeBase

from hearth.adapters.db.metadata import metadata

__all__ = ["Entity"]


class Entity(DeclarativeBase):  # pylint: disable=too-few-public-methods
    """Declarative base for all application entities."""

    metadata = metadata
