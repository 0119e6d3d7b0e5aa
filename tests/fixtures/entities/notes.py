"""A minimal mapped entity."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from hearth.entities import Entity


class Note(Entity):
    """A short text note."""

    __tablename__ = "fixture_note"

    id: Mapped[int] = mapped_column(primary_key=True)
    body: Mapped[str] = mapped_column(String(200))
