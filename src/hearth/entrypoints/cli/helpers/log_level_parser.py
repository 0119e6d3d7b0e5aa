"""Parsing of ``NAME=LEVEL`` logger-level options.

The ``-L/--logger-level`` option accepts items such as ``sqlalchemy=INFO``,
either repeated or as one comma/space separated string (the form used by the
``HEARTH_LOGGER_LEVELS`` environment variable).
"""

import logging
import re

import click

# Libraries that are too chatty at DEBUG for everyday use
DEFAULT_LIB_LEVELS = {"sqlalchemy": logging.WARNING, "werkzeug": logging.WARNING}

_SEPARATORS = re.compile(r"[,\s]+")


def _split_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Flatten option values into single ``NAME=LEVEL`` items."""
    values = [value] if isinstance(value, str) else list(value)
    return [item for v in values for item in _SEPARATORS.split(v) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback turning ``NAME=LEVEL`` items into a name->level dict.

    The result starts from `DEFAULT_LIB_LEVELS`; explicit items override it.

    Returns:
        dict[str, int]: Logger names mapped to numeric levels.

    Raises:
        click.BadParameter: If an item is not ``NAME=LEVEL`` or names an
            unknown level.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _split_items(value):
        name, sep, level_name = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        level = logging.getLevelNamesMapping().get(level_name.strip().upper())
        if level is None:
            raise click.BadParameter(f"Invalid log level: {level_name}")
        levels[name.strip()] = level
    return levels
