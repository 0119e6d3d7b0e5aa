"""Terminal message helpers for the Hearth CLI.

Each helper prints one bold, colored line to stderr, prefixed with an emoji
when stderr can encode it and an ASCII marker otherwise. Stdout stays free
for command output.
"""

import click

CAUTION = ("⚠️", "[!]")
SUCCESS = ("✅", "[OK]")
ERROR = ("❌", "[X]")


def _supports_character(character: str) -> bool:
    """Return True if ``character`` can be encoded on stderr."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def glyph(choice: tuple[str, str]) -> str:
    """Pick the emoji of an ``(emoji, fallback)`` pair when stderr supports it."""
    emoji, fallback = choice
    return emoji if _supports_character(emoji) else fallback


def warn(msg: str) -> None:
    """Print a yellow warning line, e.g. ``⚠️  Cache directory is missing.``"""
    click.secho(f"{glyph(CAUTION)}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Print a green success line, e.g. ``✅  Database is reachable.``"""
    click.secho(f"{glyph(SUCCESS)}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Print a red error line, e.g. ``❌  Cannot connect to database.``"""
    click.secho(f"{glyph(ERROR)}  {msg}", fg="red", bold=True, err=True)
