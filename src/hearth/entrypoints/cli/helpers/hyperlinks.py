"""OSC-8 hyperlinks for the Hearth CLI.

Links in the help epilog are emitted as OSC-8 escape sequences when stdout is
a terminal known to render them, and as the bare URL otherwise.
``FORCE_HYPERLINK=1`` (or ``0``) overrides the detection either way.
"""

import os
import sys
from collections.abc import Mapping
from typing import TextIO

OSC8_TERM_PROGRAMS = frozenset({"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty"})
OSC8_TERM_PREFIXES = ("alacritty", "konsole", "foot", "xterm-kitty")

# VTE (GNOME Terminal, Tilix) renders OSC-8 from 0.50 on
MIN_VTE_VERSION = 5000

# ESC ] 8 ; ; URL ST  LABEL  ESC ] 8 ; ; ST
OSC8_LINK = "\x1b]8;;{url}\x1b\\{label}\x1b]8;;\x1b\\"


def _forced(environ: Mapping[str, str]) -> bool | None:
    value = environ.get("FORCE_HYPERLINK")
    if value is None or value == "":
        return None
    return value not in {"0", "false", "no"}


def _vte_supports(environ: Mapping[str, str]) -> bool:
    version = environ.get("VTE_VERSION", "")
    return version.isdigit() and int(version) >= MIN_VTE_VERSION


def supports_osc8(
    stream: TextIO | None = None, environ: Mapping[str, str] | None = None
) -> bool:
    """Guess whether ``stream`` renders OSC-8 hyperlinks.

    Args:
        stream: Text stream to inspect; defaults to ``sys.stdout``.
        environ: Environment to read; defaults to ``os.environ``.

    Returns:
        bool: The ``FORCE_HYPERLINK`` override when set. Otherwise False for
        anything that is not a TTY, and True for terminals on the allowlist.
    """
    environ = os.environ if environ is None else environ
    forced = _forced(environ)
    if forced is not None:
        return forced

    stream = stream or sys.stdout
    if not getattr(stream, "isatty", lambda: False)():
        return False
    return (
        environ.get("TERM_PROGRAM", "").lower() in OSC8_TERM_PROGRAMS
        or "WT_SESSION" in environ  # Windows Terminal
        or _vte_supports(environ)
        or environ.get("TERM", "").startswith(OSC8_TERM_PREFIXES)
    )


def hyperlink(url: str, label: str | None = None) -> str:
    """Return ``url`` as an OSC-8 hyperlink, or as plain text when unsupported.

    Args:
        url: Target URL.
        label: Visible text. Defaults to the URL itself.
    """
    if not supports_osc8():
        return url
    return OSC8_LINK.format(url=url, label=label or url)
