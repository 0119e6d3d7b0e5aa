"""Engine factory for the entity manager.

Every engine Hearth uses is created by `make_engine` so connections to the same
backend are configured alike. SQLite connections get the pragmas in
`SQLITE_PRAGMAS` (foreign keys enforced, write-ahead log); other backends are
used as configured by their URL.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, make_url

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

SQLITE_PRAGMAS: Mapping[str, str] = {
    "foreign_keys": "ON",
    "journal_mode": "WAL",
    "synchronous": "NORMAL",
    "temp_store": "MEMORY",
}


def is_sqlite(url: str | URL) -> bool:
    """Return True if ``url`` points at a SQLite database, whatever the driver."""
    return make_url(url).get_backend_name() == "sqlite"


def make_engine(
    url: str | URL,
    *,
    echo: bool = False,
    pragmas: Mapping[str, str] | None = None,
) -> Engine:
    """Create an engine for ``url``.

    Args:
        url: Database URL.
        echo: Log every SQL statement (used in debug mode).
        pragmas: SQLite pragmas run on each new connection. Defaults to
            `SQLITE_PRAGMAS`; ignored for other backends.

    Returns:
        Engine: The engine. No connection is opened yet.

    Raises:
        sqlalchemy.exc.ArgumentError: If the URL cannot be parsed.
    """
    url = make_url(url)
    engine = create_engine(url, echo=echo)
    if is_sqlite(url):
        statements = [
            f"PRAGMA {name}={value}"
            for name, value in (SQLITE_PRAGMAS if pragmas is None else pragmas).items()
        ]

        @event.listens_for(engine, "connect")
        def _run_pragmas(dbapi_conn, _conn_record):  # type: ignore
            cursor = dbapi_conn.cursor()
            try:
                for statement in statements:
                    cursor.execute(statement)
            finally:
                cursor.close()

    logger.debug("Created engine for %s", url.render_as_string(hide_password=True))
    return engine


def check_connection(engine: Engine) -> None:
    """Open a connection and run ``SELECT 1``.

    Raises:
        sqlalchemy.exc.OperationalError: If the database is not reachable.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def dispose_session(session: Session) -> None:
    """Close ``session`` and dispose of the engine it is bound to."""
    engine = session.get_bind()
    session.close()
    engine.dispose()
