from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from utils.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


def sqlite_path_from_url(database_url: str) -> tuple[str, bool]:
    """Resolve a store connection string to (sqlite target, is_uri).

    Accepts ``sqlite:///relative.db``, ``sqlite:////abs/path.db``, ``file:`` URIs,
    ``:memory:`` and plain filesystem paths.
    """
    url = (database_url or "").strip()
    if not url:
        raise ConfigurationError("Store connection string is empty")
    if url.startswith("sqlite://"):
        target = url[len("sqlite://"):]
        if target.startswith("/"):
            target = target[1:]
        return (target or ":memory:"), False
    if url.startswith("file:"):
        return url, True
    if "://" in url:
        raise ConfigurationError(f"Unsupported store connection string: {url.split('://', 1)[0]}://")
    return url, False


def get_connection(database_url: str, timeout: Optional[float] = 30.0) -> sqlite3.Connection:
    """Open a SQLite connection with sane pragmas for local use.

    - WAL journal for fewer writer blocks
    - NORMAL synchronous for performance
    - foreign_keys ON to enforce integrity
    """
    target, is_uri = sqlite_path_from_url(database_url)
    conn = sqlite3.connect(target, timeout=timeout or 30.0, uri=is_uri)
    conn.row_factory = sqlite3.Row
    # Pragmas
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA foreign_keys=ON;")
    return conn


@contextmanager
def open_store(database_url: str) -> Iterator[sqlite3.Connection]:
    """Yield a bootstrapped connection that is closed on every exit path."""
    from db import schema

    conn = get_connection(database_url)
    try:
        schema.bootstrap(conn)
        yield conn
    finally:
        try:
            conn.close()
        except Exception as exc:
            logger.debug("Closing store connection failed: %s", exc, extra={"step": "teardown"})
