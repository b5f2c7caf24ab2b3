"""
Store handle and connection management for the API.

A single TransactionStore is created by the application lifespan (schema
ensured on startup, released on shutdown) and stored on ``app.state``.
Handlers receive it through the get_store() dependency and open one SQLite
connection per request through get_db().
"""

import logging
import sqlite3
import threading
from collections.abc import Generator
from pathlib import Path

from fastapi import HTTPException, Request

from utils.config import DatabaseConfig
from utils.database import (
    INSERT_TRANSACTION_SQL,
    batch_insert,
    create_schema,
    get_table_count,
    open_connection,
)

logger = logging.getLogger(__name__)


class TransactionStore:
    """Handle on the SQLite file holding the ``transactions`` table."""

    def __init__(self, db_path: Path, config: DatabaseConfig | None = None) -> None:
        self.db_path = Path(db_path)
        self.config = config or DatabaseConfig()
        self._open = False
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        """Create the database file and schema if needed."""
        with self._lock:
            if self._open:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = open_connection(self.db_path, self.config)
            try:
                create_schema(conn)
            finally:
                conn.close()
            self._open = True
        logger.info("store opened path=%s", self.db_path)

    def close(self) -> None:
        with self._lock:
            self._open = False
        logger.info("store closed path=%s", self.db_path)

    def connect(self) -> sqlite3.Connection:
        """Open a new connection.  The caller owns and closes it."""
        if not self._open:
            raise sqlite3.OperationalError(f"Store at '{self.db_path}' is not open")
        return open_connection(self.db_path, self.config)

    def insert_many(self, rows: list[tuple]) -> int:
        """Bulk-insert transaction rows unconditionally; returns rows inserted."""
        conn = self.connect()
        try:
            return batch_insert(conn, INSERT_TRANSACTION_SQL, rows,
                                batch_size=self.config.batch_size)
        finally:
            conn.close()

    def count(self) -> int:
        conn = self.connect()
        try:
            return get_table_count(conn, "transactions")
        finally:
            conn.close()


def get_store(request: Request) -> TransactionStore:
    """FastAPI dependency: the application's TransactionStore."""
    store = getattr(request.app.state, "store", None)
    if store is None or not store.is_open:
        raise HTTPException(status_code=503, detail="Transaction store is not available.")
    return store


def get_db(request: Request) -> Generator[sqlite3.Connection, None, None]:
    """FastAPI dependency: yield a SQLite connection, close on exit.

    Usage in a route::

        @router.get("/example")
        def example(conn=Depends(get_db)):
            ...
    """
    store = get_store(request)
    conn = store.connect()
    try:
        yield conn
    finally:
        conn.close()
