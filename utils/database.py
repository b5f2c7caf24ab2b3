"""Database utilities for the transaction store.

Provides reusable functions for:
- Schema creation and connection pragmas
- The REGEXP function used by free-text search
- Batch insert operations
- Row counts
"""

import re
import sqlite3
from functools import lru_cache
from pathlib import Path
from typing import Any, List

from utils.config import DatabaseConfig

TRANSACTIONS_DDL = """
CREATE TABLE IF NOT EXISTS transactions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT,
    description TEXT,
    price REAL,
    date_of_sale TEXT,
    category TEXT,
    sold INTEGER
);
CREATE INDEX IF NOT EXISTS idx_transactions_date_of_sale ON transactions(date_of_sale);
CREATE INDEX IF NOT EXISTS idx_transactions_category ON transactions(category);
"""

INSERT_TRANSACTION_SQL = (
    "INSERT INTO transactions (title, description, price, date_of_sale, category, sold) "
    "VALUES (?, ?, ?, ?, ?, ?)"
)


@lru_cache(maxsize=256)
def _compiled(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


def _regexp(pattern: str | None, value: Any) -> bool:
    """SQLite REGEXP implementation: case-insensitive search, NULL never matches."""
    if pattern is None or value is None:
        return False
    return _compiled(pattern).search(str(value)) is not None


SYNCHRONOUS_LEVELS = ("OFF", "NORMAL", "FULL", "EXTRA")


def init_pragmas(conn: sqlite3.Connection, busy_timeout_ms: int = 5000,
                 wal_mode: bool = True, synchronous: str = "NORMAL") -> None:
    """Initialize SQLite pragmas for concurrent readers and one writer.

    - WAL mode (unless disabled) so seed loads do not block readers
    - synchronous level, NORMAL by default
    - busy_timeout so concurrent writers wait instead of failing

    Raises:
        ValueError: If synchronous is not one of SYNCHRONOUS_LEVELS.
    """
    level = synchronous.upper()
    if level not in SYNCHRONOUS_LEVELS:
        raise ValueError(f"Invalid synchronous level: '{synchronous}'")
    if wal_mode:
        conn.execute("PRAGMA journal_mode=WAL")
    conn.execute(f"PRAGMA synchronous={level}")
    conn.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")


def open_connection(db_path: Path | str, config: DatabaseConfig | None = None) -> sqlite3.Connection:
    """Open a connection with row access by name and REGEXP registered."""
    config = config or DatabaseConfig()
    conn = sqlite3.connect(str(db_path), check_same_thread=False, timeout=10)
    conn.row_factory = sqlite3.Row
    conn.create_function("REGEXP", 2, _regexp, deterministic=True)
    try:
        init_pragmas(conn, config.busy_timeout_ms, config.wal_mode, config.synchronous)
    except (ValueError, sqlite3.Error):
        conn.close()
        raise
    return conn


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the transactions table and its indexes if missing."""
    conn.executescript(TRANSACTIONS_DDL)
    conn.commit()


def batch_insert(conn: sqlite3.Connection, query: str, rows: List[tuple],
                 batch_size: int = 1000) -> int:
    """Execute batch insert operations efficiently.

    Inserts rows in batches to balance memory usage and performance.
    Commits after each batch to prevent transaction bloat.

    Args:
        conn: SQLite connection
        query: SQL INSERT query with ? placeholders
        rows: List of tuples to insert
        batch_size: Number of rows per batch (default: 1000)

    Returns:
        Total number of rows inserted
    """
    total_inserted = 0

    for i in range(0, len(rows), batch_size):
        batch = rows[i:i + batch_size]
        with conn:
            conn.executemany(query, batch)
        total_inserted += len(batch)

    return total_inserted


def get_table_count(conn: sqlite3.Connection, table: str) -> int:
    """Get row count for a table."""
    result = conn.execute(f"SELECT COUNT(*) AS cnt FROM {table}").fetchone()
    return result[0] if result else 0
