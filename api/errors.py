"""
Error types surfaced by the API.

Every failure reaches the caller as ``{"message": ...}``.  Store and seed-source
failures become QueryError (HTTP 500); bad input is a ValueError (HTTP 400).
The handlers that render these live in api/app.py.
"""

import logging
import sqlite3
from contextlib import contextmanager

logger = logging.getLogger("transactions_api")


class QueryError(Exception):
    """An operation against the store (or the seed source) failed."""

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@contextmanager
def store_errors(message: str):
    """Turn sqlite3 errors raised inside the block into a logged QueryError."""
    try:
        yield
    except sqlite3.Error as exc:
        logger.exception("%s (%s)", message, exc)
        raise QueryError(message) from exc
