"""Shared utilities for the transaction dashboard."""

# Configuration
from utils.config import AppConfig, DatabaseConfig, SeedConfig

# Database utilities
from utils.database import (
    batch_insert,
    create_schema,
    get_table_count,
    init_pragmas,
    open_connection,
)

# HTTP utilities
from utils.http import RetryStrategy, SessionManager, fetch_json

# Month parsing
from utils.months import MONTH_NAMES, InvalidMonthError, parse_month

# Query building
from utils.query import PRICE_BUCKETS, build_where_clause, compile_search

__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "SeedConfig",
    "batch_insert",
    "create_schema",
    "get_table_count",
    "init_pragmas",
    "open_connection",
    "RetryStrategy",
    "SessionManager",
    "fetch_json",
    "MONTH_NAMES",
    "InvalidMonthError",
    "parse_month",
    "PRICE_BUCKETS",
    "build_where_clause",
    "compile_search",
]
