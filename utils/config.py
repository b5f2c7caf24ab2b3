"""Configuration management for the transaction dashboard.

Provides:
- DatabaseConfig: SQLite pragmas and batch sizes for the transaction store
- SeedConfig: where and how the seed payload is fetched
- AppConfig: application settings loaded from environment variables
"""

import os as _os
from pathlib import Path

DEFAULT_SEED_URL = "https://s3.amazonaws.com/roxiler.com/product_transaction.json"


class DatabaseConfig:
    """Configuration for the SQLite transaction store.

    Environment variables:
        APP_DB_WAL: "0" turns off write-ahead logging (default: 1)
        APP_DB_SYNCHRONOUS: PRAGMA synchronous level (default: NORMAL)
    """

    def __init__(self):
        self.db_path = Path("transactions.sqlite")
        self.wal_mode = _os.getenv("APP_DB_WAL", "1") != "0"
        self.synchronous = _os.getenv("APP_DB_SYNCHRONOUS", "NORMAL").upper()
        self.busy_timeout_ms = 5000
        self.batch_size = 1000


class SeedConfig:
    """Configuration for the one-shot seed load."""

    def __init__(self):
        self.url = _os.getenv("SEED_URL", DEFAULT_SEED_URL)
        self.timeout = float(_os.getenv("SEED_TIMEOUT", "30"))
        # The seed fetch is not retried unless explicitly configured.
        self.max_retries = int(_os.getenv("SEED_MAX_RETRIES", "0"))


class AppConfig:
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the application works out of the
    box without any configuration.

    Environment variables:
        APP_DB_PATH: Path to the SQLite database file (default: transactions.sqlite)
        APP_PORT: API server port (default: 5000)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_LOG_LEVEL: Root log level (default: INFO)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)
        SEED_URL / SEED_TIMEOUT / SEED_MAX_RETRIES: see SeedConfig
        COMBINED_WORKERS: Threads used by /api/combined-data (default: 4)
    """

    def __init__(self) -> None:
        self.db_path = Path(_os.getenv("APP_DB_PATH", "transactions.sqlite"))
        self.api_port = int(_os.getenv("APP_PORT", "5000"))
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        self.log_level = _os.getenv("APP_LOG_LEVEL", "INFO").upper()
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )
        self.combined_workers = int(_os.getenv("COMBINED_WORKERS", "4"))
        self.seed = SeedConfig()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
