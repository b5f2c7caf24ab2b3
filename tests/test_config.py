"""
Tests for utils/config.py: env-driven DatabaseConfig, SeedConfig and AppConfig.
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils.config import DEFAULT_SEED_URL, AppConfig, DatabaseConfig, SeedConfig

_ENV_VARS = (
    "APP_DB_PATH", "APP_PORT", "APP_HOST", "APP_LOG_FORMAT", "APP_LOG_LEVEL",
    "APP_CORS_ORIGINS", "COMBINED_WORKERS", "SEED_URL", "SEED_TIMEOUT",
    "SEED_MAX_RETRIES", "APP_DB_WAL", "APP_DB_SYNCHRONOUS",
)


@pytest.fixture()
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDatabaseConfig:
    def test_defaults(self, clean_env):
        cfg = DatabaseConfig()
        assert cfg.wal_mode is True
        assert cfg.synchronous == "NORMAL"
        assert cfg.busy_timeout_ms == 5000
        assert cfg.batch_size == 1000

    def test_pragma_overrides(self, clean_env):
        clean_env.setenv("APP_DB_WAL", "0")
        clean_env.setenv("APP_DB_SYNCHRONOUS", "full")
        cfg = DatabaseConfig()
        assert cfg.wal_mode is False
        assert cfg.synchronous == "FULL"


class TestAppConfig:
    def test_defaults(self, clean_env):
        cfg = AppConfig.from_env()
        assert cfg.db_path == Path("transactions.sqlite")
        assert cfg.api_port == 5000
        assert cfg.api_host == "127.0.0.1"
        assert cfg.log_format == "text"
        assert cfg.log_level == "INFO"
        assert cfg.cors_origins == ["*"]
        assert cfg.combined_workers == 4
        assert cfg.seed.url == DEFAULT_SEED_URL
        assert cfg.seed.timeout == 30
        assert cfg.seed.max_retries == 0

    def test_overrides(self, clean_env, tmp_path):
        clean_env.setenv("APP_DB_PATH", str(tmp_path / "x.sqlite"))
        clean_env.setenv("APP_PORT", "8080")
        clean_env.setenv("APP_LOG_FORMAT", "json")
        clean_env.setenv("APP_LOG_LEVEL", "debug")
        clean_env.setenv("APP_CORS_ORIGINS", "http://a.test, http://b.test,")
        clean_env.setenv("COMBINED_WORKERS", "2")
        cfg = AppConfig.from_env()
        assert cfg.db_path == tmp_path / "x.sqlite"
        assert cfg.api_port == 8080
        assert cfg.log_format == "json"
        assert cfg.log_level == "DEBUG"
        assert cfg.cors_origins == ["http://a.test", "http://b.test"]
        assert cfg.combined_workers == 2

    def test_seed_overrides(self, clean_env):
        clean_env.setenv("SEED_URL", "https://seed.test/tx.json")
        clean_env.setenv("SEED_TIMEOUT", "2.5")
        clean_env.setenv("SEED_MAX_RETRIES", "3")
        seed = SeedConfig()
        assert (seed.url, seed.timeout, seed.max_retries) == ("https://seed.test/tx.json", 2.5, 3)

    def test_invalid_port_raises(self, clean_env):
        clean_env.setenv("APP_PORT", "not-a-port")
        with pytest.raises(ValueError):
            AppConfig.from_env()
