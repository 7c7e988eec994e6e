"""Tests for configuration loading."""

from pathlib import Path

import pytest

from bookjournal.config import (
    DEFAULT_CATALOG_URL,
    MAX_RELATED_KEYWORDS,
    Config,
    get_config,
    reset_config,
)

ENV_VARS = [
    "BOOKJOURNAL_DB_PATH",
    "BOOKJOURNAL_CATALOG_URL",
    "BOOKJOURNAL_CATALOG_API_KEY",
    "BOOKJOURNAL_TIMEOUT",
    "BOOKJOURNAL_MAX_RESULTS",
    "BOOKJOURNAL_MAX_RELATED",
    "BOOKJOURNAL_FANOUT_WORKERS",
    "BOOKJOURNAL_PUBLISHERS",
    "BOOKJOURNAL_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove bookjournal variables from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestFromEnv:
    """Tests for Config.from_env."""

    def test_defaults(self, clean_env):
        """Test defaults when nothing is set."""
        config = Config.from_env()

        assert config.db_path == Path.home() / ".bookjournal" / "journal.db"
        assert config.catalog_url == DEFAULT_CATALOG_URL
        assert config.catalog_api_key is None
        assert config.timeout == 10.0
        assert config.max_results == 20
        assert config.max_related_keywords == MAX_RELATED_KEYWORDS
        assert config.fanout_workers == 5
        assert config.publishers == []
        assert config.log_level == "WARNING"
        assert config.has_api_key() is False

    def test_overrides(self, clean_env, tmp_path):
        """Test values are read from the environment."""
        clean_env.setenv("BOOKJOURNAL_DB_PATH", str(tmp_path / "j.db"))
        clean_env.setenv("BOOKJOURNAL_CATALOG_URL", "http://catalog.invalid/v1/")
        clean_env.setenv("BOOKJOURNAL_CATALOG_API_KEY", "secret")
        clean_env.setenv("BOOKJOURNAL_TIMEOUT", "2.5")
        clean_env.setenv("BOOKJOURNAL_FANOUT_WORKERS", "3")
        clean_env.setenv("BOOKJOURNAL_LOG_LEVEL", "debug")

        config = Config.from_env()

        assert config.db_path == tmp_path / "j.db"
        assert config.catalog_url == "http://catalog.invalid/v1"
        assert config.has_api_key() is True
        assert config.timeout == 2.5
        assert config.fanout_workers == 3
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize("raw,expected", [("2", 2), ("0", 0), ("12", 5), ("-3", 0)])
    def test_max_related_clamped(self, clean_env, raw, expected):
        """Test the related keyword cap stays within 0..5."""
        clean_env.setenv("BOOKJOURNAL_MAX_RELATED", raw)

        assert Config.from_env().max_related_keywords == expected

    def test_publishers_parsed(self, clean_env):
        """Test the publisher list is comma separated."""
        clean_env.setenv("BOOKJOURNAL_PUBLISHERS", "岩波書店, 有斐閣,, ")

        assert Config.from_env().publishers == ["岩波書店", "有斐閣"]


class TestValidate:
    """Tests for Config.validate."""

    def test_valid(self, tmp_path):
        """Test a sound configuration has no errors."""
        config = Config(db_path=tmp_path / "sub" / "j.db")

        assert config.validate() == []
        assert (tmp_path / "sub").exists()

    def test_memory_database(self):
        """Test the in-memory path needs no directory."""
        assert Config(db_path=Path(":memory:")).validate() == []

    def test_invalid_values(self, tmp_path):
        """Test bad numbers are reported."""
        config = Config(db_path=tmp_path / "j.db", timeout=0, fanout_workers=0, max_results=0)

        errors = config.validate()

        assert len(errors) == 3


class TestGlobalConfig:
    """Tests for the global config instance."""

    def test_cached_until_reset(self, clean_env):
        """Test get_config returns the same instance until reset."""
        first = get_config()

        assert get_config() is first
        reset_config()
        assert get_config() is not first
