"""Configuration management for bookjournal.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()

# Upper bound on related keywords; each one costs a catalog request.
MAX_RELATED_KEYWORDS = 5

DEFAULT_CATALOG_URL = "https://www.googleapis.com/books/v1"


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Catalog provider
    catalog_url: str = DEFAULT_CATALOG_URL
    catalog_api_key: Optional[str] = None
    timeout: float = 10.0  # seconds
    max_results: int = 20

    # Search pipeline
    max_related_keywords: int = MAX_RELATED_KEYWORDS
    fanout_workers: int = 5
    publishers: list[str] = field(default_factory=list)  # empty = built-in allow-list

    # Logging
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "BOOKJOURNAL_DB_PATH",
            str(Path.home() / ".bookjournal" / "journal.db"),
        )
        db_path = Path(db_path_str).expanduser()

        publishers_raw = os.environ.get("BOOKJOURNAL_PUBLISHERS", "")
        publishers = [p.strip() for p in publishers_raw.split(",") if p.strip()]

        max_related = int(
            os.environ.get("BOOKJOURNAL_MAX_RELATED", str(MAX_RELATED_KEYWORDS))
        )

        return cls(
            db_path=db_path,
            catalog_url=os.environ.get("BOOKJOURNAL_CATALOG_URL", DEFAULT_CATALOG_URL).rstrip("/"),
            catalog_api_key=os.environ.get("BOOKJOURNAL_CATALOG_API_KEY") or None,
            timeout=float(os.environ.get("BOOKJOURNAL_TIMEOUT", "10")),
            max_results=int(os.environ.get("BOOKJOURNAL_MAX_RESULTS", "20")),
            max_related_keywords=max(0, min(max_related, MAX_RELATED_KEYWORDS)),
            fanout_workers=int(os.environ.get("BOOKJOURNAL_FANOUT_WORKERS", "5")),
            publishers=publishers,
            log_level=os.environ.get("BOOKJOURNAL_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        # Check database directory is writable
        if str(self.db_path) != ":memory:" and not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        if self.timeout <= 0:
            errors.append("Timeout must be positive")
        if self.fanout_workers < 1:
            errors.append("Fan-out workers must be at least 1")
        if self.max_results < 1:
            errors.append("Max results must be at least 1")

        return errors

    def has_api_key(self) -> bool:
        """Check if a catalog API key is configured."""
        return bool(self.catalog_api_key)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
