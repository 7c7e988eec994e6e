"""Pytest configuration and shared fixtures.

This module provides fixtures for testing bookjournal, including an
in-memory database, sample catalog records and a fake catalog client.
"""

import threading
from typing import Optional, Union

import pytest

from bookjournal.api.catalog import CatalogError, RawBookRecord
from bookjournal.config import Config, reset_config
from bookjournal.db.schemas import BookRecord
from bookjournal.db.sqlite import Database, reset_db


# ============================================================================
# Fake Catalog
# ============================================================================


class FakeCatalogClient:
    """Catalog client stand-in that answers from a query -> response map.

    A response is either a list of RawBookRecord or an exception to raise.
    Unknown queries return no records. Calls are recorded in order.
    """

    def __init__(self, responses: Optional[dict[str, Union[list, Exception]]] = None):
        self.responses = responses or {}
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def search(self, query: str, limit: Optional[int] = None) -> list[RawBookRecord]:
        with self._lock:
            self.calls.append(query)
        response = self.responses.get(query, [])
        if isinstance(response, Exception):
            raise response
        return list(response)

    def get_book(self, book_id: str) -> Optional[RawBookRecord]:
        for response in self.responses.values():
            if isinstance(response, Exception):
                continue
            for record in response:
                if record.id == book_id:
                    return record
        return None


def raw(
    book_id: str,
    title: str,
    publisher: Optional[str] = "岩波書店",
    description: Optional[str] = None,
    author: Optional[str] = "著者 太郎",
) -> RawBookRecord:
    """Build a raw catalog record."""
    return RawBookRecord(
        id=book_id,
        title=title,
        author=author,
        authors=[author] if author else [],
        publisher_name=publisher,
        description=description,
        publish_date="2020-04-10",
    )


@pytest.fixture
def fake_client():
    """Create an empty fake catalog client."""
    return FakeCatalogClient()


@pytest.fixture
def config(tmp_path) -> Config:
    """Create a test configuration that never touches the network."""
    return Config(
        db_path=tmp_path / "journal.db",
        catalog_url="http://catalog.invalid/books/v1",
        timeout=1.0,
        max_results=20,
        max_related_keywords=5,
        fanout_workers=5,
    )


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_globals():
    """Reset global config and database between tests."""
    reset_config()
    reset_db()
    yield
    reset_config()
    reset_db()


@pytest.fixture
def db() -> Database:
    """Create an in-memory database for testing."""
    database = Database(":memory:")
    database.create_tables()
    return database


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_book() -> BookRecord:
    """Create a sample catalog book."""
    return BookRecord(
        id="vol-philosophy-1",
        title="哲学の起源",
        author="柄谷行人",
        publisher="岩波書店",
        description="イオニアの自然哲学から民主主義の起源を考える。",
        publish_date="2012-11",
        image_url="http://books.example/covers/1.jpg",
    )


@pytest.fixture
def other_book() -> BookRecord:
    """Create a second sample catalog book."""
    return BookRecord(
        id="vol-ethics-2",
        title="倫理学入門",
        author="品川哲彦",
        publisher="中央公論新社",
    )
