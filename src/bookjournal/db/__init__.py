"""Database module for local SQLite storage."""

from .models import JournalEntry, SavedBook
from .schemas import (
    BookRecord,
    JournalEntryCreate,
    JournalEntryUpdate,
    JournalStats,
    ReadingStatus,
)
from .sqlite import Database, get_db, reset_db

__all__ = [
    "SavedBook",
    "JournalEntry",
    "BookRecord",
    "JournalEntryCreate",
    "JournalEntryUpdate",
    "JournalStats",
    "ReadingStatus",
    "Database",
    "get_db",
    "reset_db",
]
