"""Pydantic schemas for data validation.

``BookRecord`` is the normalized catalog book shared by the search pipeline
and the journal store. The journal entry schemas follow the usual
create/update split.
"""

import re
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN_TITLE = "タイトル不明"


def parse_publish_date(value: Optional[str]) -> Optional[date]:
    """Parse a provider date string (``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD``).

    Missing components default to the first month/day. Unparseable values
    return ``None``.
    """
    if not value:
        return None
    match = re.match(r"^(\d{4})(?:-(\d{1,2}))?(?:-(\d{1,2}))?", value.strip())
    if not match:
        return None
    year = int(match.group(1))
    month = int(match.group(2) or 1)
    day = int(match.group(3) or 1)
    try:
        return date(year, month, day)
    except ValueError:
        return None


class ReadingStatus(str, Enum):
    """Reading status of a journal entry."""

    WANT_TO_READ = "want_to_read"
    READING = "reading"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def label(self) -> str:
        """Japanese display label."""
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    ReadingStatus.WANT_TO_READ: "読みたい",
    ReadingStatus.READING: "読書中",
    ReadingStatus.COMPLETED: "読了",
    ReadingStatus.ABANDONED: "中断",
}


# ============================================================================
# Books
# ============================================================================


class BookRecord(BaseModel):
    """A catalog book, immutable once built from a provider response."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str = Field(..., min_length=1, description="Provider-assigned identifier")
    title: str = UNKNOWN_TITLE
    author: Optional[str] = None
    publisher: Optional[str] = None
    description: Optional[str] = None
    publish_date: Optional[date] = None
    image_url: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def default_title(cls, v: Optional[str]) -> str:
        """Fall back to a placeholder when the provider has no title."""
        if v is None or not str(v).strip():
            return UNKNOWN_TITLE
        return str(v).strip()

    @field_validator("publish_date", mode="before")
    @classmethod
    def coerce_publish_date(cls, v):
        """Accept partial ISO date strings from the provider."""
        if isinstance(v, str):
            return parse_publish_date(v)
        return v


# ============================================================================
# Journal Entries
# ============================================================================


class JournalEntryBase(BaseModel):
    """Base journal entry fields."""

    content: str = ""
    rating: int = Field(3, ge=1, le=5, description="Rating 1-5")
    tags: list[str] = Field(default_factory=list)
    quotes: list[str] = Field(default_factory=list)
    reading_status: ReadingStatus = ReadingStatus.COMPLETED

    @field_validator("tags", "quotes", mode="before")
    @classmethod
    def drop_blank_items(cls, v):
        """Strip items and drop empty ones."""
        if v is None:
            return []
        return [str(item).strip() for item in v if str(item).strip()]


class JournalEntryCreate(JournalEntryBase):
    """Schema for creating a journal entry."""

    book_id: str = Field(..., min_length=1)
    entry_date: Optional[date] = None


class JournalEntryUpdate(BaseModel):
    """Schema for updating a journal entry. Unset fields are left alone."""

    entry_date: Optional[date] = None
    content: Optional[str] = None
    rating: Optional[int] = Field(None, ge=1, le=5)
    tags: Optional[list[str]] = None
    quotes: Optional[list[str]] = None
    reading_status: Optional[ReadingStatus] = None


class JournalStats(BaseModel):
    """Summary of the journal."""

    total_entries: int = 0
    total_books: int = 0
    by_status: dict[str, int] = Field(default_factory=dict)
    average_rating: Optional[float] = None
