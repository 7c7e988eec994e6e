"""SQLAlchemy ORM models for the local journal database.

Tables:
- books: Catalog books the user has journaled
- journal_entries: Reading journal entries, keyed by book id
"""

import json
from datetime import date, datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .schemas import BookRecord, ReadingStatus


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now() -> str:
    """Current UTC time as an ISO string."""
    return datetime.now(timezone.utc).isoformat()


class SavedBook(Base):
    """Saved book - a catalog record kept alongside journal entries."""

    __tablename__ = "books"

    # Provider-assigned id, stable across queries
    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    author: Mapped[Optional[str]] = mapped_column(String(500))
    publisher: Mapped[Optional[str]] = mapped_column(String(500), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    publish_date: Mapped[Optional[str]] = mapped_column(String(10))  # ISO date
    image_url: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[str] = mapped_column(String(26), default=utc_now)

    # Relationships
    entries: Mapped[list["JournalEntry"]] = relationship(
        "JournalEntry", back_populates="book", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<SavedBook(id={self.id}, title='{self.title}')>"

    @classmethod
    def from_record(cls, record: BookRecord) -> "SavedBook":
        """Build a row from a catalog record."""
        return cls(
            id=record.id,
            title=record.title,
            author=record.author,
            publisher=record.publisher,
            description=record.description,
            publish_date=record.publish_date.isoformat() if record.publish_date else None,
            image_url=record.image_url,
        )

    def to_record(self) -> BookRecord:
        """Convert back to an immutable catalog record."""
        return BookRecord(
            id=self.id,
            title=self.title,
            author=self.author,
            publisher=self.publisher,
            description=self.description,
            publish_date=self.publish_date,
            image_url=self.image_url,
        )


class JournalEntry(Base):
    """Journal entry - one reading record for a book."""

    __tablename__ = "journal_entries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    book_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    entry_date: Mapped[str] = mapped_column(
        String(10), default=lambda: date.today().isoformat(), index=True
    )
    content: Mapped[str] = mapped_column(Text, default="")
    rating: Mapped[int] = mapped_column(Integer, default=3)
    tags: Mapped[Optional[str]] = mapped_column(Text)  # JSON array
    quotes: Mapped[Optional[str]] = mapped_column(Text)  # JSON array
    reading_status: Mapped[str] = mapped_column(
        String(20), default=ReadingStatus.COMPLETED.value, index=True
    )

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(26), default=utc_now)
    updated_at: Mapped[str] = mapped_column(String(26), default=utc_now, onupdate=utc_now)

    # Relationships
    book: Mapped["SavedBook"] = relationship("SavedBook", back_populates="entries")

    def __repr__(self) -> str:
        return (
            f"<JournalEntry(id={self.id}, book_id={self.book_id}, "
            f"status={self.reading_status})>"
        )

    # Helper methods for JSON fields
    def get_tags(self) -> list[str]:
        """Get tags as list."""
        if self.tags:
            return json.loads(self.tags)
        return []

    def set_tags(self, tags: list[str]) -> None:
        """Set tags from list."""
        self.tags = json.dumps(tags, ensure_ascii=False) if tags else None

    def get_quotes(self) -> list[str]:
        """Get quotes as list."""
        if self.quotes:
            return json.loads(self.quotes)
        return []

    def set_quotes(self, quotes: list[str]) -> None:
        """Set quotes from list."""
        self.quotes = json.dumps(quotes, ensure_ascii=False) if quotes else None

    @property
    def status(self) -> ReadingStatus:
        """Reading status as enum."""
        return ReadingStatus(self.reading_status)

    @property
    def rating_stars(self) -> str:
        """Rating as filled/empty stars."""
        return "★" * self.rating + "☆" * (5 - self.rating)

    @property
    def short_content(self) -> str:
        """Get truncated content for display."""
        if len(self.content) <= 60:
            return self.content
        return self.content[:57] + "..."
