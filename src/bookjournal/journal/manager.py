"""Journal manager for reading entry operations."""

from datetime import date
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..db.models import JournalEntry, SavedBook
from ..db.schemas import (
    BookRecord,
    JournalEntryCreate,
    JournalEntryUpdate,
    JournalStats,
    ReadingStatus,
)
from ..db.sqlite import Database, get_db
from ..errors import AmbiguousEntryIdError, BookNotFoundError, EntryNotFoundError


class JournalManager:
    """Manages journal entries and the books they refer to."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize journal manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    # -------------------------------------------------------------------------
    # Entry CRUD
    # -------------------------------------------------------------------------

    def add_entry(self, data: JournalEntryCreate, book: Optional[BookRecord] = None) -> JournalEntry:
        """Create a journal entry, saving its book first if needed.

        Args:
            data: Entry creation data
            book: Catalog record for the entry's book; may be omitted when the
                  book is already saved

        Returns:
            Created entry

        Raises:
            BookNotFoundError: If the book is neither given nor saved
            ValueError: If the book record does not match ``data.book_id``
        """
        if book is not None and book.id != data.book_id:
            raise ValueError("Entry book_id does not match the book record")

        with self.db.get_session() as session:
            if book is not None:
                self.db.save_book(book, session=session)
            elif session.get(SavedBook, data.book_id) is None:
                raise BookNotFoundError(f"Book not found: {data.book_id}")

            entry = JournalEntry(
                book_id=data.book_id,
                entry_date=(data.entry_date or date.today()).isoformat(),
                content=data.content,
                rating=data.rating,
                reading_status=data.reading_status.value,
            )
            entry.set_tags(data.tags)
            entry.set_quotes(data.quotes)

            session.add(entry)
            session.flush()
            session.refresh(entry)
            session.expunge(entry)

            return entry

    def save_entry(
        self,
        entry_id: Optional[str],
        data: JournalEntryCreate,
        book: Optional[BookRecord] = None,
    ) -> JournalEntry:
        """Update the entry with ``entry_id`` if it exists, else add a new one."""
        if entry_id and self.get_entry(entry_id) is not None:
            if book is not None:
                self.db.save_book(book)
            return self.update_entry(
                entry_id,
                JournalEntryUpdate(
                    entry_date=data.entry_date,
                    content=data.content,
                    rating=data.rating,
                    tags=data.tags,
                    quotes=data.quotes,
                    reading_status=data.reading_status,
                ),
            )
        return self.add_entry(data, book)

    def _find_entry(self, session: Session, entry_id: str) -> Optional[JournalEntry]:
        """Find an entry by full ID or by a unique ID prefix.

        Raises:
            AmbiguousEntryIdError: If the prefix matches several entries
        """
        if not entry_id:
            return None
        entry = session.get(JournalEntry, entry_id)
        if entry:
            return entry

        stmt = (
            select(JournalEntry)
            .where(JournalEntry.id.startswith(entry_id, autoescape=True))
            .limit(2)
        )
        matches = list(session.execute(stmt).scalars().all())
        if len(matches) > 1:
            raise AmbiguousEntryIdError(f"Entry ID prefix matches several entries: {entry_id}")
        return matches[0] if matches else None

    def get_entry(self, entry_id: str) -> Optional[JournalEntry]:
        """Get an entry by ID or unique ID prefix.

        Args:
            entry_id: Entry ID, or the start of one

        Returns:
            Entry or None

        Raises:
            AmbiguousEntryIdError: If the prefix matches several entries
        """
        with self.db.get_session() as session:
            entry = self._find_entry(session, entry_id)
            if entry:
                session.expunge(entry)
            return entry

    def update_entry(self, entry_id: str, data: JournalEntryUpdate) -> JournalEntry:
        """Update an entry.

        Args:
            entry_id: Entry ID
            data: Fields to change; unset fields are kept

        Returns:
            Updated entry

        Raises:
            EntryNotFoundError: If the entry does not exist
        """
        with self.db.get_session() as session:
            entry = self._find_entry(session, entry_id)
            if not entry:
                raise EntryNotFoundError(f"Entry not found: {entry_id}")

            update_data = data.model_dump(exclude_unset=True)
            for key, value in update_data.items():
                if value is None:
                    continue
                if key == "tags":
                    entry.set_tags(value)
                elif key == "quotes":
                    entry.set_quotes(value)
                elif key == "reading_status":
                    entry.reading_status = ReadingStatus(value).value
                elif key == "entry_date":
                    entry.entry_date = value.isoformat()
                else:
                    setattr(entry, key, value)

            session.flush()
            session.refresh(entry)
            session.expunge(entry)
            return entry

    def remove_entry(self, entry_id: str) -> bool:
        """Delete an entry.

        Args:
            entry_id: Entry ID, or the start of one

        Returns:
            True if deleted, False if not found
        """
        with self.db.get_session() as session:
            entry = self._find_entry(session, entry_id)
            if not entry:
                return False
            session.delete(entry)
            return True

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def entries_for_book(self, book_id: str) -> list[JournalEntry]:
        """Get all entries for a book, newest first."""
        return self.list_entries(book_id=book_id)

    def list_entries(
        self,
        status: Optional[ReadingStatus] = None,
        book_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[JournalEntry]:
        """List entries, newest first.

        Args:
            status: Only entries with this reading status
            book_id: Only entries for this book
            limit: Maximum entries to return

        Returns:
            List of entries
        """
        with self.db.get_session() as session:
            stmt = select(JournalEntry)
            if status is not None:
                stmt = stmt.where(JournalEntry.reading_status == ReadingStatus(status).value)
            if book_id is not None:
                stmt = stmt.where(JournalEntry.book_id == book_id)
            stmt = stmt.order_by(JournalEntry.entry_date.desc(), JournalEntry.created_at.desc())
            if limit:
                stmt = stmt.limit(limit)

            entries = list(session.execute(stmt).scalars().all())
            for entry in entries:
                session.expunge(entry)
            return entries

    def get_book(self, book_id: str) -> Optional[BookRecord]:
        """Get a saved book as a catalog record."""
        book = self.db.get_book(book_id)
        return book.to_record() if book else None

    def list_books(self) -> list[BookRecord]:
        """List saved books ordered by title."""
        return [book.to_record() for book in self.db.list_books()]

    def save_book(self, record: BookRecord) -> BookRecord:
        """Save a book without an entry. Saving the same id twice is a no-op."""
        return self.db.save_book(record).to_record()

    def stats(self) -> JournalStats:
        """Count entries per reading status and average the ratings."""
        with self.db.get_session() as session:
            rows = session.execute(
                select(JournalEntry.reading_status, func.count(JournalEntry.id))
                .group_by(JournalEntry.reading_status)
            ).all()
            average = session.execute(select(func.avg(JournalEntry.rating))).scalar()

        by_status = {status.value: 0 for status in ReadingStatus}
        for status, count in rows:
            by_status[status] = count

        return JournalStats(
            total_entries=sum(by_status.values()),
            total_books=self.db.count_books(),
            by_status=by_status,
            average_rating=round(float(average), 2) if average is not None else None,
        )
