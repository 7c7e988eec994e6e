"""SQLite database operations.

Handles database connection, session management, and saved-book storage.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import get_config
from .models import Base, SavedBook
from .schemas import BookRecord


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses the
                     configured BOOKJOURNAL_DB_PATH.
        """
        if db_path is None:
            db_path = str(get_config().db_path)

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # In-memory databases need one shared connection across sessions
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Saved Book Operations
    # ========================================================================

    def save_book(self, record: BookRecord, session: Optional[Session] = None) -> SavedBook:
        """Store a catalog record unless a book with the same id exists."""

        def _save(s: Session) -> SavedBook:
            existing = s.get(SavedBook, record.id)
            if existing:
                return existing
            book = SavedBook.from_record(record)
            s.add(book)
            s.flush()
            return book

        if session:
            return _save(session)
        else:
            with self.get_session() as s:
                book = _save(s)
                s.expunge(book)
                return book

    def get_book(self, book_id: str, session: Optional[Session] = None) -> Optional[SavedBook]:
        """Get a saved book by provider id."""

        def _get(s: Session) -> Optional[SavedBook]:
            return s.get(SavedBook, book_id)

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                book = _get(s)
                if book:
                    s.expunge(book)
                return book

    def list_books(self) -> list[SavedBook]:
        """List saved books ordered by title."""
        with self.get_session() as s:
            books = list(s.execute(select(SavedBook).order_by(SavedBook.title)).scalars().all())
            for book in books:
                s.expunge(book)
            return books

    def count_books(self) -> int:
        """Count saved books."""
        with self.get_session() as s:
            return s.execute(select(func.count(SavedBook.id))).scalar_one()


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
