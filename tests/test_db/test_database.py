"""Tests for SQLite database operations."""

from bookjournal.db.models import JournalEntry, SavedBook
from bookjournal.db.schemas import BookRecord
from bookjournal.db.sqlite import Database, get_db, reset_db


class TestDatabaseCreation:
    """Tests for database initialization."""

    def test_database_creates_tables(self, db: Database):
        """Test that database creates all required tables."""
        with db.get_session() as session:
            session.query(SavedBook).first()
            session.query(JournalEntry).first()

    def test_file_database_path_created(self, tmp_path):
        """Test that the database directory and file are created."""
        path = tmp_path / "nested" / "journal.db"
        database = Database(str(path))
        database.create_tables()

        assert path.exists()

    def test_default_path_from_config(self, tmp_path, monkeypatch):
        """Test the configured path is used when none is given."""
        path = tmp_path / "configured.db"
        monkeypatch.setenv("BOOKJOURNAL_DB_PATH", str(path))

        database = get_db()

        assert database.db_path == path
        assert path.exists()
        assert get_db() is database
        reset_db()
        assert get_db() is not database


class TestSavedBooks:
    """Tests for saved book operations."""

    def test_save_and_get(self, db: Database, sample_book: BookRecord):
        """Test saving a book and reading it back."""
        db.save_book(sample_book)

        book = db.get_book(sample_book.id)

        assert book is not None
        assert book.title == "哲学の起源"
        assert book.publish_date == "2012-11-01"
        assert book.to_record() == sample_book

    def test_save_is_idempotent(self, db: Database, sample_book: BookRecord):
        """Test saving the same id twice stores one row."""
        db.save_book(sample_book)
        db.save_book(sample_book)

        assert db.count_books() == 1

    def test_get_missing(self, db: Database):
        """Test getting a book that does not exist."""
        assert db.get_book("missing") is None

    def test_list_books_by_title(self, db: Database):
        """Test books are listed in title order."""
        db.save_book(BookRecord(id="b", title="b-title"))
        db.save_book(BookRecord(id="a", title="a-title"))

        assert [b.id for b in db.list_books()] == ["a", "b"]


class TestJournalEntryModel:
    """Tests for JournalEntry model helpers."""

    def test_tags_round_trip_keeps_japanese(self):
        """Test tags are stored as readable JSON."""
        entry = JournalEntry(book_id="vol1", rating=3)
        entry.set_tags(["哲学", "倫理"])

        assert "哲学" in entry.tags
        assert entry.get_tags() == ["哲学", "倫理"]

    def test_empty_lists_stored_as_null(self):
        """Test empty lists are stored as NULL."""
        entry = JournalEntry(book_id="vol1", rating=3)
        entry.set_quotes([])

        assert entry.quotes is None
        assert entry.get_quotes() == []

    def test_rating_stars(self):
        """Test star rendering."""
        assert JournalEntry(book_id="vol1", rating=4).rating_stars == "★★★★☆"

    def test_short_content(self):
        """Test long content is truncated for display."""
        entry = JournalEntry(book_id="vol1", rating=3, content="あ" * 80)

        assert len(entry.short_content) == 60
        assert entry.short_content.endswith("...")
