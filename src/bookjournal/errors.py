"""Exception hierarchy shared by the search pipeline and the journal store."""


class BookJournalError(Exception):
    """Base exception for bookjournal errors."""

    pass


class InvalidQueryError(BookJournalError, ValueError):
    """Raised when a search query is empty or whitespace only."""

    pass


class SearchError(BookJournalError):
    """Raised when the primary catalog query of a search fails."""

    def __init__(self, query: str, message: str):
        super().__init__(message)
        self.query = query


class SearchCancelledError(BookJournalError):
    """Raised when a search was cancelled or superseded by a newer one."""

    pass


class JournalError(BookJournalError):
    """Base exception for journal store errors."""

    pass


class BookNotFoundError(JournalError):
    """Raised when a book is not stored in the journal."""

    pass


class EntryNotFoundError(JournalError):
    """Raised when a journal entry does not exist."""

    pass


class AmbiguousEntryIdError(JournalError):
    """Raised when an entry id prefix matches more than one entry."""

    pass
