"""Search-and-enrich pipeline.

One search runs a primary catalog query, keeps academic-publisher books,
derives related keywords from their titles and descriptions, and fans out
one concurrent catalog query per keyword. Secondary hits are merged after
every branch has finished, skipping ids that are already present.

Every search gets a generation number and a cancellation token. Starting a
new search supersedes the previous one: its in-flight requests are allowed
to finish, but their results are discarded instead of being published.
"""

import logging
import threading
import unicodedata
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from pydantic import ValidationError

from ..api.catalog import CatalogClient, CatalogError
from ..config import Config, get_config
from ..db.schemas import BookRecord
from ..errors import InvalidQueryError, SearchCancelledError, SearchError
from .keywords import KeywordExtractor
from .publishers import PublisherFilter

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """Outcome of one search."""

    query: str
    books: list[BookRecord]
    related_keywords: list[str]
    primary_count: int = 0
    failed_keywords: list[str] = field(default_factory=list)

    @property
    def primary_books(self) -> list[BookRecord]:
        """Books found by the primary query."""
        return self.books[: self.primary_count]

    @property
    def related_books(self) -> list[BookRecord]:
        """Books added by related-keyword searches."""
        return self.books[self.primary_count:]

    @property
    def is_empty(self) -> bool:
        """Check if the search found nothing."""
        return not self.books


@dataclass(frozen=True)
class SearchStatus:
    """Snapshot of the orchestrator's state for UI binding."""

    is_searching: bool = False
    has_searched: bool = False
    generation: int = 0
    last_query: Optional[str] = None
    last_error: Optional[str] = None


class CancellationToken:
    """Cancellation flag for one search invocation."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        """Check if cancellation was requested."""
        return self._event.is_set()


def normalize_query(query: Optional[str]) -> str:
    """Trim a query and reject it when empty.

    Raises:
        InvalidQueryError: If nothing but whitespace is left
    """
    text = (query or "").strip()
    if not text:
        raise InvalidQueryError("Search query must not be empty")
    return text


def _fold(text: str) -> str:
    """Fold width and case for comparing keywords with the query."""
    return unicodedata.normalize("NFKC", text).casefold()


def merge_books(
    primary: Iterable[BookRecord], batches: Iterable[Iterable[BookRecord]]
) -> tuple[list[BookRecord], int]:
    """Concatenate primary books and secondary batches without duplicate ids.

    Batches are merged in the given order; a record is dropped when its id
    is already in the primary list or in an earlier batch.

    Returns:
        Merged books and the number of primary books at the front
    """
    seen: set[str] = set()
    merged: list[BookRecord] = []
    for book in primary:
        if book.id not in seen:
            seen.add(book.id)
            merged.append(book)
    primary_count = len(merged)
    for batch in batches:
        for book in batch:
            if book.id not in seen:
                seen.add(book.id)
                merged.append(book)
    return merged, primary_count


class SearchOrchestrator:
    """Runs the search-and-enrich pipeline against the catalog."""

    def __init__(
        self,
        client: Optional[CatalogClient] = None,
        publisher_filter: Optional[PublisherFilter] = None,
        extractor: Optional[KeywordExtractor] = None,
        max_related_keywords: Optional[int] = None,
        fanout_workers: Optional[int] = None,
        config: Optional[Config] = None,
    ):
        """Initialize orchestrator.

        Args:
            client: Catalog client; built from configuration if omitted
            publisher_filter: Academic publisher filter
            extractor: Keyword extractor
            max_related_keywords: Cap on related keywords (at most 5)
            fanout_workers: Threads used for related-keyword searches
            config: Configuration to read defaults from
        """
        config = config or get_config()
        self.client = client or CatalogClient(config=config)
        self.publisher_filter = publisher_filter or PublisherFilter(config.publishers)
        self.extractor = extractor or KeywordExtractor()
        if max_related_keywords is None:
            max_related_keywords = config.max_related_keywords
        self.max_related_keywords = max(0, min(max_related_keywords, 5))
        self.fanout_workers = max(1, fanout_workers or config.fanout_workers)

        self._lock = threading.Lock()
        self._status = SearchStatus()
        self._token: Optional[CancellationToken] = None
        self._last_result: Optional[SearchResult] = None
        self._subscribers: list[Callable[[SearchResult], None]] = []
        self._executor: Optional[ThreadPoolExecutor] = None

    # ========================================================================
    # Caller Surface
    # ========================================================================

    @property
    def status(self) -> SearchStatus:
        """Current status snapshot."""
        with self._lock:
            return self._status

    @property
    def is_searching(self) -> bool:
        """Check if a search is in progress."""
        return self.status.is_searching

    @property
    def last_result(self) -> Optional[SearchResult]:
        """Result of the most recent completed, non-stale search."""
        with self._lock:
            return self._last_result

    def on_complete(self, callback: Callable[[SearchResult], None]) -> None:
        """Register a callback for completed, non-stale searches."""
        self._subscribers.append(callback)

    def search(self, query: str, token: Optional[CancellationToken] = None) -> SearchResult:
        """Run a search and wait for it to finish.

        Raises:
            InvalidQueryError: If the query is blank (no request is made)
            SearchError: If the primary catalog query fails
            SearchCancelledError: If cancelled or superseded before completion
        """
        query = normalize_query(query)
        token = token or CancellationToken()
        generation = self._begin(query, token)
        return self._execute(query, token, generation)

    def submit(self, query: str) -> "Future[SearchResult]":
        """Start a search in the background.

        The query is validated before anything is scheduled, so a blank
        query raises ``InvalidQueryError`` here rather than in the future.
        """
        query = normalize_query(query)
        token = CancellationToken()
        generation = self._begin(query, token)
        return self._background().submit(self._execute, query, token, generation)

    def cancel(self) -> None:
        """Cancel the current search, if any."""
        with self._lock:
            if self._token is not None:
                self._token.cancel()

    def close(self) -> None:
        """Cancel any running search and stop background threads."""
        self.cancel()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> "SearchOrchestrator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ========================================================================
    # Pipeline Steps
    # ========================================================================

    def related_keywords(self, query: str, books: Iterable[BookRecord]) -> list[str]:
        """Derive related keywords from book titles and descriptions.

        Keywords are collected in first-occurrence order, the query itself
        is excluded, and at most ``max_related_keywords`` are kept.
        """
        folded_query = _fold(query)
        keywords: list[str] = []
        seen: set[str] = set()
        for book in books:
            for text in (book.title, book.description):
                for keyword in self.extractor.extract(text):
                    if keyword in seen or _fold(keyword) == folded_query:
                        continue
                    seen.add(keyword)
                    keywords.append(keyword)
        return keywords[: self.max_related_keywords]

    def _search_filtered(self, query: str) -> list[BookRecord]:
        """One catalog query reduced to academic-publisher books."""
        records = self.client.search(query)
        try:
            return self.publisher_filter.filter(records)
        except ValidationError as e:
            raise CatalogError(f"Malformed response: {e}") from e

    def _fan_out(self, keywords: list[str]) -> tuple[list[list[BookRecord]], list[str]]:
        """Search every keyword concurrently and wait for all of them.

        Returns:
            One batch per keyword (empty for failed calls) and the failed keywords
        """
        if not keywords:
            return [], []

        workers = min(self.fanout_workers, len(keywords))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fanout") as executor:
            futures = [executor.submit(self._search_filtered, kw) for kw in keywords]
            wait(futures)

        batches: list[list[BookRecord]] = []
        failed: list[str] = []
        for keyword, future in zip(keywords, futures):
            error = future.exception()
            if error is None:
                batches.append(future.result())
            elif isinstance(error, CatalogError):
                logger.warning("Related search for %r failed: %s", keyword, error)
                failed.append(keyword)
                batches.append([])
            else:
                raise error
        return batches, failed

    def _run(self, query: str, token: CancellationToken) -> SearchResult:
        """Primary search, keyword derivation, fan-out and merge."""
        logger.info("Searching catalog for %r", query)
        try:
            primary = self._search_filtered(query)
        except CatalogError as e:
            raise SearchError(query, f"Search for '{query}' failed: {e}") from e

        keywords = self.related_keywords(query, primary)
        if token.cancelled:
            raise SearchCancelledError(f"Search for '{query}' was cancelled")

        batches, failed = self._fan_out(keywords)
        books, primary_count = merge_books(primary, batches)
        logger.info(
            "Search for %r found %d book(s), %d from %d related keyword(s)",
            query,
            len(books),
            len(books) - primary_count,
            len(keywords),
        )
        return SearchResult(
            query=query,
            books=books,
            related_keywords=keywords,
            primary_count=primary_count,
            failed_keywords=failed,
        )

    # ========================================================================
    # State Management
    # ========================================================================

    def _background(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="search")
        return self._executor

    def _begin(self, query: str, token: CancellationToken) -> int:
        """Register a new search, superseding the running one."""
        with self._lock:
            if self._token is not None:
                self._token.cancel()
            self._token = token
            generation = self._status.generation + 1
            self._status = SearchStatus(
                is_searching=True,
                has_searched=True,
                generation=generation,
                last_query=query,
            )
            return generation

    def _execute(self, query: str, token: CancellationToken, generation: int) -> SearchResult:
        """Run the pipeline and publish the result if it is still current."""
        try:
            result = self._run(query, token)
        except SearchError as e:
            if self._is_stale(generation, token):
                self._finish(generation)
                raise SearchCancelledError(f"Search for '{query}' was superseded") from e
            self._finish(generation, error=str(e))
            raise
        except BaseException:
            self._finish(generation)
            raise

        with self._lock:
            stale = self._stale_locked(generation, token)
            if not stale:
                self._status = SearchStatus(
                    is_searching=False,
                    has_searched=True,
                    generation=generation,
                    last_query=query,
                )
                self._last_result = result
                self._token = None
        if stale:
            logger.debug("Discarding results of superseded search for %r", query)
            self._finish(generation)
            raise SearchCancelledError(f"Search for '{query}' was superseded")

        for callback in list(self._subscribers):
            callback(result)
        return result

    def _stale_locked(self, generation: int, token: CancellationToken) -> bool:
        return generation != self._status.generation or token.cancelled

    def _is_stale(self, generation: int, token: CancellationToken) -> bool:
        """Check if a newer search or a cancel has overtaken this one."""
        with self._lock:
            return self._stale_locked(generation, token)

    def _finish(self, generation: int, error: Optional[str] = None) -> None:
        """Clear the in-progress flag unless a newer search owns it."""
        with self._lock:
            if generation != self._status.generation:
                return
            self._status = SearchStatus(
                is_searching=False,
                has_searched=True,
                generation=generation,
                last_query=self._status.last_query,
                last_error=error,
            )
            self._token = None
