"""Catalog client for Japanese book search.

Talks to the Google Books volumes API restricted to Japanese-language
results. Each call issues exactly one HTTP request and either returns
normalized ``RawBookRecord`` values or raises ``CatalogError``; retries are
left to the caller.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import requests

from ..config import Config, get_config
from ..db.schemas import BookRecord
from ..errors import BookJournalError, InvalidQueryError

logger = logging.getLogger(__name__)


class CatalogError(BookJournalError):
    """Base exception for catalog provider errors."""

    pass


class CatalogRateLimitError(CatalogError):
    """Raised when rate limited by the catalog provider."""

    pass


class CatalogNotFoundError(CatalogError):
    """Raised when the provider has no record for a requested id."""

    pass


@dataclass
class RawBookRecord:
    """A book as returned by the catalog provider. Only ``id`` is required."""

    id: str
    title: Optional[str] = None
    author: Optional[str] = None
    authors: list[str] = field(default_factory=list)
    publisher_name: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    publish_date: Optional[str] = None

    def to_book_record(self) -> BookRecord:
        """Convert to the immutable BookRecord schema."""
        return BookRecord(
            id=self.id,
            title=self.title,
            author=", ".join(self.authors) if self.authors else self.author,
            publisher=self.publisher_name,
            description=self.description,
            publish_date=self.publish_date,
            image_url=self.image_url,
        )


class CatalogClient:
    """Client for the book catalog provider."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        max_results: Optional[int] = None,
        config: Optional[Config] = None,
    ):
        """Initialize client.

        Args:
            base_url: Provider base URL; defaults to configuration
            api_key: Optional provider API key
            timeout: Request timeout in seconds
            max_results: Results requested per search
            config: Configuration to read defaults from
        """
        config = config or get_config()
        self.base_url = (base_url or config.catalog_url).rstrip("/")
        self.api_key = api_key if api_key is not None else config.catalog_api_key
        self.timeout = timeout if timeout is not None else config.timeout
        self.max_results = max_results if max_results is not None else config.max_results
        self._session = requests.Session()
        self._session.headers.update({
            "User-Agent": "bookjournal/0.1 (academic reading journal)",
            "Accept": "application/json",
        })

    def _get(self, url: str, params: Optional[dict] = None) -> dict:
        """Make GET request with error handling."""
        params = dict(params or {})
        if self.api_key:
            params["key"] = self.api_key
        logger.debug("GET %s params=%s", url, {k: v for k, v in params.items() if k != "key"})
        try:
            response = self._session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.Timeout:
            raise CatalogError("Request timed out")
        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code == 429:
                raise CatalogRateLimitError("Rate limited by catalog provider")
            if e.response is not None and e.response.status_code == 404:
                raise CatalogNotFoundError("Not found")
            status = e.response.status_code if e.response is not None else "unknown"
            raise CatalogError(f"HTTP error: {status}")
        except ValueError as e:
            # requests raises a ValueError subclass for undecodable JSON
            raise CatalogError(f"Malformed response: {e}")
        except requests.exceptions.RequestException as e:
            raise CatalogError(f"Request failed: {e}")

    # ========================================================================
    # Search Operations
    # ========================================================================

    def search(self, query: str, limit: Optional[int] = None) -> list[RawBookRecord]:
        """Search the catalog.

        Args:
            query: Non-empty search text
            limit: Maximum results (provider caps this at 40)

        Returns:
            Records in provider order, possibly empty

        Raises:
            InvalidQueryError: If the query is blank
            CatalogError: On network, HTTP or parsing failure
        """
        query = (query or "").strip()
        if not query:
            raise InvalidQueryError("Search query must not be empty")

        params = {
            "q": query,
            "langRestrict": "ja",
            "printType": "books",
            "maxResults": max(1, min(limit or self.max_results, 40)),
        }
        data = self._get(f"{self.base_url}/volumes", params)
        if not isinstance(data, dict):
            raise CatalogError("Malformed response: expected a JSON object")

        results = []
        for item in data.get("items") or []:
            result = self._item_to_result(item)
            if result:
                results.append(result)

        logger.debug("Catalog returned %d record(s) for %r", len(results), query)
        return results

    def get_book(self, book_id: str) -> Optional[RawBookRecord]:
        """Look up a single book by provider id.

        Args:
            book_id: Provider volume id

        Returns:
            RawBookRecord if found, None if the provider has no such book
        """
        book_id = book_id.strip()
        if not book_id:
            return None

        try:
            data = self._get(f"{self.base_url}/volumes/{book_id}")
        except CatalogNotFoundError:
            return None

        return self._item_to_result(data)

    def _item_to_result(self, item: dict) -> Optional[RawBookRecord]:
        """Convert a provider volume to RawBookRecord."""
        if not isinstance(item, dict):
            return None
        volume_id = item.get("id")
        if not volume_id:
            return None

        info = item.get("volumeInfo") or {}
        authors = [a for a in info.get("authors") or [] if isinstance(a, str)]

        # Prefer the larger thumbnail
        image_links = info.get("imageLinks") or {}
        image_url = image_links.get("thumbnail") or image_links.get("smallThumbnail")

        return RawBookRecord(
            id=str(volume_id),
            title=info.get("title"),
            author=authors[0] if authors else None,
            authors=authors,
            publisher_name=info.get("publisher"),
            description=info.get("description"),
            image_url=image_url,
            publish_date=info.get("publishedDate"),
        )
