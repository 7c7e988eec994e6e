"""API module for the external book catalog."""

from .catalog import (
    CatalogClient,
    CatalogError,
    CatalogNotFoundError,
    CatalogRateLimitError,
    RawBookRecord,
)

__all__ = [
    "CatalogClient",
    "CatalogError",
    "CatalogNotFoundError",
    "CatalogRateLimitError",
    "RawBookRecord",
]
