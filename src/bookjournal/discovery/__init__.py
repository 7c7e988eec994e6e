"""Book discovery: academic publisher filtering, keyword extraction and search."""

from .keywords import KeywordExtractor
from .orchestrator import (
    CancellationToken,
    SearchOrchestrator,
    SearchResult,
    SearchStatus,
    merge_books,
)
from .publishers import ACADEMIC_PUBLISHERS, PublisherFilter

__all__ = [
    "ACADEMIC_PUBLISHERS",
    "CancellationToken",
    "KeywordExtractor",
    "PublisherFilter",
    "SearchOrchestrator",
    "SearchResult",
    "SearchStatus",
    "merge_books",
]
