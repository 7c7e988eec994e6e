"""Academic publisher filtering.

Keeps only catalog records whose publisher name contains one of the
configured academic-publisher fragments.
"""

from typing import Iterable, Optional, Sequence

from ..api.catalog import RawBookRecord
from ..db.schemas import BookRecord

# Name fragments of Japanese scholarly publishers, matched as substrings.
ACADEMIC_PUBLISHERS: tuple[str, ...] = (
    "岩波書店",
    "東京大学出版会",
    "京都大学学術出版会",
    "名古屋大学出版会",
    "有斐閣",
    "みすず書房",
    "勁草書房",
    "筑摩書房",
    "講談社学術文庫",
    "中央公論新社",
    "法政大学出版局",
    "慶應義塾大学出版会",
    "ミネルヴァ書房",
    "東洋経済新報社",
)


class PublisherFilter:
    """Filter raw catalog records down to academic publishers."""

    def __init__(self, allow_list: Optional[Sequence[str]] = None):
        """Initialize filter.

        Args:
            allow_list: Publisher name fragments; defaults to ACADEMIC_PUBLISHERS
        """
        fragments = allow_list if allow_list else ACADEMIC_PUBLISHERS
        self.allow_list = tuple(f.strip() for f in fragments if f and f.strip())

    def is_academic(self, publisher: Optional[str]) -> bool:
        """Check whether a publisher name matches the allow-list."""
        if not publisher:
            return False
        return any(fragment in publisher for fragment in self.allow_list)

    def filter(self, records: Iterable[RawBookRecord]) -> list[BookRecord]:
        """Keep academic-publisher records, preserving order.

        Records without a publisher are dropped.
        """
        return [
            record.to_book_record()
            for record in records
            if self.is_academic(record.publisher_name)
        ]
