"""Keyword extraction for Japanese book titles and descriptions.

A dictionary-free heuristic: text is NFKC-normalized and split into runs of
a single script (kanji, katakana, latin letters/digits). Hiragana,
punctuation and whitespace separate runs, which is where particles and
inflections sit in ordinary Japanese prose. Long kanji compounds are cut
into two-character chunks since most compound nouns are built from them.
"""

import unicodedata
from enum import Enum
from typing import Iterable, Iterator, Optional

# Generic words that say nothing about a book's subject.
JAPANESE_STOP_WORDS = frozenset({
    "入門", "研究", "本書", "序論", "概論", "講義", "解説", "著者", "編者",
    "新版", "改訂", "増補", "上巻", "下巻", "全集", "文庫", "新書", "選書",
    "問題", "方法", "理論", "基礎", "現代", "考察", "議論", "分析", "展開",
    "一冊", "今日", "私達", "我々", "必要", "可能", "重要", "内容", "視点",
    "シリーズ", "テーマ", "ページ",
})

ENGLISH_STOP_WORDS = frozenset({
    "a", "an", "and", "the", "of", "for", "to", "in", "on", "by", "with",
    "from", "into", "at", "as", "is", "are", "this", "that", "vol",
})


class Script(Enum):
    """Character classes used for segmentation."""

    KANJI = "kanji"
    KATAKANA = "katakana"
    LATIN = "latin"
    OTHER = "other"


def char_script(ch: str) -> Script:
    """Classify a single (NFKC-normalized) character."""
    code = ord(ch)
    if 0x4E00 <= code <= 0x9FFF or 0x3400 <= code <= 0x4DBF or ch in "々〆":
        return Script.KANJI
    # U+30FB (middle dot) separates words
    if (0x30A1 <= code <= 0x30FA) or ch == "ー":
        return Script.KATAKANA
    if ch.isascii() and ch.isalnum():
        return Script.LATIN
    return Script.OTHER


def script_runs(text: str) -> Iterator[tuple[Script, str]]:
    """Yield maximal runs of same-script characters, skipping OTHER."""
    current: Optional[Script] = None
    buffer: list[str] = []
    for ch in text:
        script = char_script(ch)
        if script != current:
            if current is not None and current != Script.OTHER and buffer:
                yield current, "".join(buffer)
            current = script
            buffer = []
        buffer.append(ch)
    if current is not None and current != Script.OTHER and buffer:
        yield current, "".join(buffer)


class KeywordExtractor:
    """Extract candidate keywords from free text."""

    def __init__(
        self,
        min_token_length: int = 2,
        max_token_length: int = 4,
        stop_words: Optional[Iterable[str]] = None,
    ):
        """Initialize extractor.

        Args:
            min_token_length: Shorter tokens are dropped
            max_token_length: Longer kanji runs are cut into two-character chunks
            stop_words: Extra words to ignore on top of the built-in lists
        """
        self.min_token_length = min_token_length
        self.max_token_length = max_token_length
        self.stop_words = JAPANESE_STOP_WORDS | ENGLISH_STOP_WORDS | frozenset(stop_words or ())

    def tokenize(self, text: str) -> list[str]:
        """Split text into raw tokens in order of appearance."""
        normalized = unicodedata.normalize("NFKC", text or "")
        tokens = []
        for script, run in script_runs(normalized):
            if script == Script.LATIN:
                tokens.append(run.lower())
            elif script == Script.KANJI and len(run) > self.max_token_length:
                tokens.extend(run[i:i + 2] for i in range(0, len(run), 2))
            else:
                tokens.append(run)
        return tokens

    def is_keyword(self, token: str) -> bool:
        """Check whether a token is worth keeping."""
        if len(token) < self.min_token_length:
            return False
        if token.isdigit():
            return False
        # Katakana prolonged-sound marks alone
        if not token.strip("ー"):
            return False
        return token not in self.stop_words

    def extract(self, text: Optional[str]) -> list[str]:
        """Extract keywords from text.

        Returns a deduplicated list in first-occurrence order, so the result
        is deterministic for identical input. Short or degenerate text yields
        an empty list.
        """
        keywords: list[str] = []
        seen: set[str] = set()
        for token in self.tokenize(text or ""):
            if token in seen or not self.is_keyword(token):
                continue
            seen.add(token)
            keywords.append(token)
        return keywords
