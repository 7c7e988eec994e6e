"""Tests for keyword extraction."""

from bookjournal.discovery.keywords import (
    KeywordExtractor,
    Script,
    char_script,
    script_runs,
)


class TestCharScript:
    """Tests for character classification."""

    def test_kanji(self):
        """Test kanji and the iteration mark."""
        assert char_script("哲") == Script.KANJI
        assert char_script("々") == Script.KANJI

    def test_katakana(self):
        """Test katakana and the prolonged sound mark."""
        assert char_script("カ") == Script.KATAKANA
        assert char_script("ー") == Script.KATAKANA

    def test_latin(self):
        """Test ASCII letters and digits."""
        assert char_script("a") == Script.LATIN
        assert char_script("7") == Script.LATIN

    def test_other(self):
        """Test hiragana, punctuation and the middle dot."""
        assert char_script("の") == Script.OTHER
        assert char_script("、") == Script.OTHER
        assert char_script("・") == Script.OTHER
        assert char_script(" ") == Script.OTHER


class TestScriptRuns:
    """Tests for run segmentation."""

    def test_mixed_text(self):
        """Test runs split at script boundaries."""
        runs = list(script_runs("AIと倫理のカント"))

        assert runs == [
            (Script.LATIN, "AI"),
            (Script.KANJI, "倫理"),
            (Script.KATAKANA, "カント"),
        ]

    def test_empty(self):
        """Test empty text has no runs."""
        assert list(script_runs("")) == []


class TestExtract:
    """Tests for KeywordExtractor.extract."""

    def test_hiragana_separates_words(self):
        """Test particles split kanji compounds."""
        assert KeywordExtractor().extract("哲学の起源") == ["哲学", "起源"]

    def test_long_kanji_run_is_chunked(self):
        """Test long compounds are cut into two-character chunks."""
        assert KeywordExtractor().extract("政治思想史") == ["政治", "思想"]

    def test_stop_words_dropped(self):
        """Test generic words are removed after chunking."""
        assert KeywordExtractor().extract("現代哲学入門") == ["哲学"]

    def test_four_kanji_kept_whole(self):
        """Test compounds up to the maximum length stay intact."""
        assert KeywordExtractor().extract("自然哲学と民主主義") == ["自然哲学", "民主主義"]

    def test_katakana_words(self):
        """Test katakana loanwords and the middle dot."""
        extractor = KeywordExtractor()

        assert extractor.extract("プラグマティズムの哲学") == ["プラグマティズム", "哲学"]
        assert extractor.extract("カント・ヘーゲル") == ["カント", "ヘーゲル"]

    def test_latin_words_lowercased(self):
        """Test latin words are lowercased and English stop words dropped."""
        assert KeywordExtractor().extract("Philosophy of Mind 入門") == ["philosophy", "mind"]

    def test_full_width_normalized(self):
        """Test full-width latin is normalized."""
        assert KeywordExtractor().extract("ＡＩと倫理") == ["ai", "倫理"]

    def test_digits_and_single_characters_dropped(self):
        """Test numbers and one-character fragments are ignored."""
        extractor = KeywordExtractor()

        assert extractor.extract("2020年の哲学") == ["哲学"]
        assert extractor.extract("心と体") == []

    def test_deduplicated_in_first_occurrence_order(self):
        """Test repeated words appear once."""
        assert KeywordExtractor().extract("倫理と哲学と倫理") == ["倫理", "哲学"]

    def test_empty_and_none(self):
        """Test degenerate input yields nothing."""
        extractor = KeywordExtractor()

        assert extractor.extract("") == []
        assert extractor.extract(None) == []
        assert extractor.extract("、。！") == []

    def test_custom_stop_words(self):
        """Test extra stop words are honoured."""
        assert KeywordExtractor(stop_words=["起源"]).extract("哲学の起源") == ["哲学"]

    def test_deterministic(self):
        """Test identical input gives identical output."""
        extractor = KeywordExtractor()
        text = "功利主義とカント倫理学、そして徳倫理学の比較"

        assert extractor.extract(text) == extractor.extract(text)
