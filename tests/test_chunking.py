"""Unit tests for message chunking."""

import pytest
import structlog

from tgformat.chunking import (
    MAX_TELEGRAM,
    SAFE_BUDGET,
    chunk_for_telegram,
    hard_slice,
    text_length,
)


class TestShortInput:
    """Inputs that already fit are returned unchanged."""

    def test_fits(self) -> None:
        """Short text is a single chunk."""
        assert chunk_for_telegram("hello") == ["hello"]

    def test_exactly_max_len(self) -> None:
        """The budget is inclusive."""
        assert chunk_for_telegram("abcde", 5) == ["abcde"]

    def test_empty_and_none(self) -> None:
        """Falsy input gives one empty chunk."""
        assert chunk_for_telegram("") == [""]
        assert chunk_for_telegram(None) == [""]

    def test_whitespace_only_over_budget(self) -> None:
        """Input that packs to nothing still gives one chunk."""
        assert chunk_for_telegram("\n\n\n\n", 2) == [""]


class TestParagraphs:
    """Test paragraph-level packing."""

    def test_two_paragraphs(self) -> None:
        """Paragraphs that do not fit together are split."""
        assert chunk_for_telegram("para1\n\npara2", 10) == ["para1", "para2"]

    def test_paragraphs_packed_greedily(self) -> None:
        """Paragraphs share a chunk while they fit."""
        assert chunk_for_telegram("one\n\ntwo\n\nthree", 10) == ["one\n\ntwo", "three"]

    def test_paragraph_separator_canonicalized(self) -> None:
        """Runs of blank lines are rejoined as one blank line."""
        assert chunk_for_telegram("one\n\n\n\ntwo\n\nthree", 10) == ["one\n\ntwo", "three"]


class TestSentencesAndWords:
    """Test the finer packing levels."""

    def test_sentences(self) -> None:
        """An oversized paragraph splits at sentence ends."""
        text = "First one. Second one! Third?"
        assert chunk_for_telegram(text, 12) == ["First one.", "Second one!", "Third?"]

    def test_ellipsis_ends_sentence(self) -> None:
        """An ellipsis character ends a sentence."""
        assert chunk_for_telegram("Wait… then go.", 8) == ["Wait…", "then go."]

    def test_words_fill_to_exact_budget(self) -> None:
        """Words are packed up to and including the budget."""
        text = "alpha beta gamma delta"
        assert chunk_for_telegram(text, 11) == ["alpha beta", "gamma delta"]

    def test_long_word_between_short_words(self) -> None:
        """Only the oversized word is hard-sliced."""
        text = "hi " + "x" * 25 + " yo"
        assert chunk_for_telegram(text, 10) == ["hi", "x" * 10, "x" * 10, "x" * 5, "yo"]

    def test_all_chunks_within_budget(self) -> None:
        """Mixed text never produces an over-budget chunk."""
        paragraph = "Lorem ipsum dolor sit amet. Consectetur adipiscing elit! " * 5
        text = "\n\n".join([paragraph] * 4)
        chunks = chunk_for_telegram(text, 50)
        assert len(chunks) > 1
        assert all(len(chunk) <= 50 for chunk in chunks)


class TestHardSlicing:
    """Test fixed-width fallbacks."""

    def test_hard_slice(self) -> None:
        """Pieces have the given width; the last may be shorter."""
        assert hard_slice("abcdefg", 3) == ["abc", "def", "g"]

    def test_single_long_word(self) -> None:
        """A 9000-character word becomes 4000, 4000 and 1000."""
        chunks = chunk_for_telegram("x" * 9000, 4000)
        assert [len(chunk) for chunk in chunks] == [4000, 4000, 1000]
        assert "".join(chunks) == "x" * 9000

    def test_default_budget(self) -> None:
        """The default budget is SAFE_BUDGET."""
        chunks = chunk_for_telegram("x" * 9000)
        assert [len(chunk) for chunk in chunks] == [SAFE_BUDGET, SAFE_BUDGET, 1000]

    def test_oversized_budget_capped(self) -> None:
        """Chunks never exceed the hard cap, even with a larger max_len."""
        chunks = chunk_for_telegram("y" * 10000, 9000)
        assert [len(chunk) for chunk in chunks] == [4000, 4000, 1000, 1000]
        assert all(len(chunk) <= MAX_TELEGRAM for chunk in chunks)

    def test_oversized_budget_with_paragraphs(self) -> None:
        """Text under a huge max_len is still cut to the hard cap."""
        text = "\n\n".join(["word " * 1000] * 3)
        chunks = chunk_for_telegram(text, 20000)
        assert all(len(chunk) <= MAX_TELEGRAM for chunk in chunks)

    def test_non_positive_budget_clamped(self) -> None:
        """Budgets below 1 behave as 1."""
        assert chunk_for_telegram("abc", 0) == ["a", "b", "c"]
        assert chunk_for_telegram("abc", -5) == ["a", "b", "c"]


class TestUtf16Length:
    """Lengths are counted the way Telegram counts them."""

    def test_text_length(self) -> None:
        """Astral characters count as two units."""
        assert text_length("abc") == 3
        assert text_length("\U0001F600") == 2
        assert text_length("é\U0001F600") == 3

    def test_lone_surrogate(self) -> None:
        """A lone surrogate counts as one unit instead of raising."""
        assert text_length("a\ud800") == 2

    def test_emoji_split_by_units(self) -> None:
        """4000 emoji are 8000 units and need two default chunks."""
        chunks = chunk_for_telegram("\U0001F600" * 4000)
        assert [len(chunk) for chunk in chunks] == [2000, 2000]
        assert all(text_length(chunk) <= SAFE_BUDGET for chunk in chunks)

    def test_emoji_fits_by_units(self) -> None:
        """Packing stops when the unit count, not the character count, overflows."""
        assert chunk_for_telegram("\U0001F600\U0001F600 ab", 5) == ["\U0001F600\U0001F600", "ab"]

    def test_hard_slice_keeps_surrogate_pairs(self) -> None:
        """Slicing never separates the halves of an astral character."""
        assert hard_slice("a\U0001F600b", 2) == ["a", "\U0001F600", "b"]
        assert hard_slice("\U0001F600", 1) == ["\U0001F600"]


class TestLogging:
    """The library stays quiet unless the application configures logging."""

    def test_no_stdout_without_configuration(self, capsys) -> None:
        """Debug events are not printed when structlog is unconfigured."""
        structlog.reset_defaults()
        chunk_for_telegram("word " * 2000, 100)
        chunk_for_telegram("x" * 50, 10)
        assert capsys.readouterr().out == ""


class TestArgumentTypes:
    """Wrong argument types are usage errors."""

    def test_non_int_max_len(self) -> None:
        """A string budget is rejected."""
        with pytest.raises(TypeError):
            chunk_for_telegram("abc", "10")

    def test_non_str_text(self) -> None:
        """Non-string text is rejected."""
        with pytest.raises(TypeError):
            chunk_for_telegram(12345, 2)
