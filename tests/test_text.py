"""Unit tests for chunklab.utils.text and chunklab.utils.vectors."""
import pytest

from chunklab.utils.text import (
    tokenize, count_tokens, variance, round_half_up,
    split_sentences, count_sentence_boundaries,
    split_paragraphs, split_blank_line_paragraphs, find_break_point,
    has_code, has_lists, has_headers,
)
from chunklab.utils.vectors import cosine_similarity, similarity_matrix, weighted_mean


class TestTokenizer:
    def test_whitespace_tokens(self) -> None:
        assert tokenize("  a\tb\n\nc  ") == ["a", "b", "c"]
        assert count_tokens("one two  three") == 3

    def test_empty_input(self) -> None:
        assert tokenize("") == []
        assert count_tokens("   ") == 0

    def test_variance_is_population(self) -> None:
        assert variance([]) == 0.0
        assert variance([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(4.0)

    def test_round_half_up(self) -> None:
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(2.49) == 2


class TestSentenceSplitting:
    def test_abbreviations_initialisms_and_decimals_do_not_split(self) -> None:
        text = "Dr. Smith arrived at 3.5 p.m. today. He left the U.S. early. Did he?"
        assert split_sentences(text) == [
            "Dr. Smith arrived at 3.5 p.m. today.",
            "He left the U.S. early.",
            "Did he?",
        ]

    def test_no_terminal_punctuation_is_one_sentence(self) -> None:
        assert split_sentences("just a fragment without an ending ") == ["just a fragment without an ending"]

    def test_full_width_punctuation(self) -> None:
        assert split_sentences("First one！ Second one.") == ["First one！", "Second one."]

    def test_lowercase_continuation_does_not_split(self) -> None:
        assert split_sentences("It costs 5 dollars. and more.") == ["It costs 5 dollars. and more."]

    def test_empty_paragraph(self) -> None:
        assert split_sentences("") == []

    def test_boundary_count_includes_final_punctuation(self) -> None:
        assert count_sentence_boundaries("One. Two! Three?") == 3
        assert count_sentence_boundaries("Mr. Jones left.") == 1
        assert count_sentence_boundaries("One. Two! Three?  ") == 3

    def test_boundary_count_without_final_punctuation(self) -> None:
        assert count_sentence_boundaries("One. Two! Three") == 2
        assert count_sentence_boundaries("no punctuation at all") == 0


class TestParagraphSplitting:
    def test_blank_lines(self) -> None:
        assert split_paragraphs("a\n\nb\r\n\r\nc") == ["a", "b", "c"]

    def test_horizontal_rule(self) -> None:
        assert split_paragraphs("Intro text\n---\nMore text") == ["Intro text", "More text"]

    def test_markdown_header(self) -> None:
        assert split_paragraphs("Intro\n## Title\nBody") == ["Intro", "Title\nBody"]

    def test_no_paragraphs_returns_text(self) -> None:
        assert split_paragraphs("   ") == ["   "]

    def test_blank_line_split_drops_whitespace_segments(self) -> None:
        assert split_blank_line_paragraphs("a\n\n  \n\nb") == ["a", "b"]
        assert split_blank_line_paragraphs("") == []


class TestBreakPoint:
    def test_prefers_sentence_break(self) -> None:
        assert find_break_point("aaaa. bbbbbbbbbb", 10, 50) == 6

    def test_word_break_when_no_sentence(self) -> None:
        assert find_break_point("aaaa bbbbbbbbbb", 10, 50) == 5

    def test_no_break_returns_target(self) -> None:
        assert find_break_point("abcdefghijkl", 8, 50) == 8


class TestContentDetection:
    def test_code(self) -> None:
        assert has_code("Run `pip install` first")
        assert has_code("def main():\n    pass")
        assert not has_code("Plain prose about gardens")

    def test_lists_and_headers(self) -> None:
        assert has_lists("- one\n- two")
        assert has_lists("Steps: 1. open 2. close")
        assert has_headers("# Title\nbody")
        assert not has_headers("no header #here")


class TestVectors:
    def test_cosine(self) -> None:
        assert cosine_similarity([1, 0], [1, 0]) == pytest.approx(1.0)
        assert cosine_similarity([1, 0], [0, 1]) == pytest.approx(0.0)
        assert cosine_similarity([0, 0], [1, 1]) == 0.0

    def test_cosine_dimension_mismatch(self) -> None:
        with pytest.raises(ValueError):
            cosine_similarity([1, 0], [1, 0, 0])

    def test_similarity_matrix_zero_rows(self) -> None:
        sims = similarity_matrix([[1, 0], [0, 0], [2, 0]])
        assert sims[0, 2] == pytest.approx(1.0)
        assert sims[1].tolist() == [0.0, 0.0, 0.0]

    def test_weighted_mean(self) -> None:
        assert weighted_mean([[1, 0], [0, 1]], [3, 1]) == pytest.approx([0.75, 0.25])
