"""
Unit tests for OCR text cleanup and ISBN extraction.
"""

import pytest

from bookish.capture.ocr_text import (
    TextQuery,
    clean_author_line,
    clean_ocr_line,
    find_isbn,
)


class TestCleanOcrLine:
    """Tests for clean_ocr_line()."""

    def test_collapses_whitespace(self):
        assert clean_ocr_line("  The   Hunger\tGames ") == "The Hunger Games"

    def test_ligatures(self):
        assert clean_ocr_line("The Ofﬁce") == "The Office"

    def test_smart_quotes(self):
        assert clean_ocr_line("Ender’s Game") == "Ender's Game"

    def test_noise_symbols(self):
        assert clean_ocr_line("|| Dune ~~") == "Dune"

    def test_empty(self):
        assert clean_ocr_line("") == ""


class TestCleanAuthorLine:
    """Tests for clean_author_line()."""

    def test_reorders_last_first(self):
        assert clean_author_line("TOLKIEN, J.R.R.") == "J.R.R. Tolkien"

    def test_title_cases_all_caps(self):
        assert clean_author_line("SUZANNE COLLINS") == "Suzanne Collins"

    def test_mixed_case_kept(self):
        assert clean_author_line("Ursula K. Le Guin") == "Ursula K. Le Guin"

    def test_suffix(self):
        assert clean_author_line("Walter M. Miller Jr") == "Walter M. Miller Jr."


class TestFindIsbn:
    """Tests for find_isbn()."""

    def test_hyphenated_isbn13(self):
        assert find_isbn("ISBN 978-0-06-231500-7  $16.99") == "9780062315007"

    def test_trailing_number_is_ignored(self):
        assert find_isbn("ISBN 0439023483 1234") == "0439023483"

    def test_isbn10_with_x(self):
        assert find_isbn("isbn 0-8044-2957-x") == "080442957X"

    @pytest.mark.parametrize("text", ["", "No numbers here", "Call 555 123 4567", "9780439023482"])
    def test_nothing_plausible(self, text):
        assert find_isbn(text) is None


class TestTextQuery:
    """Tests for TextQuery."""

    def test_from_lines(self):
        query = TextQuery.from_lines(["THE  HOBBIT", "or There and Back Again"], ["TOLKIEN, J.R.R."])

        assert query.title == "THE HOBBIT or There and Back Again"
        assert query.author == "J.R.R. Tolkien"
        assert not query.is_empty

    def test_empty(self):
        query = TextQuery.from_lines(["  "], [])

        assert query == TextQuery(None, None)
        assert query.is_empty
