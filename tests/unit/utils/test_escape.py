#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/utils/test_escape.py
"""Unit tests for the LaTeX text escaping pipeline."""

import pytest

from export2tex.utils.escape import (
    LATEX_TEXT_PIPELINE,
    choose_verb_delimiter,
    escape_latex_text,
    escape_reserved_characters,
    escape_template_value,
    escape_url,
    normalize_punctuation,
    replace_html_line_breaks,
    substitute_greek_letters,
    substitute_math_symbols,
)


@pytest.mark.unit
class TestReservedCharacters:
    """Tests for escaping the characters LaTeX reserves."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("50%", "50\\%"),
            ("a & b", "a \\& b"),
            ("snake_case", "snake\\_case"),
            ("$5", "\\$5"),
            ("#1", "\\#1"),
            ("{x}", "\\{x\\}"),
            ("~", "\\textasciitilde{}"),
            ("x^2", "x\\textasciicircum{}2"),
        ],
    )
    def test_single_characters(self, text: str, expected: str) -> None:
        """Each reserved character has its escape."""
        assert escape_reserved_characters(text) == expected

    def test_backslash_braces_survive(self) -> None:
        """Braces inserted for a backslash are not escaped again."""
        assert escape_reserved_characters("a\\b") == "a\\textbackslash{}b"

    def test_backslash_next_to_braces(self) -> None:
        """Literal braces are escaped while inserted ones are kept."""
        assert escape_reserved_characters("\\{") == "\\textbackslash{}\\{"

    def test_nul_characters_preserved(self) -> None:
        """Text containing NUL characters and digits is escaped without corruption."""
        assert escape_reserved_characters("\x002\x00~") == "\x002\x00\\textasciitilde{}"

    def test_empty(self) -> None:
        """Empty text stays empty."""
        assert escape_reserved_characters("") == ""


@pytest.mark.unit
class TestPipelineSteps:
    """Tests for the individual pipeline steps."""

    def test_punctuation(self) -> None:
        """Ideographic comma and full stop become full-width forms."""
        assert normalize_punctuation("はい、そうです。") == "はい，そうです．"

    def test_greek_letters(self) -> None:
        """Greek letters become control words."""
        assert substitute_greek_letters("α + β") == "\\alpha{} + \\beta{}"

    def test_math_symbols(self) -> None:
        """Mathematical symbols become control words."""
        assert substitute_math_symbols("x ≤ 3") == "x \\leq{} 3"

    def test_pipeline_order(self) -> None:
        """Reserved characters are escaped before symbols are substituted."""
        assert LATEX_TEXT_PIPELINE[1] is escape_reserved_characters
        assert escape_latex_text("α_1 ≤ 50%") == "\\alpha{}\\_1 \\leq{} 50\\%"

    def test_plain_text_unchanged(self) -> None:
        """Text without special characters passes through."""
        assert escape_latex_text("Hello, world.") == "Hello, world."

    def test_template_values_keep_symbols(self) -> None:
        """Template values only escape reserved characters."""
        assert escape_template_value("A_B α") == "A\\_B α"


@pytest.mark.unit
class TestOtherEscapes:
    """Tests for URL, verb and HTML helpers."""

    def test_url(self) -> None:
        """Percent and hash are escaped in URLs."""
        assert escape_url("https://example.com/a%20b#top") == "https://example.com/a\\%20b\\#top"

    def test_verb_delimiter(self) -> None:
        """The first delimiter absent from the code is chosen."""
        assert choose_verb_delimiter("plain") == "|"
        assert choose_verb_delimiter("a|b") == "!"

    def test_verb_delimiter_exhausted(self) -> None:
        """None is returned when every delimiter occurs."""
        assert choose_verb_delimiter("|!+@=/;:^~-.,'\"?*") is None

    @pytest.mark.parametrize("html", ["a<br>b", "a<br/>b", "a<br />b", "a<BR>b"])
    def test_html_line_breaks(self, html: str) -> None:
        """All br spellings are replaced."""
        assert replace_html_line_breaks(html, "\\\\") == "a\\\\b"
