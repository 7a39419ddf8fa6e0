#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/utils/escape.py
r"""LaTeX text escaping.

Text nodes go through :data:`LATEX_TEXT_PIPELINE`, an ordered tuple of pure
string steps:

1. :func:`normalize_punctuation` turns the ideographic comma and full stop
   into their full-width equivalents.
2. :func:`escape_reserved_characters` escapes ``\ % ~ & _ ^ $ # { }``.
   All of them are replaced in a single pass.
3. :func:`substitute_greek_letters` replaces Greek letters with control
   words such as ``\alpha{}``.
4. :func:`substitute_math_symbols` replaces mathematical symbols with
   control words such as ``\leq{}``.

Steps 3 and 4 insert backslashes and braces, so they must run after step 2.
The pipeline is not idempotent: feeding its output back through step 2
mangles the inserted control words. Run it exactly once per text fragment.

"""

from __future__ import annotations

import re
from typing import Callable

from export2tex.constants import FULLWIDTH_PUNCTUATION, GREEK_LETTERS, MATH_SYMBOLS, RESERVED_CHARACTERS

_GREEK_PATTERN = re.compile("|".join(re.escape(letter) for letter in GREEK_LETTERS))
_MATH_SYMBOL_PATTERN = re.compile(
    "|".join(re.escape(symbol) for symbol in sorted(MATH_SYMBOLS, key=len, reverse=True))
)
_RESERVED_REPLACEMENTS = dict(RESERVED_CHARACTERS)
_RESERVED_PATTERN = re.compile("[" + re.escape("".join(_RESERVED_REPLACEMENTS)) + "]")
_BR_TAG_PATTERN = re.compile(r"<br\s*/?>", re.IGNORECASE)

# Tried in order when picking a \verb delimiter
VERB_DELIMITERS = "|!+@=/;:^~-.,'\"?*"


def normalize_punctuation(text: str) -> str:
    """Replace the ideographic comma and full stop with full-width forms.

    Examples
    --------
        >>> normalize_punctuation("はい、そうです。")
        'はい，そうです．'

    """
    for source, target in FULLWIDTH_PUNCTUATION:
        text = text.replace(source, target)
    return text


def escape_reserved_characters(text: str) -> str:
    r"""Escape the ten characters reserved by LaTeX.

    All characters are replaced in one pass, so the backslashes and braces
    of inserted control words such as ``\textbackslash{}`` are never
    escaped again.

    Examples
    --------
        >>> escape_reserved_characters("50% & 3_2")
        '50\\% \\& 3\\_2'
        >>> escape_reserved_characters("a\\b{}")
        'a\\textbackslash{}b\\{\\}'

    """
    if not text:
        return text
    return _RESERVED_PATTERN.sub(lambda match: _RESERVED_REPLACEMENTS[match.group(0)], text)


def substitute_greek_letters(text: str) -> str:
    r"""Replace Greek letters with their control words.

    Examples
    --------
        >>> substitute_greek_letters("α + β")
        '\\alpha{} + \\beta{}'

    """
    return _GREEK_PATTERN.sub(lambda match: GREEK_LETTERS[match.group(0)] + "{}", text)


def substitute_math_symbols(text: str) -> str:
    r"""Replace mathematical and logical symbols with their control words.

    Examples
    --------
        >>> substitute_math_symbols("x ≤ 3")
        'x \\leq{} 3'

    """
    return _MATH_SYMBOL_PATTERN.sub(lambda match: MATH_SYMBOLS[match.group(0)] + "{}", text)


LATEX_TEXT_PIPELINE: tuple[Callable[[str], str], ...] = (
    normalize_punctuation,
    escape_reserved_characters,
    substitute_greek_letters,
    substitute_math_symbols,
)


def escape_latex_text(text: str) -> str:
    r"""Run a raw text fragment through the full escaping pipeline.

    Parameters
    ----------
    text : str
        Raw text, exactly as it appeared in the source

    Returns
    -------
    str
        LaTeX-safe text

    Examples
    --------
        >>> escape_latex_text("Value: 50%")
        'Value: 50\\%'
        >>> escape_latex_text("α")
        '\\alpha{}'

    """
    for step in LATEX_TEXT_PIPELINE:
        text = step(text)
    return text


def escape_template_value(value: str) -> str:
    """Escape a metadata value substituted into a template placeholder.

    Only reserved characters are escaped; punctuation and symbols are kept
    as written so titles and names appear unchanged.
    """
    return escape_reserved_characters(value)


def escape_url(url: str) -> str:
    r"""Escape the characters of a URL that break ``\href``.

    Examples
    --------
        >>> escape_url("https://example.com/a%20b#top")
        'https://example.com/a\\%20b\\#top'

    """
    return url.replace("%", r"\%").replace("#", r"\#")


def choose_verb_delimiter(code: str) -> str | None:
    r"""Pick a ``\verb`` delimiter that does not occur in ``code``.

    Returns
    -------
    str or None
        A delimiter character, or None if every candidate occurs in the code

    Examples
    --------
        >>> choose_verb_delimiter("a|b")
        '!'

    """
    for delimiter in VERB_DELIMITERS:
        if delimiter not in code:
            return delimiter
    return None


def replace_html_line_breaks(html: str, replacement: str) -> str:
    """Replace ``<br>``, ``<br/>`` and ``<br />`` (any case) with ``replacement``."""
    return _BR_TAG_PATTERN.sub(lambda _match: replacement, html)


__all__ = [
    "LATEX_TEXT_PIPELINE",
    "normalize_punctuation",
    "escape_reserved_characters",
    "substitute_greek_letters",
    "substitute_math_symbols",
    "escape_latex_text",
    "escape_template_value",
    "escape_url",
    "choose_verb_delimiter",
    "replace_html_line_breaks",
]
