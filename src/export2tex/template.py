#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/template.py
r"""Document template assembly.

A full document is the preamble, the compiled body and the postamble. The
preamble and postamble come from the user and may be incomplete, so they
are repaired before use:

- a missing ``\documentclass`` line is prepended
- a missing ``amsmath`` package is added after the class line
- a missing ``\begin{document}`` is appended to the preamble
- missing table and float packages are inserted, with a comment line
  listing what was added
- a missing ``\end{document}`` is appended to the postamble

Repair is idempotent: repairing an already repaired template returns it
unchanged. Both templates may contain ``{{key}}`` placeholders, which are
filled from a flat metadata record.

"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import TYPE_CHECKING, Mapping, Optional

from export2tex.constants import (
    AUTO_ADDED_PACKAGES_COMMENT,
    BEGIN_DOCUMENT,
    DATE_PLACEHOLDER_KEY,
    DEFAULT_DOCUMENT_CLASS_LINE,
    END_DOCUMENT,
    MAKETITLE,
    PACKAGE_INSERT_ANCHORS,
    REQUIRED_PACKAGES,
    UNDEFINED_PLACEHOLDER,
)
from export2tex.utils.escape import escape_template_value

if TYPE_CHECKING:
    from export2tex.options.settings import TexExportSettings

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{([A-Za-z0-9_]+)\}\}")
_DOCUMENT_CLASS_PATTERN = re.compile(r"\\documentclass")
_DOCUMENT_CLASS_LINE_PATTERN = re.compile(r"\\documentclass[^\n]*\n")
_SEPARATOR_LINE_PATTERN = re.compile(r"\n%+\n")
_USEPACKAGE_LINE_PATTERN = re.compile(r"\\usepackage[^\n]*\n")


def _package_pattern(name: str) -> re.Pattern[str]:
    r"""Match ``\usepackage{name}`` with or without bracketed options."""
    return re.compile(r"\\usepackage(?:\[[^\]]*\])?\{" + re.escape(name) + r"\}")


def _package_line_pattern(name: str) -> re.Pattern[str]:
    return re.compile(r"\\usepackage(?:\[[^\]]*\])?\{" + re.escape(name) + r"\}[^\n]*\n")


def has_package(preamble: str, name: str) -> bool:
    """Return True if ``preamble`` loads package ``name`` (options allowed)."""
    return _package_pattern(name).search(preamble) is not None


def _insert_at(text: str, index: int, insertion: str) -> str:
    return text[:index] + insertion + text[index:]


def _after_document_class(preamble: str) -> int:
    match = _DOCUMENT_CLASS_LINE_PATTERN.search(preamble)
    return match.end() if match else -1


def ensure_document_class(preamble: str) -> str:
    r"""Prepend ``\documentclass{article}`` if the preamble has no class.

    A class line that ends the text without a newline gets one, so that
    later repairs can insert packages after it.

    """
    if _DOCUMENT_CLASS_PATTERN.search(preamble):
        if _DOCUMENT_CLASS_LINE_PATTERN.search(preamble) is None:
            return preamble + "\n"
        return preamble
    logger.info("Preamble has no \\documentclass, adding the default class")
    return DEFAULT_DOCUMENT_CLASS_LINE + preamble


def ensure_amsmath(preamble: str) -> str:
    """Add ``amsmath`` after the document class line if it is not loaded."""
    if has_package(preamble, "amsmath"):
        return preamble
    index = _after_document_class(preamble)
    if index < 0:
        return preamble
    logger.info("Preamble does not load amsmath, adding it")
    return _insert_at(preamble, index, "\\usepackage{amsmath}\n")


def ensure_begin_document(preamble: str) -> str:
    r"""Append ``\begin{document}`` if the preamble does not contain it."""
    if BEGIN_DOCUMENT in preamble:
        return preamble
    logger.info("Preamble has no \\begin{document}, appending it")
    if not preamble.endswith("\n"):
        preamble += "\n"
    return preamble + BEGIN_DOCUMENT + "\n"


def _package_insert_point(preamble: str) -> int:
    for anchor in PACKAGE_INSERT_ANCHORS:
        match = _package_line_pattern(anchor).search(preamble)
        if match:
            return match.end()

    # Start of the first %%%% separator line
    separator = _SEPARATOR_LINE_PATTERN.search(preamble)
    if separator:
        return separator.start() + 1

    last_package = None
    for last_package in _USEPACKAGE_LINE_PATTERN.finditer(preamble):
        pass
    if last_package is not None:
        return last_package.end()

    return _after_document_class(preamble)


def ensure_required_packages(preamble: str) -> str:
    r"""Insert every missing table and float package into the preamble.

    A package counts as present when ``\usepackage{name}`` appears, with
    or without bracketed options. A missing package goes after the first
    loaded anchor package, else at the first ``%%%`` separator line, else
    after the last ``\usepackage`` line, else after the class line. If any
    package was inserted, a comment line naming them follows the class line.

    Parameters
    ----------
    preamble : str
        Preamble text

    Returns
    -------
    str
        Preamble loading all required packages

    """
    updated = preamble
    added: list[str] = []

    for name, description in REQUIRED_PACKAGES:
        if has_package(updated, name):
            continue
        index = _package_insert_point(updated)
        if index < 0:
            logger.warning("No place to insert package %s in preamble", name)
            continue
        updated = _insert_at(updated, index, f"\\usepackage{{{name}}}\n")
        added.append(name)
        logger.debug("Added required package %s (%s)", name, description)

    if added:
        logger.info("Auto-added required packages: %s", ", ".join(added))
        index = _after_document_class(updated)
        if index >= 0:
            updated = _insert_at(updated, index, f"{AUTO_ADDED_PACKAGES_COMMENT}{', '.join(added)}\n")

    return updated


def ensure_position_packages(preamble: str, figure_position: str, table_position: str) -> str:
    """Load the ``here`` package when a float position uses ``!``."""
    if "!" not in figure_position + table_position or has_package(preamble, "here"):
        return preamble
    index = _after_document_class(preamble)
    if index < 0:
        return preamble
    logger.info("Float position uses '!', adding the here package")
    return _insert_at(preamble, index, "\\usepackage{here}\n")


def repair_preamble(preamble: str) -> str:
    """Make a preamble structurally valid; idempotent."""
    repaired = ensure_document_class(preamble)
    repaired = ensure_amsmath(repaired)
    repaired = ensure_begin_document(repaired)
    return ensure_required_packages(repaired)


def repair_postamble(postamble: str) -> str:
    r"""Append ``\end{document}`` if the postamble does not contain it."""
    if END_DOCUMENT in postamble:
        return postamble
    logger.info("Postamble has no \\end{document}, appending it")
    if postamble and not postamble.endswith("\n"):
        postamble += "\n"
    return postamble + END_DOCUMENT + "\n"


def extract_template_keys(template: str) -> list[str]:
    """Return the placeholder keys of ``template`` in first-seen order.

    Examples
    --------
        >>> extract_template_keys("{{title}} {{author}} {{title}}")
        ['title', 'author']

    """
    return list(dict.fromkeys(PLACEHOLDER_PATTERN.findall(template)))


def replace_placeholders(
    template: str,
    metadata: Mapping[str, object],
    today: Optional[date] = None,
) -> str:
    """Substitute ``{{key}}`` placeholders from ``metadata``.

    Values are escaped for LaTeX. A missing ``date`` becomes today's date
    in ISO form; any other missing key becomes ``undefined``.

    Parameters
    ----------
    template : str
        Template text
    metadata : Mapping
        Placeholder values
    today : date, optional
        Date used for a missing ``date`` key; defaults to the current date

    Returns
    -------
    str
        Template with all placeholders replaced

    """

    def substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        value = metadata.get(key)
        if value is not None:
            return escape_template_value(str(value))
        if key == DATE_PLACEHOLDER_KEY:
            return (today or date.today()).isoformat()
        logger.debug("No value for template placeholder '%s'", key)
        return UNDEFINED_PLACEHOLDER

    return PLACEHOLDER_PATTERN.sub(substitute, template)


def compress_newlines(tex: str) -> str:
    """Collapse every run of empty lines into a single empty line.

    Leading empty lines are kept as one; trailing empty lines are dropped.

    Examples
    --------
        >>> compress_newlines("a\\n\\n\\n\\nb\\n")
        'a\\n\\nb'

    """
    output: list[str] = []
    was_empty = False
    for line in tex.split("\n"):
        if line == "":
            was_empty = True
            continue
        if was_empty:
            output.append("")
            was_empty = False
        output.append(line)
    return "\n".join(output)


def assemble_document(
    body: str,
    settings: TexExportSettings,
    metadata: Mapping[str, object],
    today: Optional[date] = None,
) -> str:
    r"""Wrap a compiled body in the repaired preamble and postamble.

    ``\maketitle`` follows the preamble when the metadata has a non-empty
    title. With captions enabled, a float position using ``!`` also loads
    the ``here`` package.

    Parameters
    ----------
    body : str
        Compiled document body
    settings : TexExportSettings
        Supplies the preamble and postamble templates
    metadata : Mapping
        Placeholder values
    today : date, optional
        Date used for a missing ``date`` placeholder

    Returns
    -------
    str
        Complete LaTeX document

    """
    preamble = repair_preamble(settings.preamble)
    if settings.generate_captions:
        preamble = ensure_position_packages(preamble, settings.figure_position, settings.table_position)
    preamble = replace_placeholders(preamble, metadata, today)
    title = metadata.get("title")
    if isinstance(title, str) and title.strip():
        preamble += "\n" + MAKETITLE
    postamble = replace_placeholders(repair_postamble(settings.postamble), metadata, today)
    return preamble + body + postamble


__all__ = [
    "PLACEHOLDER_PATTERN",
    "has_package",
    "ensure_document_class",
    "ensure_amsmath",
    "ensure_begin_document",
    "ensure_required_packages",
    "ensure_position_packages",
    "repair_preamble",
    "repair_postamble",
    "extract_template_keys",
    "replace_placeholders",
    "compress_newlines",
    "assemble_document",
]
