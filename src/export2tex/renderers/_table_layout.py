#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/renderers/_table_layout.py
"""Layout policy for LaTeX tables.

A table is emitted in one of three modes, chosen from its row count R
(header included) and column count C:

FIXED
    ``R <= 30``: a ``table`` float around ``tabular``/``tabularx``.
FLOWING
    ``R > 30`` unless split applies: a ``longtable`` that breaks across
    pages.
SPLIT
    ``R > 50`` and ``C <= 4``: body rows in chunks of 30, each in its own
    minipage, two side by side.

Independently, ``C >= 6`` selects a condensed rendering (small font, tight
column separation, ``X`` columns for fixed tables) and ``R > 50`` raises a
large-table warning.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, TypeVar

from export2tex.constants import (
    CONDENSED_TABLE_MIN_COLUMNS,
    FLOWING_TABLE_MIN_ROWS,
    LARGE_TABLE_WARNING_ROWS,
    SPLIT_TABLE_MAX_COLUMNS,
    SPLIT_TABLE_MIN_ROWS,
    SPLIT_TABLE_ROWS_PER_CHUNK,
    SUMMARY_ROW_KEYWORDS,
)

T = TypeVar("T")


class TableMode(Enum):
    """Rendering mode of a table."""

    FIXED = "fixed"
    FLOWING = "flowing"
    SPLIT = "split"


@dataclass(frozen=True)
class TableLayout:
    """Layout decision for one table.

    Parameters
    ----------
    mode : TableMode
        Selected rendering mode
    condensed : bool
        Whether the small-font, tight-column rendering applies
    warn_large : bool
        Whether the large-table warning applies

    """

    mode: TableMode
    condensed: bool
    warn_large: bool


def plan_table_layout(rows: int, cols: int) -> TableLayout:
    """Choose the layout for a table of ``rows`` x ``cols``.

    The three thresholds are separate rules, so a table can be both large
    and flowing.

    Examples
    --------
        >>> plan_table_layout(10, 3).mode
        <TableMode.FIXED: 'fixed'>
        >>> plan_table_layout(55, 5)
        TableLayout(mode=<TableMode.FLOWING: 'flowing'>, condensed=False, warn_large=True)
        >>> plan_table_layout(60, 3).mode
        <TableMode.SPLIT: 'split'>

    """
    if rows > SPLIT_TABLE_MIN_ROWS and cols <= SPLIT_TABLE_MAX_COLUMNS:
        mode = TableMode.SPLIT
    elif rows > FLOWING_TABLE_MIN_ROWS:
        mode = TableMode.FLOWING
    else:
        mode = TableMode.FIXED

    return TableLayout(
        mode=mode,
        condensed=cols >= CONDENSED_TABLE_MIN_COLUMNS,
        warn_large=rows > LARGE_TABLE_WARNING_ROWS,
    )


def large_table_message(rows: int) -> str:
    """Return the advisory message for an oversized table."""
    return f"Large table detected ({rows} rows). Export may be slow or cause freezing."


def is_summary_text(text: str) -> bool:
    """Return True if ``text`` contains a summary keyword, ignoring case.

    Matching is by substring, so "Totals" and "小計額" both count.

    Examples
    --------
        >>> is_summary_text("Grand Total")
        True
        >>> is_summary_text("Region")
        False

    """
    lowered = text.lower()
    return any(keyword in lowered for keyword in SUMMARY_ROW_KEYWORDS)


def chunk_rows(rows: Sequence[T], size: int = SPLIT_TABLE_ROWS_PER_CHUNK) -> list[list[T]]:
    """Partition ``rows`` into consecutive chunks of at most ``size``."""
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [list(rows[start : start + size]) for start in range(0, len(rows), size)]


def column_spec(cols: int, mode: TableMode, condensed: bool) -> str:
    """Return the column specification for a table.

    Fixed condensed tables use ``X`` columns; everything else uses ``l``.

    Examples
    --------
        >>> column_spec(3, TableMode.FIXED, False)
        'l l l'
        >>> column_spec(6, TableMode.FIXED, True)
        'XXXXXX'
        >>> column_spec(6, TableMode.FLOWING, True)
        'l l l l l l'

    """
    if mode is TableMode.FIXED and condensed:
        return "X" * cols
    return " ".join("l" for _ in range(cols))


__all__ = [
    "TableMode",
    "TableLayout",
    "plan_table_layout",
    "large_table_message",
    "is_summary_text",
    "chunk_rows",
    "column_spec",
]
