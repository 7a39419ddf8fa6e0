#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tree-building helpers shared by the test suite."""

from typing import Optional, Sequence

from export2tex.ast import Document, Paragraph, Table, TableCell, TableRow, Text


def text_cell(text: str) -> TableCell:
    """Create a table cell holding plain text."""
    return TableCell(content=[Text(content=text)])


def make_table(
    rows: int,
    cols: int,
    *,
    first_column: Optional[Sequence[str]] = None,
    label: Optional[str] = None,
) -> Table:
    """Create a table of ``rows`` rows (header included) and ``cols`` columns.

    Header cells read ``H0``, ``H1``...; body cells read ``r<row>c<col>``.
    ``first_column`` overrides the first cell of each row, header included.

    """
    grid = [[f"H{c}" for c in range(cols)]]
    grid.extend([f"r{r}c{c}" for c in range(cols)] for r in range(1, rows))
    if first_column is not None:
        for row, value in zip(grid, first_column):
            row[0] = value
    return Table(rows=[TableRow(cells=[text_cell(value) for value in row]) for row in grid], label=label)


def paragraph_document(text: str) -> Document:
    """Create a document with a single paragraph."""
    return Document(children=[Paragraph(content=[Text(content=text)])])
