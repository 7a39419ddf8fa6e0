#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/utils/source.py
"""Recover the literal source text of a node from its position span."""

from __future__ import annotations

from typing import Optional

from export2tex.ast.nodes import SourceSpan


def slice_source(text: str, span: Optional[SourceSpan]) -> str:
    """Return the part of ``text`` covered by ``span``, stripped.

    Lines and columns are 1-indexed and the end column is exclusive. A
    missing span, or one pointing past the end of the text, yields what can
    be recovered (possibly "").

    Examples
    --------
        >>> slice_source("ab\\ncd\\nef", SourceSpan(1, 2, 2, 2))
        'b\\nc'

    """
    if span is None or not text:
        return ""

    lines = text.split("\n")
    start_line = span.start_line - 1
    end_line = span.end_line - 1
    start_col = max(span.start_column - 1, 0)
    end_col = max(span.end_column - 1, 0)

    def line(index: int) -> str:
        return lines[index] if 0 <= index < len(lines) else ""

    if start_line == end_line:
        result = line(start_line)[start_col:end_col]
    else:
        parts = [line(start_line)[start_col:]]
        parts.extend(line(i) for i in range(start_line + 1, end_line))
        parts.append(line(end_line)[:end_col])
        result = "\n".join(parts)

    return result.strip()


__all__ = ["slice_source"]
