#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/export2tex/renderers/__init__.py
"""AST renderers producing LaTeX.

- LatexCompiler: compile a document tree to a LaTeX body
- BaseRenderer: abstract base class for renderers
- Diagnostic / DiagnosticSink: advisory messages reported during a render

Examples
--------
    >>> from export2tex.ast import Document, Paragraph, Text
    >>> from export2tex.renderers import LatexCompiler
    >>> compiler = LatexCompiler()
    >>> compiler.render_to_string(Document(children=[Paragraph(content=[Text(content="50%")])]))
    '\\n50\\\\%\\n'

"""

from export2tex.renderers.base import BaseRenderer, Diagnostic, DiagnosticSink
from export2tex.renderers.latex import FigureRecord, LatexCompiler, OrderedItem, TableRecord, render_to_latex

__all__ = [
    "BaseRenderer",
    "Diagnostic",
    "DiagnosticSink",
    "LatexCompiler",
    "TableRecord",
    "FigureRecord",
    "OrderedItem",
    "render_to_latex",
]
