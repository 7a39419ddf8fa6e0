"""export2tex - Compile Markdown document trees into LaTeX.

export2tex turns a parsed Markdown tree into LaTeX source. The compiler
walks the tree once, escaping text for LaTeX, resolving labels and
footnotes, and laying out tables to fit the page: small tables as floats,
long tables as ``longtable``, and long narrow tables split into side-by-side
columns. The template layer wraps the body in a user-supplied preamble and
postamble, repairing them so the result is a structurally valid document.

Trees come from any Markdown parser: build them with :mod:`export2tex.ast`,
load them from JSON, or convert remark's mdast JSON.

Requirements
------------
- Python 3.10+

Examples
--------
Compile a tree to a LaTeX body:

    >>> from export2tex import compile_document
    >>> from export2tex.ast import Document, Heading, Paragraph, Text
    >>> doc = Document(children=[
    ...     Heading(level=1, content=[Text(content="Intro")]),
    ...     Paragraph(content=[Text(content="Value: 50%")]),
    ... ])
    >>> print(compile_document(doc).body)
    \\section{Intro}\\label{sec:intro}
    Value: 50\\%
    <BLANKLINE>

Produce a complete document from mdast JSON:

    >>> from export2tex import export_document, mdast_json_to_ast
    >>> result = export_document(mdast_json_to_ast(mdast_json), file_name="notes.md")
    >>> result.tex.startswith("\\\\documentclass")
    True

See Also
--------
export2tex.ast : AST node definitions and loaders
export2tex.template : preamble repair and document assembly

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "export2tex requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from export2tex.api import (
    CompileResult,
    ExportResult,
    apply_captions,
    compile_document,
    export_document,
)
from export2tex.ast import json_to_ast, mdast_json_to_ast
from export2tex.exceptions import (
    ConfigurationError,
    Export2TexError,
    InvalidOptionsError,
    OutputWriteError,
    ParsingError,
    ValidationError,
)
from export2tex.options import ImagePathSettings, TexExportSettings, ensure_settings
from export2tex.renderers import Diagnostic, LatexCompiler

__all__ = [
    "__version__",
    "compile_document",
    "export_document",
    "apply_captions",
    "CompileResult",
    "ExportResult",
    "LatexCompiler",
    "Diagnostic",
    "TexExportSettings",
    "ImagePathSettings",
    "ensure_settings",
    "json_to_ast",
    "mdast_json_to_ast",
    "Export2TexError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "ConfigurationError",
    "OutputWriteError",
]
