#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the export2tex library.

This module centralizes hardcoded values, thresholds and default
configuration used across the library.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Table Layout - Row/column thresholds and summary row keywords
3. Text Escaping - Reserved characters, Greek letters and math symbols
4. Template Defaults - Default preamble/postamble and required packages
5. CLI - Exit codes and configuration file names
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

ItemKind = Literal["table", "figure"]
SettingsFileFormat = Literal["toml", "yaml", "json"]
InputFormat = Literal["ast", "mdast"]

# =============================================================================
# Headings
# =============================================================================

# Depth 1..5; anything deeper is not rendered
HEADING_COMMANDS: tuple[str, ...] = (
    "section",
    "subsection",
    "subsubsection",
    "paragraph",
    "subparagraph",
)

# =============================================================================
# Table Layout
# =============================================================================

LARGE_TABLE_WARNING_ROWS = 50
FLOWING_TABLE_MIN_ROWS = 30
SPLIT_TABLE_MIN_ROWS = 50
SPLIT_TABLE_MAX_COLUMNS = 4
SPLIT_TABLE_ROWS_PER_CHUNK = 30
SPLIT_TABLE_CHUNKS_PER_LINE = 2
SPLIT_TABLE_MINIPAGE_WIDTH = "0.48"
SPLIT_TABLE_MINIPAGE_HEIGHT_MM = 115
CONDENSED_TABLE_MIN_COLUMNS = 6
CONDENSED_TABCOLSEP = "2pt"

DEFAULT_TABLE_CAPTION = "Table"
DEFAULT_FIGURE_CAPTION = "Figure"

SUMMARY_ROW_KEYWORDS: tuple[str, ...] = (
    "合計",
    "平均",
    "小計",
    "計",
    "総計",
    "総和",
    "合算",
    "平均値",
    "中央値",
    "total",
    "average",
    "sum",
    "mean",
    "subtotal",
    "grand total",
)

# =============================================================================
# Text Escaping
# =============================================================================

FULLWIDTH_PUNCTUATION: tuple[tuple[str, str], ...] = (
    ("、", "，"),
    ("。", "．"),
)

# Backslash must stay first: later replacements insert backslashes
RESERVED_CHARACTERS: tuple[tuple[str, str], ...] = (
    ("\\", r"\textbackslash{}"),
    ("%", r"\%"),
    ("~", r"\textasciitilde{}"),
    ("&", r"\&"),
    ("_", r"\_"),
    ("^", r"\textasciicircum{}"),
    ("$", r"\$"),
    ("#", r"\#"),
    ("{", r"\{"),
    ("}", r"\}"),
)

GREEK_LETTERS: dict[str, str] = {
    "α": r"\alpha",
    "β": r"\beta",
    "γ": r"\gamma",
    "δ": r"\delta",
    "ε": r"\epsilon",
    "ζ": r"\zeta",
    "η": r"\eta",
    "θ": r"\theta",
    "ι": r"\iota",
    "κ": r"\kappa",
    "λ": r"\lambda",
    "μ": r"\mu",
    "ν": r"\nu",
    "ξ": r"\xi",
    "ο": r"\omicron",
    "π": r"\pi",
    "ρ": r"\rho",
    "σ": r"\sigma",
    "τ": r"\tau",
    "υ": r"\upsilon",
    "φ": r"\phi",
    "χ": r"\chi",
    "ψ": r"\psi",
    "ω": r"\omega",
    "Α": r"\Alpha",
    "Β": r"\Beta",
    "Γ": r"\Gamma",
    "Δ": r"\Delta",
    "Ε": r"\Epsilon",
    "Ζ": r"\Zeta",
    "Η": r"\Eta",
    "Θ": r"\Theta",
    "Ι": r"\Iota",
    "Κ": r"\Kappa",
    "Λ": r"\Lambda",
    "Μ": r"\Mu",
    "Ν": r"\Nu",
    "Ξ": r"\Xi",
    "Ο": r"\Omicron",
    "Π": r"\Pi",
    "Ρ": r"\Rho",
    "Σ": r"\Sigma",
    "Τ": r"\Tau",
    "Υ": r"\Upsilon",
    "Φ": r"\Phi",
    "Χ": r"\Chi",
    "Ψ": r"\Psi",
    "Ω": r"\Omega",
}

MATH_SYMBOLS: dict[str, str] = {
    "≤": r"\leq",
    "≥": r"\geq",
    "≠": r"\neq",
    "≈": r"\approx",
    "≡": r"\equiv",
    "∞": r"\infty",
    "∑": r"\sum",
    "∏": r"\prod",
    "∫": r"\int",
    "∮": r"\oint",
    "√": r"\sqrt",
    "∂": r"\partial",
    "∇": r"\nabla",
    "∆": r"\Delta",
    "∈": r"\in",
    "∉": r"\notin",
    "⊂": r"\subset",
    "⊆": r"\subseteq",
    "⊃": r"\supset",
    "⊇": r"\supseteq",
    "∩": r"\cap",
    "∪": r"\cup",
    "∧": r"\wedge",
    "∨": r"\vee",
    "¬": r"\neg",
    "∀": r"\forall",
    "∃": r"\exists",
    "⇒": r"\implies",
    "⇔": r"\iff",
    "→": r"\to",
    "←": r"\leftarrow",
    "↑": r"\uparrow",
    "↓": r"\downarrow",
    "↔": r"\leftrightarrow",
    "±": r"\pm",
    "×": r"\times",
    "÷": r"\div",
    "⋅": r"\cdot",
    "°": r"\degree",
    "′": r"\prime",
    "″": r"\dprime",
    "‴": r"\trprime",
}

# =============================================================================
# Math
# =============================================================================

DISPLAY_MATH_ENVIRONMENTS: tuple[str, ...] = (
    "equation",
    "equation*",
    "align",
    "align*",
    "gather",
    "gather*",
    "multline",
    "multline*",
    "flalign",
    "flalign*",
    "alignat",
    "alignat*",
)

# =============================================================================
# Template Defaults
# =============================================================================

DEFAULT_DOCUMENT_CLASS_LINE = "\\documentclass{article}\n"
BEGIN_DOCUMENT = "\\begin{document}"
END_DOCUMENT = "\\end{document}"
MAKETITLE = "\\maketitle"
UNDEFINED_PLACEHOLDER = "undefined"
DATE_PLACEHOLDER_KEY = "date"
DEFAULT_TITLE = "Untitled"

REQUIRED_PACKAGES: tuple[tuple[str, str], ...] = (
    ("float", "Float positioning (table/figure)"),
    ("lscape", "Landscape page orientation"),
    ("adjustbox", "Adjust box sizing"),
    ("tabularx", "Flexible table columns"),
    ("booktabs", "Professional table formatting"),
    ("longtable", "Multi-page tables"),
)

# Packages after which a missing required package is inserted, in order
PACKAGE_INSERT_ANCHORS: tuple[str, ...] = (
    "float",
    "booktabs",
    "longtable",
    "adjustbox",
    "tabularx",
    "lscape",
    "listings",
    "newunicodechar",
)

AUTO_ADDED_PACKAGES_COMMENT = "% Auto-added required packages: "

DEFAULT_PREAMBLE = (
    "\\documentclass[paper=a4]{jlreq}\n"
    "\\usepackage{amsmath}\n"
    "\\usepackage{amssymb}\n"
    "\\usepackage{amsthm}\n"
    "\\usepackage{amsfonts}\n"
    "\\usepackage{mathtools}\n"
    "\\usepackage{graphicx}\n"
    "\\usepackage{multirow}\n"
    "\\usepackage{hyperref}\n"
    "\\usepackage{diffcoeff}\n"
    "\\usepackage{comment}\n"
    "\\usepackage{mhchem}\n"
    "\\usepackage[separate-uncertainty]{siunitx}\n"
    "\\usepackage{newunicodechar}\n"
    "\\usepackage{listings}\n"
    "\\usepackage{float}\n"
    "\\usepackage{lscape}\n"
    "\\usepackage{adjustbox}\n"
    "\\usepackage{tabularx}\n"
    "\\usepackage{booktabs}\n"
    "\\usepackage{longtable}\n"
    "\\usepackage{cleveref}\n"
    "%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%\n"
    "\\NewDocumentCommand\\degC{}{\\ensuremath{^\\circ\\symup{C}}}\n"
    "\\NewDocumentCommand\\abs{m}{\\left|#1\\right|}\n"
    "%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%%\n"
    "\n"
    "\\title{{{title}}}\n"
    "\\author{{{author}}}\n"
    "\\date{{{date}}}\n"
    "\n"
    "\n\\begin{document}\n"
)
DEFAULT_POSTAMBLE = "\n\\end{document}"

DEFAULT_REF_COMMAND = "cref"
DEFAULT_FIGURE_POSITION = "h"
DEFAULT_TABLE_POSITION = "H"

# =============================================================================
# CLI
# =============================================================================

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 2
EXIT_FILE_ERROR = 3

CONFIG_FILENAMES: tuple[str, ...] = (
    ".export2tex.toml",
    ".export2tex.yaml",
    ".export2tex.yml",
    ".export2tex.json",
)
PYPROJECT_TOOL_SECTION = "export2tex"
