#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/utils/__init__.py
"""Utility modules for the export2tex package.

This package contains text escaping, label and footnote bookkeeping, image
path resolution, metadata handling and source slicing helpers.
"""

from export2tex.utils.escape import escape_latex_text, escape_reserved_characters, escape_template_value
from export2tex.utils.footnotes import FootnoteMap
from export2tex.utils.labels import LabelTracker
from export2tex.utils.source import slice_source

__all__ = [
    "escape_latex_text",
    "escape_reserved_characters",
    "escape_template_value",
    "FootnoteMap",
    "LabelTracker",
    "slice_source",
]
