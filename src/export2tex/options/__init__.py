#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the export2tex compiler.

Options are frozen dataclasses, which gives type safety, default values and
a clean API for configuring compilation.
"""

from __future__ import annotations

from export2tex.options.base import BaseRendererOptions, CloneFrozenMixin
from export2tex.options.settings import ImagePathSettings, TexExportSettings, ensure_settings

__all__ = [
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "ImagePathSettings",
    "TexExportSettings",
    "ensure_settings",
]
