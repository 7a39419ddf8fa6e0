#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/options/base.py
"""Base classes for renderer options.

Options objects are frozen dataclasses: the compiler reads them and never
changes them. Modified copies are made with :meth:`CloneFrozenMixin.create_updated`.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for all renderer options.

    Notes
    -----
    Subclasses define their rendering options as frozen dataclass fields,
    each carrying a ``help`` entry in its field metadata.

    """

    @classmethod
    def field_help(cls) -> dict[str, str]:
        """Return the help text of every option, keyed by field name."""
        return {f.name: f.metadata.get("help", "") for f in fields(cls)}
