#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/utils/labels.py
"""Label definitions and references for one compile."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from export2tex.constants import DEFAULT_REF_COMMAND

logger = logging.getLogger(__name__)


@dataclass
class LabelTracker:
    r"""Emit ``\label`` and reference commands and remember defined labels.

    A tracker belongs to exactly one compile. Referencing a label that was
    never defined is allowed; LaTeX reports it when the document is built.

    Parameters
    ----------
    ref_command : str, default "cref"
        Reference command name, emitted as ``\<ref_command>{id}``

    Examples
    --------
        >>> tracker = LabelTracker("ref")
        >>> tracker.label("sec:intro")
        '\\label{sec:intro}'
        >>> tracker.reference("sec:intro")
        '\\ref{sec:intro}'
        >>> tracker.label(None)
        ''

    """

    ref_command: str = DEFAULT_REF_COMMAND
    _defined: list[str] = field(default_factory=list, init=False, repr=False)
    _referenced: list[str] = field(default_factory=list, init=False, repr=False)

    def label(self, label_id: Optional[str]) -> str:
        """Return the label definition for ``label_id`` ("" when None)."""
        if label_id is None:
            return ""
        if label_id in self._defined:
            logger.warning("Label defined more than once: %s", label_id)
        self._defined.append(label_id)
        return f"\\label{{{label_id}}}"

    def reference(self, label_id: Optional[str]) -> str:
        """Return the reference command for ``label_id`` ("" when None)."""
        if label_id is None:
            return ""
        self._referenced.append(label_id)
        return f"\\{self.ref_command}{{{label_id}}}"

    @property
    def defined_labels(self) -> list[str]:
        """Labels defined so far, in emission order."""
        return list(self._defined)

    def unresolved_references(self) -> list[str]:
        """Return referenced labels that were never defined, without repeats."""
        defined = set(self._defined)
        return list(dict.fromkeys(ref for ref in self._referenced if ref not in defined))


__all__ = ["LabelTracker"]
