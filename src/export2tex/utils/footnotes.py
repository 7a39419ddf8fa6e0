#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/utils/footnotes.py
"""Footnote definitions collected for one compile."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from export2tex.ast.nodes import FootnoteDefinition, Node
from export2tex.ast.visitors import walk

logger = logging.getLogger(__name__)


@dataclass
class FootnoteMap:
    """Map footnote identifiers to their definitions.

    :meth:`collect` runs over the whole tree before compilation so that a
    reference may appear before its definition. Definitions met again during
    the compile are registered a second time, which is harmless; the first
    definition of an identifier wins.

    Examples
    --------
        >>> footnotes = FootnoteMap()
        >>> footnotes.collect(document)
        >>> footnotes.get("1")
        FootnoteDefinition(identifier='1', ...)

    """

    _definitions: Dict[str, FootnoteDefinition] = field(default_factory=dict, init=False, repr=False)

    def register(self, definition: FootnoteDefinition) -> None:
        """Record a definition unless its identifier is already known."""
        existing = self._definitions.get(definition.identifier)
        if existing is None:
            self._definitions[definition.identifier] = definition
        elif existing is not definition:
            logger.debug("Duplicate footnote definition ignored: %s", definition.identifier)

    def get(self, identifier: str) -> Optional[FootnoteDefinition]:
        """Return the definition for ``identifier``, or None."""
        return self._definitions.get(identifier)

    def collect(self, root: Node) -> None:
        """Register every footnote definition found under ``root``."""
        for node in walk(root):
            if isinstance(node, FootnoteDefinition):
                self.register(node)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._definitions

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)


__all__ = ["FootnoteMap"]
