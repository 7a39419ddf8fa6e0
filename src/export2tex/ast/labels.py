#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/ast/labels.py
"""Cross-reference label assignment.

The compiler only emits ``\\label`` and reference commands for nodes that
already carry a label id. This transform assigns those ids before a
compile:

- headings get ``sec:<slug of heading text>``
- tables get ``tab:<n>`` and images ``fig:<n>``, counted in document order
- display math with an ``id`` in its metadata gets ``eq:<id>``
- wiki links of the form ``[[Note#Heading]]`` point at the label of the
  heading with that text in the same document

Labels that are already set are kept and reserved, so generated ids never
collide with them. Repeated slugs get ``-2``, ``-3``... suffixes.

"""

from __future__ import annotations

import copy
import logging

from export2tex.ast.nodes import Document, Heading, Image, MathBlock, Table, WikiLink
from export2tex.ast.utils import extract_text, slugify
from export2tex.ast.visitors import walk

logger = logging.getLogger(__name__)

SECTION_PREFIX = "sec:"
TABLE_PREFIX = "tab:"
FIGURE_PREFIX = "fig:"
EQUATION_PREFIX = "eq:"


def assign_labels(document: Document, *, in_place: bool = False) -> Document:
    """Assign label ids to label-bearing nodes.

    Parameters
    ----------
    document : Document
        Tree to label
    in_place : bool, default = False
        Mutate ``document`` instead of labelling a deep copy

    Returns
    -------
    Document
        The labelled tree

    """
    doc = document if in_place else copy.deepcopy(document)
    nodes = walk(doc)

    reserved: set[str] = set()
    for node in nodes:
        label = getattr(node, "label", None)
        if label and not isinstance(node, WikiLink):
            reserved.add(label)

    heading_slugs: set[str] = set()
    headings_by_text: dict[str, str] = {}
    table_count = 0
    figure_count = 0

    for node in nodes:
        if isinstance(node, Heading):
            text = extract_text(node.content, joiner="")
            if node.label is None:
                slug = slugify(text, seen_slugs=heading_slugs)
                while f"{SECTION_PREFIX}{slug}" in reserved:
                    slug = slugify(text, seen_slugs=heading_slugs)
                node.label = f"{SECTION_PREFIX}{slug}"
                reserved.add(node.label)
            headings_by_text.setdefault(slugify(text), node.label)
        elif isinstance(node, Table):
            table_count += 1
            if node.label is None:
                node.label = _unique(f"{TABLE_PREFIX}{table_count}", reserved)
        elif isinstance(node, Image):
            figure_count += 1
            if node.label is None:
                node.label = _unique(f"{FIGURE_PREFIX}{figure_count}", reserved)
        elif isinstance(node, MathBlock):
            identifier = node.metadata.get("id")
            if node.label is None and node.display and identifier:
                node.label = _unique(f"{EQUATION_PREFIX}{identifier}", reserved)

    for node in nodes:
        if isinstance(node, WikiLink) and node.label is None and "#" in node.value:
            fragment = node.value.split("#", 1)[1]
            target = headings_by_text.get(slugify(fragment))
            if target is not None:
                node.label = target
            else:
                logger.debug("Wiki link target not found in document: %s", node.value)

    logger.debug("Assigned labels: %d headings, %d tables, %d figures", len(headings_by_text), table_count, figure_count)
    return doc


def _unique(candidate: str, reserved: set[str]) -> str:
    label = candidate
    counter = 2
    while label in reserved:
        label = f"{candidate}-{counter}"
        counter += 1
    reserved.add(label)
    return label


__all__ = ["assign_labels"]
