#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/ast/utils.py
"""Utility functions for working with AST nodes.

Functions
---------
extract_text : Extract plain text from a node or list of nodes
slugify : Build a label-safe slug from heading text

Examples
--------
Build a heading slug:

    >>> from export2tex.ast import Heading, Text, Emphasis
    >>> from export2tex.ast.utils import extract_text, slugify
    >>>
    >>> heading = Heading(level=1, content=[
    ...     Text(content="Hello "),
    ...     Emphasis(content=[Text(content="world")])
    ... ])
    >>> slugify(extract_text(heading, joiner=""))
    'hello-world'

"""

from __future__ import annotations

import re
import unicodedata
from typing import TYPE_CHECKING, Set, Union

from export2tex.ast.nodes import Code, MathInline, Text, get_node_children

if TYPE_CHECKING:
    from export2tex.ast.nodes import Node


def extract_text(node_or_nodes: Union[Node, list[Node]], joiner: str = " ") -> str:
    """Extract plain text from a node or list of nodes.

    Text, inline code and inline math contribute their raw content; every
    other node contributes the text of its children, joined with ``joiner``.

    Parameters
    ----------
    node_or_nodes : Node or list of Node
        A single node or list of nodes to extract text from
    joiner : str, default = " "
        String used between the text of sibling nodes. Use "" when the Text
        nodes already carry their own spacing (heading slugs).

    Returns
    -------
    str
        Concatenated text content

    """
    if isinstance(node_or_nodes, list):
        text_parts = []
        for node in node_or_nodes:
            extracted = extract_text(node, joiner=joiner)
            if extracted:
                text_parts.append(extracted)
        return joiner.join(text_parts)

    node = node_or_nodes
    if isinstance(node, (Text, Code, MathInline)):
        return node.content

    text_parts = []
    for child in get_node_children(node):
        extracted = extract_text(child, joiner=joiner)
        if extracted:
            text_parts.append(extracted)

    return joiner.join(text_parts)


def slugify(text: str, *, seen_slugs: Set[str] | None = None, max_length: int = 80) -> str:
    """Create a label-safe slug from text with collision avoidance.

    Accents are stripped, but other non-ASCII word characters (CJK text in
    particular) are kept so that headings written entirely in Japanese still
    get distinct slugs.

    Parameters
    ----------
    text : str
        Text to slugify, usually heading text
    seen_slugs : Set[str] or None, default = None
        Previously generated slugs. When given, a colliding slug receives a
        ``-2``, ``-3``... suffix and the result is added to the set.
    max_length : int, default = 80
        Maximum length before the collision suffix

    Returns
    -------
    str
        Slug, unique within ``seen_slugs`` when provided

    Examples
    --------
        >>> slugify("Hello World!")
        'hello-world'
        >>> seen = set()
        >>> slugify("Intro", seen_slugs=seen), slugify("Intro", seen_slugs=seen)
        ('intro', 'intro-2')

    """
    normalized = unicodedata.normalize("NFD", text)
    normalized = "".join(char for char in normalized if unicodedata.category(char) != "Mn")
    normalized = unicodedata.normalize("NFC", normalized)

    slug = normalized.lower()
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"[^\w\-]", "", slug)
    slug = slug.replace("_", "")
    slug = re.sub(r"-+", "-", slug).strip("-")

    if not slug:
        slug = "section"

    if len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")

    if seen_slugs is not None:
        if slug not in seen_slugs:
            seen_slugs.add(slug)
            return slug

        counter = 2
        while f"{slug}-{counter}" in seen_slugs:
            counter += 1

        unique_slug = f"{slug}-{counter}"
        seen_slugs.add(unique_slug)
        return unique_slug

    return slug


__all__ = [
    "extract_text",
    "slugify",
]
