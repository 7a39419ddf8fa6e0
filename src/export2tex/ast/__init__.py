#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/ast/__init__.py
"""Abstract Syntax Tree (AST) module for document representation.

The compiler consumes a tree of these nodes. The module consists of:

- nodes: AST node classes representing document structure
- visitors: exhaustive visitor base class and traversal helpers
- serialization: JSON serialization and deserialization of AST structures
- mdast: loader for mdast JSON produced by remark
- labels: cross-reference label assignment

Examples
--------
    >>> from export2tex.ast import Document, Heading, Paragraph, Text
    >>> doc = Document(children=[
    ...     Heading(level=1, content=[Text(content="Intro")]),
    ...     Paragraph(content=[Text(content="Value: 50%")])
    ... ])

"""

from __future__ import annotations

from export2tex.ast.labels import assign_labels
from export2tex.ast.mdast import mdast_json_to_ast, mdast_to_ast
from export2tex.ast.nodes import (
    HTML,
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    FootnoteDefinition,
    FootnoteReference,
    Heading,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    MathBlock,
    MathInline,
    Node,
    Paragraph,
    SourceSpan,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    Unknown,
    WikiLink,
    get_node_children,
)
from export2tex.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast
from export2tex.ast.utils import extract_text, slugify
from export2tex.ast.visitors import NodeVisitor, find_nodes, walk

__all__ = [
    # Nodes
    "Node",
    "SourceSpan",
    "Document",
    "Heading",
    "Paragraph",
    "CodeBlock",
    "BlockQuote",
    "List",
    "ListItem",
    "Table",
    "TableRow",
    "TableCell",
    "ThematicBreak",
    "HTML",
    "FootnoteDefinition",
    "MathBlock",
    "Text",
    "Emphasis",
    "Strong",
    "Code",
    "Link",
    "WikiLink",
    "Image",
    "LineBreak",
    "FootnoteReference",
    "MathInline",
    "Unknown",
    "get_node_children",
    # Visitors
    "NodeVisitor",
    "walk",
    "find_nodes",
    # Serialization
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
    "mdast_to_ast",
    "mdast_json_to_ast",
    # Utilities
    "assign_labels",
    "extract_text",
    "slugify",
]
