#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/ast/visitors.py
"""Visitor pattern implementation for AST traversal.

Every node kind has an abstract ``visit_*`` method on :class:`NodeVisitor`.
A concrete visitor that forgets a handler cannot be instantiated, so adding
a node kind without teaching the renderers about it fails loudly instead of
silently dropping content. Constructs outside the modelled set arrive as
:class:`~export2tex.ast.nodes.Unknown` and have their own explicit handler.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

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


class NodeVisitor(ABC):
    """Abstract base class for AST node visitors.

    Subclasses implement one ``visit_*`` method per node kind. Visit
    methods return Any (typically None for side-effect visitors).

    """

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        """Visit a Document node."""

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock node."""

    @abstractmethod
    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote node."""

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        """Visit a List node."""

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""

    @abstractmethod
    def visit_table_row(self, node: TableRow) -> Any:
        """Visit a TableRow node."""

    @abstractmethod
    def visit_table_cell(self, node: TableCell) -> Any:
        """Visit a TableCell node."""

    @abstractmethod
    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        """Visit a ThematicBreak node."""

    @abstractmethod
    def visit_html(self, node: HTML) -> Any:
        """Visit an HTML node."""

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""

    @abstractmethod
    def visit_emphasis(self, node: Emphasis) -> Any:
        """Visit an Emphasis node."""

    @abstractmethod
    def visit_strong(self, node: Strong) -> Any:
        """Visit a Strong node."""

    @abstractmethod
    def visit_code(self, node: Code) -> Any:
        """Visit a Code node."""

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        """Visit a Link node."""

    @abstractmethod
    def visit_wiki_link(self, node: WikiLink) -> Any:
        """Visit a WikiLink node."""

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        """Visit an Image node."""

    @abstractmethod
    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak node."""

    @abstractmethod
    def visit_footnote_reference(self, node: FootnoteReference) -> Any:
        """Visit a FootnoteReference node."""

    @abstractmethod
    def visit_footnote_definition(self, node: FootnoteDefinition) -> Any:
        """Visit a FootnoteDefinition node."""

    @abstractmethod
    def visit_math_inline(self, node: MathInline) -> Any:
        """Visit a MathInline node."""

    @abstractmethod
    def visit_math_block(self, node: MathBlock) -> Any:
        """Visit a MathBlock node."""

    @abstractmethod
    def visit_unknown(self, node: Unknown) -> Any:
        """Visit an Unknown node.

        This is the explicit passthrough arm for constructs outside the
        modelled node set; implementations must not drop them.

        """


def walk(node: Node) -> list[Node]:
    """Return ``node`` and all of its descendants in document order."""
    collected: list[Node] = []
    stack = [node]
    while stack:
        current = stack.pop()
        collected.append(current)
        stack.extend(reversed(get_node_children(current)))
    return collected


def find_nodes(root: Node, predicate: Callable[[Node], bool]) -> list[Node]:
    """Collect every node under ``root`` (inclusive) matching ``predicate``.

    Parameters
    ----------
    root : Node
        Subtree to search
    predicate : callable
        Test applied to each node

    Returns
    -------
    list of Node
        Matching nodes in document order

    Examples
    --------
        >>> tables = find_nodes(doc, lambda n: isinstance(n, Table))

    """
    return [node for node in walk(root) if predicate(node)]
