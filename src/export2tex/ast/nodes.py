#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/ast/nodes.py
"""AST node classes for document representation.

This module defines the closed set of node kinds the LaTeX compiler
understands. A tree is normally produced by an external Markdown parser and
loaded through :mod:`export2tex.ast.serialization` or
:mod:`export2tex.ast.mdast`; it can also be built directly in code.

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.

Block-level nodes:
    - Document, Heading, Paragraph, BlockQuote, CodeBlock
    - List, ListItem, Table, TableRow, TableCell
    - ThematicBreak, HTML, FootnoteDefinition, MathBlock

Inline nodes:
    - Text, Emphasis, Strong, Code, Link, WikiLink, Image
    - LineBreak, FootnoteReference, MathInline

Passthrough:
    - Unknown, for any construct the parser produced but this library does
      not model. It is rendered as a commented block, never dropped.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class SourceSpan:
    """Position of a node in the original source text.

    Lines and columns are 1-indexed; ``end_column`` is exclusive. Spans are
    only used to recover the literal source of tables and figures for
    caption prompts, never for compilation.

    Parameters
    ----------
    start_line : int
        First line of the node
    start_column : int
        Column of the first character
    end_line : int
        Last line of the node
    end_column : int
        Column just past the last character

    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int


class Node(ABC):
    """Base class for all AST nodes.

    Parameters
    ----------
    metadata : dict, default = empty dict
        Arbitrary metadata associated with this node
    position : SourceSpan or None, default = None
        Where this node came from in the source text

    """

    metadata: dict[str, Any]
    position: Optional[SourceSpan]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing block-level children.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata (frontmatter such as title and author)
    position : SourceSpan or None, default = None
        Source span

    """

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_document``."""
        return visitor.visit_document(self)


@dataclass
class Heading(Node):
    """Heading node.

    Levels above 5 are accepted here; the LaTeX compiler has no command for
    them and skips such headings silently.

    Parameters
    ----------
    level : int
        Heading depth, 1 being the most important
    content : list of Node, default = empty list
        Inline nodes representing heading text
    label : str or None, default = None
        Cross-reference label id assigned to this heading

    """

    level: int
    content: list[Node] = field(default_factory=list)
    label: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def __post_init__(self) -> None:
        """Validate heading level is positive."""
        if self.level < 1:
            raise ValueError(f"Heading level must be >= 1, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_heading``."""
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_paragraph``."""
        return visitor.visit_paragraph(self)


@dataclass
class CodeBlock(Node):
    """Fenced code block.

    Parameters
    ----------
    content : str
        Code content, emitted verbatim
    language : str or None, default = None
        Language given on the fence
    meta : str or None, default = None
        Remaining fence info string after the language

    """

    content: str
    language: Optional[str] = None
    meta: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code_block``."""
        return visitor.visit_code_block(self)


@dataclass
class BlockQuote(Node):
    """Block quote node containing other block elements."""

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_block_quote``."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """List node (ordered or unordered).

    Parameters
    ----------
    ordered : bool
        True for numbered lists, False for bulleted ones
    items : list of ListItem, default = empty list
        List items

    """

    ordered: bool
    items: list[ListItem] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list``."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """List item containing block content."""

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_list_item``."""
        return visitor.visit_list_item(self)


@dataclass
class Table(Node):
    """Table node holding a grid of rows.

    Row 0 is the header row; every following row is a body row. The
    column count of the table is the number of cells in the header.

    Parameters
    ----------
    rows : list of TableRow
        Header row followed by body rows; must not be empty
    label : str or None, default = None
        Cross-reference label id assigned to this table

    Raises
    ------
    ValueError
        If ``rows`` is empty

    """

    rows: list[TableRow] = field(default_factory=list)
    label: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def __post_init__(self) -> None:
        """Reject grids without a header row."""
        if not self.rows:
            raise ValueError("Table must have at least one row")

    @property
    def header(self) -> TableRow:
        """Return the header row (row 0)."""
        return self.rows[0]

    @property
    def column_count(self) -> int:
        """Return the number of columns, taken from the header row."""
        return len(self.rows[0].cells)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table``."""
        return visitor.visit_table(self)


@dataclass
class TableRow(Node):
    """Table row node containing cells."""

    cells: list[TableCell] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_row``."""
        return visitor.visit_table_row(self)


@dataclass
class TableCell(Node):
    """Table cell owning a subtree of inline nodes."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_table_cell``."""
        return visitor.visit_table_cell(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break node (horizontal rule)."""

    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_thematic_break``."""
        return visitor.visit_thematic_break(self)


@dataclass
class HTML(Node):
    """Raw HTML node (block or inline).

    The content is passed through to the output, except for ``<br>`` tags
    which become LaTeX line breaks.

    """

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_html``."""
        return visitor.visit_html(self)


@dataclass
class FootnoteDefinition(Node):
    """Footnote definition.

    Parameters
    ----------
    identifier : str
        Identifier matched against footnote references
    content : list of Node, default = empty list
        Block content of the footnote

    """

    identifier: str
    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_footnote_definition``."""
        return visitor.visit_footnote_definition(self)


@dataclass
class MathBlock(Node):
    """Math node (``$$ ... $$`` in Markdown).

    Parameters
    ----------
    content : str
        LaTeX math source
    display : bool, default = True
        False renders the math inline
    label : str or None, default = None
        Equation label; a labelled block is always an ``equation``

    """

    content: str
    display: bool = True
    label: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_math_block``."""
        return visitor.visit_math_block(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text node."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_text``."""
        return visitor.visit_text(self)


@dataclass
class Emphasis(Node):
    """Emphasis (italic) node."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_emphasis``."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Node):
    """Strong (bold) node."""

    content: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_strong``."""
        return visitor.visit_strong(self)


@dataclass
class Code(Node):
    """Inline code node."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_code``."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Hyperlink node.

    Parameters
    ----------
    url : str
        Link target
    content : list of Node, default = empty list
        Inline nodes representing the link text

    """

    url: str
    content: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_link``."""
        return visitor.visit_link(self)


@dataclass
class WikiLink(Node):
    """Wiki-style internal link (``[[Note#Heading|alias]]``).

    Parameters
    ----------
    value : str
        Link target as written, possibly with a ``#heading`` fragment
    alias : str or None, default = None
        Display text after the ``|``
    label : str or None, default = None
        Label id of the link target, when it is known

    """

    value: str
    alias: Optional[str] = None
    label: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_wiki_link``."""
        return visitor.visit_wiki_link(self)


@dataclass
class Image(Node):
    """Image node.

    Parameters
    ----------
    url : str
        Image location as written in the source
    alt_text : str, default = ""
        Alternative text, used as the default caption
    title : str or None, default = None
        Optional image title
    label : str or None, default = None
        Cross-reference label id assigned to this figure

    """

    url: str
    alt_text: str = ""
    title: Optional[str] = None
    label: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_image``."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Hard line break."""

    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_line_break``."""
        return visitor.visit_line_break(self)


@dataclass
class FootnoteReference(Node):
    """Footnote reference (``[^id]``)."""

    identifier: str
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_footnote_reference``."""
        return visitor.visit_footnote_reference(self)


@dataclass
class MathInline(Node):
    """Inline math node (``$ ... $``)."""

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_math_inline``."""
        return visitor.visit_math_inline(self)


# ============================================================================
# Passthrough
# ============================================================================


@dataclass
class Unknown(Node):
    """A construct the parser produced but this AST does not model.

    Parameters
    ----------
    node_type : str
        The parser's name for the construct
    value : str or None, default = None
        Literal value, for leaf constructs
    children : list of Node, default = empty list
        Child nodes, for container constructs

    """

    node_type: str
    value: Optional[str] = None
    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_unknown``."""
        return visitor.visit_unknown(self)


def get_node_children(node: Node) -> list[Node]:
    """Get all child nodes from a node.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        List of child nodes (empty list if node has no children)

    """
    if isinstance(node, (Document, BlockQuote, ListItem, Unknown)):
        return list(node.children)

    if isinstance(node, (Heading, Paragraph, Emphasis, Strong, Link, TableCell, FootnoteDefinition)):
        return list(node.content)

    if isinstance(node, List):
        return list(node.items)

    if isinstance(node, Table):
        return list(node.rows)

    if isinstance(node, TableRow):
        return list(node.cells)

    return []
