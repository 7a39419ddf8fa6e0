#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/ast/mdast.py
"""Load mdast trees (the JSON syntax tree produced by remark) into the AST.

remark with the gfm, math, footnote, frontmatter and wiki-link plugins
produces the node types handled here. Any other mdast type becomes an
:class:`~export2tex.ast.nodes.Unknown` node so the compiler can pass it
through as a commented block. ``yaml`` frontmatter nodes are dropped; the
frontmatter reaches the template through the metadata record instead.

A ``data.label`` value on an mdast node is taken as its cross-reference
label; the rest of ``data`` becomes node metadata.

"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, cast

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
)
from export2tex.exceptions import ParsingError

logger = logging.getLogger(__name__)

# mdast types carrying no document content
DROPPED_TYPES = frozenset({"yaml", "toml", "definition"})


def _span(node: dict[str, Any]) -> Optional[SourceSpan]:
    position = node.get("position")
    if not isinstance(position, dict):
        return None
    start = position.get("start") or {}
    end = position.get("end") or {}
    try:
        return SourceSpan(
            start_line=int(start["line"]),
            start_column=int(start["column"]),
            end_line=int(end["line"]),
            end_column=int(end["column"]),
        )
    except (KeyError, TypeError, ValueError):
        logger.debug("Ignoring malformed position on mdast %s node", node.get("type"))
        return None


def _data(node: dict[str, Any]) -> dict[str, Any]:
    data = node.get("data")
    return dict(data) if isinstance(data, dict) else {}


def _common(node: dict[str, Any]) -> dict[str, Any]:
    metadata = _data(node)
    metadata.pop("label", None)
    return {"metadata": metadata, "position": _span(node)}


def _label(node: dict[str, Any]) -> Optional[str]:
    label = _data(node).get("label")
    return str(label) if label is not None else None


def _children(node: dict[str, Any]) -> list[Node]:
    children = node.get("children", [])
    if not isinstance(children, list):
        raise ParsingError("mdast 'children' must be a list", node_type=node.get("type"))
    result: list[Node] = []
    for child in children:
        converted = mdast_node_to_ast(child)
        if converted is not None:
            result.append(converted)
    return result


def _value(node: dict[str, Any]) -> str:
    value = node.get("value", "")
    return value if isinstance(value, str) else str(value)


def _convert_heading(node: dict[str, Any]) -> Node:
    return Heading(level=int(node.get("depth", 1)), content=_children(node), label=_label(node), **_common(node))


def _convert_list(node: dict[str, Any]) -> Node:
    items = cast(list[ListItem], [child for child in _children(node) if isinstance(child, ListItem)])
    return List(ordered=bool(node.get("ordered")), items=items, **_common(node))


def _convert_table(node: dict[str, Any]) -> Node:
    rows = cast(list[TableRow], [child for child in _children(node) if isinstance(child, TableRow)])
    if not rows:
        raise ParsingError("mdast table has no rows", node_type="table")
    return Table(rows=rows, label=_label(node), **_common(node))


def _convert_table_row(node: dict[str, Any]) -> Node:
    cells = cast(list[TableCell], [child for child in _children(node) if isinstance(child, TableCell)])
    return TableRow(cells=cells, **_common(node))


def _convert_image(node: dict[str, Any]) -> Node:
    return Image(
        url=str(node.get("url", "")),
        alt_text=node.get("alt") or "",
        title=node.get("title"),
        label=_label(node),
        **_common(node),
    )


def _convert_link(node: dict[str, Any]) -> Node:
    return Link(url=str(node.get("url", "")), content=_children(node), title=node.get("title"), **_common(node))


def _convert_wiki_link(node: dict[str, Any]) -> Node:
    alias = _data(node).get("alias")
    common = _common(node)
    common["metadata"].pop("alias", None)
    return WikiLink(value=_value(node), alias=alias, label=_label(node), **common)


def _convert_code(node: dict[str, Any]) -> Node:
    return CodeBlock(content=_value(node), language=node.get("lang"), meta=node.get("meta"), **_common(node))


def _convert_math(node: dict[str, Any]) -> Node:
    return MathBlock(content=_value(node), display=True, label=_label(node), **_common(node))


def _convert_unknown(node: dict[str, Any]) -> Node:
    value = node.get("value")
    return Unknown(
        node_type=str(node.get("type")),
        value=value if isinstance(value, str) else None,
        children=_children(node) if isinstance(node.get("children"), list) else [],
        **_common(node),
    )


_CONVERTERS: dict[str, Callable[[dict[str, Any]], Node]] = {
    "root": lambda n: Document(children=_children(n), **_common(n)),
    "heading": _convert_heading,
    "paragraph": lambda n: Paragraph(content=_children(n), **_common(n)),
    "blockquote": lambda n: BlockQuote(children=_children(n), **_common(n)),
    "list": _convert_list,
    "listItem": lambda n: ListItem(children=_children(n), **_common(n)),
    "table": _convert_table,
    "tableRow": _convert_table_row,
    "tableCell": lambda n: TableCell(content=_children(n), **_common(n)),
    "image": _convert_image,
    "link": _convert_link,
    "wikiLink": _convert_wiki_link,
    "text": lambda n: Text(content=_value(n), **_common(n)),
    "inlineMath": lambda n: MathInline(content=_value(n), **_common(n)),
    "math": _convert_math,
    "code": _convert_code,
    "inlineCode": lambda n: Code(content=_value(n), **_common(n)),
    "emphasis": lambda n: Emphasis(content=_children(n), **_common(n)),
    "strong": lambda n: Strong(content=_children(n), **_common(n)),
    "footnoteDefinition": lambda n: FootnoteDefinition(
        identifier=str(n.get("identifier", "")), content=_children(n), **_common(n)
    ),
    "footnoteReference": lambda n: FootnoteReference(identifier=str(n.get("identifier", "")), **_common(n)),
    "html": lambda n: HTML(content=_value(n), **_common(n)),
    "break": lambda n: LineBreak(**_common(n)),
    "thematicBreak": lambda n: ThematicBreak(**_common(n)),
}


def mdast_node_to_ast(node: dict[str, Any]) -> Optional[Node]:
    """Convert one mdast node (and its subtree).

    Parameters
    ----------
    node : dict
        mdast node object

    Returns
    -------
    Node or None
        Converted node, or None for dropped types such as ``yaml``

    Raises
    ------
    ParsingError
        If the node is not an object with a ``type`` field

    """
    if not isinstance(node, dict) or "type" not in node:
        raise ParsingError("mdast node must be an object with a 'type' field")

    node_type = node["type"]
    if node_type in DROPPED_TYPES:
        return None

    converter = _CONVERTERS.get(node_type, _convert_unknown)
    try:
        return converter(node)
    except (TypeError, ValueError) as e:
        raise ParsingError(f"Invalid mdast {node_type} node: {e}", node_type=node_type, original_error=e) from e


def mdast_to_ast(tree: dict[str, Any]) -> Document:
    """Convert an mdast ``root`` into a Document.

    A tree whose top node is not a root is wrapped in a Document.

    Raises
    ------
    ParsingError
        If the tree is malformed

    """
    converted = mdast_node_to_ast(tree)
    if isinstance(converted, Document):
        return converted
    return Document(children=[converted] if converted is not None else [])


def mdast_json_to_ast(json_str: str) -> Document:
    """Parse mdast JSON text and convert it into a Document.

    Raises
    ------
    ParsingError
        If the text is not valid JSON or not a valid mdast tree

    """
    try:
        tree = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ParsingError(f"Invalid mdast JSON: {e}", original_error=e) from e
    return mdast_to_ast(tree)


__all__ = [
    "mdast_node_to_ast",
    "mdast_to_ast",
    "mdast_json_to_ast",
]
