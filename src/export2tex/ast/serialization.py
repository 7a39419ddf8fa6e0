#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/ast/serialization.py
"""JSON serialization and deserialization for AST nodes.

This is the native interchange format of export2tex: any Markdown parser
can hand a tree to the compiler by emitting this JSON. Every node is an
object with a ``node_type`` key naming its class, its fields, a
``metadata`` object and an optional ``position`` span.

Examples
--------
Serialize AST to JSON:

    >>> from export2tex.ast import Document, Heading, Text
    >>> from export2tex.ast.serialization import ast_to_json
    >>>
    >>> doc = Document(children=[
    ...     Heading(level=1, content=[Text(content="Title")])
    ... ])
    >>> json_str = ast_to_json(doc, indent=2)

Deserialize JSON back to AST:

    >>> from export2tex.ast.serialization import json_to_ast
    >>> doc = json_to_ast(json_str)
    >>> doc.children[0].level
    1

"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, cast

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

SCHEMA_VERSION = 1


def _add_metadata_and_position(result: dict[str, Any], node: Node) -> dict[str, Any]:
    result["metadata"] = node.metadata
    if node.position is not None:
        span = node.position
        result["position"] = {
            "start_line": span.start_line,
            "start_column": span.start_column,
            "end_line": span.end_line,
            "end_column": span.end_column,
        }
    return result


def _serialize_block_container(node: Node, node_type: str) -> dict[str, Any]:
    result = {"node_type": node_type, "children": [ast_to_dict(child) for child in node.children]}  # type: ignore[attr-defined]
    return _add_metadata_and_position(result, node)


def _serialize_inline_container(node: Node, node_type: str) -> dict[str, Any]:
    result = {"node_type": node_type, "content": [ast_to_dict(child) for child in node.content]}  # type: ignore[attr-defined]
    return _add_metadata_and_position(result, node)


def _serialize_literal(node: Node, node_type: str) -> dict[str, Any]:
    result = {"node_type": node_type, "content": node.content}  # type: ignore[attr-defined]
    return _add_metadata_and_position(result, node)


def _serialize_leaf(node: Node, node_type: str) -> dict[str, Any]:
    return _add_metadata_and_position({"node_type": node_type}, node)


def _serialize_heading(node: Heading) -> dict[str, Any]:
    result: dict[str, Any] = {
        "node_type": "Heading",
        "level": node.level,
        "content": [ast_to_dict(child) for child in node.content],
    }
    if node.label is not None:
        result["label"] = node.label
    return _add_metadata_and_position(result, node)


def _serialize_code_block(node: CodeBlock) -> dict[str, Any]:
    result = {"node_type": "CodeBlock", "content": node.content, "language": node.language, "meta": node.meta}
    return _add_metadata_and_position(result, node)


def _serialize_list(node: List) -> dict[str, Any]:
    result = {"node_type": "List", "ordered": node.ordered, "items": [ast_to_dict(item) for item in node.items]}
    return _add_metadata_and_position(result, node)


def _serialize_table(node: Table) -> dict[str, Any]:
    result: dict[str, Any] = {"node_type": "Table", "rows": [ast_to_dict(row) for row in node.rows]}
    if node.label is not None:
        result["label"] = node.label
    return _add_metadata_and_position(result, node)


def _serialize_table_row(node: TableRow) -> dict[str, Any]:
    result = {"node_type": "TableRow", "cells": [ast_to_dict(cell) for cell in node.cells]}
    return _add_metadata_and_position(result, node)


def _serialize_math_block(node: MathBlock) -> dict[str, Any]:
    result: dict[str, Any] = {"node_type": "MathBlock", "content": node.content, "display": node.display}
    if node.label is not None:
        result["label"] = node.label
    return _add_metadata_and_position(result, node)


def _serialize_link(node: Link) -> dict[str, Any]:
    result: dict[str, Any] = {
        "node_type": "Link",
        "url": node.url,
        "content": [ast_to_dict(child) for child in node.content],
    }
    if node.title is not None:
        result["title"] = node.title
    return _add_metadata_and_position(result, node)


def _serialize_wiki_link(node: WikiLink) -> dict[str, Any]:
    result: dict[str, Any] = {"node_type": "WikiLink", "value": node.value, "alias": node.alias}
    if node.label is not None:
        result["label"] = node.label
    return _add_metadata_and_position(result, node)


def _serialize_image(node: Image) -> dict[str, Any]:
    result: dict[str, Any] = {"node_type": "Image", "url": node.url, "alt_text": node.alt_text, "title": node.title}
    if node.label is not None:
        result["label"] = node.label
    return _add_metadata_and_position(result, node)


def _serialize_footnote_reference(node: FootnoteReference) -> dict[str, Any]:
    return _add_metadata_and_position({"node_type": "FootnoteReference", "identifier": node.identifier}, node)


def _serialize_footnote_definition(node: FootnoteDefinition) -> dict[str, Any]:
    result = {
        "node_type": "FootnoteDefinition",
        "identifier": node.identifier,
        "content": [ast_to_dict(child) for child in node.content],
    }
    return _add_metadata_and_position(result, node)


def _serialize_unknown(node: Unknown) -> dict[str, Any]:
    result: dict[str, Any] = {"node_type": "Unknown", "type": node.node_type}
    if node.value is not None:
        result["value"] = node.value
    if node.children:
        result["children"] = [ast_to_dict(child) for child in node.children]
    return _add_metadata_and_position(result, node)


# Dispatch table mapping node classes to their serialization functions
_SERIALIZATION_DISPATCH: dict[type, Callable[[Any], dict[str, Any]]] = {
    Document: lambda n: _serialize_block_container(n, "Document"),
    BlockQuote: lambda n: _serialize_block_container(n, "BlockQuote"),
    ListItem: lambda n: _serialize_block_container(n, "ListItem"),
    Heading: _serialize_heading,
    Paragraph: lambda n: _serialize_inline_container(n, "Paragraph"),
    Emphasis: lambda n: _serialize_inline_container(n, "Emphasis"),
    Strong: lambda n: _serialize_inline_container(n, "Strong"),
    TableCell: lambda n: _serialize_inline_container(n, "TableCell"),
    CodeBlock: _serialize_code_block,
    List: _serialize_list,
    Table: _serialize_table,
    TableRow: _serialize_table_row,
    ThematicBreak: lambda n: _serialize_leaf(n, "ThematicBreak"),
    LineBreak: lambda n: _serialize_leaf(n, "LineBreak"),
    HTML: lambda n: _serialize_literal(n, "HTML"),
    Text: lambda n: _serialize_literal(n, "Text"),
    Code: lambda n: _serialize_literal(n, "Code"),
    MathInline: lambda n: _serialize_literal(n, "MathInline"),
    MathBlock: _serialize_math_block,
    Link: _serialize_link,
    WikiLink: _serialize_wiki_link,
    Image: _serialize_image,
    FootnoteReference: _serialize_footnote_reference,
    FootnoteDefinition: _serialize_footnote_definition,
    Unknown: _serialize_unknown,
}


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert an AST node to a dictionary representation.

    Parameters
    ----------
    node : Node
        The AST node to convert

    Returns
    -------
    dict
        Dictionary representation of the node

    Raises
    ------
    ValueError
        If the object is not an export2tex node

    Examples
    --------
    >>> from export2tex.ast import Text
    >>> ast_to_dict(Text(content="Hello"))
    {'node_type': 'Text', 'content': 'Hello', 'metadata': {}}

    """
    serializer = _SERIALIZATION_DISPATCH.get(type(node))
    if serializer:
        return serializer(node)

    raise ValueError(f"Unknown node type for serialization: {type(node).__name__}")


# Helper functions for deserialization
def _children(data: dict[str, Any], key: str, strict_mode: bool) -> list[Node]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ParsingError(f"Field '{key}' must be a list", node_type=data.get("node_type"))
    return [dict_to_ast(child, strict_mode=strict_mode) for child in value]


def _position(data: dict[str, Any]) -> SourceSpan | None:
    span = data.get("position")
    if not span:
        return None
    try:
        return SourceSpan(
            start_line=int(span["start_line"]),
            start_column=int(span["start_column"]),
            end_line=int(span["end_line"]),
            end_column=int(span["end_column"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ParsingError(f"Invalid position span: {span!r}", node_type=data.get("node_type"), original_error=e) from e


def _common(data: dict[str, Any]) -> dict[str, Any]:
    return {"metadata": data.get("metadata") or {}, "position": _position(data)}


def _deserialize_document(data: dict[str, Any], strict: bool) -> Document:
    return Document(children=_children(data, "children", strict), **_common(data))


def _deserialize_heading(data: dict[str, Any], strict: bool) -> Heading:
    return Heading(
        level=int(data["level"]), content=_children(data, "content", strict), label=data.get("label"), **_common(data)
    )


def _deserialize_paragraph(data: dict[str, Any], strict: bool) -> Paragraph:
    return Paragraph(content=_children(data, "content", strict), **_common(data))


def _deserialize_block_quote(data: dict[str, Any], strict: bool) -> BlockQuote:
    return BlockQuote(children=_children(data, "children", strict), **_common(data))


def _deserialize_list(data: dict[str, Any], strict: bool) -> List:
    items = cast(list[ListItem], _children(data, "items", strict))
    return List(ordered=bool(data.get("ordered", False)), items=items, **_common(data))


def _deserialize_list_item(data: dict[str, Any], strict: bool) -> ListItem:
    return ListItem(children=_children(data, "children", strict), **_common(data))


def _deserialize_table(data: dict[str, Any], strict: bool) -> Table:
    rows = cast(list[TableRow], _children(data, "rows", strict))
    return Table(rows=rows, label=data.get("label"), **_common(data))


def _deserialize_table_row(data: dict[str, Any], strict: bool) -> TableRow:
    cells = cast(list[TableCell], _children(data, "cells", strict))
    return TableRow(cells=cells, **_common(data))


def _deserialize_table_cell(data: dict[str, Any], strict: bool) -> TableCell:
    return TableCell(content=_children(data, "content", strict), **_common(data))


def _deserialize_code_block(data: dict[str, Any], strict: bool) -> CodeBlock:
    return CodeBlock(content=data["content"], language=data.get("language"), meta=data.get("meta"), **_common(data))


def _deserialize_math_block(data: dict[str, Any], strict: bool) -> MathBlock:
    return MathBlock(
        content=data["content"], display=bool(data.get("display", True)), label=data.get("label"), **_common(data)
    )


def _deserialize_link(data: dict[str, Any], strict: bool) -> Link:
    return Link(url=data["url"], content=_children(data, "content", strict), title=data.get("title"), **_common(data))


def _deserialize_wiki_link(data: dict[str, Any], strict: bool) -> WikiLink:
    return WikiLink(value=data["value"], alias=data.get("alias"), label=data.get("label"), **_common(data))


def _deserialize_image(data: dict[str, Any], strict: bool) -> Image:
    return Image(
        url=data["url"],
        alt_text=data.get("alt_text") or "",
        title=data.get("title"),
        label=data.get("label"),
        **_common(data),
    )


def _deserialize_footnote_reference(data: dict[str, Any], strict: bool) -> FootnoteReference:
    return FootnoteReference(identifier=str(data["identifier"]), **_common(data))


def _deserialize_footnote_definition(data: dict[str, Any], strict: bool) -> FootnoteDefinition:
    return FootnoteDefinition(
        identifier=str(data["identifier"]), content=_children(data, "content", strict), **_common(data)
    )


def _deserialize_unknown(data: dict[str, Any], strict: bool) -> Unknown:
    return Unknown(
        node_type=str(data.get("type", "unknown")),
        value=data.get("value"),
        children=_children(data, "children", strict),
        **_common(data),
    )


def _literal(cls: type) -> Callable[[dict[str, Any], bool], Node]:
    return lambda data, strict: cls(content=data["content"], **_common(data))


def _leaf(cls: type) -> Callable[[dict[str, Any], bool], Node]:
    return lambda data, strict: cls(**_common(data))


# Dispatch table mapping node type strings to deserializer functions
_DESERIALIZATION_DISPATCH: dict[str, Callable[[dict[str, Any], bool], Node]] = {
    "Document": _deserialize_document,
    "Heading": _deserialize_heading,
    "Paragraph": _deserialize_paragraph,
    "BlockQuote": _deserialize_block_quote,
    "List": _deserialize_list,
    "ListItem": _deserialize_list_item,
    "Table": _deserialize_table,
    "TableRow": _deserialize_table_row,
    "TableCell": _deserialize_table_cell,
    "CodeBlock": _deserialize_code_block,
    "MathBlock": _deserialize_math_block,
    "Emphasis": lambda data, strict: Emphasis(content=_children(data, "content", strict), **_common(data)),
    "Strong": lambda data, strict: Strong(content=_children(data, "content", strict), **_common(data)),
    "Text": _literal(Text),
    "Code": _literal(Code),
    "HTML": _literal(HTML),
    "MathInline": _literal(MathInline),
    "ThematicBreak": _leaf(ThematicBreak),
    "LineBreak": _leaf(LineBreak),
    "Link": _deserialize_link,
    "WikiLink": _deserialize_wiki_link,
    "Image": _deserialize_image,
    "FootnoteReference": _deserialize_footnote_reference,
    "FootnoteDefinition": _deserialize_footnote_definition,
    "Unknown": _deserialize_unknown,
}


def dict_to_ast(data: dict[str, Any], strict_mode: bool = True) -> Node:
    """Convert a dictionary representation back to an AST node.

    Parameters
    ----------
    data : dict
        Dictionary representation of a node
    strict_mode : bool, default True
        If True, raise ParsingError on unknown node types.
        If False, wrap them in an ``Unknown`` node so the compiler can pass
        them through as a commented block.

    Returns
    -------
    Node
        Reconstructed AST node

    Raises
    ------
    ParsingError
        If the dictionary is malformed, or names an unknown node type while
        ``strict_mode`` is True

    """
    if not isinstance(data, dict):
        raise ParsingError(f"Expected a node object, got {type(data).__name__}")

    node_type = data.get("node_type")
    if not node_type:
        raise ParsingError("Dictionary must contain 'node_type' field")

    deserializer = _DESERIALIZATION_DISPATCH.get(node_type)
    if not deserializer:
        if strict_mode:
            raise ParsingError(f"Unknown node type: {node_type}", node_type=node_type)
        logger.warning("Unknown node type '%s', keeping it as an Unknown node", node_type)
        children = data.get("children") if isinstance(data.get("children"), list) else []
        return Unknown(
            node_type=str(node_type),
            value=data.get("value") if isinstance(data.get("value"), str) else None,
            children=[dict_to_ast(child, strict_mode=False) for child in children],
            **_common(data),
        )

    try:
        return deserializer(data, strict_mode)
    except KeyError as e:
        raise ParsingError(f"{node_type} is missing required field {e}", node_type=node_type, original_error=e) from e
    except (TypeError, ValueError) as e:
        raise ParsingError(f"Invalid {node_type} node: {e}", node_type=node_type, original_error=e) from e


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize an AST node to a JSON string with a schema version.

    Parameters
    ----------
    node : Node
        The AST node to serialize
    indent : int or None, default = None
        Number of spaces for indentation (None for compact format)

    Returns
    -------
    str
        JSON text; non-ASCII characters are kept as-is

    """
    versioned_dict = {"schema_version": SCHEMA_VERSION, **ast_to_dict(node)}
    return json.dumps(versioned_dict, indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str, strict_mode: bool = True) -> Node:
    """Deserialize a JSON string to an AST node.

    JSON without a ``schema_version`` field is read as version 1.

    Parameters
    ----------
    json_str : str
        JSON text
    strict_mode : bool, default True
        See :func:`dict_to_ast`

    Returns
    -------
    Node
        Reconstructed AST node

    Raises
    ------
    ParsingError
        If the JSON is malformed, has an unsupported schema version, or
        describes an invalid tree

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ParsingError(f"Invalid JSON: {e}", original_error=e) from e

    if not isinstance(data, dict):
        raise ParsingError("Top-level JSON value must be a node object")

    schema_version = data.pop("schema_version", SCHEMA_VERSION)
    if schema_version != SCHEMA_VERSION:
        raise ParsingError(
            f"Unsupported schema version: {schema_version}. "
            f"This version of export2tex supports schema version {SCHEMA_VERSION} only."
        )

    return dict_to_ast(data, strict_mode=strict_mode)


__all__ = [
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
]
