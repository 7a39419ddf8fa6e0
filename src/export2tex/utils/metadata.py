#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/utils/metadata

"""Frontmatter and metadata utilities.

The template assembler substitutes ``{{key}}`` placeholders from a flat
record of strings. This module builds that record from YAML frontmatter
(read with PyYAML), document metadata and explicit overrides.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from export2tex.exceptions import ParsingError

logger = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"


def split_frontmatter(content: str) -> Tuple[Optional[str], str]:
    """Split YAML frontmatter (``--- ... ---``) from Markdown text.

    Parameters
    ----------
    content : str
        Markdown text

    Returns
    -------
    tuple[str or None, str]
        (frontmatter_yaml, remaining_content); the first item is None when
        the text has no frontmatter block

    """
    if not (content.startswith("---\n") or content.startswith("---\r\n")):
        return None, content

    lines = content.splitlines(keepends=True)
    for i in range(1, len(lines)):
        if lines[i].strip() == FRONTMATTER_DELIMITER:
            return "".join(lines[1:i]), "".join(lines[i + 1 :])

    return None, content


def parse_frontmatter(yaml_text: str) -> Dict[str, Any]:
    """Parse a YAML frontmatter block into a mapping.

    Raises
    ------
    ParsingError
        If the YAML is malformed or is not a mapping

    """
    try:
        data = yaml.safe_load(yaml_text)
    except yaml.YAMLError as e:
        raise ParsingError(f"Invalid YAML frontmatter: {e}", original_error=e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParsingError(f"Frontmatter must be a mapping, got {type(data).__name__}")
    return data


def load_metadata_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a metadata record from a YAML file or a Markdown file's frontmatter.

    Raises
    ------
    ParsingError
        If the file content is not a valid mapping
    OSError
        If the file cannot be read

    """
    text = Path(path).read_text(encoding="utf-8")
    frontmatter, _body = split_frontmatter(text)
    return parse_frontmatter(frontmatter if frontmatter is not None else text)


def _format_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        parts = [_format_value(item) for item in value]
        return ", ".join(part for part in parts if part)
    if isinstance(value, Mapping):
        logger.debug("Nested metadata mapping flattened to text")
        return ", ".join(f"{key}: {_format_value(item)}" for key, item in value.items())
    return str(value)


def normalize_metadata(metadata: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Flatten a metadata mapping into placeholder values.

    None values are dropped; dates become ISO strings and lists are joined
    with ", ".

    Examples
    --------
        >>> normalize_metadata({"title": "Report", "tags": ["a", "b"], "draft": None})
        {'title': 'Report', 'tags': 'a, b'}

    """
    normalized: Dict[str, str] = {}
    for key, value in (metadata or {}).items():
        formatted = _format_value(value)
        if formatted is not None:
            normalized[str(key)] = formatted
    return normalized


def merge_metadata(*sources: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """Normalize and merge metadata records; later sources win."""
    merged: Dict[str, str] = {}
    for source in sources:
        merged.update(normalize_metadata(source))
    return merged


__all__ = [
    "split_frontmatter",
    "parse_frontmatter",
    "load_metadata_file",
    "normalize_metadata",
    "merge_metadata",
]
