#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/options/settings.py
"""Export settings for the LaTeX compiler and template assembler.

Settings reach the compiler in one of three ways: built in code as a
:class:`TexExportSettings`, merged from a raw mapping with
:func:`ensure_settings` (keys in camelCase or snake_case), or loaded from a
settings file by :mod:`export2tex.cli.config`, which also goes through
:func:`ensure_settings`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Mapping

from export2tex.constants import (
    DEFAULT_FIGURE_POSITION,
    DEFAULT_POSTAMBLE,
    DEFAULT_PREAMBLE,
    DEFAULT_REF_COMMAND,
    DEFAULT_TABLE_POSITION,
)
from export2tex.exceptions import ValidationError
from export2tex.options.base import BaseRendererOptions
from export2tex.template import repair_postamble, repair_preamble

logger = logging.getLogger(__name__)

_FLOAT_POSITION_PATTERN = re.compile(r"^[htbpH!]*$")
_REF_COMMAND_PATTERN = re.compile(r"^[A-Za-z]+\*?$")


class ImagePathSettings(Enum):
    """How image paths are written into ``\\includegraphics``."""

    RELATIVE_TO_ROOT = 0
    FULL_PATH = 1
    BASE_NAME = 2
    RELATIVE_TO_EXPORT = 3

    @classmethod
    def parse(cls, value: Any) -> ImagePathSettings:
        """Parse a member from its value, its name, or a camel/snake-case name.

        Raises
        ------
        ValueError
            If the value names no member

        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid image path setting: {value!r}")
        if isinstance(value, int):
            return cls(value)
        normalized = re.sub(r"(?<=[a-z])(?=[A-Z])", "_", str(value)).replace("-", "_").upper()
        try:
            return cls[normalized]
        except KeyError:
            raise ValueError(f"Invalid image path setting: {value!r}") from None


@dataclass(frozen=True)
class TexExportSettings(BaseRendererOptions):
    r"""Configuration for compiling a document tree to LaTeX.

    Parameters
    ----------
    ref_command : str, default "cref"
        Command used for references, emitted as ``\<ref_command>{label}``
    numbered_sections : bool, default True
        Use numbered sectioning commands; False appends ``*``
    compress_newlines : bool, default False
        Collapse runs of blank lines in the compiled body
    generate_labels : bool, default True
        Assign label ids to headings, tables, figures and equations
    generate_captions : bool, default True
        Emit floats with captions for tables and figures
    figure_position : str, default "h"
        Float placement specifier for figures
    table_position : str, default "H"
        Float placement specifier for fixed tables
    preamble : str
        Template text placed before the body; may contain ``{{key}}``
        placeholders
    postamble : str, default "\n\end{document}"
        Template text placed after the body
    image_path_settings : ImagePathSettings, default RELATIVE_TO_ROOT
        How image paths are rewritten
    default_to_equation : bool, default False
        Wrap bare display math in ``equation`` rather than ``\[ \]``
    additional_math_environments : tuple of str, default ()
        Extra environment names treated as already-wrapped display math

    """

    ref_command: str = field(
        default=DEFAULT_REF_COMMAND,
        metadata={"help": "Reference command name (e.g. cref, ref, autoref)"},
    )
    numbered_sections: bool = field(
        default=True,
        metadata={"help": "Use numbered sectioning commands"},
    )
    compress_newlines: bool = field(
        default=False,
        metadata={"help": "Collapse runs of blank lines in the output"},
    )
    generate_labels: bool = field(
        default=True,
        metadata={"help": "Assign labels to headings, tables, figures and equations"},
    )
    generate_captions: bool = field(
        default=True,
        metadata={"help": "Emit captioned floats for tables and figures"},
    )
    figure_position: str = field(
        default=DEFAULT_FIGURE_POSITION,
        metadata={"help": "Float placement for figures (h, t, b, p, H, !)"},
    )
    table_position: str = field(
        default=DEFAULT_TABLE_POSITION,
        metadata={"help": "Float placement for tables (h, t, b, p, H, !)"},
    )
    preamble: str = field(
        default=DEFAULT_PREAMBLE,
        metadata={"help": "Template placed before the body"},
    )
    postamble: str = field(
        default=DEFAULT_POSTAMBLE,
        metadata={"help": "Template placed after the body"},
    )
    image_path_settings: ImagePathSettings = field(
        default=ImagePathSettings.RELATIVE_TO_ROOT,
        metadata={"help": "How image paths are written (relative_to_root, full_path, base_name, relative_to_export)"},
    )
    default_to_equation: bool = field(
        default=False,
        metadata={"help": "Wrap bare display math in an equation environment"},
    )
    additional_math_environments: tuple[str, ...] = field(
        default=(),
        metadata={"help": "Extra math environments passed through verbatim"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if not _REF_COMMAND_PATTERN.match(self.ref_command):
            raise ValueError(f"ref_command must be a LaTeX command name, got {self.ref_command!r}")
        for name in ("figure_position", "table_position"):
            value = getattr(self, name)
            if not _FLOAT_POSITION_PATTERN.match(value):
                raise ValueError(f"{name} may only contain h, t, b, p, H or !, got {value!r}")
        if not isinstance(self.image_path_settings, ImagePathSettings):
            object.__setattr__(self, "image_path_settings", ImagePathSettings.parse(self.image_path_settings))
        if not isinstance(self.additional_math_environments, tuple):
            object.__setattr__(self, "additional_math_environments", tuple(self.additional_math_environments))


# Deprecated keys that are translated by ensure_settings rather than mapped
_DEPRECATED_KEYS = frozenset({"full_image_path"})

# Keys of the host application that have no meaning here
_IGNORED_KEYS = frozenset(
    {"ask_for_frontmatter", "ask_for_captions", "ask_for_export_path", "default_export_directory"}
)


def _snake_case(key: str) -> str:
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", key).replace("-", "_").lower()


def ensure_settings(partial: Mapping[str, Any] | None = None) -> TexExportSettings:
    """Merge a raw settings mapping over the defaults and repair templates.

    Parameters
    ----------
    partial : Mapping or None
        Raw settings; keys may be camelCase (``refCommand``) or snake_case
        (``ref_command``). Unknown keys are logged and ignored.

    Returns
    -------
    TexExportSettings
        Complete settings. An empty preamble is replaced by the default
        preamble; any other preamble is repaired, as is the postamble. The
        deprecated ``fullImagePath`` flag maps to FULL_PATH or
        RELATIVE_TO_ROOT when ``imagePathSettings`` is absent.

    Raises
    ------
    ValidationError
        If a value has the wrong type or is out of range

    """
    known = {f.name for f in fields(TexExportSettings)}
    values: dict[str, Any] = {}
    deprecated: dict[str, Any] = {}

    for raw_key, value in (partial or {}).items():
        key = _snake_case(str(raw_key))
        if key in known:
            values[key] = value
        elif key in _DEPRECATED_KEYS:
            deprecated[key] = value
        elif key in _IGNORED_KEYS:
            logger.debug("Ignoring host-only setting: %s", raw_key)
        else:
            logger.debug("Ignoring unknown setting: %s", raw_key)

    if "image_path_settings" not in values and "full_image_path" in deprecated:
        logger.info("Converting deprecated setting fullImagePath to imagePathSettings")
        values["image_path_settings"] = (
            ImagePathSettings.FULL_PATH if deprecated["full_image_path"] else ImagePathSettings.RELATIVE_TO_ROOT
        )

    for name in ("preamble", "postamble", "ref_command", "figure_position", "table_position"):
        if name in values and not isinstance(values[name], str):
            raise ValidationError(f"Setting '{name}' must be a string", parameter_name=name, parameter_value=values[name])

    preamble = values.get("preamble")
    if preamble is None or not preamble.strip():
        values["preamble"] = DEFAULT_PREAMBLE
    else:
        values["preamble"] = repair_preamble(preamble)

    if values.get("postamble"):
        values["postamble"] = repair_postamble(values["postamble"])

    if "additional_math_environments" in values:
        environments = values["additional_math_environments"]
        if isinstance(environments, str):
            environments = [environments]
        values["additional_math_environments"] = tuple(str(env) for env in environments)

    try:
        return TexExportSettings(**values)
    except ValueError as e:
        raise ValidationError(f"Invalid settings: {e}", original_error=e) from e
