"""The major exported API functions for compiling documents to LaTeX."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/export2tex/api.py
import logging
import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from export2tex.ast.labels import assign_labels
from export2tex.ast.nodes import Document
from export2tex.constants import DEFAULT_TITLE
from export2tex.options.settings import TexExportSettings
from export2tex.renderers.base import Diagnostic
from export2tex.renderers.latex import FigureRecord, LatexCompiler, OrderedItem, TableRecord
from export2tex.template import assemble_document, compress_newlines
from export2tex.utils.escape import escape_latex_text
from export2tex.utils.metadata import merge_metadata

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
Captions = Union[Mapping[int, str], Sequence[Optional[str]]]

_CAPTION_PATTERN = re.compile(r"\\caption\{")


@dataclass(frozen=True)
class CompileResult:
    """Output of :func:`compile_document`.

    Parameters
    ----------
    body : str
        LaTeX body, without preamble or postamble
    diagnostics : list of Diagnostic
        Advisory messages in the order they were reported
    tables : list of TableRecord
        Tables in document order
    figures : list of FigureRecord
        Figures in document order
    items_in_order : list of OrderedItem
        Tables and figures interleaved in document order
    unresolved_references : list of str
        Referenced labels that no node defined

    """

    body: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    tables: list[TableRecord] = field(default_factory=list)
    figures: list[FigureRecord] = field(default_factory=list)
    items_in_order: list[OrderedItem] = field(default_factory=list)
    unresolved_references: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ExportResult:
    """Output of :func:`export_document`: the full document and its compile."""

    tex: str
    compile_result: CompileResult

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Diagnostics of the underlying compile."""
        return self.compile_result.diagnostics


def compile_document(
    document: Document,
    settings: Optional[TexExportSettings] = None,
    *,
    source_text: str = "",
    root_dir: Optional[PathLike] = None,
    export_dir: Optional[PathLike] = None,
) -> CompileResult:
    """Compile a document tree to a LaTeX body.

    When ``settings.generate_labels`` is on, labels are assigned to a copy
    of the tree first; the caller's tree is never modified.

    Parameters
    ----------
    document : Document
        Tree to compile
    settings : TexExportSettings, optional
        Export settings; defaults are used when omitted
    source_text : str, default ""
        Original Markdown, used to record the source of tables and figures
    root_dir : str or Path, optional
        Root directory image paths are relative to
    export_dir : str or Path, optional
        Directory the output will be written to

    Returns
    -------
    CompileResult
        The body and the compile's bookkeeping

    Raises
    ------
    InvalidOptionsError
        If ``settings`` is not a TexExportSettings

    Examples
    --------
        >>> from export2tex.ast import Document, Heading, Text
        >>> result = compile_document(Document(children=[
        ...     Heading(level=1, content=[Text(content="Intro")])
        ... ]))
        >>> result.body
        '\\\\section{Intro}\\\\label{sec:intro}'

    """
    compiler = LatexCompiler(settings, source_text=source_text, root_dir=root_dir, export_dir=export_dir)
    if compiler.options.generate_labels:
        document = assign_labels(document)

    compiler.visit(document)
    result = CompileResult(
        body=compiler.to_string(),
        diagnostics=list(compiler.diagnostics),
        tables=compiler.tables,
        figures=compiler.figures,
        items_in_order=compiler.items_in_order,
        unresolved_references=compiler.tracker.unresolved_references(),
    )
    logger.debug(
        "Compiled document: %d tables, %d figures, %d diagnostics",
        len(result.tables),
        len(result.figures),
        len(result.diagnostics),
    )
    return result


def _caption_map(captions: Captions) -> dict[int, str]:
    if isinstance(captions, Mapping):
        return {int(index): text for index, text in captions.items() if text}
    return {index: text for index, text in enumerate(captions) if text}


def _caption_end(tex: str, start: int) -> int:
    r"""Return the index just past the brace closing the group opened at ``start``.

    Control symbols such as ``\{`` and ``\}`` do not count. Returns -1 if
    the group is never closed.
    """
    depth = 0
    index = start
    while index < len(tex):
        char = tex[index]
        if char == "\\":
            index += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return -1


def apply_captions(tex: str, captions: Captions) -> str:
    r"""Replace caption texts by position.

    The n-th ``\caption{...}`` in ``tex`` becomes ``\caption{captions[n]}``
    when a non-empty caption is given for n; others are left alone.
    Caption text is escaped for LaTeX. The old caption is matched up to its
    balanced closing brace, so escaped text such as ``\alpha{}`` or ``\{``
    inside it is replaced whole.

    Examples
    --------
        >>> apply_captions("\\caption{\\sffamily Table}", {0: "Sales 2024"})
        '\\caption{Sales 2024}'

    """
    by_index = _caption_map(captions)
    if not by_index:
        return tex

    parts: list[str] = []
    position = 0
    scanned = 0
    counter = 0
    for match in _CAPTION_PATTERN.finditer(tex):
        if match.start() < scanned:
            continue
        end = _caption_end(tex, match.end() - 1)
        if end < 0:
            logger.warning("Unbalanced braces after caption %d, leaving the rest unchanged", counter)
            break
        scanned = end
        text = by_index.get(counter)
        counter += 1
        if text is None:
            continue
        parts.append(tex[position : match.start()])
        parts.append(f"\\caption{{{escape_latex_text(text)}}}")
        position = end

    parts.append(tex[position:])
    return "".join(parts)


def export_document(
    document: Document,
    settings: Optional[TexExportSettings] = None,
    metadata: Optional[Mapping[str, Any]] = None,
    *,
    captions: Optional[Captions] = None,
    file_name: Optional[PathLike] = None,
    source_text: str = "",
    root_dir: Optional[PathLike] = None,
    export_dir: Optional[PathLike] = None,
    today: Optional[date] = None,
) -> ExportResult:
    """Compile a document tree into a complete LaTeX document.

    Parameters
    ----------
    document : Document
        Tree to compile
    settings : TexExportSettings, optional
        Export settings; defaults are used when omitted
    metadata : Mapping, optional
        Placeholder values; merged over ``document.metadata``
    captions : Mapping[int, str] or sequence of str, optional
        Caption texts by caption position, applied after assembly
    file_name : str or Path, optional
        Source file name; its stem is the title when no title is given
    source_text : str, default ""
        Original Markdown, used to record the source of tables and figures
    root_dir : str or Path, optional
        Root directory image paths are relative to
    export_dir : str or Path, optional
        Directory the output will be written to
    today : date, optional
        Date used for a missing ``date`` placeholder

    Returns
    -------
    ExportResult
        Full document text and the compile result

    """
    settings = settings or TexExportSettings()
    result = compile_document(
        document,
        settings,
        source_text=source_text,
        root_dir=root_dir,
        export_dir=export_dir,
    )

    body = result.body
    if settings.compress_newlines:
        logger.debug("Compressing newlines")
        body = compress_newlines(body)

    values = merge_metadata(document.metadata, metadata)
    if not values.get("title"):
        values["title"] = Path(file_name).stem if file_name else DEFAULT_TITLE

    tex = assemble_document(body, settings, values, today)
    if captions:
        tex = apply_captions(tex, captions)
    return ExportResult(tex=tex, compile_result=result)


__all__ = [
    "CompileResult",
    "ExportResult",
    "compile_document",
    "export_document",
    "apply_captions",
]
