#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/export2tex/renderers/latex.py
r"""LaTeX compilation from AST.

This module provides the LatexCompiler class, which walks a document tree
once and appends LaTeX fragments to an output buffer. The result is the
document body only; :mod:`export2tex.template` wraps it in a preamble and
postamble.

Beyond text, the compiler keeps per-compile bookkeeping: the labels it
defined, the footnote definitions it can resolve, a record of every table
and figure in document order, and advisory diagnostics. None of it is
shared between compiles.

Nested content that must be post-processed as a string (table cells,
footnote bodies, the first cell of a row tested for a summary keyword) is
rendered by a child compiler that returns its own string. An isolated child
gets throwaway bookkeeping, so a render made only to inspect text leaves no
trace in the parent.

"""

from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence, Union

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
)
from export2tex.ast.visitors import NodeVisitor
from export2tex.constants import (
    CONDENSED_TABCOLSEP,
    DEFAULT_FIGURE_CAPTION,
    DEFAULT_TABLE_CAPTION,
    DISPLAY_MATH_ENVIRONMENTS,
    HEADING_COMMANDS,
    SPLIT_TABLE_CHUNKS_PER_LINE,
    SPLIT_TABLE_MINIPAGE_HEIGHT_MM,
    SPLIT_TABLE_MINIPAGE_WIDTH,
    ItemKind,
)
from export2tex.options.settings import TexExportSettings
from export2tex.renderers._table_layout import (
    TableLayout,
    TableMode,
    chunk_rows,
    column_spec,
    is_summary_text,
    large_table_message,
    plan_table_layout,
)
from export2tex.renderers.base import BaseRenderer, DiagnosticSink
from export2tex.utils.escape import (
    choose_verb_delimiter,
    escape_latex_text,
    escape_reserved_characters,
    escape_url,
    replace_html_line_breaks,
)
from export2tex.utils.footnotes import FootnoteMap
from export2tex.utils.images import resolve_image_path
from export2tex.utils.labels import LabelTracker
from export2tex.utils.source import slice_source

logger = logging.getLogger(__name__)

_LINE_BREAK = "\\\\"
_CELL_LINE_BREAK = "\\newline"


@dataclass(frozen=True)
class TableRecord:
    """A table met during compilation.

    Parameters
    ----------
    index : int
        Position among the document's tables, from 0
    rows : int
        Row count, header included
    cols : int
        Column count of the header row
    source : str
        Original source text of the table, if it could be recovered

    """

    index: int
    rows: int
    cols: int
    source: str = ""


@dataclass(frozen=True)
class FigureRecord:
    """An image met during compilation."""

    index: int
    alt: str
    title: Optional[str] = None
    source: str = ""


@dataclass(frozen=True)
class OrderedItem:
    """A table or figure in document order, with its record."""

    kind: ItemKind
    display_index: int
    data: Union[TableRecord, FigureRecord]


class LatexCompiler(NodeVisitor, BaseRenderer):
    r"""Compile AST nodes to a LaTeX document body.

    Parameters
    ----------
    options : TexExportSettings or None, default = None
        Export settings
    source_text : str, default ""
        Original Markdown text, used to record the source of tables and
        figures
    root_dir : str or Path, optional
        Root directory images are relative to
    export_dir : str or Path, optional
        Directory the output is written to

    Examples
    --------
        >>> from export2tex.ast import Document, Heading, Text
        >>> compiler = LatexCompiler()
        >>> compiler.render_to_string(Document(children=[
        ...     Heading(level=1, content=[Text(content="Intro")], label="sec:intro")
        ... ]))
        '\\section{Intro}\\label{sec:intro}'

    """

    def __init__(
        self,
        options: TexExportSettings | None = None,
        *,
        source_text: str = "",
        root_dir: Union[str, Path, None] = None,
        export_dir: Union[str, Path, None] = None,
    ):
        """Initialize the compiler with settings and empty per-compile state."""
        BaseRenderer._validate_options_type(options, TexExportSettings, "latex")
        options = options or TexExportSettings()
        BaseRenderer.__init__(self, options)
        self.options: TexExportSettings = options
        self.source_text = source_text
        self.root_dir = root_dir
        self.export_dir = export_dir
        self._reset()

    def _reset(self) -> None:
        self._output: list[str] = []
        self._output_commented: list[bool] = []
        self._commenting = False
        self._is_child = False
        self.tracker = LabelTracker(self.options.ref_command)
        self.footnotes = FootnoteMap()
        self.diagnostics = DiagnosticSink()
        self._active_footnotes: set[str] = set()
        self._tables: list[TableRecord] = []
        self._figures: list[FigureRecord] = []
        self._items: list[tuple[ItemKind, int]] = []

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def visit(self, node: Node) -> None:
        """Compile ``node`` and everything below it into the buffer.

        Footnote definitions anywhere under ``node`` are collected first so
        references can precede their definitions.

        """
        if not self._is_child:
            self.footnotes.collect(node)
        node.accept(self)

    def to_string(self) -> str:
        """Return the compiled body."""
        return "".join(self._output)

    def render_to_string(self, doc: Document) -> str:
        """Compile a document with fresh state and return the body."""
        self._reset()
        self.visit(doc)
        return self.to_string()

    @property
    def tables(self) -> list[TableRecord]:
        """Tables in document order."""
        return list(self._tables)

    @property
    def figures(self) -> list[FigureRecord]:
        """Figures in document order."""
        return list(self._figures)

    @property
    def items_in_order(self) -> list[OrderedItem]:
        """Tables and figures interleaved in document order."""
        items = []
        for kind, display_index in self._items:
            data = self._tables[display_index] if kind == "table" else self._figures[display_index]
            items.append(OrderedItem(kind, display_index, data))
        return items

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------

    def emit(self, content: str) -> None:
        """Append ``content``, prefixing each new line with ``%`` while commenting."""
        if not content:
            return
        if self._commenting:
            at_line_start = not self._output or self._output[-1].endswith("\n")
            content = self._comment_lines(content, at_line_start)
        self._output.append(content)
        self._output_commented.append(self._commenting)

    @staticmethod
    def _comment_lines(content: str, at_line_start: bool) -> str:
        lines = content.split("\n")
        last = len(lines) - 1
        commented = []
        for i, line in enumerate(lines):
            starts_line = at_line_start if i == 0 else True
            if starts_line and not (i == last and line == ""):
                line = "%" + line
            commented.append(line)
        return "\n".join(commented)

    def _at_line_start(self) -> bool:
        return not self._output or self._output[-1].endswith("\n")

    @contextmanager
    def _commented(self) -> Iterator[None]:
        previous = self._commenting
        self._commenting = True
        try:
            yield
        finally:
            self._commenting = previous

    def _begin(self, name: str) -> None:
        self.emit(f"\\begin{{{name}}}\n")

    def _end(self, name: str) -> None:
        self.emit(f"\\end{{{name}}}\n")

    def _visit_children(self, nodes: Sequence[Node]) -> None:
        for child in nodes:
            child.accept(self)

    def _command(self, name: str, nodes: Sequence[Node]) -> None:
        self.emit(f"\\{name}{{")
        self._visit_children(nodes)
        self.emit("}")

    def _label_line(self, label: Optional[str]) -> None:
        text = self.tracker.label(label)
        if text:
            self.emit(text + "\n")

    def _report(self, message: str, node: Optional[Node] = None) -> None:
        self.diagnostics.report(message, node, log=logger)

    # ------------------------------------------------------------------
    # Sub-renders
    # ------------------------------------------------------------------

    def _child(self, isolated: bool) -> LatexCompiler:
        child = type(self)(
            self.options,
            source_text=self.source_text,
            root_dir=self.root_dir,
            export_dir=self.export_dir,
        )
        child._is_child = True
        child.footnotes = self.footnotes
        child._active_footnotes = self._active_footnotes
        if isolated:
            child.diagnostics = DiagnosticSink(quiet=True)
        else:
            child.tracker = self.tracker
            child.diagnostics = self.diagnostics
            child._tables = self._tables
            child._figures = self._figures
            child._items = self._items
        return child

    def render_nodes(self, nodes: Sequence[Node], *, isolated: bool = False) -> str:
        """Render ``nodes`` to a fresh string without touching this buffer.

        Parameters
        ----------
        nodes : sequence of Node
            Nodes to render
        isolated : bool, default False
            Discard labels, records and diagnostics produced by the render

        Returns
        -------
        str
            Rendered LaTeX

        """
        child = self._child(isolated)
        child._visit_children(nodes)
        return child.to_string()

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        """Render a Document node."""
        self._visit_children(node.children)

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node; levels deeper than five are skipped."""
        if node.level > len(HEADING_COMMANDS):
            logger.debug("Skipping heading of level %d", node.level)
            return
        command = HEADING_COMMANDS[node.level - 1]
        if not self.options.numbered_sections:
            command += "*"
        self._command(command, node.content)
        self.emit(self.tracker.label(node.label))

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node."""
        self.emit("\n")
        self._visit_children(node.content)
        self.emit("\n")

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node as a verbatim environment.

        Language and meta, when present, go on a comment line before it.

        """
        info = " ".join(part for part in (node.language, node.meta) if part)
        if info:
            self.emit(f"% {info}\n")
        self._begin("verbatim")
        self.emit(node.content)
        self.emit("\n")
        self._end("verbatim")

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node."""
        self._begin("quote")
        self._visit_children(node.children)
        self._end("quote")

    def visit_list(self, node: List) -> None:
        """Render a List node."""
        environment = "enumerate" if node.ordered else "itemize"
        self._begin(environment)
        self._visit_children(node.items)
        self._end(environment)

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem node."""
        self.emit("\\item ")
        self._visit_children(node.children)

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Render a ThematicBreak node."""
        self.emit("\n\\hrulefill\n")

    def visit_html(self, node: HTML) -> None:
        """Render an HTML node verbatim, with ``<br>`` tags as line breaks."""
        self.emit(replace_html_line_breaks(node.content, _LINE_BREAK))

    def visit_footnote_definition(self, node: FootnoteDefinition) -> None:
        """Register a footnote definition; it renders where it is referenced."""
        self.footnotes.register(node)

    def visit_math_block(self, node: MathBlock) -> None:
        """Render a MathBlock node.

        Content that already opens a display environment is emitted as is.
        Otherwise labelled blocks, and all blocks when ``default_to_equation``
        is set, become an ``equation``; the rest use ``\\[ \\]``.

        """
        content = node.content.strip()
        if not node.display:
            self.emit(f"${content}$")
            return

        if self._opens_math_environment(content):
            if node.label:
                logger.debug("Label %s ignored on pre-wrapped math block", node.label)
            self.emit(content + "\n")
        elif node.label or self.options.default_to_equation:
            self.emit("\\begin{equation}" + self.tracker.label(node.label) + "\n")
            self.emit(content + "\n")
            self.emit("\\end{equation}\n")
        else:
            self.emit("\\[\n" + content + "\n\\]\n")

    def _opens_math_environment(self, content: str) -> bool:
        match = re.match(r"\\begin\{([^}]+)\}", content)
        if match is None:
            return False
        environments = DISPLAY_MATH_ENVIRONMENTS + tuple(self.options.additional_math_environments)
        return match.group(1) in environments

    def visit_unknown(self, node: Unknown) -> None:
        """Pass an unknown construct through as a commented block.

        The block starts with ``Unknown Node :: <type>`` and holds the
        literal value, or else the rendered children. Every line is
        commented out and the block always ends with a newline.

        """
        self._report(f"Encountered unknown node type {node.node_type}", node)
        if not self._at_line_start():
            self.emit("\n")
        with self._commented():
            self.emit(f"Unknown Node :: {node.node_type}\n")
            if node.value is not None:
                self.emit(node.value)
            else:
                self._visit_children(node.children)
        if not self._at_line_start():
            self.emit("\n")

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def visit_table(self, node: Table) -> None:
        """Render a Table node in the layout chosen for its size.

        See :func:`~export2tex.renderers._table_layout.plan_table_layout`.

        """
        rows = len(node.rows)
        cols = node.column_count
        record = TableRecord(
            index=len(self._tables),
            rows=rows,
            cols=cols,
            source=slice_source(self.source_text, node.position),
        )
        self._tables.append(record)
        self._items.append(("table", record.index))

        layout = plan_table_layout(rows, cols)
        if layout.warn_large:
            self._report(large_table_message(rows), node)

        if layout.mode is TableMode.SPLIT:
            self._render_split_table(node, layout)
        elif layout.mode is TableMode.FLOWING:
            self._render_flowing_table(node, layout)
        else:
            self._render_fixed_table(node, layout)

    def _begin_condensed(self, layout: TableLayout) -> None:
        if layout.condensed:
            self.emit("{\\small\n")
            self.emit(f"\\setlength{{\\tabcolsep}}{{{CONDENSED_TABCOLSEP}}}\n")

    def _end_condensed(self, layout: TableLayout) -> None:
        if layout.condensed:
            self.emit("}\n")

    def _table_caption(self, node: Table, *, longtable: bool) -> None:
        if not self.options.generate_captions:
            return
        self.emit(f"\\caption{{\\sffamily {DEFAULT_TABLE_CAPTION}}}" + (_LINE_BREAK if longtable else "") + "\n")
        self._label_line(node.label)

    def _render_rows(self, rows: Sequence[TableRow], *, longtable: bool) -> None:
        self.emit("\\toprule\n")
        for index, row in enumerate(rows):
            if index > 0 and self._is_summary_row(row):
                self.emit("\\hline\n")
            row.accept(self)
            self.emit(_LINE_BREAK + "\n")
            if index == 0:
                self.emit("\\midrule\n")
                if longtable:
                    self.emit("\\endhead\n")
        self.emit("\\bottomrule\n")

    def _is_summary_row(self, row: TableRow) -> bool:
        if not row.cells:
            return False
        text = self.render_nodes(row.cells[0].content, isolated=True).strip()
        return is_summary_text(text)

    def _render_fixed_table(self, node: Table, layout: TableLayout) -> None:
        environment = "tabularx" if layout.condensed else "tabular"
        spec = column_spec(node.column_count, layout.mode, layout.condensed)

        self.emit(f"\\begin{{table}}[{self.options.table_position}]\n")
        self.emit("\\centering\n")
        self._table_caption(node, longtable=False)
        self._begin_condensed(layout)
        if layout.condensed:
            self.emit(f"\\begin{{tabularx}}{{\\textwidth}}{{{spec}}}\n")
        else:
            self.emit(f"\\begin{{tabular}}{{{spec}}}\n")
        self._render_rows(node.rows, longtable=False)
        self._end(environment)
        self._end_condensed(layout)
        self._end("table")

    def _render_flowing_table(self, node: Table, layout: TableLayout) -> None:
        spec = column_spec(node.column_count, layout.mode, layout.condensed)

        self._begin_condensed(layout)
        self.emit(f"\\begin{{longtable}}[c]{{{spec}}}\n")
        self._table_caption(node, longtable=True)
        self._render_rows(node.rows, longtable=True)
        self._end("longtable")
        self._end_condensed(layout)

    def _render_split_table(self, node: Table, layout: TableLayout) -> None:
        spec = column_spec(node.column_count, layout.mode, layout.condensed)
        header = node.rows[0]
        chunks = chunk_rows(node.rows[1:])

        self.emit("\\clearpage\n")
        self._begin_condensed(layout)
        for chunk_index, chunk in enumerate(chunks):
            if chunk_index % SPLIT_TABLE_CHUNKS_PER_LINE == 0:
                self.emit("\\noindent\n")
            self.emit(
                f"\\begin{{minipage}}[t][{SPLIT_TABLE_MINIPAGE_HEIGHT_MM}mm][t]"
                f"{{{SPLIT_TABLE_MINIPAGE_WIDTH}\\textwidth}}\n"
            )
            self.emit("\\setlength{\\parskip}{0pt}\n")
            self.emit("\\setlength{\\baselineskip}{10pt}\n")
            self.emit(f"\\begin{{longtable}}[c]{{{spec}}}\n")
            if chunk_index == 0:
                self._table_caption(node, longtable=True)
            self._render_rows([header, *chunk], longtable=True)
            self._end("longtable")
            self._end("minipage")

            completes_line = (chunk_index + 1) % SPLIT_TABLE_CHUNKS_PER_LINE == 0
            is_last = chunk_index == len(chunks) - 1
            if completes_line and not is_last:
                self.emit("\\par\\vspace{1em}\n")
            elif not completes_line:
                self.emit("\\hfill\n")
        self._end_condensed(layout)

    def visit_table_row(self, node: TableRow) -> None:
        """Render a TableRow node as ``&``-joined cells."""
        for index, cell in enumerate(node.cells):
            if index > 0:
                self.emit("&")
            cell.accept(self)

    def visit_table_cell(self, node: TableCell) -> None:
        """Render a TableCell node on a single line.

        Newlines become spaces and hard line breaks become ``\\newline``.
        A line commented out by an unknown-node passthrough keeps its
        newline, so the comment cannot swallow the rest of the row.

        """
        child = self._child(isolated=False)
        child._visit_children(node.content)
        self.emit(child._flattened())

    def _flattened(self) -> str:
        flattened = []
        line_commented = False
        at_line_start = True
        for content, commented in zip(self._output, self._output_commented):
            segments = content.split("\n")
            for i, segment in enumerate(segments):
                if i > 0:
                    flattened.append("\n" if line_commented else " ")
                    at_line_start = True
                    line_commented = False
                if segment and at_line_start:
                    line_commented = commented
                    at_line_start = False
                flattened.append(segment)
        return "".join(flattened).replace(_LINE_BREAK, _CELL_LINE_BREAK)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def visit_image(self, node: Image) -> None:
        """Render an Image node as a figure float or a centred block."""
        record = FigureRecord(
            index=len(self._figures),
            alt=node.alt_text or "",
            title=node.title or None,
            source=slice_source(self.source_text, node.position),
        )
        self._figures.append(record)
        self._items.append(("figure", record.index))

        path = resolve_image_path(node.url, self.options.image_path_settings, self.root_dir, self.export_dir)

        if self.options.generate_captions:
            caption = escape_latex_text(node.alt_text or node.title or DEFAULT_FIGURE_CAPTION)
            self.emit(f"\\begin{{figure}}[{self.options.figure_position}]\n")
            self.emit("\\centering\n")
            self.emit(f"\\includegraphics[width=0.8\\textwidth,keepaspectratio]{{{path}}}\n")
            self.emit(f"\\caption{{\\sffamily {caption}}}\n")
            self._label_line(node.label)
            self._end("figure")
        else:
            self._begin("center")
            self.emit(f"\\includegraphics[width=0.9\\textwidth,keepaspectratio]{{{path}}}\n")
            if node.title or node.alt_text:
                caption = escape_latex_text(" ".join(part for part in (node.title, node.alt_text) if part))
                self.emit(f"\\captionof{{figure}}{{\\sffamily {caption}}}")
                self.emit(self.tracker.label(node.label))
                self.emit("\n")
            self._end("center")

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        """Render a Text node through the escaping pipeline."""
        self.emit(escape_latex_text(node.content))

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node."""
        self._command("emph", node.content)

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node."""
        self._command("textbf", node.content)

    def visit_code(self, node: Code) -> None:
        """Render a Code node with ``\\verb``.

        Code containing every candidate delimiter falls back to ``\\texttt``.

        """
        delimiter = choose_verb_delimiter(node.content)
        if delimiter is None:
            self.emit(f"\\texttt{{{escape_reserved_characters(node.content)}}}")
        else:
            self.emit(f"\\verb{delimiter}{node.content}{delimiter}")

    def visit_link(self, node: Link) -> None:
        """Render a Link node."""
        self.emit(f"\\href{{{escape_url(node.url)}}}{{")
        self._visit_children(node.content)
        self.emit("}")

    def visit_wiki_link(self, node: WikiLink) -> None:
        """Render a WikiLink node as its text followed by a reference.

        The text is the alias, or else the target when it names no heading
        or did not resolve to a label.

        """
        if node.alias is not None:
            text = node.alias
        elif "#" not in node.value or node.label is None:
            text = node.value
        else:
            text = ""
        self.emit(escape_latex_text(text.replace("#", "")))
        self.emit(self.tracker.reference(node.label))

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node."""
        self.emit(_LINE_BREAK + "\n")

    def visit_footnote_reference(self, node: FootnoteReference) -> None:
        """Render a FootnoteReference node.

        A reference with a known definition becomes ``\\footnote{...}``.
        Otherwise, or when a footnote refers back to itself, the reference
        is kept as literal ``[^id]`` text.

        """
        identifier = node.identifier
        definition = self.footnotes.get(identifier)
        if definition is None or identifier in self._active_footnotes:
            if definition is None:
                logger.debug("No definition for footnote %s", identifier)
            self.emit(escape_reserved_characters(f"[^{identifier}]"))
            return

        self._active_footnotes.add(identifier)
        try:
            body = self.render_nodes(definition.content).strip()
        finally:
            self._active_footnotes.discard(identifier)
        self.emit(f"\\footnote{{{body}}}")

    def visit_math_inline(self, node: MathInline) -> None:
        """Render a MathInline node."""
        self.emit(f"${node.content}$")


def render_to_latex(document: Document, options: TexExportSettings | None = None, **kwargs: Any) -> str:
    """Compile ``document`` to a LaTeX body with a new compiler.

    Keyword arguments are passed to :class:`LatexCompiler`.

    """
    return LatexCompiler(options, **kwargs).render_to_string(document)


__all__ = ["LatexCompiler", "TableRecord", "FigureRecord", "OrderedItem", "render_to_latex"]
