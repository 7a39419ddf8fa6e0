#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/renderers/test_latex_compiler.py
"""Unit tests for compiling AST nodes to a LaTeX body.

Tests cover:
- Block nodes (headings, paragraphs, lists, quotes, code, math)
- Inline nodes (emphasis, code, links, wiki links, line breaks)
- Unknown nodes passed through as comments
- Footnote resolution
- Images in figure and centred modes
- Sub-render isolation
- Settings validation

"""

from io import StringIO

import pytest

from export2tex.ast import (
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
    Paragraph,
    Strong,
    TableCell,
    Text,
    ThematicBreak,
    Unknown,
    WikiLink,
)
from export2tex.exceptions import InvalidOptionsError
from export2tex.options import BaseRendererOptions, TexExportSettings
from export2tex.renderers import LatexCompiler, render_to_latex


def compile_nodes(*nodes, settings=None) -> str:
    return LatexCompiler(settings).render_to_string(Document(children=list(nodes)))


@pytest.mark.unit
class TestBlockNodes:
    """Tests for block-level nodes."""

    def test_heading_with_label(self) -> None:
        """A heading becomes a sectioning command followed by its label."""
        heading = Heading(level=1, content=[Text(content="Intro")], label="sec:intro")
        assert compile_nodes(heading) == "\\section{Intro}\\label{sec:intro}"

    @pytest.mark.parametrize(
        "level,command",
        [
            (1, "section"),
            (2, "subsection"),
            (3, "subsubsection"),
            (4, "paragraph"),
            (5, "subparagraph"),
        ],
    )
    def test_heading_levels(self, level: int, command: str) -> None:
        """Heading levels map onto the sectioning commands."""
        heading = Heading(level=level, content=[Text(content="X")])
        assert compile_nodes(heading) == f"\\{command}{{X}}"

    def test_heading_beyond_level_five_is_skipped(self) -> None:
        """Headings deeper than level five produce nothing."""
        heading = Heading(level=6, content=[Text(content="Deep")])
        assert compile_nodes(heading) == ""

    def test_unnumbered_sections(self) -> None:
        """Disabling numbered sections appends a star."""
        settings = TexExportSettings(numbered_sections=False)
        heading = Heading(level=2, content=[Text(content="Intro")])
        assert compile_nodes(heading, settings=settings) == "\\subsection*{Intro}"

    def test_paragraph_escapes_text(self) -> None:
        """Paragraph text runs through the escaping pipeline."""
        assert compile_nodes(Paragraph(content=[Text(content="50%")])) == "\n50\\%\n"

    def test_unordered_list(self) -> None:
        """Unordered lists use itemize."""
        node = List(ordered=False, items=[ListItem(children=[Paragraph(content=[Text(content="a")])])])
        assert compile_nodes(node) == "\\begin{itemize}\n\\item \na\n\\end{itemize}\n"

    def test_ordered_list(self) -> None:
        """Ordered lists use enumerate."""
        node = List(ordered=True, items=[ListItem(children=[Text(content="a")]), ListItem(children=[Text(content="b")])])
        assert compile_nodes(node) == "\\begin{enumerate}\n\\item a\\item b\\end{enumerate}\n"

    def test_block_quote(self) -> None:
        """Block quotes use the quote environment."""
        node = BlockQuote(children=[Paragraph(content=[Text(content="Quoted")])])
        assert compile_nodes(node) == "\\begin{quote}\n\nQuoted\n\\end{quote}\n"

    def test_code_block_with_language(self) -> None:
        """The language goes on a comment line before the verbatim block."""
        node = CodeBlock(content="print(1)", language="python")
        assert compile_nodes(node) == "% python\n\\begin{verbatim}\nprint(1)\n\\end{verbatim}\n"

    def test_code_block_with_language_and_meta(self) -> None:
        """Language and meta share the comment line."""
        node = CodeBlock(content="x", language="js", meta="title=a.js")
        assert compile_nodes(node).startswith("% js title=a.js\n\\begin{verbatim}\n")

    def test_code_block_without_language(self) -> None:
        """No comment line is written when there is no language."""
        node = CodeBlock(content="50% & more")
        assert compile_nodes(node) == "\\begin{verbatim}\n50% & more\n\\end{verbatim}\n"

    def test_thematic_break(self) -> None:
        """Thematic breaks become a horizontal rule."""
        assert compile_nodes(ThematicBreak()) == "\n\\hrulefill\n"

    def test_html_line_breaks(self) -> None:
        """HTML passes through with br tags as line breaks."""
        assert compile_nodes(HTML(content="a<br>b<BR />c")) == "a\\\\b\\\\c"


@pytest.mark.unit
class TestMath:
    """Tests for inline and display math."""

    def test_display_math(self) -> None:
        """Unlabelled display math uses the bracket form."""
        assert compile_nodes(MathBlock(content="x^2")) == "\\[\nx^2\n\\]\n"

    def test_labelled_display_math(self) -> None:
        """Labelled display math becomes an equation with its label."""
        node = MathBlock(content="x^2", label="eq:a")
        assert compile_nodes(node) == "\\begin{equation}\\label{eq:a}\nx^2\n\\end{equation}\n"

    def test_default_to_equation(self) -> None:
        """The setting wraps unlabelled display math in an equation."""
        settings = TexExportSettings(default_to_equation=True)
        assert compile_nodes(MathBlock(content="y"), settings=settings) == "\\begin{equation}\ny\n\\end{equation}\n"

    def test_prewrapped_environment_passes_through(self) -> None:
        """Math that already opens a display environment is kept as is."""
        content = "\\begin{align}\na &= b\n\\end{align}"
        assert compile_nodes(MathBlock(content=content)) == content + "\n"

    def test_additional_math_environment(self) -> None:
        """Extra environments from settings pass through as well."""
        settings = TexExportSettings(additional_math_environments=("dmath",))
        content = "\\begin{dmath}\nx\n\\end{dmath}"
        assert compile_nodes(MathBlock(content=content), settings=settings) == content + "\n"

    def test_non_display_math_block(self) -> None:
        """A math block not marked display renders inline."""
        assert compile_nodes(MathBlock(content=" x ", display=False)) == "$x$"

    def test_inline_math(self) -> None:
        """Inline math is wrapped in dollars without escaping."""
        assert compile_nodes(Paragraph(content=[MathInline(content="a_1")])) == "\n$a_1$\n"


@pytest.mark.unit
class TestInlineNodes:
    """Tests for inline nodes."""

    def test_emphasis_and_strong(self) -> None:
        """Emphasis and strong map onto emph and textbf."""
        para = Paragraph(content=[Emphasis(content=[Text(content="a")]), Strong(content=[Text(content="b")])])
        assert compile_nodes(para) == "\n\\emph{a}\\textbf{b}\n"

    def test_inline_code_picks_unused_delimiter(self) -> None:
        """The verb delimiter avoids characters in the code."""
        assert compile_nodes(Code(content="a|b")) == "\\verb!a|b!"

    def test_inline_code_falls_back_to_texttt(self) -> None:
        """Code containing every delimiter uses an escaped texttt."""
        content = "|!+@=/;:^~-.,'\"?*_"
        result = compile_nodes(Code(content=content))
        assert result.startswith("\\texttt{")
        assert "\\_" in result

    def test_link_escapes_url(self) -> None:
        """Link targets have percent and hash escaped."""
        node = Link(url="https://example.com/a%20b#top", content=[Text(content="site")])
        assert compile_nodes(node) == "\\href{https://example.com/a\\%20b\\#top}{site}"

    def test_line_break(self) -> None:
        """Hard line breaks end the line."""
        para = Paragraph(content=[Text(content="a"), LineBreak(), Text(content="b")])
        assert compile_nodes(para) == "\na\\\\\nb\n"

    def test_wiki_link_to_heading(self) -> None:
        """A resolved heading link emits only the reference."""
        node = WikiLink(value="Note#Intro", label="sec:intro")
        assert compile_nodes(node) == "\\cref{sec:intro}"

    def test_wiki_link_with_alias(self) -> None:
        """The alias is written before the reference."""
        node = WikiLink(value="Note#Intro", alias="see here", label="sec:intro")
        assert compile_nodes(node) == "see here\\cref{sec:intro}"

    def test_wiki_link_without_label(self) -> None:
        """An unresolved link keeps its target text with the hash removed."""
        assert compile_nodes(WikiLink(value="Other#Part")) == "OtherPart"

    def test_wiki_link_uses_ref_command(self) -> None:
        """References use the configured command."""
        settings = TexExportSettings(ref_command="autoref")
        node = WikiLink(value="Note#Intro", label="sec:intro")
        assert compile_nodes(node, settings=settings) == "\\autoref{sec:intro}"


@pytest.mark.unit
class TestUnknownNodes:
    """Tests for constructs passed through as comments."""

    def test_unknown_between_paragraphs(self) -> None:
        """Every line of the block is commented and the block ends a line."""
        compiler = LatexCompiler()
        doc = Document(
            children=[
                Paragraph(content=[Text(content="Before")]),
                Unknown(node_type="video", value="<video src=x>"),
                Paragraph(content=[Text(content="After")]),
            ]
        )
        assert compiler.render_to_string(doc) == "\nBefore\n%Unknown Node :: video\n%<video src=x>\n\nAfter\n"
        assert compiler.diagnostics.messages == ["Encountered unknown node type video"]

    def test_unknown_after_inline_content_starts_new_line(self) -> None:
        """An unknown node inside a line starts its block on a new line."""
        para = Paragraph(content=[Text(content="x"), Unknown(node_type="mark", value="y")])
        assert compile_nodes(para) == "\nx\n%Unknown Node :: mark\n%y\n\n"

    def test_unknown_children_are_commented(self) -> None:
        """Without a value the children are rendered, commented out."""
        node = Unknown(node_type="container", children=[Paragraph(content=[Text(content="inner")])])
        assert compile_nodes(node) == "%Unknown Node :: container\n%\n%inner\n"

    def test_multiline_value(self) -> None:
        """Multi-line values are commented line by line."""
        node = Unknown(node_type="custom", value="a\nb")
        assert compile_nodes(node) == "%Unknown Node :: custom\n%a\n%b\n"


@pytest.mark.unit
class TestFootnotes:
    """Tests for footnote resolution."""

    def test_reference_resolves_to_footnote(self) -> None:
        """A reference becomes a footnote holding its definition."""
        doc = Document(
            children=[
                Paragraph(content=[Text(content="See"), FootnoteReference(identifier="1")]),
                FootnoteDefinition(identifier="1", content=[Paragraph(content=[Text(content="Note")])]),
            ]
        )
        assert LatexCompiler().render_to_string(doc) == "\nSee\\footnote{Note}\n"

    def test_definition_after_reference_in_nested_content(self) -> None:
        """Definitions anywhere in the tree are known before compilation."""
        doc = Document(
            children=[
                BlockQuote(children=[Paragraph(content=[FootnoteReference(identifier="a")])]),
                BlockQuote(
                    children=[FootnoteDefinition(identifier="a", content=[Paragraph(content=[Text(content="A")])])]
                ),
            ]
        )
        assert "\\footnote{A}" in LatexCompiler().render_to_string(doc)

    def test_missing_definition_is_literal(self) -> None:
        """A reference without a definition stays as escaped text."""
        para = Paragraph(content=[FootnoteReference(identifier="x_1")])
        assert compile_nodes(para) == "\n[\\textasciicircum{}x\\_1]\n"

    def test_self_reference_does_not_recurse(self) -> None:
        """A footnote citing itself keeps the inner reference literal."""
        doc = Document(
            children=[
                Paragraph(content=[FootnoteReference(identifier="1")]),
                FootnoteDefinition(
                    identifier="1",
                    content=[Paragraph(content=[Text(content="a"), FootnoteReference(identifier="1")])],
                ),
            ]
        )
        assert LatexCompiler().render_to_string(doc) == "\n\\footnote{a[\\textasciicircum{}1]}\n"


@pytest.mark.unit
class TestImages:
    """Tests for image rendering."""

    def test_figure_with_caption_and_label(self) -> None:
        """With captions on, images become figure floats."""
        node = Image(url="img/a.png", alt_text="A plot", label="fig:1")
        assert compile_nodes(node) == (
            "\\begin{figure}[h]\n"
            "\\centering\n"
            "\\includegraphics[width=0.8\\textwidth,keepaspectratio]{img/a.png}\n"
            "\\caption{\\sffamily A plot}\n"
            "\\label{fig:1}\n"
            "\\end{figure}\n"
        )

    def test_figure_caption_fallbacks(self) -> None:
        """The caption falls back to the title, then to a default."""
        assert "\\caption{\\sffamily T}" in compile_nodes(Image(url="a.png", title="T"))
        assert "\\caption{\\sffamily Figure}" in compile_nodes(Image(url="a.png"))

    def test_figure_caption_is_escaped(self) -> None:
        """Alt text is escaped in the caption."""
        assert "\\caption{\\sffamily 100\\% growth}" in compile_nodes(Image(url="a.png", alt_text="100% growth"))

    def test_figure_position(self) -> None:
        """The figure float uses the configured position."""
        settings = TexExportSettings(figure_position="tb")
        assert compile_nodes(Image(url="a.png"), settings=settings).startswith("\\begin{figure}[tb]\n")

    def test_centred_image_without_captions(self) -> None:
        """With captions off, images are centred with captionof."""
        settings = TexExportSettings(generate_captions=False)
        node = Image(url="img/a.png", alt_text="A", title="T", label="fig:1")
        assert compile_nodes(node, settings=settings) == (
            "\\begin{center}\n"
            "\\includegraphics[width=0.9\\textwidth,keepaspectratio]{img/a.png}\n"
            "\\captionof{figure}{\\sffamily T A}\\label{fig:1}\n"
            "\\end{center}\n"
        )

    def test_centred_image_without_text(self) -> None:
        """No caption line is written when there is no alt or title."""
        settings = TexExportSettings(generate_captions=False)
        assert "captionof" not in compile_nodes(Image(url="a.png"), settings=settings)

    def test_image_records(self) -> None:
        """Images are recorded with their alt text and title."""
        compiler = LatexCompiler()
        compiler.render_to_string(Document(children=[Image(url="a.png", alt_text="A"), Image(url="b.png", title="B")]))
        assert [(f.index, f.alt, f.title) for f in compiler.figures] == [(0, "A", None), (1, "", "B")]
        assert [(i.kind, i.display_index) for i in compiler.items_in_order] == [("figure", 0), ("figure", 1)]


@pytest.mark.unit
class TestSubRenders:
    """Tests for rendering content into separate strings."""

    def test_render_nodes_leaves_buffer_untouched(self) -> None:
        """A sub-render returns its text without writing to the buffer."""
        compiler = LatexCompiler()
        text = compiler.render_nodes([Text(content="a&b")])
        assert text == "a\\&b"
        assert compiler.to_string() == ""

    def test_isolated_render_discards_labels(self) -> None:
        """Labels defined by an isolated render do not reach the parent."""
        compiler = LatexCompiler()
        compiler.render_nodes([Heading(level=1, content=[Text(content="A")], label="sec:a")], isolated=True)
        assert compiler.tracker.defined_labels == []

    def test_shared_render_keeps_labels(self) -> None:
        """Labels defined by a shared render are kept."""
        compiler = LatexCompiler()
        compiler.render_nodes([Heading(level=1, content=[Text(content="A")], label="sec:a")])
        assert compiler.tracker.defined_labels == ["sec:a"]

    def test_isolated_render_discards_diagnostics(self) -> None:
        """Diagnostics from an isolated render are dropped."""
        compiler = LatexCompiler()
        compiler.render_nodes([Unknown(node_type="x", value="y")], isolated=True)
        assert len(compiler.diagnostics) == 0

    def test_cell_line_break_becomes_newline_command(self) -> None:
        """Table cells are flattened onto one line."""
        cell = TableCell(content=[Text(content="a"), LineBreak(), Text(content="b")])
        compiler = LatexCompiler()
        cell.accept(compiler)
        assert compiler.to_string() == "a\\newline b"

    def test_render_to_string_resets_state(self) -> None:
        """Compiling twice gives the same output and fresh bookkeeping."""
        compiler = LatexCompiler()
        doc = Document(children=[Heading(level=1, content=[Text(content="A")], label="sec:a"), Image(url="a.png")])
        first = compiler.render_to_string(doc)
        second = compiler.render_to_string(doc)
        assert first == second
        assert compiler.tracker.defined_labels == ["sec:a"]
        assert len(compiler.figures) == 1


@pytest.mark.unit
class TestCompilerInterface:
    """Tests for construction and output helpers."""

    def test_wrong_settings_type_raises(self) -> None:
        """Settings of another class are rejected."""
        with pytest.raises(InvalidOptionsError):
            LatexCompiler(BaseRendererOptions())

    def test_render_writes_to_stream(self) -> None:
        """The rendered body can be written to a text stream."""
        buffer = StringIO()
        LatexCompiler().render(Document(children=[Paragraph(content=[Text(content="x")])]), buffer)
        assert buffer.getvalue() == "\nx\n"

    def test_render_to_latex_function(self) -> None:
        """The module function compiles with a fresh compiler."""
        doc = Document(children=[Heading(level=3, content=[Text(content="α")])])
        assert render_to_latex(doc) == "\\subsubsection{\\alpha{}}"

    def test_unresolved_references_are_tracked(self) -> None:
        """References to labels never defined are reported by the tracker."""
        compiler = LatexCompiler()
        compiler.render_to_string(Document(children=[WikiLink(value="N#X", label="sec:x")]))
        assert compiler.tracker.unresolved_references() == ["sec:x"]
