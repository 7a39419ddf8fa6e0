#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/renderers/test_latex_tables.py
"""Unit tests for table rendering in fixed, flowing and split modes."""

import pytest
from utils import make_table, text_cell

from export2tex.ast import HTML, Document, Image, Paragraph, Table, TableCell, TableRow, Text, Unknown
from export2tex.options import TexExportSettings
from export2tex.renderers import LatexCompiler


def compile_table(table: Table, settings=None) -> tuple[str, LatexCompiler]:
    compiler = LatexCompiler(settings)
    return compiler.render_to_string(Document(children=[table])), compiler


@pytest.mark.unit
class TestFixedTables:
    """Tests for short tables rendered as floats."""

    def test_three_by_three(self) -> None:
        """A small table is a captioned tabular float."""
        output, compiler = compile_table(make_table(3, 3))
        assert output == (
            "\\begin{table}[H]\n"
            "\\centering\n"
            "\\caption{\\sffamily Table}\n"
            "\\begin{tabular}{l l l}\n"
            "\\toprule\n"
            "H0&H1&H2\\\\\n"
            "\\midrule\n"
            "r1c0&r1c1&r1c2\\\\\n"
            "r2c0&r2c1&r2c2\\\\\n"
            "\\bottomrule\n"
            "\\end{tabular}\n"
            "\\end{table}\n"
        )
        assert len(compiler.diagnostics) == 0

    def test_label_follows_caption(self) -> None:
        """The label is written on its own line after the caption."""
        output, _ = compile_table(make_table(2, 2, label="tab:1"))
        assert "\\caption{\\sffamily Table}\n\\label{tab:1}\n\\begin{tabular}" in output

    def test_table_position(self) -> None:
        """The float uses the configured position."""
        output, _ = compile_table(make_table(2, 2), TexExportSettings(table_position="htbp"))
        assert output.startswith("\\begin{table}[htbp]\n")

    def test_without_captions(self) -> None:
        """Without captions no caption or label is written."""
        output, _ = compile_table(make_table(2, 2, label="tab:1"), TexExportSettings(generate_captions=False))
        assert "\\caption" not in output
        assert "\\label" not in output

    def test_condensed_wide_table(self) -> None:
        """Six columns give a small-font tabularx with X columns."""
        output, _ = compile_table(make_table(3, 6))
        assert (
            "\\caption{\\sffamily Table}\n"
            "{\\small\n"
            "\\setlength{\\tabcolsep}{2pt}\n"
            "\\begin{tabularx}{\\textwidth}{XXXXXX}\n"
        ) in output
        assert output.endswith("\\end{tabularx}\n}\n\\end{table}\n")

    def test_summary_row_gets_rule(self) -> None:
        """A row starting with a summary keyword is preceded by a rule."""
        output, _ = compile_table(make_table(4, 2, first_column=["Item", "A", "B", "Total"]))
        assert "B&r2c1\\\\\n\\hline\nTotal&r3c1\\\\\n" in output
        assert output.count("\\hline") == 1

    def test_summary_header_gets_no_rule(self) -> None:
        """The header row is never treated as a summary row."""
        output, _ = compile_table(make_table(3, 2, first_column=["Total", "a", "b"]))
        assert "\\hline" not in output

    def test_cell_escaping(self) -> None:
        """Cell text is escaped."""
        table = Table(rows=[TableRow(cells=[text_cell("50%")]), TableRow(cells=[text_cell("a_b")])])
        output, _ = compile_table(table)
        assert "50\\%\\\\\n" in output
        assert "a\\_b\\\\\n" in output

    def test_summary_check_reports_nothing(self) -> None:
        """Inspecting the first cell for a summary keyword leaves no diagnostics."""
        table = Table(
            rows=[
                TableRow(cells=[text_cell("H")]),
                TableRow(cells=[TableCell(content=[Unknown(node_type="mark", value="v")])]),
            ]
        )
        output, compiler = compile_table(table)
        assert compiler.diagnostics.messages == ["Encountered unknown node type mark"]
        assert "%Unknown Node :: mark\n%v\n\\\\\n" in output

    def test_cell_newlines_become_spaces(self) -> None:
        """Raw newlines in cell text are replaced with spaces."""
        table = Table(rows=[TableRow(cells=[text_cell("H")]), TableRow(cells=[text_cell("a\nb")])])
        output, _ = compile_table(table)
        assert "\\midrule\na b\\\\\n" in output

    def test_raw_percent_line_in_cell_is_flattened(self) -> None:
        """Raw content starting with a percent sign is still kept on one line."""
        table = Table(
            rows=[TableRow(cells=[text_cell("H")]), TableRow(cells=[TableCell(content=[HTML(content="%x\ny")])])]
        )
        output, _ = compile_table(table)
        assert "\\midrule\n%x y\\\\\n" in output

    def test_table_record(self) -> None:
        """Tables are recorded with their dimensions."""
        _, compiler = compile_table(make_table(4, 3))
        record = compiler.tables[0]
        assert (record.index, record.rows, record.cols) == (0, 4, 3)


@pytest.mark.unit
class TestFlowingTables:
    """Tests for long tables rendered as longtable."""

    def test_thirty_five_rows(self) -> None:
        """A long table flows across pages with a repeated header."""
        output, compiler = compile_table(make_table(35, 3, label="tab:1"))
        assert output.startswith(
            "\\begin{longtable}[c]{l l l}\n"
            "\\caption{\\sffamily Table}\\\\\n"
            "\\label{tab:1}\n"
            "\\toprule\n"
            "H0&H1&H2\\\\\n"
            "\\midrule\n"
            "\\endhead\n"
        )
        assert output.endswith("\\bottomrule\n\\end{longtable}\n")
        assert "\\begin{table}" not in output
        assert len(compiler.diagnostics) == 0

    def test_large_wide_table_warns(self) -> None:
        """A table over fifty rows with five columns flows and warns."""
        output, compiler = compile_table(make_table(55, 5))
        assert output.startswith("\\begin{longtable}")
        assert compiler.diagnostics.messages == [
            "Large table detected (55 rows). Export may be slow or cause freezing."
        ]

    def test_summary_row_in_flowing_table(self) -> None:
        """Summary rows get a rule in flowing tables too."""
        table = make_table(35, 3)
        table.rows[34].cells[0] = text_cell("Total")
        output, _ = compile_table(table)
        assert output.startswith("\\begin{longtable}")
        assert "r33c2\\\\\n\\hline\nTotal&r34c1&r34c2\\\\\n" in output
        assert output.count("\\hline") == 1

    def test_condensed_flowing_table(self) -> None:
        """Wide flowing tables keep l columns inside the small group."""
        output, _ = compile_table(make_table(40, 6))
        assert output.startswith("{\\small\n\\setlength{\\tabcolsep}{2pt}\n\\begin{longtable}[c]{l l l l l l}\n")
        assert output.endswith("\\end{longtable}\n}\n")


@pytest.mark.unit
class TestSplitTables:
    """Tests for long narrow tables split into side-by-side columns."""

    def test_sixty_rows(self) -> None:
        """Sixty rows give two minipages on one line."""
        output, compiler = compile_table(make_table(60, 3))
        assert output.startswith("\\clearpage\n\\noindent\n")
        assert output.count("\\begin{minipage}[t][115mm][t]{0.48\\textwidth}\n") == 2
        assert output.count("\\caption") == 1
        assert output.count("\\hfill") == 1
        assert "\\par\\vspace{1em}" not in output
        assert output.count("\\endhead") == 2
        assert output.count("H0&H1&H2\\\\\n") == 2
        assert len(compiler.diagnostics) == 1

    def test_chunk_contents(self) -> None:
        """The first minipage holds thirty body rows, the second the rest."""
        output, _ = compile_table(make_table(60, 3))
        first, second = output.split("\\end{minipage}\n")[:2]
        assert "r30c0" in first and "r31c0" not in first
        assert "r31c0" in second and "r59c0" in second

    def test_many_chunks_wrap_lines(self) -> None:
        """Every second minipage ends a line, separated by vertical space."""
        output, _ = compile_table(make_table(130, 2))
        assert output.count("\\begin{minipage}") == 5
        assert output.count("\\noindent") == 3
        assert output.count("\\hfill") == 3
        assert output.count("\\par\\vspace{1em}") == 2

    def test_summary_row_in_second_chunk(self) -> None:
        """A summary row in a later chunk gets a rule; repeated headers do not."""
        table = make_table(60, 3, first_column=["Total"])
        table.rows[45].cells[0] = text_cell("合計")
        output, _ = compile_table(table)
        first, second = output.split("\\end{minipage}\n")[:2]
        assert "\\hline" not in first
        assert "r44c2\\\\\n\\hline\n合計&r45c1&r45c2\\\\\n" in second
        assert output.count("\\hline") == 1
        assert output.count("Total&H1&H2\\\\\n\\midrule\n") == 2

    def test_split_label_in_first_chunk(self) -> None:
        """The caption and label appear once, in the first chunk."""
        output, compiler = compile_table(make_table(60, 4, label="tab:big"))
        assert output.count("\\label{tab:big}") == 1
        assert compiler.tracker.defined_labels == ["tab:big"]


@pytest.mark.unit
class TestTableOrdering:
    """Tests for table and figure ordering."""

    def test_items_in_document_order(self) -> None:
        """Tables and figures are interleaved in the order they appear."""
        doc = Document(
            children=[
                Image(url="a.png"),
                make_table(2, 2),
                Paragraph(content=[Text(content="x")]),
                Image(url="b.png"),
                make_table(2, 2),
            ]
        )
        compiler = LatexCompiler()
        compiler.render_to_string(doc)
        assert [(item.kind, item.display_index) for item in compiler.items_in_order] == [
            ("figure", 0),
            ("table", 0),
            ("figure", 1),
            ("table", 1),
        ]
