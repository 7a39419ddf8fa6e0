#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_template.py
"""Unit tests for preamble repair, placeholders and document assembly."""

from datetime import date

import pytest

from export2tex.constants import DEFAULT_PREAMBLE, REQUIRED_PACKAGES
from export2tex.options import TexExportSettings
from export2tex.template import (
    assemble_document,
    compress_newlines,
    ensure_amsmath,
    ensure_begin_document,
    ensure_document_class,
    ensure_position_packages,
    ensure_required_packages,
    extract_template_keys,
    has_package,
    repair_postamble,
    repair_preamble,
    replace_placeholders,
)


@pytest.mark.unit
class TestPreambleRepair:
    """Tests for making user preambles structurally valid."""

    def test_has_package_with_options(self) -> None:
        """Packages loaded with options count as present."""
        assert has_package("\\usepackage[utf8]{inputenc}", "inputenc")
        assert not has_package("\\usepackage{inputenc}", "input")

    def test_document_class_added(self) -> None:
        """A preamble without a class gets the default class first."""
        assert ensure_document_class("\\usepackage{x}\n") == "\\documentclass{article}\n\\usepackage{x}\n"

    def test_amsmath_after_class(self) -> None:
        """amsmath goes directly after the class line."""
        result = ensure_amsmath("\\documentclass{report}\n\\usepackage{x}\n")
        assert result == "\\documentclass{report}\n\\usepackage{amsmath}\n\\usepackage{x}\n"

    def test_begin_document_appended(self) -> None:
        """A missing begin document is appended on its own line."""
        assert ensure_begin_document("\\documentclass{article}") == "\\documentclass{article}\n\\begin{document}\n"

    def test_required_packages_inserted(self, minimal_preamble: str) -> None:
        """Every missing package is inserted and listed in a comment."""
        result = ensure_required_packages(minimal_preamble)
        for name, _description in REQUIRED_PACKAGES:
            assert has_package(result, name)
        assert result.startswith(
            "\\documentclass{article}\n"
            "% Auto-added required packages: float, lscape, adjustbox, tabularx, booktabs, longtable\n"
        )
        assert result.index("\\usepackage{graphicx}") < result.index("\\usepackage{float}")

    def test_only_missing_packages_listed(self) -> None:
        """Packages already present are neither added nor listed."""
        preamble = "\\documentclass{article}\n" + "".join(
            f"\\usepackage{{{name}}}\n" for name, _ in REQUIRED_PACKAGES if name != "longtable"
        )
        result = ensure_required_packages(preamble)
        assert "% Auto-added required packages: longtable\n" in result
        assert result.count("\\usepackage{float}") == 1

    def test_insert_at_separator(self) -> None:
        """Without anchor packages, packages go before the first separator line."""
        preamble = "\\documentclass{article}\n%%%%\n\\newcommand\\x{y}\n"
        result = ensure_required_packages(preamble)
        assert result.index("\\usepackage{float}") < result.index("%%%%")

    def test_complete_preamble_unchanged(self) -> None:
        """The default preamble needs no repair."""
        assert repair_preamble(DEFAULT_PREAMBLE) == DEFAULT_PREAMBLE

    def test_repair_is_idempotent(self, minimal_preamble: str) -> None:
        """Repairing twice changes nothing the second time."""
        once = repair_preamble(minimal_preamble)
        assert repair_preamble(once) == once
        assert once.count("\\usepackage{amsmath}") == 1
        assert once.rstrip().endswith("\\begin{document}")

    def test_repair_class_line_without_newline(self) -> None:
        """A bare class line is repaired the same way on every pass."""
        once = repair_preamble("\\documentclass{article}")
        assert once.startswith("\\documentclass{article}\n")
        assert once.count("\\usepackage{amsmath}\n") == 1
        assert repair_preamble(once) == once

    def test_document_class_line_terminated(self) -> None:
        """A class line at the end of the text gets a newline."""
        assert ensure_document_class("\\documentclass{article}") == "\\documentclass{article}\n"

    def test_repair_empty_preamble(self) -> None:
        """Even an empty preamble becomes a valid one."""
        result = repair_preamble("")
        assert result.startswith("\\documentclass{article}\n")
        assert "\\begin{document}" in result
        assert has_package(result, "longtable")

    def test_position_packages(self) -> None:
        """The here package is loaded only for positions using '!'."""
        preamble = "\\documentclass{article}\n"
        assert ensure_position_packages(preamble, "h", "H") == preamble
        assert has_package(ensure_position_packages(preamble, "h!", "H"), "here")

    def test_postamble(self) -> None:
        """A missing end document is appended."""
        assert repair_postamble("") == "\\end{document}\n"
        assert repair_postamble("% end") == "% end\n\\end{document}\n"
        assert repair_postamble("\n\\end{document}") == "\n\\end{document}"


@pytest.mark.unit
class TestPlaceholders:
    """Tests for template placeholder substitution."""

    def test_keys(self) -> None:
        """Keys are listed once in first-seen order."""
        assert extract_template_keys("{{title}} {{author}} {{title}}") == ["title", "author"]

    def test_replacement(self) -> None:
        """Values are escaped, dates default to today and the rest is undefined."""
        result = replace_placeholders("{{a}} {{date}} {{missing}}", {"a": "A_B"}, today=date(2024, 1, 2))
        assert result == "A\\_B 2024-01-02 undefined"

    def test_given_date_wins(self) -> None:
        """An explicit date value is used as is."""
        assert replace_placeholders("{{date}}", {"date": "Spring"}, today=date(2024, 1, 2)) == "Spring"

    def test_title_braces(self) -> None:
        """Placeholders inside command braces are filled."""
        assert replace_placeholders("\\title{{{title}}}", {"title": "Notes"}) == "\\title{Notes}"


@pytest.mark.unit
class TestAssembly:
    """Tests for compressing and assembling documents."""

    def test_compress_newlines(self) -> None:
        """Runs of empty lines collapse into one."""
        assert compress_newlines("a\n\n\n\nb\n") == "a\n\nb"
        assert compress_newlines("\n\na\nb") == "\na\nb"

    def test_assemble_with_title(self) -> None:
        """The title is followed by maketitle, the body and the postamble."""
        tex = assemble_document("BODY", TexExportSettings(), {"title": "Notes", "author": "Ann"}, date(2024, 1, 2))
        assert tex.startswith("\\documentclass[paper=a4]{jlreq}\n")
        assert "\\title{Notes}\n\\author{Ann}\n\\date{2024-01-02}\n" in tex
        assert tex.endswith("\\begin{document}\n\n\\maketitle" + "BODY" + "\n\\end{document}")

    def test_assemble_without_title(self) -> None:
        """No maketitle is written without a title."""
        tex = assemble_document("BODY", TexExportSettings(), {})
        assert "\\maketitle" not in tex
        assert "\\title{undefined}" in tex

    def test_assemble_loads_here_for_bang_positions(self) -> None:
        """Captioned floats with '!' positions load the here package."""
        tex = assemble_document("", TexExportSettings(figure_position="h!"), {"title": "T"})
        assert has_package(tex, "here")

    def test_assemble_repairs_custom_templates(self) -> None:
        """Custom templates are repaired during assembly."""
        settings = TexExportSettings(preamble="\\usepackage{graphicx}\n", postamble="")
        tex = assemble_document("x", settings, {})
        assert tex.startswith("\\documentclass{article}\n")
        assert tex.endswith("x\\end{document}\n")
