#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for label assignment and heading slugs."""

import pytest
from utils import make_table

from export2tex.ast import (
    Document,
    Emphasis,
    Heading,
    Image,
    MathBlock,
    Text,
    WikiLink,
    assign_labels,
    extract_text,
    slugify,
)


def heading(text: str, label=None) -> Heading:
    return Heading(level=1, content=[Text(content=text)], label=label)


@pytest.mark.unit
class TestSlugify:
    """Tests for heading slugs."""

    def test_basic(self) -> None:
        """Words are lowercased and joined with hyphens."""
        assert slugify("Hello World!") == "hello-world"

    def test_accents_stripped(self) -> None:
        """Accents are removed."""
        assert slugify("Café résumé") == "cafe-resume"

    def test_cjk_kept(self) -> None:
        """CJK text survives."""
        assert slugify("はじめに") == "はじめに"

    def test_empty_falls_back(self) -> None:
        """Text with no word characters gets a fallback slug."""
        assert slugify("!!!") == "section"

    def test_collisions(self) -> None:
        """Repeated slugs get numeric suffixes."""
        seen: set[str] = set()
        assert [slugify("A", seen_slugs=seen) for _ in range(3)] == ["a", "a-2", "a-3"]

    def test_extract_text(self) -> None:
        """Text is gathered from nested inline nodes."""
        node = Heading(level=1, content=[Text(content="Hello "), Emphasis(content=[Text(content="world")])])
        assert extract_text(node, joiner="") == "Hello world"


@pytest.mark.unit
class TestAssignLabels:
    """Tests for assigning label ids."""

    def test_labels_by_kind(self) -> None:
        """Headings, tables, figures and identified equations get labels."""
        doc = Document(
            children=[
                heading("Intro"),
                heading("Intro"),
                make_table(2, 2),
                Image(url="a.png"),
                MathBlock(content="E", metadata={"id": "energy"}),
                MathBlock(content="F"),
            ]
        )
        labelled = assign_labels(doc)
        labels = [getattr(node, "label", None) for node in labelled.children]
        assert labels == ["sec:intro", "sec:intro-2", "tab:1", "fig:1", "eq:energy", None]

    def test_original_tree_untouched(self) -> None:
        """A copy is labelled unless in_place is requested."""
        doc = Document(children=[heading("Intro")])
        assign_labels(doc)
        assert doc.children[0].label is None
        assign_labels(doc, in_place=True)
        assert doc.children[0].label == "sec:intro"

    def test_existing_labels_reserved(self) -> None:
        """Generated labels avoid labels already present."""
        doc = Document(children=[heading("Other", label="sec:intro"), heading("Intro")])
        labelled = assign_labels(doc)
        assert [h.label for h in labelled.children] == ["sec:intro", "sec:intro-2"]

    def test_existing_table_label_reserved(self) -> None:
        """Counter labels skip ids already in use."""
        doc = Document(children=[make_table(2, 2, label="tab:1"), make_table(2, 2)])
        labelled = assign_labels(doc)
        assert [t.label for t in labelled.children] == ["tab:1", "tab:2"]

    def test_wiki_link_resolves_to_heading(self) -> None:
        """Wiki links to a heading point at its label."""
        doc = Document(children=[heading("Getting Started"), WikiLink(value="Note#Getting Started")])
        labelled = assign_labels(doc)
        assert labelled.children[1].label == "sec:getting-started"

    def test_wiki_link_without_match(self) -> None:
        """Wiki links to missing headings stay unlabelled."""
        doc = Document(children=[heading("Intro"), WikiLink(value="Note#Elsewhere"), WikiLink(value="Note")])
        labelled = assign_labels(doc)
        assert labelled.children[1].label is None
        assert labelled.children[2].label is None
