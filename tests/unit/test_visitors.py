#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the node protocol validator and tree helpers."""

import pytest

from mdattrs.ast import (
    ESCAPED_OFFSETS_KEY,
    AttributeBlock,
    BlockQuote,
    Code,
    Document,
    Emphasis,
    Heading,
    Image,
    NodeVisitor,
    Paragraph,
    SourcePoint,
    SourceSpan,
    Text,
    ValidationVisitor,
    advance_point,
    extract_text,
    get_children,
    merge_adjacent_text,
    walk,
)
from mdattrs.exceptions import ValidationError


@pytest.mark.unit
class TestValidationVisitor:
    """Test node protocol checks."""

    def test_valid_tree(self) -> None:
        """Test a well-formed tree passes."""
        doc = Document(
            children=[
                Heading(level=1, children=[Text(content="T")], properties={"id": "t"}),
                BlockQuote(children=[Paragraph(children=[Emphasis(children=[Text(content="e")])])]),
            ]
        )
        validator = ValidationVisitor()
        doc.accept(validator)

        assert validator.errors == []

    def test_block_inside_paragraph(self) -> None:
        """Test paragraphs may only hold inline nodes."""
        doc = Document(children=[Paragraph(children=[BlockQuote()])])

        with pytest.raises(ValidationError, match="inline"):
            doc.accept(ValidationVisitor())

    def test_non_string_property(self) -> None:
        """Test property bags map strings to strings."""
        doc = Document(children=[Paragraph(properties={"width": 100})])  # type: ignore[dict-item]

        with pytest.raises(ValidationError):
            doc.accept(ValidationVisitor())

    def test_reversed_position(self) -> None:
        """Test a span that ends before it starts."""
        span = SourceSpan(start=SourcePoint(2, 1, 10), end=SourcePoint(1, 1, 0))
        with pytest.raises(ValidationError, match="starts after it ends"):
            Text(content="x", position=span).accept(ValidationVisitor())

    def test_zero_based_position(self) -> None:
        """Test lines and columns must be 1-based."""
        span = SourceSpan(start=SourcePoint(0, 0), end=SourcePoint(1, 1))
        with pytest.raises(ValidationError):
            Text(content="x", position=span).accept(ValidationVisitor())

    def test_empty_attribute_record(self) -> None:
        """Test detached blocks need a record."""
        with pytest.raises(ValidationError):
            AttributeBlock(record={}, source="{}").accept(ValidationVisitor())

    def test_non_strict_collects_errors(self) -> None:
        """Test every problem is collected when not strict."""
        heading = Heading(level=1, children=[Text(content="T")])
        heading.level = 9
        doc = Document(children=[heading, Paragraph(children=["raw"])])  # type: ignore[list-item]
        validator = ValidationVisitor(strict=False)
        doc.accept(validator)

        assert len(validator.errors) == 2
        assert "heading level" in validator.errors[0]
        assert "not a node" in validator.errors[1]


@pytest.mark.unit
class TestNodeVisitor:
    """Test dispatch through accept."""

    def test_subclass_dispatch(self) -> None:
        """Test a visitor reaches every node it walks to."""

        class KindCollector(NodeVisitor):
            def __init__(self):
                self.kinds: list[str] = []

            def generic_visit(self, node):
                self.kinds.append(node.node_type)
                for child in get_children(node) or []:
                    child.accept(self)

        doc = Document(children=[Paragraph(children=[Text(content="a"), Code(content="b")])])
        collector = KindCollector()
        doc.accept(collector)

        assert collector.kinds == ["root", "paragraph", "text", "inlineCode"]


@pytest.mark.unit
class TestTreeHelpers:
    """Test traversal and text helpers."""

    def test_get_children(self) -> None:
        """Test child lists are returned as the node's own list."""
        para = Paragraph(children=[Text(content="a")])

        assert get_children(para) is para.children
        assert get_children(Text(content="a")) is None

    def test_get_children_rejects_non_list(self) -> None:
        """Test a broken children value raises."""
        with pytest.raises(ValidationError):
            get_children(Paragraph(children="text"))  # type: ignore[arg-type]

    def test_walk_document_order(self) -> None:
        """Test nodes are visited depth-first in order."""
        doc = Document(
            children=[
                Paragraph(children=[Text(content="a"), Emphasis(children=[Text(content="b")])]),
                Paragraph(children=[Text(content="c")]),
            ]
        )
        texts = [node.content for node in walk(doc) if isinstance(node, Text)]

        assert texts == ["a", "b", "c"]

    def test_extract_text(self) -> None:
        """Test text is gathered from nested nodes and images."""
        para = Paragraph(
            children=[Text(content="see "), Image(url="x.png", alt_text="pic"), Code(content=" now")]
        )

        assert extract_text(para) == "see pic now"
        assert extract_text([Text(content="a"), Text(content="b")], joiner=" ") == "a b"

    def test_merge_adjacent_text(self) -> None:
        """Test runs of plain text are joined with their spans and escapes."""
        emphasis = Emphasis(children=[Text(content="e")])
        first = Text(content="a ", position=SourceSpan(SourcePoint(1, 1, 0), SourcePoint(1, 3, 2)))
        second = Text(
            content="{",
            metadata={ESCAPED_OFFSETS_KEY: [0]},
            position=SourceSpan(SourcePoint(1, 3, 2), SourcePoint(1, 5, 4)),
        )
        lone = Text(content="c")
        merged = merge_adjacent_text([first, second, emphasis, lone])

        assert [node.content for node in merged[::2]] == ["a {", "c"]
        assert merged[0].metadata == {ESCAPED_OFFSETS_KEY: [2]}
        assert merged[0].position == SourceSpan(SourcePoint(1, 1, 0), SourcePoint(1, 5, 4))
        assert merged[1] is emphasis
        assert merged[2] is lone

    def test_merge_keeps_marked_text_apart(self) -> None:
        """Test text with properties or other metadata is not merged."""
        marked = Text(content="{.x}", metadata={"orphan": True})
        nodes = [Text(content="a"), marked, Text(content="b", properties={"class": "c"})]

        assert merge_adjacent_text(nodes) == nodes
        placed = Text(content="a", position=SourceSpan(SourcePoint(1, 1, 0), SourcePoint(1, 2, 1)))
        assert merge_adjacent_text([placed, Text(content="b")])[0].position is None

    @pytest.mark.parametrize(
        "start, text, expected",
        [
            (SourcePoint(1, 1, 0), "abc", SourcePoint(1, 4, 3)),
            (SourcePoint(3, 5, 20), "", SourcePoint(3, 5, 20)),
            (SourcePoint(1, 1, 0), "line one\nend", SourcePoint(2, 4, 12)),
            (SourcePoint(1, 3), "a\n\n", SourcePoint(3, 1)),
        ],
    )
    def test_advance_point(self, start: SourcePoint, text: str, expected: SourcePoint) -> None:
        """Test lines, columns and offsets move over consumed text."""
        assert advance_point(start, text) == expected
