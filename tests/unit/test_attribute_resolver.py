#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for attribute ownership resolution."""

import pytest

from mdattrs.ast import (
    AttributeBlock,
    BlockQuote,
    Code,
    Document,
    Emphasis,
    Heading,
    Link,
    List,
    ListItem,
    Paragraph,
    SourcePoint,
    SourceSpan,
    Strong,
    Text,
    ThematicBreak,
    walk,
)
from mdattrs.transforms import AttributeResolver, apply_attributes
from mdattrs.transforms.resolve import ORPHAN_METADATA_KEY, attribute_gap


def _span(start: int, end: int) -> SourceSpan:
    return SourceSpan(start=SourcePoint(1, start + 1, start), end=SourcePoint(1, end + 1, end))


def _attribute(record: dict, source: str, start: int) -> AttributeBlock:
    return AttributeBlock(record=record, source=source, position=_span(start, start + len(source)))


@pytest.mark.unit
class TestInlineAdjacency:
    """Test attaching to the inline element right before the block."""

    @pytest.mark.parametrize(
        "element",
        [
            Emphasis(children=[Text(content="em")]),
            Strong(children=[Text(content="st")]),
            Link(url="u", children=[Text(content="ln")]),
            Code(content="cd"),
        ],
    )
    def test_zero_gap_attaches(self, element) -> None:
        """Test each inline-attachable kind takes an adjacent block."""
        element.position = _span(0, 4)
        para = Paragraph(children=[element, _attribute({"class": "x"}, "{.x}", 4), Text(content=" after")])

        AttributeResolver().transform(para)
        assert element.properties == {"class": "x"}
        assert para.properties == {}
        assert len(para.children) == 2

    def test_any_gap_blocks_inline_attachment(self) -> None:
        """Test one character between element and block rules out adjacency."""
        emphasis = Emphasis(children=[Text(content="em")], position=_span(0, 4))
        para = Paragraph(children=[emphasis, _attribute({"class": "x"}, "{.x}", 5), Text(content=" after")])

        resolver = AttributeResolver()
        resolver.transform(para)
        assert emphasis.properties == {}
        orphan = para.children[1]
        assert isinstance(orphan, Text)
        assert orphan.content == "{.x}"
        assert orphan.metadata[ORPHAN_METADATA_KEY] is True
        assert resolver.orphaned == 1

    def test_missing_positions_never_adjacent(self) -> None:
        """Test nodes without offsets cannot be adjacent."""
        emphasis = Emphasis(children=[Text(content="em")])
        attribute = AttributeBlock(record={"class": "x"}, source="{.x}")

        assert attribute_gap(emphasis, attribute) is None

    def test_text_is_not_inline_attachable(self) -> None:
        """Test plain text never takes a block."""
        text = Text(content="plain", position=_span(0, 5))
        para = Paragraph(children=[text, _attribute({"class": "x"}, "{.x}", 5), Text(content=" after")])

        AttributeResolver().transform(para)
        assert text.properties == {}
        assert para.children[1].content == "{.x}"

    def test_classes_accumulate_on_element(self) -> None:
        """Test a block merges into properties already present."""
        strong = Strong(children=[Text(content="s")], position=_span(0, 5), properties={"class": "a"})
        para = Paragraph(children=[strong, _attribute({"class": "b"}, "{.b}", 5), Text(content=".")])

        AttributeResolver().transform(para)
        assert strong.properties == {"class": "a b"}


@pytest.mark.unit
class TestBlockTrailing:
    """Test attaching to the enclosing block."""

    def test_last_child_goes_to_parent(self) -> None:
        """Test a block that ends a paragraph belongs to the paragraph."""
        para = Paragraph(children=[Text(content="Hello"), AttributeBlock(record={"id": "p"}, source="{#p}")])

        AttributeResolver().transform(para)
        assert para.properties == {"id": "p"}
        assert para.children == [Text(content="Hello")]

    def test_gap_with_last_child_prefers_block(self) -> None:
        """Test a spaced block at the end of a paragraph goes to the paragraph."""
        emphasis = Emphasis(children=[Text(content="em")], position=_span(0, 4))
        para = Paragraph(children=[emphasis, Text(content=" "), _attribute({"class": "c"}, "{.c}", 5)])

        AttributeResolver().transform(para)
        assert emphasis.properties == {}
        assert para.properties == {"class": "c"}

    def test_adjacency_beats_block_trailing(self) -> None:
        """Test an adjacent element wins even when the block is last."""
        link = Link(url="u", children=[Text(content="l")], position=_span(0, 6))
        para = Paragraph(children=[link, _attribute({"target": "_blank"}, '{target="_blank"}', 6)])

        AttributeResolver().transform(para)
        assert link.properties == {"target": "_blank"}
        assert para.properties == {}

    def test_heading(self) -> None:
        """Test headings take their trailing block."""
        heading = Heading(level=1, children=[Text(content="T"), AttributeBlock(record={"id": "t"}, source="{#t}")])
        AttributeResolver().transform(Document(children=[heading]))

        assert heading.properties == {"id": "t"}

    def test_non_attachable_parent_orphans(self) -> None:
        """Test emphasis does not take a trailing block of its own."""
        emphasis = Emphasis(children=[Text(content="x"), AttributeBlock(record={"class": "c"}, source="{.c}")])
        AttributeResolver().transform(Paragraph(children=[emphasis]))

        assert emphasis.properties == {}
        assert emphasis.children[-1] == Text(content="{.c}", metadata={ORPHAN_METADATA_KEY: True})

    def test_children_resolved_before_parent(self) -> None:
        """Test nested lists are settled bottom up."""
        inner = Paragraph(children=[Text(content="a"), AttributeBlock(record={"class": "p"}, source="{.p}")])
        item = ListItem(children=[inner, AttributeBlock(record={"class": "li"}, source="{.li}")])
        doc = Document(children=[List(ordered=False, children=[item])])

        AttributeResolver().transform(doc)
        assert inner.properties == {"class": "p"}
        assert item.properties == {"class": "li"}


@pytest.mark.unit
class TestStandaloneParagraph:
    """Test attribute-only paragraphs following a block."""

    @pytest.mark.parametrize(
        "block",
        [
            BlockQuote(children=[Paragraph(children=[Text(content="q")])]),
            List(ordered=True, children=[ListItem(children=[Paragraph(children=[Text(content="i")])])]),
            ThematicBreak(),
            Paragraph(children=[Text(content="p")]),
        ],
    )
    def test_attaches_to_previous_block(self, block) -> None:
        """Test the record moves to the previous sibling and the paragraph goes."""
        standalone = Paragraph(children=[AttributeBlock(record={"class": "aside"}, source="{.aside}")])
        doc = Document(children=[block, standalone])

        AttributeResolver().transform(doc)
        assert doc.children == [block]
        assert block.properties == {"class": "aside"}

    def test_first_child_falls_back_to_paragraph(self) -> None:
        """Test a standalone paragraph with no previous sibling keeps the record."""
        standalone = Paragraph(children=[AttributeBlock(record={"class": "x"}, source="{.x}")])
        doc = Document(children=[standalone])

        AttributeResolver().transform(doc)
        assert doc.children == [standalone]
        assert standalone.properties == {"class": "x"}
        assert standalone.children == []

    def test_consecutive_paragraphs_accumulate(self) -> None:
        """Test several standalone paragraphs all reach the same block."""
        quote = BlockQuote(children=[Paragraph(children=[Text(content="q")])])
        doc = Document(
            children=[
                quote,
                Paragraph(children=[AttributeBlock(record={"class": "a"}, source="{.a}")]),
                Paragraph(children=[AttributeBlock(record={"class": "b", "id": "q"}, source="{.b #q}")]),
            ]
        )

        resolver = AttributeResolver()
        resolver.transform(doc)
        assert doc.children == [quote]
        assert quote.properties == {"class": "a b", "id": "q"}
        assert resolver.attached == 2


@pytest.mark.unit
class TestApplyAttributes:
    """Test the pipeline entry point on hand-built trees."""

    def test_extract_and_resolve(self) -> None:
        """Test a trailing block is extracted and attached."""
        doc = Document(children=[Paragraph(children=[Text(content="Hello {.greeting}")])])

        apply_attributes(doc)
        assert doc.children[0].properties == {"class": "greeting"}
        assert doc.children[0].children == [Text(content="Hello")]

    def test_resolve_disabled_keeps_blocks(self) -> None:
        """Test detached blocks stay in the tree when resolution is off."""
        doc = Document(children=[Paragraph(children=[Text(content="Hello {.greeting}")])])

        apply_attributes(doc, resolve=False)
        assert isinstance(doc.children[0].children[-1], AttributeBlock)
        assert doc.children[0].properties == {}

    def test_no_attribute_blocks_remain(self) -> None:
        """Test resolution leaves no AttributeBlock anywhere."""
        doc = Document(
            children=[
                Paragraph(children=[Text(content="a {.x} b")]),
                Heading(level=2, children=[Text(content="H {#h}")]),
            ]
        )
        apply_attributes(doc)

        assert not any(isinstance(node, AttributeBlock) for node in walk(doc))
