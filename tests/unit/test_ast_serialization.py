#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the dict/JSON tree protocol."""

import json

import pytest

from mdattrs.ast import (
    AttributeBlock,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    Image,
    Paragraph,
    SourcePoint,
    SourceSpan,
    Table,
    TableCell,
    TableRow,
    Text,
    ast_to_dict,
    ast_to_json,
    dict_to_ast,
    json_to_ast,
)
from mdattrs.exceptions import ValidationError


def _span() -> SourceSpan:
    return SourceSpan(start=SourcePoint(1, 1, 0), end=SourcePoint(1, 6, 5))


@pytest.mark.unit
class TestAstToDict:
    """Test the outgoing record shape."""

    def test_mdast_field_names(self) -> None:
        """Test kind-specific fields use their protocol names."""
        heading = ast_to_dict(Heading(level=2, children=[Text(content="Hi")]))

        assert heading == {"type": "heading", "depth": 2, "children": [{"type": "text", "value": "Hi"}]}

    def test_code_block_fields(self) -> None:
        """Test code blocks expose lang and meta."""
        data = ast_to_dict(CodeBlock(content="x\n", language="py", meta="linenums"))

        assert data["type"] == "code"
        assert data["lang"] == "py"
        assert data["meta"] == "linenums"
        assert data["value"] == "x\n"

    def test_image_and_table_aliases(self) -> None:
        """Test alt text and alignments."""
        assert ast_to_dict(Image(url="a.png", alt_text="pic"))["alt"] == "pic"
        assert ast_to_dict(Table(alignments=["left", None]))["align"] == ["left", None]

    def test_properties_and_position(self) -> None:
        """Test property bags and spans are written when present."""
        data = ast_to_dict(Text(content="Hello", properties={"class": "x"}, position=_span()))

        assert data["properties"] == {"class": "x"}
        assert data["position"] == {
            "start": {"line": 1, "column": 1, "offset": 0},
            "end": {"line": 1, "column": 6, "offset": 5},
        }

    def test_empty_extras_are_omitted(self) -> None:
        """Test empty bags and absent positions are left out."""
        data = ast_to_dict(Paragraph())

        assert data == {"type": "paragraph", "children": []}

    def test_offset_is_optional(self) -> None:
        """Test points without offsets."""
        span = SourceSpan(start=SourcePoint(1, 1), end=SourcePoint(1, 2))
        assert ast_to_dict(Text(content="a", position=span))["position"]["start"] == {"line": 1, "column": 1}

    def test_attribute_block(self) -> None:
        """Test detached blocks serialize their record and source."""
        data = ast_to_dict(AttributeBlock(record={"id": "x"}, source="{#x}"))

        assert data == {"type": "attributes", "record": {"id": "x"}, "source": "{#x}"}

    def test_unknown_node(self) -> None:
        """Test objects that are not nodes are refused."""
        with pytest.raises(ValidationError):
            ast_to_dict(Paragraph(children=[{"type": "text"}]))  # type: ignore[list-item]

    def test_children_must_be_a_list(self) -> None:
        """Test a non-list children value is refused."""
        with pytest.raises(ValidationError):
            ast_to_dict(Paragraph(children=(Text(content="a"),)))  # type: ignore[arg-type]


@pytest.mark.unit
class TestDictToAst:
    """Test reading records into nodes."""

    def test_mdast_input(self) -> None:
        """Test a tree written by another mdast tool."""
        data = {
            "type": "root",
            "children": [
                {
                    "type": "paragraph",
                    "children": [
                        {"type": "emphasis", "children": [{"type": "text", "value": "em"}]},
                        {"type": "text", "value": " more"},
                    ],
                    "properties": {"class": "p"},
                }
            ],
        }
        doc = dict_to_ast(data)

        assert isinstance(doc, Document)
        para = doc.children[0]
        assert para.properties == {"class": "p"}
        assert isinstance(para.children[0], Emphasis)
        assert para.children[1].content == " more"

    def test_position(self) -> None:
        """Test positions are rebuilt as spans."""
        node = dict_to_ast(
            {
                "type": "text",
                "value": "Hello",
                "position": {"start": {"line": 1, "column": 1, "offset": 0}, "end": {"line": 1, "column": 6}},
            }
        )

        assert node.position.start == SourcePoint(1, 1, 0)
        assert node.position.end == SourcePoint(1, 6, None)

    @pytest.mark.parametrize(
        "data",
        [
            {"type": "mystery"},
            {"children": []},
            {"type": "paragraph", "children": "text"},
            {"type": "text", "value": "a", "position": {"start": {"line": 1}, "end": {"line": 1, "column": 2}}},
            {"type": "text", "value": "a", "position": {"start": {"line": 1, "column": 1}}},
            {"type": "heading", "depth": 9},
            {"type": "text"},
            ["not", "a", "dict"],
        ],
    )
    def test_protocol_violations(self, data) -> None:
        """Test malformed records raise ValidationError."""
        with pytest.raises(ValidationError):
            dict_to_ast(data)

    def test_tables_round_trip(self) -> None:
        """Test a table survives a dict round trip."""
        table = Table(
            alignments=["center"],
            children=[TableRow(is_header=True, children=[TableCell(children=[Text(content="h")], properties={"class": "c"})])],
        )

        assert dict_to_ast(ast_to_dict(table)) == table


@pytest.mark.unit
class TestJson:
    """Test the JSON wrappers."""

    def test_round_trip(self) -> None:
        """Test a tree survives a JSON round trip."""
        doc = Document(
            children=[
                Heading(level=1, children=[Text(content="Título", position=_span())], properties={"id": "t"}),
                Paragraph(children=[AttributeBlock(record={"class": "x"}, source="{.x}")], metadata={"k": 1}),
            ]
        )

        assert json_to_ast(ast_to_json(doc)) == doc

    def test_non_ascii_kept(self) -> None:
        """Test text is written without ASCII escapes."""
        assert "Título" in ast_to_json(Text(content="Título"))

    def test_indent(self) -> None:
        """Test indentation is passed through."""
        text = ast_to_json(Paragraph(), indent=2)
        assert json.loads(text) == {"type": "paragraph", "children": []}
        assert "\n  " in text

    def test_invalid_json(self) -> None:
        """Test unparseable text is a validation error."""
        with pytest.raises(ValidationError):
            json_to_ast("{not json")
