#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/ast/visitors.py
"""Visitor pattern implementation for AST traversal.

This module provides the visitor base class used by the markdown renderer
and the structural validator that checks a tree honors the node protocol
before the attribute engine mutates it.

"""

from __future__ import annotations

from abc import ABC
from typing import Any

from mdattrs.ast.nodes import (
    AttributeBlock,
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    SourcePoint,
    SourceSpan,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from mdattrs.exceptions import ValidationError


class NodeVisitor(ABC):
    """Base class for AST node visitors.

    Each node's ``accept`` method dispatches to the matching ``visit_*``
    method. Methods a subclass does not override fall back to
    :meth:`generic_visit`, which visits the node's children in order.

    Examples
    --------
    Count the attribute blocks still waiting for an owner:

        >>> class PendingCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...
        ...     def visit_attribute_block(self, node):
        ...         self.count += 1
        >>> doc = Document(children=[Paragraph(children=[AttributeBlock(record={"id": "a"}, source="{#a}")])])
        >>> counter = PendingCounter()
        >>> doc.accept(counter)
        >>> counter.count
        1

    """

    def generic_visit(self, node: Node) -> Any:
        """Visit every child of ``node``; leaf kinds are ignored."""
        for child in getattr(node, "children", None) or []:
            child.accept(self)
        return None

    def visit_document(self, node: Document) -> Any:
        """Visit a Document node.

        Parameters
        ----------
        node : Document
            The document node to visit

        Returns
        -------
        Any
            Result of processing this node

        """
        return self.generic_visit(node)

    def visit_heading(self, node: Heading) -> Any:
        """Visit a Heading node."""
        return self.generic_visit(node)

    def visit_paragraph(self, node: Paragraph) -> Any:
        """Visit a Paragraph node."""
        return self.generic_visit(node)

    def visit_code_block(self, node: CodeBlock) -> Any:
        """Visit a CodeBlock node."""
        return self.generic_visit(node)

    def visit_block_quote(self, node: BlockQuote) -> Any:
        """Visit a BlockQuote node."""
        return self.generic_visit(node)

    def visit_list(self, node: List) -> Any:
        """Visit a List node."""
        return self.generic_visit(node)

    def visit_list_item(self, node: ListItem) -> Any:
        """Visit a ListItem node."""
        return self.generic_visit(node)

    def visit_table(self, node: Table) -> Any:
        """Visit a Table node."""
        return self.generic_visit(node)

    def visit_table_row(self, node: TableRow) -> Any:
        """Visit a TableRow node."""
        return self.generic_visit(node)

    def visit_table_cell(self, node: TableCell) -> Any:
        """Visit a TableCell node."""
        return self.generic_visit(node)

    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        """Visit a ThematicBreak node."""
        return self.generic_visit(node)

    def visit_html_block(self, node: HTMLBlock) -> Any:
        """Visit an HTMLBlock node."""
        return self.generic_visit(node)

    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""
        return self.generic_visit(node)

    def visit_emphasis(self, node: Emphasis) -> Any:
        """Visit an Emphasis node."""
        return self.generic_visit(node)

    def visit_strong(self, node: Strong) -> Any:
        """Visit a Strong node."""
        return self.generic_visit(node)

    def visit_strikethrough(self, node: Strikethrough) -> Any:
        """Visit a Strikethrough node."""
        return self.generic_visit(node)

    def visit_code(self, node: Code) -> Any:
        """Visit a Code node."""
        return self.generic_visit(node)

    def visit_link(self, node: Link) -> Any:
        """Visit a Link node."""
        return self.generic_visit(node)

    def visit_image(self, node: Image) -> Any:
        """Visit an Image node."""
        return self.generic_visit(node)

    def visit_line_break(self, node: LineBreak) -> Any:
        """Visit a LineBreak node."""
        return self.generic_visit(node)

    def visit_html_inline(self, node: HTMLInline) -> Any:
        """Visit an HTMLInline node."""
        return self.generic_visit(node)

    def visit_attribute_block(self, node: AttributeBlock) -> Any:
        """Visit an AttributeBlock node."""
        return self.generic_visit(node)


class ValidationVisitor(NodeVisitor):
    """Visitor that checks a tree against the node protocol.

    Checks performed:
    - every ``children`` field is a list whose items are nodes
    - headings, paragraphs and table cells hold inline nodes only
    - heading levels are 1-6
    - property bags and attribute records map strings to strings
    - positions are well formed (start does not come after end)

    Parameters
    ----------
    strict : bool, default = True
        Whether to raise :class:`~mdattrs.exceptions.ValidationError` on the
        first problem. When False, problems are only collected in ``errors``.

    Examples
    --------
        >>> doc = Document(children=[Paragraph(children=[Text(content="Hi")])])
        >>> validator = ValidationVisitor(strict=False)
        >>> doc.accept(validator)
        >>> validator.errors
        []

    """

    INLINE_NODES = frozenset(
        {
            Text,
            Emphasis,
            Strong,
            Strikethrough,
            Code,
            Link,
            Image,
            LineBreak,
            HTMLInline,
            AttributeBlock,
        }
    )

    def __init__(self, strict: bool = True):
        """Initialize the validator.

        Parameters
        ----------
        strict : bool, default = True
            Whether to raise errors immediately on validation failures

        """
        self.strict = strict
        self.errors: list[str] = []

    def _add_error(self, message: str, node: Any = None) -> None:
        self.errors.append(message)
        if self.strict:
            raise ValidationError(message, parameter_name=type(node).__name__ if node is not None else None)

    def _check_common(self, node: Node, context: str) -> None:
        properties = getattr(node, "properties", None)
        if not isinstance(properties, dict):
            self._add_error(f"{context} properties must be a dict, got {type(properties).__name__}", node)
        else:
            self._check_string_mapping(properties, f"{context} properties", node)

        position = getattr(node, "position", None)
        if position is not None:
            self._check_position(position, context, node)

    def _check_string_mapping(self, mapping: dict[Any, Any], context: str, node: Node) -> None:
        for key, value in mapping.items():
            if not isinstance(key, str) or not isinstance(value, str):
                self._add_error(f"{context} must map str to str, found {key!r}: {value!r}", node)

    def _check_position(self, position: Any, context: str, node: Node) -> None:
        if not isinstance(position, SourceSpan) or not all(
            isinstance(point, SourcePoint) for point in (position.start, position.end)
        ):
            self._add_error(f"{context} position must be a SourceSpan of SourcePoints", node)
            return

        start, end = position.start, position.end
        if start.line < 1 or start.column < 1 or end.line < 1 or end.column < 1:
            self._add_error(f"{context} position lines and columns are 1-based", node)
        elif (start.line, start.column) > (end.line, end.column):
            self._add_error(f"{context} position starts after it ends", node)
        elif start.offset is not None and end.offset is not None and start.offset > end.offset:
            self._add_error(f"{context} position offsets are reversed", node)

    def _visit_children(self, node: Node, context: str, inline_only: bool = False) -> None:
        self._check_common(node, context)
        children = getattr(node, "children", None)
        if not isinstance(children, list):
            self._add_error(f"{context} children must be a list, got {type(children).__name__}", node)
            return

        for i, child in enumerate(children):
            if not isinstance(child, Node):
                self._add_error(f"{context} child {i} is not a node: {child!r}", node)
                continue
            if inline_only and type(child) not in self.INLINE_NODES:
                self._add_error(f"{context} can only contain inline nodes, but child {i} is {type(child).__name__}", node)
            child.accept(self)

    def visit_document(self, node: Document) -> None:
        """Validate a Document node."""
        self._visit_children(node, "Document")

    def visit_heading(self, node: Heading) -> None:
        """Validate a Heading node."""
        if not 1 <= node.level <= 6:
            self._add_error(f"Invalid heading level: {node.level}", node)
        self._visit_children(node, "Heading", inline_only=True)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Validate a Paragraph node."""
        self._visit_children(node, "Paragraph", inline_only=True)

    def visit_code_block(self, node: CodeBlock) -> None:
        """Validate a CodeBlock node."""
        self._check_common(node, "CodeBlock")
        if not isinstance(node.content, str):
            self._add_error("CodeBlock content must be a string", node)

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Validate a BlockQuote node."""
        self._visit_children(node, "BlockQuote")

    def visit_list(self, node: List) -> None:
        """Validate a List node."""
        self._visit_children(node, "List")

    def visit_list_item(self, node: ListItem) -> None:
        """Validate a ListItem node."""
        self._visit_children(node, "ListItem")

    def visit_table(self, node: Table) -> None:
        """Validate a Table node."""
        self._visit_children(node, "Table")

    def visit_table_row(self, node: TableRow) -> None:
        """Validate a TableRow node."""
        self._visit_children(node, "TableRow")

    def visit_table_cell(self, node: TableCell) -> None:
        """Validate a TableCell node."""
        self._visit_children(node, "TableCell", inline_only=True)

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Validate a ThematicBreak node."""
        self._check_common(node, "ThematicBreak")

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Validate an HTMLBlock node."""
        self._check_common(node, "HTMLBlock")

    def visit_text(self, node: Text) -> None:
        """Validate a Text node."""
        self._check_common(node, "Text")
        if not isinstance(node.content, str):
            self._add_error("Text content must be a string", node)

    def visit_emphasis(self, node: Emphasis) -> None:
        """Validate an Emphasis node."""
        self._visit_children(node, "Emphasis", inline_only=True)

    def visit_strong(self, node: Strong) -> None:
        """Validate a Strong node."""
        self._visit_children(node, "Strong", inline_only=True)

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Validate a Strikethrough node."""
        self._visit_children(node, "Strikethrough", inline_only=True)

    def visit_code(self, node: Code) -> None:
        """Validate a Code node."""
        self._check_common(node, "Code")

    def visit_link(self, node: Link) -> None:
        """Validate a Link node."""
        self._visit_children(node, "Link", inline_only=True)

    def visit_image(self, node: Image) -> None:
        """Validate an Image node."""
        self._check_common(node, "Image")

    def visit_line_break(self, node: LineBreak) -> None:
        """Validate a LineBreak node."""
        self._check_common(node, "LineBreak")

    def visit_html_inline(self, node: HTMLInline) -> None:
        """Validate an HTMLInline node."""
        self._check_common(node, "HTMLInline")

    def visit_attribute_block(self, node: AttributeBlock) -> None:
        """Validate an AttributeBlock node."""
        self._check_common(node, "AttributeBlock")
        if not isinstance(node.record, dict) or not node.record:
            self._add_error("AttributeBlock record must be a non-empty dict", node)
        else:
            self._check_string_mapping(node.record, "AttributeBlock record", node)
        if not isinstance(node.source, str):
            self._add_error("AttributeBlock source must be a string", node)
