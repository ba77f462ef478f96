#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/ast/nodes.py
"""AST node classes for attribute-annotated markdown documents.

This module defines the node hierarchy the attribute engine operates on.
Every node exposes the same small protocol:

- ``node_type``: the tree protocol discriminator (``"paragraph"``,
  ``"inlineCode"``, ...)
- ``children``: ordered list of child nodes (container kinds only)
- ``position``: optional :class:`SourceSpan` with 1-based line/column and
  optional 0-based offsets
- ``properties``: the presentation-property bag that receives attribute
  records once ownership is resolved
- ``metadata``: free-form data for readers and writers

Node Hierarchy
--------------
Block-level nodes:
    - Document, Heading, Paragraph, CodeBlock, BlockQuote
    - List, ListItem, Table, TableRow, TableCell
    - ThematicBreak, HTMLBlock

Inline nodes:
    - Text, Emphasis, Strong, Strikethrough, Code
    - Link, Image, LineBreak, HTMLInline

Transient nodes:
    - AttributeBlock: a detached ``{...}`` construct awaiting ownership
      resolution. It never survives :class:`~mdattrs.transforms.resolve.AttributeResolver`.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal, Optional

Alignment = Literal["left", "center", "right"]


@dataclass
class SourcePoint:
    """A single place in the source text.

    Parameters
    ----------
    line : int
        1-based line number
    column : int
        1-based column number
    offset : int or None, default = None
        0-based character offset, absent when the source carries none

    """

    line: int
    column: int
    offset: Optional[int] = None


@dataclass
class SourceSpan:
    """Start and end points of a node in the source text.

    The end point is exclusive: it names the first character after the node.

    Parameters
    ----------
    start : SourcePoint
        Where the node begins
    end : SourcePoint
        Where the node ends

    """

    start: SourcePoint
    end: SourcePoint


class Node(ABC):
    """Base class for all AST nodes.

    Parameters
    ----------
    metadata : dict, default = empty dict
        Arbitrary metadata associated with this node
    properties : dict, default = empty dict
        Presentation properties attached through attribute blocks
    position : SourceSpan or None, default = None
        Where this node came from in the source

    """

    node_type: ClassVar[str] = "node"

    metadata: dict[str, Any]
    properties: dict[str, str]
    position: Optional[SourceSpan]

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing all other nodes.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document
    metadata : dict, default = empty dict
        Document-level metadata
    properties : dict, default = empty dict
        Unused for documents, kept for protocol uniformity
    position : SourceSpan or None, default = None
        Source span of the whole document

    """

    node_type: ClassVar[str] = "root"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document(self)


@dataclass
class Heading(Node):
    """Heading node (h1-h6).

    Parameters
    ----------
    level : int
        Heading level (1-6, where 1 is most important)
    children : list of Node, default = empty list
        Inline nodes representing heading text

    """

    node_type: ClassVar[str] = "heading"

    level: int
    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this heading.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_heading method

        Returns
        -------
        Any
            Result from visitor.visit_heading(self)

        """
        return visitor.visit_heading(self)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content."""

    node_type: ClassVar[str] = "paragraph"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this paragraph."""
        return visitor.visit_paragraph(self)


@dataclass
class CodeBlock(Node):
    """Fenced or indented code block.

    The info string of a fence is split into ``language`` (first word) and
    ``meta`` (everything after it). Attribute text found in either slot is
    moved into ``properties`` by the code-fence extractor.

    Parameters
    ----------
    content : str
        Code content (not parsed as markdown)
    language : str or None, default = None
        Language slot of the info string
    meta : str or None, default = None
        Meta slot of the info string
    fence_char : str, default = '`'
        Character used for fencing (` or ~)
    fence_length : int, default = 3
        Number of fence characters

    """

    node_type: ClassVar[str] = "code"

    content: str
    language: Optional[str] = None
    meta: Optional[str] = None
    fence_char: str = "`"
    fence_length: int = 3
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this code block."""
        return visitor.visit_code_block(self)


@dataclass
class BlockQuote(Node):
    """Block quote containing block-level children."""

    node_type: ClassVar[str] = "blockquote"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this block quote."""
        return visitor.visit_block_quote(self)


@dataclass
class List(Node):
    """List node (ordered or unordered).

    Parameters
    ----------
    ordered : bool
        True for ordered lists, False for unordered
    children : list of ListItem, default = empty list
        List items
    start : int, default = 1
        Starting number for ordered lists
    tight : bool, default = True
        Whether list is tight (no blank lines between items)

    """

    node_type: ClassVar[str] = "list"

    ordered: bool
    children: list[Node] = field(default_factory=list)
    start: int = 1
    tight: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list."""
        return visitor.visit_list(self)


@dataclass
class ListItem(Node):
    """List item containing block-level children.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block nodes in the item
    task_status : {'checked', 'unchecked'} or None, default = None
        Task list checkbox state

    """

    node_type: ClassVar[str] = "listItem"

    children: list[Node] = field(default_factory=list)
    task_status: Optional[Literal["checked", "unchecked"]] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this list item."""
        return visitor.visit_list_item(self)


@dataclass
class Table(Node):
    """Table node (GFM extension).

    Parameters
    ----------
    children : list of TableRow, default = empty list
        Table rows, the header row first when present
    alignments : list, default = empty list
        Column alignments ('left', 'center', 'right', or None)

    """

    node_type: ClassVar[str] = "table"

    children: list[Node] = field(default_factory=list)
    alignments: list[Alignment | None] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table."""
        return visitor.visit_table(self)


@dataclass
class TableRow(Node):
    """Table row containing cells.

    Parameters
    ----------
    children : list of TableCell, default = empty list
        Cells in this row
    is_header : bool, default = False
        Whether this row is the header row

    """

    node_type: ClassVar[str] = "tableRow"

    children: list[Node] = field(default_factory=list)
    is_header: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table row."""
        return visitor.visit_table_row(self)


@dataclass
class TableCell(Node):
    """Table cell with inline content.

    Parameters
    ----------
    children : list of Node, default = empty list
        Inline content of the cell
    alignment : {'left', 'center', 'right'} or None, default = None
        Cell alignment

    """

    node_type: ClassVar[str] = "tableCell"

    children: list[Node] = field(default_factory=list)
    alignment: Alignment | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this table cell."""
        return visitor.visit_table_cell(self)


@dataclass
class ThematicBreak(Node):
    """Thematic break (horizontal rule)."""

    node_type: ClassVar[str] = "thematicBreak"

    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this thematic break."""
        return visitor.visit_thematic_break(self)


@dataclass
class HTMLBlock(Node):
    """Raw HTML block, passed through untouched.

    Parameters
    ----------
    content : str
        Raw HTML content

    """

    node_type: ClassVar[str] = "html"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this HTML block."""
        return visitor.visit_html_block(self)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text content.

    Parameters
    ----------
    content : str
        The text content, with markdown escapes already removed

    """

    node_type: ClassVar[str] = "text"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this text."""
        return visitor.visit_text(self)


@dataclass
class Emphasis(Node):
    """Emphasized (italic) inline content."""

    node_type: ClassVar[str] = "emphasis"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this emphasis."""
        return visitor.visit_emphasis(self)


@dataclass
class Strong(Node):
    """Strong (bold) inline content."""

    node_type: ClassVar[str] = "strong"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strong node."""
        return visitor.visit_strong(self)


@dataclass
class Strikethrough(Node):
    """Strikethrough inline content (GFM extension)."""

    node_type: ClassVar[str] = "delete"

    children: list[Node] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this strikethrough."""
        return visitor.visit_strikethrough(self)


@dataclass
class Code(Node):
    """Inline code span.

    Parameters
    ----------
    content : str
        Code content

    """

    node_type: ClassVar[str] = "inlineCode"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline code."""
        return visitor.visit_code(self)


@dataclass
class Link(Node):
    """Hyperlink with optional title.

    Parameters
    ----------
    url : str
        Link destination URL
    children : list of Node, default = empty list
        Inline nodes representing link text
    title : str or None, default = None
        Optional link title

    """

    node_type: ClassVar[str] = "link"

    url: str
    children: list[Node] = field(default_factory=list)
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this link."""
        return visitor.visit_link(self)


@dataclass
class Image(Node):
    """Image reference.

    Parameters
    ----------
    url : str
        Image source URL
    alt_text : str, default = ''
        Alternative text, flattened to plain text
    title : str or None, default = None
        Optional image title

    """

    node_type: ClassVar[str] = "image"

    url: str
    alt_text: str = ""
    title: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this image."""
        return visitor.visit_image(self)


@dataclass
class LineBreak(Node):
    """Line break.

    Parameters
    ----------
    soft : bool, default = False
        True for soft breaks (newline in source), False for hard breaks

    """

    node_type: ClassVar[str] = "break"

    soft: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this line break."""
        return visitor.visit_line_break(self)


@dataclass
class HTMLInline(Node):
    """Raw inline HTML.

    Parameters
    ----------
    content : str
        Raw HTML content

    """

    node_type: ClassVar[str] = "inlineHtml"

    content: str
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this inline HTML."""
        return visitor.visit_html_inline(self)


# ============================================================================
# Transient Nodes
# ============================================================================


@dataclass
class AttributeBlock(Node):
    """A detached ``{...}`` attribute construct awaiting an owner.

    Created by the block trailing-text extractor or the inline attribute
    tokenizer, consumed by the ownership resolver. On resolution the record
    is merged into the owner's ``properties`` and this node is removed; if
    no owner qualifies it is replaced by a :class:`Text` carrying ``source``
    so the original markup is preserved.

    Parameters
    ----------
    record : dict
        Parsed attribute record (name to decoded value)
    source : str
        The literal bracketed text as it appeared in the source
    position : SourceSpan or None, default = None
        Span of the brace construct

    """

    node_type: ClassVar[str] = "attributes"

    record: dict[str, str]
    source: str
    metadata: dict[str, Any] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    position: Optional[SourceSpan] = None

    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this attribute block."""
        return visitor.visit_attribute_block(self)


NODE_CLASSES: dict[str, type[Node]] = {
    cls.node_type: cls
    for cls in (
        Document,
        Heading,
        Paragraph,
        CodeBlock,
        BlockQuote,
        List,
        ListItem,
        Table,
        TableRow,
        TableCell,
        ThematicBreak,
        HTMLBlock,
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
    )
}
