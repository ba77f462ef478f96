#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/renderers/markdown.py
"""Markdown rendering from AST.

This module provides the MarkdownRenderer class which converts AST nodes
back to markdown text, writing every non-empty property bag as an
attribute block where a reader will find it again:

==========================================  ====================================
Node                                        Placement
==========================================  ====================================
emphasis, strong, link, image, inline code  directly after the element, no gap
heading, paragraph, table cell              end of the text, after one space
code block                                  end of the opening fence line
block quote, list, thematic break           own paragraph right after the block
==========================================  ====================================

Standalone placement is used only where the block sits directly in the
document or in a block quote; bags on other node kinds are not written.

"""

from __future__ import annotations

import logging
import re
from typing import Optional

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
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from mdattrs.ast.utils import extract_text
from mdattrs.ast.visitors import NodeVisitor
from mdattrs.attributes.serializer import format_inline_code, serialize_attributes
from mdattrs.constants import MARKDOWN_ALWAYS_ESCAPE, MARKDOWN_LINE_START_ESCAPE
from mdattrs.exceptions import MdAttrsError, RenderingError
from mdattrs.options.markdown import MarkdownRendererOptions
from mdattrs.renderers.base import BaseRenderer, InlineContentMixin, RendererOutput
from mdattrs.transforms.resolve import ORPHAN_METADATA_KEY

logger = logging.getLogger(__name__)

_ORDERED_MARKER_START = re.compile(r"^(\d{1,9})([.)])")
_AUTOLINK_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9.+-]{1,31}:")
_UNSAFE_URL_CHARS = re.compile(r"[\s<>]")

STANDALONE_ATTRIBUTE_HOSTS = (BlockQuote, List, ThematicBreak)


class MarkdownRenderer(NodeVisitor, InlineContentMixin, BaseRenderer):
    """Render AST nodes to markdown text.

    This class implements the visitor pattern to traverse an AST and
    generate markdown output, including attribute blocks for every node
    that carries properties.

    Parameters
    ----------
    options : MarkdownRendererOptions or None, default = None
        Markdown formatting options

    Examples
    --------
    Basic usage:

        >>> from mdattrs.ast import Document, Link, Paragraph, Text
        >>> doc = Document(children=[
        ...     Paragraph(children=[
        ...         Link(url="url", children=[Text(content="link")], properties={"target": "_blank"})
        ...     ])
        ... ])
        >>> print(MarkdownRenderer().render_to_string(doc))
        [link](url){target="_blank"}
        <BLANKLINE>

    """

    def __init__(self, options: MarkdownRendererOptions | None = None):
        """Initialize the Markdown renderer with options."""
        BaseRenderer._validate_options_type(options, MarkdownRendererOptions, "markdown")
        options = options or MarkdownRendererOptions()
        BaseRenderer.__init__(self, options)
        self.options: MarkdownRendererOptions = options
        self._output: list[str] = []
        self._list_depth: int = 0

    def render_to_string(self, document: Document) -> str:
        """Render a document AST to markdown string.

        Parameters
        ----------
        document : Document
            The document node to render

        Returns
        -------
        str
            Markdown text ending in a single newline, or ``""`` for an
            empty document

        Raises
        ------
        RenderingError
            If a node cannot be rendered

        """
        self._output = []
        self._list_depth = 0

        try:
            document.accept(self)
        except MdAttrsError:
            raise
        except (AttributeError, TypeError, ValueError) as e:
            raise RenderingError(f"Failed to render markdown: {e}", rendering_stage="render", original_error=e) from e

        result = "".join(self._output)
        self._output.clear()
        return self._cleanup_output(result)

    def render(self, doc: Document, output: RendererOutput) -> None:
        """Render AST to markdown and write to output.

        Parameters
        ----------
        doc : Document
            AST Document node to render
        output : str, Path, or file-like
            Output destination (file path or file-like object)

        """
        markdown_text = self.render_to_string(doc)
        self.write_text_output(markdown_text, output)

    def _cleanup_output(self, text: str) -> str:
        """Normalize line endings and end the text with one newline."""
        text = text.replace("\r\n", "\n").replace("\r", "\n").rstrip()
        return f"{text}\n" if text else ""

    def _escape_markdown(self, text: str) -> str:
        """Escape special markdown characters with context awareness.

        Backslash, back-tick, asterisk, braces, brackets, angle brackets,
        pipe and tilde are always escaped. Underscores are left alone in the
        middle of a word (``snake_case``). Characters that would open a
        block (``#``, ``>``, ``+``, ``-`` or an ordered list marker) are
        escaped at the start of the text.

        Parameters
        ----------
        text : str
            Text to escape

        Returns
        -------
        str
            Escaped text

        """
        if not self.options.escape_special:
            return text

        escaped_chars = []
        for i, char in enumerate(text):
            if char == "_":
                prev_alnum = i > 0 and text[i - 1].isalnum()
                next_alnum = i < len(text) - 1 and text[i + 1].isalnum()
                if prev_alnum and next_alnum:
                    escaped_chars.append(char)
                else:
                    escaped_chars.append("\\_")
            elif char in MARKDOWN_ALWAYS_ESCAPE:
                escaped_chars.append("\\" + char)
            elif i == 0 and char in MARKDOWN_LINE_START_ESCAPE:
                escaped_chars.append("\\" + char)
            else:
                escaped_chars.append(char)

        escaped = "".join(escaped_chars)
        return _ORDERED_MARKER_START.sub(r"\1\\\2", escaped)

    def _attributes(self, node: Node) -> str:
        """Return the attribute block for ``node``, or ``""``."""
        if not self.options.render_attributes:
            return ""
        return serialize_attributes(node.properties)

    def _with_trailing_attributes(self, content: str, node: Node) -> str:
        """Append ``node``'s attribute block after one space."""
        attributes = self._attributes(node)
        if not attributes:
            return content
        content = content.rstrip(" \t")
        return f"{content} {attributes}" if content else attributes

    def _render_node(self, node: Node) -> str:
        """Render one node to a string without touching the current output."""
        saved_output = self._output
        self._output = []
        node.accept(self)
        result = "".join(self._output)
        self._output = saved_output
        return result

    def _render_blocks(self, children: list[Node], separator: str = "\n\n") -> str:
        """Render sibling blocks joined by ``separator``.

        Block quotes, lists and thematic breaks with properties are followed
        by their attribute block as a paragraph of its own. That paragraph
        is always set off by blank lines, even between tight list blocks,
        so it can neither continue nor be continued by a neighbour.
        """
        pieces: list[str] = []
        isolate_next = False
        for child in children:
            rendered = self._render_node(child)
            if rendered or not self.options.collapse_blank_lines:
                if pieces:
                    pieces.append("\n\n" if isolate_next else separator)
                pieces.append(rendered)
                isolate_next = False
            if isinstance(child, STANDALONE_ATTRIBUTE_HOSTS):
                attributes = self._attributes(child)
                if attributes:
                    if pieces:
                        pieces.append("\n\n")
                    pieces.append(attributes)
                    isolate_next = True
        return "".join(pieces)

    def _get_bullet_symbol(self, depth: int) -> str:
        """Get the bullet symbol for a given nesting depth."""
        symbols = self.options.bullet_symbols
        return symbols[depth % len(symbols)]

    def visit_document(self, node: Document) -> None:
        """Render a Document node.

        Parameters
        ----------
        node : Document
            Document to render

        """
        self._output.append(self._render_blocks(node.children))

    def visit_heading(self, node: Heading) -> None:
        """Render a Heading node in ATX style.

        Parameters
        ----------
        node : Heading
            Heading to render

        """
        content = self._render_inline_content(node.children).replace("\n", " ")
        if content.endswith("#"):
            content = content[:-1] + "\\#"
        prefix = "#" * node.level
        line = self._with_trailing_attributes(content, node)
        self._output.append(f"{prefix} {line}" if line else prefix)

    def visit_paragraph(self, node: Paragraph) -> None:
        """Render a Paragraph node.

        Parameters
        ----------
        node : Paragraph
            Paragraph to render

        """
        content = self._render_inline_content(node.children)
        self._output.append(self._with_trailing_attributes(content, node))

    def visit_code_block(self, node: CodeBlock) -> None:
        """Render a CodeBlock node as fenced code.

        The fence is long enough not to collide with any run of the fence
        character inside the content. The info string is the language,
        then the meta, then the attribute block.

        Parameters
        ----------
        node : CodeBlock
            Code block to render

        """
        info = " ".join(part for part in (node.language, node.meta, self._attributes(node)) if part)

        fence_char = self.options.code_fence_char
        if fence_char == "`" and "`" in info:
            fence_char = "~"

        longest = max((len(run) for run in re.findall(re.escape(fence_char) + "+", node.content)), default=0)
        fence = fence_char * max(self.options.code_fence_min, longest + 1)

        self._output.append(f"{fence}{info}\n")
        if node.content:
            self._output.append(node.content)
            if not node.content.endswith("\n"):
                self._output.append("\n")
        self._output.append(fence)

    def visit_block_quote(self, node: BlockQuote) -> None:
        """Render a BlockQuote node.

        Parameters
        ----------
        node : BlockQuote
            Block quote to render

        """
        quoted = self._render_blocks(node.children)
        lines = [f"> {line}" if line else ">" for line in quoted.split("\n")]
        self._output.append("\n".join(lines))

    def visit_list(self, node: List) -> None:
        """Render a List node.

        Parameters
        ----------
        node : List
            List to render

        """
        depth = self._list_depth
        self._list_depth += 1
        items = []
        for i, item in enumerate(node.children):
            if node.ordered:
                marker = f"{node.start + i}. "
            else:
                marker = f"{self._get_bullet_symbol(depth)} "
            items.append(self._render_list_item(item, marker, node.tight))
        self._list_depth -= 1

        self._output.append(("\n" if node.tight else "\n\n").join(items))

    def visit_list_item(self, node: ListItem) -> None:
        """Render a ListItem node on its own, with a bullet marker.

        Parameters
        ----------
        node : ListItem
            List item to render

        """
        marker = f"{self._get_bullet_symbol(self._list_depth)} "
        self._output.append(self._render_list_item(node, marker, tight=True))

    def _render_list_item(self, node: Node, marker: str, tight: bool) -> str:
        """Render an item: first block after the marker, the rest indented to match it."""
        if isinstance(node, ListItem) and node.task_status:
            checkbox = "[x]" if node.task_status == "checked" else "[ ]"
            marker = f"{marker}{checkbox} "

        children = node.children if isinstance(node, ListItem) else [node]
        body = self._render_blocks(children, "\n" if tight else "\n\n")

        padding = " " * len(marker)
        lines = body.split("\n")
        rest = [f"{padding}{line}" if line else "" for line in lines[1:]]
        return "\n".join([f"{marker}{lines[0]}".rstrip(), *rest])

    def _render_cell(self, cell: Node) -> str:
        if isinstance(cell, TableCell):
            content = self._render_inline_content(cell.children).replace("\n", " ")
            return self._with_trailing_attributes(content, cell)
        return self._render_node(cell)

    def _render_row(self, row: Node, num_cols: int, widths: Optional[list[int]] = None) -> str:
        cells = [self._render_cell(cell) for cell in (row.children if isinstance(row, TableRow) else [])]
        cells.extend([""] * (num_cols - len(cells)))
        if widths:
            cells = [content.ljust(width) for content, width in zip(cells, widths)]
        return "| " + " | ".join(cells) + " |"

    def _generate_alignment_row(self, node: Table, num_cols: int, widths: Optional[list[int]] = None) -> str:
        """Generate the delimiter row; padded when column widths are given."""
        alignments = []
        for j in range(num_cols):
            alignment = node.alignments[j] if j < len(node.alignments) else None
            width = max(3, widths[j]) if widths else 3
            if alignment == "center":
                alignments.append(":" + "-" * (width - 2) + ":")
            elif alignment == "right":
                alignments.append("-" * (width - 1) + ":")
            elif alignment == "left":
                alignments.append(":" + "-" * (width - 1))
            else:
                alignments.append("-" * width)
        return "| " + " | ".join(alignments) + " |"

    def visit_table(self, node: Table) -> None:
        """Render a Table node; the first row is the header.

        Parameters
        ----------
        node : Table
            Table to render

        """
        rows = [row for row in node.children if isinstance(row, TableRow)]
        if not rows:
            return

        num_cols = max(len(row.children) for row in rows)
        widths: Optional[list[int]] = None
        if self.options.pad_table_cells:
            widths = [3] * num_cols
            for row in rows:
                for j, cell in enumerate(row.children):
                    widths[j] = max(widths[j], len(self._render_cell(cell)))

        lines = [self._render_row(rows[0], num_cols, widths), self._generate_alignment_row(node, num_cols, widths)]
        lines.extend(self._render_row(row, num_cols, widths) for row in rows[1:])
        self._output.append("\n".join(lines))

    def visit_table_row(self, node: TableRow) -> None:
        """Render a TableRow node as a single pipe-delimited line.

        Parameters
        ----------
        node : TableRow
            Table row to render

        """
        self._output.append(self._render_row(node, len(node.children)))

    def visit_table_cell(self, node: TableCell) -> None:
        """Render a TableCell node's content.

        Parameters
        ----------
        node : TableCell
            Table cell to render

        """
        self._output.append(self._render_cell(node))

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        """Render a ThematicBreak node.

        Parameters
        ----------
        node : ThematicBreak
            Thematic break to render

        """
        self._output.append("---")

    def visit_html_block(self, node: HTMLBlock) -> None:
        """Render an HTMLBlock node verbatim.

        Parameters
        ----------
        node : HTMLBlock
            HTML block to render

        """
        self._output.append(node.content.rstrip("\n"))

    def visit_text(self, node: Text) -> None:
        """Render a Text node.

        Text that was an unowned attribute block is written back verbatim.

        Parameters
        ----------
        node : Text
            Text to render

        """
        if node.metadata.get(ORPHAN_METADATA_KEY):
            self._output.append(node.content)
        else:
            self._output.append(self._escape_markdown(node.content))

    def visit_emphasis(self, node: Emphasis) -> None:
        """Render an Emphasis node.

        Parameters
        ----------
        node : Emphasis
            Emphasis to render

        """
        content = self._render_inline_content(node.children)
        symbol = self.options.emphasis_symbol
        self._output.append(f"{symbol}{content}{symbol}{self._attributes(node)}")

    def visit_strong(self, node: Strong) -> None:
        """Render a Strong node.

        Parameters
        ----------
        node : Strong
            Strong to render

        """
        content = self._render_inline_content(node.children)
        symbol = self.options.emphasis_symbol * 2
        self._output.append(f"{symbol}{content}{symbol}{self._attributes(node)}")

    def visit_strikethrough(self, node: Strikethrough) -> None:
        """Render a Strikethrough node.

        Parameters
        ----------
        node : Strikethrough
            Strikethrough to render

        """
        content = self._render_inline_content(node.children)
        self._output.append(f"~~{content}~~")

    def visit_code(self, node: Code) -> None:
        """Render a Code node.

        Parameters
        ----------
        node : Code
            Code to render

        """
        self._output.append(format_inline_code(node.content) + self._attributes(node))

    def _is_autolink(self, node: Link) -> bool:
        if node.title or len(node.children) != 1 or not isinstance(node.children[0], Text):
            return False
        text = node.children[0].content
        return bool(_AUTOLINK_SCHEME.match(node.url)) and node.url in (text, f"mailto:{text}")

    @staticmethod
    def _format_destination(url: str, title: Optional[str]) -> str:
        """Format the parenthesized part of a link or image."""
        if not url or _UNSAFE_URL_CHARS.search(url) or url.count("(") != url.count(")"):
            url = "<" + url.replace("<", "%3C").replace(">", "%3E") + ">"
        if title:
            escaped_title = title.replace("\\", "\\\\").replace('"', '\\"')
            return f'({url} "{escaped_title}")'
        return f"({url})"

    def visit_link(self, node: Link) -> None:
        """Render a Link node, as an autolink when the text is the URL.

        Parameters
        ----------
        node : Link
            Link to render

        """
        if self._is_autolink(node):
            rendered = f"<{extract_text(node.children)}>"
        else:
            content = self._render_inline_content(node.children)
            rendered = f"[{content}]{self._format_destination(node.url, node.title)}"
        self._output.append(rendered + self._attributes(node))

    def visit_image(self, node: Image) -> None:
        """Render an Image node.

        Parameters
        ----------
        node : Image
            Image to render

        """
        alt = node.alt_text.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")
        self._output.append(f"![{alt}]{self._format_destination(node.url, node.title)}{self._attributes(node)}")

    def visit_line_break(self, node: LineBreak) -> None:
        """Render a LineBreak node.

        Parameters
        ----------
        node : LineBreak
            Line break to render

        """
        self._output.append("\n" if node.soft else "\\\n")

    def visit_html_inline(self, node: HTMLInline) -> None:
        """Render an HTMLInline node verbatim.

        Parameters
        ----------
        node : HTMLInline
            Inline HTML to render

        """
        self._output.append(node.content)

    def visit_attribute_block(self, node: AttributeBlock) -> None:
        """Render an unresolved AttributeBlock as its original text.

        Parameters
        ----------
        node : AttributeBlock
            Attribute block to render

        """
        self._output.append(node.source or serialize_attributes(node.record))


def ast_to_markdown(document: Document, options: MarkdownRendererOptions | None = None) -> str:
    """Render a Document to markdown text.

    Parameters
    ----------
    document : Document
        Tree to render
    options : MarkdownRendererOptions or None, default = None
        Renderer configuration

    Returns
    -------
    str
        Markdown text

    Examples
    --------
        >>> from mdattrs.ast import Document, Heading, Text
        >>> ast_to_markdown(Document(children=[Heading(level=2, children=[Text(content="Hi")], properties={"id": "x"})]))
        '## Hi {#x}\\n'

    """
    return MarkdownRenderer(options).render_to_string(document)
