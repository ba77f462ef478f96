#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/parsers/markdown.py
"""Markdown to AST converter.

This module parses markdown with mistune and builds the mdattrs AST,
then runs the attribute passes selected in :class:`MarkdownParserOptions`.

Mistune tokens carry no positions, so the converter keeps the inline
source of every text-bearing block, replays the inline tokens against it
(:class:`~mdattrs.parsers.source_map.InlineSpanMapper`) and anchors the
block in the document. Offsets refer to the input after line endings are
normalized to ``\\n``. A block whose inline source cannot be found
verbatim in the document (a paragraph continued inside a block quote,
for instance) gets positions relative to that source instead, and is
marked with ``metadata["position_base"] = "block"``. Relative offsets
still compare correctly with each other, which is all the zero-gap rule
needs.

Mistune splits text at backslash escapes and at unmatched delimiters; the
pieces are merged back into one Text node so a trailing attribute block
is seen whole. Characters that were escaped are remembered under
``metadata["escaped_offsets"]`` until the attribute passes have run, so
``\\{.x\\}`` stays literal text.

"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

import mistune
from mistune.plugins import import_plugin

from mdattrs.ast import (
    ESCAPED_OFFSETS_KEY,
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
    SourceSpan,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    merge_adjacent_text,
    walk,
)
from mdattrs.exceptions import MdAttrsError, ParsingError
from mdattrs.options.markdown import MarkdownParserOptions
from mdattrs.parsers.base import BaseParser, ParserInput
from mdattrs.parsers.mistune_attributes import ATTRIBUTES_TOKEN
from mdattrs.parsers.mistune_attributes import attributes as attributes_plugin
from mdattrs.parsers.source_map import ESCAPES_KEY, SPAN_KEY, InlineSpanMapper, LineIndex
from mdattrs.transforms.pipeline import apply_attributes

logger = logging.getLogger(__name__)

INLINE_SOURCE_KEY = "inline_source"

POSITION_BASE_KEY = "position_base"

# What may precede a block's text on its first line: indentation, block
# quote markers, list markers and ATX heading markers.
_BLOCK_START = re.compile(r"(?:[ \t>]|[-+*][ \t]|\d{1,9}[.)][ \t]|#{1,6}[ \t])*")

# A table cell may also follow the pipe that closes the previous cell.
_CELL_START = re.compile(_BLOCK_START.pattern + r"|.*\|[ \t]*")


class _SourceTrackingMarkdown(mistune.Markdown):
    """Mistune Markdown that keeps the inline source of each block token."""

    def _iter_render(self, tokens: Any, state: Any) -> Any:
        for tok in tokens:
            if "children" in tok:
                tok["children"] = list(self._iter_render(tok["children"], state))
            elif "text" in tok:
                source = tok.pop("text").strip(" \r\n\t\f")
                tok[INLINE_SOURCE_KEY] = source
                tok["children"] = self.inline(source, state.env)
            yield tok


class MarkdownToAstConverter(BaseParser):
    r"""Convert Markdown to AST representation.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration options

    Examples
    --------
    Basic parsing:

        >>> converter = MarkdownToAstConverter()
        >>> doc = converter.parse("# Hello {#top}\n\nThis is **bold**{.loud}.")
        >>> doc.children[0].properties
        {'id': 'top'}

    Keeping attribute blocks detached:

        >>> options = MarkdownParserOptions(resolve_attributes=False)
        >>> doc = MarkdownToAstConverter(options).parse("*em*{.x}")
        >>> type(doc.children[0].children[1]).__name__
        'AttributeBlock'

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the Markdown parser with options."""
        BaseParser._validate_options_type(options, MarkdownParserOptions, "markdown")
        options = options or MarkdownParserOptions()
        super().__init__(options)
        self.options: MarkdownParserOptions = options
        self._reset("")

    def _reset(self, document_text: str) -> None:
        """Reset per-document state."""
        self._document_text = document_text
        self._document_lines = LineIndex(document_text)
        self._cursor = 0
        self._inline_lines = self._document_lines
        self._inline_base = 0

    def _create_markdown(self) -> mistune.Markdown:
        """Build the mistune instance for the configured syntax."""
        plugins = []
        if self.options.parse_strikethrough:
            plugins.append(import_plugin("strikethrough"))
        if self.options.parse_tables:
            plugins.append(import_plugin("table"))
        if self.options.parse_inline_attributes:
            plugins.append(attributes_plugin)

        return _SourceTrackingMarkdown(
            renderer=None,
            inline=mistune.InlineParser(hard_wrap=False),
            plugins=plugins,
        )

    def parse(self, input_data: ParserInput) -> Document:
        """Parse Markdown input into AST Document.

        Parameters
        ----------
        input_data : str, Path, IO, or bytes
            Markdown input to parse

        Returns
        -------
        Document
            AST document node, with attributes extracted and resolved as
            configured

        Raises
        ------
        ParsingError
            If the input cannot be read or tokenized

        """
        markdown_content = self._load_text_content(input_data)
        markdown_content = markdown_content.replace("\r\n", "\n").replace("\r", "\n")
        self._reset(markdown_content)

        try:
            tokens, _state = self._create_markdown().parse(markdown_content)
        except MdAttrsError:
            raise
        except Exception as e:
            raise ParsingError(f"Failed to tokenize markdown: {e}", parsing_stage="tokenize", original_error=e) from e

        children = self._process_tokens(tokens) if isinstance(tokens, list) else []
        document = Document(children=children, position=self._document_lines.span(0, len(markdown_content)))

        apply_attributes(
            document,
            extract=self.options.extract_block_attributes,
            code_fences=self.options.extract_code_fence_attributes,
            resolve=self.options.resolve_attributes,
        )

        for node in walk(document):
            node.metadata.pop(ESCAPED_OFFSETS_KEY, None)
            if not self.options.track_positions:
                node.position = None
                node.metadata.pop(POSITION_BASE_KEY, None)

        logger.debug("Parsed markdown into %d top-level block(s)", len(document.children))
        return document

    def _anchor(self, text: str, boundary: re.Pattern[str] = _BLOCK_START) -> Optional[int]:
        """Find ``text`` in the document at or after the cursor and move past it.

        Only an occurrence whose line prefix matches ``boundary`` counts, so
        text that mistune consumed without a node (link reference
        definitions, for one) cannot capture the block.
        """
        if not text:
            return None
        document = self._document_text
        index = document.find(text, self._cursor)
        while index != -1:
            line_start = document.rfind("\n", 0, index) + 1
            if boundary.fullmatch(document, line_start, index):
                self._cursor = index + len(text)
                return index
            index = document.find(text, index + 1)
        return None

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process a list of mistune block tokens into AST nodes."""
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_token(token)
            if node is not None:
                nodes.append(node)
        return nodes

    def _process_token(self, token: dict[str, Any]) -> Node | None:
        """Process a single mistune block token into an AST node."""
        token_type = token.get("type", "")

        handler_map: dict[str, Any] = {
            "heading": self._process_heading,
            "paragraph": self._process_paragraph,
            "block_text": self._process_paragraph,
            "block_code": self._process_code_block,
            "block_quote": self._process_block_quote,
            "list": self._process_list,
            "list_item": self._process_list_item,
            "table": self._process_table,
            "thematic_break": self._process_thematic_break,
            "block_html": self._process_html_block,
        }

        handler = handler_map.get(token_type)
        if handler:
            return handler(token)
        if token_type != "blank_line":
            logger.debug("Skipping unsupported block token %r", token_type)
        return None

    def _process_inline_content(self, token: dict[str, Any], node: Node) -> list[Node]:
        """Convert the inline children of a text-bearing block.

        Sets up the coordinate system for the block's inline spans and gives
        ``node`` the span of its inline source.
        """
        source = token.get(INLINE_SOURCE_KEY, "")
        inline_tokens = token.get("children", [])
        InlineSpanMapper(source).map(inline_tokens)

        base = self._anchor(source, _CELL_START if isinstance(node, TableCell) else _BLOCK_START)
        if base is None:
            self._inline_lines, self._inline_base = LineIndex(source), 0
            node.metadata[POSITION_BASE_KEY] = "block"
        else:
            self._inline_lines, self._inline_base = self._document_lines, base

        node.position = self._inline_lines.span(self._inline_base, self._inline_base + len(source))
        return self._process_inline_tokens(inline_tokens)

    def _enclose(self, node: Node, children: list[Node]) -> None:
        """Give a container the span from its first to its last child."""
        if not children:
            return
        first, last = children[0], children[-1]
        for child in (first, last):
            if child.position is None or POSITION_BASE_KEY in child.metadata:
                return
        node.position = SourceSpan(start=first.position.start, end=last.position.end)  # type: ignore[union-attr]

    def _process_heading(self, token: dict[str, Any]) -> Heading:
        """Process heading token (ATX or setext)."""
        attrs = token.get("attrs", {})
        level = attrs.get("level", 1) if isinstance(attrs, dict) else 1
        if not isinstance(level, int) or level < 1 or level > 6:
            level = 1

        heading = Heading(level=level)
        heading.children = self._process_inline_content(token, heading)
        return heading

    def _process_paragraph(self, token: dict[str, Any]) -> Paragraph:
        """Process paragraph token; ``block_text`` from tight lists lands here too."""
        paragraph = Paragraph()
        paragraph.children = self._process_inline_content(token, paragraph)
        return paragraph

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        """Process fenced or indented code.

        The info string is split at its first whitespace into ``language``
        and ``meta``; attribute text in either slot is dealt with later by
        the code fence extractor.
        """
        content = token.get("raw", "")
        attrs = token.get("attrs", {})
        info = (attrs.get("info") or "").strip() if isinstance(attrs, dict) else ""

        language: Optional[str] = None
        meta: Optional[str] = None
        if info:
            parts = info.split(maxsplit=1)
            language = parts[0]
            if len(parts) > 1:
                meta = parts[1]

        marker = token.get("marker") or "```"
        node = CodeBlock(
            content=content,
            language=language,
            meta=meta,
            fence_char=marker[0],
            fence_length=len(marker),
        )
        if token.get("style") == "indent":
            node.metadata["indented"] = True

        start = self._anchor(content)
        if start is not None:
            node.position = self._document_lines.span(start, start + len(content))
        return node

    def _process_block_quote(self, token: dict[str, Any]) -> BlockQuote:
        """Process block quote token."""
        children = self._process_tokens(token.get("children", []))
        quote = BlockQuote(children=children)
        self._enclose(quote, children)
        return quote

    def _process_list(self, token: dict[str, Any]) -> List:
        """Process list token."""
        attrs = token.get("attrs", {})
        if not isinstance(attrs, dict):
            attrs = {}

        items = [self._process_list_item(child) for child in token.get("children", []) if isinstance(child, dict)]
        node = List(
            ordered=bool(attrs.get("ordered", False)),
            children=list(items),
            start=attrs.get("start", 1),
            tight=token.get("tight", True),
        )
        self._enclose(node, node.children)
        return node

    def _process_list_item(self, token: dict[str, Any]) -> ListItem:
        """Process list item token."""
        children = self._process_tokens(token.get("children", []))
        item = ListItem(children=children)
        self._enclose(item, children)
        return item

    def _process_table(self, token: dict[str, Any]) -> Table:
        """Process table token into a header row followed by body rows."""
        rows: list[Node] = []
        alignments: list[Any] = []

        for section in token.get("children", []):
            section_type = section.get("type", "")
            if section_type == "table_head":
                cells = self._process_table_cells(section.get("children", []))
                alignments = [cell.alignment for cell in cells]
                rows.append(TableRow(children=list(cells), is_header=True))
            elif section_type == "table_body":
                for row_token in section.get("children", []):
                    cells = self._process_table_cells(row_token.get("children", []))
                    rows.append(TableRow(children=list(cells), is_header=False))

        for row in rows:
            self._enclose(row, row.children)  # type: ignore[attr-defined]
        table = Table(children=rows, alignments=alignments)
        self._enclose(table, rows)
        return table

    def _process_table_cells(self, cell_tokens: list[dict[str, Any]]) -> list[TableCell]:
        """Process the cells of one table row."""
        cells = []
        for cell_token in cell_tokens:
            attrs = cell_token.get("attrs", {})
            cell = TableCell(alignment=attrs.get("align") if isinstance(attrs, dict) else None)
            cell.children = self._process_inline_content(cell_token, cell)
            cells.append(cell)
        return cells

    def _process_thematic_break(self, token: dict[str, Any]) -> ThematicBreak:
        """Process thematic break token."""
        return ThematicBreak()

    def _process_html_block(self, token: dict[str, Any]) -> HTMLBlock:
        """Process HTML block token."""
        content = token.get("raw", "")
        node = HTMLBlock(content=content)
        start = self._anchor(content)
        if start is not None:
            node.position = self._document_lines.span(start, start + len(content))
        return node

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process inline tokens in the current block's coordinates."""
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_inline_token(token)
            if node is not None:
                nodes.append(node)
        return merge_adjacent_text(nodes)

    def _span(self, token: dict[str, Any]) -> Optional[SourceSpan]:
        """Return the span recorded for ``token`` by the source mapper."""
        span = token.get(SPAN_KEY)
        if span is None:
            return None
        start, end = span
        return self._inline_lines.span(self._inline_base + start, self._inline_base + end)

    def _handle_text_token(self, token: dict[str, Any]) -> Text:
        """Handle text token, remembering which characters were escaped."""
        text = Text(content=token.get("raw", ""))
        if token.get(ESCAPES_KEY):
            text.metadata[ESCAPED_OFFSETS_KEY] = list(token[ESCAPES_KEY])
        return text

    def _handle_strong_token(self, token: dict[str, Any]) -> Strong:
        """Handle strong token."""
        return Strong(children=self._process_inline_tokens(token.get("children", [])))

    def _handle_emphasis_token(self, token: dict[str, Any]) -> Emphasis:
        """Handle emphasis token."""
        return Emphasis(children=self._process_inline_tokens(token.get("children", [])))

    def _handle_strikethrough_token(self, token: dict[str, Any]) -> Strikethrough:
        """Handle strikethrough token."""
        return Strikethrough(children=self._process_inline_tokens(token.get("children", [])))

    def _handle_codespan_token(self, token: dict[str, Any]) -> Code:
        """Handle codespan token."""
        return Code(content=token.get("raw", ""))

    def _handle_link_token(self, token: dict[str, Any]) -> Link:
        """Handle link token, inline, reference or autolink."""
        attrs = token.get("attrs", {})
        if not isinstance(attrs, dict):
            attrs = {}
        link = Link(
            url=attrs.get("url", ""),
            title=attrs.get("title"),
            children=self._process_inline_tokens(token.get("children", [])),
        )
        if "ref" in token:
            link.metadata["reference"] = token.get("label") or token["ref"]
        return link

    def _handle_image_token(self, token: dict[str, Any]) -> Image:
        """Handle image token; the alt text is the flattened label."""
        attrs = token.get("attrs", {})
        if not isinstance(attrs, dict):
            attrs = {}
        return Image(
            url=attrs.get("url", ""),
            alt_text=_flatten_token_text(token.get("children", [])),
            title=attrs.get("title"),
        )

    def _handle_linebreak_token(self, token: dict[str, Any]) -> LineBreak:
        """Handle hard line break token."""
        return LineBreak(soft=False)

    def _handle_softbreak_token(self, token: dict[str, Any]) -> LineBreak:
        """Handle soft line break token."""
        return LineBreak(soft=True)

    def _handle_inline_html_token(self, token: dict[str, Any]) -> HTMLInline:
        """Handle inline_html token."""
        return HTMLInline(content=token.get("raw", ""))

    def _handle_attributes_token(self, token: dict[str, Any]) -> AttributeBlock:
        """Handle an inline attribute block from the attributes plugin."""
        return AttributeBlock(record=dict(token["attrs"]["record"]), source=token.get("raw", ""))

    def _process_inline_token(self, token: dict[str, Any]) -> Node | None:
        """Process a single inline token, attaching its source span."""
        token_type = token.get("type", "")

        handler_map: dict[str, Any] = {
            "text": self._handle_text_token,
            "strong": self._handle_strong_token,
            "emphasis": self._handle_emphasis_token,
            "codespan": self._handle_codespan_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "linebreak": self._handle_linebreak_token,
            "softbreak": self._handle_softbreak_token,
            "strikethrough": self._handle_strikethrough_token,
            "inline_html": self._handle_inline_html_token,
            ATTRIBUTES_TOKEN: self._handle_attributes_token,
        }

        handler = handler_map.get(token_type)
        if handler is None:
            logger.debug("Skipping unsupported inline token %r", token_type)
            return None
        node = handler(token)
        node.position = self._span(token)
        return node


def _flatten_token_text(tokens: list[dict[str, Any]]) -> str:
    """Concatenate the raw text of inline tokens, depth first."""
    parts = []
    for token in tokens:
        if "children" in token:
            parts.append(_flatten_token_text(token["children"]))
        elif token.get("type") in ("text", "codespan"):
            parts.append(token.get("raw", ""))
    return "".join(parts)


def markdown_to_ast(markdown_content: ParserInput, options: MarkdownParserOptions | None = None) -> Document:
    r"""Convert Markdown to AST.

    This is a convenience function that creates a converter and parses
    the markdown in one step.

    Parameters
    ----------
    markdown_content : str, Path, IO, or bytes
        Markdown text to parse
    options : MarkdownParserOptions or None, default = None
        Parser configuration

    Returns
    -------
    Document
        AST document node

    Examples
    --------
    >>> from mdattrs.parsers.markdown import markdown_to_ast
    >>> doc = markdown_to_ast("# Hello\n\n[link](url){target=\"_blank\"}")
    >>> doc.children[1].children[0].properties
    {'target': '_blank'}

    """
    converter = MarkdownToAstConverter(options)
    return converter.parse(markdown_content)
