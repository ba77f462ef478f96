#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/transforms/extract.py
"""Block trailing-text attribute extraction.

Block-level attribute syntax puts the brace block at the end of the block's
text::

    # Introduction {#intro .lead}

    A paragraph. {.note}

The reader leaves such text alone, so after parsing it is simply the tail
of the block's last :class:`~mdattrs.ast.nodes.Text` child. This module
splits that tail off into a detached :class:`~mdattrs.ast.nodes.AttributeBlock`
sibling, fixing up source positions on both halves. Who ends up owning the
block is decided later by :class:`~mdattrs.transforms.resolve.AttributeResolver`.

Fenced code is handled in the same walk through
:func:`~mdattrs.transforms.code_fence.extract_code_fence_attributes`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from mdattrs.ast.nodes import (
    AttributeBlock,
    BlockQuote,
    CodeBlock,
    Document,
    Heading,
    List,
    ListItem,
    Node,
    Paragraph,
    SourceSpan,
    Table,
    TableCell,
    Text,
)
from mdattrs.ast.utils import ESCAPED_OFFSETS_KEY, advance_point, get_children, merge_adjacent_text
from mdattrs.attributes.grammar import TRAILING_ATTRIBUTES_PATTERN, parse_attribute_string
from mdattrs.transforms.code_fence import extract_code_fence_attributes

logger = logging.getLogger(__name__)


def _as_written(value: str, escaped: Iterable[int], start: int, end: int) -> str:
    """Return ``value[start:end]`` with the backslashes of escaped characters put back."""
    marks = {offset for offset in escaped if start <= offset < end}
    if not marks:
        return value[start:end]
    return "".join(f"\\{value[index]}" if index in marks else value[index] for index in range(start, end))


def extract_trailing_attributes(node: Node) -> Optional[AttributeBlock]:
    r"""Split a trailing attribute block off the last text child of ``node``.

    Parameters
    ----------
    node : Node
        A node with inline children (heading, paragraph, table cell)

    Returns
    -------
    AttributeBlock or None
        The new detached node, already inserted into ``node.children``, or
        None when the last child is not text ending in a non-empty block

    Notes
    -----
    Given last text ``"end {.c}"`` the text is shrunk to ``"end"`` and the
    attribute block is appended after it. When nothing but whitespace
    precedes the braces the whitespace is kept as its own text node; when
    nothing at all precedes them the text node is replaced outright.

    Adjacent text children are merged first, so text a parser split at an
    escape or a stray back-tick is inspected whole. Braces listed as escaped
    under ``ESCAPED_OFFSETS_KEY`` never open or close a block.

    Positions, when present, are split around the whitespace gap:
    the shrunk text ends where the leading whitespace begins, the attribute
    block starts at its ``{`` and keeps the original end.

    Examples
    --------
        >>> para = Paragraph(children=[Text(content="line one\nend {.c}")])
        >>> extract_trailing_attributes(para).record
        {'class': 'c'}
        >>> para.children[0].content
        'line one\nend'

    """
    children = get_children(node)
    if not children:
        return None
    children[:] = merge_adjacent_text(children)
    if not isinstance(children[-1], Text):
        return None

    text_node = children[-1]
    value = text_node.content
    match = TRAILING_ATTRIBUTES_PATTERN.search(value)
    if not match:
        return None

    escaped = text_node.metadata.get(ESCAPED_OFFSETS_KEY, ())
    if match.start(2) - 1 in escaped or match.end(2) in escaped:
        return None

    record = parse_attribute_string(_as_written(value, escaped, match.start(2), match.end(2)))
    if not record:
        return None

    leading, trailing = match.group(1), match.group(3)
    text_end = match.start()
    attr_start = text_end + len(leading)
    attr_end = len(value) - len(trailing)

    attribute = AttributeBlock(record=record, source=_as_written(value, escaped, attr_start, attr_end))

    if text_node.position is not None:
        start = text_node.position.start
        attr_point = advance_point(start, _as_written(value, escaped, 0, attr_start))
        attribute.position = SourceSpan(start=attr_point, end=text_node.position.end)
        text_node.position = SourceSpan(start=start, end=advance_point(start, _as_written(value, escaped, 0, text_end)))

    remainder = value[:text_end]
    if escaped:
        text_node.metadata[ESCAPED_OFFSETS_KEY] = [offset for offset in escaped if offset < len(remainder)]
    if remainder:
        text_node.content = remainder
        children.append(attribute)
    elif leading:
        text_node.content = leading
        if text_node.position is not None:
            text_node.position.end = advance_point(text_node.position.start, leading)
        children.append(attribute)
    else:
        children[-1] = attribute

    logger.debug("Extracted trailing attributes %s from %s", attribute.source, type(node).__name__)
    return attribute


class BlockAttributeExtractor:
    """Detach trailing attribute blocks throughout a document.

    The walk is structural and depth first: headings, paragraphs and table
    cells have their trailing text inspected, fenced code has its info
    string inspected, and block quotes, lists and list items are descended
    into so nested blocks are treated exactly like top-level ones.

    Parameters
    ----------
    trailing_text : bool, default = True
        Whether to split trailing attribute text off headings, paragraphs
        and table cells
    code_fences : bool, default = True
        Whether to extract attributes from fenced code info strings

    Examples
    --------
        >>> doc = Document(children=[Heading(level=1, children=[Text(content="Title {#top}")])])
        >>> _ = BlockAttributeExtractor().transform(doc)
        >>> [type(child).__name__ for child in doc.children[0].children]
        ['Text', 'AttributeBlock']

    """

    def __init__(self, trailing_text: bool = True, code_fences: bool = True):
        """Initialize the extractor."""
        self.trailing_text = trailing_text
        self.code_fences = code_fences
        self.extracted = 0

    def transform(self, node: Node) -> Node:
        """Extract attributes in place and return ``node``.

        Parameters
        ----------
        node : Node
            Root of the subtree to process (usually a Document)

        Returns
        -------
        Node
            The same node, modified in place

        """
        if isinstance(node, Document):
            self._process_blocks(node.children)
        else:
            self._process_blocks([node])
        return node

    def _process_blocks(self, blocks: list[Node]) -> None:
        for block in blocks:
            if isinstance(block, (Heading, Paragraph, TableCell)):
                if self.trailing_text and extract_trailing_attributes(block) is not None:
                    self.extracted += 1
            elif isinstance(block, CodeBlock):
                if self.code_fences and extract_code_fence_attributes(block):
                    self.extracted += 1
            elif isinstance(block, (BlockQuote, List, ListItem)):
                self._process_blocks(block.children)
            elif isinstance(block, Table):
                for row in block.children:
                    self._process_blocks(get_children(row) or [])
