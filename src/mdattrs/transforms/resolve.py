#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/transforms/resolve.py
"""Ownership resolution for detached attribute blocks.

After extraction a tree may hold :class:`~mdattrs.ast.nodes.AttributeBlock`
nodes among ordinary children. Each one is given to exactly one owner, or
turned back into the text it came from:

Inline adjacency
    The previous sibling is emphasis, strong, a link, an image or inline
    code and ends at the very offset the block starts at. One character of
    anything in between, whitespace included, rules this out.

Block trailing
    The block is the last child of a heading, paragraph, code block, block
    quote, list, list item or table cell, and that parent takes it.

Standalone paragraph
    A paragraph made of nothing but one attribute block, which is not the
    first child of its parent, hands the record to its previous sibling
    when that sibling is a block that can hold attributes, and the
    paragraph disappears::

        > quoted text

        {.aside}

Fallback
    The block becomes a :class:`~mdattrs.ast.nodes.Text` holding its source,
    so nothing the author wrote is lost.

Traversal contract
------------------
Resolution is post-order: a node's children are settled (recursively)
before any decision about the node's own attribute children is made, and
those attribute children are visited from the last index to the first so
removing one never shifts an index still to be visited. Standalone
paragraphs are merged during the descent, in document order, into the
nearest preceding sibling that survives, so classes accumulate in the
order they were written.
"""

from __future__ import annotations

import logging
from typing import Optional

from mdattrs.ast.nodes import (
    AttributeBlock,
    BlockQuote,
    Code,
    CodeBlock,
    Emphasis,
    Heading,
    Image,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Strong,
    TableCell,
    Text,
    ThematicBreak,
)
from mdattrs.ast.utils import get_children
from mdattrs.attributes.grammar import merge_records

logger = logging.getLogger(__name__)

INLINE_ATTACHABLE: tuple[type[Node], ...] = (Emphasis, Strong, Link, Image, Code)

BLOCK_ATTACHABLE: tuple[type[Node], ...] = (Heading, Paragraph, CodeBlock, BlockQuote, List, ListItem, TableCell)

STANDALONE_TARGETS: tuple[type[Node], ...] = BLOCK_ATTACHABLE + (ThematicBreak,)

ORPHAN_METADATA_KEY = "attribute_source"


def attribute_gap(previous: Node, attribute: AttributeBlock) -> Optional[int]:
    """Return the distance in characters between ``previous`` and ``attribute``.

    Returns None when either node lacks an offset, which never counts as
    adjacent.
    """
    if previous.position is None or attribute.position is None:
        return None
    end = previous.position.end.offset
    start = attribute.position.start.offset
    if end is None or start is None:
        return None
    return start - end


def is_standalone_attribute_paragraph(node: Node) -> bool:
    """Whether ``node`` is a paragraph holding exactly one attribute block."""
    return isinstance(node, Paragraph) and len(node.children) == 1 and isinstance(node.children[0], AttributeBlock)


class AttributeResolver:
    """Attach or discard every :class:`AttributeBlock` in a tree.

    The tree is modified in place. Afterwards no AttributeBlock remains:
    each was merged into an owner's ``properties`` or replaced by a Text
    node whose ``metadata`` marks it as orphaned attribute source.

    Attributes
    ----------
    attached : int
        Number of blocks merged into an owner
    orphaned : int
        Number of blocks turned back into text

    Examples
    --------
        >>> from mdattrs import markdown_to_ast
        >>> from mdattrs.options import MarkdownParserOptions
        >>> options = MarkdownParserOptions(resolve_attributes=False)
        >>> doc = markdown_to_ast("*em*{.x} and *em* {.y}", options=options)
        >>> AttributeResolver().transform(doc).children[0].properties
        {'class': 'y'}

    """

    def __init__(self) -> None:
        """Initialize counters."""
        self.attached = 0
        self.orphaned = 0

    def transform(self, node: Node) -> Node:
        """Resolve all attribute blocks under ``node`` and return it."""
        self._resolve(node)
        return node

    def _resolve(self, node: Node) -> None:
        children = get_children(node)
        if not children:
            return

        self._settle_children(children)

        for index in range(len(children) - 1, -1, -1):
            attribute = children[index]
            if isinstance(attribute, AttributeBlock):
                self._resolve_attribute(node, children, index, attribute)

    def _settle_children(self, children: list[Node]) -> None:
        """Descend into children, merging standalone attribute paragraphs."""
        removed: list[int] = []
        previous: Optional[Node] = None
        for index, child in enumerate(children):
            if isinstance(child, AttributeBlock):
                continue
            if (
                previous is not None
                and isinstance(previous, STANDALONE_TARGETS)
                and is_standalone_attribute_paragraph(child)
            ):
                attribute = child.children[0]  # type: ignore[attr-defined]
                merge_records(previous.properties, attribute.record)
                self.attached += 1
                removed.append(index)
                logger.debug("Attached standalone %s to preceding %s", attribute.source, type(previous).__name__)
                continue
            self._resolve(child)
            previous = child

        for index in reversed(removed):
            del children[index]

    def _resolve_attribute(self, parent: Node, children: list[Node], index: int, attribute: AttributeBlock) -> None:
        if index > 0:
            previous = children[index - 1]
            if isinstance(previous, INLINE_ATTACHABLE) and attribute_gap(previous, attribute) == 0:
                merge_records(previous.properties, attribute.record)
                del children[index]
                self.attached += 1
                logger.debug("Attached %s to adjacent %s", attribute.source, type(previous).__name__)
                return

        if index == len(children) - 1 and isinstance(parent, BLOCK_ATTACHABLE):
            merge_records(parent.properties, attribute.record)
            del children[index]
            self.attached += 1
            logger.debug("Attached %s to enclosing %s", attribute.source, type(parent).__name__)
            return

        children[index] = Text(
            content=attribute.source,
            metadata={ORPHAN_METADATA_KEY: True},
            position=attribute.position,
        )
        self.orphaned += 1
        logger.debug("Left %s as literal text", attribute.source)
