#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/transforms/pipeline.py
"""Attribute pipeline orchestration.

Runs the attribute passes over an existing tree in their fixed order:

1. optional node-protocol validation (:class:`~mdattrs.ast.visitors.ValidationVisitor`)
2. block trailing-text and code-fence extraction (one top-down walk)
3. ownership resolution (post-order)

Examples
--------
    >>> from mdattrs.ast import Document, Paragraph, Text
    >>> doc = Document(children=[Paragraph(children=[Text(content="Hello {.greeting}")])])
    >>> apply_attributes(doc).children[0].properties
    {'class': 'greeting'}

"""

from __future__ import annotations

import logging

from mdattrs.ast.nodes import Node
from mdattrs.ast.visitors import ValidationVisitor
from mdattrs.transforms.extract import BlockAttributeExtractor
from mdattrs.transforms.resolve import AttributeResolver

logger = logging.getLogger(__name__)


def apply_attributes(
    tree: Node,
    extract: bool = True,
    code_fences: bool = True,
    resolve: bool = True,
    validate: bool = False,
) -> Node:
    """Extract and resolve attribute blocks in ``tree``, in place.

    Parameters
    ----------
    tree : Node
        Root of the tree, usually a Document
    extract : bool, default = True
        Split trailing attribute text off headings, paragraphs and table cells
    code_fences : bool, default = True
        Move attribute text out of fenced code info strings
    resolve : bool, default = True
        Run the ownership resolver. When False, detached AttributeBlock
        nodes are left in the tree for inspection.
    validate : bool, default = False
        Check the node protocol first and raise on violations

    Returns
    -------
    Node
        The same tree

    Raises
    ------
    ValidationError
        If ``validate`` is set and the tree breaks the node protocol

    """
    if validate:
        tree.accept(ValidationVisitor(strict=True))

    if extract or code_fences:
        extractor = BlockAttributeExtractor(trailing_text=extract, code_fences=code_fences)
        extractor.transform(tree)
        logger.debug("Extracted %d block attribute record(s)", extractor.extracted)

    if resolve:
        resolver = AttributeResolver()
        resolver.transform(tree)
        logger.debug("Resolved attributes: %d attached, %d left as text", resolver.attached, resolver.orphaned)

    return tree
