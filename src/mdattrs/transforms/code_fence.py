#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/transforms/code_fence.py
"""Attribute extraction from fenced code info strings.

A fence's info string reaches the tree as two slots, ``language`` (the
first word) and ``meta`` (the rest). Attribute text can land in them in
three ways, tried in this order:

1. split across both slots: info ``{js .k}`` gives language ``{js`` and
   meta ``.k}``
2. at the end of meta: info ``js title="x" {.k}``
3. filling the language slot (info ``{.k}``) or ending it
   (info ``js{.k}``)

Code blocks have no children, so the record goes straight into the
node's ``properties``; there is nothing to resolve later.
"""

from __future__ import annotations

import logging
from typing import Optional

from mdattrs.ast.nodes import CodeBlock
from mdattrs.attributes.grammar import (
    BRACKETED_ATTRIBUTES_PATTERN,
    TRAILING_ATTRIBUTES_PATTERN,
    AttributeRecord,
    merge_records,
    parse_attribute_string,
)

logger = logging.getLogger(__name__)


def _from_both_slots(node: CodeBlock) -> Optional[AttributeRecord]:
    language, meta = node.language, node.meta
    if not (language and meta and language.startswith("{") and meta.endswith("}")):
        return None
    record = parse_attribute_string(f"{language[1:]} {meta[:-1]}")
    if record:
        node.language = None
        node.meta = None
    return record or None


def _from_meta(node: CodeBlock) -> Optional[AttributeRecord]:
    if not node.meta:
        return None
    match = TRAILING_ATTRIBUTES_PATTERN.search(node.meta)
    if not match:
        return None
    record = parse_attribute_string(match.group(2))
    if record:
        node.meta = node.meta[: match.start()].strip() or None
    return record or None


def _from_language(node: CodeBlock) -> Optional[AttributeRecord]:
    if not node.language:
        return None
    bracketed = BRACKETED_ATTRIBUTES_PATTERN.match(node.language)
    if bracketed:
        record = parse_attribute_string(bracketed.group(1))
        if record:
            node.language = None
        return record or None

    match = TRAILING_ATTRIBUTES_PATTERN.search(node.language)
    if not match:
        return None
    record = parse_attribute_string(match.group(2))
    if record:
        node.language = node.language[: match.start()].strip() or None
    return record or None


def extract_code_fence_attributes(node: CodeBlock) -> bool:
    """Move attribute text from a code block's info string into its properties.

    Parameters
    ----------
    node : CodeBlock
        Code block to inspect; modified in place

    Returns
    -------
    bool
        True when an attribute record was found and stored

    Examples
    --------
        >>> code = CodeBlock(content="x = 1\\n", language="python", meta="{.numbered}")
        >>> extract_code_fence_attributes(code)
        True
        >>> code.language, code.meta, code.properties
        ('python', None, {'class': 'numbered'})

    """
    for tier in (_from_both_slots, _from_meta, _from_language):
        record = tier(node)
        if record:
            merge_records(node.properties, record)
            logger.debug("Attached code fence attributes %s via %s", record, tier.__name__)
            return True
    return False
