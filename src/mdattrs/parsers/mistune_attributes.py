#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/parsers/mistune_attributes.py
"""Mistune plugin recognizing inline ``{...}`` attribute blocks.

The plugin adds an ``attributes`` inline rule. When a ``{`` opens a
well-formed, non-empty block it emits a token::

    {"type": "attributes", "raw": "{.x}", "attrs": {"record": {"class": "x"}}}

A block that closes the inline text and follows whitespace (or nothing) is
left as plain text: that is block trailing syntax, and it is split off
later by :class:`~mdattrs.transforms.extract.BlockAttributeExtractor` so
that headings and paragraphs are treated the same whether or not the
plugin is active.
"""

from __future__ import annotations

from re import Match
from typing import TYPE_CHECKING, Any, Optional

from mdattrs.attributes.grammar import parse_attribute_tokens
from mdattrs.attributes.tokenizer import AttributeScan, scan_attribute_block

if TYPE_CHECKING:
    from mistune.core import InlineState
    from mistune.inline_parser import InlineParser
    from mistune.markdown import Markdown

ATTRIBUTES_TOKEN = "attributes"

INLINE_ATTRIBUTES_PATTERN = r"\{"


def is_block_trailing(src: str, scan: AttributeScan) -> bool:
    """Whether a scanned block is trailing syntax for the enclosing block.

    Examples
    --------
        >>> is_block_trailing("Title {#top}", scan_attribute_block("Title {#top}", 6))
        True
        >>> is_block_trailing("*em*{.x}", scan_attribute_block("*em*{.x}", 4))
        False

    """
    if src[scan.end :].strip():
        return False
    return scan.start == 0 or src[scan.start - 1].isspace()


def parse_inline_attributes(inline: InlineParser, m: Match[str], state: InlineState) -> Optional[int]:
    """Inline rule callback; returns the end offset or None to fall back to text."""
    src = state.src
    scan = scan_attribute_block(src, m.start())
    if scan is None or is_block_trailing(src, scan):
        return None

    record = parse_attribute_tokens(scan.tokens)
    if not record:
        return None

    token: dict[str, Any] = {
        "type": ATTRIBUTES_TOKEN,
        "raw": src[scan.start : scan.end],
        "attrs": {"record": record},
    }
    state.append_token(token)
    return scan.end


def attributes(md: Markdown) -> None:
    """Register the inline attribute rule on a mistune Markdown instance.

    Parameters
    ----------
    md : mistune.Markdown
        Instance to extend

    Examples
    --------
        >>> import mistune
        >>> md = mistune.create_markdown(renderer=None, plugins=[attributes])
        >>> md("*em*{.x}")[0]["children"][1]["type"]
        'attributes'

    """
    md.inline.register(ATTRIBUTES_TOKEN, INLINE_ATTRIBUTES_PATTERN, parse_inline_attributes, before="link")
