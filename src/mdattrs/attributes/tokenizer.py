#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/attributes/tokenizer.py
"""Strict scanner for inline ``{...}`` attribute blocks.

Where :func:`~mdattrs.attributes.grammar.parse_attribute_string` is lenient
(it picks whatever attributes it can find in arbitrary text), this scanner
decides whether the text at a position *is* an attribute block at all. It
is used by the markdown reader's inline rule, so a brace that is not a
well-formed block stays ordinary text.

Accepted syntax::

    "{" space* attribute (space+ attribute)* space* "}"

    attribute := "#" ident | "." ident | name ( "=" value )?
    ident     := [\\w-]+
    name      := [\\w:-]+
    value     := '"' [^"]* '"' | "'" [^']* "'" | [\\w-]+

Whitespace may include single line endings. The scanner emits the token
events consumed by :func:`~mdattrs.attributes.grammar.parse_attribute_tokens`:
``open``, ``id``, ``class``, ``name``, ``value`` (one chunk per line of a
quoted value), ``end`` after each keyed or boolean attribute, and ``close``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from mdattrs.attributes.grammar import AttributeToken

_IDENT = re.compile(r"[\w-]+")
_NAME = re.compile(r"[\w:-]+")
_UNQUOTED_VALUE = re.compile(r"[\w-]+")
_SPACE = re.compile(r"[ \t]*(?:\r?\n[ \t]*)?")


@dataclass(frozen=True)
class AttributeScan:
    """Result of a successful scan.

    Parameters
    ----------
    tokens : tuple of AttributeToken
        Events from ``open`` to ``close``
    start : int
        Offset of the opening brace
    end : int
        Offset just past the closing brace

    """

    tokens: tuple[AttributeToken, ...]
    start: int
    end: int


def _value_chunks(value: str, offset: int) -> list[AttributeToken]:
    chunks = []
    for line in value.splitlines(keepends=True):
        chunks.append(AttributeToken("value", line, offset, offset + len(line)))
        offset += len(line)
    return chunks


def _scan_attribute(src: str, pos: int, tokens: list[AttributeToken]) -> Optional[int]:
    """Scan one attribute at ``pos`` and return the offset after it."""
    sigil = src[pos]
    if sigil in "#.":
        match = _IDENT.match(src, pos + 1)
        if not match:
            return None
        tokens.append(AttributeToken("id" if sigil == "#" else "class", match.group(), match.start(), match.end()))
        return match.end()

    match = _NAME.match(src, pos)
    if not match:
        return None
    tokens.append(AttributeToken("name", match.group(), match.start(), match.end()))
    pos = match.end()

    if src.startswith("=", pos):
        pos += 1
        quote = src[pos : pos + 1]
        if quote in ('"', "'"):
            closing = src.find(quote, pos + 1)
            if closing == -1:
                return None
            tokens.extend(_value_chunks(src[pos + 1 : closing], pos + 1))
            pos = closing + 1
        else:
            value = _UNQUOTED_VALUE.match(src, pos)
            if not value:
                return None
            tokens.append(AttributeToken("value", value.group(), value.start(), value.end()))
            pos = value.end()

    tokens.append(AttributeToken("end", "", pos, pos))
    return pos


def scan_attribute_block(src: str, pos: int = 0) -> Optional[AttributeScan]:
    """Scan an attribute block starting at ``src[pos]``.

    Parameters
    ----------
    src : str
        Text to scan
    pos : int, default = 0
        Offset of the candidate opening brace

    Returns
    -------
    AttributeScan or None
        The token events and extent of the block, or None when the text at
        ``pos`` is not a well-formed, non-empty attribute block

    Examples
    --------
        >>> scan = scan_attribute_block('see {#a .b}', 4)
        >>> [t.kind for t in scan.tokens], scan.end
        (['open', 'id', 'class', 'close'], 11)
        >>> scan_attribute_block('{}') is None
        True

    """
    if not src.startswith("{", pos):
        return None

    tokens = [AttributeToken("open", "{", pos, pos + 1)]
    i = _SPACE.match(src, pos + 1).end()  # type: ignore[union-attr]
    separated = True
    count = 0

    while i < len(src):
        if src[i] == "}":
            if count == 0:
                return None
            tokens.append(AttributeToken("close", "}", i, i + 1))
            return AttributeScan(tuple(tokens), pos, i + 1)

        if not separated:
            return None

        after = _scan_attribute(src, i, tokens)
        if after is None:
            return None
        count += 1

        i = _SPACE.match(src, after).end()  # type: ignore[union-attr]
        separated = i > after

    return None
