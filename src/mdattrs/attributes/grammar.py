#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/attributes/grammar.py
"""Attribute grammar: from ``{#id .class key="value"}`` to an attribute record.

Two input shapes are accepted and both end in the same merge policy
(:func:`merge_attribute`):

- the raw text between the braces (:func:`parse_attribute_string`), used
  when attribute text is found inside ordinary text or a code fence's info
  string;
- an ordered list of pre-classified tokens (:func:`parse_attribute_tokens`),
  produced by the inline scanner in :mod:`mdattrs.attributes.tokenizer`.

Merge policy
------------
- ``id``: the last occurrence wins, whether written ``#x`` or ``id=x``
- ``class``: values are appended with a single space, in order, duplicates kept
- anything else: the last occurrence wins

Values are entity-decoded before they are stored. Nothing here raises on
bad attribute text: unmatched fragments simply contribute nothing.

Examples
--------
    >>> parse_attribute_string('#main .a .b data-x="1 &amp; 2" hidden')
    {'id': 'main', 'class': 'a b', 'data-x': '1 & 2', 'hidden': ''}

"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal, NamedTuple, Optional, Union

from mdattrs.attributes.entities import decode_entities
from mdattrs.exceptions import ValidationError

AttributeRecord = dict[str, str]

TokenKind = Literal["open", "id", "class", "name", "value", "end", "close"]

ATTRIBUTE_PATTERN = re.compile(
    r"""\#([\w-]+)"""
    r"""|\.([\w-]+)"""
    r"""|([\w:-]+)(?:=(?:"([^"]*)"|'([^']*)'|([\w-]+)))?"""
)

#: A brace block at the very end of a string, with the whitespace around it.
TRAILING_ATTRIBUTES_PATTERN = re.compile(r"(\s*)\{([^}]+)\}(\s*)\Z")

#: A string that is nothing but a brace block.
BRACKETED_ATTRIBUTES_PATTERN = re.compile(r"\A\{([^}]+)\}\Z")


@dataclass(frozen=True)
class AttributeToken:
    """One event of a tokenized attribute block.

    Parameters
    ----------
    kind : {'open', 'id', 'class', 'name', 'value', 'end', 'close'}
        ``open``/``close`` delimit the block, ``end`` closes one attribute
        (committing a boolean when no value followed its name) and ``value``
        chunks are concatenated until the attribute ends.
    text : str, default = ''
        Source text of the token (without quotes or sigils)
    start : int or None, default = None
        Offset of the token in the scanned source
    end : int or None, default = None
        Offset just past the token

    """

    kind: TokenKind
    text: str = ""
    start: Optional[int] = None
    end: Optional[int] = None


TokenLike = Union[AttributeToken, tuple[str, str]]


def merge_attribute(record: AttributeRecord, name: str, value: str) -> None:
    """Fold one attribute into ``record`` using the shared merge policy.

    Parameters
    ----------
    record : dict
        Record being built, modified in place
    name : str
        Attribute name (``id`` and ``class`` are special)
    value : str
        Decoded value; empty for boolean attributes

    """
    if name == "class":
        existing = record.get("class")
        record["class"] = f"{existing} {value}" if existing else value
    else:
        record[name] = value


def merge_records(target: AttributeRecord, source: AttributeRecord) -> AttributeRecord:
    """Merge every entry of ``source`` into ``target`` and return ``target``.

    Used when an attribute block is attached to a node that already carries
    properties, so classes keep accumulating across blocks.
    """
    for name, value in source.items():
        merge_attribute(target, name, value)
    return target


def build_record(pairs: Iterable[tuple[str, str]]) -> AttributeRecord:
    """Build a record from ``(name, decoded value)`` pairs in source order."""
    record: AttributeRecord = {}
    for name, value in pairs:
        merge_attribute(record, name, value)
    return record


def parse_attribute_string(source: str) -> AttributeRecord:
    """Parse the text between ``{`` and ``}`` into an attribute record.

    Parameters
    ----------
    source : str
        Attribute text without the surrounding braces

    Returns
    -------
    dict
        Attribute record; empty when nothing in ``source`` is an attribute

    Examples
    --------
        >>> parse_attribute_string("#x #y")
        {'id': 'y'}
        >>> parse_attribute_string("title='it''s'")
        {'title': 'it', 's': ''}

    """
    pairs: list[tuple[str, str]] = []
    for match in ATTRIBUTE_PATTERN.finditer(source):
        id_value, class_value, name, double_quoted, single_quoted, unquoted = match.groups()
        if id_value:
            pairs.append(("id", id_value))
        elif class_value:
            pairs.append(("class", class_value))
        elif name:
            raw_value = next((v for v in (double_quoted, single_quoted, unquoted) if v is not None), "")
            pairs.append((name, decode_entities(raw_value)))
    return build_record(pairs)


class _Pending(NamedTuple):
    """Attribute being accumulated across token events."""

    state: Literal["idle", "reading-name", "reading-value"]
    name: str = ""
    value: str = ""


_IDLE = _Pending("idle")


def _commit(pending: _Pending, pairs: list[tuple[str, str]]) -> None:
    if pending.state == "reading-name":
        pairs.append((pending.name, ""))
    elif pending.state == "reading-value":
        pairs.append((pending.name, decode_entities(pending.value)))


def _token_parts(token: TokenLike) -> tuple[str, str]:
    if isinstance(token, AttributeToken):
        return token.kind, token.text
    if isinstance(token, tuple) and len(token) == 2:
        return token[0], token[1]
    raise ValidationError(
        f"Attribute tokens must be AttributeToken or (kind, text) pairs, got {token!r}",
        parameter_name="tokens",
        parameter_value=token,
    )


def _step(pending: _Pending, kind: str, text: str, pairs: list[tuple[str, str]]) -> _Pending:
    if kind in ("open", "close", "end"):
        _commit(pending, pairs)
        return _IDLE
    if kind in ("id", "class"):
        _commit(pending, pairs)
        pairs.append((kind, decode_entities(text)))
        return _IDLE
    if kind == "name":
        _commit(pending, pairs)
        return _Pending("reading-name", text)
    if kind == "value":
        if pending.state == "idle":
            return pending
        return _Pending("reading-value", pending.name, pending.value + text)
    raise ValidationError(f"Unknown attribute token kind: {kind!r}", parameter_name="kind", parameter_value=kind)


def parse_attribute_tokens(tokens: Iterable[TokenLike]) -> AttributeRecord:
    """Fold a token stream into an attribute record.

    The stream is consumed by a small state machine (idle, reading a name,
    reading a value). A name followed directly by another attribute or by
    the end of the stream is committed as a boolean attribute; value chunks
    are joined before entity decoding.

    Parameters
    ----------
    tokens : iterable of AttributeToken or (kind, text)
        Events in source order

    Returns
    -------
    dict
        Attribute record; empty when the stream holds no attribute

    Raises
    ------
    ValidationError
        If a token is not a known kind (a caller contract violation)

    Examples
    --------
        >>> parse_attribute_tokens([("class", "a"), ("name", "k"), ("value", "x"),
        ...                         ("value", "y"), ("end", ""), ("class", "b")])
        {'class': 'a b', 'k': 'xy'}

    """
    pairs: list[tuple[str, str]] = []
    pending = _IDLE
    for token in tokens:
        kind, text = _token_parts(token)
        pending = _step(pending, kind, text, pairs)
    _commit(pending, pairs)
    return build_record(pairs)
