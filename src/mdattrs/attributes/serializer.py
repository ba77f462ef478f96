#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/attributes/serializer.py
"""Canonical text form of attribute records.

:func:`serialize_attributes` is the single place a record becomes
``{#id .a .b key="value"}`` text. The markdown renderer decides where that
text goes for each node kind; :func:`format_inline_code` covers the one
placement that also has to re-fence its host.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from mdattrs.attributes.entities import encode_attribute_value

_BACKTICK_RUN = re.compile(r"`+")


def serialize_attributes(record: Mapping[str, str] | None) -> str:
    """Render an attribute record as a brace block.

    Order is fixed: ``#id`` first, then one ``.class`` per space-separated
    class name, then every other key in record order. Empty values render
    as bare names; other values are double-quoted with ``"`` and ``&``
    escaped. Empty ``id`` and ``class`` values are dropped.

    Parameters
    ----------
    record : mapping or None
        Attribute names to values

    Returns
    -------
    str
        The brace block, or ``""`` when there is nothing to render

    Examples
    --------
        >>> serialize_attributes({"target": "_blank", "class": "a b", "id": "x"})
        '{#x .a .b target="_blank"}'
        >>> serialize_attributes({"title": 'say "hi"', "hidden": ""})
        '{title="say &#x22;hi&#x22;" hidden}'
        >>> serialize_attributes({})
        ''

    """
    if not record:
        return ""

    parts: list[str] = []
    if record.get("id"):
        parts.append(f"#{record['id']}")

    for class_name in (record.get("class") or "").split():
        parts.append(f".{class_name}")

    for key, value in record.items():
        if key in ("id", "class"):
            continue
        if value == "":
            parts.append(key)
        else:
            parts.append(f'{key}="{encode_attribute_value(value)}"')

    if not parts:
        return ""
    return "{" + " ".join(parts) + "}"


def format_inline_code(content: str) -> str:
    """Wrap ``content`` in a back-tick fence that cannot collide with it.

    The fence is one back-tick longer than the longest run inside the
    content. A space is added on both sides when the content starts or
    ends with a back-tick, or when it starts and ends with a space while
    holding something other than spaces, so a reader stripping one space
    from each side gets the content back.

    Examples
    --------
        >>> format_inline_code("a")
        '`a`'
        >>> format_inline_code("a``b")
        '```a``b```'
        >>> format_inline_code("`tick")
        '`` `tick ``'
        >>> format_inline_code(" a ")
        '`  a  `'

    """
    longest = max((len(run) for run in _BACKTICK_RUN.findall(content)), default=0)
    fence = "`" * (longest + 1)

    needs_padding = content.startswith("`") or content.endswith("`")
    if content.startswith(" ") and content.endswith(" ") and content.strip(" "):
        needs_padding = True

    if needs_padding:
        content = f" {content} "
    return f"{fence}{content}{fence}"
