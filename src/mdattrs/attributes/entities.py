#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/attributes/entities.py
"""Character reference decoding and encoding for attribute values.

Decoding follows the HTML rules for attribute values: numeric references
(``&#38;``, ``&#x26;``) and named references (``&amp;``) are replaced by
the characters they denote, a legacy named reference without its
semicolon (``&copy``) is decoded only when it is not followed by ``=`` or
more alphanumerics, and anything unrecognised stays as written.

Encoding is deliberately minimal: only ``&`` and ``"`` are escaped, which
is all a double-quoted attribute value needs.
"""

from __future__ import annotations

import html
import re
from html.entities import html5

_REFERENCE_PATTERN = re.compile(r"&(#[xX][0-9a-fA-F]+;?|#[0-9]+;?|[A-Za-z][A-Za-z0-9]*;?)")

_ENCODE_MAP = {"&": "&#x26;", '"': "&#x22;"}
_ENCODE_PATTERN = re.compile(r'[&"]')


def _decode_reference(match: re.Match[str]) -> str:
    body = match.group(1)
    if body.startswith("#"):
        return html.unescape(match.group(0))

    if body.endswith(";"):
        return html5.get(body, match.group(0))

    # Legacy references without a semicolon are only honoured when they
    # end the alphanumeric run and are not the name part of a query string.
    following = match.string[match.end() : match.end() + 1]
    if body in html5 and following != "=":
        return html5[body]
    return match.group(0)


def decode_entities(value: str) -> str:
    """Decode named and numeric character references in an attribute value.

    Parameters
    ----------
    value : str
        Raw attribute value as written in the source

    Returns
    -------
    str
        Value with references replaced; unknown references pass through

    Examples
    --------
        >>> decode_entities("Tom &amp; Jerry &#x22;live&#34;")
        'Tom & Jerry "live"'
        >>> decode_entities("&bogus; stays")
        '&bogus; stays'

    """
    if "&" not in value:
        return value
    return _REFERENCE_PATTERN.sub(_decode_reference, value)


def encode_attribute_value(value: str) -> str:
    """Escape ``&`` and ``"`` for use inside a double-quoted attribute value.

    Examples
    --------
        >>> encode_attribute_value('say "hi" & go')
        'say &#x22;hi&#x22; &#x26; go'

    """
    return _ENCODE_PATTERN.sub(lambda m: _ENCODE_MAP[m.group(0)], value)
