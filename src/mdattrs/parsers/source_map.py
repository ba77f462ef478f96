#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/parsers/source_map.py
"""Source offsets for mistune tokens.

Mistune tokens carry no positions. Inline tokens are, however, produced
from a known source string (the stripped text of their block), and each
token type consumes that string in a predictable way. :class:`InlineSpanMapper`
replays a token list against its source and stores a ``(start, end)`` pair
under the ``"span"`` key of every token it can account for. Text tokens
also get the indices of characters written as backslash escapes under
``"escapes"``. Mapping stops at the first token it cannot replay; that
token and everything after it in the same sequence keep no span.

:class:`LineIndex` turns offsets into line/column points.
"""

from __future__ import annotations

import re
import string
from bisect import bisect_right
from typing import Any, Optional

from mistune.helpers import parse_link, parse_link_label
from mistune.inline_parser import InlineParser

from mdattrs.ast.nodes import SourcePoint, SourceSpan

SPAN_KEY = "span"
ESCAPES_KEY = "escapes"

_BACKTICKS = re.compile(r"`+")
_LINEBREAK = re.compile(InlineParser.STD_LINEBREAK)
_SOFTBREAK = re.compile(InlineParser.HARD_LINEBREAK)
_ESCAPABLE = frozenset(string.punctuation)


class LineIndex:
    """Offset to line/column conversion for one text.

    Examples
    --------
        >>> index = LineIndex("ab\\ncd")
        >>> index.point(4)
        SourcePoint(line=2, column=2, offset=4)

    """

    def __init__(self, text: str):
        """Record the start offset of every line of ``text``."""
        self._starts = [0] + [match.end() for match in re.finditer("\n", text)]

    def point(self, offset: int) -> SourcePoint:
        """Return the 1-based point of ``offset``."""
        line = bisect_right(self._starts, offset) - 1
        return SourcePoint(line=line + 1, column=offset - self._starts[line] + 1, offset=offset)

    def span(self, start: int, end: int) -> SourceSpan:
        """Return the span between two offsets."""
        return SourceSpan(start=self.point(start), end=self.point(end))


class InlineSpanMapper:
    """Replay inline tokens against the text they were parsed from.

    Parameters
    ----------
    src : str
        The inline source handed to mistune's inline parser

    """

    def __init__(self, src: str):
        """Initialize the mapper for one inline source."""
        self.src = src

    def map(self, tokens: list[dict[str, Any]]) -> bool:
        """Annotate ``tokens`` in place; return True when all were mapped."""
        return self._map_sequence(tokens, 0) is not None

    def _map_sequence(self, tokens: list[dict[str, Any]], pos: int) -> Optional[int]:
        for token in tokens:
            handler = getattr(self, f"_map_{token.get('type')}", None)
            end = handler(token, pos) if handler is not None else None
            if end is None:
                return None
            token[SPAN_KEY] = (pos, end)
            pos = end
        return pos

    def _expect(self, literal: str, pos: Optional[int]) -> Optional[int]:
        if pos is None or not self.src.startswith(literal, pos):
            return None
        return pos + len(literal)

    def _map_text(self, token: dict[str, Any], pos: int) -> Optional[int]:
        src = self.src
        escapes = []
        for index, char in enumerate(token.get("raw", "")):
            if char in _ESCAPABLE and src.startswith("\\" + char, pos):
                escapes.append(index)
                pos += 2
            elif src.startswith(char, pos):
                pos += 1
            else:
                return None
        if escapes:
            token[ESCAPES_KEY] = escapes
        return pos

    def _map_attributes(self, token: dict[str, Any], pos: int) -> Optional[int]:
        return self._expect(token.get("raw", ""), pos)

    def _map_inline_html(self, token: dict[str, Any], pos: int) -> Optional[int]:
        return self._expect(token.get("raw", ""), pos)

    def _map_codespan(self, token: dict[str, Any], pos: int) -> Optional[int]:
        opening = _BACKTICKS.match(self.src, pos)
        if not opening:
            return None
        marker = opening.group()
        closing = re.compile(r"(.*?[^`])" + marker + r"(?!`)", re.S).match(self.src, opening.end())
        return closing.end() if closing else None

    def _map_delimited(self, token: dict[str, Any], pos: int, markers: tuple[str, ...]) -> Optional[int]:
        for marker in markers:
            if self.src.startswith(marker, pos):
                inner = self._map_sequence(token.get("children", []), pos + len(marker))
                return self._expect(marker, inner)
        return None

    def _map_emphasis(self, token: dict[str, Any], pos: int) -> Optional[int]:
        return self._map_delimited(token, pos, ("*", "_"))

    def _map_strong(self, token: dict[str, Any], pos: int) -> Optional[int]:
        return self._map_delimited(token, pos, ("**", "__"))

    def _map_strikethrough(self, token: dict[str, Any], pos: int) -> Optional[int]:
        return self._map_delimited(token, pos, ("~~",))

    def _map_linebreak(self, token: dict[str, Any], pos: int) -> Optional[int]:
        match = _LINEBREAK.match(self.src, pos)
        return match.end() if match else None

    def _map_softbreak(self, token: dict[str, Any], pos: int) -> Optional[int]:
        match = _SOFTBREAK.match(self.src, pos)
        return match.end() if match else None

    def _map_link(self, token: dict[str, Any], pos: int) -> Optional[int]:
        if self.src.startswith("<", pos):
            closing = self.src.find(">", pos)
            return closing + 1 if closing != -1 else None
        label_end = self._map_sequence(token.get("children", []), pos + 1) if self.src.startswith("[", pos) else None
        return self._map_link_tail(token, self._expect("]", label_end))

    def _map_image(self, token: dict[str, Any], pos: int) -> Optional[int]:
        if not self.src.startswith("![", pos):
            return None
        label_end = self._map_sequence(token.get("children", []), pos + 2)
        return self._map_link_tail(token, self._expect("]", label_end))

    def _map_link_tail(self, token: dict[str, Any], pos: Optional[int]) -> Optional[int]:
        if pos is None:
            return None
        if "ref" in token:
            if self.src.startswith("[", pos):
                _label, end = parse_link_label(self.src, pos + 1)
                if end is not None:
                    return end
            return pos
        if self.src.startswith("(", pos):
            _attrs, end = parse_link(self.src, pos + 1)
            return end
        return None
