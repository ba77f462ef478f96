#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/options/markdown.py
"""Configuration options for reading and writing attribute-annotated markdown.

This module defines the options controlling which attribute passes the
reader runs and how the renderer lays out markdown and attribute blocks.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mdattrs.constants import (
    DEFAULT_BULLET_SYMBOLS,
    DEFAULT_CODE_FENCE_CHAR,
    DEFAULT_CODE_FENCE_MIN,
    DEFAULT_EMPHASIS_SYMBOL,
    CodeFenceChar,
    EmphasisSymbol,
)
from mdattrs.exceptions import InvalidOptionsError
from mdattrs.options.base import BaseParserOptions, BaseRendererOptions


@dataclass(frozen=True)
class MarkdownParserOptions(BaseParserOptions):
    """Options for parsing markdown into an attribute-aware AST.

    Parameters
    ----------
    parse_tables : bool, default True
        Parse GFM pipe tables.
    parse_strikethrough : bool, default True
        Parse ``~~strikethrough~~``.
    parse_inline_attributes : bool, default True
        Recognise ``{...}`` blocks inside inline content while tokenizing.
    extract_block_attributes : bool, default True
        Detach trailing ``{...}`` text from headings, paragraphs and table
        cells.
    extract_code_fence_attributes : bool, default True
        Move attribute text out of fenced code info strings.
    resolve_attributes : bool, default True
        Attach detached attribute blocks to their owners. When False the
        tree keeps AttributeBlock nodes for inspection.
    track_positions : bool, default True
        Record source spans on nodes. Inline attachment depends on them.

    """

    parse_tables: bool = field(default=True, metadata={"help": "Parse GFM pipe tables"})
    parse_strikethrough: bool = field(default=True, metadata={"help": "Parse ~~strikethrough~~ text"})
    parse_inline_attributes: bool = field(
        default=True,
        metadata={"help": "Recognise {...} attribute blocks inside inline content"},
    )
    extract_block_attributes: bool = field(
        default=True,
        metadata={"help": "Detach trailing {...} attribute text from blocks"},
    )
    extract_code_fence_attributes: bool = field(
        default=True,
        metadata={"help": "Read attribute blocks from fenced code info strings"},
    )
    resolve_attributes: bool = field(
        default=True,
        metadata={"help": "Attach attribute blocks to their owning nodes"},
    )
    track_positions: bool = field(
        default=True,
        metadata={"help": "Record source positions on nodes (needed for inline attachment)"},
    )


@dataclass(frozen=True)
class MarkdownRendererOptions(BaseRendererOptions):
    r"""Markdown rendering options.

    Parameters
    ----------
    escape_special : bool, default True
        Escape markdown specials (including braces) in text so it reads back
        as the same text. Orphaned attribute text is never escaped.
    emphasis_symbol : {"\*", "\_"}, default "\*"
        Symbol used for emphasis and strong markers.
    bullet_symbols : str, default "\*-+"
        Characters to cycle through for nested bullet lists.
    code_fence_char : {"`", "~"}, default "`"
        Fence character for code blocks.
    code_fence_min : int, default 3
        Minimum fence length for code blocks.
    render_attributes : bool, default True
        Emit property bags as ``{...}`` blocks.
    pad_table_cells : bool, default False
        Pad table cells so columns line up.
    collapse_blank_lines : bool, default True
        Leave out blocks that render empty, so blocks are always separated
        by exactly one blank line.

    """

    escape_special: bool = field(
        default=True,
        metadata={"help": "Escape special markdown characters in text"},
    )
    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Symbol for emphasis and strong markers", "choices": ["*", "_"]},
    )
    bullet_symbols: str = field(
        default=DEFAULT_BULLET_SYMBOLS,
        metadata={"help": "Characters to cycle through for nested bullet lists"},
    )
    code_fence_char: CodeFenceChar = field(
        default=DEFAULT_CODE_FENCE_CHAR,
        metadata={"help": "Fence character for code blocks", "choices": ["`", "~"]},
    )
    code_fence_min: int = field(
        default=DEFAULT_CODE_FENCE_MIN,
        metadata={"help": "Minimum code fence length", "type": int},
    )
    render_attributes: bool = field(
        default=True,
        metadata={"help": "Emit property bags as {...} attribute blocks"},
    )
    pad_table_cells: bool = field(
        default=False,
        metadata={"help": "Pad table cells so columns line up"},
    )
    collapse_blank_lines: bool = field(
        default=True,
        metadata={"help": "Leave out blocks that render empty"},
    )

    def __post_init__(self) -> None:
        """Validate option values.

        Raises
        ------
        InvalidOptionsError
            If a field holds a value the renderer cannot use.

        """
        super().__post_init__()

        if self.emphasis_symbol not in ("*", "_"):
            raise InvalidOptionsError(
                f"emphasis_symbol must be '*' or '_', got {self.emphasis_symbol!r}",
                parameter_name="emphasis_symbol",
                parameter_value=self.emphasis_symbol,
            )
        if self.code_fence_char not in ("`", "~"):
            raise InvalidOptionsError(
                f"code_fence_char must be '`' or '~', got {self.code_fence_char!r}",
                parameter_name="code_fence_char",
                parameter_value=self.code_fence_char,
            )
        if self.code_fence_min < 3:
            raise InvalidOptionsError(
                f"code_fence_min must be at least 3, got {self.code_fence_min}",
                parameter_name="code_fence_min",
                parameter_value=self.code_fence_min,
            )
        if not self.bullet_symbols or any(symbol not in "*-+" for symbol in self.bullet_symbols):
            raise InvalidOptionsError(
                f"bullet_symbols must be drawn from '*-+', got {self.bullet_symbols!r}",
                parameter_name="bullet_symbols",
                parameter_value=self.bullet_symbols,
            )
