#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the mdattrs library.

Constants are organized by category:
1. Type Definitions - Literal types shared by options and the CLI
2. Markdown Formatting - Renderer defaults
3. Markdown Escaping - Characters the renderer escapes in text
4. Command Line - Output formats and defaults
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

EmphasisSymbol = Literal["*", "_"]
CodeFenceChar = Literal["`", "~"]
OutputFormat = Literal["markdown", "json", "tree"]

# =============================================================================
# Markdown Formatting
# =============================================================================

DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "*"
DEFAULT_BULLET_SYMBOLS = "*-+"
DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_CODE_FENCE_MIN = 3

# =============================================================================
# Markdown Escaping
# =============================================================================

# Escaped anywhere in text. Braces are included so literal braces never
# read back as attribute blocks.
MARKDOWN_ALWAYS_ESCAPE = frozenset("\\`*_{}[]<>|~")

# Escaped only at the start of a text run, where they would open a block.
MARKDOWN_LINE_START_ESCAPE = frozenset("#>+-")

# =============================================================================
# Command Line
# =============================================================================

OUTPUT_FORMATS: tuple[OutputFormat, ...] = ("markdown", "json", "tree")
DEFAULT_OUTPUT_FORMAT: OutputFormat = "markdown"
DEFAULT_LOG_LEVEL = "WARNING"
