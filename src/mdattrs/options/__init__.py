#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/options/__init__.py
"""Option dataclasses for the markdown reader and writer."""

from mdattrs.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from mdattrs.options.markdown import MarkdownParserOptions, MarkdownRendererOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
]
