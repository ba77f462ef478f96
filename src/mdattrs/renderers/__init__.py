#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/renderers/__init__.py
"""Renderers turning the mdattrs AST back into text."""

from mdattrs.renderers.base import BaseRenderer, InlineContentMixin
from mdattrs.renderers.markdown import MarkdownRenderer, ast_to_markdown

__all__ = [
    "BaseRenderer",
    "InlineContentMixin",
    "MarkdownRenderer",
    "ast_to_markdown",
]
