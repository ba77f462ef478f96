#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/parsers/__init__.py
"""Markdown readers producing the mdattrs AST."""

from mdattrs.parsers.base import BaseParser
from mdattrs.parsers.markdown import MarkdownToAstConverter, markdown_to_ast

__all__ = [
    "BaseParser",
    "MarkdownToAstConverter",
    "markdown_to_ast",
]
