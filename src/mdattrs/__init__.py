"""mdattrs - attribute blocks for markdown.

mdattrs reads markdown carrying ``{#id .class key="value"}`` attribute
blocks, attaches each block to the element that owns it, and writes trees
back out with every attribute block in canonical form.

Ownership follows a small set of rules:

- a block directly after emphasis, strong, a link, an image or inline code
  (no gap at all) belongs to that element
- a block at the end of a heading, paragraph or table cell belongs to the
  block
- attribute text in a fenced code info string belongs to the code block
- a paragraph that is nothing but an attribute block belongs to the block
  before it
- anything else stays in the text as written

Examples
--------
Parse and inspect:

    >>> from mdattrs import markdown_to_ast
    >>> doc = markdown_to_ast("# Intro {#intro}\\n\\nSee [docs](https://example.com){target=_blank}.")
    >>> doc.children[0].properties
    {'id': 'intro'}

Normalize attribute syntax:

    >>> from mdattrs import normalize_markdown
    >>> normalize_markdown("*hi*{ .b .a }")
    '*hi*{.b .a}\\n'

See Also
--------
mdattrs.ast : AST node definitions and utilities
mdattrs.transforms : The attribute passes

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "mdattrs requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.1.0"

from mdattrs.api import (
    apply_attributes,
    ast_to_markdown,
    markdown_to_ast,
    normalize_markdown,
    parse_attribute_tokens,
    parse_attributes,
    serialize_attributes,
)
from mdattrs.ast import AttributeBlock, Document, Node
from mdattrs.exceptions import InvalidOptionsError, MdAttrsError, ParsingError, RenderingError, ValidationError
from mdattrs.options import MarkdownParserOptions, MarkdownRendererOptions

__all__ = [
    "__version__",
    "apply_attributes",
    "ast_to_markdown",
    "markdown_to_ast",
    "normalize_markdown",
    "parse_attribute_tokens",
    "parse_attributes",
    "serialize_attributes",
    "AttributeBlock",
    "Document",
    "Node",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
    "MdAttrsError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "RenderingError",
]
