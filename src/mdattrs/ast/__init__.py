#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/ast/__init__.py
"""Abstract Syntax Tree (AST) module for attribute-annotated markdown.

The module consists of several components:

- nodes: AST node classes, including the transient AttributeBlock
- visitors: Visitor base class and the node-protocol validator
- serialization: Conversion to and from the mdast-like dict/JSON protocol
- utils: Traversal and position helpers

Examples
--------
    >>> from mdattrs.ast import Document, Heading, Text
    >>> from mdattrs.renderers.markdown import MarkdownRenderer
    >>>
    >>> doc = Document(children=[
    ...     Heading(level=1, children=[Text(content="Title")], properties={"id": "intro"})
    ... ])
    >>> MarkdownRenderer().render_to_string(doc)
    '# Title {#intro}\\n'

"""

from mdattrs.ast.nodes import (
    Alignment,
    AttributeBlock,
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    SourcePoint,
    SourceSpan,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from mdattrs.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast
from mdattrs.ast.utils import ESCAPED_OFFSETS_KEY, advance_point, extract_text, get_children, merge_adjacent_text, walk
from mdattrs.ast.visitors import NodeVisitor, ValidationVisitor

__all__ = [
    # Nodes
    "Node",
    "SourcePoint",
    "SourceSpan",
    "Alignment",
    "Document",
    "Heading",
    "Paragraph",
    "CodeBlock",
    "BlockQuote",
    "List",
    "ListItem",
    "Table",
    "TableRow",
    "TableCell",
    "ThematicBreak",
    "HTMLBlock",
    "Text",
    "Emphasis",
    "Strong",
    "Strikethrough",
    "Code",
    "Link",
    "Image",
    "LineBreak",
    "HTMLInline",
    "AttributeBlock",
    # Visitors
    "NodeVisitor",
    "ValidationVisitor",
    # Serialization
    "ast_to_dict",
    "dict_to_ast",
    "ast_to_json",
    "json_to_ast",
    # Utilities
    "ESCAPED_OFFSETS_KEY",
    "advance_point",
    "extract_text",
    "get_children",
    "merge_adjacent_text",
    "walk",
]
