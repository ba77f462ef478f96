"""The major exported API functions for attribute-annotated markdown."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/mdattrs/api.py
import logging
from dataclasses import fields
from typing import Any, Optional, TypeVar

from mdattrs.ast.nodes import Document, Node
from mdattrs.attributes.grammar import AttributeRecord, TokenLike, parse_attribute_string
from mdattrs.attributes.grammar import parse_attribute_tokens as _parse_attribute_tokens
from mdattrs.attributes.serializer import serialize_attributes as _serialize_attributes
from mdattrs.options.base import BaseParserOptions, BaseRendererOptions
from mdattrs.options.markdown import MarkdownParserOptions, MarkdownRendererOptions
from mdattrs.parsers.base import ParserInput
from mdattrs.parsers.markdown import MarkdownToAstConverter
from mdattrs.renderers.markdown import MarkdownRenderer
from mdattrs.transforms.pipeline import apply_attributes as _apply_attributes

logger = logging.getLogger(__name__)

OptionsT = TypeVar("OptionsT", BaseParserOptions, BaseRendererOptions)


def _create_options_from_kwargs(
    options_class: type[OptionsT],
    options: Optional[OptionsT],
    options_type_name: str,
    **kwargs: Any,
) -> OptionsT:
    """Build an options object, layering keyword arguments over ``options``.

    Parameters
    ----------
    options_class : type
        The options class to instantiate
    options : options instance or None
        Base options; defaults are used when None
    options_type_name : str
        Name of the options type for logging (e.g., "parser" or "renderer")
    **kwargs
        Field overrides; names that are not fields of ``options_class``
        are skipped

    Returns
    -------
    options instance
        A new frozen options object (or ``options`` itself when there is
        nothing to override)

    """
    base = options if options is not None else options_class()
    option_names = {field.name for field in fields(options_class)}
    valid_kwargs = {k: v for k, v in kwargs.items() if k in option_names}
    missing = [k for k in kwargs if k not in valid_kwargs]
    if missing:
        logger.debug(f"Skipping unknown {options_type_name} options: {missing}")
    if not valid_kwargs:
        return base
    return base.create_updated(**valid_kwargs)


def _split_kwargs_for_parser_and_renderer(kwargs: dict) -> tuple[dict, dict]:
    """Split kwargs between parser and renderer based on their field names."""
    parser_fields = {f.name for f in fields(MarkdownParserOptions)}
    renderer_fields = {f.name for f in fields(MarkdownRendererOptions)}

    parser_kwargs = {}
    renderer_kwargs = {}
    unmatched = []
    for k, v in kwargs.items():
        if k in parser_fields:
            parser_kwargs[k] = v
        elif k in renderer_fields:
            renderer_kwargs[k] = v
        else:
            unmatched.append(k)

    if unmatched:
        logger.debug(f"Kwargs don't match parser or renderer fields: {unmatched}")

    return parser_kwargs, renderer_kwargs


def parse_attributes(text: str) -> AttributeRecord:
    """Parse attribute syntax from arbitrary text.

    The braces are optional: every ``#id``, ``.class`` and ``key=value``
    found in ``text`` is collected. Malformed pieces are skipped, never
    reported.

    Parameters
    ----------
    text : str
        Attribute text, e.g. ``'#intro .lead data-x="1"'``

    Returns
    -------
    dict
        Attribute names to values; classes are joined with single spaces

    Examples
    --------
        >>> parse_attributes('{#intro .lead .wide title="a &amp; b"}')
        {'id': 'intro', 'class': 'lead wide', 'title': 'a & b'}

    """
    return parse_attribute_string(text)


def parse_attribute_tokens(tokens: list[TokenLike]) -> AttributeRecord:
    """Build an attribute record from a token-event sequence.

    Examples
    --------
        >>> parse_attribute_tokens([("open", "{"), ("class", "a"), ("class", "b"), ("close", "}")])
        {'class': 'a b'}

    """
    return _parse_attribute_tokens(tokens)


def serialize_attributes(record: Optional[AttributeRecord]) -> str:
    """Render an attribute record in canonical ``{#id .class key="value"}`` form.

    Examples
    --------
        >>> serialize_attributes({"class": "a b", "id": "x"})
        '{#x .a .b}'

    """
    return _serialize_attributes(record)


def markdown_to_ast(
    source: ParserInput,
    options: Optional[MarkdownParserOptions] = None,
    **kwargs: Any,
) -> Document:
    """Parse markdown into a tree with attributes attached to their owners.

    Parameters
    ----------
    source : str, Path, file-like, or bytes
        Markdown to parse; a ``str`` is always content
    options : MarkdownParserOptions or None, default = None
        Parser configuration
    **kwargs
        Individual parser option overrides, e.g. ``resolve_attributes=False``

    Returns
    -------
    Document
        The parsed tree

    Examples
    --------
        >>> doc = markdown_to_ast("Some *text*{.hl}", track_positions=False)
        >>> doc.children[0].children[1].properties
        {'class': 'hl'}

    """
    parser_options = _create_options_from_kwargs(MarkdownParserOptions, options, "parser", **kwargs)
    return MarkdownToAstConverter(parser_options).parse(source)


def ast_to_markdown(
    document: Document,
    options: Optional[MarkdownRendererOptions] = None,
    **kwargs: Any,
) -> str:
    """Render a tree to markdown, writing every property bag back out.

    Parameters
    ----------
    document : Document
        Tree to render
    options : MarkdownRendererOptions or None, default = None
        Renderer configuration
    **kwargs
        Individual renderer option overrides, e.g. ``emphasis_symbol="_"``

    Returns
    -------
    str
        Markdown text ending in a newline

    """
    renderer_options = _create_options_from_kwargs(MarkdownRendererOptions, options, "renderer", **kwargs)
    return MarkdownRenderer(renderer_options).render_to_string(document)


def normalize_markdown(
    source: ParserInput,
    parser_options: Optional[MarkdownParserOptions] = None,
    renderer_options: Optional[MarkdownRendererOptions] = None,
    **kwargs: Any,
) -> str:
    """Parse and re-render markdown, canonicalizing every attribute block.

    Keyword arguments are routed to the parser or the renderer options by
    field name.

    Examples
    --------
        >>> normalize_markdown("[x](u){ target=_blank  .b  #i }")
        '[x](u){#i .b target="_blank"}\\n'

    """
    parser_kwargs, renderer_kwargs = _split_kwargs_for_parser_and_renderer(kwargs)
    document = markdown_to_ast(source, parser_options, **parser_kwargs)
    return ast_to_markdown(document, renderer_options, **renderer_kwargs)


def apply_attributes(tree: Node, extract: bool = True, resolve: bool = True, validate: bool = False) -> Node:
    """Extract and resolve attribute blocks in an existing tree, in place.

    Use this on trees built by hand or by another reader. Markdown parsed
    with :func:`markdown_to_ast` has already been through these passes.

    Parameters
    ----------
    tree : Node
        Root of the tree, usually a Document
    extract : bool, default = True
        Split trailing attribute text off blocks and code fence info strings
    resolve : bool, default = True
        Give every attribute block to an owner or turn it back into text
    validate : bool, default = False
        Check the node protocol first

    Returns
    -------
    Node
        The same tree

    """
    return _apply_attributes(tree, extract=extract, code_fences=extract, resolve=resolve, validate=validate)
