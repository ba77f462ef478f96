"""Command line interface for mdattrs.

Reads markdown from a file or standard input, attaches attribute blocks,
and writes the result as canonical markdown, as JSON, or as a tree view::

    mdattrs README.md
    mdattrs notes.md --format tree
    cat notes.md | mdattrs - --format json -o notes.json
"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/mdattrs/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import fields
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from mdattrs import __version__
from mdattrs.api import ast_to_markdown, markdown_to_ast
from mdattrs.ast import Node, ast_to_json, get_children
from mdattrs.attributes.serializer import serialize_attributes
from mdattrs.constants import DEFAULT_LOG_LEVEL, DEFAULT_OUTPUT_FORMAT, OUTPUT_FORMATS
from mdattrs.exceptions import MdAttrsError
from mdattrs.logging_utils import configure_logging
from mdattrs.options.markdown import MarkdownParserOptions, MarkdownRendererOptions

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 2

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _field_help(options_class: type, name: str) -> str:
    """Return the ``help`` metadata of an options field."""
    for field in fields(options_class):
        if field.name == name:
            return field.metadata.get("help", "")
    return ""


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the ``mdattrs`` command."""
    parser = argparse.ArgumentParser(
        prog="mdattrs",
        description="Attach {#id .class key=value} attribute blocks in markdown and re-emit them canonically.",
        epilog=(
            "examples:\n"
            "  mdattrs README.md\n"
            "  mdattrs notes.md --format tree\n"
            "  cat notes.md | mdattrs - --format json -o notes.json"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", nargs="?", default="-", help="Markdown file to read, or - for standard input")
    parser.add_argument("-o", "--output", help="File to write instead of standard output")
    parser.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=DEFAULT_OUTPUT_FORMAT,
        help="Output format (default: %(default)s)",
    )
    parser.add_argument(
        "--no-resolve",
        action="store_true",
        help="Leave detached attribute blocks in the tree instead of attaching them",
    )
    parser.add_argument(
        "--no-inline",
        action="store_true",
        help="Treat {...} inside inline content as plain text",
    )
    parser.add_argument(
        "--emphasis-symbol",
        choices=["*", "_"],
        default="*",
        help=_field_help(MarkdownRendererOptions, "emphasis_symbol"),
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=DEFAULT_LOG_LEVEL,
        help="Logging level (default: %(default)s)",
    )
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    """Set up logging level based on command-line arguments."""
    # --trace takes precedence over --log-level
    log_level = logging.DEBUG if parsed_args.trace else parsed_args.log_level

    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def _node_label(node: Node) -> str:
    """Build the rich markup label for one tree node."""
    label = f"[bold]{node.node_type}[/bold]"

    details = []
    for name in ("level", "language", "meta", "url"):
        value = getattr(node, name, None)
        if value:
            details.append(f"{name}={value!r}")
    content = getattr(node, "content", None)
    if isinstance(content, str):
        details.append(repr(content))
    if details:
        label += " " + escape(" ".join(details))

    attributes = serialize_attributes(node.properties)
    if attributes:
        label += f" [cyan]{escape(attributes)}[/cyan]"
    return label


def build_rich_tree(node: Node, tree: Optional[Tree] = None) -> Tree:
    """Build a :class:`rich.tree.Tree` mirroring ``node`` and its descendants.

    Each line shows the node type, its salient fields and its properties
    in attribute syntax.
    """
    branch = Tree(_node_label(node)) if tree is None else tree.add(_node_label(node))
    for child in get_children(node) or []:
        build_rich_tree(child, branch)
    return branch


def _read_input(source: str) -> str:
    """Read markdown from a path or from standard input when ``source`` is ``-``."""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _write_output(parsed_args: argparse.Namespace, text: Optional[str], tree: Optional[Tree] = None) -> None:
    """Write text or a rich tree to the output file or standard output."""
    if parsed_args.output:
        with open(parsed_args.output, "w", encoding="utf-8") as handle:
            if tree is not None:
                Console(file=handle, force_terminal=False, width=120).print(tree)
            else:
                handle.write(text or "")
        return

    if tree is not None:
        Console().print(tree)
    else:
        sys.stdout.write(text or "")


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return the process exit code."""
    parser = create_parser()
    try:
        parsed_args = parser.parse_args(args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_VALIDATION_ERROR

    _setup_logging_level(parsed_args)

    try:
        markdown_text = _read_input(parsed_args.input)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Could not read {parsed_args.input}: {e}")
        print(f"Error: could not read {parsed_args.input}: {e}", file=sys.stderr)
        return EXIT_ERROR

    parser_options = MarkdownParserOptions(
        resolve_attributes=not parsed_args.no_resolve,
        parse_inline_attributes=not parsed_args.no_inline,
    )

    try:
        document = markdown_to_ast(markdown_text, parser_options)
        tree: Optional[Tree] = None
        text: Optional[str] = None
        if parsed_args.format == "json":
            text = ast_to_json(document, indent=2) + "\n"
        elif parsed_args.format == "tree":
            tree = build_rich_tree(document)
        else:
            renderer_options = MarkdownRendererOptions(emphasis_symbol=parsed_args.emphasis_symbol)
            text = ast_to_markdown(document, renderer_options)
    except MdAttrsError as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        _write_output(parsed_args, text, tree)
    except OSError as e:
        print(f"Error: could not write {parsed_args.output}: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_SUCCESS
