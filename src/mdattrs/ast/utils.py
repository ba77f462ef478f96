#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/ast/utils.py
"""Utility functions for working with AST nodes.

Functions
---------
get_children : Return a node's child list, or None for leaf kinds
walk : Iterate over a tree in document order
extract_text : Extract plain text from a node or list of nodes
advance_point : Move a source point forward over a run of text
merge_adjacent_text : Join runs of sibling Text nodes

Examples
--------
    >>> from mdattrs.ast import Heading, Text, Emphasis
    >>> heading = Heading(level=1, children=[
    ...     Text(content="Hello "),
    ...     Emphasis(children=[Text(content="world")])
    ... ])
    >>> extract_text(heading)
    'Hello world'

"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Optional, Union

from mdattrs.ast.nodes import Code, CodeBlock, HTMLInline, Image, Node, SourcePoint, SourceSpan, Text
from mdattrs.exceptions import ValidationError

#: Metadata key listing the content indices of a Text node whose character
#: was written as a backslash escape in the source.
ESCAPED_OFFSETS_KEY = "escaped_offsets"


def get_children(node: Node) -> Optional[list[Node]]:
    """Return the child list of a node.

    Parameters
    ----------
    node : Node
        Node to inspect

    Returns
    -------
    list of Node or None
        The node's own ``children`` list (not a copy), or None for leaf kinds

    Raises
    ------
    ValidationError
        If the node exposes ``children`` that is not a list

    """
    if not hasattr(node, "children"):
        return None
    children = node.children  # type: ignore[attr-defined]
    if not isinstance(children, list):
        raise ValidationError(
            f"{type(node).__name__}.children must be a list, got {type(children).__name__}",
            parameter_name="children",
            parameter_value=children,
        )
    return children


def walk(node: Node) -> Iterator[Node]:
    """Iterate over ``node`` and all of its descendants in document order.

    The tree must not be restructured while the iterator is live.
    """
    yield node
    for child in get_children(node) or []:
        yield from walk(child)


def extract_text(node_or_nodes: Union[Node, list[Node]], joiner: str = "") -> str:
    """Extract plain text from a node or list of nodes.

    Parameters
    ----------
    node_or_nodes : Node or list of Node
        A single node or list of nodes to extract text from
    joiner : str, default = ""
        String used to join the text of sibling nodes

    Returns
    -------
    str
        Concatenated text content

    """
    if isinstance(node_or_nodes, list):
        return joiner.join(extract_text(child, joiner) for child in node_or_nodes)

    node = node_or_nodes
    if isinstance(node, (Text, Code, CodeBlock, HTMLInline)):
        return node.content
    if isinstance(node, Image):
        return node.alt_text

    children = get_children(node)
    if not children:
        return ""
    return joiner.join(extract_text(child, joiner) for child in children)


def advance_point(point: SourcePoint, text: str) -> SourcePoint:
    r"""Return the point reached after consuming ``text`` from ``point``.

    Lines advance once per newline in ``text``. Without a newline the column
    moves right by ``len(text)``; otherwise it restarts at the length of the
    last line plus one. Offsets advance by ``len(text)`` when present.

    Parameters
    ----------
    point : SourcePoint
        Starting point
    text : str
        Text consumed from the starting point

    Returns
    -------
    SourcePoint
        A new point; ``point`` itself is not modified

    Examples
    --------
        >>> advance_point(SourcePoint(1, 1, 0), "line one\nend")
        SourcePoint(line=2, column=4, offset=12)

    """
    lines = text.split("\n")
    if len(lines) == 1:
        line = point.line
        column = point.column + len(text)
    else:
        line = point.line + len(lines) - 1
        column = len(lines[-1]) + 1
    offset = point.offset + len(text) if point.offset is not None else None
    return SourcePoint(line=line, column=column, offset=offset)


def _is_plain_text(node: Node) -> bool:
    return isinstance(node, Text) and not node.properties and set(node.metadata) <= {ESCAPED_OFFSETS_KEY}


def merge_adjacent_text(nodes: list[Node]) -> list[Node]:
    """Merge runs of adjacent Text nodes into single nodes.

    Text carrying properties or metadata other than escaped offsets is left
    alone. A merged node spans from the start of its first part to the end
    of its last, and has no position when any part lacks one. Offsets under
    ``ESCAPED_OFFSETS_KEY`` are shifted into the merged content.

    Parameters
    ----------
    nodes : list of Node
        Sibling nodes; not modified

    Returns
    -------
    list of Node
        New list; nodes that were not merged are the same objects

    Examples
    --------
        >>> merged = merge_adjacent_text([Text(content="a `"), Text(content="b")])
        >>> [node.content for node in merged]
        ['a `b']

    """
    result: list[Node] = []
    run: list[Text] = []

    def flush() -> None:
        if len(run) == 1:
            result.append(run[0])
        elif run:
            result.append(_join_text(run))
        run.clear()

    for node in nodes:
        if _is_plain_text(node):
            run.append(node)  # type: ignore[arg-type]
        else:
            flush()
            result.append(node)
    flush()
    return result


def _join_text(parts: list[Text]) -> Text:
    content = ""
    escaped: list[int] = []
    for part in parts:
        escaped.extend(len(content) + offset for offset in part.metadata.get(ESCAPED_OFFSETS_KEY, ()))
        content += part.content

    position = None
    if all(part.position is not None for part in parts):
        position = SourceSpan(start=parts[0].position.start, end=parts[-1].position.end)  # type: ignore[union-attr]

    merged = Text(content=content, position=position)
    if escaped:
        merged.metadata[ESCAPED_OFFSETS_KEY] = escaped
    return merged
