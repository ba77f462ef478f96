#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdattrs/ast/serialization.py
"""JSON serialization and deserialization for AST nodes.

Trees are exchanged as tagged records following the mdast conventions the
attribute engine understands: a ``type`` discriminator, an optional
``children`` list and an optional ``position`` with ``start``/``end`` points
(``{line, column, offset?}``). Kind-specific fields use mdast names where
one exists (``value``, ``depth``, ``lang``, ``alt``). Property bags are
stored under ``properties``.

Examples
--------
    >>> from mdattrs.ast import Document, Heading, Text
    >>> doc = Document(children=[
    ...     Heading(level=1, children=[Text(content="Title")], properties={"id": "top"})
    ... ])
    >>> data = ast_to_dict(doc)
    >>> data["children"][0]["depth"], data["children"][0]["properties"]
    (1, {'id': 'top'})
    >>> json_to_ast(ast_to_json(doc)) == doc
    True

"""

from __future__ import annotations

import json
from dataclasses import fields
from typing import Any

from mdattrs.ast.nodes import NODE_CLASSES, Node, SourcePoint, SourceSpan
from mdattrs.exceptions import ValidationError

_FIELD_ALIASES = {
    "content": "value",
    "language": "lang",
    "level": "depth",
    "alt_text": "alt",
    "alignments": "align",
}

_COMMON_FIELDS = frozenset({"children", "metadata", "properties", "position"})


def _serialize_point(point: SourcePoint) -> dict[str, Any]:
    result: dict[str, Any] = {"line": point.line, "column": point.column}
    if point.offset is not None:
        result["offset"] = point.offset
    return result


def _serialize_position(span: SourceSpan) -> dict[str, Any]:
    return {"start": _serialize_point(span.start), "end": _serialize_point(span.end)}


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert an AST node (and its subtree) to a dictionary.

    Parameters
    ----------
    node : Node
        Node to convert

    Returns
    -------
    dict
        JSON-compatible dictionary

    Raises
    ------
    ValidationError
        If the tree contains an object that is not a known node kind

    """
    if not isinstance(node, Node) or type(node).node_type not in NODE_CLASSES:
        raise ValidationError(
            f"Unknown node type for serialization: {type(node).__name__}",
            parameter_name="node",
            parameter_value=node,
        )

    result: dict[str, Any] = {"type": type(node).node_type}
    for f in fields(node):  # type: ignore[arg-type]
        if f.name in _COMMON_FIELDS:
            continue
        value = getattr(node, f.name)
        if f.name == "record":
            value = dict(value)
        elif isinstance(value, list):
            value = list(value)
        result[_FIELD_ALIASES.get(f.name, f.name)] = value

    if hasattr(node, "children"):
        children = node.children  # type: ignore[attr-defined]
        if not isinstance(children, list):
            raise ValidationError(
                f"{type(node).__name__}.children must be a list",
                parameter_name="children",
                parameter_value=children,
            )
        result["children"] = [ast_to_dict(child) for child in children]

    if node.properties:
        result["properties"] = dict(node.properties)
    if node.metadata:
        result["metadata"] = dict(node.metadata)
    if node.position is not None:
        result["position"] = _serialize_position(node.position)
    return result


def _deserialize_point(data: Any) -> SourcePoint:
    if not isinstance(data, dict) or "line" not in data or "column" not in data:
        raise ValidationError("Position points need 'line' and 'column'", parameter_name="position", parameter_value=data)
    return SourcePoint(line=data["line"], column=data["column"], offset=data.get("offset"))


def _deserialize_position(data: Any) -> SourceSpan | None:
    if data is None:
        return None
    if not isinstance(data, dict) or "start" not in data or "end" not in data:
        raise ValidationError("Position needs 'start' and 'end'", parameter_name="position", parameter_value=data)
    return SourceSpan(start=_deserialize_point(data["start"]), end=_deserialize_point(data["end"]))


def dict_to_ast(data: dict[str, Any]) -> Node:
    """Convert a dictionary in the tree protocol shape to an AST node.

    Parameters
    ----------
    data : dict
        Dictionary produced by :func:`ast_to_dict` or any mdast-like tool

    Returns
    -------
    Node
        Reconstructed node

    Raises
    ------
    ValidationError
        If the data violates the node protocol: unknown ``type``, a
        ``children`` value that is not a list, malformed positions, or
        missing kind-specific fields

    """
    if not isinstance(data, dict):
        raise ValidationError("Node data must be a dictionary", parameter_name="node", parameter_value=data)

    node_type = data.get("type")
    node_class = NODE_CLASSES.get(node_type)  # type: ignore[arg-type]
    if node_class is None:
        raise ValidationError(f"Unknown node type: {node_type!r}", parameter_name="type", parameter_value=node_type)

    kwargs: dict[str, Any] = {}
    for f in fields(node_class):  # type: ignore[arg-type]
        key = _FIELD_ALIASES.get(f.name, f.name)
        if f.name == "children":
            children = data.get("children", [])
            if not isinstance(children, list):
                raise ValidationError(
                    f"'{node_type}' children must be a list",
                    parameter_name="children",
                    parameter_value=children,
                )
            kwargs["children"] = [dict_to_ast(child) for child in children]
        elif f.name == "position":
            kwargs["position"] = _deserialize_position(data.get("position"))
        elif f.name in ("properties", "metadata", "record"):
            if key in data:
                kwargs[f.name] = dict(data[key])
        elif key in data:
            kwargs[f.name] = data[key]

    try:
        return node_class(**kwargs)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid '{node_type}' node: {e}", parameter_name="node", original_error=e) from e


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize an AST to a JSON string.

    Parameters
    ----------
    node : Node
        Root of the tree to serialize
    indent : int or None, default = None
        Indentation passed to :func:`json.dumps`

    Returns
    -------
    str
        JSON text

    """
    return json.dumps(ast_to_dict(node), indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str) -> Node:
    """Deserialize a JSON string produced by :func:`ast_to_json`.

    Raises
    ------
    ValidationError
        If the text is not valid JSON or violates the node protocol

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}", parameter_name="json_str", original_error=e) from e
    return dict_to_ast(data)
