#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/docrender/ast/serialization.py
"""JSON serialization and deserialization for document nodes.

This module converts node trees to and from plain dictionaries and JSON, so a
document produced by an external parser can be handed to the command line or
stored as a test fixture.

Every node serializes to a dictionary keyed by ``node_name`` plus its own
fields; ``children`` holds the serialized child nodes. Fields left at their
default value are omitted.

Examples
--------
Serialize a tree:

    >>> from docrender.ast import Document, Paragraph, Text
    >>> doc = Document(children=[Paragraph(children=[Text(text="Hello")])])
    >>> ast_to_dict(doc)["children"][0]["node_name"]
    'paragraph'

Deserialize it again:

    >>> json_to_ast('{"node_name": "text", "text": "Hi"}').text
    'Hi'

"""

from __future__ import annotations

import json
import logging
from dataclasses import MISSING, fields
from typing import Any

from docrender.ast.nodes import NODE_CLASSES, Node
from docrender.exceptions import ValidationError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

# Fields that are structural or runtime-only and never serialized
_SKIPPED_FIELDS = frozenset({"children", "parent", "converter"})


def _default_for(field_obj: Any) -> Any:
    if field_obj.default is not MISSING:
        return field_obj.default
    if field_obj.default_factory is not MISSING:
        return field_obj.default_factory()
    return MISSING


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert a node and its descendants to a dictionary.

    Parameters
    ----------
    node : Node
        Node to serialize

    Returns
    -------
    dict
        Dictionary representation of the node

    """
    result: dict[str, Any] = {"node_name": node.node_name}
    for field_obj in fields(node):
        if field_obj.name in _SKIPPED_FIELDS:
            continue
        value = getattr(node, field_obj.name)
        if value == _default_for(field_obj):
            continue
        result[field_obj.name] = value
    if node.children:
        result["children"] = [ast_to_dict(child) for child in node.children]
    return result


def dict_to_ast(data: dict[str, Any]) -> Node:
    """Convert a dictionary representation back to a node tree.

    Parameters
    ----------
    data : dict
        Dictionary representation of a node

    Returns
    -------
    Node
        Reconstructed node with parent links set

    Raises
    ------
    ValidationError
        If the dictionary names an unknown node kind or an unknown field

    """
    if not isinstance(data, dict):
        raise ValidationError(f"Node data must be an object, got {type(data).__name__}")

    node_name = data.get("node_name")
    if not node_name:
        raise ValidationError("Dictionary must contain 'node_name' field", parameter_name="node_name")

    node_class = NODE_CLASSES.get(node_name)
    if node_class is None:
        raise ValidationError(
            f"Unknown node kind: {node_name}. Known kinds: {', '.join(sorted(NODE_CLASSES))}",
            parameter_name="node_name",
            parameter_value=node_name,
        )

    allowed = {f.name for f in fields(node_class)} - _SKIPPED_FIELDS
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        if key in ("node_name", "children", "schema_version"):
            continue
        if key not in allowed:
            raise ValidationError(
                f"Unknown field '{key}' for node kind '{node_name}'",
                parameter_name=key,
                parameter_value=value,
            )
        kwargs[key] = value

    children = [dict_to_ast(child) for child in data.get("children", [])]
    try:
        return node_class(children=children, **kwargs)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid data for node kind '{node_name}': {e}", original_error=e) from e


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize a node tree to a JSON string with schema versioning.

    Parameters
    ----------
    node : Node
        The node to serialize
    indent : int or None, default = None
        Number of spaces for indentation (None for compact format)

    Returns
    -------
    str
        JSON string representation with schema version

    """
    versioned_dict = {"schema_version": SCHEMA_VERSION, **ast_to_dict(node)}
    return json.dumps(versioned_dict, indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str) -> Node:
    """Deserialize a JSON string to a node tree.

    JSON without a ``schema_version`` field is read as version 1.

    Parameters
    ----------
    json_str : str
        JSON string representation

    Returns
    -------
    Node
        Reconstructed node tree

    Raises
    ------
    ValidationError
        If the JSON is malformed, has an unsupported schema version, or
        describes unknown node kinds

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON document: {e}", original_error=e) from e

    if isinstance(data, dict):
        schema_version = data.get("schema_version", SCHEMA_VERSION)
        if schema_version != SCHEMA_VERSION:
            raise ValidationError(
                f"Unsupported schema version: {schema_version}",
                parameter_name="schema_version",
                parameter_value=schema_version,
            )
    logger.debug("Deserializing document tree (schema version %s)", SCHEMA_VERSION)
    return dict_to_ast(data)
