#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/ast/serialization.py
"""JSON serialization and deserialization for AST nodes.

This module converts template trees to and from plain dictionaries and JSON,
so a tree produced by the parser can be cached, shipped to another process or
inspected by tools written in other languages.

The JSON format preserves:
- All node types and their fields
- Source positions
- Escaping modes and tag flags
- Round-trip compatibility (AST -> JSON -> AST produces an equal tree)

Both directions walk the tree with an explicit stack, so any tree the parser
accepts can be converted regardless of the interpreter's recursion limit.

Examples
--------
    >>> from haml2ast import parse
    >>> from haml2ast.ast.serialization import ast_to_json, json_to_ast
    >>> root = parse("%p= title")
    >>> json_to_ast(ast_to_json(root)) == root
    True

"""

from __future__ import annotations

import json
from typing import Any, Callable, Optional

from haml2ast.ast.nodes import (
    Comment,
    Doctype,
    EscapingMode,
    Filter,
    Insert,
    InterpolatedString,
    Node,
    ObjectRefClass,
    ObjectRefId,
    Root,
    Run,
    SourcePosition,
    Statement,
    Tag,
    TagAttribute,
    TagAttributeInterpolation,
    TagAttributeList,
    TagFlag,
    Text,
)

Convert = Callable[[Any], Any]


def _serialize_position(position: Optional[SourcePosition]) -> Optional[dict[str, int]]:
    if position is None:
        return None
    return {"line": position.line, "column": position.column, "offset": position.offset}


def _deserialize_position(data: Optional[dict[str, int]]) -> Optional[SourcePosition]:
    if data is None:
        return None
    return SourcePosition(line=data["line"], column=data["column"], offset=data.get("offset", 0))


def _optional(node: Optional[Node], convert: Convert) -> Optional[dict[str, Any]]:
    return convert(node) if node is not None else None


def _optional_node(data: Optional[dict[str, Any]], convert: Convert) -> Optional[Node]:
    return convert(data) if data is not None else None


def _children(nodes: list[Node], convert: Convert) -> list[dict[str, Any]]:
    return [convert(child) for child in nodes]


def _node_list(data: list[dict[str, Any]], convert: Convert) -> list[Node]:
    return [convert(child) for child in data]


# Entries get the node (or dict) and a ``convert`` callback for its sub-nodes
_SERIALIZERS: dict[type[Node], Callable[[Any, Convert], dict[str, Any]]] = {
    Root: lambda n, c: {"children": _children(n.children, c)},
    Tag: lambda n, c: {
        "name": n.name,
        "attributes": _children(n.attributes, c),
        "flags": int(n.flags),
        "content": _optional(n.content, c),
        "children": _children(n.children, c),
    },
    TagAttribute: lambda n, c: {"name": c(n.name), "value": _optional(n.value, c)},
    TagAttributeList: lambda n, c: {"value": c(n.value)},
    TagAttributeInterpolation: lambda n, c: {"value": c(n.value)},
    Doctype: lambda n, c: {"doctype_id": n.doctype_id, "options": n.options},
    Comment: lambda n, c: {
        "rendered": n.rendered,
        "condition": n.condition,
        "content": _optional(n.content, c),
        "children": _children(n.children, c),
    },
    Text: lambda n, c: {"content": n.content},
    InterpolatedString: lambda n, c: {"children": _children(n.children, c), "escaping": n.escaping.value},
    Insert: lambda n, c: {
        "content": n.content,
        "escaping": n.escaping.value,
        "preserve_whitespace": n.preserve_whitespace,
    },
    Run: lambda n, c: {"content": n.content, "children": _children(n.children, c)},
    Statement: lambda n, c: {"content": c(n.content)},
    Filter: lambda n, c: {"name": n.name, "children": _children(n.children, c)},
    ObjectRefClass: lambda n, c: {"object_ref": c(n.object_ref), "prefix": _optional(n.prefix, c)},
    ObjectRefId: lambda n, c: {"object_ref": c(n.object_ref), "prefix": _optional(n.prefix, c)},
}

_DESERIALIZERS: dict[str, Callable[[dict[str, Any], Convert], Node]] = {
    "Root": lambda d, c: Root(children=_node_list(d["children"], c)),
    "Tag": lambda d, c: Tag(
        name=d["name"],
        attributes=_node_list(d["attributes"], c),
        flags=TagFlag(d["flags"]),
        content=_optional_node(d["content"], c),
        children=_node_list(d["children"], c),
    ),
    "TagAttribute": lambda d, c: TagAttribute(name=c(d["name"]), value=_optional_node(d["value"], c)),
    "TagAttributeList": lambda d, c: TagAttributeList(value=c(d["value"])),
    "TagAttributeInterpolation": lambda d, c: TagAttributeInterpolation(value=c(d["value"])),
    "Doctype": lambda d, c: Doctype(doctype_id=d["doctype_id"], options=d["options"]),
    "Comment": lambda d, c: Comment(
        rendered=d["rendered"],
        condition=d["condition"],
        content=_optional_node(d["content"], c),
        children=_node_list(d["children"], c),
    ),
    "Text": lambda d, c: Text(content=d["content"]),
    "InterpolatedString": lambda d, c: InterpolatedString(
        children=_node_list(d["children"], c), escaping=EscapingMode(d["escaping"])
    ),
    "Insert": lambda d, c: Insert(
        content=d["content"],
        escaping=EscapingMode(d["escaping"]),
        preserve_whitespace=d["preserve_whitespace"],
    ),
    "Run": lambda d, c: Run(content=d["content"], children=_node_list(d["children"], c)),
    "Statement": lambda d, c: Statement(content=c(d["content"])),
    "Filter": lambda d, c: Filter(name=d["name"], children=_node_list(d["children"], c)),
    "ObjectRefClass": lambda d, c: ObjectRefClass(
        object_ref=c(d["object_ref"]), prefix=_optional_node(d["prefix"], c)
    ),
    "ObjectRefId": lambda d, c: ObjectRefId(object_ref=c(d["object_ref"]), prefix=_optional_node(d["prefix"], c)),
}


def _nested_node_dicts(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Return the serialized sub-nodes of a serialized node, in field order."""
    nested: list[dict[str, Any]] = []
    for key, value in data.items():
        if key == "position":
            continue
        if isinstance(value, dict):
            nested.append(value)
        elif isinstance(value, list):
            nested.extend(item for item in value if isinstance(item, dict))
    return nested


def ast_to_dict(node: Node) -> dict[str, Any]:
    """Convert an AST node (and its subtree) to a dictionary.

    Parameters
    ----------
    node : Node
        Node to serialize

    Returns
    -------
    dict
        JSON-compatible dictionary with a ``node_type`` key

    Raises
    ------
    TypeError
        If a node type is not part of the template AST

    """
    pending: list[tuple[Node, dict[str, Any]]] = []

    def convert(child: Node) -> dict[str, Any]:
        # The fields are filled in once the child comes off the stack
        result: dict[str, Any] = {"node_type": type(child).__name__}
        pending.append((child, result))
        return result

    top = convert(node)
    while pending:
        current, result = pending.pop()
        serializer = _SERIALIZERS.get(type(current))
        if serializer is None:
            raise TypeError(f"Unknown node type: {type(current).__name__}")
        result.update(serializer(current, convert))
        result["position"] = _serialize_position(current.position)

    return top


def dict_to_ast(data: dict[str, Any]) -> Node:
    """Convert a dictionary produced by :func:`ast_to_dict` back to a node.

    Parameters
    ----------
    data : dict
        Serialized node

    Returns
    -------
    Node
        Reconstructed node and subtree

    Raises
    ------
    ValueError
        If a ``node_type`` is missing or unknown

    """
    # Reversed pre-order puts every sub-node before its parent
    order: list[dict[str, Any]] = []
    stack = [data]
    while stack:
        current = stack.pop()
        order.append(current)
        stack.extend(_nested_node_dicts(current))

    built: dict[int, Node] = {}

    def convert(child: dict[str, Any]) -> Node:
        return built[id(child)]

    for current in reversed(order):
        node_type = current.get("node_type")
        if node_type is None:
            raise ValueError("Missing 'node_type' in serialized node")

        deserializer = _DESERIALIZERS.get(node_type)
        if deserializer is None:
            raise ValueError(f"Unknown node_type: {node_type}")

        node = deserializer(current, convert)
        node.position = _deserialize_position(current.get("position"))
        built[id(current)] = node

    return built[id(data)]


def ast_to_json(node: Node, indent: Optional[int] = None) -> str:
    """Serialize an AST node to a JSON string.

    Parameters
    ----------
    node : Node
        Node to serialize
    indent : int or None, default = None
        Indentation passed to :func:`json.dumps`

    Returns
    -------
    str
        JSON document

    """
    return json.dumps(ast_to_dict(node), indent=indent, ensure_ascii=False)


def json_to_ast(json_str: str) -> Node:
    """Deserialize a JSON string produced by :func:`ast_to_json`."""
    return dict_to_ast(json.loads(json_str))
