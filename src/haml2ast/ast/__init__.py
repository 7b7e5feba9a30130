#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/ast/__init__.py
"""Abstract Syntax Tree (AST) module for template representation.

The module consists of several components:

- nodes: AST node classes representing template structure
- visitors: Visitor pattern implementation for AST traversal
- serialization: dictionary/JSON serialization of AST structures

Examples
--------
    >>> from haml2ast.ast import Root, Tag, Statement, InterpolatedString, Text
    >>> root = Root(children=[
    ...     Tag(name="p", content=InterpolatedString(children=[Text(content="Hello")]))
    ... ])

"""

from __future__ import annotations

from haml2ast.ast.nodes import (
    Comment,
    Doctype,
    EscapingMode,
    Filter,
    Insert,
    InterpolatedString,
    NestableNode,
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
    unwrap_statement,
)
from haml2ast.ast.serialization import ast_to_dict, ast_to_json, dict_to_ast, json_to_ast
from haml2ast.ast.visitors import NodeVisitor, TreeWalker, collect_nodes, iter_inserts

__all__ = [
    # Nodes
    "Comment",
    "Doctype",
    "EscapingMode",
    "Filter",
    "Insert",
    "InterpolatedString",
    "NestableNode",
    "Node",
    "ObjectRefClass",
    "ObjectRefId",
    "Root",
    "Run",
    "SourcePosition",
    "Statement",
    "Tag",
    "TagAttribute",
    "TagAttributeInterpolation",
    "TagAttributeList",
    "TagFlag",
    "Text",
    "unwrap_statement",
    # Visitors
    "NodeVisitor",
    "TreeWalker",
    "collect_nodes",
    "iter_inserts",
    # Serialization
    "ast_to_dict",
    "ast_to_json",
    "dict_to_ast",
    "json_to_ast",
]
