#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/ast/visitors.py
"""Visitor pattern implementation for AST traversal.

This module provides the visitor base classes used to walk the template tree.
Renderers and other consumers of the parser output subclass NodeVisitor and
implement one ``visit_*`` method per node kind; TreeWalker is a ready-made
depth-first traversal for visitors that only care about some node kinds.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterator, Optional, TypeVar

from haml2ast.ast.nodes import (
    Comment,
    Doctype,
    Filter,
    Insert,
    InterpolatedString,
    Node,
    ObjectRefClass,
    ObjectRefId,
    Root,
    Run,
    Statement,
    Tag,
    TagAttribute,
    TagAttributeInterpolation,
    TagAttributeList,
    Text,
)

NodeT = TypeVar("NodeT", bound=Node)


class NodeVisitor(ABC):
    """Abstract base class for AST node visitors.

    Subclasses implement a ``visit_*`` method for every node kind. Each node's
    ``accept`` method dispatches to the matching method.

    Examples
    --------
    Count the tags of a template:

        >>> class TagCounter(TreeWalker):
        ...     def __init__(self):
        ...         self.count = 0
        ...
        ...     def visit_tag(self, node):
        ...         self.count += 1
        ...         super().visit_tag(node)
        ...
        >>> counter = TagCounter()
        >>> root.accept(counter)

    """

    @abstractmethod
    def visit_root(self, node: Root) -> Any:
        """Visit a Root node."""

    @abstractmethod
    def visit_tag(self, node: Tag) -> Any:
        """Visit a Tag node."""

    @abstractmethod
    def visit_tag_attribute(self, node: TagAttribute) -> Any:
        """Visit a TagAttribute node."""

    @abstractmethod
    def visit_tag_attribute_list(self, node: TagAttributeList) -> Any:
        """Visit a TagAttributeList node."""

    @abstractmethod
    def visit_tag_attribute_interpolation(self, node: TagAttributeInterpolation) -> Any:
        """Visit a TagAttributeInterpolation node."""

    @abstractmethod
    def visit_doctype(self, node: Doctype) -> Any:
        """Visit a Doctype node."""

    @abstractmethod
    def visit_comment(self, node: Comment) -> Any:
        """Visit a Comment node."""

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        """Visit a Text node."""

    @abstractmethod
    def visit_interpolated_string(self, node: InterpolatedString) -> Any:
        """Visit an InterpolatedString node."""

    @abstractmethod
    def visit_insert(self, node: Insert) -> Any:
        """Visit an Insert node."""

    @abstractmethod
    def visit_run(self, node: Run) -> Any:
        """Visit a Run node."""

    @abstractmethod
    def visit_statement(self, node: Statement) -> Any:
        """Visit a Statement node."""

    @abstractmethod
    def visit_filter(self, node: Filter) -> Any:
        """Visit a Filter node."""

    @abstractmethod
    def visit_object_ref_class(self, node: ObjectRefClass) -> Any:
        """Visit an ObjectRefClass node."""

    @abstractmethod
    def visit_object_ref_id(self, node: ObjectRefId) -> Any:
        """Visit an ObjectRefId node."""


class TreeWalker(NodeVisitor):
    """Depth-first visitor that reaches every node of a tree.

    Each node is reported to ``visit_node`` before its sub-nodes are walked,
    in source order: attributes, then inline content, then children.
    Override ``visit_node`` to observe every node, or individual ``visit_*``
    methods (calling ``super()``) to observe one kind.

    Sub-nodes are scheduled on an explicit stack rather than visited through
    nested calls, so trees of any depth the parser accepts can be walked.
    The walk runs after the ``visit_*`` method returns, so work placed after a
    ``super()`` call happens before the sub-nodes are visited.
    ``root.accept(walker)`` and ``walker.walk(root)`` are equivalent.
    """

    # Sub-nodes scheduled by the visit in progress; None outside walk()
    _scheduled: Optional[list[Node]] = None

    def visit_node(self, node: Node) -> None:
        """Observe a node before its sub-nodes are walked."""

    def walk(self, node: Node) -> None:
        """Visit ``node`` and everything below it in depth-first order."""
        outer = self._scheduled
        pending = [node]
        try:
            while pending:
                current = pending.pop()
                self._scheduled = []
                current.accept(self)
                pending.extend(reversed(self._scheduled))
        finally:
            self._scheduled = outer

    def _walk(self, *nodes: Node | None) -> None:
        children = [node for node in nodes if node is not None]
        if self._scheduled is not None:
            self._scheduled.extend(children)
            return
        for child in children:
            self.walk(child)

    def visit_root(self, node: Root) -> None:
        """Walk the top-level statements."""
        self.visit_node(node)
        self._walk(*node.children)

    def visit_tag(self, node: Tag) -> None:
        """Walk attributes, inline content and nested statements."""
        self.visit_node(node)
        self._walk(*node.attributes)
        self._walk(node.content)
        self._walk(*node.children)

    def visit_tag_attribute(self, node: TagAttribute) -> None:
        """Walk the attribute name and value."""
        self.visit_node(node)
        self._walk(node.name, node.value)

    def visit_tag_attribute_list(self, node: TagAttributeList) -> None:
        """Walk the splat expression."""
        self.visit_node(node)
        self._walk(node.value)

    def visit_tag_attribute_interpolation(self, node: TagAttributeInterpolation) -> None:
        """Walk the interpolated expression."""
        self.visit_node(node)
        self._walk(node.value)

    def visit_doctype(self, node: Doctype) -> None:
        """Report the doctype."""
        self.visit_node(node)

    def visit_comment(self, node: Comment) -> None:
        """Walk inline content and nested statements."""
        self.visit_node(node)
        self._walk(node.content)
        self._walk(*node.children)

    def visit_text(self, node: Text) -> None:
        """Report the text."""
        self.visit_node(node)

    def visit_interpolated_string(self, node: InterpolatedString) -> None:
        """Walk the string parts."""
        self.visit_node(node)
        self._walk(*node.children)

    def visit_insert(self, node: Insert) -> None:
        """Report the expression."""
        self.visit_node(node)

    def visit_run(self, node: Run) -> None:
        """Walk the controlled block."""
        self.visit_node(node)
        self._walk(*node.children)

    def visit_statement(self, node: Statement) -> None:
        """Walk the wrapped node."""
        self.visit_node(node)
        self._walk(node.content)

    def visit_filter(self, node: Filter) -> None:
        """Walk the filtered lines."""
        self.visit_node(node)
        self._walk(*node.children)

    def visit_object_ref_class(self, node: ObjectRefClass) -> None:
        """Walk the object and prefix expressions."""
        self.visit_node(node)
        self._walk(node.object_ref, node.prefix)

    def visit_object_ref_id(self, node: ObjectRefId) -> None:
        """Walk the object and prefix expressions."""
        self.visit_node(node)
        self._walk(node.object_ref, node.prefix)


class _Collector(TreeWalker):
    def __init__(self, node_type: type[Node]):
        self.node_type = node_type
        self.found: list[Node] = []

    def visit_node(self, node: Node) -> None:
        if isinstance(node, self.node_type):
            self.found.append(node)


def collect_nodes(root: Node, node_type: type[NodeT]) -> list[NodeT]:
    """Collect every node of ``node_type`` below (and including) ``root``.

    Parameters
    ----------
    root : Node
        Node to start from
    node_type : type
        Node class to match (subclasses match too)

    Returns
    -------
    list of Node
        Matching nodes in depth-first source order

    """
    collector = _Collector(node_type)
    collector.walk(root)
    return collector.found  # type: ignore[return-value]


def iter_inserts(root: Node) -> Iterator[Insert]:
    """Yield every Insert below ``root`` in source order."""
    yield from collect_nodes(root, Insert)
