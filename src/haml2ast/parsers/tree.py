#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/parsers/tree.py
"""Tree builder mapping indentation levels onto parent/child relations.

The builder keeps a stack of ancestors whose bottom-to-top order matches the
open indentation levels. A line one level deeper than its predecessor makes
the predecessor the new parent; a shallower line pops one ancestor per level.
Before a node is attached, the chosen parent is checked against the nesting
capabilities of its node kind.

"""

from __future__ import annotations

from typing import Optional, cast

from haml2ast.ast.nodes import NestableNode, Node, Root, Tag, unwrap_statement
from haml2ast.constants import DEFAULT_MAX_NESTING_DEPTH
from haml2ast.exceptions import NestingError
from haml2ast.parsers.cursor import LineCursor


class TreeBuilder:
    """Place parsed statements into the tree.

    Parameters
    ----------
    root : Root
        Tree root; the initial parent
    max_depth : int
        Maximum number of ancestors kept on the stack

    Attributes
    ----------
    root : Root
        The tree being built
    parent : Node
        Node that receives the next statement at the current level
    prev : Node or None
        The most recently inserted node

    """

    def __init__(self, root: Root, max_depth: int = DEFAULT_MAX_NESTING_DEPTH):
        """Start with ``root`` as the current parent."""
        self.root = root
        self.max_depth = max_depth
        self.parent: Node = root
        self.prev: Optional[Node] = None
        self._stack: list[Node] = []

    @property
    def depth(self) -> int:
        """Number of ancestors currently on the stack."""
        return len(self._stack)

    def insert(self, node: Node, level: int, prev_level: int, cursor: LineCursor) -> None:
        """Attach ``node`` according to its indentation level.

        Parameters
        ----------
        node : Node
            The statement to insert
        level : int
            Indentation level of the statement's line
        prev_level : int
            Indentation level of the previous statement's line
        cursor : LineCursor
            Cursor on the statement's line, used for diagnostics

        Raises
        ------
        NestingError
            If the parent cannot hold the node

        """
        if level > prev_level:
            if self.prev is None:
                raise cursor.syntax_error("Illegal nesting: no statement to nest within", NestingError)
            if len(self._stack) >= self.max_depth:
                raise cursor.syntax_error(
                    f"Illegal nesting: more than {self.max_depth} nested levels", NestingError
                )
            self._stack.append(self.parent)
            self.parent = self.prev
        elif level < prev_level:
            for _ in range(prev_level - level):
                self.parent = self._stack.pop()

        self._check_parent(cursor)

        cast(NestableNode, self.parent).add_child(node)
        self.prev = node

    def _check_parent(self, cursor: LineCursor) -> None:
        parent = self.parent

        if not parent.can_nest:
            kind = unwrap_statement(parent).node_name
            raise cursor.syntax_error(f"Illegal nesting: nesting within {kind} is illegal", NestingError)

        if parent.has_content() and not parent.allows_nesting_with_content:
            if isinstance(parent, Tag):
                message = (
                    f"Illegal nesting: content can't be both given on the same line as %{parent.name} "
                    "and nested within it"
                )
            else:
                message = "Illegal nesting: nesting within a tag that already has content is illegal"
            raise cursor.syntax_error(message, NestingError)

        if isinstance(parent, Tag) and parent.self_closing:
            raise cursor.syntax_error("Illegal nesting: nesting within a self-closing tag is illegal", NestingError)
