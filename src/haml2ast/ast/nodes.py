#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/ast/nodes.py
"""AST node classes for template representation.

This module defines the node hierarchy produced by the template parsers. Each
node represents a structural element of a Haml or Jade template: a tag, an
attribute, a piece of literal text, a comment, a doctype declaration, an
embedded filter block or an opaque fragment of host-language code.

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.

Nodes that can own nested statements (declare ``can_nest``):
    - Root, Tag, Comment, Run, Filter

Leaf and wrapper nodes:
    - Text, InterpolatedString, Insert, Statement, Doctype

Attribute nodes (found in ``Tag.attributes``):
    - TagAttribute, TagAttributeList, TagAttributeInterpolation
    - ObjectRefClass, ObjectRefId (attribute values)

Nesting capabilities
--------------------
``can_nest`` marks nodes that may become a parent in the tree builder's
stack. A node whose ``has_content()`` is true already carries an inline child
from its own source line; it accepts nested statements only when it also
declares ``allows_nesting_with_content``.

"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional


@dataclass(frozen=True)
class SourcePosition:
    """Location of a node in the template source.

    Parameters
    ----------
    line : int
        Line number (1-based, shifted by the parse call's start line)
    column : int
        Column number (1-based)
    offset : int, default 0
        Character offset from the start of the source text

    """

    line: int
    column: int
    offset: int = 0


class EscapingMode(enum.Enum):
    """Output escaping requested for an expression or interpolated string."""

    INHERIT = "inherit"
    ENABLED = "enabled"
    DISABLED = "disabled"


class TagFlag(enum.IntFlag):
    """Modifier flags that may follow a tag's attributes."""

    NONE = 0
    SELF_CLOSE = 1
    REMOVE_INNER_WHITESPACE = 2
    REMOVE_OUTER_WHITESPACE = 4


class Node(ABC):
    """Base class for all AST nodes.

    Parameters
    ----------
    position : SourcePosition or None, default = None
        Where this node starts in the source

    """

    node_name: ClassVar[str] = "node"
    can_nest: ClassVar[bool] = False
    allows_nesting_with_content: ClassVar[bool] = False

    position: Optional[SourcePosition]

    def has_content(self) -> bool:
        """Return whether an inline content node is attached."""
        return False

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


class NestableNode(Node):
    """Base class for nodes that own an ordered list of nested statements."""

    can_nest: ClassVar[bool] = True

    children: list[Node]

    def add_child(self, node: Node) -> None:
        """Append ``node`` as the last child."""
        self.children.append(node)


# ============================================================================
# Structural nodes
# ============================================================================


@dataclass
class Root(NestableNode):
    """Synthetic top-level container; the ultimate ancestor of every node.

    Parameters
    ----------
    children : list of Node, default = empty list
        Top-level statements of the template
    position : SourcePosition or None, default = None
        Always the start of the document when produced by a parser

    """

    children: list[Node] = field(default_factory=list)
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "root"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_root``."""
        return visitor.visit_root(self)


@dataclass
class Tag(NestableNode):
    """An element such as ``%div#main.wide{:lang => "en"}``.

    Parameters
    ----------
    name : str
        Tag name (``div`` for implicit ``.class`` / ``#id`` tags)
    attributes : list of Node, default = empty list
        TagAttribute, TagAttributeList and TagAttributeInterpolation nodes in
        source order
    flags : TagFlag, default = TagFlag.NONE
        Self-close and whitespace removal modifiers
    content : Node or None, default = None
        Inline content given on the same line as the tag
    children : list of Node, default = empty list
        Nested statements
    position : SourcePosition or None, default = None
        Source location of the tag marker

    """

    name: str
    attributes: list[Node] = field(default_factory=list)
    flags: TagFlag = TagFlag.NONE
    content: Optional[Node] = None
    children: list[Node] = field(default_factory=list)
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "tag"

    def has_content(self) -> bool:
        """Return whether inline content was given on the tag's line."""
        return self.content is not None

    @property
    def self_closing(self) -> bool:
        """Whether the tag carries the self-close flag."""
        return bool(self.flags & TagFlag.SELF_CLOSE)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_tag``."""
        return visitor.visit_tag(self)


@dataclass
class Comment(NestableNode):
    """A comment, either rendered to output or silent.

    Parameters
    ----------
    rendered : bool, default = True
        True for comments emitted to the output (Haml ``/``, Jade ``//``),
        False for silent ones (Haml ``-#``, Jade ``//-``)
    condition : str or None, default = None
        IE conditional guard such as ``[if IE lte 8]``
    content : Node or None, default = None
        Inline comment text given on the comment's own line
    children : list of Node, default = empty list
        Nested statements (rendered comments) or raw lines (silent comments)
    position : SourcePosition or None, default = None
        Source location of the comment marker

    """

    rendered: bool = True
    condition: Optional[str] = None
    content: Optional[Node] = None
    children: list[Node] = field(default_factory=list)
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "comment"

    def has_content(self) -> bool:
        """Return whether inline comment text was given."""
        return self.content is not None

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_comment``."""
        return visitor.visit_comment(self)


@dataclass
class Run(NestableNode):
    """Host-language statement (``- code``) that produces no direct output.

    The code is opaque; nested statements form the block it controls.

    Parameters
    ----------
    content : str
        The statement text after the ``-`` marker
    children : list of Node, default = empty list
        Nested statements
    position : SourcePosition or None, default = None
        Source location of the ``-`` marker

    """

    content: str
    children: list[Node] = field(default_factory=list)
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "run"
    allows_nesting_with_content: ClassVar[bool] = True

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_run``."""
        return visitor.visit_run(self)


@dataclass
class Filter(NestableNode):
    """An embedded sub-language block such as ``:javascript``.

    Parameters
    ----------
    name : str
        Filter name without the leading colon
    children : list of Node, default = empty list
        One Statement per filtered source line
    position : SourcePosition or None, default = None
        Source location of the ``:`` marker

    """

    name: str
    children: list[Node] = field(default_factory=list)
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "filter"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_filter``."""
        return visitor.visit_filter(self)


@dataclass
class Statement(Node):
    """Wrapper marking its content as a statement on its own line.

    Parameters
    ----------
    content : Node
        The wrapped node (text, insert or interpolated string)
    position : SourcePosition or None, default = None
        Source location of the wrapped node

    """

    content: Node
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "statement"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_statement``."""
        return visitor.visit_statement(self)


@dataclass
class Doctype(Node):
    """A doctype declaration (``!!! 5``, ``!!! XML utf-8``, ``doctype html``).

    Parameters
    ----------
    doctype_id : str or None, default = None
        Doctype keyword, None for the dialect default
    options : str or None, default = None
        Remainder of the line (e.g. the encoding of an XML prolog)
    position : SourcePosition or None, default = None
        Source location of the declaration

    """

    doctype_id: Optional[str] = None
    options: Optional[str] = None
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "doctype"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_doctype``."""
        return visitor.visit_doctype(self)


# ============================================================================
# Text and expression nodes
# ============================================================================


@dataclass
class Text(Node):
    """Literal text."""

    content: str
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "text"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_text``."""
        return visitor.visit_text(self)


@dataclass
class Insert(Node):
    """Opaque host-language expression whose value is emitted.

    Parameters
    ----------
    content : str
        Expression text, exactly as it appears in the source
    escaping : EscapingMode, default = EscapingMode.INHERIT
        Escaping requested with ``&`` / ``!`` modifiers
    preserve_whitespace : bool, default = False
        True for the ``~`` form
    position : SourcePosition or None, default = None
        Source location of the expression

    """

    content: str
    escaping: EscapingMode = EscapingMode.INHERIT
    preserve_whitespace: bool = False
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "insert"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_insert``."""
        return visitor.visit_insert(self)


@dataclass
class InterpolatedString(Node):
    """Text with embedded ``#{...}`` expressions.

    Children alternate between Text and Insert nodes. A parsed string always
    has at least one child, an empty Text when the source had no content.

    Parameters
    ----------
    children : list of Node, default = empty list
        Text and Insert nodes in source order
    escaping : EscapingMode, default = EscapingMode.INHERIT
        Escaping requested with ``&`` / ``!`` modifiers
    position : SourcePosition or None, default = None
        Source location of the string's first character

    """

    children: list[Node] = field(default_factory=list)
    escaping: EscapingMode = EscapingMode.INHERIT
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "interpolated string"

    def add_child(self, node: Node) -> None:
        """Append a Text or Insert part."""
        self.children.append(node)

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_interpolated_string``."""
        return visitor.visit_interpolated_string(self)


# ============================================================================
# Attribute nodes
# ============================================================================


@dataclass
class TagAttribute(Node):
    """A single ``name => value`` / ``name=value`` attribute.

    Parameters
    ----------
    name : Node
        Attribute name (Text, InterpolatedString or Insert)
    value : Node or None, default = None
        Attribute value; None for a valueless (boolean) attribute
    position : SourcePosition or None, default = None
        Source location of the attribute name

    """

    name: Node
    value: Optional[Node] = None
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "tag attribute"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_tag_attribute``."""
        return visitor.visit_tag_attribute(self)


@dataclass
class TagAttributeList(Node):
    """Splat expression that evaluates to a mapping of attributes."""

    value: Node
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "tag attribute list"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_tag_attribute_list``."""
        return visitor.visit_tag_attribute_list(self)


@dataclass
class TagAttributeInterpolation(Node):
    """Bare ``#{...}`` in attribute position, contributing attributes dynamically."""

    value: Node
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "tag attribute interpolation"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_tag_attribute_interpolation``."""
        return visitor.visit_tag_attribute_interpolation(self)


@dataclass
class ObjectRefClass(Node):
    """Class attribute value derived from an ``[object, prefix]`` reference.

    Parameters
    ----------
    object_ref : Node
        The object expression (an Insert)
    prefix : Node or None, default = None
        Optional prefix expression
    position : SourcePosition or None, default = None
        Source location of the opening bracket

    """

    object_ref: Node
    prefix: Optional[Node] = None
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "object reference class"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_object_ref_class``."""
        return visitor.visit_object_ref_class(self)


@dataclass
class ObjectRefId(Node):
    """Id attribute value derived from an ``[object, prefix]`` reference."""

    object_ref: Node
    prefix: Optional[Node] = None
    position: Optional[SourcePosition] = None

    node_name: ClassVar[str] = "object reference id"

    def accept(self, visitor: Any) -> Any:
        """Dispatch to ``visitor.visit_object_ref_id``."""
        return visitor.visit_object_ref_id(self)


def unwrap_statement(node: Node) -> Node:
    """Return the node wrapped by a Statement, or ``node`` itself."""
    if isinstance(node, Statement):
        return node.content
    return node
