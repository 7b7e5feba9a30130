#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for AST traversal helpers."""

import pytest

from haml2ast import parse
from haml2ast.ast import Insert, Node, Tag, Text, TreeWalker, collect_nodes, iter_inserts
from haml2ast.constants import DEFAULT_MAX_NESTING_DEPTH

TEMPLATE = """\
!!! 5
%html
  %body{:class => body_class}
    / greeting
    %p.intro Hello #{user.name}
    - if admin
      = render 'admin'
    :javascript
      track();
"""


class KindRecorder(TreeWalker):
    def __init__(self):
        self.kinds: list[str] = []

    def visit_node(self, node: Node) -> None:
        self.kinds.append(type(node).__name__)


@pytest.mark.unit
class TestTreeWalker:
    """Test depth-first traversal."""

    def test_visits_every_node_in_source_order(self) -> None:
        """Attributes come before inline content and children."""
        recorder = KindRecorder()
        parse("%p{:a => b} text\n").accept(recorder)
        assert recorder.kinds == [
            "Root",
            "Tag",
            "TagAttribute",
            "Text",
            "Insert",
            "InterpolatedString",
            "Text",
        ]

    def test_override_single_kind(self) -> None:
        """Subclasses can hook one node kind and keep walking."""

        class TagNames(TreeWalker):
            def __init__(self):
                self.names: list[str] = []

            def visit_tag(self, node: Tag) -> None:
                self.names.append(node.name)
                super().visit_tag(node)

        walker = TagNames()
        parse(TEMPLATE).accept(walker)
        assert walker.names == ["html", "body", "p"]

    def test_filter_and_comment_children_are_walked(self) -> None:
        """Raw filter lines and comment text are reached."""
        texts = [node.content for node in collect_nodes(parse(TEMPLATE), Text)]
        assert "greeting" in texts
        assert "track();" in texts


@pytest.mark.unit
class TestCollectors:
    """Test collect_nodes and iter_inserts."""

    def test_collect_tags(self) -> None:
        """Nodes are collected in document order."""
        tags = collect_nodes(parse(TEMPLATE), Tag)
        assert [tag.name for tag in tags] == ["html", "body", "p"]

    def test_collect_includes_root(self) -> None:
        """The starting node itself is a candidate."""
        tag = Tag(name="p")
        assert collect_nodes(tag, Tag) == [tag]

    def test_iter_inserts(self) -> None:
        """Every embedded expression is reachable."""
        assert [insert.content for insert in iter_inserts(parse(TEMPLATE))] == [
            "body_class",
            "user.name",
            "render 'admin'",
        ]

    def test_iter_inserts_yields_insert_nodes(self) -> None:
        """iter_inserts is a generator of Insert nodes."""
        assert all(isinstance(node, Insert) for node in iter_inserts(parse("= a\n%p= b")))


@pytest.mark.unit
class TestDeepTrees:
    """Test traversal of trees at the default nesting limit."""

    SOURCE = "\n".join("  " * level + f"%t{level}" for level in range(DEFAULT_MAX_NESTING_DEPTH + 1))

    def test_collect_at_nesting_limit(self) -> None:
        """Every level of the deepest accepted tree is collected in order."""
        tags = collect_nodes(parse(self.SOURCE), Tag)
        assert [tag.name for tag in tags] == [f"t{level}" for level in range(DEFAULT_MAX_NESTING_DEPTH + 1)]

    def test_walker_at_nesting_limit(self) -> None:
        """A walker started through accept reaches the deepest node."""
        recorder = KindRecorder()
        parse(self.SOURCE).accept(recorder)
        assert recorder.kinds == ["Root"] + ["Tag"] * (DEFAULT_MAX_NESTING_DEPTH + 1)

    def test_walk_and_accept_agree(self) -> None:
        """walk() visits the same nodes in the same order as accept()."""
        root = parse(TEMPLATE)
        via_accept, via_walk = KindRecorder(), KindRecorder()
        root.accept(via_accept)
        via_walk.walk(root)
        assert via_walk.kinds == via_accept.kinds
