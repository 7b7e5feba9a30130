#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for tag attribute lists shared by all dialects."""

import pytest

from haml2ast.ast.nodes import (
    Insert,
    InterpolatedString,
    ObjectRefClass,
    ObjectRefId,
    Tag,
    TagAttribute,
    TagAttributeInterpolation,
    TagAttributeList,
    TagFlag,
    Text,
)
from haml2ast.exceptions import TemplateSyntaxError
from haml2ast.parsers.haml import HamlParser
from haml2ast.parsers.jade import JadeParser


def first_tag(source: str) -> Tag:
    tag = HamlParser().parse(source).children[0]
    assert isinstance(tag, Tag)
    return tag


def describe(node) -> tuple:
    """Reduce an attribute name or value to (kind, text) for comparisons."""
    if isinstance(node, InterpolatedString):
        return ("string", "".join(child.content for child in node.children))
    return (type(node).__name__, node.content)


@pytest.mark.unit
class TestHashAttributes:
    """Test ``{:name => value}`` lists."""

    def test_symbol_names_and_values(self) -> None:
        """Symbols become Text, quoted strings interpolated strings, the rest Inserts."""
        tag = first_tag('%a{:href => "/x", :title => title}')
        href, title = tag.attributes
        assert isinstance(href, TagAttribute)
        assert describe(href.name) == ("Text", "href")
        assert describe(href.value) == ("string", "/x")
        assert describe(title.name) == ("Text", "title")
        assert describe(title.value) == ("Insert", "title")

    def test_quoted_string_with_interpolation(self) -> None:
        """Interpolations inside quoted values are kept as Inserts."""
        value = first_tag('%a{:href => "/users/#{id}"}').attributes[0].value
        assert isinstance(value, InterpolatedString)
        assert [type(child) for child in value.children] == [Text, Insert]
        assert value.children[1].content == "id"

    def test_quoted_escapes(self) -> None:
        r"""\" and \\ are unescaped inside quoted values."""
        value = first_tag(r'%p{:title => "say \"hi\""}').attributes[0].value
        assert describe(value) == ("string", 'say "hi"')

    def test_string_name(self) -> None:
        """Quoted names are interpolated strings."""
        attr = first_tag('%p{"data-id" => 1}').attributes[0]
        assert describe(attr.name) == ("string", "data-id")
        assert describe(attr.value) == ("Insert", "1")

    def test_quoted_symbol_falls_back_to_insert(self) -> None:
        """A name that is not a plain symbol is kept verbatim."""
        attr = first_tag('%p{:"data-x" => 1}').attributes[0]
        assert describe(attr.name) == ("Insert", ':"data-x"')

    def test_partial_string_falls_back_to_insert(self) -> None:
        """A value that only starts with a string is an expression."""
        attr = first_tag('%p{:a => "x" + y}').attributes[0]
        assert describe(attr.value) == ("Insert", '"x" + y')

    def test_expression_values_keep_commas_in_groups(self) -> None:
        """Nested brackets and strings are captured verbatim."""
        attrs = first_tag("%p{:data => {a: [1, 2]}, :b => f('x, y')}").attributes
        assert [describe(attr.value) for attr in attrs] == [
            ("Insert", "{a: [1, 2]}"),
            ("Insert", "f('x, y')"),
        ]

    def test_splat(self) -> None:
        """A bare expression is an attribute list to splat."""
        attr = first_tag("%p{attrs}").attributes[0]
        assert isinstance(attr, TagAttributeList)
        assert describe(attr.value) == ("Insert", "attrs")

    def test_interpolation(self) -> None:
        """#{...} in an attribute list is an interpolated attribute set."""
        attr = first_tag("%p{#{attrs}}").attributes[0]
        assert isinstance(attr, TagAttributeInterpolation)
        assert attr.value.content == "attrs"

    def test_empty_list(self) -> None:
        """{} is an expression-less list and therefore an error."""
        with pytest.raises(TemplateSyntaxError, match="expected target language expression"):
            first_tag("%p{}")

    def test_continues_after_comma(self) -> None:
        """A list may continue on the next line after a comma."""
        root = HamlParser().parse("%p{:a => 1,\n   :b => 2} text\n%br")
        tag = root.children[0]
        assert [describe(attr.name) for attr in tag.attributes] == [("Text", "a"), ("Text", "b")]
        assert tag.content.children[0].content == "text"
        assert root.children[1].name == "br"

    def test_unterminated_at_end_of_document(self) -> None:
        """A list cut off by the end of the input is reported."""
        with pytest.raises(TemplateSyntaxError, match="Unexpected end of line, expected attribute or '}'"):
            first_tag("%p{:a => 1,")

    def test_bad_value(self) -> None:
        """An unbalanced value is not an expression."""
        with pytest.raises(TemplateSyntaxError, match=r"Unexpected '\(', expected target language expression"):
            first_tag("%p{:a => (1}")

    def test_bad_separator(self) -> None:
        """Entries must be separated by commas."""
        with pytest.raises(TemplateSyntaxError, match=r"Unexpected '\)', expected ',' or '\}'"):
            first_tag("%p{:a => 1 )")


@pytest.mark.unit
class TestHtmlAttributes:
    """Test ``(name=value)`` lists."""

    def test_values(self) -> None:
        """Double quoted values are strings; other values are expressions."""
        href, title = first_tag("%a(href=\"#\" title='x')").attributes
        assert describe(href.name) == ("Text", "href")
        assert describe(href.value) == ("string", "#")
        assert describe(title.value) == ("Insert", "'x'")

    def test_boolean_attribute(self) -> None:
        """A name without a value has no value node."""
        checked, kind = first_tag('%input(checked type="checkbox")').attributes
        assert checked.value is None
        assert describe(kind.value) == ("string", "checkbox")

    def test_spaces_around_equals(self) -> None:
        """Whitespace around = is allowed."""
        attr = first_tag("%a(href = url)").attributes[0]
        assert describe(attr.value) == ("Insert", "url")

    def test_interpolation(self) -> None:
        """#{...} inside an HTML list is an interpolated attribute set."""
        assert isinstance(first_tag("%p(#{attrs})").attributes[0], TagAttributeInterpolation)

    def test_continues_on_next_line(self) -> None:
        """Entries may continue on following lines."""
        tag = HamlParser().parse('%a(href="/x"\n   title="y") Link').children[0]
        assert [describe(attr.name)[1] for attr in tag.attributes] == ["href", "title"]
        assert tag.content.children[0].content == "Link"

    def test_unterminated_at_end_of_document(self) -> None:
        """A list cut off by the end of the input is reported."""
        with pytest.raises(TemplateSyntaxError, match=r"expected attribute or '\)'"):
            first_tag('%a(href="x"')

    def test_bad_name(self) -> None:
        """An entry must start with a name or interpolation."""
        with pytest.raises(TemplateSyntaxError, match="Unexpected '=', expected html attribute name"):
            first_tag("%p(=x)")

    def test_bad_separator(self) -> None:
        """Values must be followed by a space, ) or the end of the line."""
        with pytest.raises(TemplateSyntaxError, match=r"Unexpected '\}', expected ' ', '\)' or end of line"):
            first_tag("%p(a=(1)}x)")


@pytest.mark.unit
class TestObjectReferences:
    """Test ``[object, prefix]`` references."""

    def test_object_and_prefix(self) -> None:
        """The reference expands to class and id attributes."""
        klass, ident = first_tag("%div[@user, :greeting]").attributes
        assert describe(klass.name) == ("Text", "class")
        assert describe(ident.name) == ("Text", "id")
        assert isinstance(klass.value, ObjectRefClass)
        assert isinstance(ident.value, ObjectRefId)
        assert klass.value.object_ref.content == "@user"
        assert klass.value.prefix.content == ":greeting"

    def test_object_without_prefix(self) -> None:
        """The prefix is optional."""
        attr = first_tag("%div[item]").attributes[0]
        assert attr.value.prefix is None

    def test_empty_reference(self) -> None:
        """An empty reference adds no attributes."""
        assert first_tag("%div[]").attributes == []


@pytest.mark.unit
class TestAttributeOrdering:
    """Test how shorthands and lists combine."""

    def test_shorthands_then_lists_in_any_order(self) -> None:
        """Shorthands come first; each list kind may appear once."""
        tag = first_tag('%a#top.nav(href="x"){:b => 1}[obj]/')
        names = [describe(attr.name)[1] for attr in tag.attributes]
        assert names == ["id", "class", "href", "b", "class", "id"]
        assert tag.flags == TagFlag.SELF_CLOSE

    def test_repeated_list_is_content(self) -> None:
        """A second list of the same kind is not an attribute list."""
        tag = first_tag("%p{:a => 1}{b}")
        assert len(tag.attributes) == 1
        assert tag.content.children[0].content == "{b}"

    def test_same_grammar_in_jade(self) -> None:
        """Jade tags share the attribute grammar."""
        tag = JadeParser().parse("a.btn(href='/x') Go").children[0]
        assert describe(tag.attributes[0].value) == ("Text", "btn")
        assert describe(tag.attributes[1].value) == ("Insert", "'/x'")
