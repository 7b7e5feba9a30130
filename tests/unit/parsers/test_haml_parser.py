#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the Haml statement grammar."""

import pytest

from haml2ast.ast.nodes import (
    Comment,
    Doctype,
    EscapingMode,
    Filter,
    Insert,
    InterpolatedString,
    Root,
    Run,
    Statement,
    Tag,
    TagAttribute,
    TagFlag,
    Text,
)
from haml2ast.exceptions import IndentError, NestingError, TemplateSyntaxError
from haml2ast.options import HamlOptions
from haml2ast.parsers.haml import HamlParser


def parse(source: str, **options) -> Root:
    return HamlParser(HamlOptions(**options)).parse(source, filename="test.haml")


def texts(node: InterpolatedString) -> list:
    return [(type(child).__name__, child.content) for child in node.children]


@pytest.mark.unit
class TestDocumentStructure:
    """Test how lines become a tree."""

    @pytest.mark.parametrize("source", ["", "   ", "\n\n", " \t \n  \n"])
    def test_empty_and_blank_documents(self, source: str) -> None:
        """Empty and whitespace-only input yield an empty root."""
        root = parse(source)
        assert isinstance(root, Root)
        assert root.children == []

    def test_nested_tag(self) -> None:
        """A deeper line nests inside the previous tag."""
        root = parse("%div\n  %span")
        assert len(root.children) == 1
        div = root.children[0]
        assert isinstance(div, Tag) and div.name == "div"
        assert div.content is None
        assert [child.name for child in div.children] == ["span"]

    def test_siblings(self) -> None:
        """Lines at the same level are siblings."""
        root = parse("%div\n%span")
        assert [child.name for child in root.children] == ["div", "span"]

    def test_dedent_returns_to_ancestor(self) -> None:
        """Dedenting closes all deeper levels."""
        root = parse("%html\n  %body\n    %p\n  %footer\n%aside")
        html, aside = root.children
        assert [child.name for child in html.children] == ["body", "footer"]
        assert aside.name == "aside"

    def test_blank_lines_do_not_affect_nesting(self) -> None:
        """Blank lines are skipped entirely."""
        root = parse("%ul\n\n  %li\n   \n  %li")
        assert len(root.children[0].children) == 2

    def test_tab_indentation(self) -> None:
        """Tabs work as the indent unit."""
        root = parse("%ul\n\t%li\n\t\t%a")
        assert root.children[0].children[0].children[0].name == "a"

    def test_root_position(self) -> None:
        """The root starts at the first line."""
        root = HamlParser().parse("%p", lineno=5)
        assert root.position.line == 5
        assert root.children[0].position.line == 5

    def test_parser_is_reusable(self, haml_parser: HamlParser) -> None:
        """Each parse starts from fresh state."""
        haml_parser.parse("%div\n    %p")
        root = haml_parser.parse("%div\n  %p")
        assert root.children[0].children[0].name == "p"


@pytest.mark.unit
class TestTags:
    """Test tag lines."""

    def test_implicit_div_with_id_and_class(self) -> None:
        """#id.cls is a div with id and class attributes."""
        tag = parse("#id.cls").children[0]
        assert tag.name == "div"
        assert len(tag.attributes) == 2
        first, second = tag.attributes
        assert (first.name.content, first.value.content) == ("id", "id")
        assert (second.name.content, second.value.content) == ("class", "cls")

    def test_implicit_tag_name_option(self) -> None:
        """The implicit tag name is configurable."""
        assert parse(".note", implicit_tag_name="span").children[0].name == "span"

    def test_namespaced_and_dashed_names(self) -> None:
        """Tag names may contain colons and dashes."""
        assert parse("%fb:login-button").children[0].name == "fb:login-button"

    def test_self_closing_flag(self) -> None:
        """A trailing slash sets the self-close flag."""
        tag = parse("%input/").children[0]
        assert tag.flags == TagFlag.SELF_CLOSE
        assert tag.self_closing

    def test_whitespace_flags(self) -> None:
        """< and > remove inner and outer whitespace."""
        tag = parse("%p<>").children[0]
        assert tag.flags == TagFlag.REMOVE_INNER_WHITESPACE | TagFlag.REMOVE_OUTER_WHITESPACE

    def test_inline_text(self) -> None:
        """Text after the tag becomes its content."""
        tag = parse("%p hello #{name}").children[0]
        assert isinstance(tag.content, InterpolatedString)
        assert texts(tag.content) == [("Text", "hello "), ("Insert", "name")]

    def test_inline_insert(self) -> None:
        """= after the tag inserts an expression."""
        tag = parse("%li.item= item.title").children[0]
        assert isinstance(tag.content, Insert)
        assert tag.content.content == "item.title"

    def test_nesting_under_self_closing_tag(self) -> None:
        """Children of a self-closing tag are rejected."""
        with pytest.raises(NestingError, match="self-closing tag"):
            parse("%input/\n  %p")

    def test_content_on_self_closing_tag(self) -> None:
        """Inline content on a self-closing tag is rejected."""
        with pytest.raises(NestingError, match="self-closing tag"):
            parse("%br/ text")

    def test_content_and_children(self) -> None:
        """A tag cannot have both inline and nested content."""
        with pytest.raises(NestingError, match="same line as %p and nested within it"):
            parse("%p text\n  %span")

    def test_comment_text_and_children(self) -> None:
        """A comment with inline text cannot have nested content."""
        message = "nesting within a tag that already has content is illegal"
        with pytest.raises(NestingError, match=message) as exc_info:
            parse("/ note\n  %p")
        assert exc_info.value.line == 2

    def test_tag_position(self) -> None:
        """Tags record where their marker starts."""
        tag = parse("%div\n  %span").children[0].children[0]
        assert (tag.position.line, tag.position.column) == (2, 3)


@pytest.mark.unit
class TestInsertsAndText:
    """Test inserts, interpolated text and escaped lines."""

    def test_plain_text_line(self) -> None:
        """A text line is a Statement wrapping an interpolated string."""
        node = parse("hello world").children[0]
        assert isinstance(node, Statement)
        assert texts(node.content) == [("Text", "hello world")]

    def test_interpolation_splits_text(self) -> None:
        """#{...} separates text runs."""
        node = parse("This is #{1+1} interpolated").children[0].content
        assert texts(node) == [("Text", "This is "), ("Insert", "1+1"), ("Text", " interpolated")]

    def test_escaped_interpolation(self) -> None:
        r"""\#{ is literal text."""
        node = parse("price: \\#{amount}").children[0].content
        assert texts(node) == [("Text", "price: #{amount}")]

    def test_hash_without_brace_is_text(self) -> None:
        """A lone # is ordinary text."""
        node = parse("issue #42").children[0].content
        assert texts(node) == [("Text", "issue #42")]

    def test_unterminated_interpolation(self) -> None:
        """An unclosed #{ is a syntax error."""
        with pytest.raises(TemplateSyntaxError, match="expected string or #"):
            parse("a #{b")

    @pytest.mark.parametrize(
        "source,escaping,preserve",
        [
            ("= user.name", EscapingMode.INHERIT, False),
            ("~ user.bio", EscapingMode.INHERIT, True),
            ("&= user.name", EscapingMode.ENABLED, False),
            ("!= user.html", EscapingMode.DISABLED, False),
        ],
    )
    def test_insert_forms(self, source: str, escaping: EscapingMode, preserve: bool) -> None:
        """=, ~, &= and != produce Inserts of the rest of the line."""
        node = parse(source).children[0].content
        assert isinstance(node, Insert)
        assert node.content == source.split(" ", 1)[1]
        assert node.escaping == escaping
        assert node.preserve_whitespace is preserve

    def test_double_equals_interpolates(self) -> None:
        """== parses the rest of the line as interpolated text."""
        node = parse("&== Hi #{name}!").children[0].content
        assert isinstance(node, InterpolatedString)
        assert node.escaping == EscapingMode.ENABLED
        assert texts(node) == [("Text", "Hi "), ("Insert", "name"), ("Text", "!")]

    def test_backslash_escapes_markers(self) -> None:
        """A leading backslash makes the rest plain text."""
        node = parse("\\= not code").children[0].content
        assert texts(node) == [("Text", "= not code")]

    def test_exclamation_text_is_not_insert(self) -> None:
        """! and & alone do not start an insert."""
        node = parse("&amp; !important").children[0].content
        assert texts(node) == [("Text", "&amp; !important")]

    def test_lone_backslash(self) -> None:
        """Nothing after a backslash leaves no statement."""
        with pytest.raises(TemplateSyntaxError, match="Unexpected end of line, expected statement"):
            parse("\\")

    def test_insert_cannot_nest(self) -> None:
        """Nothing may be nested under an insert statement."""
        with pytest.raises(NestingError, match="nesting within insert is illegal"):
            parse("= foo\n  %p")


@pytest.mark.unit
class TestRuns:
    """Test - code statements."""

    def test_run_with_block(self) -> None:
        """Runs keep their code and own the nested block."""
        root = parse("- if user\n  %p= user.name\n- else\n  %p guest")
        first, second = root.children
        assert isinstance(first, Run) and first.content == "if user"
        assert isinstance(second, Run) and second.content == "else"
        assert first.children[0].name == "p"

    def test_run_position(self) -> None:
        """The run position is its dash."""
        run = parse("%div\n  - x = 1").children[0].children[0]
        assert run.position.column == 3


@pytest.mark.unit
class TestComments:
    """Test rendered and silent comments."""

    def test_rendered_comment(self) -> None:
        """/ text is a rendered comment with inline text."""
        comment = parse("/ note to self").children[0]
        assert isinstance(comment, Comment)
        assert comment.rendered
        assert comment.content.content == "note to self"

    def test_rendered_comment_with_children(self) -> None:
        """A bare / comments out its nested block."""
        comment = parse("/\n  %p hidden").children[0]
        assert comment.content is None
        assert comment.children[0].name == "p"

    def test_conditional_comment(self) -> None:
        """A bracket group filling the line is an IE condition."""
        comment = parse("/[if IE lte 8]\n  %p old").children[0]
        assert comment.condition == "[if IE lte 8]"
        assert comment.content is None
        assert len(comment.children) == 1

    def test_bracket_text_that_is_not_a_condition(self) -> None:
        """Brackets followed by more text stay comment text."""
        comment = parse("/[note] more").children[0]
        assert comment.condition is None
        assert comment.content.content == "[note] more"

    def test_conditional_comments_disabled(self) -> None:
        """With the option off, the guard is plain comment text."""
        comment = parse("/[if IE]", allow_conditional_comments=False).children[0]
        assert comment.condition is None
        assert comment.content.content == "[if IE]"

    def test_silent_comment_swallows_block(self) -> None:
        """-# keeps its nested lines verbatim instead of parsing them."""
        root = parse("%div\n  -# note\n    %p{ broken\n\n      deeper\n  %span")
        div = root.children[0]
        comment, span = div.children
        assert isinstance(comment, Comment)
        assert not comment.rendered
        assert comment.content.content == "note"
        assert [line.content.content for line in comment.children] == ["%p{ broken", "  deeper"]
        assert span.name == "span"

    def test_silent_comment_before_indent_unit(self) -> None:
        """At the top level the block is found before any indentation is known."""
        root = parse("-#\n  anything %here\n  more\n%p")
        comment, tag = root.children
        assert [line.content.content.strip() for line in comment.children] == ["anything %here", "more"]
        assert tag.name == "p"

    def test_silent_comment_is_not_a_run(self) -> None:
        """-# is never parsed as a - run."""
        assert isinstance(parse("-# nothing").children[0], Comment)


@pytest.mark.unit
class TestDoctype:
    """Test !!! declarations."""

    @pytest.mark.parametrize(
        "source,doctype_id,options",
        [("!!!", None, None), ("!!! 5", "5", None), ("!!! XML utf-8", "XML", "utf-8"), ("!!! Strict", "Strict", None)],
    )
    def test_doctype(self, source, doctype_id, options) -> None:
        """The id and options are split off the declaration."""
        node = parse(source).children[0]
        assert isinstance(node, Doctype)
        assert (node.doctype_id, node.options) == (doctype_id, options)

    def test_doctype_cannot_nest(self) -> None:
        """Nothing may be nested under a doctype."""
        with pytest.raises(NestingError, match="nesting within doctype is illegal"):
            parse("!!!\n  %p")


@pytest.mark.unit
class TestFilters:
    """Test :filter blocks."""

    def test_raw_lines(self) -> None:
        """Filter lines are kept as raw text, interpolations included."""
        root = parse('%head\n  :javascript\n    var x = "#{y}";\n\n    alert(x);\n  %title')
        head = root.children[0]
        node, title = head.children
        assert isinstance(node, Filter)
        assert node.name == "javascript"
        lines = [statement.content for statement in node.children]
        assert all(isinstance(line, Text) for line in lines)
        assert [line.content for line in lines] == ['var x = "#{y}";', "", "alert(x);"]
        assert title.name == "title"

    def test_interpolated_lines(self) -> None:
        """With interpolate_filters, lines become interpolated strings."""
        root = parse('%head\n  :javascript\n    var x = "#{y}";', interpolate_filters=True)
        line = root.children[0].children[0].children[0].content
        assert isinstance(line, InterpolatedString)
        assert texts(line) == [("Text", 'var x = "'), ("Insert", "y"), ("Text", '";')]

    def test_filter_name_is_stripped(self) -> None:
        """Whitespace around the filter name is dropped."""
        assert parse(":plain  ").children[0].name == "plain"

    def test_empty_filter(self) -> None:
        """A filter without a block has no children."""
        root = parse(":css\n%p")
        assert root.children[0].children == []
        assert root.children[1].name == "p"

    def test_filter_block_is_not_parsed(self) -> None:
        """Template syntax inside a filter is not interpreted."""
        root = parse(":plain\n %p{ not parsed\n - nor this")
        assert [s.content.content for s in root.children[0].children] == ["%p{ not parsed", "- nor this"]


@pytest.mark.unit
class TestMultiline:
    """Test ' |' continuation lines."""

    def test_join(self) -> None:
        """Continuation lines are joined into one statement."""
        node = parse("line |\ncontinued |").children[0].content
        assert texts(node) == [("Text", "line continued")]

    def test_join_with_insert_and_following_line(self) -> None:
        """Joining stops at the first line without the marker."""
        root = parse("%p= a + |\n  b + |\n  c |\n%br")
        assert root.children[0].content.content == "a + b + c"
        assert root.children[1].name == "br"

    def test_blank_lines_inside_join(self) -> None:
        """Blank lines between continuation lines are skipped."""
        node = parse("one |\n\ntwo |").children[0].content
        assert texts(node) == [("Text", "one two")]

    def test_joined_position_points_at_first_line(self) -> None:
        """Positions of a joined statement refer to its first line."""
        source = "%p\n  aaaa |\n  bbbb |"
        text = parse(source).children[0].children[0].content.children[0]
        assert text.content == "aaaa bbbb"
        assert (text.position.line, text.position.column, text.position.offset) == (2, 3, 5)
        assert source[text.position.offset : text.position.offset + 4] == "aaaa"

    def test_error_on_joined_line_reports_first_line(self) -> None:
        """Diagnostics for a joined statement name its first line."""
        with pytest.raises(IndentError) as exc_info:
            parse("%p\n  %a\n      x |\n  y |")
        assert exc_info.value.line == 3

    def test_line_after_join_has_its_own_position(self) -> None:
        """The anchor does not leak into the following statement."""
        root = parse("%p= a + |\n  b |\n%br")
        assert root.children[1].position.line == 3
        assert root.children[1].position.offset == len("%p= a + |\n  b |\n")


@pytest.mark.unit
class TestErrors:
    """Test diagnostics."""

    def test_indent_at_document_start(self) -> None:
        """The first statement may not be indented."""
        with pytest.raises(IndentError, match="beginning of the document"):
            parse("  %p")

    def test_over_deep_indent(self) -> None:
        """Skipping a level is an indentation error, with location."""
        with pytest.raises(IndentError) as exc_info:
            parse("%div\n  %p\n      %span")
        error = exc_info.value
        assert error.filename == "test.haml"
        assert error.line == 3
        assert "more than one level deeper" in str(error)
        assert str(error).endswith("in test.haml on line 3, column 7")

    def test_mixed_document(self) -> None:
        """Switching from spaces to tabs is an indentation error."""
        with pytest.raises(IndentError, match="Inconsistent indentation"):
            parse("%div\n  %p\n\t%span")

    def test_not_a_multiple(self) -> None:
        """Indentation must be a multiple of the unit."""
        with pytest.raises(IndentError, match="3 is not a multiple of 2"):
            parse("%div\n  %p\n   %span")

    def test_lineno_offset(self) -> None:
        """Error lines are shifted by the start line."""
        with pytest.raises(IndentError) as exc_info:
            HamlParser().parse("  %p", lineno=40)
        assert exc_info.value.line == 40

    def test_max_nesting_depth(self) -> None:
        """Deep documents are bounded by max_nesting_depth."""
        source = "\n".join(" " * level + "%d" for level in range(5))
        parse(source, max_nesting_depth=4)
        with pytest.raises(NestingError):
            parse(source, max_nesting_depth=3)

    def test_error_is_not_partial(self) -> None:
        """A failing document produces no tree."""
        with pytest.raises(TemplateSyntaxError):
            parse("%p ok\n%p{:a => (}")


@pytest.mark.unit
class TestTagAttributeHelpers:
    """Test the attribute node shapes exposed on tags."""

    def test_attribute_nodes(self) -> None:
        """Shorthand attributes are TagAttribute nodes of Text."""
        tag = parse("%p.a.b").children[0]
        assert all(isinstance(attr, TagAttribute) for attr in tag.attributes)
        assert [attr.value.content for attr in tag.attributes] == ["a", "b"]
