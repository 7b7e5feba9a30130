#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/parsers/base.py
"""Shared parsing engine for indentation-sensitive template dialects.

The engine reads a template line by line, validates indentation, parses one
statement per line and hands it to the tree builder. Productions that differ
between dialects (tags, comments, doctypes and dialect-only statements) are
supplied by a :class:`Dialect` object; everything else (attributes,
interpolated strings, inserts, runs, filters and multi-line joining) is
implemented here once.

"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from haml2ast.ast.nodes import (
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
    TagAttribute,
    TagAttributeInterpolation,
    TagAttributeList,
    Text,
)
from haml2ast.constants import DEFAULT_FILENAME, DEFAULT_START_LINENO, MULTILINE_MARKER
from haml2ast.exceptions import InvalidOptionsError, TemplateSyntaxError
from haml2ast.options.base import BaseParserOptions
from haml2ast.parsers.cursor import LineCursor
from haml2ast.parsers.expressions import scan_expression, scan_interpolation
from haml2ast.parsers.indentation import IndentTracker
from haml2ast.parsers.tree import TreeBuilder

logger = logging.getLogger(__name__)

_INDENT_RE = re.compile(r"[ \t]*")
_RUN_RE = re.compile(r"-(?!#)")
_FILTER_RE = re.compile(r":(.*)")
_INLINE_INSERT_RE = re.compile(r"(?P<modifier>[&!]?)(?P<marker>==?|~)\s*")

# Interpolated strings
_QUOTE_RE = re.compile(r'"')
_QUOTED_TEXT_RE = re.compile(r'(?:[^#"\\]+|\\(?:["\\]|#\{)|#(?!\{))+')
_BARE_TEXT_RE = re.compile(r"(?:[^#\\]+|\\(?:#\{|[^#]|$)|#(?!\{))+")
_QUOTED_ESCAPE_RE = re.compile(r'\\(["\\])')
_SYMBOL_RE = re.compile(r":(\w+)")

# Attributes
_SHORTHAND_ATTR_RE = re.compile(r"(?P<kind>[#.])(?P<name>[\w-]+)")
_HASH_OPEN_RE = re.compile(r"\{\s*")
_HASH_CLOSE_RE = re.compile(r"\}")
_HASH_ARROW_RE = re.compile(r"=>\s*")
_HASH_SEPARATOR_RE = re.compile(r",\s*")
_HTML_OPEN_RE = re.compile(r"\(\s*")
_HTML_NAME_RE = re.compile(r"[\w+:-]+")
_HTML_EQUALS_RE = re.compile(r"\s*=\s*")
_HTML_CLOSE_RE = re.compile(r"\s*\)")
_HTML_SEPARATOR_RE = re.compile(r"\s+")
_OBJECT_REF_OPEN_RE = re.compile(r"\[\s*")
_OBJECT_REF_CLOSE_RE = re.compile(r"\s*\]\s*")
_OBJECT_REF_SEPARATOR_RE = re.compile(r"\s*,\s*")

_SHORTHAND_ATTR_NAMES = {"#": "id", ".": "class"}


def _sanitize_for_log(value: str) -> str:
    """Escape newlines so a filename cannot forge extra log records."""
    return value.replace("\n", "\\n").replace("\r", "\\r")


def is_multiline(line: str) -> bool:
    """Return whether ``line`` ends with the multi-line marker ``" |"``."""
    return line.rstrip().endswith(MULTILINE_MARKER)


@dataclass
class SpeculativeResult:
    """Outcome of a successful speculative sub-parse.

    Parameters
    ----------
    node : Node
        Node produced by the sub-parse
    end : int
        Column (0-based) reached by the speculative cursor

    """

    node: Node
    end: int


class Dialect(ABC):
    """Productions that distinguish one template dialect from another.

    A dialect is stateless: every hook receives the running
    :class:`TemplateParser` (for options and the shared productions) and the
    cursor positioned after the line's indentation. Hooks return None, without
    consuming input, when their statement does not start at the cursor.

    Attributes
    ----------
    name : str
        Registry name of the dialect
    options_class : type
        Options dataclass accepted by parsers using this dialect

    """

    name: ClassVar[str]
    options_class: ClassVar[type[BaseParserOptions]] = BaseParserOptions

    def parse_extra_statement(self, parser: TemplateParser, cursor: LineCursor) -> Optional[Node]:
        """Parse a dialect-only statement; tried before every other production."""
        return None

    @abstractmethod
    def parse_tag(self, parser: TemplateParser, cursor: LineCursor) -> Optional[Node]:
        """Parse a tag statement."""

    @abstractmethod
    def parse_comment(self, parser: TemplateParser, cursor: LineCursor) -> Optional[Node]:
        """Parse a rendered or silent comment."""

    @abstractmethod
    def parse_doctype(self, parser: TemplateParser, cursor: LineCursor) -> Optional[Node]:
        """Parse a doctype declaration."""


class TemplateParser:
    """Indentation-driven template parser parameterized by a dialect.

    Parameters
    ----------
    dialect : Dialect
        Dialect supplying tag, comment and doctype productions
    options : BaseParserOptions or None, default = None
        Parser configuration; an instance of ``dialect.options_class``.
        Defaults are used when None.

    Raises
    ------
    InvalidOptionsError
        If ``options`` is not an instance of the dialect's options class

    Examples
    --------
        >>> from haml2ast.parsers.haml import HamlDialect
        >>> parser = TemplateParser(HamlDialect())
        >>> root = parser.parse("%p hello")
        >>> root.children[0].name
        'p'

    """

    options_class: ClassVar[type[BaseParserOptions]] = BaseParserOptions

    def __init__(self, dialect: Dialect, options: BaseParserOptions | None = None):
        """Initialize the parser with a dialect and optional configuration."""
        self._validate_options_type(options, dialect.options_class, dialect.name)
        self.dialect = dialect
        self.options: BaseParserOptions = options if options is not None else dialect.options_class()
        self.indent = IndentTracker()
        self.tree = TreeBuilder(Root(), self.options.max_nesting_depth)

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Validate that options are of the correct type for this parser.

        Parameters
        ----------
        options : BaseParserOptions or None
            The options object to validate
        expected_type : type
            The expected options class type
        parser_name : str
            Name of the parser (for error messages)

        Raises
        ------
        InvalidOptionsError
            If options are not None and not an instance of expected_type

        """
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                parser_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def parse(self, source: str, filename: str = DEFAULT_FILENAME, lineno: int = DEFAULT_START_LINENO) -> Root:
        """Parse a template into an AST.

        Parameters
        ----------
        source : str
            Template source text
        filename : str, default "<string>"
            Name reported in error messages
        lineno : int, default 1
            Line number of the first source line

        Returns
        -------
        Root
            Root node whose children are the top-level statements

        Raises
        ------
        TemplateSyntaxError
            On the first syntax, indentation or nesting error

        """
        cursor = LineCursor(source, filename, lineno)
        root = Root(position=SourcePosition(line=lineno, column=1, offset=0))
        self.indent = IndentTracker()
        self.tree = TreeBuilder(root, self.options.max_nesting_depth)

        logger.debug(f"Parsing {_sanitize_for_log(filename)} as {self.dialect.name}")

        while cursor.next_line():
            self._join_multiline(cursor)
            self._parse_line(cursor)

        logger.debug(f"Parsed {_sanitize_for_log(filename)}: {len(root.children)} top-level statements")
        return root

    def _parse_line(self, cursor: LineCursor) -> None:
        if not cursor.line.strip():
            return

        found = cursor.match(_INDENT_RE)
        indent = found.group(0) if found is not None else ""
        level = self.indent.check_indent(indent, cursor, self.tree.prev is None)

        node = self.parse_statement(cursor)
        if node is None:
            raise self.expected(cursor, "statement")

        self.tree.insert(node, level, self.indent.prev_level, cursor)

    def _join_multiline(self, cursor: LineCursor) -> None:
        """Fold a run of ``" |"``-terminated lines into the current line."""
        if not is_multiline(cursor.line):
            return

        first = cursor.line_index
        joined = cursor.line.rstrip()[:-1]
        while (upcoming := cursor.peek_line()) is not None:
            if not upcoming.strip():
                cursor.next_line()
                continue
            if not is_multiline(upcoming):
                break
            joined += upcoming.strip()[:-1]
            cursor.next_line()

        cursor.replace_line(joined.rstrip(), anchor=first)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def parse_statement(self, cursor: LineCursor) -> Optional[Node]:
        """Parse the statement starting at the cursor.

        Productions are tried in a fixed order: dialect-only statements,
        tags, filters, comments, runs, doctypes and finally nestable
        statements (inserts and text), which are wrapped in a Statement.

        Returns
        -------
        Node or None
            The statement, or None if no production matches

        """
        node = self.dialect.parse_extra_statement(self, cursor)
        if node is None:
            node = self.dialect.parse_tag(self, cursor)
        if node is None:
            node = self.parse_filter(cursor)
        if node is None:
            node = self.dialect.parse_comment(self, cursor)
        if node is None:
            node = self.parse_run(cursor)
        if node is None:
            node = self.dialect.parse_doctype(self, cursor)
        if node is None:
            nested = self.parse_nestable_statement(cursor)
            if nested is not None:
                node = Statement(content=nested, position=nested.position)
        return node

    def parse_nestable_statement(self, cursor: LineCursor) -> Optional[Node]:
        """Parse a statement that may also appear inline after a tag.

        Handles ``= expr``, ``~ expr``, ``== text``, their ``&`` / ``!``
        escaping variants, comments and plain (interpolated) text. A leading
        backslash is dropped so that text may start with a marker character.
        """
        found = cursor.match(_INLINE_INSERT_RE)
        if found is not None:
            node: Union[Insert, InterpolatedString]
            marker = found.group("marker")
            if marker == "==":
                node = self.parse_interpolated_string(cursor, quoted=False)
            else:
                node = Insert(
                    content=cursor.eat_rest(),
                    preserve_whitespace=marker == "~",
                    position=cursor.position(found.start()),
                )

            modifier = found.group("modifier")
            if modifier == "&":
                node.escaping = EscapingMode.ENABLED
            elif modifier == "!":
                node.escaping = EscapingMode.DISABLED

            cursor.skip_ws()
            return node

        comment = self.dialect.parse_comment(self, cursor)
        if comment is not None:
            return comment

        if cursor.peek_char() == "\\":
            cursor.eat_char()

        if cursor.rest.strip():
            return self.parse_interpolated_string(cursor, quoted=False)

        return None

    def parse_run(self, cursor: LineCursor) -> Optional[Run]:
        """Parse a ``- code`` statement."""
        found = cursor.match(_RUN_RE)
        if found is None:
            return None

        cursor.skip_ws()
        return Run(content=cursor.eat_rest(), position=cursor.position(found.start()))

    def parse_filter(self, cursor: LineCursor) -> Optional[Filter]:
        """Parse a ``:name`` filter and the indented block that follows it.

        Every line of the block becomes a Statement child holding the line's
        text with the block indentation removed. Blank lines inside the block
        are kept as empty Text statements.
        """
        found = cursor.match(_FILTER_RE)
        if found is None:
            return None

        node = Filter(name=found.group(1).strip(), position=cursor.position(found.start()))
        for blank in self.consume_block(cursor):
            content: Node
            if blank:
                content = Text(content="", position=cursor.position())
                cursor.eat_rest()
            elif self.options.interpolate_filters:
                content = self.parse_interpolated_string(cursor, quoted=False)
            else:
                position = cursor.position()
                content = Text(content=cursor.eat_rest(), position=position)
            node.add_child(Statement(content=content, position=content.position))

        logger.debug(f"Filter :{node.name} spans {len(node.children)} lines")
        return node

    def consume_block(self, cursor: LineCursor) -> Iterator[bool]:
        """Advance through the lines indented below the current statement.

        The block ends at the first non-blank line that does not start with
        one more indentation level than the current line. Before each
        yield the cursor sits on a block line, just past the block
        indentation.

        Yields
        ------
        bool
            True when the line is blank

        """
        while (upcoming := cursor.peek_line()) is not None:
            blank = not upcoming.strip()
            indent = ""
            if not blank:
                indent = self.indent.indent_string(1, upcoming)
                if not indent or not upcoming.startswith(indent):
                    return

            cursor.next_line()
            if not blank:
                cursor.eat_chars(len(indent))
            yield blank

    def parse_raw_lines(self, cursor: LineCursor) -> list[Node]:
        """Consume an indented block verbatim, skipping blank lines.

        Used for silent comments: their nested lines are never parsed as
        statements.
        """
        lines: list[Node] = []
        for blank in self.consume_block(cursor):
            if blank:
                cursor.eat_rest()
                continue
            position = cursor.position()
            text = Text(content=cursor.eat_rest(), position=position)
            lines.append(Statement(content=text, position=position))
        return lines

    # ------------------------------------------------------------------
    # Strings and expressions
    # ------------------------------------------------------------------

    def parse_interpolated_string(self, cursor: LineCursor, quoted: bool = True) -> InterpolatedString:
        """Parse text with ``#{...}`` interpolations.

        Parameters
        ----------
        cursor : LineCursor
            Cursor at the start of the string
        quoted : bool, default True
            When True the string is delimited by double quotes and ``\\"``
            and ``\\\\`` are unescaped; otherwise it runs to the end of the line

        Returns
        -------
        InterpolatedString
            Alternating Text and Insert children; a single empty Text when
            the string is empty

        Raises
        ------
        TemplateSyntaxError
            If the string is malformed (e.g. an unterminated quote)

        """
        if quoted and cursor.match(_QUOTE_RE) is None:
            raise self.expected(cursor, "double quoted string")

        node = InterpolatedString(position=cursor.position())
        text_re = _QUOTED_TEXT_RE if quoted else _BARE_TEXT_RE

        while True:
            found = cursor.match(text_re)
            if found is not None:
                text = found.group(0)
                if quoted:
                    text = _QUOTED_ESCAPE_RE.sub(r"\1", text)
                text = text.replace("\\#{", "#{")
                node.add_child(Text(content=text, position=cursor.position(found.start())))
                continue

            insert = self.parse_interpolation(cursor)
            if insert is not None:
                node.add_child(insert)
                continue

            if quoted and cursor.match(_QUOTE_RE) is not None:
                break
            if not quoted and cursor.is_eol():
                break

            raise self.expected(cursor, "string or #{...}")

        if not node.children:
            node.add_child(Text(content="", position=cursor.position()))
        return node

    def parse_interpolation(self, cursor: LineCursor) -> Optional[Insert]:
        """Parse a ``#{expr}`` interpolation into an Insert of ``expr``."""
        close = scan_interpolation(cursor.line, cursor.index)
        if close is None:
            return None

        start = cursor.index + 2
        insert = Insert(content=cursor.line[start:close], position=cursor.position(start))
        cursor.advance_to(close + 1)
        return insert

    def parse_expression(self, cursor: LineCursor, delimiters: str) -> tuple[str, SourcePosition]:
        """Capture a host-language expression verbatim.

        Parameters
        ----------
        cursor : LineCursor
            Cursor at the start of the expression
        delimiters : str
            Characters ending the expression outside brackets and strings

        Returns
        -------
        tuple of (str, SourcePosition)
            The expression text and where it starts

        Raises
        ------
        TemplateSyntaxError
            If no expression starts at the cursor

        """
        start = cursor.index
        end = scan_expression(cursor.line, start, delimiters)
        if end is None:
            raise self.expected(cursor, "target language expression")

        cursor.advance_to(end)
        return cursor.line[start:end], cursor.position(start)

    def parse_symbol(self, cursor: LineCursor) -> Text:
        """Parse a ``:name`` symbol literal into Text holding ``name``."""
        found = cursor.match(_SYMBOL_RE)
        if found is None:
            raise self.expected(cursor, "symbol")
        return Text(content=found.group(1), position=cursor.position(found.start()))

    def speculate(
        self, cursor: LineCursor, production: Callable[[LineCursor], Node]
    ) -> Optional[SpeculativeResult]:
        """Run ``production`` on ``cursor`` and report success or failure.

        The cursor is expected to be a clone; it is left wherever the
        production stopped.

        Returns
        -------
        SpeculativeResult or None
            The node and end column, or None if the production raised a
            TemplateSyntaxError

        """
        try:
            node = production(cursor)
        except TemplateSyntaxError as e:
            logger.debug(f"Speculative parse failed on line {e.line}: {e.message}")
            return None
        return SpeculativeResult(node=node, end=cursor.index)

    def parse_attribute_expression(self, cursor: LineCursor, delimiters: str) -> Node:
        """Parse an attribute name or value.

        The expression is always captured verbatim first. When it looks like
        a double quoted string or a symbol, it is re-parsed speculatively as
        one; the typed node is kept only if that parse covers the whole
        expression, otherwise the expression becomes an Insert.
        """
        speculative = cursor.clone()
        expression, position = self.parse_expression(cursor, delimiters)

        production: Optional[Callable[[LineCursor], Node]] = None
        if expression.startswith('"'):
            production = self.parse_interpolated_string
        elif expression.startswith(":"):
            production = self.parse_symbol

        if production is not None:
            result = self.speculate(speculative, production)
            if result is not None and result.end >= cursor.index:
                cursor.advance_to(result.end)
                return result.node

        return Insert(content=expression, position=position)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    def parse_tag_attributes(self, cursor: LineCursor) -> list[Node]:
        """Parse ``.class`` / ``#id`` shorthands and the attribute lists of a tag.

        Shorthands come first. They may be followed by a hash list ``{...}``,
        an HTML list ``(...)`` and an object reference ``[...]``, in any
        order, each at most once.
        """
        attributes: list[Node] = []

        while (found := cursor.match(_SHORTHAND_ATTR_RE)) is not None:
            position = cursor.position(found.start())
            attributes.append(
                TagAttribute(
                    name=Text(content=_SHORTHAND_ATTR_NAMES[found.group("kind")], position=position),
                    value=Text(content=found.group("name"), position=cursor.position(found.start("name"))),
                    position=position,
                )
            )

        productions: dict[str, Callable[[LineCursor], list[Node]]] = {
            "{": self._parse_hash_attributes,
            "(": self._parse_html_attributes,
            "[": self._parse_object_reference,
        }
        seen: set[str] = set()
        while (char := cursor.peek_char()) in productions and char not in seen:
            seen.add(char)
            attributes.extend(productions[char](cursor))

        return attributes

    def _parse_hash_attributes(self, cursor: LineCursor) -> list[Node]:
        """Parse ``{:name => value, splat, #{interp}}``; may span lines after a comma."""
        attributes: list[Node] = []
        if cursor.match(_HASH_OPEN_RE) is None:
            return attributes

        while True:
            interpolation = self.parse_interpolation(cursor)
            if interpolation is not None:
                attributes.append(TagAttributeInterpolation(value=interpolation, position=interpolation.position))
            else:
                name = self.parse_attribute_expression(cursor, "=,")
                cursor.skip_ws()
                if cursor.match(_HASH_ARROW_RE) is None:
                    attributes.append(TagAttributeList(value=name, position=name.position))
                else:
                    value = self.parse_attribute_expression(cursor, ",")
                    attributes.append(TagAttribute(name=name, value=value, position=name.position))

            cursor.skip_ws()
            if cursor.match(_HASH_CLOSE_RE) is not None:
                break
            if cursor.match(_HASH_SEPARATOR_RE) is None:
                raise self.expected(cursor, "',' or '}'")
            if cursor.is_eol():
                self._continue_attributes(cursor, "'}'")

        return attributes

    def _parse_html_attributes(self, cursor: LineCursor) -> list[Node]:
        """Parse ``(name=value flag #{interp})``; may span lines between entries."""
        attributes: list[Node] = []
        if cursor.match(_HTML_OPEN_RE) is None:
            return attributes

        while True:
            interpolation = self.parse_interpolation(cursor)
            if interpolation is not None:
                attributes.append(TagAttributeInterpolation(value=interpolation, position=interpolation.position))
            else:
                found = cursor.match(_HTML_NAME_RE)
                if found is None:
                    raise self.expected(cursor, "html attribute name or #{interpolation}")
                name = Text(content=found.group(0), position=cursor.position(found.start()))
                value = None
                if cursor.match(_HTML_EQUALS_RE) is not None:
                    value = self.parse_attribute_expression(cursor, " ")
                attributes.append(TagAttribute(name=name, value=value, position=name.position))

            if cursor.match(_HTML_CLOSE_RE) is not None:
                break
            if cursor.match(_HTML_SEPARATOR_RE) is None and not cursor.is_eol():
                raise self.expected(cursor, "' ', ')' or end of line")
            if cursor.is_eol():
                self._continue_attributes(cursor, "')'")

        return attributes

    def _parse_object_reference(self, cursor: LineCursor) -> list[Node]:
        """Parse ``[object, prefix]`` into class and id attributes."""
        found = cursor.match(_OBJECT_REF_OPEN_RE)
        if found is None:
            return []

        position = cursor.position(found.start())
        parts: list[Node] = []
        while cursor.match(_OBJECT_REF_CLOSE_RE) is None:
            expression, expression_position = self.parse_expression(cursor, ",]")
            parts.append(Insert(content=expression, position=expression_position))
            if cursor.match(_OBJECT_REF_CLOSE_RE) is not None:
                break
            if cursor.match(_OBJECT_REF_SEPARATOR_RE) is None:
                raise self.expected(cursor, "',' or ']'")

        if not parts:
            return []

        object_ref = parts[0]
        prefix = parts[1] if len(parts) > 1 else None
        return [
            TagAttribute(
                name=Text(content="class", position=position),
                value=ObjectRefClass(object_ref=object_ref, prefix=prefix, position=position),
                position=position,
            ),
            TagAttribute(
                name=Text(content="id", position=position),
                value=ObjectRefId(object_ref=object_ref, prefix=prefix, position=position),
                position=position,
            ),
        ]

    def _continue_attributes(self, cursor: LineCursor, closer: str) -> None:
        if cursor.peek_line() is None:
            raise self.expected(cursor, f"attribute or {closer}")
        cursor.next_line()
        cursor.skip_ws()

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def expected(self, cursor: LineCursor, expected: str) -> TemplateSyntaxError:
        """Build an "Unexpected X, expected Y" error at the cursor."""
        char = cursor.peek_char()
        unexpected = f"'{char}'" if char is not None else "end of line"
        return cursor.syntax_error(f"Unexpected {unexpected}, expected {expected}")
