#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/parsers/jade.py
"""Jade dialect.

Jade shares the attribute, insert, run and filter grammar with Haml but
writes tags as bare names (``ul#menu``), comments as ``//`` (rendered) and
``//-`` (silent), and doctypes as ``doctype html``. Literal text goes on
``| piped`` lines or on lines that start with an HTML tag.

"""

from __future__ import annotations

import logging
import re
from typing import Optional, cast

from haml2ast.ast.nodes import Comment, Doctype, Node, Statement, Tag, TagFlag, Text
from haml2ast.exceptions import NestingError
from haml2ast.options.jade import JadeOptions
from haml2ast.parsers.base import Dialect, TemplateParser
from haml2ast.parsers.cursor import LineCursor

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(
    r"""
    (?P<tag_name>\w[\w:-]*)  # tag name
    | (?=[.#][\w-])          # implicit tag followed by a class or id
    """,
    re.VERBOSE,
)
_COMMENT_RE = re.compile(r"(?P<marker>//-|//)\s*")
_DOCTYPE_RE = re.compile(
    r"""
    (?:doctype|!!!)
    (?:
        \s+(?P<type>\S+)
        (?:\s+(?P<options>.*))?
    )?$
    """,
    re.VERBOSE,
)
_PIPE_RE = re.compile(r"\|[ \t]?")
_HTML_RE = re.compile(r"(?=<)")


class JadeDialect(Dialect):
    """Tag, comment, doctype and text productions of Jade."""

    name = "jade"
    options_class = JadeOptions

    def parse_extra_statement(self, parser: TemplateParser, cursor: LineCursor) -> Optional[Node]:
        """Parse doctypes, ``| piped text`` and literal HTML lines.

        These must be tried before tags: ``doctype`` would otherwise be read
        as a tag name.
        """
        doctype = self.parse_doctype(parser, cursor)
        if doctype is not None:
            return doctype

        options = cast(JadeOptions, parser.options)
        if options.allow_piped_text:
            found = cursor.match(_PIPE_RE)
            if found is not None:
                text = parser.parse_interpolated_string(cursor, quoted=False)
                return Statement(content=text, position=cursor.position(found.start()))

        if cursor.match(_HTML_RE) is not None:
            html = parser.parse_interpolated_string(cursor, quoted=False)
            return Statement(content=html, position=html.position)

        return None

    def parse_tag(self, parser: TemplateParser, cursor: LineCursor) -> Optional[Node]:
        """Parse ``name``, ``.class`` or ``#id`` with attributes and inline content."""
        found = cursor.match(_TAG_RE)
        if found is None:
            return None

        name = found.group("tag_name") or parser.options.implicit_tag_name
        attributes = parser.parse_tag_attributes(cursor)
        flags = TagFlag.NONE
        if cursor.peek_char() == "/":
            flags = TagFlag.SELF_CLOSE
            cursor.eat_char()

        node = Tag(name=name, attributes=attributes, flags=flags, position=cursor.position(found.start()))

        cursor.skip_ws()
        nested = parser.parse_nestable_statement(cursor)
        if nested is not None:
            if node.self_closing:
                raise cursor.syntax_error(
                    "Illegal nesting: nesting within a self-closing tag is illegal", NestingError
                )
            node.content = nested

        return node

    def parse_comment(self, parser: TemplateParser, cursor: LineCursor) -> Optional[Node]:
        """Parse ``// text`` or ``//- text``; a silent comment swallows its block."""
        found = cursor.match(_COMMENT_RE)
        if found is None:
            return None

        rendered = found.group("marker") == "//"
        node = Comment(rendered=rendered, position=cursor.position(found.start()))

        text = cursor.rest.strip()
        if text:
            node.content = Text(content=text, position=cursor.position())
        cursor.eat_rest()

        if not rendered:
            node.children.extend(parser.parse_raw_lines(cursor))
            logger.debug(f"Silent comment swallowed {len(node.children)} lines")

        return node

    def parse_doctype(self, parser: TemplateParser, cursor: LineCursor) -> Optional[Node]:
        """Parse ``doctype``, ``doctype html`` or the legacy ``!!! 5``."""
        found = cursor.match(_DOCTYPE_RE)
        if found is None:
            return None
        return Doctype(
            doctype_id=found.group("type") or None,
            options=found.group("options") or None,
            position=cursor.position(found.start()),
        )


class JadeParser(TemplateParser):
    """Parser for Jade templates.

    Parameters
    ----------
    options : JadeOptions or None, default = None
        Parser configuration

    Examples
    --------
        >>> root = JadeParser().parse("ul#menu\\n  li Home")
        >>> root.children[0].children[0].name
        'li'

    """

    options_class = JadeOptions

    def __init__(self, options: JadeOptions | None = None):
        """Initialize the parser with optional Jade options."""
        super().__init__(JadeDialect(), options)
