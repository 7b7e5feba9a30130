#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/parsers/haml.py
"""Haml dialect.

Haml tags start with ``%name`` (or an implicit ``div`` introduced by
``.class`` / ``#id``), may carry ``<``, ``>`` and ``/`` modifier flags and
accept inline content after the attributes. Comments are ``/ rendered`` (with
an optional ``[if IE]`` guard) or ``-# silent``; doctypes use ``!!!``.

"""

from __future__ import annotations

import logging
import re
from typing import Optional, cast

from haml2ast.ast.nodes import Comment, Doctype, Node, Tag, TagFlag, Text
from haml2ast.exceptions import NestingError
from haml2ast.options.haml import HamlOptions
from haml2ast.parsers.base import Dialect, TemplateParser
from haml2ast.parsers.cursor import LineCursor
from haml2ast.parsers.expressions import scan_brackets

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(
    r"""
    %(?P<tag_name>[\w:-]+)  # explicit tag name
    | (?=[.#][\w-])         # implicit tag followed by a class or id
    """,
    re.VERBOSE,
)
_COMMENT_RE = re.compile(r"(?P<marker>-\#|/)\s*")
_DOCTYPE_RE = re.compile(
    r"""
    !!!
    (?:
        \s(?P<type>\S+)         # doctype id
        (?:\s(?P<options>.*))?  # options such as the xml encoding
    )?$
    """,
    re.VERBOSE,
)

_TAG_FLAGS = {
    "<": TagFlag.REMOVE_INNER_WHITESPACE,
    ">": TagFlag.REMOVE_OUTER_WHITESPACE,
    "/": TagFlag.SELF_CLOSE,
}


class HamlDialect(Dialect):
    """Tag, comment and doctype productions of Haml."""

    name = "haml"
    options_class = HamlOptions

    def parse_tag(self, parser: TemplateParser, cursor: LineCursor) -> Optional[Node]:
        """Parse ``%name``, ``.class`` or ``#id`` with attributes, flags and inline content.

        Raises
        ------
        NestingError
            If a self-closing tag is given inline content

        """
        found = cursor.match(_TAG_RE)
        if found is None:
            return None

        name = found.group("tag_name") or parser.options.implicit_tag_name
        attributes = parser.parse_tag_attributes(cursor)
        flags = self._parse_tag_flags(cursor)
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

    @staticmethod
    def _parse_tag_flags(cursor: LineCursor) -> TagFlag:
        flags = TagFlag.NONE
        while (flag := _TAG_FLAGS.get(cursor.peek_char() or "")) is not None:
            flags |= flag
            cursor.eat_char()
        return flags

    def parse_comment(self, parser: TemplateParser, cursor: LineCursor) -> Optional[Node]:
        """Parse ``/ text``, ``/[if IE]`` or ``-# text`` with its silent block."""
        found = cursor.match(_COMMENT_RE)
        if found is None:
            return None

        rendered = found.group("marker") == "/"
        condition = None
        options = cast(HamlOptions, parser.options)
        if rendered and options.allow_conditional_comments:
            end = scan_brackets(cursor.line, cursor.index)
            if end is not None and end == len(cursor.line):
                condition = cursor.line[cursor.index : end]
                cursor.advance_to(end)

        node = Comment(rendered=rendered, condition=condition, position=cursor.position(found.start()))

        text = cursor.rest.strip()
        if text:
            node.content = Text(content=text, position=cursor.position())
        cursor.eat_rest()

        if not rendered:
            node.children.extend(parser.parse_raw_lines(cursor))
            logger.debug(f"Silent comment swallowed {len(node.children)} lines")

        return node

    def parse_doctype(self, parser: TemplateParser, cursor: LineCursor) -> Optional[Node]:
        """Parse ``!!!``, ``!!! 5`` or ``!!! XML utf-8``."""
        found = cursor.match(_DOCTYPE_RE)
        if found is None:
            return None
        return Doctype(
            doctype_id=found.group("type") or None,
            options=found.group("options") or None,
            position=cursor.position(found.start()),
        )


class HamlParser(TemplateParser):
    """Parser for Haml templates.

    Parameters
    ----------
    options : HamlOptions or None, default = None
        Parser configuration

    Examples
    --------
        >>> root = HamlParser().parse("%p= user.name")
        >>> root.children[0].content.content
        'user.name'

    """

    options_class = HamlOptions

    def __init__(self, options: HamlOptions | None = None):
        """Initialize the parser with optional Haml options."""
        super().__init__(HamlDialect(), options)
