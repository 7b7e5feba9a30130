#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/parsers/indentation.py
"""Indentation state machine.

The first indented line of a document establishes the indent unit: a single
whitespace character (space or tab) and a width. Every later indented line
must use the same character and a multiple of the same width, and may be at
most one level deeper than the line before it.

"""

from __future__ import annotations

import logging
from typing import Optional

from haml2ast.constants import INDENT_CHARS
from haml2ast.exceptions import IndentError
from haml2ast.parsers.cursor import LineCursor

logger = logging.getLogger(__name__)


def _describe(char: str) -> str:
    return "spaces" if char == " " else "tabs"


class IndentTracker:
    """Validate indentation prefixes and compute indentation levels.

    Attributes
    ----------
    indent_char : str or None
        Established indent character, None until the first indented line
    indent_width : int or None
        Number of characters per level, None until established
    level : int
        Level of the line most recently checked
    prev_level : int
        Level of the line checked before it

    """

    def __init__(self) -> None:
        """Start with no established indent unit at level 0."""
        self.indent_char: Optional[str] = None
        self.indent_width: Optional[int] = None
        self.level = 0
        self.prev_level = 0

    def check_indent(self, indent: str, cursor: LineCursor, at_document_start: bool) -> int:
        """Validate the indentation prefix of the current line.

        Parameters
        ----------
        indent : str
            Leading whitespace of the line
        cursor : LineCursor
            Cursor positioned on the line, used for diagnostics
        at_document_start : bool
            True while no statement has been inserted into the tree yet

        Returns
        -------
        int
            The line's indentation level

        Raises
        ------
        IndentError
            If the prefix is illegal or inconsistent with the document

        """
        self.prev_level = self.level

        if not indent:
            self.level = 0
            return self.level

        if at_document_start:
            raise cursor.syntax_error("Indenting at the beginning of the document is illegal", IndentError)

        chars = set(indent)
        if len(chars) != 1:
            raise cursor.syntax_error("Indentation can't use both tabs and spaces", IndentError)
        char = indent[0]

        if self.indent_char is None or self.indent_width is None:
            self.indent_char = char
            self.indent_width = len(indent)
            self.level = 1
            logger.debug(f"Indent unit established: {self.indent_width} {_describe(char)}")
            return self.level

        if char != self.indent_char:
            raise cursor.syntax_error(
                f"Inconsistent indentation: {_describe(char)} were used for indentation, "
                f"but the rest of the document was indented using {_describe(self.indent_char)}",
                IndentError,
            )

        if len(indent) % self.indent_width != 0:
            raise cursor.syntax_error(
                f"Inconsistent indentation: {len(indent)} is not a multiple of {self.indent_width}",
                IndentError,
            )

        level = len(indent) // self.indent_width
        if level > self.level + 1:
            raise cursor.syntax_error(
                "The line was indented more than one level deeper than the previous line", IndentError
            )

        self.level = level
        return self.level

    def indent_string(self, level_offset: int = 0, fallback: Optional[str] = None) -> str:
        """Return the indentation expected ``level_offset`` levels below the current one.

        Parameters
        ----------
        level_offset : int, default 0
            Levels to add to the current level
        fallback : str or None, default None
            Used while no indent unit is established: its first character is
            returned when it is a space or a tab

        Returns
        -------
        str
            Zero or more copies of the indent character

        """
        if self.indent_char is not None and self.indent_width is not None:
            return self.indent_char * (self.indent_width * (self.level + level_offset))

        if fallback and fallback[0] in INDENT_CHARS:
            return fallback[0]
        return ""
