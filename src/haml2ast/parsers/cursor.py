#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/parsers/cursor.py
"""Line-oriented cursor over template source text.

The cursor exposes the source one line at a time together with a column
inside the current line. All matching is anchored at the current column and
every successful match moves the column past the matched text; a failed
match leaves the position untouched. The cursor knows nothing about the
template grammar.

"""

from __future__ import annotations

import copy
import re
from typing import Optional, TypeVar

from haml2ast.ast.nodes import SourcePosition
from haml2ast.constants import DEFAULT_FILENAME, DEFAULT_START_LINENO
from haml2ast.exceptions import TemplateSyntaxError

_WS_RE = re.compile(r"[ \t]*")

ErrorT = TypeVar("ErrorT", bound=TemplateSyntaxError)


class LineCursor:
    """Position-aware reader over the lines of a template.

    The cursor starts *before* the first line; call :meth:`next_line` to move
    onto it.

    Parameters
    ----------
    source : str
        Template source text
    filename : str, default "<string>"
        Name reported in diagnostics
    lineno : int, default 1
        Line number of the first source line

    Examples
    --------
        >>> cursor = LineCursor("%p hello")
        >>> cursor.next_line()
        True
        >>> cursor.match(re.compile(r"%(\\w+)")).group(1)
        'p'
        >>> cursor.rest
        ' hello'

    """

    def __init__(self, source: str, filename: str = DEFAULT_FILENAME, lineno: int = DEFAULT_START_LINENO):
        """Split the source into lines and record their offsets."""
        self.filename = filename
        self._first_lineno = lineno

        self._lines: list[str] = []
        self._offsets: list[int] = []
        offset = 0
        for raw in source.splitlines(keepends=True):
            line = raw.rstrip("\r\n")
            self._lines.append(line)
            self._offsets.append(offset)
            offset += len(raw)

        self._index = -1
        # Line that positions are reported against; differs from _index after a join
        self._anchor = -1
        self._line = ""
        self._column = 0

    # ------------------------------------------------------------------
    # Line access
    # ------------------------------------------------------------------

    @property
    def line(self) -> str:
        """The full current line (after any replacement)."""
        return self._line

    @property
    def rest(self) -> str:
        """The unconsumed remainder of the current line."""
        return self._line[self._column :]

    def next_line(self) -> bool:
        """Advance to the next line.

        Returns
        -------
        bool
            False when the end of the input has been reached

        """
        if self._index + 1 >= len(self._lines):
            self._index = len(self._lines)
            self._anchor = self._index
            self._line = ""
            self._column = 0
            return False

        self._index += 1
        self._anchor = self._index
        self._line = self._lines[self._index]
        self._column = 0
        return True

    def peek_line(self) -> Optional[str]:
        """Return the next line without advancing, or None at end of input."""
        if self._index + 1 < len(self._lines):
            return self._lines[self._index + 1]
        return None

    def replace_line(self, text: str, anchor: Optional[int] = None) -> None:
        """Replace the current line (used after joining multi-line statements).

        The column is reset to the start of the new line.

        Parameters
        ----------
        text : str
            Replacement text
        anchor : int or None, default None
            :attr:`line_index` of the source line that positions and errors
            are reported against; the current line when None

        """
        self._line = text
        self._column = 0
        self._anchor = self._index if anchor is None else anchor

    # ------------------------------------------------------------------
    # Character-level access
    # ------------------------------------------------------------------

    def match(self, pattern: re.Pattern[str]) -> Optional[re.Match[str]]:
        """Match ``pattern`` at the current column.

        Group spans of the returned match are columns (0-based) of the
        current line; :meth:`position` converts them for diagnostics.

        Parameters
        ----------
        pattern : re.Pattern
            Compiled pattern; it is anchored at the current column

        Returns
        -------
        re.Match or None
            The match, after which the column points past it, or None

        """
        found = pattern.match(self._line, self._column)
        if found is not None:
            self._column = found.end()
        return found

    def peek_char(self) -> Optional[str]:
        """Return the character at the column, or None at end of line."""
        if self._column < len(self._line):
            return self._line[self._column]
        return None

    def eat_char(self) -> None:
        """Consume one character."""
        self.eat_chars(1)

    def eat_chars(self, count: int) -> None:
        """Consume ``count`` characters (clamped to the end of the line)."""
        self._column = min(self._column + count, len(self._line))

    def eat_rest(self) -> str:
        """Consume and return the remainder of the line."""
        rest = self.rest
        self._column = len(self._line)
        return rest

    def advance_to(self, index: int) -> None:
        """Move the column forward to ``index`` (a 0-based column)."""
        if index < self._column:
            raise ValueError(f"Cannot move cursor backwards from {self._column} to {index}")
        self._column = min(index, len(self._line))

    def skip_ws(self) -> None:
        """Consume spaces and tabs."""
        self.match(_WS_RE)

    def is_eol(self) -> bool:
        """Return whether the column is at the end of the current line."""
        return self._column >= len(self._line)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    @property
    def index(self) -> int:
        """The 0-based column inside the current line."""
        return self._column

    @property
    def line_index(self) -> int:
        """The 0-based index of the current source line."""
        return self._index

    @property
    def lineno(self) -> int:
        """The current line number, shifted by the start line."""
        return self._first_lineno + max(self._anchor, 0)

    @property
    def column(self) -> int:
        """The current column (1-based)."""
        return self._column + 1

    @property
    def offset(self) -> int:
        """Character offset of the column from the start of the source."""
        return self._line_offset() + self._column

    def _line_offset(self) -> int:
        if 0 <= self._anchor < len(self._offsets):
            return self._offsets[self._anchor]
        if self._offsets:
            return self._offsets[-1] + len(self._lines[-1])
        return 0

    def position(self, index: Optional[int] = None) -> SourcePosition:
        """Return the source position of a column of the current line.

        Parameters
        ----------
        index : int or None, default None
            0-based column (e.g. ``match.start()``); the current column when None

        Returns
        -------
        SourcePosition
            Line, 1-based column and document offset

        """
        column = self._column if index is None else index
        return SourcePosition(line=self.lineno, column=column + 1, offset=self._line_offset() + column)

    def clone(self) -> LineCursor:
        """Return an independent copy sharing the (immutable) source lines."""
        return copy.copy(self)

    def syntax_error(self, message: str, error_cls: type[ErrorT] = TemplateSyntaxError) -> ErrorT:  # type: ignore[assignment]
        """Build a positioned error for the current location.

        Parameters
        ----------
        message : str
            Error description
        error_cls : type, default TemplateSyntaxError
            TemplateSyntaxError or one of its subclasses

        Returns
        -------
        TemplateSyntaxError
            The error, ready to be raised by the caller

        """
        return error_cls(message, filename=self.filename, line=self.lineno, column=self.column)
