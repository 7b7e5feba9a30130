#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/parsers/expressions.py
"""Balanced-delimiter scanners for host-language fragments.

Templates embed code of a host language the parser does not understand. These
scanners find where such a fragment ends by tracking brackets and quoted
strings only; the text itself is never interpreted or rewritten, so a
captured fragment is always a verbatim slice of the source line.

All scanners work on a string and a start index and return an end index (or
None when nothing acceptable starts there). They use an explicit stack of
expected closing brackets, so bracket depth is not limited by the Python
call stack.

"""

from __future__ import annotations

from typing import Optional

from haml2ast.constants import BRACKET_PAIRS, CLOSING_BRACKETS, QUOTE_CHARS


def scan_quoted(text: str, start: int) -> Optional[int]:
    """Scan a single or double quoted string.

    A backslash escapes the character that follows it.

    Parameters
    ----------
    text : str
        Text to scan
    start : int
        Index of the opening quote

    Returns
    -------
    int or None
        Index just past the closing quote, None if the string is unterminated

    """
    quote = text[start]
    i = start + 1
    length = len(text)
    while i < length:
        char = text[i]
        if char == "\\":
            i += 2
            continue
        if char == quote:
            return i + 1
        i += 1
    return None


def scan_expression(text: str, start: int, delimiters: str) -> Optional[int]:
    """Scan a host-language expression.

    The expression is a sequence of plain character runs, quoted strings and
    balanced ``()``, ``{}``, ``[]`` groups. At the top level it stops at any
    of ``delimiters``, at an unmatched closing bracket or at a backslash;
    inside a group, delimiters and spaces are part of the expression. A
    group or string that is not closed on the line ends the expression just
    before it. Trailing spaces are never part of the expression.

    Parameters
    ----------
    text : str
        Text to scan (usually the current line)
    start : int
        Index where the expression starts
    delimiters : str
        Characters that terminate the expression at the top level

    Returns
    -------
    int or None
        Index just past the expression, None if no expression starts at ``start``

    Examples
    --------
        >>> text = 'foo(a, b), bar'
        >>> text[: scan_expression(text, 0, ",")]
        'foo(a, b)'

    """
    stack: list[str] = []
    end = start
    i = start
    length = len(text)

    while i < length:
        char = text[i]

        if char in QUOTE_CHARS:
            close = scan_quoted(text, i)
            if close is None:
                break
            i = close
            if not stack:
                end = i
            continue

        if char in BRACKET_PAIRS:
            stack.append(BRACKET_PAIRS[char])
            i += 1
            continue

        if char in CLOSING_BRACKETS:
            if not stack or char != stack[-1]:
                break
            stack.pop()
            i += 1
            if not stack:
                end = i
            continue

        if char == "\\":
            break

        if not stack:
            if char in delimiters:
                break
            i += 1
            if char != " ":
                end = i
            continue

        i += 1

    # end only moves at the top level, so an unclosed group is dropped here
    if end == start:
        return None
    return end


def scan_interpolation(text: str, start: int) -> Optional[int]:
    """Scan a ``#{...}`` interpolation.

    The expression inside may contain balanced braces and quoted strings;
    it must not be empty.

    Parameters
    ----------
    text : str
        Text to scan
    start : int
        Index of the ``#``

    Returns
    -------
    int or None
        Index of the closing ``}``, None if no complete interpolation starts
        at ``start``

    """
    if not text.startswith("#{", start):
        return None

    depth = 0
    i = start + 2
    length = len(text)
    while i < length:
        char = text[i]
        if char in QUOTE_CHARS:
            close = scan_quoted(text, i)
            if close is None:
                return None
            i = close
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            if depth == 0:
                return i if i > start + 2 else None
            depth -= 1
        i += 1
    return None


def scan_brackets(text: str, start: int) -> Optional[int]:
    """Scan a balanced, non-empty ``[...]`` group such as ``[if IE lte 8]``.

    Parameters
    ----------
    text : str
        Text to scan
    start : int
        Index of the opening ``[``

    Returns
    -------
    int or None
        Index just past the matching ``]``, None if unbalanced or empty

    """
    if start >= len(text) or text[start] != "[":
        return None

    depth = 0
    i = start
    length = len(text)
    while i < length:
        char = text[i]
        if char == "[":
            if i + 1 < length and text[i + 1] == "]":
                return None
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return None
