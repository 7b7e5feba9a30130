#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for haml2ast.

This module centralizes hardcoded values and default configuration constants
used across the parser. Constants are organized by category:

1. Type Definitions - Literal types and type aliases
2. Parser Defaults - Default values for option classes
3. Grammar Constants - Characters with a fixed meaning in the grammars
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

DialectName = Literal["haml", "jade"]

# =============================================================================
# Parser Defaults
# =============================================================================

DEFAULT_DIALECT: DialectName = "haml"
DEFAULT_FILENAME = "<string>"
DEFAULT_START_LINENO = 1

# Maximum number of simultaneously open indentation levels
DEFAULT_MAX_NESTING_DEPTH = 256

# Tag used for ``.class`` / ``#id`` lines without an explicit tag name
DEFAULT_IMPLICIT_TAG_NAME = "div"

DEFAULT_INTERPOLATE_FILTERS = False
DEFAULT_HAML_ALLOW_CONDITIONAL_COMMENTS = True
DEFAULT_JADE_ALLOW_PIPED_TEXT = True

# JavascriptTransform defaults
DEFAULT_JAVASCRIPT_CDATA = False

# =============================================================================
# Grammar Constants
# =============================================================================

INDENT_CHARS = (" ", "\t")

# Trailing marker for multi-line statements
MULTILINE_MARKER = " |"

# Opening bracket -> closing bracket, shared by the expression scanners
BRACKET_PAIRS = {"(": ")", "{": "}", "[": "]"}
CLOSING_BRACKETS = frozenset(BRACKET_PAIRS.values())
QUOTE_CHARS = frozenset("\"'")
