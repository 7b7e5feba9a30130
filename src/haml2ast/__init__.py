"""haml2ast - A parser for indentation-sensitive template languages.

haml2ast turns Haml and Jade templates into a typed abstract syntax tree of
tags, attributes, text, comments, doctypes, filter blocks and opaque
host-language expressions. Host code is never evaluated: expressions are
captured verbatim after checking that their brackets and quotes balance.

Supported Dialects
------------------
- **haml**: ``%tag.class#id{attrs}``, ``/`` and ``-#`` comments, ``!!!`` doctypes
- **jade**: ``tag.class#id(attrs)``, ``//`` and ``//-`` comments, ``doctype``,
  ``| piped text``

Requirements
------------
- Python 3.10+

Examples
--------
Parse a template and inspect the tree:

    >>> from haml2ast import parse
    >>> root = parse("%ul#menu\\n  %li.item= item.title", filename="menu.haml")
    >>> root.children[0].children[0].content.content
    'item.title'

Serialize the tree:

    >>> from haml2ast.ast import ast_to_json
    >>> json_str = ast_to_json(root, indent=2)

See Also
--------
haml2ast.ast : AST node definitions, visitors and serialization
haml2ast.filters : Content transforms for filter blocks

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "haml2ast requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from haml2ast import ast, filters
from haml2ast.api import parse
from haml2ast.exceptions import (
    DialectError,
    FilterError,
    Haml2AstError,
    IndentError,
    InvalidOptionsError,
    NestingError,
    TemplateSyntaxError,
    ValidationError,
)
from haml2ast.options import BaseParserOptions, HamlOptions, JadeOptions
from haml2ast.parsers import HamlParser, JadeParser, TemplateParser
from haml2ast.registry import registry

__all__ = [
    "__version__",
    "parse",
    # Parsers
    "TemplateParser",
    "HamlParser",
    "JadeParser",
    # Registry system
    "registry",
    # Options
    "BaseParserOptions",
    "HamlOptions",
    "JadeOptions",
    # Exceptions
    "Haml2AstError",
    "ValidationError",
    "InvalidOptionsError",
    "DialectError",
    "FilterError",
    "TemplateSyntaxError",
    "IndentError",
    "NestingError",
    # Submodules
    "ast",
    "filters",
]
