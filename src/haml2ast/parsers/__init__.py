#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/parsers/__init__.py
"""Template parsers.

The shared engine lives in :mod:`haml2ast.parsers.base`; each dialect module
provides a :class:`~haml2ast.parsers.base.Dialect` and a preset parser.
"""

from haml2ast.parsers.base import Dialect, SpeculativeResult, TemplateParser
from haml2ast.parsers.cursor import LineCursor
from haml2ast.parsers.haml import HamlDialect, HamlParser
from haml2ast.parsers.indentation import IndentTracker
from haml2ast.parsers.jade import JadeDialect, JadeParser
from haml2ast.parsers.tree import TreeBuilder

__all__ = [
    "Dialect",
    "SpeculativeResult",
    "TemplateParser",
    "LineCursor",
    "IndentTracker",
    "TreeBuilder",
    "HamlDialect",
    "HamlParser",
    "JadeDialect",
    "JadeParser",
]
