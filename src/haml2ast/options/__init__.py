#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Option classes for the haml2ast parsers."""

from haml2ast.options.base import BaseParserOptions, CloneFrozenMixin
from haml2ast.options.haml import HamlOptions
from haml2ast.options.jade import JadeOptions

__all__ = ["BaseParserOptions", "CloneFrozenMixin", "HamlOptions", "JadeOptions"]
