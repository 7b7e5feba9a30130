#  Copyright (c) 2025 Tom Villani, Ph.D.

# haml2ast/options/haml.py
"""Configuration options for Haml parsing."""

from __future__ import annotations

from dataclasses import dataclass, field

from haml2ast.constants import DEFAULT_HAML_ALLOW_CONDITIONAL_COMMENTS
from haml2ast.options.base import BaseParserOptions


@dataclass(frozen=True)
class HamlOptions(BaseParserOptions):
    """Configuration options for Haml-to-AST parsing.

    Parameters
    ----------
    allow_conditional_comments : bool, default True
        Whether ``/[if IE]`` guards on rendered comments are recognized.
        When False the bracketed text stays part of the comment text.

    """

    allow_conditional_comments: bool = field(
        default=DEFAULT_HAML_ALLOW_CONDITIONAL_COMMENTS,
        metadata={
            "help": "Recognize IE conditional guards on rendered comments",
            "cli_name": "no-conditional-comments",
            "importance": "core",
        },
    )
