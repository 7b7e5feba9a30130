#  Copyright (c) 2025 Tom Villani, Ph.D.

# haml2ast/options/jade.py
"""Configuration options for Jade parsing."""

from __future__ import annotations

from dataclasses import dataclass, field

from haml2ast.constants import DEFAULT_JADE_ALLOW_PIPED_TEXT
from haml2ast.options.base import BaseParserOptions


@dataclass(frozen=True)
class JadeOptions(BaseParserOptions):
    """Configuration options for Jade-to-AST parsing.

    Parameters
    ----------
    allow_piped_text : bool, default True
        Whether ``| text`` lines are accepted as literal text statements.

    """

    allow_piped_text: bool = field(
        default=DEFAULT_JADE_ALLOW_PIPED_TEXT,
        metadata={"help": "Accept '| text' lines as literal text", "importance": "core"},
    )
