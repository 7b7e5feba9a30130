#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Base classes for parser options.

This module defines the foundation class for all dialect-specific options
used by the haml2ast parsers.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from haml2ast.constants import (
    DEFAULT_IMPLICIT_TAG_NAME,
    DEFAULT_INTERPOLATE_FILTERS,
    DEFAULT_MAX_NESTING_DEPTH,
)


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities.

    This mixin adds the ability to create modified copies of frozen dataclass
    instances, which is useful for immutable configuration objects.
    """

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for all parser options.

    Parameters
    ----------
    max_nesting_depth : int
        Maximum number of indentation levels that may be open at once.
        Deeper documents raise NestingError instead of growing the parent
        stack without bound.
    implicit_tag_name : str, default "div"
        Tag name used when a line starts with ``.class`` or ``#id`` and no
        explicit tag name.
    interpolate_filters : bool, default False
        Parse the lines of filter blocks as interpolated strings instead of
        keeping them as raw text.

    Notes
    -----
    Subclasses should define dialect-specific options as frozen dataclass fields.

    """

    max_nesting_depth: int = field(
        default=DEFAULT_MAX_NESTING_DEPTH,
        metadata={
            "help": "Maximum number of simultaneously open indentation levels",
            "type": int,
            "importance": "security",
        },
    )
    implicit_tag_name: str = field(
        default=DEFAULT_IMPLICIT_TAG_NAME,
        metadata={"help": "Tag name used for bare .class / #id lines", "importance": "core"},
    )
    interpolate_filters: bool = field(
        default=DEFAULT_INTERPOLATE_FILTERS,
        metadata={"help": "Parse #{...} interpolations inside filter blocks", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate field values.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.max_nesting_depth <= 0:
            raise ValueError(f"max_nesting_depth must be positive, got {self.max_nesting_depth}")
        if not self.implicit_tag_name:
            raise ValueError("implicit_tag_name must be a non-empty string")
