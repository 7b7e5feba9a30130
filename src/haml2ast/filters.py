#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/haml2ast/filters.py
"""Content transforms for filter blocks.

The parser stores the lines of a ``:name`` filter block in a Filter node and
never interprets them. A :class:`ContentTransform` turns that text into
output; a :class:`TransformRegistry` maps filter names to transforms.

Examples
--------
Apply the default transforms to a parsed filter:

    >>> from haml2ast import parse
    >>> from haml2ast.filters import transforms
    >>> root = parse("%head\\n  :javascript\\n    alert(1);")
    >>> print(transforms.apply(root.children[0].children[0]))
    <script type="text/javascript">
    alert(1);
    </script>

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional

from haml2ast.ast.nodes import Filter, Insert, InterpolatedString, Node, Text, unwrap_statement
from haml2ast.constants import DEFAULT_JAVASCRIPT_CDATA
from haml2ast.exceptions import FilterError

logger = logging.getLogger(__name__)


def _line_text(node: Node) -> str:
    if isinstance(node, Text):
        return node.content
    if isinstance(node, Insert):
        return "#{" + node.content + "}"
    if isinstance(node, InterpolatedString):
        return "".join(_line_text(part) for part in node.children)
    raise TypeError(f"Unexpected node in filter block: {type(node).__name__}")


def get_filter_content(node: Filter) -> str:
    """Return the text of a filter block, one source line per line.

    Interpolations (present when filters are parsed with
    ``interpolate_filters=True``) are written back as ``#{...}``.

    Parameters
    ----------
    node : Filter
        The filter node

    Returns
    -------
    str
        Lines joined with ``\\n``, without a trailing newline

    """
    return "\n".join(_line_text(unwrap_statement(child)) for child in node.children)


class ContentTransform(ABC):
    """Turn the text of a filter block into output."""

    @abstractmethod
    def transform(self, content: str, options: Optional[Mapping[str, Any]] = None) -> str:
        """Transform filter content.

        Parameters
        ----------
        content : str
            Text of the filter block
        options : Mapping, optional
            Per-call settings understood by the transform

        Returns
        -------
        str
            Transformed text

        """
        pass


class PlainTransform(ContentTransform):
    """Return the content unchanged."""

    def transform(self, content: str, options: Optional[Mapping[str, Any]] = None) -> str:
        """Return ``content``."""
        return content


class JavascriptTransform(ContentTransform):
    """Wrap the content in a ``<script>`` element.

    Parameters
    ----------
    cdata : bool, default False
        Also wrap the content in a commented ``CDATA`` section; a ``cdata``
        key in the per-call options takes precedence

    """

    def __init__(self, cdata: bool = DEFAULT_JAVASCRIPT_CDATA):
        """Initialize the transform."""
        self.cdata = cdata

    def transform(self, content: str, options: Optional[Mapping[str, Any]] = None) -> str:
        """Return ``content`` inside ``<script type="text/javascript">``."""
        cdata = bool((options or {}).get("cdata", self.cdata))

        lines = ['<script type="text/javascript">']
        if cdata:
            lines.append("//<![CDATA[")
        if content:
            lines.append(content)
        if cdata:
            lines.append("//]]>")
        lines.append("</script>")
        return "\n".join(lines)


class TransformRegistry:
    """Map filter names to content transforms.

    Examples
    --------
        >>> registry = TransformRegistry()
        >>> registry.register("plain", PlainTransform())
        >>> registry.get("plain").transform("x")
        'x'

    """

    def __init__(self) -> None:
        """Start with no registered transforms."""
        self._transforms: dict[str, ContentTransform] = {}

    def register(self, name: str, transform: ContentTransform) -> None:
        """Register ``transform`` for filters named ``name``, replacing any previous one."""
        if not isinstance(transform, ContentTransform):
            raise TypeError(f"Transform for filter '{name}' must be a ContentTransform, got {transform!r}")
        self._transforms[name] = transform
        logger.debug(f"Registered filter transform: {name}")

    def unregister(self, name: str) -> bool:
        """Remove the transform for ``name``; return whether it was registered."""
        return self._transforms.pop(name, None) is not None

    def has_transform(self, name: str) -> bool:
        """Return whether a transform is registered for ``name``."""
        return name in self._transforms

    def list_transforms(self) -> list[str]:
        """Return the registered filter names, sorted."""
        return sorted(self._transforms)

    def get(self, name: str) -> ContentTransform:
        """Return the transform for ``name``.

        Raises
        ------
        FilterError
            If no transform is registered for ``name``

        """
        try:
            return self._transforms[name]
        except KeyError:
            raise FilterError(f"Unknown filter: '{name}'", filter_name=name) from None

    def apply(self, node: Filter, options: Optional[Mapping[str, Any]] = None) -> str:
        """Transform the content of a Filter node with the transform for its name.

        Raises
        ------
        FilterError
            If the filter is unknown or its transform fails

        """
        transform = self.get(node.name)
        content = get_filter_content(node)
        try:
            return transform.transform(content, options)
        except FilterError:
            raise
        except Exception as e:
            raise FilterError(
                f"Filter '{node.name}' failed: {e!r}", filter_name=node.name, original_error=e
            ) from e


def _default_transforms() -> TransformRegistry:
    registry = TransformRegistry()
    registry.register("plain", PlainTransform())
    registry.register("javascript", JavascriptTransform())
    return registry


# Transforms for the built-in filter names
transforms = _default_transforms()
