"""The exported API function for template parsing."""

#  Copyright (c) 2025 Tom Villani, Ph.D.
# src/haml2ast/api.py
import logging
from dataclasses import fields
from typing import Any, Optional

from haml2ast.ast.nodes import Root
from haml2ast.constants import DEFAULT_DIALECT, DEFAULT_FILENAME, DEFAULT_START_LINENO
from haml2ast.options.base import BaseParserOptions
from haml2ast.registry import registry

logger = logging.getLogger(__name__)


def _create_options_from_kwargs(options_class: type[BaseParserOptions], **kwargs: Any) -> BaseParserOptions:
    """Create dialect options from keyword arguments, skipping unknown names.

    Parameters
    ----------
    options_class : type[BaseParserOptions]
        The options class to instantiate
    **kwargs
        Keyword arguments to use for options creation

    Returns
    -------
    BaseParserOptions
        Options instance

    """
    option_names = [field.name for field in fields(options_class)]
    valid_kwargs = {k: v for k, v in kwargs.items() if k in option_names}
    missing = [k for k in kwargs if k not in valid_kwargs]
    if missing:
        logger.debug(f"Skipping unknown parser options: {missing}")
    return options_class(**valid_kwargs)


def parse(
    source: str,
    filename: str = DEFAULT_FILENAME,
    lineno: int = DEFAULT_START_LINENO,
    dialect: str = DEFAULT_DIALECT,
    options: Optional[BaseParserOptions] = None,
    **kwargs: Any,
) -> Root:
    """Parse a template into an AST.

    Parameters
    ----------
    source : str
        Template source text
    filename : str, default "<string>"
        Name reported in error messages
    lineno : int, default 1
        Line number of the first source line
    dialect : str, default "haml"
        Registered dialect name ("haml" or "jade" unless plugins add more)
    options : BaseParserOptions, optional
        Pre-configured options for the dialect (e.g. HamlOptions, JadeOptions)
    kwargs : Any
        Individual options that override settings in ``options``

    Returns
    -------
    Root
        Root node whose children are the top-level statements

    Raises
    ------
    DialectError
        If the dialect is not registered
    InvalidOptionsError
        If ``options`` belong to another dialect
    TemplateSyntaxError
        If the template is malformed (IndentError and NestingError are
        subclasses)

    Examples
    --------
    Parse a Haml template:
        >>> from haml2ast import parse
        >>> root = parse("%ul#menu\\n  %li.item= item.title", filename="menu.haml")
        >>> root.children[0].name
        'ul'

    Parse Jade with a custom implicit tag:
        >>> root = parse(".note Hi", dialect="jade", implicit_tag_name="span")
        >>> root.children[0].name
        'span'

    """
    parser_class = registry.get_parser_class(dialect)

    final_options: BaseParserOptions | None
    if kwargs and options:
        final_options = options.create_updated(**kwargs)
    elif kwargs:
        final_options = _create_options_from_kwargs(parser_class.options_class, **kwargs)
    else:
        final_options = options

    parser = registry.create_parser(dialect, final_options)
    return parser.parse(source, filename=filename, lineno=lineno)
