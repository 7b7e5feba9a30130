#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Dialect registry.

Maps dialect names (``"haml"``, ``"jade"``) to preset parser classes. Third
party packages can contribute dialects through the ``haml2ast.dialects``
entry point group; each entry point must load a ``TemplateParser`` subclass
whose constructor accepts an ``options`` argument.
"""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Dict, List, Optional

from haml2ast.exceptions import DialectError
from haml2ast.options.base import BaseParserOptions
from haml2ast.parsers.base import TemplateParser
from haml2ast.parsers.haml import HamlParser
from haml2ast.parsers.jade import JadeParser

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "haml2ast.dialects"


def _sanitize_for_log(value: str) -> str:
    """Sanitize a string for safe logging to prevent log injection.

    Parameters
    ----------
    value : str
        The string to sanitize

    Returns
    -------
    str
        Sanitized string safe for logging

    """
    return value.replace("\n", "\\n").replace("\r", "\\r")


class DialectRegistry:
    """Registry of template parsers keyed by dialect name.

    The registry is a singleton; built-in dialects are registered on first
    use and plugins are discovered once.

    Attributes
    ----------
    _instance : DialectRegistry or None
        Singleton instance of the registry
    _parsers : dict
        Parser classes by dialect name
    _initialized : bool
        Whether built-ins and plugins have been registered

    """

    _instance: Optional[DialectRegistry] = None
    _parsers: Dict[str, type[TemplateParser]] = {}
    _initialized: bool = False

    def __new__(cls) -> DialectRegistry:
        """Create or return singleton instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._parsers = {}
            cls._instance._initialized = False
        return cls._instance

    def register(self, name: str, parser_class: type[TemplateParser]) -> None:
        """Register a parser class for a dialect, replacing any previous one.

        Parameters
        ----------
        name : str
            Dialect name used by :func:`haml2ast.parse`
        parser_class : type
            TemplateParser subclass constructed as ``parser_class(options)``

        Raises
        ------
        TypeError
            If ``parser_class`` is not a TemplateParser subclass

        """
        if not (isinstance(parser_class, type) and issubclass(parser_class, TemplateParser)):
            raise TypeError(f"Parser for dialect '{name}' must be a TemplateParser subclass, got {parser_class!r}")

        if name in self._parsers:
            logger.debug(f"Replacing parser for dialect '{name}'")
        else:
            logger.debug(f"Registered dialect: {name}")
        self._parsers[name] = parser_class

    def unregister(self, name: str) -> bool:
        """Unregister a dialect.

        Returns
        -------
        bool
            True if unregistered, False if not found

        """
        if name in self._parsers:
            del self._parsers[name]
            logger.debug(f"Unregistered dialect: {name}")
            return True
        return False

    def list_dialects(self) -> List[str]:
        """Return the registered dialect names, sorted."""
        self._ensure_initialized()
        return sorted(self._parsers)

    def get_parser_class(self, name: str) -> type[TemplateParser]:
        """Return the parser class registered for ``name``.

        Raises
        ------
        DialectError
            If no parser is registered under ``name``

        """
        self._ensure_initialized()
        try:
            return self._parsers[name]
        except KeyError:
            raise DialectError(_sanitize_for_log(name), available=list(self._parsers)) from None

    def create_parser(self, name: str, options: BaseParserOptions | None = None) -> TemplateParser:
        """Instantiate the parser for ``name`` with ``options``.

        Parameters
        ----------
        name : str
            Dialect name
        options : BaseParserOptions or None, default = None
            Options for the dialect; must match its options class

        Returns
        -------
        TemplateParser
            A fresh parser

        Raises
        ------
        DialectError
            If the dialect is unknown
        InvalidOptionsError
            If ``options`` belong to another dialect

        """
        parser_class = self.get_parser_class(name)
        logger.debug(f"Creating {parser_class.__name__} for dialect '{name}'")
        return parser_class(options)  # type: ignore[call-arg]

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        self._initialized = True
        self._parsers.setdefault("haml", HamlParser)
        self._parsers.setdefault("jade", JadeParser)
        self._discover_plugins()

    def _discover_plugins(self) -> None:
        """Register parser classes advertised through entry points."""
        try:
            entry_points = importlib.metadata.entry_points(group=ENTRY_POINT_GROUP)
        except Exception as e:
            logger.debug(f"No plugins found or error discovering plugins: {e}")
            return

        for entry_point in entry_points:
            dist_name = entry_point.dist.name if entry_point.dist else "unknown"
            try:
                parser_class = entry_point.load()
                self.register(entry_point.name, parser_class)
            except Exception as e:
                logger.warning(f"Failed to load dialect plugin '{entry_point.name}' from '{dist_name}': {e}")
                continue
            logger.info(f"Registered plugin dialect: {entry_point.name} from package '{dist_name}'")


# Global registry instance
registry = DialectRegistry()
