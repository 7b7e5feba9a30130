#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the haml2ast library.

This module defines specialized exception classes for the error conditions
that can occur while configuring a parser and while parsing a template.

Exception Hierarchy
-------------------
- Haml2AstError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for parser)

  - DialectError (unknown template dialect)

  - FilterError (unknown or failing content transform)

  - TemplateSyntaxError (positioned parse failure)
    - IndentError (illegal or inconsistent indentation)
    - NestingError (illegal parent/child relationship)

"""

from __future__ import annotations

from typing import Any


class Haml2AstError(Exception):
    """Base exception class for all haml2ast-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(Haml2AstError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an incorrect options class is given to a parser.

    Parameters
    ----------
    parser_name : str
        Name of the parser that received invalid options
    expected_type : type
        The expected options class type
    received_type : type
        The actual options class type that was received
    message : str, optional
        Custom error message. If not provided, a helpful message is generated

    """

    def __init__(
        self,
        parser_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{parser_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(message, parameter_name="options", parameter_value=received_type)
        self.parser_name = parser_name
        self.expected_type = expected_type
        self.received_type = received_type


class DialectError(Haml2AstError):
    """Exception raised when a template dialect is unknown.

    Parameters
    ----------
    dialect : str
        The dialect name that was requested
    available : list of str, optional
        Registered dialect names, listed in the message

    """

    def __init__(self, dialect: str, available: list[str] | None = None):
        """Initialize the dialect error."""
        message = f"Unknown template dialect: '{dialect}'"
        if available:
            message += f" (available: {', '.join(sorted(available))})"
        super().__init__(message)
        self.dialect = dialect
        self.available = available or []


class FilterError(Haml2AstError):
    """Exception raised when a filter block cannot be transformed.

    Parameters
    ----------
    message : str
        Description of the failure
    filter_name : str, optional
        Name of the filter (``:name``) involved
    original_error : Exception, optional
        The exception raised by the content transform, if any

    """

    def __init__(self, message: str, filter_name: str | None = None, original_error: Exception | None = None):
        """Initialize the filter error."""
        super().__init__(message, original_error=original_error)
        self.filter_name = filter_name


class TemplateSyntaxError(Haml2AstError):
    """Exception raised when a template cannot be parsed.

    Every parse failure carries the same positional envelope so callers can
    point at the offending source location regardless of the error kind.

    Parameters
    ----------
    message : str
        Human-readable description of the problem
    filename : str
        Name of the template being parsed
    line : int
        Line number (1-based, offset by the parse call's start line)
    column : int
        Column number (1-based)

    Attributes
    ----------
    filename : str
        Template name
    line : int
        Line number of the failure
    column : int
        Column of the failure

    """

    def __init__(self, message: str, filename: str, line: int, column: int):
        """Initialize the syntax error with its source location."""
        super().__init__(message)
        self.filename = filename
        self.line = line
        self.column = column

    def __str__(self) -> str:
        """Format the message together with its location."""
        return f"{self.message} in {self.filename} on line {self.line}, column {self.column}"


class IndentError(TemplateSyntaxError):
    """Exception raised for illegal or inconsistent indentation.

    Covers mixed tabs and spaces, widths that are not a multiple of the
    established indent unit, jumps of more than one level and indentation
    of the very first statement.
    """


class NestingError(TemplateSyntaxError):
    """Exception raised for an illegal parent/child relationship.

    Covers nesting below nodes that cannot hold children, below nodes that
    already carry inline content and below self-closing tags.
    """
