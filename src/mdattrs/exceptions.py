#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the mdattrs library.

Malformed attribute markup is never an error: it degrades to literal text.
The exceptions below cover caller contract violations (a tree that does not
follow the node protocol, options with impossible values) and failures of
the markdown reader or writer themselves.

Exception Hierarchy
-------------------
- MdAttrsError (base exception)

  - ValidationError (node protocol and parameter validation)
    - InvalidOptionsError (bad option values or wrong options class)

  - ParsingError (markdown reader failures)

  - RenderingError (markdown writer failures)

"""

from typing import Any


class MdAttrsError(Exception):
    """Base exception class for all mdattrs-specific errors.

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


class ValidationError(MdAttrsError):
    """Exception raised for input that violates a caller contract.

    This covers trees that break the node protocol (``children`` that is
    not a list, unknown node types in serialized input, malformed
    positions) as well as invalid parameter values.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter or field
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
    """Exception raised for an unusable options object.

    Raised either when an option field carries an impossible value or when
    a parser/renderer receives an options object of the wrong class.

    Parameters
    ----------
    message : str
        Description of the problem
    parameter_name : str, optional
        Name of the offending option field
    parameter_value : any, optional
        The offending value
    original_error : Exception, optional
        The original exception that caused this error

    """


class ParsingError(MdAttrsError):
    """Exception raised when the markdown reader fails.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the parsing failure

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class RenderingError(MdAttrsError):
    """Exception raised when markdown output rendering fails.

    Parameters
    ----------
    message : str
        Description of the rendering failure
    rendering_stage : str, optional
        The stage of rendering where the error occurred
    original_error : Exception, optional
        The underlying exception that caused the rendering failure

    """

    def __init__(self, message: str, rendering_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the rendering error."""
        super().__init__(message, original_error)
        self.rendering_stage = rendering_stage
