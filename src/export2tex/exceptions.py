#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the export2tex library.

The compile core never raises for malformed or oversized document input;
every anomaly there is absorbed and reported as an advisory diagnostic.
These exceptions cover the layers around it: loading trees and settings,
validating options and writing output.

Exception Hierarchy
-------------------
- Export2TexError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong settings class for a renderer)

  - ParsingError (malformed serialized AST or mdast input)

  - ConfigurationError (unreadable or invalid settings files)

  - OutputWriteError (output file write failures)

"""

from __future__ import annotations

from typing import Any


class Export2TexError(Exception):
    """Base exception class for all export2tex-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(Export2TexError):
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
    """Exception raised when a renderer receives the wrong settings class.

    Parameters
    ----------
    renderer_name : str
        Name of the renderer that received invalid settings
    expected_type : type
        The expected settings class
    received_type : type
        The settings class that was received
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        renderer_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize with renderer name and expected/received settings types."""
        if message is None:
            message = (
                f"Invalid options type for '{renderer_name}' renderer. "
                f"Expected {expected_type.__name__}, but received {received_type.__name__}."
            )
        super().__init__(
            message,
            parameter_name="options",
            parameter_value=received_type,
            original_error=original_error,
        )
        self.renderer_name = renderer_name
        self.expected_type = expected_type
        self.received_type = received_type


class ParsingError(Export2TexError):
    """Exception raised when a serialized document tree cannot be loaded.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    node_type : str, optional
        The node type being decoded when the failure happened

    """

    def __init__(self, message: str, node_type: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error with the offending node type."""
        super().__init__(message, original_error=original_error)
        self.node_type = node_type


class ConfigurationError(Export2TexError):
    """Exception raised when a settings file cannot be read or is invalid.

    Parameters
    ----------
    message : str
        Description of the problem
    config_path : str, optional
        Path of the offending configuration file

    """

    def __init__(self, message: str, config_path: str | None = None, original_error: Exception | None = None):
        """Initialize the configuration error with the file path."""
        super().__init__(message, original_error=original_error)
        self.config_path = config_path


class OutputWriteError(Export2TexError):
    """Exception raised when rendered output cannot be written.

    Parameters
    ----------
    message : str
        Description of the write failure
    output_path : str, optional
        Destination that could not be written

    """

    def __init__(self, message: str, output_path: str | None = None, original_error: Exception | None = None):
        """Initialize the write error with the destination path."""
        super().__init__(message, original_error=original_error)
        self.output_path = output_path


__all__ = [
    "Export2TexError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "ConfigurationError",
    "OutputWriteError",
]
