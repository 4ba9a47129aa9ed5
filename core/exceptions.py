"""
Exception Definitions - Custom exceptions for Eliza Responder
=============================================================

This module defines all custom exceptions used throughout the application,
providing clear error handling and meaningful error messages.
"""


class ResponderError(Exception):
    """
    Base exception for all responder errors.

    All custom exceptions in this application inherit from this base class,
    allowing for easy catching of all application-specific errors.

    Attributes:
        message (str): Human-readable error description
        details (dict): Additional error details for debugging
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            details: Optional dictionary with additional error context
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return formatted error message with details if present."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigError(ResponderError):
    """
    Configuration-related errors.

    Raised when there are issues with:
    - Unreadable configuration files
    - Invalid configuration values
    - Environment variable issues
    - Configuration parsing errors
    """
    pass


class RuleLoadError(ResponderError):
    """
    Rule table loading errors.

    Raised when there are issues with:
    - Missing or unreadable rules files
    - YAML parsing errors
    - Categories named in the order but not defined
    - Groups with no patterns or no responses
    """
    pass


class PatternCompileError(RuleLoadError):
    """
    Invalid regular expression in a rule group.

    Fatal at startup: no partial rule table is ever produced.

    Attributes:
        pattern (str): The offending pattern source
        group_index (int): Position of the group in the flattened table
    """

    def __init__(self, message: str, pattern: str = "", group_index: int = -1,
                 details: dict = None):
        """
        Initialize with the failing pattern.

        Args:
            message: Human-readable error description
            pattern: Pattern source that failed to compile
            group_index: Index of the group holding the pattern
            details: Optional dictionary with additional error context
        """
        self.pattern = pattern
        self.group_index = group_index
        details = dict(details or {})
        details.setdefault("pattern", pattern)
        details.setdefault("group_index", group_index)
        super().__init__(message, details)


class NoMatchError(ResponderError):
    """
    No rule group matched the input.

    Only raised by callers that demand a match; the matcher itself
    reports this case by returning None.

    Attributes:
        text (str): The input that matched nothing
    """

    def __init__(self, message: str, text: str = "", details: dict = None):
        self.text = text
        super().__init__(message, details)
