"""Exception hierarchy for Threads parsing.

None of these escape ``parse()``; the API boundary converts them into the
diagnostic forest. They are raised directly only by configuration code and by
the lower-level stages when used on their own.
"""

from typing import List, Optional


class ThreadsParserError(Exception):
    """Base exception for all Threads parser errors."""


class ConfigError(ThreadsParserError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


class TreeAssemblyError(ThreadsParserError):
    """Raised when a line cannot be placed into the forest."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.line_number = line_number
