"""
Exception hierarchy for BotMill.

Configuration load errors are raised by the loader and swallowed by the
manager, while discovery errors always propagate to the caller.
"""

from typing import Any, List, Optional, Sequence


class BotMillError(Exception):
    """Base class for all BotMill errors."""
    pass


class BotMillConfigurationError(BotMillError):
    """
    Raised when bot definitions cannot be discovered or activated.

    This indicates a broken build or deployment rather than a transient
    condition, so it should abort application startup.
    """

    def __init__(
        self,
        message: str,
        bot_class: Optional[Any] = None,
        errors: Optional[Sequence["BotMillConfigurationError"]] = None
    ) -> None:
        super().__init__(message)
        self.bot_class = bot_class
        self.errors: List[BotMillConfigurationError] = list(errors or [])


class PropertiesParseError(BotMillError, ValueError):
    """Raised when properties content is malformed."""

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)
        self.line_number = line_number


class ResourceNotFoundError(BotMillError, FileNotFoundError):
    """Raised when a named resource is not present on the search path."""

    def __init__(self, resource_name: str, search_path: Sequence[str] = ()) -> None:
        super().__init__(
            f"Resource not found on search path: {resource_name}")
        self.resource_name = resource_name
        self.search_path = list(search_path)
