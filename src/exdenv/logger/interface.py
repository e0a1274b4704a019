"""
Logger interface for exdenv.

Abstract base class defining the logging contract the loader depends on.
Callers can pass their own implementation through ``LoadOptions.logger``.
"""

from abc import ABC, abstractmethod
from typing import Any


class Logger(ABC):
    """Abstract base class for logging interface.

    Every method takes a message plus arbitrary key-value context.

    Example:
        class PrintLogger(Logger):
            def warning(self, message: str, **kwargs: Any) -> None:
                print(f"WARNING: {message} {kwargs}")
            # ... implement other methods
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message.

        Args:
            message: The message to log
            **kwargs: Additional key-value pairs to include in the log
        """

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""

    @abstractmethod
    def get_session_id(self) -> str:
        """Get the identifier shared by every record from this logger."""
