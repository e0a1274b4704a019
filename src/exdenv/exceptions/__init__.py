"""Exceptions raised by exdenv.

All exceptions include structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for diagnostics

Usage:
    from exdenv.exceptions import (
        ExdenvError,
        ConfigurationError,
        ValidationFailedError,
    )

    try:
        load_env(Settings)
    except ValidationFailedError as exc:
        for issue in exc.issues:
            print(issue.path, issue.message)
"""

from exdenv.exceptions.base import (
    ConfigurationError,
    ExdenvError,
    MissingEnvironmentNameError,
    NoSourceFileError,
    SchemaDefinitionError,
    ValidationError,
    ValidationFailedError,
    format_issues,
)

__all__ = [
    # Base exceptions
    "ExdenvError",
    "ConfigurationError",
    "ValidationError",
    # Loader failures
    "MissingEnvironmentNameError",
    "NoSourceFileError",
    "SchemaDefinitionError",
    "ValidationFailedError",
    # Formatting
    "format_issues",
]
