"""Base exception classes for exdenv.

Every exdenv exception carries structured error information:
- code: Machine-readable error identifier
- message: Human-readable error description
- details: Additional context for diagnostics
"""

import json
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence

if TYPE_CHECKING:
    from exdenv.schema import Issue


class ExdenvError(Exception):
    """Base exception for all exdenv errors.

    Attributes:
        code: Machine-readable error code (e.g., "NO_SOURCE_FILE")
        message: Human-readable error message
        details: Optional additional context
    """

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.code}: {self.message} (details: {self.details})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(ExdenvError):
    """Base for errors raised before validation starts.

    Used when the loader cannot work out what to load.
    """

    pass


class MissingEnvironmentNameError(ConfigurationError):
    """The environment name key is unset or empty."""

    def __init__(self, env_key: str):
        super().__init__(
            code="MISSING_ENVIRONMENT_NAME",
            message=(
                f"Environment name is required to load the .env defaults file, "
                f"but {env_key!r} is not set in the process environment"
            ),
            details={"env_key": env_key},
        )
        self.env_key = env_key


class NoSourceFileError(ConfigurationError):
    """Neither the core file nor the defaults file could be read."""

    def __init__(self, core_path: str, defaults_path: str):
        super().__init__(
            code="NO_SOURCE_FILE",
            message=(
                "Either the core (.env) file or the defaults "
                "(.env.[environment].defaults) file is required"
            ),
            details={"core_path": core_path, "defaults_path": defaults_path},
        )
        self.core_path = core_path
        self.defaults_path = defaults_path


class SchemaDefinitionError(ConfigurationError):
    """The object passed as a schema cannot validate a mapping."""

    def __init__(self, schema: Any):
        super().__init__(
            code="INVALID_SCHEMA",
            message=(
                f"Schema must provide attempt(mapping) or be a pydantic model or type, "
                f"got {type(schema).__name__}"
            ),
        )


class ValidationError(ExdenvError):
    """Base for all validation errors."""

    pass


def format_issues(issues: Sequence["Issue"]) -> str:
    """Render issues as indented JSON objects, one after another."""
    return "\n".join(json.dumps(issue.to_dict(), indent=2, default=str) for issue in issues)


class ValidationFailedError(ValidationError):
    """The merged environment was rejected by the schema.

    The message enumerates every issue, not just the first one.

    Attributes:
        issues: Ordered issues reported by the schema
    """

    def __init__(self, issues: Sequence["Issue"]):
        self.issues = list(issues)
        super().__init__(
            code="VALIDATION_FAILED",
            message=f"Validation errors: {format_issues(self.issues)}",
            details={"issues": [issue.to_dict() for issue in self.issues]},
        )

    def __str__(self) -> str:
        # The message already lists every issue
        return f"{self.code}: {self.message}"
