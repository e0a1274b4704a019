"""exdenv - .env loading with per-environment defaults and schema validation.

This package provides:
- parser: .env file parsing (quotes, comments, multi-line values)
- loader: core + defaults merge, validation and injection into the environment
- schema: the validation contract and its pydantic adapter
- exceptions: structured errors with code, message and details
- logger: structured logging for the library's own diagnostics

Usage:
    from pydantic import BaseModel
    from exdenv import load_env

    class Settings(BaseModel):
        DATABASE_URL: str
        JWT_SECRET: str

    load_env(Settings)  # reads .env and .env.$PYTHON_ENV.defaults
"""

__version__ = "2.0.0"

from exdenv.exceptions import (
    ConfigurationError,
    ExdenvError,
    MissingEnvironmentNameError,
    NoSourceFileError,
    SchemaDefinitionError,
    ValidationError,
    ValidationFailedError,
)
from exdenv.loader import EnvLoader, LoadOptions, load_env
from exdenv.parser import parse
from exdenv.schema import Issue, PassthroughSchema, PydanticSchema, Schema, SchemaResult

__all__ = [
    "__version__",
    # Loading
    "load_env",
    "EnvLoader",
    "LoadOptions",
    # Parsing
    "parse",
    # Schema contract
    "Schema",
    "SchemaResult",
    "Issue",
    "PydanticSchema",
    "PassthroughSchema",
    # Exceptions
    "ExdenvError",
    "ConfigurationError",
    "MissingEnvironmentNameError",
    "NoSourceFileError",
    "SchemaDefinitionError",
    "ValidationError",
    "ValidationFailedError",
]
