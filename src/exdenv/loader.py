"""Environment loader with per-environment defaults files.

Loads two sources and merges them in deterministic order:
1) .env.<environment>.defaults (committed fallbacks)
2) .env (local overrides, highest precedence)

The merge is validated against a schema and only then written to the
process environment, so a failed load never leaves partial values behind.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping, Optional, Tuple

from exdenv.exceptions import MissingEnvironmentNameError, NoSourceFileError, ValidationFailedError
from exdenv.logger import Logger, get_logger
from exdenv.parser import Parser, decode, parse
from exdenv.schema import Issue, as_schema

DEFAULT_PROCESS_ENV_KEY = "PYTHON_ENV"
DEFAULT_ENCODING = "utf-8"
CORE_FILE_NAME = ".env"
DEFAULTS_FILE_TEMPLATE = ".env.{environment}.defaults"

# Built once so loads do not reset logging the host application configured
_default_logger = get_logger("exdenv")


@dataclass
class LoadOptions:
    """Options for a single ``load_env`` call.

    Attributes:
        core_path: Path to the core .env file (default: <base_dir>/.env)
        defaults_paths_map: Environment name -> defaults file path; names not
            listed fall back to <base_dir>/.env.<environment>.defaults
        process_env_key: Key holding the current environment name
        parse: Parser used for both files
        encoding: Codec used to decode file bytes
        base_dir: Directory for the default paths (default: cwd at load time)
        environ: Environment mapping read for the name and written on success
        logger: Logger for diagnostics (default: the shared "exdenv" logger)
    """

    core_path: Optional[Path | str] = None
    defaults_paths_map: Mapping[str, Path | str] = field(default_factory=dict)
    process_env_key: str = DEFAULT_PROCESS_ENV_KEY
    parse: Parser = parse
    encoding: str = DEFAULT_ENCODING
    base_dir: Optional[Path | str] = None
    environ: MutableMapping[str, str] = field(default_factory=lambda: os.environ)
    logger: Optional[Logger] = None


def resolve_paths(environment: str, options: LoadOptions) -> Tuple[Path, Path]:
    """Return (core_path, defaults_path) for ``environment``."""
    base_dir = Path(options.base_dir) if options.base_dir else Path.cwd()

    core_path = Path(options.core_path) if options.core_path else base_dir / CORE_FILE_NAME

    mapped = options.defaults_paths_map.get(environment)
    if mapped:
        defaults_path = Path(mapped)
    else:
        defaults_path = base_dir / DEFAULTS_FILE_TEMPLATE.format(environment=environment)

    return core_path, defaults_path


def read_source(path: Path, logger: Logger) -> Optional[bytes]:
    """Read ``path``, returning None when it cannot be read for any reason.

    Missing files are the normal case. Other OS errors (permissions, a
    directory in place of a file) are also treated as absent, but logged as
    warnings so they are not lost.
    """
    try:
        return path.read_bytes()
    except FileNotFoundError:
        logger.debug("Source file not found", path=str(path))
    except OSError as exc:
        logger.warning(
            "Source file unreadable, treating as absent",
            path=str(path),
            error=type(exc).__name__,
            reason=str(exc),
        )
    return None


def merge_sources(core: Mapping[str, str], defaults: Mapping[str, str]) -> Dict[str, str]:
    """Overlay ``core`` onto ``defaults``; core wins for every key it declares."""
    merged = dict(defaults)
    merged.update(core)
    return merged


def to_env_value(value: Any) -> str:
    """Render a validated value as an environment string."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def check_env_entries(entries: Mapping[Any, str]) -> List[Issue]:
    """Report names and values the process environment cannot hold.

    ``os.environ`` rejects non-str or empty names, names containing ``=`` and
    any NUL character, and it does so one key at a time, so these are caught
    before the first write.
    """
    issues: List[Issue] = []
    for key, value in entries.items():
        if not isinstance(key, str) or not key or "=" in key or "\x00" in key:
            issues.append(
                Issue(
                    code="invalid_env_name",
                    path=(key if isinstance(key, (str, int)) else repr(key),),
                    message=f"{key!r} cannot be used as an environment variable name",
                )
            )
        elif "\x00" in value:
            issues.append(
                Issue(
                    code="invalid_env_value",
                    path=(key,),
                    message="Environment variable values cannot contain NUL characters",
                )
            )
    return issues


def apply_entries(environ: MutableMapping[str, str], entries: Mapping[str, str]) -> None:
    """Write ``entries`` into ``environ``, restoring previous values if a write fails."""
    previous = {key: environ.get(key) for key in entries}
    try:
        for key, value in entries.items():
            environ[key] = value
    except Exception:
        for key, old in previous.items():
            if old is None:
                environ.pop(key, None)
            else:
                environ[key] = old
        raise


class EnvLoader:
    """Load, merge, validate and apply environment files.

    Example:
        loader = EnvLoader(LoadOptions(process_env_key="APP_ENV"))
        loader.load(Settings)
    """

    def __init__(self, options: Optional[LoadOptions] = None) -> None:
        self.options = options or LoadOptions()
        self.logger = self.options.logger or _default_logger

    def _parse(self, raw: Optional[bytes]) -> Dict[str, str]:
        if raw is None:
            return {}
        parsed = self.options.parse(decode(raw, self.options.encoding))
        return {key: "" if value is None else value for key, value in parsed.items()}

    def load(self, schema: Any) -> Dict[str, str]:
        """Load both files into the environment mapping.

        Args:
            schema: An object with ``attempt(mapping)``, or a pydantic model
                or type to validate with

        Returns:
            The variables written to ``options.environ``; values the schema
            left as None are skipped

        Raises:
            MissingEnvironmentNameError: The environment name is unset or empty
            NoSourceFileError: Neither file could be read
            ValidationFailedError: The schema rejected the merged variables, or
                a validated name or value cannot be stored in the environment
            SchemaDefinitionError: ``schema`` cannot be used as a schema
        """
        options = self.options
        environ = options.environ

        environment = environ.get(options.process_env_key)
        if not environment:
            raise MissingEnvironmentNameError(options.process_env_key)

        validator = as_schema(schema)

        core_path, defaults_path = resolve_paths(environment, options)
        self.logger.debug(
            "Resolved env file paths",
            environment=environment,
            core_path=str(core_path),
            defaults_path=str(defaults_path),
        )

        core_raw = read_source(core_path, self.logger)
        defaults_raw = read_source(defaults_path, self.logger)

        if core_raw is None and defaults_raw is None:
            raise NoSourceFileError(str(core_path), str(defaults_path))

        merged = merge_sources(self._parse(core_raw), self._parse(defaults_raw))

        result = validator.attempt(merged)
        if not result.ok:
            self.logger.debug("Schema rejected env files", issue_count=len(result.issues))
            raise ValidationFailedError(result.issues)

        # None means "no value": leave any existing variable alone
        applied = {
            key: to_env_value(value) for key, value in result.value.items() if value is not None
        }

        issues = check_env_entries(applied)
        if issues:
            self.logger.debug("Validated values cannot be applied", issue_count=len(issues))
            raise ValidationFailedError(issues)

        apply_entries(environ, applied)

        self.logger.debug(
            "Applied environment variables",
            environment=environment,
            count=len(applied),
            from_core=core_raw is not None,
            from_defaults=defaults_raw is not None,
        )
        return applied


def load_env(schema: Any, options: Optional[LoadOptions] = None, **overrides: Any) -> Dict[str, str]:
    """Load the core and defaults env files for the current environment.

    Either pass a ready ``LoadOptions`` or its fields as keyword arguments:

        load_env(Settings)
        load_env(Settings, process_env_key="APP_ENV", encoding="latin-1")
        load_env(Settings, LoadOptions(core_path="config/.env"))

    See ``EnvLoader.load`` for return value and errors.
    """
    if options is not None and overrides:
        raise TypeError("Pass either options or keyword overrides, not both")
    return EnvLoader(options or LoadOptions(**overrides)).load(schema)


__all__ = [
    "CORE_FILE_NAME",
    "DEFAULTS_FILE_TEMPLATE",
    "DEFAULT_ENCODING",
    "DEFAULT_PROCESS_ENV_KEY",
    "EnvLoader",
    "LoadOptions",
    "apply_entries",
    "check_env_entries",
    "load_env",
    "merge_sources",
    "read_source",
    "resolve_paths",
    "to_env_value",
]
