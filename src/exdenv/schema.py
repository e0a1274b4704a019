"""Schema contract used to validate the merged environment.

The loader only needs ``attempt(mapping) -> SchemaResult``, a call that never
raises for invalid data. Any validator can be adapted behind it; pydantic
models and types are adapted out of the box:

    class Settings(BaseModel):
        DATABASE_URL: str
        PORT: int = 8000

    result = PydanticSchema(Settings).attempt({"DATABASE_URL": "sqlite://"})
    result.value  # {"DATABASE_URL": "sqlite://", "PORT": 8000}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Protocol, Sequence, Tuple, Union, runtime_checkable

from pydantic import BaseModel, PydanticUserError, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from exdenv.exceptions import SchemaDefinitionError

PathItem = Union[str, int]


@dataclass(frozen=True)
class Issue:
    """One reason the schema rejected the environment.

    Attributes:
        code: Machine-readable issue type (e.g., "missing", "int_parsing")
        path: Location of the offending value, e.g. ("DATABASE_URL",)
        message: Human-readable description
        params: Extra context supplied by the validator
    """

    code: str
    path: Tuple[PathItem, ...]
    message: str
    params: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "path": list(self.path),
            "message": self.message,
            "params": dict(self.params),
        }


@dataclass
class SchemaResult:
    """Outcome of ``Schema.attempt``: a value on success, issues otherwise."""

    ok: bool
    value: Dict[str, Any] = field(default_factory=dict)
    issues: List[Issue] = field(default_factory=list)

    @classmethod
    def success(cls, value: Mapping[str, Any]) -> "SchemaResult":
        return cls(ok=True, value=dict(value))

    @classmethod
    def failure(cls, issues: Sequence[Issue]) -> "SchemaResult":
        return cls(ok=False, issues=list(issues))


@runtime_checkable
class Schema(Protocol):
    """Anything that can validate a mapping without raising."""

    def attempt(self, data: Mapping[str, str]) -> SchemaResult: ...


class PassthroughSchema:
    """Accept every mapping unchanged."""

    def attempt(self, data: Mapping[str, str]) -> SchemaResult:
        return SchemaResult.success(data)


class PydanticSchema:
    """Validate with a pydantic model class or any type ``TypeAdapter`` accepts.

    Models are dumped back to a dict, so only declared fields are applied.
    Coerced values (ints, bools) are kept typed here and rendered to strings
    by the loader.
    """

    def __init__(self, model: Any):
        self.model = model
        self._is_model = isinstance(model, type) and issubclass(model, BaseModel)
        self._adapter = None if self._is_model else TypeAdapter(model)

    def attempt(self, data: Mapping[str, str]) -> SchemaResult:
        try:
            if self._is_model:
                value = self.model.model_validate(dict(data)).model_dump()
            else:
                value = self._adapter.validate_python(dict(data))
        except PydanticValidationError as exc:
            return SchemaResult.failure(
                [
                    Issue(
                        code=error["type"],
                        path=tuple(error["loc"]),
                        message=error["msg"],
                        params=dict(error.get("ctx") or {}),
                    )
                    for error in exc.errors()
                ]
            )

        if not isinstance(value, Mapping):
            return SchemaResult.failure(
                [
                    Issue(
                        code="invalid_type",
                        path=(),
                        message=f"Schema must produce a mapping, got {type(value).__name__}",
                    )
                ]
            )
        return SchemaResult.success(value)

    def __repr__(self) -> str:
        return f"PydanticSchema({getattr(self.model, '__name__', self.model)!r})"


def as_schema(schema: Any) -> Schema:
    """Return ``schema`` as something with ``attempt``.

    Raises:
        SchemaDefinitionError: If ``schema`` is neither a ``Schema`` nor
            something pydantic can build a validator for.
    """
    if isinstance(schema, Schema) and not isinstance(schema, type):
        return schema
    try:
        return PydanticSchema(schema)
    except (TypeError, PydanticUserError) as exc:
        raise SchemaDefinitionError(schema) from exc


__all__ = [
    "Issue",
    "PassthroughSchema",
    "PathItem",
    "PydanticSchema",
    "Schema",
    "SchemaResult",
    "as_schema",
]
