"""Type shapes: how a declared parameter or result type maps onto JSON values."""

from __future__ import annotations

import dataclasses
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, TypeAdapter

# JSON decodes to exactly these Python types; a scalar shape must match one of them.
SCALAR_TYPES: tuple[type, ...] = (bool, int, float, str, list, dict)

_STRUCT_ORIGINS = (list, dict, tuple, set, frozenset)


class ShapeKind(Enum):
    """Whether a value is matched by exact type or decoded structurally."""
    SCALAR = "scalar"
    STRUCT = "struct"


@dataclass(frozen=True, slots=True)
class TypeShape:
    """Decoding recipe for one positional argument."""

    annotation: Any
    kind: ShapeKind
    adapter: TypeAdapter | None = None

    @property
    def is_struct(self) -> bool:
        return self.kind is ShapeKind.STRUCT

    @property
    def name(self) -> str:
        return type_name(self.annotation)


@runtime_checkable
class ErrorReporter(Protocol):
    """Anything that can describe a failure in human-readable form."""

    def description(self) -> str:
        ...


def is_exported(name: str) -> bool:
    """Public by Python convention: non-empty and no leading underscore."""
    return bool(name) and not name.startswith("_")


def type_name(annotation: Any) -> str:
    if isinstance(annotation, type) and not typing.get_args(annotation):
        return annotation.__name__
    return str(annotation).replace("typing.", "")


def is_struct_type(annotation: Any) -> bool:
    """True for classes decoded field-by-field from a JSON object."""
    if not isinstance(annotation, type):
        return False
    return issubclass(annotation, BaseModel) or dataclasses.is_dataclass(annotation)


def shape_of(annotation: Any) -> TypeShape | None:
    """Build the shape for a parameter annotation, or None when unsupported."""
    if annotation in SCALAR_TYPES:
        return TypeShape(annotation=annotation, kind=ShapeKind.SCALAR)
    if is_struct_type(annotation) or typing.get_origin(annotation) in _STRUCT_ORIGINS:
        return TypeShape(annotation=annotation, kind=ShapeKind.STRUCT, adapter=TypeAdapter(annotation))
    return None


def unexported_types(annotation: Any) -> list[str]:
    """Names of struct classes referenced by an annotation that are not public."""
    found: list[str] = []
    if is_struct_type(annotation):
        if not is_exported(annotation.__name__):
            found.append(annotation.__name__)
        return found
    for arg in typing.get_args(annotation):
        found.extend(unexported_types(arg))
    return found


def strip_optional(annotation: Any) -> Any:
    """Turn ``X | None`` into ``X``; other annotations pass through."""
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        members = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            return members[0]
    return annotation


def is_error_reporting_type(annotation: Any) -> bool:
    """Exceptions and ErrorReporter implementations satisfy the error contract."""
    candidate = strip_optional(annotation)
    if not isinstance(candidate, type):
        return False
    if issubclass(candidate, BaseException):
        return True
    return callable(getattr(candidate, "description", None))


def describe_error(err: Any) -> str:
    """Human-readable description of an error value; empty string means no error."""
    if err is None:
        return ""
    description = getattr(err, "description", None)
    if callable(description):
        return str(description())
    return str(err)
