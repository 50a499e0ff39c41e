# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Structural type descriptors stored in a :class:`~typekit.model.registry.Registry`."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class NumericCategory(Enum):
    """Representation class of a numeric type."""

    SINT = "sint"
    UINT = "uint"
    FLOAT = "float"


class _TypeBase(BaseModel):
    """Fields shared by every descriptor."""

    model_config = ConfigDict(frozen=True)

    name: str
    contains_opaques: bool = False

    @property
    def opaque(self) -> bool:
        return False

    def dependencies(self) -> list[str]:
        """Names of the types this one is built from."""
        return []


class NullType(_TypeBase):
    """A type without any data."""

    kind: Literal["null"] = "null"


class NumericType(_TypeBase):
    """A signed, unsigned or floating-point number."""

    kind: Literal["numeric"] = "numeric"
    category: NumericCategory
    size: int


class OpaqueType(_TypeBase):
    """A type whose layout cannot be introspected."""

    kind: Literal["opaque"] = "opaque"
    size: int = 0

    @property
    def opaque(self) -> bool:
        return True


class EnumType(_TypeBase):
    """An enumeration mapping symbols to integer values."""

    kind: Literal["enum"] = "enum"
    values: dict[str, int] = _Field(default_factory=dict)


class CompoundField(BaseModel):
    """A named member of a compound."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str


class CompoundType(_TypeBase):
    """A structure made of named fields."""

    kind: Literal["compound"] = "compound"
    fields: list[CompoundField] = _Field(default_factory=list)

    def dependencies(self) -> list[str]:
        return [f.type for f in self.fields]


class ArrayType(_TypeBase):
    """A fixed-size array ``element[length]``."""

    kind: Literal["array"] = "array"
    element: str
    length: int

    def dependencies(self) -> list[str]:
        return [self.element]


class ContainerType(_TypeBase):
    """A variable-size container ``container_kind<element>``."""

    kind: Literal["container"] = "container"
    container_kind: str
    element: str

    def dependencies(self) -> list[str]:
        return [self.element]


# A registered type, discriminated by its `kind` field.
TypeDescriptor = Annotated[
    NullType | NumericType | OpaqueType | EnumType | CompoundType | ArrayType | ContainerType,
    _Field(discriminator="kind"),
]

# Descriptors that point to a single element type.
IndirectType = ArrayType | ContainerType


def array_typename(element: str, length: int) -> str:
    """Return the registry name of an array of *length* elements of *element*."""
    return f"{element}[{length}]"


def container_typename(container_kind: str, element: str) -> str:
    """Return the registry name of a *container_kind* container of *element*."""
    return f"{container_kind}<{element}>"


def split_typename(name: str) -> list[str]:
    """Split a hierarchical type name into its path segments.

    Separators nested inside template arguments are kept in the segment, so
    ``/std/vector</base/Time>`` splits into ``["std", "vector</base/Time>"]``.
    """
    segments: list[str] = []
    current: list[str] = []
    depth = 0
    for char in name:
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
        if char == "/" and depth == 0:
            if current:
                segments.append("".join(current))
            current = []
            continue
        current.append(char)
    if current:
        segments.append("".join(current))
    return segments
