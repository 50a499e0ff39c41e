# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Canonical store of structural type descriptors.

A registry maps type names to descriptors. Types are added in dependency
order: every type a descriptor refers to must already be registered, which
lets the registry compute each type's ``contains_opaques`` flag once, on
insertion.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from typekit.model.types import (
    ArrayType,
    CompoundField,
    CompoundType,
    ContainerType,
    EnumType,
    NullType,
    NumericCategory,
    NumericType,
    OpaqueType,
    TypeDescriptor,
    array_typename,
    container_typename,
)

# ###############
# Public Interface
# ###############


class NotFound(Exception):
    """Raised when a type name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"type '{name}' is not registered")
        self.name = name


class RegistryError(Exception):
    """Raised when a type cannot be added to a registry."""


STANDARD_NUMERIC_TYPES: list[tuple[str, NumericCategory, int]] = [
    ("/bool", NumericCategory.UINT, 1),
    ("/char", NumericCategory.SINT, 1),
    ("/int8_t", NumericCategory.SINT, 1),
    ("/uint8_t", NumericCategory.UINT, 1),
    ("/int16_t", NumericCategory.SINT, 2),
    ("/uint16_t", NumericCategory.UINT, 2),
    ("/int32_t", NumericCategory.SINT, 4),
    ("/uint32_t", NumericCategory.UINT, 4),
    ("/int64_t", NumericCategory.SINT, 8),
    ("/uint64_t", NumericCategory.UINT, 8),
    ("/float", NumericCategory.FLOAT, 4),
    ("/double", NumericCategory.FLOAT, 8),
]

STRING_CONTAINER_KIND = "/std/string"


class Registry:
    """An insertion-ordered collection of named type descriptors."""

    def __init__(self) -> None:
        self._types: dict[str, TypeDescriptor] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"Registry({len(self._types)} types)"

    def includes(self, name: str) -> bool:
        """Return True if *name* is registered."""
        return name in self._types

    def get(self, name: str) -> TypeDescriptor:
        """Return the descriptor registered under *name*.

        Raises:
            NotFound: If no such type exists.
        """
        try:
            return self._types[name]
        except KeyError:
            raise NotFound(name) from None

    def deference(self, type_: ArrayType | ContainerType) -> TypeDescriptor:
        """Return the element type of an array or container."""
        return self.get(type_.element)

    def add(self, type_: TypeDescriptor) -> TypeDescriptor:
        """Register *type_* and return the stored descriptor.

        The stored descriptor has its ``contains_opaques`` flag computed from
        the already-registered dependencies.

        Raises:
            RegistryError: If a dependency is missing or a different type is
                already registered under the same name.
        """
        missing = [dep for dep in type_.dependencies() if dep not in self._types]
        if missing:
            raise RegistryError(f"cannot add '{type_.name}': unknown dependencies {', '.join(missing)}")

        stored = type_.model_copy(update={"contains_opaques": self._compute_contains_opaques(type_)})
        existing = self._types.get(stored.name)
        if existing is not None:
            if existing != stored:
                raise RegistryError(f"'{stored.name}' is already registered with a different definition")
            return existing
        self._types[stored.name] = stored
        return stored

    def minimal(self, name: str) -> Registry:
        """Return a new registry holding *name* and everything it depends on."""
        result = Registry()
        result._add_with_dependencies(self.get(name), self)
        return result

    def merge(self, other: Registry) -> None:
        """Add every type of *other* to this registry."""
        for type_ in other:
            self.add(type_)

    def add_standard_types(self) -> None:
        """Register the C++ standard numeric types and ``/std/string``."""
        for name, category, size in STANDARD_NUMERIC_TYPES:
            self.create_numeric(name, category, size)
        self.create_container(STRING_CONTAINER_KIND, "/char")

    # -------- type factories --------

    def create_null(self, name: str) -> NullType:
        return self.add(NullType(name=name))

    def create_numeric(self, name: str, category: NumericCategory | str, size: int) -> NumericType:
        return self.add(NumericType(name=name, category=NumericCategory(category), size=size))

    def create_opaque(self, name: str, size: int = 0) -> OpaqueType:
        return self.add(OpaqueType(name=name, size=size))

    def create_enum(self, name: str, values: Mapping[str, int] | Iterable[str]) -> EnumType:
        """Create an enum; a plain sequence of symbols is numbered from zero."""
        if not isinstance(values, Mapping):
            values = {symbol: index for index, symbol in enumerate(values)}
        return self.add(EnumType(name=name, values=dict(values)))

    def create_compound(self, name: str, fields: Mapping[str, str] | Iterable[tuple[str, str]]) -> CompoundType:
        """Create a compound from ``(field name, type name)`` pairs."""
        items = fields.items() if isinstance(fields, Mapping) else fields
        return self.add(
            CompoundType(name=name, fields=[CompoundField(name=f_name, type=f_type) for f_name, f_type in items])
        )

    def create_array(self, element: str, length: int) -> ArrayType:
        name = array_typename(element, length)
        if name in self._types:
            return self._types[name]
        return self.add(ArrayType(name=name, element=element, length=length))

    def create_container(self, container_kind: str, element: str) -> ContainerType:
        name = container_typename(container_kind, element)
        if name in self._types:
            return self._types[name]
        return self.add(ContainerType(name=name, container_kind=container_kind, element=element))

    # ################
    # Implementation
    # ################

    def _compute_contains_opaques(self, type_: TypeDescriptor) -> bool:
        if type_.opaque:
            return True
        return any(self._types[dep].contains_opaques for dep in type_.dependencies())

    def _add_with_dependencies(self, type_: TypeDescriptor, source: Registry) -> None:
        if type_.name in self._types:
            return
        for dep in type_.dependencies():
            self._add_with_dependencies(source.get(dep), source)
        self._types[type_.name] = type_
