# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type descriptors and the registry that stores them."""

from typekit.model.registry import STANDARD_NUMERIC_TYPES, NotFound, Registry, RegistryError
from typekit.model.types import (
    ArrayType,
    CompoundField,
    CompoundType,
    ContainerType,
    EnumType,
    IndirectType,
    NullType,
    NumericCategory,
    NumericType,
    OpaqueType,
    TypeDescriptor,
    array_typename,
    container_typename,
    split_typename,
)

__all__ = [
    # Descriptors
    "NumericCategory",
    "NullType",
    "NumericType",
    "OpaqueType",
    "EnumType",
    "CompoundField",
    "CompoundType",
    "ArrayType",
    "ContainerType",
    "IndirectType",
    "TypeDescriptor",
    # Names
    "array_typename",
    "container_typename",
    "split_typename",
    # Registry
    "Registry",
    "NotFound",
    "RegistryError",
    "STANDARD_NUMERIC_TYPES",
]
