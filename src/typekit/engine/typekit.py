# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Typekits: bundles of types together with their marshalling metadata.

A typekit owns a registry, the list of types it defines (and which of them
are public), and the declarations of its opaque types. From these it
derives, for every type, the name of the intermediate type used to marshal
it, and maps intermediates back to the opaque types they stand for.

Intermediate names are computed as follows:

* an opaque is marshalled as the type named in its declaration;
* an array or container of opaques is an array or container of the
  element's intermediate;
* any other type containing opaques gets a generated ``<name>_m`` type
  whose path segments are sanitized into identifiers;
* every other type is its own intermediate.

A typekit is not safe for concurrent use. The reverse index is built on the
first reverse lookup; call :meth:`Typekit.build_intermediate_index` before
sharing a typekit between threads.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from typing import Any

from typekit.model.registry import Registry
from typekit.model.types import (
    ArrayType,
    CompoundType,
    ContainerType,
    EnumType,
    NullType,
    NumericType,
    OpaqueType,
    TypeDescriptor,
    array_typename,
    container_typename,
    split_typename,
)
from typekit.parser.opaques import OpaqueDefinition, extract_opaques
from typekit.parser.registry_xml import merge_xml
from typekit.parser.typelist import Typelist, parse_typelist

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############

# A type descriptor, or the name of a type.
TypeLike = TypeDescriptor | str

GENERATED_INTERMEDIATE_SUFFIX = "_m"


class NotOpaque(Exception):
    """Raised when opaque-only information is requested for a non-opaque type."""


class InternalInconsistency(Exception):
    """Raised when the registry and the opaque declarations disagree.

    This denotes a typekit that was built incorrectly, not a user error.
    """


class UnsupportedCapability(Exception):
    """Raised when asked to create a kind of type the registry cannot build."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"cannot create types of kind '{kind}'; known kinds are {', '.join(TYPE_FACTORIES)}")
        self.kind = kind


TYPE_FACTORIES: dict[str, Callable[..., TypeDescriptor]] = {
    "null": Registry.create_null,
    "numeric": Registry.create_numeric,
    "opaque": Registry.create_opaque,
    "enum": Registry.create_enum,
    "compound": Registry.create_compound,
    "array": Registry.create_array,
    "container": Registry.create_container,
}


class Typekit:
    """A named set of types and the metadata needed to marshal them.

    Attributes:
        name: The typekit name.
        registry: Registry holding every type the typekit knows about.
        typelist: Names of the types defined by this typekit.
        interface_typelist: The subset of ``typelist`` exposed publicly.
        opaques: Declarations of the typekit's opaque types.
        opaque_registry: Minimal registry covering the opaques' base types.
        imported_typekits: Names of the typekits this one depends on.
        virtual: Whether the typekit has no generated code of its own.
        define_dummy_types: Whether dummy definitions are generated for
            types that are only forward-declared.
    """

    def __init__(
        self,
        name: str,
        registry: Registry | None = None,
        typelist: Iterable[str] = (),
        interface_typelist: Iterable[str] = (),
        *,
        virtual: bool = False,
        define_dummy_types: bool = False,
    ) -> None:
        self.name = name
        self.registry = registry if registry is not None else Registry()
        self.typelist = Typelist(typelist)
        self.interface_typelist = Typelist(interface_typelist)
        self.opaques: list[OpaqueDefinition] = []
        self.opaque_registry = Registry()
        self.imported_typekits: set[str] = set()
        self.virtual = virtual
        self.define_dummy_types = define_dummy_types
        self._has_opaques: bool | None = None
        self._intermediate_to_opaque: dict[str, TypeDescriptor] | None = None

    @classmethod
    def from_raw_data(cls, name: str, registry_xml: str, typelist_txt: str, **kwargs: Any) -> Typekit:
        """Build a typekit from its registry serialization and typelist.

        Raises:
            RegistryError: If the registry serialization is invalid.
            NotFound: If an opaque declaration names an unknown type.
        """
        registry = Registry()
        registry.add_standard_types()
        merge_xml(registry, registry_xml)

        typelist, interface_typelist = parse_typelist(typelist_txt)
        typekit = cls(name, registry, typelist, interface_typelist, **kwargs)

        extraction = extract_opaques(registry_xml, registry)
        typekit.opaques.extend(extraction.opaques)
        typekit.opaque_registry.merge(extraction.registry)
        logger.debug(
            "loaded typekit %s: %d types, %d opaques", name, len(typekit.typelist), len(typekit.opaques)
        )
        return typekit

    def __repr__(self) -> str:
        return f"<Typekit {self.name}>"

    # -------- membership --------

    def include(self, type_: TypeLike) -> bool:
        """Return True if *type_* is defined by this typekit."""
        return _typename(type_) in self.typelist

    def is_interface_type(self, type_: TypeLike) -> bool:
        """Return True if *type_* is part of this typekit's public interface."""
        return _typename(type_) in self.interface_typelist

    def defines_array_of(self, type_: TypeLike) -> bool:
        """Return True if the typelist holds an array (of any rank) of *type_*."""
        pattern = re.compile(re.escape(_typename(type_)) + r"(\[\d+\])+")
        return any(pattern.fullmatch(name) for name in self.typelist)

    def has_opaques(self) -> bool:
        """Return True if one of the types defined by this typekit is opaque."""
        if self._has_opaques is None:
            self._has_opaques = any(t.opaque and self.include(t) for t in self.registry)
        return self._has_opaques

    def self_types(self) -> list[TypeDescriptor]:
        """Return the descriptors of the types defined by this typekit."""
        return [self.registry.get(name) for name in self.typelist]

    # -------- resolution --------

    def resolve_type(self, type_: TypeLike) -> TypeDescriptor:
        """Return the descriptor of *type_* in this typekit's registry.

        Raises:
            NotFound: If the type is not registered.
        """
        return self.registry.get(_typename(type_))

    def opaque_specification(self, type_: TypeLike) -> OpaqueDefinition:
        """Return the declaration of the opaque type *type_*.

        Raises:
            NotFound: If the type is not registered.
            NotOpaque: If the type is not an opaque.
            InternalInconsistency: If the type is opaque but was never declared.
        """
        resolved = self.resolve_type(type_)
        if not resolved.opaque:
            raise NotOpaque(f"{resolved.name} is not opaque")
        for opaque in self.opaques:
            if opaque.base_type.name == resolved.name:
                return opaque
        raise InternalInconsistency(
            f"{self!r}.opaque_specification called for type {resolved.name}, "
            "but could not find the corresponding opaque specification"
        )

    def intermediate_type_name_for(self, type_: TypeLike) -> str:
        """Compute the name of the type used to marshal *type_*.

        Returns:
            The intermediate name, or the type's own name if it neither is
            nor contains an opaque.
        """
        resolved = self.resolve_type(type_)
        if resolved.opaque:
            return self.opaque_specification(resolved).intermediate_name
        if not resolved.contains_opaques:
            return resolved.name
        if isinstance(resolved, ArrayType):
            return f"{self.intermediate_type_name_for(resolved.element)}[{resolved.length}]"
        if isinstance(resolved, ContainerType):
            return container_typename(resolved.container_kind, self.intermediate_type_name_for(resolved.element))
        path = [_UNSAFE_NAME_CHARS.sub("_", segment) for segment in split_typename(resolved.name)]
        return "/" + "/".join(path) + GENERATED_INTERMEDIATE_SUFFIX

    def intermediate_type_for(self, type_: TypeLike) -> TypeDescriptor:
        """Return the descriptor of the type used to marshal *type_*.

        Raises:
            NotFound: If the intermediate type is not registered (yet).
        """
        resolved = self.resolve_type(type_)
        if resolved.opaque:
            opaque = self.opaque_specification(resolved)
            if opaque.intermediate_type is None:
                opaque.intermediate_type = self.resolve_type(opaque.intermediate_name)
            return opaque.intermediate_type
        return self.resolve_type(self.intermediate_type_name_for(resolved))

    def find_opaque_for_intermediate(self, type_: TypeLike) -> TypeDescriptor | None:
        """Find the opaque (or opaque-containing) type *type_* is the intermediate of.

        Returns:
            The opaque-side type, or None if *type_* is not an intermediate.

        Raises:
            NotFound: If *type_* is not registered, or if *type_* is an array
                or container of intermediates whose opaque-side type is not.
        """
        resolved = self.resolve_type(type_)
        known = self._intermediate_to_opaque is not None and resolved.name in self._intermediate_to_opaque
        if known or self.is_m_type(resolved):
            return self._intermediate_index().get(resolved.name)
        if isinstance(resolved, (ArrayType, ContainerType)):
            opaque_element = self.find_opaque_for_intermediate(resolved.element)
            if opaque_element is None:
                return None
            if isinstance(resolved, ArrayType):
                return self.resolve_type(array_typename(opaque_element.name, resolved.length))
            return self.resolve_type(container_typename(resolved.container_kind, opaque_element.name))
        for opaque in self.opaques:
            if opaque.intermediate_name == resolved.name:
                return opaque.base_type
        return None

    def is_intermediate_type(self, type_: TypeLike) -> bool:
        """Return True if *type_* is used as an intermediate."""
        return self.find_opaque_for_intermediate(type_) is not None

    def opaque_type_for(self, type_: TypeLike) -> TypeDescriptor:
        """Return the opaque *type_* is an intermediate of, or *type_* itself."""
        opaque = self.find_opaque_for_intermediate(type_)
        return opaque if opaque is not None else self.resolve_type(type_)

    def is_m_type(self, type_: TypeLike) -> bool:
        """Return True if *type_* is, or is an array/container of, a generated intermediate."""
        resolved = self.resolve_type(type_)
        while True:
            if resolved.name.endswith(GENERATED_INTERMEDIATE_SUFFIX):
                return True
            if not isinstance(resolved, (ArrayType, ContainerType)):
                return False
            resolved = self.registry.deference(resolved)

    def build_intermediate_index(self) -> dict[str, TypeDescriptor]:
        """Index every opaque-containing type under its intermediate name.

        Returns:
            The new index, mapping intermediate names to opaque-side types.
        """
        index: dict[str, TypeDescriptor] = {}
        for type_ in self.registry:
            if type_.contains_opaques:
                index[self.intermediate_type_name_for(type_)] = type_
        logger.debug("%r: indexed %d intermediate types", self, len(index))
        self._intermediate_to_opaque = index
        return index

    # -------- type creation --------

    def create_type(self, kind: str, *args: Any, interface: bool = False, **kwargs: Any) -> TypeDescriptor:
        """Create a type in the registry and add it to the typelist.

        Args:
            kind: One of the keys of :data:`TYPE_FACTORIES`.
            *args: Positional arguments of the matching ``Registry.create_*``.
            interface: Whether the type is also added to the interface typelist.
            **kwargs: Keyword arguments of the matching ``Registry.create_*``.

        Raises:
            UnsupportedCapability: If *kind* is not a known kind of type.
        """
        factory = TYPE_FACTORIES.get(kind)
        if factory is None:
            raise UnsupportedCapability(kind)
        type_ = factory(self.registry, *args, **kwargs)
        self.typelist.add(type_.name)
        if interface:
            self.interface_typelist.add(type_.name)
        self._has_opaques = None
        self._intermediate_to_opaque = None
        logger.debug("%r: created %s type %s", self, kind, type_.name)
        return type_

    def create_null(self, *args: Any, **kwargs: Any) -> NullType:
        return self.create_type("null", *args, **kwargs)

    def create_interface_null(self, *args: Any, **kwargs: Any) -> NullType:
        return self.create_type("null", *args, interface=True, **kwargs)

    def create_numeric(self, *args: Any, **kwargs: Any) -> NumericType:
        return self.create_type("numeric", *args, **kwargs)

    def create_interface_numeric(self, *args: Any, **kwargs: Any) -> NumericType:
        return self.create_type("numeric", *args, interface=True, **kwargs)

    def create_opaque(self, *args: Any, **kwargs: Any) -> OpaqueType:
        return self.create_type("opaque", *args, **kwargs)

    def create_interface_opaque(self, *args: Any, **kwargs: Any) -> OpaqueType:
        return self.create_type("opaque", *args, interface=True, **kwargs)

    def create_enum(self, *args: Any, **kwargs: Any) -> EnumType:
        return self.create_type("enum", *args, **kwargs)

    def create_interface_enum(self, *args: Any, **kwargs: Any) -> EnumType:
        return self.create_type("enum", *args, interface=True, **kwargs)

    def create_compound(self, *args: Any, **kwargs: Any) -> CompoundType:
        return self.create_type("compound", *args, **kwargs)

    def create_interface_compound(self, *args: Any, **kwargs: Any) -> CompoundType:
        return self.create_type("compound", *args, interface=True, **kwargs)

    def create_array(self, *args: Any, **kwargs: Any) -> ArrayType:
        return self.create_type("array", *args, **kwargs)

    def create_interface_array(self, *args: Any, **kwargs: Any) -> ArrayType:
        return self.create_type("array", *args, interface=True, **kwargs)

    def create_container(self, *args: Any, **kwargs: Any) -> ContainerType:
        return self.create_type("container", *args, **kwargs)

    def create_interface_container(self, *args: Any, **kwargs: Any) -> ContainerType:
        return self.create_type("container", *args, interface=True, **kwargs)

    # ################
    # Implementation
    # ################

    def _intermediate_index(self) -> dict[str, TypeDescriptor]:
        if self._intermediate_to_opaque is None:
            return self.build_intermediate_index()
        return self._intermediate_to_opaque


_UNSAFE_NAME_CHARS = re.compile(r"[<>\[\], /]")


def _typename(type_: TypeLike) -> str:
    """Return the name of a descriptor, or the string itself."""
    return type_ if isinstance(type_, str) else type_.name
