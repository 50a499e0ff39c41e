# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reader for the XML registry serialization.

The document root holds one element per type::

    <typelib>
      <numeric name="/int32_t" category="sint" size="4"/>
      <opaque name="/base/Time" size="0" marshal_as="/base/Time_m" includes="base/Time.hpp" needs_copy="1"/>
      <compound name="/base/Sample">
        <field name="time" type="/base/Time"/>
      </compound>
      <array name="/double[3]" of="/double" dimension="3"/>
      <container name="/std/vector</double>" of="/double" kind="/std/vector"/>
      <enum name="/base/Mode"><value symbol="IDLE" value="0"/></enum>
      <null name="/nil"/>
    </typelib>

Declarations can appear in any order; they are added to the registry once
their dependencies are available.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET

from typekit.model.registry import Registry, RegistryError
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
)

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


def parse_registry_xml(text: str) -> list[TypeDescriptor]:
    """Parse the registry XML into descriptors, in document order.

    Raises:
        RegistryError: If the XML is malformed or holds an unknown or
            incomplete declaration.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise RegistryError(f"invalid registry XML: {exc}") from exc
    return [_parse_element(element) for element in root]


def merge_xml(registry: Registry, text: str) -> None:
    """Add every type declared in *text* to *registry*.

    Raises:
        RegistryError: If the XML is invalid or some declarations refer to
            types that are neither in the document nor in *registry*.
    """
    pending = parse_registry_xml(text)
    while pending:
        remaining: list[TypeDescriptor] = []
        for type_ in pending:
            if all(dep in registry for dep in type_.dependencies()):
                registry.add(type_)
            else:
                remaining.append(type_)
        if len(remaining) == len(pending):
            names = ", ".join(t.name for t in remaining)
            raise RegistryError(f"unresolved dependencies for {names}")
        pending = remaining
    logger.debug("registry now holds %d types", len(registry))


# ################
# Implementation
# ################


def _require(element: ET.Element, attribute: str) -> str:
    value = element.get(attribute)
    if value is None:
        raise RegistryError(f"<{element.tag}> element is missing the '{attribute}' attribute")
    return value


def _require_int(element: ET.Element, attribute: str, default: str | None = None) -> int:
    value = element.get(attribute, default) if default is not None else _require(element, attribute)
    try:
        return int(value)
    except ValueError:
        raise RegistryError(f"<{element.tag}> '{attribute}' must be an integer, got {value!r}") from None


def _parse_element(element: ET.Element) -> TypeDescriptor:
    name = _require(element, "name")
    tag = element.tag
    if tag == "null":
        return NullType(name=name)
    if tag == "numeric":
        category = _require(element, "category")
        try:
            numeric_category = NumericCategory(category)
        except ValueError:
            raise RegistryError(f"'{name}': unknown numeric category {category!r}") from None
        return NumericType(name=name, category=numeric_category, size=_require_int(element, "size"))
    if tag == "opaque":
        return OpaqueType(name=name, size=_require_int(element, "size", default="0"))
    if tag == "enum":
        values = {_require(v, "symbol"): _require_int(v, "value") for v in element.findall("value")}
        return EnumType(name=name, values=values)
    if tag == "compound":
        fields = [
            CompoundField(name=_require(f, "name"), type=_require(f, "type")) for f in element.findall("field")
        ]
        return CompoundType(name=name, fields=fields)
    if tag == "array":
        return ArrayType(name=name, element=_require(element, "of"), length=_require_int(element, "dimension"))
    if tag == "container":
        return ContainerType(name=name, container_kind=_require(element, "kind"), element=_require(element, "of"))
    raise RegistryError(f"'{name}': unknown declaration <{tag}>")
