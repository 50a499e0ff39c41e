# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Extraction of opaque declarations from the registry XML.

Each ``<opaque>`` element of the registry serialization carries, next to the
type itself, how the type is marshalled::

    <opaque name="/base/Time" marshal_as="/base/Time_m" includes="base/Time.hpp:base/Float.hpp" needs_copy="1"/>
"""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from typekit.model.registry import Registry, RegistryError
from typekit.model.types import OpaqueType, TypeDescriptor

logger = logging.getLogger(__name__)

# ###############
# Public Interface
# ###############


@dataclass
class OpaqueDefinition:
    """How an opaque type is converted to and from its intermediate.

    Attributes:
        base_type: The opaque type itself.
        intermediate_name: Name of the type it is marshalled as.
        include_dirs: Headers needed by the conversion code, in order. Empty
            entries of the colon-separated ``includes`` attribute (as in
            ``"a.hpp::b.hpp"``) are dropped.
        needs_copy: Whether the conversion goes through a copy of the value.
        intermediate_type: The intermediate descriptor, once resolved.
    """

    base_type: OpaqueType
    intermediate_name: str
    include_dirs: list[str] = field(default_factory=list)
    needs_copy: bool = False
    intermediate_type: TypeDescriptor | None = None


@dataclass
class OpaqueExtraction:
    """Result of :func:`extract_opaques`.

    Attributes:
        opaques: The opaque definitions, in document order.
        registry: The minimal registry covering the opaques' base types.
    """

    opaques: list[OpaqueDefinition] = field(default_factory=list)
    registry: Registry = field(default_factory=Registry)


def extract_opaques(registry_xml: str, typekit_registry: Registry) -> OpaqueExtraction:
    """Collect the opaque declarations of a registry serialization.

    The document is streamed; only ``<opaque>`` elements are looked at.

    Args:
        registry_xml: The registry serialization.
        typekit_registry: Registry the serialization was loaded into, used to
            resolve the opaque base types.

    Returns:
        The definitions and the minimal registry of their base types. Both
        are empty if the document declares no opaque.

    Raises:
        RegistryError: If the XML is malformed, an ``<opaque>`` element has no
            ``name`` or ``marshal_as`` attribute, or names a type that is not
            opaque in *typekit_registry*.
        NotFound: If an opaque is not registered in *typekit_registry*.
    """
    result = OpaqueExtraction()
    try:
        for _event, element in ET.iterparse(io.StringIO(registry_xml), events=("start",)):
            if element.tag != "opaque":
                continue
            opaque = _opaque_definition(element, typekit_registry)
            result.opaques.append(opaque)
            result.registry.merge(typekit_registry.minimal(opaque.base_type.name))
    except ET.ParseError as exc:
        raise RegistryError(f"invalid registry XML: {exc}") from exc
    logger.debug("found %d opaque declarations", len(result.opaques))
    return result


# ################
# Implementation
# ################


def _opaque_definition(element: ET.Element, typekit_registry: Registry) -> OpaqueDefinition:
    base_type_name = element.get("name")
    intermediate_name = element.get("marshal_as")
    if base_type_name is None or intermediate_name is None:
        raise RegistryError("<opaque> elements need both a 'name' and a 'marshal_as' attribute")

    base_type = typekit_registry.get(base_type_name)
    if not isinstance(base_type, OpaqueType):
        raise RegistryError(f"'{base_type_name}' is declared as an opaque but registered as a {base_type.kind}")

    includes = element.get("includes", "")
    return OpaqueDefinition(
        base_type=base_type,
        intermediate_name=intermediate_name,
        include_dirs=[inc for inc in includes.split(":") if inc],
        needs_copy=element.get("needs_copy") == "1",
    )
