# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Readers for the typelist and registry files that make up a typekit."""

from typekit.parser.opaques import OpaqueDefinition, OpaqueExtraction, extract_opaques
from typekit.parser.registry_xml import merge_xml, parse_registry_xml
from typekit.parser.typelist import Typelist, parse_typelist

__all__ = [
    "Typelist",
    "parse_typelist",
    "parse_registry_xml",
    "merge_xml",
    "OpaqueDefinition",
    "OpaqueExtraction",
    "extract_opaques",
]
