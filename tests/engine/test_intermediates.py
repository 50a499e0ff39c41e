# Copyright 2026 Typekit Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for intermediate type computation and its reverse mapping."""

import pytest

from typekit.engine import InternalInconsistency, Typekit
from typekit.model import NotFound
from typekit.parser import OpaqueDefinition

# ###############
# Helpers
# ###############

# Opaque types, opaque-containing types, and the intermediates code generation
# would have produced for them.
REGISTRY_XML = """\
<typelib>
  <opaque name="/base/Time" size="8" marshal_as="/base/Time_m" includes="base/Time.hpp" needs_copy="1"/>
  <compound name="/base/Time_m"><field name="microseconds" type="/int64_t"/></compound>
  <opaque name="/base/Angle" size="8" marshal_as="/base/AngleRad" includes="base/Angle.hpp" needs_copy="0"/>
  <compound name="/base/AngleRad"><field name="rad" type="/double"/></compound>

  <compound name="/base/Sample"><field name="time" type="/base/Time"/><field name="value" type="/double"/></compound>
  <compound name="/base/Sample_m"><field name="time" type="/base/Time_m"/><field name="value" type="/double"/></compound>

  <array name="/base/Time[4]" of="/base/Time" dimension="4"/>
  <array name="/base/Time_m[4]" of="/base/Time_m" dimension="4"/>
  <array name="/base/Angle[2]" of="/base/Angle" dimension="2"/>
  <array name="/base/AngleRad[2]" of="/base/AngleRad" dimension="2"/>
  <array name="/base/AngleRad[3]" of="/base/AngleRad" dimension="3"/>

  <container name="/std/vector&lt;/base/Time&gt;" of="/base/Time" kind="/std/vector"/>
  <container name="/std/vector&lt;/base/Time_m&gt;" of="/base/Time_m" kind="/std/vector"/>
  <container name="/std/vector&lt;/base/Angle&gt;" of="/base/Angle" kind="/std/vector"/>
  <container name="/std/vector&lt;/base/AngleRad&gt;" of="/base/AngleRad" kind="/std/vector"/>
  <container name="/std/vector&lt;/base/Point&gt;" of="/base/Point" kind="/std/vector"/>

  <compound name="/wrappers/Holder&lt;/base/Time&gt;"><field name="value" type="/base/Time"/></compound>
  <compound name="/wrappers/Holder__base_Time__m"><field name="value" type="/base/Time_m"/></compound>

  <compound name="/base/Point"><field name="x" type="/double"/></compound>
  <array name="/double[3]" of="/double" dimension="3"/>
  <compound name="/legacy/Counter_m"><field name="count" type="/int32_t"/></compound>
</typelib>
"""

TYPELIST = """\
/base/Time
/base/Angle
/base/Sample
/base/Time[4] 0
/std/vector</base/Time> 0
/wrappers/Holder</base/Time> 0
/base/Point
"""


def _typekit() -> Typekit:
    return Typekit.from_raw_data("base", REGISTRY_XML, TYPELIST)


# ###############
# Intermediate names
# ###############


class TestIntermediateTypeNameFor:
    @pytest.mark.parametrize("name", ["/base/Point", "/double", "/double[3]", "/std/vector</base/Point>"])
    def test_types_without_opaques_are_their_own_intermediate(self, name: str) -> None:
        assert _typekit().intermediate_type_name_for(name) == name

    def test_opaque_uses_declared_intermediate(self) -> None:
        typekit = _typekit()
        assert typekit.intermediate_type_name_for("/base/Time") == "/base/Time_m"
        assert typekit.intermediate_type_name_for("/base/Angle") == "/base/AngleRad"

    def test_array_of_opaques(self) -> None:
        assert _typekit().intermediate_type_name_for("/base/Time[4]") == "/base/Time_m[4]"

    def test_container_of_opaques(self) -> None:
        typekit = _typekit()
        assert typekit.intermediate_type_name_for("/std/vector</base/Time>") == "/std/vector</base/Time_m>"
        assert typekit.intermediate_type_name_for("/std/vector</base/Angle>") == "/std/vector</base/AngleRad>"

    def test_compound_containing_opaques(self) -> None:
        assert _typekit().intermediate_type_name_for("/base/Sample") == "/base/Sample_m"

    def test_template_compound_name_is_sanitized(self) -> None:
        typekit = _typekit()
        name = typekit.intermediate_type_name_for("/wrappers/Holder</base/Time>")
        assert name == "/wrappers/Holder__base_Time__m"

    def test_nested_arrays_and_containers(self) -> None:
        typekit = _typekit()
        typekit.registry.create_array("/base/Sample", 5)
        typekit.registry.create_container("/std/vector", "/base/Sample[5]")
        name = typekit.intermediate_type_name_for("/std/vector</base/Sample[5]>")
        assert name == "/std/vector</base/Sample_m[5]>"

    def test_accepts_descriptors(self) -> None:
        typekit = _typekit()
        assert typekit.intermediate_type_name_for(typekit.registry.get("/base/Sample")) == "/base/Sample_m"

    def test_is_deterministic(self) -> None:
        first = _typekit()
        second = _typekit()
        for name in first.typelist:
            assert first.intermediate_type_name_for(name) == first.intermediate_type_name_for(name)
            assert first.intermediate_type_name_for(name) == second.intermediate_type_name_for(name)

    def test_unknown_type(self) -> None:
        with pytest.raises(NotFound):
            _typekit().intermediate_type_name_for("/base/Unknown")


class TestIntermediateTypeFor:
    def test_opaque(self) -> None:
        typekit = _typekit()
        intermediate = typekit.intermediate_type_for("/base/Time")
        assert intermediate is typekit.registry.get("/base/Time_m")

    def test_opaque_caches_resolved_intermediate(self) -> None:
        typekit = _typekit()
        typekit.intermediate_type_for("/base/Angle")
        assert typekit.opaque_specification("/base/Angle").intermediate_type is typekit.registry.get("/base/AngleRad")

    def test_plain_type_is_its_own_intermediate(self) -> None:
        typekit = _typekit()
        assert typekit.intermediate_type_for("/base/Point") is typekit.registry.get("/base/Point")

    def test_missing_generated_intermediate(self) -> None:
        typekit = Typekit("t")
        typekit.registry.add_standard_types()
        opaque = typekit.create_opaque("/a/T")
        typekit.opaques.append(OpaqueDefinition(base_type=opaque, intermediate_name="/a/T_m"))
        typekit.create_compound("/a/S", {"t": "/a/T"})
        with pytest.raises(NotFound, match="/a/S_m"):
            typekit.intermediate_type_for("/a/S")


# ###############
# Reverse mapping
# ###############


class TestFindOpaqueForIntermediate:
    def test_generated_intermediate_of_opaque(self) -> None:
        typekit = _typekit()
        assert typekit.find_opaque_for_intermediate("/base/Time_m") is typekit.registry.get("/base/Time")

    def test_declared_intermediate_without_suffix(self) -> None:
        typekit = _typekit()
        assert typekit.find_opaque_for_intermediate("/base/AngleRad") is typekit.registry.get("/base/Angle")

    def test_generated_compound(self) -> None:
        typekit = _typekit()
        assert typekit.find_opaque_for_intermediate("/base/Sample_m").name == "/base/Sample"
        assert typekit.find_opaque_for_intermediate("/wrappers/Holder__base_Time__m").name == (
            "/wrappers/Holder</base/Time>"
        )

    def test_array_and_container_of_generated_intermediates(self) -> None:
        typekit = _typekit()
        assert typekit.find_opaque_for_intermediate("/base/Time_m[4]").name == "/base/Time[4]"
        assert typekit.find_opaque_for_intermediate("/std/vector</base/Time_m>").name == "/std/vector</base/Time>"

    def test_container_of_declared_intermediate(self) -> None:
        typekit = _typekit()
        opaque = typekit.find_opaque_for_intermediate("/std/vector</base/AngleRad>")
        assert opaque is typekit.registry.get("/std/vector</base/Angle>")

    def test_array_of_declared_intermediate(self) -> None:
        typekit = _typekit()
        opaque = typekit.find_opaque_for_intermediate("/base/AngleRad[2]")
        assert opaque is typekit.registry.get("/base/Angle[2]")

    def test_array_of_declared_intermediate_with_or_without_index(self) -> None:
        typekit = _typekit()
        before = typekit.find_opaque_for_intermediate("/base/AngleRad[2]")
        assert typekit.is_intermediate_type("/base/AngleRad[2]")
        typekit.build_intermediate_index()
        assert typekit.find_opaque_for_intermediate("/base/AngleRad[2]") is before
        assert typekit.opaque_type_for("/base/AngleRad[2]") is before

    def test_array_of_declared_intermediate_without_opaque_array(self) -> None:
        with pytest.raises(NotFound, match=r"/base/Angle\[3\]"):
            _typekit().find_opaque_for_intermediate("/base/AngleRad[3]")

    def test_suffixed_type_that_is_no_intermediate(self) -> None:
        assert _typekit().find_opaque_for_intermediate("/legacy/Counter_m") is None

    @pytest.mark.parametrize("name", ["/base/Point", "/double[3]", "/std/vector</base/Point>", "/base/Time"])
    def test_not_an_intermediate(self, name: str) -> None:
        assert _typekit().find_opaque_for_intermediate(name) is None

    def test_unknown_type(self) -> None:
        with pytest.raises(NotFound):
            _typekit().find_opaque_for_intermediate("/base/Unknown_m")

    def test_index_is_built_lazily_once(self, monkeypatch: pytest.MonkeyPatch) -> None:
        typekit = _typekit()
        calls: list[None] = []
        original = typekit.build_intermediate_index

        def counting_build() -> dict:
            calls.append(None)
            return original()

        monkeypatch.setattr(typekit, "build_intermediate_index", counting_build)
        typekit.find_opaque_for_intermediate("/base/Point")
        assert calls == []
        typekit.find_opaque_for_intermediate("/base/Time_m")
        typekit.find_opaque_for_intermediate("/base/Sample_m")
        assert len(calls) == 1

    def test_eager_index(self) -> None:
        typekit = _typekit()
        index = typekit.build_intermediate_index()
        assert index["/base/Time_m"] is typekit.registry.get("/base/Time")
        assert index["/base/AngleRad[2]"] is typekit.registry.get("/base/Angle[2]")
        assert typekit.find_opaque_for_intermediate("/base/AngleRad").name == "/base/Angle"

    def test_undeclared_opaque_breaks_index(self) -> None:
        typekit = _typekit()
        typekit.registry.create_opaque("/base/Undeclared")
        with pytest.raises(InternalInconsistency):
            typekit.find_opaque_for_intermediate("/base/Time_m")


class TestOpaqueTypeFor:
    @pytest.mark.parametrize(
        "name",
        [
            "/base/Time",
            "/base/Angle",
            "/base/Sample",
            "/base/Time[4]",
            "/base/Angle[2]",
            "/std/vector</base/Time>",
            "/std/vector</base/Angle>",
            "/wrappers/Holder</base/Time>",
        ],
    )
    def test_round_trip(self, name: str) -> None:
        typekit = _typekit()
        original = typekit.resolve_type(name)
        assert typekit.opaque_type_for(typekit.intermediate_type_for(original)) is original

    def test_non_intermediate_is_returned_as_is(self) -> None:
        typekit = _typekit()
        assert typekit.opaque_type_for("/base/Point") is typekit.registry.get("/base/Point")


class TestIsIntermediateType:
    def test_intermediates(self) -> None:
        typekit = _typekit()
        assert typekit.is_intermediate_type("/base/Time_m")
        assert typekit.is_intermediate_type("/base/AngleRad")
        assert typekit.is_intermediate_type("/std/vector</base/Time_m>")

    def test_non_intermediates(self) -> None:
        typekit = _typekit()
        assert not typekit.is_intermediate_type("/base/Time")
        assert not typekit.is_intermediate_type("/legacy/Counter_m")


class TestIsMType:
    def test_suffix(self) -> None:
        typekit = _typekit()
        assert typekit.is_m_type("/base/Time_m")
        assert typekit.is_m_type("/legacy/Counter_m")
        assert not typekit.is_m_type("/base/AngleRad")

    def test_element_of_array_or_container(self) -> None:
        typekit = _typekit()
        assert typekit.is_m_type("/base/Time_m[4]")
        assert typekit.is_m_type("/std/vector</base/Time_m>")
        assert not typekit.is_m_type("/std/vector</base/AngleRad>")
        assert not typekit.is_m_type("/double[3]")
