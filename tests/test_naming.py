"""Tests for simbind.naming: sanitization rules and native symbol names."""

import pytest

from simbind.errors import GenerationError, NameCollisionError
from simbind.fields import Field
from simbind.naming import (
    NativeSymbols,
    attribute_name,
    check_collisions,
    check_model_name,
    variant_name,
)


class TestAttributeName:
    def test_plain(self) -> None:
        assert attribute_name("position") == "position"

    def test_case_preserved(self) -> None:
        assert attribute_name("Integrator_DSTATE") == "Integrator_DSTATE"

    def test_keyword(self) -> None:
        assert attribute_name("lambda") == "lambda_"

    def test_keyword_from(self) -> None:
        assert attribute_name("from") == "from_"


class TestVariantName:
    def test_upper(self) -> None:
        assert variant_name("position") == "POSITION"

    def test_strip_underscores(self) -> None:
        assert variant_name("__pos_x_") == "POS_X"

    def test_inner_underscores_kept(self) -> None:
        assert variant_name("a__b") == "A__B"

    def test_only_underscores(self) -> None:
        with pytest.raises(GenerationError):
            variant_name("___")

    @pytest.mark.parametrize("name", ["_1st_gain", "__2x", "_9"])
    def test_leading_digit_after_strip(self, name: str) -> None:
        with pytest.raises(GenerationError, match=name):
            variant_name(name)

    def test_inner_digit_kept(self) -> None:
        assert variant_name("_gain_2") == "GAIN_2"


class TestCheckCollisions:
    def test_mapping_in_order(self) -> None:
        fields = [Field("b"), Field("a"), Field("lambda")]
        mapping = check_collisions(fields, attribute_name)
        assert list(mapping.items()) == [("b", "b"), ("a", "a"), ("lambda", "lambda_")]

    def test_duplicate_source_name(self) -> None:
        with pytest.raises(NameCollisionError):
            check_collisions([Field("x"), Field("x", 2)], attribute_name)

    def test_variant_collision_names_both(self) -> None:
        with pytest.raises(NameCollisionError) as exc_info:
            check_collisions([Field("_speed"), Field("Speed")], variant_name)
        err = exc_info.value
        assert (err.first, err.second, err.sanitized) == ("_speed", "Speed", "SPEED")
        assert "'_speed'" in str(err) and "'Speed'" in str(err)

    def test_keyword_suffix_collision(self) -> None:
        with pytest.raises(NameCollisionError) as exc_info:
            check_collisions([Field("lambda_"), Field("lambda")], attribute_name)
        assert exc_info.value.sanitized == "lambda_"

    def test_empty(self) -> None:
        assert check_collisions([], variant_name) == {}


class TestCheckModelName:
    def test_valid(self) -> None:
        assert check_model_name("M1HPloadcells") == "M1HPloadcells"

    @pytest.mark.parametrize("name", ["", "1model", "my-model", "class"])
    def test_invalid(self, name: str) -> None:
        with pytest.raises(GenerationError):
            check_model_name(name)


class TestNativeSymbols:
    def test_convention(self) -> None:
        s = NativeSymbols.for_model("M1HPloadcells")
        assert s.initialize == "M1HPloadcells_initialize"
        assert s.step == "M1HPloadcells_step"
        assert s.terminate == "M1HPloadcells_terminate"
        assert s.inputs_type == "ExtU_M1HPloadcells_T"
        assert s.outputs_type == "ExtY_M1HPloadcells_T"
        assert s.states_type == "DW_M1HPloadcells_T"
        assert s.context_type == "RT_MODEL_M1HPloadcells_T"
        assert s.context_tag == "tag_RTM_M1HPloadcells_T"
        assert s.inputs_global == "M1HPloadcells_U"
        assert s.outputs_global == "M1HPloadcells_Y"
