"""Tests for dot-path argument lookup."""

from dataclasses import dataclass

import pytest
import strawberry

from chardb.core.acl.paths import MISSING, get_nested_value, is_blank, split_path


@dataclass
class UpdateTraitInput:
    trait_id: str
    name: str | None = None


class TestSplitPath:
    def test_splits_segments(self) -> None:
        assert split_path("input.trait_id") == ("input", "trait_id")

    @pytest.mark.parametrize("path", ["", ".", "input.", ".id", "a..b"])
    def test_rejects_empty_segments(self, path: str) -> None:
        with pytest.raises(ValueError, match="Invalid argument path"):
            split_path(path)


class TestGetNestedValue:
    def test_top_level_key(self) -> None:
        assert get_nested_value({"id": "s1"}, "id") == "s1"

    def test_nested_mapping(self) -> None:
        args = {"input": {"species_id": "s1"}}
        assert get_nested_value(args, "input.species_id") == "s1"

    def test_attribute_on_input_object(self) -> None:
        args = {"input": UpdateTraitInput(trait_id="t1")}
        assert get_nested_value(args, "input.trait_id") == "t1"

    def test_sequence_index(self) -> None:
        args = {"ids": ["a", "b"]}
        assert get_nested_value(args, "ids.1") == "b"
        assert get_nested_value(args, "ids.-1") == "b"

    def test_sequence_index_out_of_range_is_missing(self) -> None:
        assert get_nested_value({"ids": ["a"]}, "ids.3") is MISSING

    def test_non_numeric_segment_on_sequence_is_missing(self) -> None:
        assert get_nested_value({"ids": ["a"]}, "ids.first") is MISSING

    def test_missing_key_is_missing(self) -> None:
        assert get_nested_value({"input": {}}, "input.species_id") is MISSING

    def test_explicit_none_is_preserved(self) -> None:
        assert get_nested_value({"input": {"species_id": None}}, "input.species_id") is None

    def test_walking_through_none_is_missing(self) -> None:
        assert get_nested_value({"input": None}, "input.species_id") is MISSING

    def test_strings_are_not_indexed(self) -> None:
        assert get_nested_value({"id": "abc"}, "id.0") is MISSING

    def test_missing_is_falsy(self) -> None:
        assert not MISSING
        assert repr(MISSING) == "MISSING"

    def test_unset_input_field_is_missing(self) -> None:
        args = {"input": UpdateTraitInput(trait_id=strawberry.UNSET)}
        assert get_nested_value(args, "input.trait_id") is MISSING

    def test_walking_through_unset_is_missing(self) -> None:
        assert get_nested_value({"input": strawberry.UNSET}, "input.trait_id") is MISSING


class TestIsBlank:
    @pytest.mark.parametrize("value", [MISSING, strawberry.UNSET, None, "", [], ()])
    def test_blank_values(self, value: object) -> None:
        assert is_blank(value)

    @pytest.mark.parametrize("value", ["t1", ["t1"], 0, ("a",)])
    def test_present_values(self, value: object) -> None:
        assert not is_blank(value)
