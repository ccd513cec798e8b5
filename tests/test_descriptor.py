from __future__ import annotations

import dataclasses
import logging

import pytest

from pgtypemeta.descriptor import (
    TypeDescriptor,
    TypeDescriptorParser,
    parse_type_descriptor,
)
from pgtypemeta.exceptions import ParseError


class TestParseSupportedForms:
    @pytest.mark.parametrize(
        "type_string, schema, base_type, full_type, normalized_name, is_array",
        [
            ("text", None, "text", "text", "text", False),
            (
                "character varying(255)",
                None,
                "character varying",
                "character varying(255)",
                "varchar",
                False,
            ),
            ("numeric(12,3)", None, "numeric", "numeric(12,3)", "numeric", False),
            (
                "geometry(MultiPolygon,4326)",
                None,
                "geometry",
                "geometry(MultiPolygon,4326)",
                "geometry",
                False,
            ),
            (
                "timestamp (12) with time zone",
                None,
                "timestamp with time zone",
                "timestamp (12) with time zone",
                "timestamptz",
                False,
            ),
            ("int[]", None, "int", "int", "_int4", True),
            ("myschema.geometry", "myschema", "geometry", "geometry", "geometry", False),
            ("_int4", None, "int4", "int4", "_int4", True),
        ],
    )
    def test_structure(
        self, type_string, schema, base_type, full_type, normalized_name, is_array
    ):
        descriptor = parse_type_descriptor(type_string)
        assert descriptor.schema == schema
        assert descriptor.base_type == base_type
        assert descriptor.full_type == full_type
        assert descriptor.normalized_name == normalized_name
        assert descriptor.is_array is is_array

    def test_text_has_no_modifiers(self):
        descriptor = parse_type_descriptor("text")
        assert descriptor.modifiers == ()
        assert descriptor.length is None
        assert descriptor.scale is None

    def test_varchar_length(self):
        descriptor = parse_type_descriptor("character varying(255)")
        assert descriptor.modifiers == ("255",)
        assert descriptor.length == 255
        assert descriptor.scale is None

    def test_numeric_precision_and_scale(self):
        descriptor = parse_type_descriptor("numeric(12,3)")
        assert descriptor.base_type == "numeric"
        assert descriptor.length == 12
        assert descriptor.scale == 3
        assert descriptor.is_array is False

    def test_timestamp_precision_before_suffix(self):
        descriptor = parse_type_descriptor("timestamp (12) with time zone")
        assert descriptor.base_type == "timestamp with time zone"
        assert descriptor.length == 12
        assert descriptor.scale is None

    def test_schema_has_no_trailing_separator(self):
        descriptor = parse_type_descriptor("myschema.geometry")
        assert descriptor.schema == "myschema"
        assert descriptor.schema_prefix == "myschema."
        assert descriptor.base_type_with_schema == "myschema.geometry"
        assert descriptor.full_type_with_schema == "myschema.geometry"

    def test_unqualified_type_has_empty_prefix(self):
        descriptor = parse_type_descriptor("numeric(12,3)")
        assert descriptor.schema_prefix == ""
        assert descriptor.full_type_with_schema == "numeric(12,3)"


class TestSpatialModifiers:
    def test_subtype_is_not_length_but_srid_is_scale(self):
        descriptor = parse_type_descriptor("geometry(MultiPolygon,4326)")
        assert descriptor.modifiers == ("MultiPolygon", "4326")
        assert descriptor.length is None
        assert descriptor.scale == 4326

    def test_schema_qualified_spatial_type(self):
        descriptor = parse_type_descriptor("public.geography(Point,4326)")
        assert descriptor.schema == "public"
        assert descriptor.base_type == "geography"
        assert descriptor.full_type == "geography(Point,4326)"
        assert descriptor.scale == 4326


class TestArrays:
    def test_bracket_suffix(self):
        descriptor = parse_type_descriptor("int[]")
        assert descriptor.base_type == "int"
        assert descriptor.is_array is True
        assert descriptor.normalized_name.startswith("_")

    def test_legacy_underscore_prefix_is_stripped(self):
        descriptor = parse_type_descriptor("_int4")
        assert descriptor.base_type == "int4"
        assert descriptor.full_type == "int4"
        assert descriptor.is_array is True
        assert descriptor.normalized_name == "_int4"

    def test_legacy_prefix_with_bracket_suffix(self):
        descriptor = parse_type_descriptor("_int4[]")
        assert descriptor.base_type == "int4"
        assert descriptor.full_type == "int4"
        assert descriptor.is_array is True
        assert descriptor.normalized_name == "_int4"

    def test_array_with_modifiers(self):
        descriptor = parse_type_descriptor("character varying(255)[]")
        assert descriptor.base_type == "character varying"
        assert descriptor.full_type == "character varying(255)"
        assert descriptor.normalized_name == "_varchar"
        assert descriptor.length == 255
        assert descriptor.is_array is True

    def test_multi_word_array(self):
        descriptor = parse_type_descriptor("timestamp with time zone[]")
        assert descriptor.base_type == "timestamp with time zone"
        assert descriptor.normalized_name == "_timestamptz"
        assert descriptor.is_array is True

    @pytest.mark.parametrize(
        "type_string, base_type",
        [(" _int4", "int4"), ("_ foo", "foo"), ("  _text[]", "text")],
    )
    def test_legacy_prefix_with_surrounding_whitespace(self, type_string, base_type):
        descriptor = parse_type_descriptor(type_string)
        assert descriptor.base_type == base_type
        assert descriptor.full_type == base_type
        assert not descriptor.full_type.startswith("_")
        assert descriptor.is_array is True
        assert descriptor.normalized_name == "_" + base_type

    def test_str_includes_array_suffix(self):
        assert str(parse_type_descriptor("myschema._mytype")) == "myschema.mytype[]"


class TestModifiers:
    def test_whitespace_around_separators_is_trimmed(self):
        descriptor = parse_type_descriptor("numeric( 12 , 3 )")
        assert descriptor.modifiers == ("12", "3")
        assert descriptor.length == 12
        assert descriptor.scale == 3

    def test_enum_like_values_are_kept_in_order(self):
        descriptor = parse_type_descriptor("mood(sad,ok,happy)")
        assert descriptor.modifiers == ("sad", "ok", "happy")
        assert descriptor.length is None
        assert descriptor.scale is None

    def test_signed_integers(self):
        descriptor = parse_type_descriptor("numeric(5,-2)")
        assert descriptor.length == 5
        assert descriptor.scale == -2

    @pytest.mark.parametrize(
        "type_string, length, scale",
        [
            ("numeric(2147483647,3)", 2147483647, 3),
            ("numeric(2147483648,3)", None, 3),
            ("numeric(99999999999,3)", None, 3),
            ("numeric(10,-2147483648)", 10, -2147483648),
            ("numeric(10,-2147483649)", 10, None),
        ],
    )
    def test_values_outside_32_bit_range_are_unset(self, type_string, length, scale):
        descriptor = parse_type_descriptor(type_string)
        assert descriptor.length == length
        assert descriptor.scale == scale

    @pytest.mark.parametrize("token", ["1.5", "1_000", "", "0x10"])
    def test_non_integer_first_token_leaves_length_unset(self, token):
        descriptor = parse_type_descriptor(f"numeric({token},2)")
        assert descriptor.length is None
        assert descriptor.scale == 2


class TestParseFailures:
    @pytest.mark.parametrize(
        "type_string",
        [
            "not a valid type (",
            "numeric(12,3",
            "",
            "   ",
            "_",
            "[]",
            "int[][]",
        ],
    )
    def test_invalid_descriptor_raises(self, type_string):
        with pytest.raises(ParseError):
            parse_type_descriptor(type_string)

    def test_error_carries_column_and_type(self):
        with pytest.raises(ParseError) as exc_info:
            parse_type_descriptor("not a valid type (", column_name="col1")
        assert exc_info.value.column_name == "col1"
        assert exc_info.value.type_string == "not a valid type ("
        assert "Failed to parse column type 'not a valid type (' for column col1" in str(
            exc_info.value
        )

    def test_failure_is_logged(self, caplog):
        with caplog.at_level(logging.ERROR, logger="pgtypemeta.descriptor"):
            with pytest.raises(ParseError):
                parse_type_descriptor("not a valid type (", column_name="col1")
        assert "col1" in caplog.text


class TestParserOptions:
    def test_nullable_is_carried_over(self):
        assert parse_type_descriptor("text", nullable=False).nullable is False
        assert parse_type_descriptor("text").nullable is True

    def test_custom_normalizer(self):
        parser = TypeDescriptorParser(normalizer=str.upper)
        descriptor = parser.parse("int[]")
        assert descriptor.normalized_name == "_INT"
        assert descriptor.base_type == "int"

    def test_normalizer_sees_legacy_adjusted_name(self):
        seen: list[str] = []

        def record(name: str) -> str:
            seen.append(name)
            return name

        TypeDescriptorParser(normalizer=record).parse("_timestamp")
        assert seen == ["timestamp"]

    def test_descriptor_is_immutable(self):
        descriptor = parse_type_descriptor("text")
        with pytest.raises(dataclasses.FrozenInstanceError):
            descriptor.base_type = "varchar"  # type: ignore[misc]

    def test_equal_inputs_give_equal_descriptors(self):
        assert parse_type_descriptor("numeric(12,3)") == TypeDescriptor(
            base_type="numeric",
            full_type="numeric(12,3)",
            normalized_name="numeric",
            length=12,
            scale=3,
            modifiers=("12", "3"),
        )
