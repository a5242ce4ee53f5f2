"""Tests for sasscmd/registry.py: option schema and value resolvers."""

from __future__ import annotations

import pytest

from sasscmd.constants import OUTPUT_STYLES, OriginKind
from sasscmd.engine import NativeOptions
from sasscmd.errors import (
    ArgumentTypeError,
    OptionSetterMissingError,
    UnknownOptionError,
    UnsupportedContextTypeError,
)
from sasscmd.registry import (
    OPTION_NAMES,
    OPTIONS,
    RESOLVERS,
    OptionDescriptor,
    ValueKind,
    apply_option,
    lookup,
    resolve_boolean,
    resolve_context_type,
    resolve_integer,
    resolve_output_style,
    resolve_string,
)

EXPECTED_NAMES = (
    "precision",
    "output_style",
    "source_comments",
    "source_map_embed",
    "source_map_contents",
    "omit_source_map_url",
    "is_indented_syntax_src",
    "indent",
    "linefeed",
    "input_path",
    "output_path",
    "image_path",
    "include_path",
    "source_map_file",
)


class TestRegistryTable:
    def test_names_are_unique_and_complete(self):
        assert OPTION_NAMES == EXPECTED_NAMES
        assert len(set(OPTION_NAMES)) == len(OPTION_NAMES)
        assert all(OPTION_NAMES)

    def test_every_kind_has_a_resolver(self):
        assert set(RESOLVERS) == set(ValueKind)

    def test_only_image_path_is_inert(self):
        inert = [d.name for d in OPTIONS if d.setter is None]
        assert inert == ["image_path"]
        assert lookup("image_path").inert

    def test_lookup_is_exact(self):
        assert lookup("precision").kind is ValueKind.INTEGER
        with pytest.raises(UnknownOptionError):
            lookup("prec")
        with pytest.raises(UnknownOptionError):
            lookup("PRECISION")

    def test_unknown_option_lists_every_name_once(self):
        with pytest.raises(UnknownOptionError) as excinfo:
            lookup("bogus")
        message = excinfo.value.message
        assert message.startswith('bad option "bogus": must be precision, ')
        assert message.endswith(", or source_map_file")
        listed = message.split("must be ", 1)[1].replace(", or ", ", ").split(", ")
        assert listed == list(EXPECTED_NAMES)
        assert excinfo.value.valid_names == EXPECTED_NAMES


class TestIntegerResolver:
    @pytest.mark.parametrize("raw, expected", [(3, 3), ("10", 10), (" 7 ", 7), ("-2", -2)])
    def test_accepts_integers(self, raw, expected):
        assert resolve_integer(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "1.5", "", True, 2.0, None])
    def test_rejects_malformed(self, raw):
        with pytest.raises(ArgumentTypeError, match="expected integer"):
            resolve_integer(raw)

    @pytest.mark.parametrize("raw", [2**31, -(2**31) - 1, 10**12, "99999999999"])
    def test_rejects_values_outside_c_int(self, raw):
        with pytest.raises(ArgumentTypeError, match="expected integer"):
            resolve_integer(raw)

    def test_c_int_bounds_are_accepted(self):
        assert resolve_integer(2**31 - 1) == 2**31 - 1
        assert resolve_integer(str(-(2**31))) == -(2**31)


class TestBooleanResolver:
    @pytest.mark.parametrize("raw", [True, 1, "1", "true", "Yes", "ON"])
    def test_true_literals(self, raw):
        assert resolve_boolean(raw) is True

    @pytest.mark.parametrize("raw", [False, 0, "0", "false", "no", "Off"])
    def test_false_literals(self, raw):
        assert resolve_boolean(raw) is False

    @pytest.mark.parametrize("raw", ["maybe", 2, "", None])
    def test_rejects_other_values(self, raw):
        with pytest.raises(ArgumentTypeError, match="expected boolean value"):
            resolve_boolean(raw)


class TestOutputStyleResolver:
    @pytest.mark.parametrize("style", OUTPUT_STYLES)
    def test_accepts_each_style(self, style):
        assert resolve_output_style(style) == style

    @pytest.mark.parametrize("raw", ["Nested", "compress", "compressed ", "", 1])
    def test_rejects_others_listing_all_four(self, raw):
        with pytest.raises(ArgumentTypeError) as excinfo:
            resolve_output_style(raw)
        assert "nested, expanded, compact, or compressed" in excinfo.value.message


class TestStringResolver:
    def test_accepts_text_bytes_and_numbers(self):
        assert resolve_string("") == ""
        assert resolve_string("\t") == "\t"
        assert resolve_string(b"lib") == "lib"
        assert resolve_string(4) == "4"

    def test_rejects_containers(self):
        with pytest.raises(ArgumentTypeError):
            resolve_string(["a"])


class TestContextType:
    def test_data_and_file(self):
        assert resolve_context_type("data") is OriginKind.DATA
        assert resolve_context_type("file") is OriginKind.FILE

    @pytest.mark.parametrize("raw", ["folder", "Data", "", "unset"])
    def test_rejects_everything_else(self, raw):
        with pytest.raises(UnsupportedContextTypeError, match="must be data or file"):
            resolve_context_type(raw)


class TestApplyOption:
    def test_setter_receives_typed_value(self):
        options = NativeOptions()
        assert apply_option(options, "precision", "8") == 8
        assert apply_option(options, "source_comments", "yes") is True
        assert apply_option(options, "output_style", "compressed") == "compressed"
        assert options.precision == 8
        assert options.source_comments is True
        assert options.output_style == "compressed"

    def test_inert_option_is_accepted_without_effect(self):
        options = NativeOptions()
        before = vars(options).copy()
        assert apply_option(options, "image_path", "img/") == "img/"
        assert vars(options) == before

    def test_missing_setter_is_a_defect(self):
        registry = (OptionDescriptor("broken", ValueKind.STRING, None),)
        with pytest.raises(OptionSetterMissingError):
            apply_option(NativeOptions(), "broken", "x", registry)

    def test_type_error_leaves_options_untouched(self):
        options = NativeOptions()
        with pytest.raises(ArgumentTypeError):
            apply_option(options, "precision", "many")
        assert options.precision == 5
