"""Tests for sasscmd/parser.py: flag scanning before the source argument."""

from __future__ import annotations

import pytest

from sasscmd.constants import OriginKind
from sasscmd.engine import NativeOptions
from sasscmd.errors import (
    ArgumentError,
    ArgumentTypeError,
    MalformedDictionaryError,
    UnknownOptionError,
    UnsupportedContextTypeError,
)
from sasscmd.parser import dictionary_pairs, parse_options


def scan(*args, start=1):
    options = NativeOptions()
    return parse_options(["compile", *args], start, options), options


class TestScanning:
    def test_defaults_to_data_origin(self):
        parsed, _ = scan("a { b: c; }")
        assert parsed.origin is OriginKind.DATA
        assert parsed.index == 1

    def test_type_flag(self):
        parsed, _ = scan("-type", "file", "style.scss")
        assert parsed.origin is OriginKind.FILE
        assert parsed.index == 3

    def test_last_type_wins(self):
        parsed, _ = scan("-type", "file", "-type", "data", "x")
        assert parsed.origin is OriginKind.DATA

    def test_double_dash_ends_scanning(self):
        parsed, _ = scan("--", "-type")
        assert parsed.index == 2
        assert parsed.origin is OriginKind.DATA

    def test_double_dash_at_end_yields_none(self):
        parsed, _ = scan("-type", "data", "--")
        assert parsed.index is None

    def test_exhausted_arguments_yield_none(self):
        parsed, _ = scan("-type", "file")
        assert parsed.index is None

    def test_unrecognized_token_stops_at_its_index(self):
        parsed, _ = scan("-bogus", "x")
        assert parsed.index == 1

    def test_start_index_is_respected(self):
        options = NativeOptions()
        parsed = parse_options(["x", "y", "-type", "file", "src"], 2, options)
        assert parsed.origin is OriginKind.FILE
        assert parsed.index == 4


class TestFlagErrors:
    def test_missing_context_type(self):
        with pytest.raises(ArgumentError, match="missing context type"):
            scan("-type")

    def test_bad_context_type(self):
        with pytest.raises(UnsupportedContextTypeError):
            scan("-type", "folder", "x")

    def test_missing_dictionary(self):
        with pytest.raises(ArgumentError, match="missing options dictionary"):
            scan("-options")

    def test_options_only_once(self):
        with pytest.raises(ArgumentError, match="only be given once"):
            scan("-options", "precision 3", "-options", "precision 4", "x")


class TestOptionsDictionary:
    def test_applies_pairs_to_native_options(self):
        parsed, options = scan(
            "-options", ["precision", "3", "output_style", "expanded"], "x"
        )
        assert options.precision == 3
        assert options.output_style == "expanded"
        assert parsed.request.options == {"precision": 3, "output_style": "expanded"}

    def test_string_dictionary(self):
        _, options = scan("-options", "source_comments true precision 4", "x")
        assert options.source_comments is True
        assert options.precision == 4

    def test_string_dictionary_with_quotes(self):
        _, options = scan("-options", "linefeed '\r\n' include_path 'a b'", "x")
        assert options.linefeed == "\r\n"
        assert options.include_path == "a b"

    def test_mapping_dictionary(self):
        _, options = scan("-options", {"precision": 2}, "x")
        assert options.precision == 2

    @pytest.mark.parametrize(
        "value",
        [["precision"], "precision 3 output_style", ("a", "b", "c"), [1, 2, 3, 4, 5]],
    )
    def test_odd_length_is_malformed(self, value):
        with pytest.raises(MalformedDictionaryError):
            scan("-options", value, "x")

    def test_non_sequence_is_malformed(self):
        with pytest.raises(MalformedDictionaryError):
            scan("-options", 42, "x")

    def test_unbalanced_quotes_are_malformed(self):
        with pytest.raises(MalformedDictionaryError):
            dictionary_pairs("indent 'x")

    def test_duplicate_keys_keep_last_value(self):
        assert dictionary_pairs(["precision", "1", "precision", "2"]) == {
            "precision": "2"
        }

    def test_unknown_key_aborts_without_rollback(self):
        options = NativeOptions()
        with pytest.raises(UnknownOptionError):
            parse_options(
                ["compile", "-options", ["precision", "9", "bogus", "1"], "x"],
                1,
                options,
            )
        assert options.precision == 9

    def test_type_error_aborts(self):
        with pytest.raises(ArgumentTypeError):
            scan("-options", ["source_comments", "perhaps"], "x")
