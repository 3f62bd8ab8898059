"""Tests for querybind.convert — scalar conversion of query text."""

import math

import pytest

from querybind.convert import CONVERTERS, ZEROS, convert_scalar
from querybind.errors import ConversionError


class TestBool:
    @pytest.mark.parametrize("text", ["", "1", "t", "T", "TRUE", "true", "True"])
    def test_true(self, text: str) -> None:
        assert convert_scalar("bool", text) is True

    @pytest.mark.parametrize("text", ["0", "f", "F", "FALSE", "false", "False"])
    def test_false(self, text: str) -> None:
        assert convert_scalar("bool", text) is False

    @pytest.mark.parametrize("text", ["yes", "on", "tRUE", " true", "2"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ConversionError, match="invalid syntax"):
            convert_scalar("bool", text)


class TestIntegers:
    @pytest.mark.parametrize(
        ("kind", "text", "expected"),
        [
            ("int8", "-128", -128),
            ("int8", "127", 127),
            ("int16", "+300", 300),
            ("int32", "-2147483648", -(2**31)),
            ("int64", "9223372036854775807", 2**63 - 1),
            ("uint8", "255", 255),
            ("uint16", "0", 0),
            ("uint64", "18446744073709551615", 2**64 - 1),
            ("int64", "007", 7),
        ],
    )
    def test_valid(self, kind: str, text: str, expected: int) -> None:
        assert convert_scalar(kind, text) == expected

    @pytest.mark.parametrize(
        ("kind", "text"),
        [
            ("int8", "128"),
            ("int8", "-129"),
            ("int64", "9223372036854775808"),
            ("uint8", "256"),
            ("uint64", "18446744073709551616"),
        ],
    )
    def test_out_of_range(self, kind: str, text: str) -> None:
        with pytest.raises(ConversionError) as exc_info:
            convert_scalar(kind, text)
        assert exc_info.value.reason == "value out of range"
        assert exc_info.value.text == text

    @pytest.mark.parametrize(
        ("kind", "text"),
        [
            ("int64", ""),
            ("int64", "abc"),
            ("int64", "1_000"),
            ("int64", " 1"),
            ("int64", "1.5"),
            ("int64", "٣"),
            ("uint8", "-1"),
            ("uint8", "+1"),
        ],
    )
    def test_invalid_syntax(self, kind: str, text: str) -> None:
        with pytest.raises(ConversionError, match="invalid syntax"):
            convert_scalar(kind, text)


class TestFloats:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("3.45", 3.45), ("-1e3", -1000.0), (".5", 0.5), ("2.", 2.0), ("+0", 0.0)],
    )
    def test_float64(self, text: str, expected: float) -> None:
        assert convert_scalar("float64", text) == expected

    @pytest.mark.parametrize("text", ["inf", "-Inf", "+infinity", "INF"])
    def test_infinity(self, text: str) -> None:
        assert math.isinf(convert_scalar("float64", text))

    def test_nan(self) -> None:
        assert math.isnan(convert_scalar("float64", "NaN"))

    def test_float64_overflow(self) -> None:
        with pytest.raises(ConversionError, match="out of range"):
            convert_scalar("float64", "1e400")

    def test_float32_rounds(self) -> None:
        assert convert_scalar("float32", "0.1") != 0.1
        assert convert_scalar("float32", "0.1") == pytest.approx(0.1)

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("1.0000000596046447753906251", 1 + 2**-23),
            ("1.0000000596046447753906249", 1.0),
            ("1.000000059604644775390625", 1.0),
            ("1.000000178813934326171875", 1 + 2**-22),
            ("-1.0000000596046447753906251", -(1 + 2**-23)),
        ],
    )
    def test_float32_rounds_once(self, text: str, expected: float) -> None:
        assert convert_scalar("float32", text) == expected

    def test_float32_overflow(self) -> None:
        with pytest.raises(ConversionError, match="out of range"):
            convert_scalar("float32", "1e39")

    @pytest.mark.parametrize("text", ["", "abc", "1_0", "1e", "0x10", " 1.0", "--1"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(ConversionError, match="invalid syntax"):
            convert_scalar("float64", text)


class TestTable:
    def test_string_verbatim(self) -> None:
        assert convert_scalar("str", " spaced ") == " spaced "

    def test_every_converter_has_zero(self) -> None:
        assert set(CONVERTERS) == set(ZEROS)

    def test_unknown_kind(self) -> None:
        with pytest.raises(KeyError):
            convert_scalar("complex", "1")

    def test_field_name_in_message(self) -> None:
        with pytest.raises(ConversionError, match="field 'page'"):
            convert_scalar("int32", "x", "page")
