"""Scalar conversion from query text to typed values.

Built-in converters keyed by kind name, e.g. ``"int32"`` or ``"bool"``.
Each converter is a callable with the signature::

    def convert(text: str) -> object:
        '''Return the converted value or raise ValueError(reason).'''

``convert_scalar()`` looks up the converter and turns its ``ValueError``
into a ``ConversionError`` naming the offending text.
"""

import math
import re
import struct
from collections.abc import Callable
from fractions import Fraction

from querybind.errors import ConversionError

type Converter = Callable[[str], object]

INVALID_SYNTAX = "invalid syntax"
OUT_OF_RANGE = "value out of range"

_SIGNED_RE = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_RE = re.compile(r"[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_SPECIAL_FLOAT_RE = re.compile(r"[+-]?(?:inf|infinity|nan)", re.IGNORECASE)

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


def to_str(text: str) -> str:
    """Already percent-decoded by the parser; kept verbatim."""
    return text


def to_bool(text: str) -> bool:
    """Flag form (empty value) is True; otherwise a strict boolean literal."""
    if text == "":
        return True
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(INVALID_SYNTAX)


# ---------------------------------------------------------------------------
# Integers
# ---------------------------------------------------------------------------


def signed(bits: int) -> Converter:
    """Base-10 signed integer that fits in *bits*."""
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1

    def convert(text: str) -> int:
        if not _SIGNED_RE.fullmatch(text):
            raise ValueError(INVALID_SYNTAX)
        value = int(text)
        if not low <= value <= high:
            raise ValueError(OUT_OF_RANGE)
        return value

    return convert


def unsigned(bits: int) -> Converter:
    """Base-10 unsigned integer that fits in *bits*. No sign allowed."""
    high = (1 << bits) - 1

    def convert(text: str) -> int:
        if not _UNSIGNED_RE.fullmatch(text):
            raise ValueError(INVALID_SYNTAX)
        value = int(text)
        if value > high:
            raise ValueError(OUT_OF_RANGE)
        return value

    return convert


# ---------------------------------------------------------------------------
# Floating point
# ---------------------------------------------------------------------------


def to_float64(text: str) -> float:
    """Decimal or exponential literal, or inf/infinity/nan."""
    if _SPECIAL_FLOAT_RE.fullmatch(text):
        return float(text)
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(INVALID_SYNTAX)
    value = float(text)
    if math.isinf(value):
        raise ValueError(OUT_OF_RANGE)
    return value


def to_float32(text: str) -> float:
    """Like ``to_float64``, rounded once to single precision.

    Going through float64 first can land exactly on a float32 halfway
    point and round the wrong way; the exact decimal value settles it.
    """
    value = to_float64(text)
    try:
        single = _round32(value)
    except OverflowError as e:
        raise ValueError(OUT_OF_RANGE) from e
    if not math.isfinite(value) or value == single:
        return single

    exact = Fraction(text)
    neighbour = _step32(single, up=exact > Fraction(single))
    if math.isfinite(neighbour) and abs(Fraction(neighbour) - exact) < abs(Fraction(single) - exact):
        return neighbour
    return single


def _round32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _step32(single: float, *, up: bool) -> float:
    """The adjacent float32 above or below *single*."""
    if single == 0:
        bits = 0x00000001 if up else 0x80000001
    else:
        (bits,) = struct.unpack("<I", struct.pack("<f", single))
        bits += 1 if (single > 0) == up else -1
    return struct.unpack("<f", struct.pack("<I", bits))[0]


CONVERTERS: dict[str, Converter] = {
    "str": to_str,
    "bool": to_bool,
    "int8": signed(8),
    "int16": signed(16),
    "int32": signed(32),
    "int64": signed(64),
    "uint8": unsigned(8),
    "uint16": unsigned(16),
    "uint32": unsigned(32),
    "uint64": unsigned(64),
    "float32": to_float32,
    "float64": to_float64,
}

ZEROS: dict[str, object] = {
    "str": "",
    "bool": False,
    **dict.fromkeys(("int8", "int16", "int32", "int64"), 0),
    **dict.fromkeys(("uint8", "uint16", "uint32", "uint64"), 0),
    "float32": 0.0,
    "float64": 0.0,
}


def convert_scalar(kind: str, text: str, field: str | None = None) -> object:
    """Convert *text* with the converter registered for *kind*.

    Raises ``ConversionError`` if the text is not a valid literal.
    Raises ``KeyError`` if *kind* is not a registered converter.
    """
    converter = CONVERTERS[kind]
    try:
        return converter(text)
    except ValueError as e:
        raise ConversionError(text, kind, str(e), field) from e
