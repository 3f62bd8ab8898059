"""querybind exception hierarchy.

Shared by the parser, the field kinds, and the decoder so every module
raises and catches the same types.

Input problems (bad target, malformed query, bad literal, unsupported
field type) derive from ``QueryBindError``.  Programming defects, such as
an annotation that cannot be resolved, are never wrapped and propagate
as the builtin exception that reported them.
"""

from dataclasses import dataclass


class QueryBindError(Exception):
    """Base for all querybind-specific errors."""


class ConfigurationError(QueryBindError):
    """Raised when a ``DecoderConfig`` is invalid."""


@dataclass(frozen=True)
class InvalidTargetError(QueryBindError, TypeError):
    """``decode()`` was given something it cannot write through.

    ``type`` is the type of the rejected value, or ``None`` when the
    target itself was ``None``.  For a dataclass *class* passed instead
    of an instance, ``type`` is that class.
    """

    type: type | None
    reason: str = "non-dataclass"

    def __str__(self) -> str:
        if self.type is None:
            return "querybind: decode(None)"
        return f"querybind: decode({self.reason} {_type_name(self.type)})"


@dataclass(frozen=True)
class QueryParseError(QueryBindError, ValueError):
    """The raw query string is malformed."""

    text: str
    reason: str

    def __str__(self) -> str:
        return f"querybind: invalid query {self.text!r}: {self.reason}"


@dataclass(frozen=True)
class UnsupportedTypeError(QueryBindError, TypeError):
    """A participating field has a type the decoder does not implement.

    Nested dataclasses, mappings, and unions other than ``T | None`` all
    end up here.
    """

    type: object
    field: str | None = None

    def __str__(self) -> str:
        msg = f"querybind: {_type_name(self.type)} is not supported"
        if self.field:
            return f"{msg} (field {self.field!r})"
        return msg


@dataclass(frozen=True)
class ConversionError(QueryBindError, ValueError):
    """A query value cannot be converted to the field's scalar kind.

    ``reason`` is ``"invalid syntax"`` or ``"value out of range"``.
    The underlying failure is chained as ``__cause__``.
    """

    text: str
    kind: str
    reason: str = "invalid syntax"
    field: str | None = None

    def __str__(self) -> str:
        msg = f"querybind: parsing {self.text!r} as {self.kind}: {self.reason}"
        if self.field:
            return f"{msg} (field {self.field!r})"
        return msg


def _type_name(tp: object) -> str:
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)
