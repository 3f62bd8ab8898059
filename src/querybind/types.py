"""Field type vocabulary for decodable dataclasses.

Python integers and floats carry no width, so fixed-width kinds are
spelled as ``Annotated`` aliases carrying a ``Bits`` marker::

    @dataclass
    class Page:
        size: Uint16 = param("size", default=20)
        scale: Float32 = param("scale", default=1.0)

``Ref[T]`` is a mutable box for fields whose storage is shared with the
caller, and ``TextUnmarshaler`` is the single custom conversion hook.
"""

from dataclasses import dataclass
from typing import Annotated, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class Bits:
    """Declared bit width of an ``int`` or ``float`` field."""

    bits: int
    signed: bool = True


Int8 = Annotated[int, Bits(8)]
Int16 = Annotated[int, Bits(16)]
Int32 = Annotated[int, Bits(32)]
Int64 = Annotated[int, Bits(64)]

Uint8 = Annotated[int, Bits(8, signed=False)]
Uint16 = Annotated[int, Bits(16, signed=False)]
Uint32 = Annotated[int, Bits(32, signed=False)]
Uint64 = Annotated[int, Bits(64, signed=False)]
Uint = Uint64

Float32 = Annotated[float, Bits(32)]
Float64 = Annotated[float, Bits(64)]


class Ref[T]:
    """A mutable box around a value.

    A ``Ref`` field that already holds a box is decoded in place: the
    box is kept and only ``value`` changes, so anyone sharing the box
    observes the decoded value.

    Usage::

        page = Ref(1)
        opts = Options(page=page)
        decode("page=3", opts)
        page.value  # 3
    """

    __slots__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ref):
            return NotImplemented
        return self.value == other.value

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Ref({self.value!r})"


@runtime_checkable
class TextUnmarshaler(Protocol):
    """A value that sets itself from query text.

    Fields holding (or declared as) such a type bypass the built-in
    conversions.  The hook receives the first query value for the key
    and mutates the object in place; an empty first value is skipped.
    Whatever the hook raises propagates unchanged.
    """

    def unmarshal_text(self, text: str) -> None: ...
