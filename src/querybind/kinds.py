"""Field kinds: the closed set of shapes a decodable field can take.

Each dataclass type is resolved into a tuple of ``FieldPlan``
entries (LRU-cached per class and tag).  Resolution never fails on an
unsupported annotation; it produces ``Unsupported`` and the decoder
raises only if a query key actually reaches that field.

Resolution rules:

- ``str``, ``bool``, ``int``, ``float`` and the ``Bits`` aliases -> ``Scalar``
- ``tuple[A, B, ...]`` (fixed length) -> ``Array``
- ``list[T]`` and ``tuple[T, ...]`` -> ``Sequence``
- ``T | None`` -> ``Nullable``
- ``Ref[T]`` and ``Ref[T] | None`` -> ``Boxed``
- a class implementing ``TextUnmarshaler`` -> ``Hook``
- anything else (dataclasses, dicts, other unions) -> ``Unsupported``
"""

import dataclasses
import functools
import logging
import types
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any, Union, get_args, get_origin, get_type_hints

from querybind.convert import ZEROS
from querybind.fields import lookup_key
from querybind.types import Bits, Ref, TextUnmarshaler

logger = logging.getLogger("querybind")

# Resolved dataclass types kept at once; older ones are resolved again on use
PLAN_CACHE_SIZE = 256


@dataclass(frozen=True, slots=True)
class Scalar:
    name: str
    source: Any


@dataclass(frozen=True, slots=True)
class Array:
    elements: tuple["Kind", ...]
    source: Any


@dataclass(frozen=True, slots=True)
class Sequence:
    element: "Kind"
    factory: Callable[..., Any]
    source: Any


@dataclass(frozen=True, slots=True)
class Nullable:
    inner: "Kind"
    source: Any


@dataclass(frozen=True, slots=True)
class Boxed:
    inner: "Kind"
    nullable: bool
    source: Any


@dataclass(frozen=True, slots=True)
class Hook:
    factory: type
    source: Any


@dataclass(frozen=True, slots=True)
class Unsupported:
    source: Any


type Kind = Scalar | Array | Sequence | Nullable | Boxed | Hook | Unsupported


@dataclass(frozen=True, slots=True)
class FieldPlan:
    """A tagged dataclass field: attribute name, lookup key, resolved kind."""

    name: str
    key: str
    kind: Kind


_SCALAR_NAMES: dict[type, str] = {
    str: "str",
    bool: "bool",
    int: "int64",
    float: "float64",
}


def resolve(tp: Any) -> Kind:
    """Resolve a type annotation into a ``Kind``."""
    origin = get_origin(tp)

    if origin is Annotated:
        base, *extras = get_args(tp)
        bits = next((e for e in extras if isinstance(e, Bits)), None)
        if bits is None:
            return resolve(base)
        return _sized_scalar(base, bits, tp)

    if origin is Union or origin is types.UnionType:
        args = get_args(tp)
        members = [a for a in args if a is not types.NoneType]
        if len(members) != 1 or len(args) != 2:
            return Unsupported(tp)
        inner = resolve(members[0])
        if isinstance(inner, Boxed):
            return Boxed(inner.inner, True, tp)
        return Nullable(inner, tp)

    if origin is Ref:
        (arg,) = get_args(tp)
        return Boxed(resolve(arg), False, tp)

    if origin is list:
        args = get_args(tp)
        return Sequence(resolve(args[0]), list, tp) if args else Unsupported(tp)

    if origin is tuple:
        args = get_args(tp)
        if len(args) == 2 and args[1] is Ellipsis:
            return Sequence(resolve(args[0]), tuple, tp)
        return Array(tuple(resolve(a) for a in args), tp)

    if origin is not None or not isinstance(tp, type):
        return Unsupported(tp)

    if tp in _SCALAR_NAMES:
        return Scalar(_SCALAR_NAMES[tp], tp)
    if issubclass(tp, TextUnmarshaler):
        return Hook(tp, tp)
    return Unsupported(tp)


def _sized_scalar(base: Any, bits: Bits, source: Any) -> Kind:
    if base is int and bits.bits in (8, 16, 32, 64):
        prefix = "int" if bits.signed else "uint"
        return Scalar(f"{prefix}{bits.bits}", source)
    if base is float and bits.signed and bits.bits in (32, 64):
        return Scalar(f"float{bits.bits}", source)
    return Unsupported(source)


def zero_value(kind: Kind) -> Any:
    """The value a freshly allocated field of *kind* starts from."""
    match kind:
        case Scalar(name=name):
            return ZEROS[name]
        case Array(elements=elements):
            return tuple(zero_value(e) for e in elements)
        case Sequence(factory=factory):
            return factory()
        case Nullable():
            return None
        case Boxed(inner=inner, nullable=nullable):
            return None if nullable else Ref(zero_value(inner))
        case Hook(factory=factory):
            return factory()
        case Unsupported():
            # Never converted into; decoding raises if a value reaches it
            return None


@functools.lru_cache(maxsize=PLAN_CACHE_SIZE)
def plan_for(cls: type, tag: str) -> tuple[FieldPlan, ...]:
    """Resolve the tagged fields of dataclass *cls*, in declaration order.

    Fields whose metadata has no *tag* entry are left out.  Annotation
    errors (e.g. a forward reference that cannot be resolved) propagate.
    """
    hints = get_type_hints(cls, include_extras=True)
    plans: list[FieldPlan] = []
    for f in dataclasses.fields(cls):
        key = lookup_key(f, tag)
        if key is None:
            continue
        plans.append(FieldPlan(f.name, key, resolve(hints[f.name])))
    logger.debug("querybind: resolved %d tagged field(s) on %s", len(plans), cls.__qualname__)
    return tuple(plans)
