"""Decoder: bind a URL query string onto a dataclass instance.

A ``Decoder`` owns a raw query string and writes matching values into
the tagged fields of a target dataclass::

    @dataclass
    class Options:
        foo: int = param("foo", default=0)
        bar: str = param("bar", default="")

    opts = Options()
    Decoder("foo=2&bar=baz").decode(opts)
    opts.foo  # 2
    opts.bar  # "baz"

Decoding is fail-fast and not transactional: the first error stops the
walk over the fields, and fields written before it keep their new values.
Fields whose key is absent from the query are left exactly as the caller
set them.
"""

import dataclasses
import logging
from typing import Any, assert_never

from querybind._internal.multimap import MultiValueMapping
from querybind.config import DEFAULT_CONFIG, DecoderConfig
from querybind.convert import convert_scalar
from querybind.errors import InvalidTargetError, UnsupportedTypeError
from querybind.kinds import (
    Array,
    Boxed,
    FieldPlan,
    Hook,
    Kind,
    Nullable,
    Scalar,
    Sequence,
    Unsupported,
    plan_for,
    zero_value,
)
from querybind.query import parse_query
from querybind.types import Ref, TextUnmarshaler

logger = logging.getLogger("querybind")


class Decoder:
    """Reads a URL query string and decodes it into dataclass instances.

    The decoder keeps no state between calls; one instance can decode
    into any number of targets.
    """

    __slots__ = ("_config", "_query")

    def __init__(self, query: str | bytes = "", config: DecoderConfig | None = None) -> None:
        self._query = query
        self._config = config or DEFAULT_CONFIG

    @property
    def query(self) -> str | bytes:
        """The raw query string, as given."""
        return self._query

    @property
    def config(self) -> DecoderConfig:
        return self._config

    def __repr__(self) -> str:
        return f"Decoder({self._query!r})"

    def decode(self, target: object) -> None:
        """Decode the query into the tagged fields of *target*.

        Args:
            target: A mutable dataclass instance.

        Raises:
            InvalidTargetError: *target* is ``None``, not a dataclass
                instance, or a frozen dataclass. Checked before parsing.
            QueryParseError: The query string is malformed.
            UnsupportedTypeError: A present key maps to a field of a
                nested dataclass, mapping, or other unsupported type.
            ConversionError: A value is not a valid literal for its field.
        """
        cls = _check_target(target)
        values = parse_query(self._query, self._config)
        if not values:
            return
        populate(target, plan_for(cls, self._config.tag), values)


def decode(query: str | bytes, target: object, config: DecoderConfig | None = None) -> None:
    """Shorthand for ``Decoder(query, config).decode(target)``."""
    Decoder(query, config).decode(target)


def _check_target(target: object) -> type:
    if target is None:
        raise InvalidTargetError(None)
    if isinstance(target, type):
        reason = "dataclass type" if dataclasses.is_dataclass(target) else "non-dataclass"
        raise InvalidTargetError(target, reason)
    cls = type(target)
    if not dataclasses.is_dataclass(cls):
        raise InvalidTargetError(cls)
    if cls.__dataclass_params__.frozen:  # type: ignore[attr-defined]
        raise InvalidTargetError(cls, "frozen")
    return cls


def populate(target: object, plans: tuple[FieldPlan, ...], values: MultiValueMapping) -> None:
    """Write *values* into the fields of *target* described by *plans*."""
    for plan in plans:
        if plan.key not in values:
            continue
        current = getattr(target, plan.name, None)
        try:
            updated = _decode_field(plan.kind, current, values.get_list(plan.key), plan.name)
        except Exception:
            logger.debug("querybind: decode stopped at field %r", plan.name)
            raise
        setattr(target, plan.name, updated)


def _decode_field(
    kind: Kind, current: Any, texts: list[str], field: str, *, reuse: bool = False
) -> Any:
    """Return the new value of a field of *kind* given its *current* value.

    *texts* is never empty.  With *reuse*, an existing list is updated
    in place instead of replaced.
    """
    match kind:
        case Nullable(inner=inner):
            if isinstance(inner, Unsupported):
                raise UnsupportedTypeError(inner.source, field)
            if current is None:
                current = zero_value(inner)
            return _decode_field(inner, current, texts, field, reuse=True)
        case Boxed(inner=inner):
            if isinstance(inner, Unsupported):
                raise UnsupportedTypeError(inner.source, field)
            box = current if isinstance(current, Ref) else Ref(zero_value(inner))
            box.value = _decode_field(inner, box.value, texts, field)
            return box
        case Hook(factory=factory) if not isinstance(current, TextUnmarshaler):
            if texts[0] == "":
                return current
            current = factory()

    if isinstance(current, TextUnmarshaler):
        return _unmarshal(current, texts[0], field)

    match kind:
        case Scalar(name=name):
            return convert_scalar(name, texts[0], field)
        case Array(elements=elements):
            items = list(current) if current is not None else []
            del items[len(elements) :]
            items.extend(zero_value(e) for e in elements[len(items) :])
            # Positions past the supplied values keep their prior contents
            for j, (element, text) in enumerate(zip(elements, texts)):
                items[j] = _decode_element(element, text, field)
            return tuple(items)
        case Sequence(element=element, factory=factory):
            decoded = [_decode_element(element, text, field) for text in texts]
            if reuse and factory is list and isinstance(current, list):
                current[:] = decoded
                return current
            return factory(decoded)
        case Unsupported(source=source):
            raise UnsupportedTypeError(source, field)
        case Nullable() | Boxed() | Hook():
            raise AssertionError(f"querybind: {kind!r} reached scalar dispatch")
        case _:
            assert_never(kind)


def _decode_element(kind: Kind, text: str, field: str) -> Any:
    match kind:
        case Scalar(name=name):
            return convert_scalar(name, text, field)
        case Hook(factory=factory):
            return _unmarshal(factory(), text, field)
        case _:
            raise UnsupportedTypeError(kind.source, field)


def _unmarshal(value: TextUnmarshaler, text: str, field: str) -> TextUnmarshaler:
    if text == "":
        logger.debug("querybind: empty value for field %r, unmarshal_text skipped", field)
        return value
    value.unmarshal_text(text)
    return value
