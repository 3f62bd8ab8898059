"""querybind: decode URL query strings into dataclasses.

Fields opt in by declaring a lookup key; values are converted according
to the field's annotation (``str``, ``bool``, sized integers and floats,
fixed-length tuples, lists, ``T | None`` and ``Ref[T]``).

Basic usage::

    from dataclasses import dataclass
    from querybind import Decoder, Int32, param

    @dataclass
    class Options:
        foo: Int32 = param("foo", default=0)
        bar: str = param("bar", default="")
        verbose: bool = param("v", default=False)

    opts = Options()
    Decoder("foo=2&bar=baz&v").decode(opts)
    # Options(foo=2, bar='baz', verbose=True)
"""

__version__ = "0.1.0"
__all__ = [
    "Bits",
    "ConfigurationError",
    "ConversionError",
    "Decoder",
    "DecoderConfig",
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "InvalidTargetError",
    "QueryBindError",
    "QueryParseError",
    "QueryValues",
    "Ref",
    "TextUnmarshaler",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "UnsupportedTypeError",
    "decode",
    "param",
    "parse_query",
]

# Public name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "Decoder": "querybind.decoder",
    "decode": "querybind.decoder",
    "DecoderConfig": "querybind.config",
    "param": "querybind.fields",
    "QueryValues": "querybind.query",
    "parse_query": "querybind.query",
    **dict.fromkeys(
        (
            "ConfigurationError",
            "ConversionError",
            "InvalidTargetError",
            "QueryBindError",
            "QueryParseError",
            "UnsupportedTypeError",
        ),
        "querybind.errors",
    ),
    **dict.fromkeys(
        (
            "Bits",
            "Float32",
            "Float64",
            "Int8",
            "Int16",
            "Int32",
            "Int64",
            "Ref",
            "TextUnmarshaler",
            "Uint",
            "Uint8",
            "Uint16",
            "Uint32",
            "Uint64",
        ),
        "querybind.types",
    ),
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import querybind`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
