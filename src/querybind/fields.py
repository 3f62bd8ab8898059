"""Field declarations: attach a query lookup key to a dataclass field.

Usage::

    @dataclass
    class Search:
        text: str = param("q", default="")
        page: Uint16 = param("page", default=1)
        tags: list[str] = param("tag", default_factory=list)
        internal: int = 0  # no key, never decoded

``param()`` is a thin wrapper around ``dataclasses.field``; declaring
``field(metadata={"q": "page"})`` by hand is equivalent.
"""

import dataclasses
from typing import Any

from querybind.config import DEFAULT_CONFIG


def param(key: str, *, tag: str = DEFAULT_CONFIG.tag, **kwargs: Any) -> Any:
    """Declare a dataclass field decoded from query key *key*.

    Args:
        key: The query parameter name matched against this field.
        tag: Metadata entry the key is stored under. Must match the
            decoder's ``DecoderConfig.tag``.
        **kwargs: Passed to ``dataclasses.field`` (``default``,
            ``default_factory``, ``repr``, ``metadata``, ...).
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[tag] = key
    return dataclasses.field(metadata=metadata, **kwargs)


def lookup_key(field: dataclasses.Field[Any], tag: str = DEFAULT_CONFIG.tag) -> str | None:
    """Return the lookup key *field* declares under *tag*, if any."""
    return field.metadata.get(tag)
