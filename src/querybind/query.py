"""Immutable parsed query values.

Implements ``Mapping[str, str]`` and the ``MultiValueMapping`` protocol.
Parsing is stdlib ``urllib.parse.parse_qs`` with blank values kept, plus
the strictness ``parse_qs`` lacks: malformed percent escapes, bytes that
are invalid in the configured encoding, stray ``;`` separators and
oversized queries are rejected with ``QueryParseError``.
"""

import re
from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs

from querybind.config import DEFAULT_CONFIG, DecoderConfig
from querybind.errors import QueryParseError

# "%" not followed by two hex digits
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class QueryValues(Mapping[str, str]):
    """Parsed query: each key with every value it was given.

    Reading a key as a mapping gives its first value; ``get_list`` gives
    all of them.  Instances never change after parsing.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[str, list[str]] | None = None) -> None:
        self._values: dict[str, tuple[str, ...]] = {
            key: tuple(items) for key, items in (values or {}).items()
        }

    def __getitem__(self, key: str) -> str:
        return self._values[key][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        listed = {key: list(items) for key, items in self._values.items()}
        return f"QueryValues({listed!r})"

    def get_list(self, key: str) -> list[str]:
        """Every value given for *key*, or an empty list."""
        return list(self._values.get(key, ()))


def parse_query(query: str | bytes, config: DecoderConfig | None = None) -> QueryValues:
    """Parse a raw query string (no leading ``?``) into ``QueryValues``.

    Keys and values are percent-decoded with ``+`` read as a space.  A
    pair without ``=`` is a present key with an empty value.  Repeated
    keys accumulate in encounter order.

    Raises:
        QueryParseError: If the query is malformed.
    """
    config = config or DEFAULT_CONFIG

    if isinstance(query, bytes):
        try:
            text = query.decode(config.encoding)
        except UnicodeDecodeError as e:
            raise QueryParseError(repr(query), f"not valid {config.encoding}") from e
    else:
        text = query

    pairs = [pair for pair in text.split("&") if pair]
    if config.max_num_fields is not None and len(pairs) > config.max_num_fields:
        msg = f"more than {config.max_num_fields} fields"
        raise QueryParseError(text, msg)

    for pair in pairs:
        if ";" in pair and not config.allow_semicolons:
            raise QueryParseError(pair, "invalid semicolon separator")
        bad = _BAD_ESCAPE_RE.search(pair)
        if bad is not None:
            escape = pair[bad.start() : bad.start() + 3]
            raise QueryParseError(pair, f"invalid URL escape {escape!r}")

    try:
        data = parse_qs(
            text,
            keep_blank_values=True,
            encoding=config.encoding,
            errors="strict",
            separator="&",
        )
    except ValueError as e:
        # UnicodeDecodeError included: percent-decoded bytes not valid in the encoding
        raise QueryParseError(text, str(e)) from e

    return QueryValues(data)
