"""The read side of parsed query values, as the field populator sees it.

``populate()`` only asks two things of its input: is a key present, and
what are all of its values.  Any object answering those works, so a
caller holding values from elsewhere (an ASGI scope, a form body) can
feed them to the populator without building a ``QueryValues``.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class MultiValueMapping(Protocol):
    """Keys that may repeat, each with its values in encounter order."""

    def __contains__(self, key: object) -> bool: ...
    def get_list(self, key: str) -> list[str]: ...
