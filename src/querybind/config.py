"""Decoder configuration.

DecoderConfig is a frozen dataclass, immutable after creation and
passed explicitly to ``Decoder``.
"""

from dataclasses import dataclass

from querybind.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class DecoderConfig:
    """Decoder configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = DecoderConfig(tag="query", max_num_fields=100)
    """

    # Field metadata key that carries the lookup key
    tag: str = "q"

    # Text encoding of percent-decoded bytes and of bytes input
    encoding: str = "utf-8"

    # Limits
    max_num_fields: int | None = None  # None = unbounded

    # A pair containing ";" is rejected unless this is set
    allow_semicolons: bool = False

    def __post_init__(self) -> None:
        if not self.tag:
            raise ConfigurationError("DecoderConfig.tag must be a non-empty string")
        if self.max_num_fields is not None and self.max_num_fields < 1:
            msg = f"DecoderConfig.max_num_fields must be positive, got {self.max_num_fields}"
            raise ConfigurationError(msg)


DEFAULT_CONFIG = DecoderConfig()
