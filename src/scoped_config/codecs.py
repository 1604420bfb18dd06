"""Serialization codecs, one per supported file format.

JSON and RON are always available. TOML writing needs ``tomli-w`` (the
``toml`` extra) and YAML needs PyYAML (the ``yaml`` extra); when the
library is missing the codec reports itself unavailable and refuses to run.
"""

import json
import logging
import tomllib
from typing import Any

try:
    import tomli_w
except ImportError:
    tomli_w = None  # type: ignore

try:
    import yaml
except ImportError:
    yaml = None  # type: ignore

from . import ron
from .exceptions import DeserializationError
from .exceptions import SerializationError
from .exceptions import UnsupportedFormatError
from .models import Format

logger = logging.getLogger(__name__)


class Codec:
    """Converts between Python values and the bytes of one file format.

    Subclasses set ``format`` and implement ``_encode``/``_decode``; the
    public ``encode``/``decode`` wrap library errors in
    SerializationError/DeserializationError.
    """

    format: Format
    requires: str | None = None

    @property
    def extension(self) -> str:
        return self.format.value

    @property
    def available(self) -> bool:
        return True

    def encode(self, value: Any) -> bytes:
        """Serialize value to bytes.

        Raises:
            SerializationError: If value cannot be represented in this format
            UnsupportedFormatError: If the format library is not installed
        """
        self._check_available()
        try:
            return self._encode(value).encode("utf-8")
        except SerializationError:
            raise
        except (TypeError, ValueError, OverflowError, RecursionError) as e:
            raise SerializationError(f"Cannot encode value as {self.format.name}: {e}") from e

    def decode(self, data: bytes) -> Any:
        """Deserialize bytes to Python values.

        Raises:
            DeserializationError: If data is not valid for this format
            UnsupportedFormatError: If the format library is not installed
        """
        self._check_available()
        try:
            return self._decode(data.decode("utf-8"))
        except (ValueError, RecursionError) as e:
            raise DeserializationError(f"Invalid {self.format.name} content: {e}") from e

    def _check_available(self) -> None:
        if not self.available:
            raise UnsupportedFormatError(
                f"{self.requires} not available - cannot use {self.format.name} configuration files"
            )

    def _encode(self, value: Any) -> str:
        raise NotImplementedError

    def _decode(self, text: str) -> Any:
        raise NotImplementedError


class JsonCodec(Codec):
    format = Format.JSON

    def _encode(self, value: Any) -> str:
        return json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False) + "\n"

    def _decode(self, text: str) -> Any:
        return json.loads(text)


class TomlCodec(Codec):
    """TOML codec: stdlib tomllib reads, tomli-w writes.

    A TOML document is always a table, so only mappings can be stored.
    """

    format = Format.TOML
    requires = "tomli-w"

    @property
    def available(self) -> bool:
        return tomli_w is not None

    def _encode(self, value: Any) -> str:
        if not isinstance(value, dict):
            raise SerializationError(f"TOML documents must be tables, got {type(value).__name__}")
        return tomli_w.dumps(value)

    def _decode(self, text: str) -> Any:
        return tomllib.loads(text)


class RonCodec(Codec):
    format = Format.RON

    def _encode(self, value: Any) -> str:
        return ron.dumps(value)

    def _decode(self, text: str) -> Any:
        return ron.loads(text)


class YamlCodec(Codec):
    format = Format.YAML
    requires = "PyYAML"

    @property
    def available(self) -> bool:
        return yaml is not None

    def _encode(self, value: Any) -> str:
        try:
            return yaml.safe_dump(value, default_flow_style=False, sort_keys=False, allow_unicode=True)
        except yaml.YAMLError as e:
            raise SerializationError(f"Cannot encode value as YAML: {e}") from e

    def _decode(self, text: str) -> Any:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DeserializationError(f"Invalid YAML content: {e}") from e


_CODECS: dict[Format, Codec] = {
    Format.JSON: JsonCodec(),
    Format.TOML: TomlCodec(),
    Format.RON: RonCodec(),
    Format.YAML: YamlCodec(),
}


def get_codec(fmt: Format) -> Codec:
    """Look up the codec for a format.

    Args:
        fmt: Serialized format (PLAIN has no codec)

    Returns:
        Codec instance for the format

    Raises:
        UnsupportedFormatError: If the format has no codec or its library is missing
    """
    codec = _CODECS.get(fmt)
    if codec is None:
        raise UnsupportedFormatError(f"No codec for {fmt.name} items")
    if not codec.available:
        logger.warning(f"{codec.requires} not available - {fmt.name} configuration files are disabled")
        codec._check_available()
    return codec


def available_formats() -> list[Format]:
    """List the formats whose codecs can run in this environment."""
    return [fmt for fmt, codec in _CODECS.items() if codec.available]
