"""Configuration store for one application, version and scope."""

import dataclasses
import logging
import shutil
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import TypeAdapter
from pydantic import ValidationError

from .codecs import get_codec
from .exceptions import ConfigFileError
from .exceptions import DeserializationError
from .exceptions import InvalidNameError
from .exceptions import ItemNotFoundError
from .models import Format
from .models import StoreLocation
from .paths import PlatformRootResolver
from .paths import RootResolver
from .paths import resolve_store_dir
from .utils import atomic_write
from .utils import deep_merge
from .utils import validate_name

logger = logging.getLogger(__name__)

_SERIALIZED_EXTENSIONS = {fmt.value for fmt in Format if fmt is not Format.PLAIN}


class ConfigStore:
    """Reads and writes configuration items for one application.

    The store owns a single directory,
    ``<os-config-root>/<app_id>/v<version>[/<scope>]``, resolved and
    created once at construction. Each item is one file in that directory
    named ``<name>.<ext>``; every get/set goes to disk (nothing is cached)
    and every write is atomic.

    Args:
        app_id: Application identifier (e.g. "org.example.Demo")
        version: Configuration version, an integer >= 1
        scope: Optional subdirectory partitioning items
        resolver: Source of the OS configuration root (default: platformdirs)

    Raises:
        InvalidNameError: If app_id, version or scope is not usable
        DirectoryError: If the directory cannot be resolved or created

    Example:
        ```python
        store = ConfigStore("org.example.Demo", 1)
        store.set_json("colors", {"accent": "#7a7af9"})
        store.get_json("colors")  # {"accent": "#7a7af9"}
        ```
    """

    def __init__(
        self,
        app_id: str,
        version: int,
        scope: str | None = None,
        resolver: RootResolver | None = None,
    ):
        self.location = StoreLocation(app_id, version, scope)
        self.resolver = resolver or PlatformRootResolver()
        self._directory = resolve_store_dir(self.location, self.resolver)
        logger.info(f"Opened configuration store at {self._directory}")

    def __repr__(self) -> str:
        return f"ConfigStore({str(self._directory)!r})"

    @property
    def directory(self) -> Path:
        """Absolute path of the store directory."""
        return self._directory

    def path(self, name: str, fmt: Format = Format.JSON) -> Path:
        """Get the file path of an item.

        Does not touch the filesystem.

        Args:
            name: Item name
            fmt: Item format

        Returns:
            Absolute path of the item file

        Raises:
            InvalidNameError: If name is not a safe file name, or a plain
                item name ends in a serialized format extension
        """
        validate_name(name, kind="item name")
        if fmt is Format.PLAIN and Path(name).suffix.lower().lstrip(".") in _SERIALIZED_EXTENSIONS:
            raise InvalidNameError(f"Invalid plain item name {name!r}: would collide with a serialized item")
        return self._directory / fmt.file_name(name)

    # ===== Generic Item Access =====

    def has(self, name: str, fmt: Format = Format.JSON) -> bool:
        """Check whether an item file exists."""
        return self.path(name, fmt).is_file()

    def get(self, name: str, fmt: Format = Format.JSON, type_: Any = None) -> Any:
        """Read an item and decode it.

        Args:
            name: Item name
            fmt: Item format
            type_: Optional type to validate the decoded data into
                (dataclass, pydantic model, TypedDict, builtin ...)

        Returns:
            Decoded value, an instance of type_ when given

        Raises:
            ItemNotFoundError: If the item does not exist
            DeserializationError: If the content does not parse or does not
                match type_
            ConfigFileError: If reading fails
        """
        if fmt is Format.PLAIN:
            return self.get_plain(name)

        codec = get_codec(fmt)
        path = self.path(name, fmt)
        value = codec.decode(self._read(path))
        if type_ is not None:
            try:
                value = TypeAdapter(type_).validate_python(value)
            except ValidationError as e:
                raise DeserializationError(f"Content of {path} does not match {type_!r}: {e}") from e
        logger.debug(f"Retrieved file from {path}")
        return value

    def set(self, name: str, value: Any, fmt: Format = Format.JSON) -> None:
        """Encode a value and write it as an item.

        Pydantic models and dataclass instances are converted to plain data
        first. The file is replaced atomically.

        Args:
            name: Item name
            value: Value to store
            fmt: Item format

        Raises:
            SerializationError: If value cannot be encoded
            ConfigFileError: If writing fails
        """
        if fmt is Format.PLAIN:
            self.set_plain(name, value)
            return

        codec = get_codec(fmt)
        path = self.path(name, fmt)
        atomic_write(path, codec.encode(_to_plain(value)))
        logger.info(f"File written to {path}")

    def update(self, name: str, updates: dict[str, Any], fmt: Format = Format.JSON) -> dict[str, Any]:
        """Deep merge updates into a mapping item.

        A missing item starts out empty. Not safe against concurrent
        writers; callers that need that must lock externally.

        Args:
            name: Item name
            updates: Updates to merge into the stored mapping
            fmt: Item format

        Returns:
            The merged mapping as written

        Raises:
            DeserializationError: If the stored item is not a mapping
        """
        try:
            existing = self.get(name, fmt)
        except ItemNotFoundError:
            existing = {}
        if existing is None:
            existing = {}
        if not isinstance(existing, dict):
            raise DeserializationError(f"Item '{name}' is not a mapping, cannot merge updates")
        merged = deep_merge(existing, _to_plain(updates))
        self.set(name, merged, fmt)
        return merged

    def remove(self, name: str, fmt: Format = Format.JSON) -> bool:
        """Delete an item.

        Returns:
            True if removed, False if not found

        Raises:
            ConfigFileError: If deletion fails
        """
        path = self.path(name, fmt)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise ConfigFileError(f"Failed to remove configuration {path}: {e}") from e
        logger.info(f"Removed {path}")
        return True

    def clean(self) -> None:
        """Delete every item and subdirectory in the store directory.

        The directory itself is kept. For an unscoped store this includes
        the directories of all its scopes.

        Raises:
            ConfigFileError: If something cannot be deleted
        """
        try:
            for entry in self._directory.iterdir():
                if entry.is_dir() and not entry.is_symlink():
                    shutil.rmtree(entry)
                else:
                    entry.unlink()
        except OSError as e:
            raise ConfigFileError(f"Failed to clean configuration directory {self._directory}: {e}") from e
        logger.info(f"Cleaned configuration directory {self._directory}")

    # ===== Plain Text =====

    def has_plain(self, name: str) -> bool:
        return self.has(name, Format.PLAIN)

    def get_plain(self, name: str) -> str:
        """Read a plain text item stored under its bare name.

        Raises:
            ItemNotFoundError: If the item does not exist
            DeserializationError: If the file is not UTF-8 text
        """
        path = self.path(name, Format.PLAIN)
        try:
            return self._read(path).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DeserializationError(f"{path} is not UTF-8 text: {e}") from e

    def set_plain(self, name: str, value: Any) -> None:
        """Write str(value) as a plain text item.

        Plain items share the directory with scope subdirectories, so a
        plain item named like a scope keeps that scope from being created.
        """
        path = self.path(name, Format.PLAIN)
        atomic_write(path, str(value).encode("utf-8"))
        logger.info(f"File written to {path}")

    # ===== Per-Format Shortcuts =====

    def has_json(self, name: str) -> bool:
        return self.has(name, Format.JSON)

    def get_json(self, name: str, type_: Any = None) -> Any:
        return self.get(name, Format.JSON, type_)

    def set_json(self, name: str, value: Any) -> None:
        self.set(name, value, Format.JSON)

    def has_toml(self, name: str) -> bool:
        return self.has(name, Format.TOML)

    def get_toml(self, name: str, type_: Any = None) -> Any:
        return self.get(name, Format.TOML, type_)

    def set_toml(self, name: str, value: Any) -> None:
        self.set(name, value, Format.TOML)

    def has_ron(self, name: str) -> bool:
        return self.has(name, Format.RON)

    def get_ron(self, name: str, type_: Any = None) -> Any:
        return self.get(name, Format.RON, type_)

    def set_ron(self, name: str, value: Any) -> None:
        self.set(name, value, Format.RON)

    def has_yaml(self, name: str) -> bool:
        return self.has(name, Format.YAML)

    def get_yaml(self, name: str, type_: Any = None) -> Any:
        return self.get(name, Format.YAML, type_)

    def set_yaml(self, name: str, value: Any) -> None:
        self.set(name, value, Format.YAML)

    # ===== Private Helpers =====

    def _read(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise ItemNotFoundError(f"Configuration item {path.name} not found in {self._directory}") from e
        except OSError as e:
            raise ConfigFileError(f"Failed to read configuration from {path}: {e}") from e


def create_store(
    app_id: str,
    version: int,
    scope: str | None = None,
    resolver: RootResolver | None = None,
) -> ConfigStore:
    """Create a ConfigStore, resolving and creating its directory.

    Equivalent to calling ConfigStore directly.
    """
    return ConfigStore(app_id, version, scope, resolver=resolver)


def _to_plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return TypeAdapter(type(value)).dump_python(value, mode="json")
    return value
