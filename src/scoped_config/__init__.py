"""scoped-config: Versioned per-application configuration storage.

This library stores configuration items for an application in the
platform's configuration directory:

    <os-config-root>/<app_id>/v<version>[/<scope>]/<name>.<ext>

The OS root follows the host convention ($XDG_CONFIG_HOME or ~/.config on
Linux, ~/Library/Application Support on macOS, roaming AppData on Windows)
and can be replaced by injecting a resolver. Items are JSON, TOML, RON,
YAML or plain text files, and every write is atomic.

Public API:
    ConfigStore: Main class for reading and writing items
    create_store: Build a ConfigStore (same as calling the class)
    StoreLocation: Dataclass identifying a store (app id, version, scope)
    Format: Enum of item formats
    PlatformRootResolver, FixedRootResolver: OS configuration root sources
    get_codec, available_formats: Codec lookup
    atomic_write: Write-to-temp-then-rename helper
    ConfigError and subclasses: Exception types

Example:
    ```python
    from scoped_config import ConfigStore

    store = ConfigStore("org.example.Demo", 1, scope="appearance")
    store.set_json("colors", {"accent": "#7a7af9"})

    colors = store.get_json("colors")
    ```
"""

from .codecs import Codec
from .codecs import available_formats
from .codecs import get_codec
from .exceptions import ConfigError
from .exceptions import ConfigFileError
from .exceptions import DeserializationError
from .exceptions import DirectoryError
from .exceptions import InvalidNameError
from .exceptions import ItemNotFoundError
from .exceptions import SerializationError
from .exceptions import UnsupportedFormatError
from .models import Format
from .models import StoreLocation
from .paths import FixedRootResolver
from .paths import PlatformRootResolver
from .paths import RootResolver
from .store import ConfigStore
from .store import create_store
from .utils import atomic_write

__version__ = "0.1.0"

__all__ = [
    "ConfigStore",
    "create_store",
    "StoreLocation",
    "Format",
    "RootResolver",
    "PlatformRootResolver",
    "FixedRootResolver",
    "Codec",
    "get_codec",
    "available_formats",
    "atomic_write",
    "ConfigError",
    "ConfigFileError",
    "DeserializationError",
    "DirectoryError",
    "InvalidNameError",
    "ItemNotFoundError",
    "SerializationError",
    "UnsupportedFormatError",
]
