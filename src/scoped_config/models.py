"""Data models for scoped-config."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .utils import validate_name
from .utils import validate_version


class Format(Enum):
    """Serialization format of a configuration item.

    The value is the file extension used on disk. PLAIN items have no
    extension: the item name is the file name.
    """

    JSON = "json"
    TOML = "toml"
    RON = "ron"
    YAML = "yaml"
    PLAIN = ""

    def file_name(self, name: str) -> str:
        """Return the on-disk file name for an item of this format."""
        if self is Format.PLAIN:
            return name
        return f"{name}.{self.value}"


@dataclass(frozen=True)
class StoreLocation:
    """Identity of a configuration store.

    Immutable description of where an application keeps its settings,
    relative to the OS configuration root.

    Attributes:
        app_id: Application identifier (e.g. "org.example.Demo")
        version: Configuration version, a positive integer
        scope: Optional subdirectory partitioning items within the version

    Raises:
        InvalidNameError: If any field is not filesystem-safe
    """

    app_id: str
    version: int
    scope: str | None = None

    def __post_init__(self):
        validate_name(self.app_id, kind="application id")
        validate_version(self.version)
        if self.scope is not None:
            validate_name(self.scope, kind="scope")

    @property
    def relative_path(self) -> Path:
        """Path of the store below the OS configuration root.

        Examples:
            >>> StoreLocation("org.example.Demo", 1).relative_path.as_posix()
            'org.example.Demo/v1'

            >>> StoreLocation("org.example.Demo", 2, "appearance").relative_path.as_posix()
            'org.example.Demo/v2/appearance'
        """
        path = Path(self.app_id) / f"v{self.version}"
        if self.scope is not None:
            path = path / self.scope
        return path
